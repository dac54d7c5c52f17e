#
#    This file is part of ITERARRAY, iterative arrays of communicating
#    processes in Python.
#
#    ITERARRAY is free software: you can redistribute it and/or modify
#    it under the terms of the GNU Lesser General Public License as
#    published by the Free Software Foundation, either version 3 of
#    the License, or (at your option) any later version.
#
#    ITERARRAY is distributed in the hope that it will be useful,
#    but WITHOUT ANY WARRANTY; without even the implied warranty of
#    MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
#    GNU Lesser General Public License for more details.
#
#    You should have received a copy of the GNU Lesser General Public
#    License along with ITERARRAY. If not, see <http://www.gnu.org/licenses/>.
#
"""
Reuses a single chain for every factorial up to its depth, then shows how
a request beyond the depth is reported.
"""
from iterarray import chain
from iterarray._types import DeadlockError

DEPTH = 15

if __name__ == "__main__":
    with chain.ChannelArray(DEPTH) as array:
        for n in range(DEPTH + 1):
            print("{n}! = {result}".format(n=n, result=array.compute(n)))
        try:
            array.compute(DEPTH + 1)
        except DeadlockError as err:
            print("{0}! needs a deeper chain: {1}".format(DEPTH + 1, err))
