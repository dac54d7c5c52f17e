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
"""Guards for chains that were shut down."""
from functools import wraps


class NotRunning(Exception):
    """The chain was shut down"""
    pass


def ensureChainRunning(method):
    @wraps(method)
    def wrapper(self, *args, **kwargs):
        if not self.isRunning:
            raise NotRunning("This chain of {0} worker task(s) was shut "
                             "down.\nBuild a new ChannelArray to compute "
                             "again.".format(self.depth))
        return method(self, *args, **kwargs)
    return wrapper
