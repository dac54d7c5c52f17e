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
"""Factorial through an iterative array of greenlets talking over
rendezvous channels, after Hoare's "Communicating Sequential Processes"."""
__author__ = ("ITERARRAY Development Team",)
__version__ = "0.1"
__revision__ = "0"

import logging


# Filled by the command line, see iterarray.__main__
CONFIGURATION = {}
DEBUG = False
logger = logging.getLogger("ITERARRAYLogger")

# Default number of worker tasks (and largest accepted request) of a chain
MAX_DEPTH = 49
