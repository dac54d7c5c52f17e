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
import os
import pickle


def getDebugIdentifier():
    """Returns the identifier of the current process."""
    return "chain-{0}".format(os.getpid())


def getDebugDirectory():
    """Returns the debug directory."""
    return os.path.join(os.getcwd(), "debug")


def writeChainDebug(debugStats, traceLog, directory=None):
    """Serialize the per-task statistics and the request trace using pickle
    into the debug directory.

    :returns: The paths of the two files written."""
    if directory is None:
        directory = getDebugDirectory()
    os.makedirs(directory, exist_ok=True)
    statsFilename = os.path.join(
        directory,
        "{0}-STATS".format(getDebugIdentifier()),
    )
    traceFilename = os.path.join(
        directory,
        "{0}-TRACE".format(getDebugIdentifier()),
    )
    with open(statsFilename, 'wb') as f:
        pickle.dump(debugStats, f)
    with open(traceFilename, 'wb') as f:
        pickle.dump(traceLog, f)
    return statsFilename, traceFilename
