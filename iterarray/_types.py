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
import time


class TaskState:
    """Protocol states of a worker task."""
    created = "Created"
    awaitRequest = "AwaitRequest"
    resolved = "Resolved"
    descend = "Descend"
    stopped = "Stopped"


class StopWatch(object):
    """Seconds elapsed since creation, used to time top-level calls in debug
    mode."""
    def __init__(self):
        self.startTime = time.time()

    def get(self):
        return time.time() - self.startTime


class ChannelError(Exception):
    """Base class of the errors raised by channels and chains."""
    pass


class DeadlockError(ChannelError):
    """Every greenlet is blocked on a channel and none can make progress."""
    pass


class ProtocolViolation(ChannelError):
    """A channel was used out of its alternating send/receive order."""
    pass


class ChainBroken(ChannelError):
    """The chain failed earlier and its tasks are stuck mid-call."""
    pass


class WorkerTask(object):
    """One process of the iterative array.

    Task *i* only knows two channels: ``upstream`` (slot i-1), where requests
    come in and results go out, and ``downstream`` (slot i), where it hands
    the reduced request to task i+1 and gets its result back. The service
    loop itself is :func:`iterarray._control.runWorker`."""
    def __init__(self, index, upstream, downstream, width=None):
        self.index = index
        self.upstream = upstream
        self.downstream = downstream
        self.width = width  # payload width in bits, None for exact ints
        self.state = TaskState.created
        self.greenlet = None  # cooperative thread running the service loop

    def __repr__(self):
        return "<WorkerTask {0} {1}>".format(self.index, self.state)

    def isReady(self):
        """True once the task blocks on a receive from its upstream slot."""
        return (self.state == TaskState.awaitRequest
                and self.greenlet is not None
                and self.greenlet in self.upstream.receivers)

    def alive(self):
        return self.greenlet is not None and not self.greenlet.dead
