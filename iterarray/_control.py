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
from collections import deque, defaultdict
from functools import partial
import threading
import time
import traceback

import greenlet

from ._types import DeadlockError, TaskState
from . import utils
import iterarray

# Greenlets cannot switch across threads: every thread gets its own hub,
# queue of runnable greenlets and origin.
_local = threading.local()


def getReadyQueue():
    """Return the greenlets of this thread ready to be resumed, with the
    arguments to switch in."""
    try:
        return _local.readyQueue
    except AttributeError:
        _local.readyQueue = deque()
        return _local.readyQueue


def getHub():
    """Return the hub greenlet of this thread, creating it on first use."""
    hub = getattr(_local, "hub", None)
    if hub is None or hub.dead:
        hub = _local.hub = greenlet.greenlet(runHub)
    return hub


def getOrigin():
    """Last greenlet from outside the hub that blocked in this thread; it is
    told about deadlocks."""
    return getattr(_local, "origin", None)


def init_debug():
    """Initialise debug_stats and traceLog (this is not a reset)"""
    global debug_stats
    global traceLog
    if debug_stats is None:
        list_defaultdict = partial(defaultdict, list)
        debug_stats = defaultdict(list_defaultdict)
        traceLog = []


def recordTrace(task, kind, value):
    """Keep (task index, kind, value) in the debug trace."""
    init_debug()  # in case _control is imported before iterarray.DEBUG was set
    debug_stats[task.index][kind].append((time.time(), value))
    traceLog.append((task.index, kind, value))


def spawn(callable_, *args):
    """Schedule ``callable_(*args)`` in a new greenlet owned by the hub."""
    child = greenlet.greenlet(partial(callable_, *args), parent=getHub())
    getReadyQueue().append((child, ()))
    return child


def wake(target, value=None):
    """Make a blocked greenlet runnable; its pending block() returns value."""
    getReadyQueue().append((target, (value,)))


def discard(target):
    """Forget every pending wake-up of target."""
    readyQueue = getReadyQueue()
    stale = [entry for entry in readyQueue if entry[0] is target]
    for entry in stale:
        readyQueue.remove(entry)


def block():
    """Suspend the current greenlet until it is woken up.

    :returns: The value given to :func:`wake`."""
    current = greenlet.getcurrent()
    hub_ = getHub()
    assert current is not hub_, "The hub cannot block"
    if current.parent is not hub_:
        _local.origin = current
    return hub_.switch()


def settle():
    """Run every runnable greenlet until all of them are blocked again."""
    wake(greenlet.getcurrent())
    block()


def kill(task):
    """End the service loop of a task at its suspension point."""
    child = task.greenlet
    if child is None or child.dead:
        return
    discard(child)
    child.parent = greenlet.getcurrent()
    child.throw()


def _raiseInOrigin(err):
    target, _local.origin = getOrigin(), None
    if target is None or target.dead:
        raise err
    discard(target)
    target.throw(err)


def runHub():
    """Callable greenlet in charge of switching between greenlets."""
    readyQueue = getReadyQueue()
    while True:
        if not readyQueue:
            iterarray.logger.warning("Deadlock: every greenlet is blocked "
                                     "on a channel.")
            _raiseInOrigin(DeadlockError(
                "No greenlet can make progress: every one of them is "
                "blocked on a channel."))
            continue
        target, args = readyQueue.popleft()
        if target.dead:
            continue
        try:
            target.switch(*args)
        except Exception as err:
            iterarray.logger.debug(
                "The following error occured in a greenlet:\n%r\n%s",
                err,
                traceback.format_exc(),
            )
            _raiseInOrigin(err)


def runWorker(task):
    """Callable greenlet running the service loop of a worker task."""
    try:
        while True:
            task.state = TaskState.awaitRequest
            n = task.upstream.receive()
            iterarray.logger.debug("Task %d received %d", task.index, n)
            if iterarray.DEBUG:
                recordTrace(task, "request", n)

            if n == 0 or n == 1:
                task.state = TaskState.resolved
                task.upstream.send(1)
            else:
                # Negative requests never reach the base case and run
                # past the end of the chain.
                task.state = TaskState.descend
                task.downstream.send(n - 1)
                r = task.downstream.receive()
                if iterarray.DEBUG:
                    recordTrace(task, "result", r)
                task.upstream.send(utils.wrapInteger(r * n, task.width))
    finally:
        task.state = TaskState.stopped
        iterarray.logger.debug("Task %d stopped", task.index)


debug_stats = None
traceLog = None
if iterarray.DEBUG:
    init_debug()
