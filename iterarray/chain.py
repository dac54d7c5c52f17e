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
"""Iterative array computing factorials.

A chain of depth N holds N+1 channels and N worker tasks; task *i* reads
requests from channel i-1 and relays reduced requests on channel i. Only
channel 0, the entry, is meant to be used from the outside::

    with ChannelArray(10) as chain:
        chain.compute(5)  # 120

Calls on the entry must be serialised: a second caller writing to it
before the first got its result races for task 1."""
import iterarray
from ._types import WorkerTask, StopWatch, DeadlockError, ChainBroken
from .channel import Channel
from .fallbacks import ensureChainRunning
from . import _control as control


def compute(entry, n):
    """Send n on the entry channel, then wait for the result on it.

    :param entry: Channel 0 of a chain.
    :param n: Integer between 0 and the depth of the chain. It is not
        checked here; see :func:`iterarray.utils.checkRequest`.

    :returns: n!, wrapped to the payload width of the chain if it has one."""
    entry.send(n)
    return entry.receive()


class ChannelArray(object):
    """N+1 channels and the N worker tasks wired between them."""
    def __init__(self, depth=None, width=None):
        if depth is None:
            depth = iterarray.CONFIGURATION.get("depth", iterarray.MAX_DEPTH)
        if width is None:
            width = iterarray.CONFIGURATION.get("width")
        if not isinstance(depth, int) or isinstance(depth, bool) or depth < 1:
            raise ValueError("The depth of a chain must be a positive "
                             "integer, got {0!r}".format(depth))
        if width is not None and width < 2:
            raise ValueError("The payload width must be at least 2 bits, "
                             "got {0!r}".format(width))
        self.depth = depth
        self.width = width
        self.broken = False
        self.isRunning = False

        self._slots = [Channel(index) for index in range(depth + 1)]
        self.tasks = [
            WorkerTask(index, self._slots[index - 1], self._slots[index], width)
            for index in range(1, depth + 1)
        ]
        for task in self.tasks:
            task.greenlet = control.spawn(control.runWorker, task)

        # Every task must block on its upstream slot before the entry is
        # handed out.
        control.settle()
        assert all(task.isReady() for task in self.tasks), (
            "Worker tasks not listening: {0}".format(
                [t for t in self.tasks if not t.isReady()]))
        self.isRunning = True
        iterarray.logger.info("Chain of {0} worker task(s) ready.".format(depth))

    def __len__(self):
        return self.depth

    def __repr__(self):
        return "<ChannelArray depth={0} width={1}{2}>".format(
            self.depth,
            self.width,
            " broken" if self.broken else "",
        )

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.shutdown()
        return False

    @property
    def entry(self):
        """Channel 0, the only channel used from outside the chain."""
        return self._slots[0]

    @ensureChainRunning
    def compute(self, n):
        """Compute n! through the chain. See :func:`compute`."""
        if self.broken:
            raise ChainBroken("This chain failed on a previous request and "
                              "its tasks are stuck mid-call.")
        watch = StopWatch()
        try:
            result = compute(self.entry, n)
        except BaseException as err:
            self.broken = True
            if isinstance(err, DeadlockError):
                iterarray.logger.warning(
                    "Request {0} deadlocked a chain of depth {1}.".format(
                        n, self.depth))
            else:
                iterarray.logger.warning(
                    "Request {0} failed on a chain of depth {1}: {2!r}".format(
                        n, self.depth, err))
            raise
        if iterarray.DEBUG:
            control.init_debug()
            control.debug_stats[0]['executionTime'].append(watch.get())
        return result

    def shutdown(self):
        """Stop every worker task. The chain cannot be used afterwards."""
        if not self.isRunning and all(not t.alive() for t in self.tasks):
            return
        self.isRunning = False
        for task in self.tasks:
            control.kill(task)
        for slot in self._slots:
            slot.clear()
        iterarray.logger.info("Chain of {0} worker task(s) shut down."
                              .format(self.depth))


def build(depth=None, width=None):
    """Build a chain and return it once every worker task listens.

    :param depth: Number of worker tasks, which is also the largest request
        the chain can serve. Defaults to ``iterarray.CONFIGURATION["depth"]``,
        then ``iterarray.MAX_DEPTH``.
    :param width: Payload width in bits; products are wrapped to a signed
        integer of that width. Defaults to
        ``iterarray.CONFIGURATION["width"]``; None keeps exact integers.

    :returns: A :class:`ChannelArray`; its ``entry`` is channel 0."""
    return ChannelArray(depth, width)
