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
"""Synchronous, unbuffered channels between greenlets.

A :class:`Channel` has no buffer: a ``send`` and a matching ``receive``
complete together. Whichever side arrives first parks its greenlet on the
channel and blocks; the second side completes the transfer and makes the
first runnable again."""
from collections import deque

import greenlet

from ._types import ProtocolViolation
from . import _control as control


class Channel(object):
    """Rendezvous point carrying one value per transfer between exactly
    two parties."""
    def __init__(self, index=None):
        self.index = index
        self.senders = deque()  # (greenlet, value) parked on send
        self.receivers = deque()  # greenlets parked on receive

    def __repr__(self):
        return "<Channel {0} senders={1} receivers={2}>".format(
            self.index,
            len(self.senders),
            len(self.receivers),
        )

    def send(self, value):
        """Block until a receiver takes value."""
        if self.receivers:
            control.wake(self.receivers.popleft(), value)
            return
        if self.senders:
            raise ProtocolViolation(
                "Channel {0} already holds an unreceived value"
                .format(self.index))
        current = greenlet.getcurrent()
        self.senders.append((current, value))
        try:
            control.block()
        except BaseException:
            self._forget(current)
            raise

    def receive(self):
        """Block until a sender provides a value.

        :returns: The value sent."""
        if self.senders:
            sender, value = self.senders.popleft()
            control.wake(sender)
            return value
        if self.receivers:
            raise ProtocolViolation(
                "Channel {0} already has a pending receiver"
                .format(self.index))
        current = greenlet.getcurrent()
        self.receivers.append(current)
        try:
            return control.block()
        except BaseException:
            self._forget(current)
            raise

    def idle(self):
        """True when nobody is parked on the channel."""
        return not self.senders and not self.receivers

    def clear(self):
        self.senders.clear()
        self.receivers.clear()

    def _forget(self, parked):
        self.senders = deque(s for s in self.senders if s[0] is not parked)
        self.receivers = deque(r for r in self.receivers if r is not parked)
