#!/usr/bin/env python
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
import iterarray
iterarray.DEBUG = False

import math
import threading
import unittest
from unittest import mock

from iterarray import chain, _control
from iterarray._types import TaskState, DeadlockError, ChainBroken
from iterarray.fallbacks import NotRunning

DEPTH = 25


class TestChainCommon(unittest.TestCase):
    depth = DEPTH
    width = None

    def setUp(self):
        self.chain = chain.ChannelArray(self.depth, self.width)

    def tearDown(self):
        self.chain.shutdown()
        self.assertEqual(len(_control.getReadyQueue()), 0)


class TestConstruction(TestChainCommon):
    def test_task_count(self):
        self.assertEqual(len(self.chain.tasks), DEPTH)
        self.assertEqual(len(self.chain), DEPTH)
        self.assertEqual(len(self.chain._slots), DEPTH + 1)
        self.assertEqual(len(set(t.greenlet for t in self.chain.tasks)), DEPTH)

    def test_wiring(self):
        slots = self.chain._slots
        for i, task in enumerate(self.chain.tasks, 1):
            self.assertEqual(task.index, i)
            self.assertIs(task.upstream, slots[i - 1])
            self.assertIs(task.downstream, slots[i])
        self.assertIs(self.chain.entry, slots[0])

    def test_ready_before_use(self):
        for task in self.chain.tasks:
            self.assertTrue(task.alive())
            self.assertTrue(task.isReady())
            self.assertEqual(task.state, TaskState.awaitRequest)
        for slot in self.chain._slots:
            self.assertEqual(len(slot.senders), 0)
        self.assertEqual(len(self.chain.entry.receivers), 1)

    def test_task_count_independent_of_request(self):
        self.chain.compute(3)
        self.assertEqual(len(self.chain.tasks), DEPTH)
        self.assertTrue(all(t.isReady() for t in self.chain.tasks))

    def test_build(self):
        small = chain.build(3)
        try:
            self.assertEqual(len(small.tasks), 3)
            self.assertEqual(small.compute(3), 6)
        finally:
            small.shutdown()

    def test_default_depth(self):
        default = chain.build()
        try:
            self.assertEqual(len(default), iterarray.MAX_DEPTH)
            self.assertEqual(default.compute(iterarray.MAX_DEPTH),
                             math.factorial(iterarray.MAX_DEPTH))
        finally:
            default.shutdown()

    def test_invalid_depth(self):
        for depth in (0, -3, 2.5, True, "4"):
            self.assertRaises(ValueError, chain.ChannelArray, depth)
        self.assertRaises(ValueError, chain.ChannelArray, 4, 1)

    def test_configured_defaults(self):
        iterarray.CONFIGURATION.update({"depth": 8, "width": 16})
        try:
            configured = chain.ChannelArray()
        finally:
            iterarray.CONFIGURATION.clear()
        try:
            self.assertEqual(len(configured), 8)
            self.assertEqual(configured.width, 16)
            self.assertEqual(configured.compute(8), 40320 - 65536)
        finally:
            configured.shutdown()

    def test_explicit_arguments_win(self):
        iterarray.CONFIGURATION.update({"depth": 8, "width": 16})
        try:
            explicit = chain.ChannelArray(3, 32)
        finally:
            iterarray.CONFIGURATION.clear()
        try:
            self.assertEqual(len(explicit), 3)
            self.assertEqual(explicit.width, 32)
        finally:
            explicit.shutdown()


class TestCompute(TestChainCommon):
    def test_base_cases(self):
        self.assertEqual(self.chain.compute(0), 1)
        self.assertEqual(self.chain.compute(1), 1)

    def test_literals(self):
        self.assertEqual(self.chain.compute(5), 120)
        self.assertEqual(self.chain.compute(10), 3628800)
        self.assertEqual(self.chain.compute(20), 2432902008176640000)

    def test_every_request(self):
        for n in range(DEPTH + 1):
            self.assertEqual(self.chain.compute(n), math.factorial(n))

    def test_reusable(self):
        for n in (6, 2, 6, 0, 9):
            self.assertEqual(self.chain.compute(n), math.factorial(n))
            self.assertTrue(all(t.isReady() for t in self.chain.tasks))

    def test_full_depth(self):
        self.assertEqual(self.chain.compute(DEPTH), math.factorial(DEPTH))

    def test_entry(self):
        self.assertEqual(chain.compute(self.chain.entry, 7), 5040)
        self.assertEqual(chain.compute(self.chain.entry, 4), 24)

    def test_exact_beyond_64_bits(self):
        self.assertEqual(self.chain.compute(21), 51090942171709440000)

    def test_one_task_chain(self):
        single = chain.ChannelArray(1)
        try:
            self.assertEqual(single.compute(0), 1)
            self.assertEqual(single.compute(1), 1)
        finally:
            single.shutdown()

    def test_diagnostics(self):
        with self.assertLogs(iterarray.logger, level="DEBUG") as cm:
            self.chain.compute(3)
        messages = [r.getMessage() for r in cm.records
                    if r.getMessage().startswith("Task")]
        self.assertEqual(messages, ["Task 1 received 3",
                                    "Task 2 received 2",
                                    "Task 3 received 1"])


class TestWidth(TestChainCommon):
    width = 64

    def test_exact_up_to_20(self):
        self.assertEqual(self.chain.compute(20), 2432902008176640000)

    def test_overflow(self):
        # Same value as a wrapped signed 64 bits multiplication
        self.assertEqual(self.chain.compute(21), -4249290049419214848)
        self.assertNotEqual(self.chain.compute(21), math.factorial(21))

    def test_narrow(self):
        narrow = chain.ChannelArray(8, width=16)
        try:
            # 8! = 40320 does not fit in a signed 16 bits integer
            self.assertEqual(narrow.compute(7), 5040)
            self.assertEqual(narrow.compute(8), 40320 - 65536)
        finally:
            narrow.shutdown()


class TestDeadlock(TestChainCommon):
    depth = 5

    def test_beyond_depth(self):
        self.assertRaises(DeadlockError, self.chain.compute, 6)
        self.assertTrue(self.chain.broken)
        self.assertTrue(self.chain.entry.idle())

    def test_negative(self):
        self.assertRaises(DeadlockError, self.chain.compute, -1)
        self.assertTrue(self.chain.broken)

    def test_broken_chain(self):
        self.assertRaises(DeadlockError, self.chain.compute, 10)
        self.assertRaises(ChainBroken, self.chain.compute, 3)

    def test_depth_limit(self):
        self.assertEqual(self.chain.compute(5), 120)
        self.assertFalse(self.chain.broken)

    def test_shutdown_after_deadlock(self):
        self.assertRaises(DeadlockError, self.chain.compute, 6)
        self.chain.shutdown()
        self.assertFalse(any(t.alive() for t in self.chain.tasks))
        self.assertTrue(all(s.idle() for s in self.chain._slots))

    def test_failing_task(self):
        with mock.patch("iterarray.utils.wrapInteger",
                        side_effect=ArithmeticError("no room for 2")):
            self.assertRaises(ArithmeticError, self.chain.compute, 3)
        self.assertTrue(self.chain.broken)
        self.assertFalse(self.chain.tasks[1].alive())
        self.assertRaises(ChainBroken, self.chain.compute, 3)


class TestThreads(TestChainCommon):
    depth = 4

    def test_chain_in_another_thread(self):
        self.assertEqual(self.chain.compute(3), 6)
        results = []

        def other():
            with chain.ChannelArray(3) as array:
                results.append(array.compute(3))
            results.append(len(_control.getReadyQueue()))

        thread = threading.Thread(target=other)
        thread.start()
        thread.join()
        self.assertEqual(results, [6, 0])
        self.assertEqual(self.chain.compute(4), 24)

    def test_deadlock_in_another_thread(self):
        errors = []

        def other():
            with chain.ChannelArray(2) as array:
                try:
                    array.compute(3)
                except DeadlockError as err:
                    errors.append(err)

        thread = threading.Thread(target=other)
        thread.start()
        thread.join()
        self.assertEqual(len(errors), 1)
        self.assertEqual(self.chain.compute(4), 24)

    def test_hub_per_thread(self):
        hubs = []
        thread = threading.Thread(target=lambda: hubs.append(_control.getHub()))
        thread.start()
        thread.join()
        self.assertEqual(len(hubs), 1)
        self.assertIsNot(hubs[0], _control.getHub())


class TestShutdown(TestChainCommon):
    depth = 4

    def test_shutdown(self):
        self.assertEqual(self.chain.compute(4), 24)
        self.chain.shutdown()
        for task in self.chain.tasks:
            self.assertFalse(task.alive())
            self.assertEqual(task.state, TaskState.stopped)
        self.assertTrue(all(s.idle() for s in self.chain._slots))
        self.assertFalse(self.chain.isRunning)

    def test_compute_after_shutdown(self):
        self.chain.shutdown()
        self.assertRaises(NotRunning, self.chain.compute, 2)

    def test_shutdown_twice(self):
        self.chain.shutdown()
        self.chain.shutdown()
        self.assertFalse(self.chain.isRunning)

    def test_context_manager(self):
        with chain.ChannelArray(3) as small:
            self.assertEqual(small.compute(3), 6)
        self.assertFalse(small.isRunning)
        self.assertFalse(any(t.alive() for t in small.tasks))


class TestTrace(TestChainCommon):
    depth = 6

    def setUp(self):
        iterarray.DEBUG = True
        _control.debug_stats = None
        _control.init_debug()
        super(TestTrace, self).setUp()

    def tearDown(self):
        iterarray.DEBUG = False
        super(TestTrace, self).tearDown()

    def test_call_order(self):
        self.assertEqual(self.chain.compute(4), 24)
        self.assertEqual(_control.traceLog, [
            (1, "request", 4),
            (2, "request", 3),
            (3, "request", 2),
            (4, "request", 1),
            (3, "result", 1),
            (2, "result", 2),
            (1, "result", 6),
        ])

    def test_statistics(self):
        self.chain.compute(2)
        self.chain.compute(1)
        self.assertEqual([v for _, v in _control.debug_stats[1]["request"]],
                         [2, 1])
        self.assertEqual([v for _, v in _control.debug_stats[2]["request"]],
                         [1])
        self.assertEqual(len(_control.debug_stats[0]["executionTime"]), 2)


if __name__ == "__main__":
    unittest.main(verbosity=2)
