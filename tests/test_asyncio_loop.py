import asyncio
import gc
import unittest
from unittest import mock

from easytimer.loops import AsyncioRunLoop, RunLoop, get_current_loop
from easytimer.timers import Timer, delay, delayed_interval, interval


class AsyncioRunLoopTests(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self.runloop = AsyncioRunLoop.for_loop()

    async def test_adapter_is_shared_per_event_loop(self):
        self.assertIs(AsyncioRunLoop.for_loop(asyncio.get_running_loop()), self.runloop)
        self.assertIsInstance(self.runloop, RunLoop)

    async def test_current_loop_wraps_the_running_event_loop(self):
        self.assertIs(get_current_loop(), self.runloop)
        self.assertIs(self.runloop.loop, asyncio.get_running_loop())

    async def test_delay_fires_once(self):
        callback = mock.Mock()
        timer = delay(0.05, callback)

        callback.assert_not_called()
        self.assertTrue(self.runloop.is_attached(timer))

        await asyncio.sleep(0.2)

        callback.assert_called_once_with()
        self.assertFalse(timer.is_valid)
        self.assertFalse(self.runloop.is_attached(timer))

    async def test_interval_fires_now_and_repeatedly_until_stopped(self):
        callback = mock.Mock()
        timer = interval(0.05, callback, loop=self.runloop)
        self.assertEqual(callback.call_count, 1)

        await asyncio.sleep(0.18)
        timer.stop(self.runloop)
        fired = callback.call_count
        self.assertGreaterEqual(fired, 3)

        await asyncio.sleep(0.12)
        self.assertEqual(callback.call_count, fired)
        self.assertEqual(self.runloop.timers(), [])

    async def test_delayed_interval_self_cancels(self):
        fires = []

        def tick(timer):
            fires.append(self.runloop.time())
            if len(fires) == 2:
                timer.stop(self.runloop)

        started = self.runloop.time()
        timer = delayed_interval(0.05, tick, loop=self.runloop)
        self.assertEqual(fires, [])

        await asyncio.sleep(0.3)

        self.assertEqual(len(fires), 2)
        self.assertGreaterEqual(fires[0] - started, 0.04)
        self.assertFalse(timer.is_valid)

    async def test_stop_without_loop_prevents_the_next_fire(self):
        callback = mock.Mock()
        timer = delayed_interval(0.05, callback, loop=self.runloop)
        timer.stop()

        await asyncio.sleep(0.12)

        callback.assert_not_called()
        self.assertEqual(self.runloop.timers(), [])

    async def test_remove_from_callback_is_not_rearmed(self):
        callback = mock.Mock()

        def detach(timer):
            callback()
            self.runloop.remove_timer(timer)

        timer = delayed_interval(0.03, detach, loop=self.runloop)

        await asyncio.sleep(0.15)

        callback.assert_called_once_with()
        self.assertTrue(timer.is_valid)
        self.assertFalse(self.runloop.is_attached(timer))

    async def test_callback_errors_go_to_the_exception_handler(self):
        loop = asyncio.get_running_loop()
        errors = []
        loop.set_exception_handler(lambda _loop, context: errors.append(context["exception"]))
        calls = []

        def flaky():
            calls.append(self.runloop.time())
            if len(calls) == 1:
                raise RuntimeError("boom")

        timer = delayed_interval(0.03, flaky, loop=self.runloop)
        await asyncio.sleep(0.15)
        timer.stop(self.runloop)

        self.assertEqual(len(errors), 1)
        self.assertIsInstance(errors[0], RuntimeError)
        self.assertGreaterEqual(len(calls), 2)

    async def test_double_start_does_not_double_fire(self):
        callback = mock.Mock()
        timer = Timer(self.runloop.time() + 0.03, 0, callback)
        timer.start(self.runloop)
        timer.start(self.runloop)

        await asyncio.sleep(0.1)

        callback.assert_called_once_with()


class AsyncioRunLoopCacheTests(unittest.TestCase):
    def test_finished_event_loops_are_released(self):
        async def use_adapter():
            runloop = AsyncioRunLoop.for_loop()
            delayed_interval(10, mock.Mock(), loop=runloop)
            return runloop.time()

        gc.collect()
        before = len(AsyncioRunLoop._adapters)  # pylint: disable=protected-access
        for _ in range(5):
            asyncio.run(use_adapter())
        gc.collect()

        self.assertEqual(len(AsyncioRunLoop._adapters), before)  # pylint: disable=protected-access


if __name__ == "__main__":
    unittest.main()
