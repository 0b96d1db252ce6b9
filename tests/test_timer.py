import unittest
from unittest import mock

from easytimer.loops import ManualRunLoop
from easytimer.timers import PlainCallback, Timer, TimerCallback, as_callback


class AsCallbackTests(unittest.TestCase):
    def test_infers_variant_from_signature(self):
        self.assertIsInstance(as_callback(lambda: None), PlainCallback)
        self.assertIsInstance(as_callback(lambda timer: None), TimerCallback)
        self.assertIsInstance(as_callback(lambda timer=None: None), PlainCallback)
        self.assertIsInstance(as_callback(lambda *args: None), PlainCallback)

    def test_bound_methods_ignore_self(self):
        class Target:
            def tick(self):
                pass

            def tock(self, timer):
                pass

        target = Target()
        self.assertIsInstance(as_callback(target.tick), PlainCallback)
        self.assertIsInstance(as_callback(target.tock), TimerCallback)

    def test_explicit_choice_wins(self):
        self.assertIsInstance(as_callback(lambda *args: None, with_timer=True), TimerCallback)
        self.assertIsInstance(as_callback(lambda timer: None, with_timer=False), PlainCallback)

    def test_existing_variant_is_kept(self):
        wrapped = TimerCallback(lambda timer: None)
        self.assertIs(as_callback(wrapped), wrapped)

    def test_builtins_without_signature_are_plain(self):
        self.assertIsInstance(as_callback(print), PlainCallback)


class TimerStateTests(unittest.TestCase):
    def test_one_shot_invalidates_after_its_fire(self):
        callback = mock.Mock()
        timer = Timer(1.0, 0, callback)

        self.assertFalse(timer.fire(1.0))
        self.assertFalse(timer.is_valid)
        self.assertEqual(timer.fire_count, 1)

        self.assertFalse(timer.fire(2.0))
        callback.assert_called_once_with()

    def test_repeating_timer_advances_by_whole_periods(self):
        timer = Timer(1.0, 1.0, mock.Mock())

        self.assertTrue(timer.fire(1.0))
        self.assertEqual(timer.fire_date, 2.0)

        # Late delivery skips the missed periods instead of bursting.
        self.assertTrue(timer.fire(4.5))
        self.assertEqual(timer.fire_date, 5.0)
        self.assertEqual(timer.fire_count, 2)

    def test_period_is_measured_from_the_schedule_not_the_call(self):
        timer = Timer(1.0, 1.0, mock.Mock())
        timer.fire(1.3)
        self.assertEqual(timer.fire_date, 2.0)

    def test_invalidate_is_one_way_and_idempotent(self):
        timer = Timer(1.0, 1.0, mock.Mock())
        timer.invalidate()
        timer.invalidate()
        self.assertFalse(timer.is_valid)
        self.assertFalse(timer.fire(1.0))
        self.assertEqual(timer.fire_count, 0)

    def test_stopping_from_the_callback_prevents_rearming(self):
        def stop_now(timer):
            timer.stop()

        timer = Timer(1.0, 1.0, stop_now)
        self.assertFalse(timer.fire(1.0))
        self.assertEqual(timer.fire_date, 1.0)

    def test_bookkeeping_happens_when_the_callback_raises(self):
        timer = Timer(1.0, 1.0, mock.Mock(side_effect=RuntimeError("boom")))
        with self.assertRaises(RuntimeError):
            timer.fire(1.0)
        self.assertTrue(timer.is_valid)
        self.assertEqual(timer.fire_date, 2.0)

        one_shot = Timer(1.0, 0, mock.Mock(side_effect=RuntimeError("boom")))
        with self.assertRaises(RuntimeError):
            one_shot.fire(1.0)
        self.assertFalse(one_shot.is_valid)

    def test_invoke_does_not_count_as_a_fire(self):
        callback = mock.Mock()
        timer = Timer(1.0, 1.0, callback, name="ping")
        timer.invoke()
        callback.assert_called_once_with()
        self.assertEqual(timer.fire_count, 0)
        self.assertEqual(timer.fire_date, 1.0)
        self.assertIn("ping", repr(timer))


class TimerLifecycleTests(unittest.TestCase):
    def setUp(self) -> None:
        self.loop = ManualRunLoop()
        self.callback = mock.Mock()

    def test_start_attaches_and_stop_detaches(self):
        timer = Timer(1.0, 1.0, self.callback)
        timer.start(self.loop)
        self.assertTrue(self.loop.is_attached(timer))

        timer.stop(self.loop)
        self.assertFalse(timer.is_valid)
        self.assertFalse(self.loop.is_attached(timer))
        self.loop.run_until(5)
        self.callback.assert_not_called()

    def test_stop_twice_is_the_same_as_once(self):
        timer = Timer(1.0, 1.0, self.callback)
        timer.start(self.loop)
        timer.stop(self.loop)
        timer.stop(self.loop)
        timer.stop()
        self.assertFalse(timer.is_valid)
        self.assertEqual(self.loop.run_until(5), 0)

    def test_stop_without_start_is_a_no_op(self):
        timer = Timer(1.0, 1.0, self.callback)
        timer.stop(self.loop)
        self.assertFalse(timer.is_valid)

    def test_restarting_a_stopped_timer_does_nothing(self):
        timer = Timer(1.0, 1.0, self.callback)
        timer.start(self.loop)
        timer.stop(self.loop)
        timer.start(self.loop)
        self.assertFalse(self.loop.is_attached(timer))
        self.loop.run_until(5)
        self.callback.assert_not_called()

    def test_double_start_is_idempotent(self):
        timer = Timer(1.0, 1.0, self.callback)
        timer.start(self.loop)
        timer.start(self.loop)
        self.loop.run_until(1.5)
        self.callback.assert_called_once_with()

    def test_stop_without_loop_still_halts_fires(self):
        timer = Timer(1.0, 1.0, self.callback)
        timer.start(self.loop)
        self.loop.run_until(1.5)
        timer.stop()
        self.loop.run_until(5)
        self.assertEqual(self.callback.call_count, 1)
        self.assertEqual(self.loop.timers(), [])


if __name__ == "__main__":
    unittest.main()
