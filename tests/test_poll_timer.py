import threading
import time
import unittest

from dictation.sync.PollTimer import PollTimer


class TestPollTimer(unittest.TestCase):

    def test_rejects_non_positive_interval(self):
        with self.assertRaises(ValueError):
            PollTimer(lambda: None, 0)

    def test_calls_callback_repeatedly(self):
        calls = []
        enough = threading.Event()

        def tick():
            calls.append(1)
            if len(calls) >= 3:
                enough.set()

        timer = PollTimer(tick, 0.01)
        timer.start()
        self.assertTrue(enough.wait(2.0))
        timer.stop()

        self.assertGreaterEqual(len(calls), 3)

    def test_no_ticks_after_stop_returns(self):
        calls = []
        timer = PollTimer(lambda: calls.append(1), 0.005)
        timer.start()
        time.sleep(0.05)
        timer.stop()

        count = len(calls)
        time.sleep(0.05)
        self.assertEqual(len(calls), count)
        self.assertFalse(timer.is_running())

    def test_stop_waits_for_running_tick(self):
        in_tick = threading.Event()
        finished = []

        def slow_tick():
            in_tick.set()
            time.sleep(0.1)
            finished.append(1)

        timer = PollTimer(slow_tick, 0.005)
        timer.start()
        in_tick.wait(2.0)
        timer.stop()

        self.assertEqual(len(finished), 1)

    def test_tick_exception_does_not_stop_timer(self):
        calls = []
        enough = threading.Event()

        def failing_tick():
            calls.append(1)
            if len(calls) >= 2:
                enough.set()
            raise RuntimeError("tick failed")

        timer = PollTimer(failing_tick, 0.01)
        timer.start()
        self.assertTrue(enough.wait(2.0))
        timer.stop()

    def test_stop_from_inside_tick_does_not_deadlock(self):
        stopped = threading.Event()
        timer = None

        def tick():
            timer.stop()
            stopped.set()

        timer = PollTimer(tick, 0.01)
        timer.start()
        self.assertTrue(stopped.wait(2.0))
        self.assertFalse(timer.is_running())

    def test_can_restart_after_stop(self):
        calls = []
        timer = PollTimer(lambda: calls.append(1), 0.01)
        timer.start()
        timer.stop()
        count = len(calls)

        timer.start()
        time.sleep(0.05)
        timer.stop()
        self.assertGreater(len(calls), count)

    def test_start_twice_runs_one_thread(self):
        timer = PollTimer(lambda: None, 0.01)
        timer.start()
        timer.start()
        self.assertEqual(sum(1 for t in threading.enumerate() if t.name == "PollTimer"), 1)
        timer.stop()

    def test_disarm_returns_without_waiting_for_tick(self):
        in_tick = threading.Event()
        release = threading.Event()
        finished = []

        def blocking_tick():
            in_tick.set()
            release.wait(2.0)
            finished.append(1)

        timer = PollTimer(blocking_tick, 0.005)
        timer.start()
        self.assertTrue(in_tick.wait(2.0))

        timer.disarm()
        self.assertFalse(timer.is_running())
        self.assertEqual(finished, [])

        release.set()
        timer.join()
        self.assertEqual(finished, [1])

    def test_join_does_not_touch_timer_restarted_after_disarm(self):
        calls = []
        timer = PollTimer(lambda: calls.append(1), 0.005)
        timer.start()
        timer.disarm()
        timer.start()

        timer.join()

        self.assertTrue(timer.is_running())
        count = len(calls)
        time.sleep(0.05)
        self.assertGreater(len(calls), count)
        timer.stop()


if __name__ == '__main__':
    unittest.main()
