import threading
import unittest
from unittest.mock import Mock

from conftest import RecordingSink
from dictation.errors import InjectionFailed
from dictation.sync.InjectionGate import InjectionGate


class TestInjectionGate(unittest.TestCase):

    def setUp(self):
        self.sink = RecordingSink()
        self.gate = InjectionGate(self.sink)

    def test_accepted_text_reaches_sink_once(self):
        self.assertTrue(self.gate.try_inject("hello"))
        self.assertEqual(self.sink.injected, ["hello"])

    def test_not_busy_after_injection(self):
        self.gate.try_inject("hello")
        self.assertFalse(self.gate.is_busy())

    def test_rejects_while_injection_in_flight(self):
        """A request arriving during an injection is dropped, not queued."""
        nested_results = []
        self.sink.on_inject = lambda text: nested_results.append(self.gate.try_inject("nested"))

        self.assertTrue(self.gate.try_inject("outer"))

        self.assertEqual(nested_results, [False])
        self.assertEqual(self.sink.injected, ["outer"])

    def test_busy_flag_set_during_sink_call(self):
        seen = []
        self.sink.on_inject = lambda text: seen.append(self.gate.is_busy())
        self.gate.try_inject("text")
        self.assertEqual(seen, [True])

    def test_sink_failure_returns_false_and_clears_busy(self):
        self.sink.fail_next = 1

        self.assertFalse(self.gate.try_inject("hello"))
        self.assertFalse(self.gate.is_busy())
        self.assertTrue(self.gate.try_inject("hello"))
        self.assertEqual(self.sink.injected, ["hello"])

    def test_unexpected_sink_exception_is_contained(self):
        sink = Mock()
        sink.inject_text.side_effect = RuntimeError("display gone")
        gate = InjectionGate(sink)

        self.assertFalse(gate.try_inject("hello"))
        self.assertFalse(gate.is_busy())

    def test_callable_text_resolved_inside_gate(self):
        seen = []

        def compose():
            seen.append(self.gate.is_busy())
            return "composed"

        self.assertTrue(self.gate.try_inject(compose))
        self.assertEqual(seen, [True])
        self.assertEqual(self.sink.injected, ["composed"])

    def test_empty_text_skips_sink(self):
        self.assertFalse(self.gate.try_inject(lambda: ""))
        self.assertFalse(self.gate.try_inject(""))
        self.assertEqual(self.sink.injected, [])
        self.assertFalse(self.gate.is_busy())

    def test_on_delivered_runs_only_after_success(self):
        delivered = Mock()
        self.sink.fail_next = 1

        self.gate.try_inject("first", on_delivered=delivered)
        delivered.assert_not_called()

        self.gate.try_inject("second", on_delivered=delivered)
        delivered.assert_called_once()

    def test_on_delivered_runs_while_busy(self):
        seen = []
        self.gate.try_inject("text", on_delivered=lambda: seen.append(self.gate.is_busy()))
        self.assertEqual(seen, [True])

    def test_wait_idle_returns_immediately_when_idle(self):
        self.assertTrue(self.gate.wait_idle(timeout=0.01))

    def test_wait_idle_waits_for_running_injection(self):
        started = threading.Event()
        release = threading.Event()

        def slow(text):
            started.set()
            release.wait(2.0)

        self.sink.on_inject = slow
        worker = threading.Thread(target=self.gate.try_inject, args=("slow",))
        worker.start()
        started.wait(2.0)

        self.assertFalse(self.gate.wait_idle(timeout=0.01))
        release.set()
        self.assertTrue(self.gate.wait_idle(timeout=2.0))
        worker.join(2.0)

    def test_concurrent_requests_never_overlap(self):
        active = []
        overlaps = []
        lock = threading.Lock()

        def track(text):
            with lock:
                active.append(text)
                if len(active) > 1:
                    overlaps.append(list(active))
            threading.Event().wait(0.001)
            with lock:
                active.remove(text)

        self.sink.on_inject = track
        threads = [threading.Thread(target=self.gate.try_inject, args=(f"t{i}",)) for i in range(20)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(overlaps, [])
        self.assertGreaterEqual(len(self.sink.injected), 1)


if __name__ == '__main__':
    unittest.main()
