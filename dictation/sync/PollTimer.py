# dictation/sync/PollTimer.py
import logging
import threading
import time
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)


class PollTimer:
    """Calls a tick function at a fixed interval on a daemon thread.

    stop() disarms the timer synchronously: once it returns, no tick is
    running and none will start, unless stop() was called from inside a tick.
    disarm() only prevents further ticks and returns at once, so callers
    holding a lock can disarm under it and join() after releasing it.

    Args:
        callback: Function called once per interval
        interval: Seconds between ticks
        join_timeout: Upper bound in seconds for waiting on a running tick
        verbose: Enable verbose logging
    """

    def __init__(self, callback: Callable[[], None], interval: float,
                 join_timeout: float = 5.0, verbose: bool = False) -> None:
        if interval <= 0:
            raise ValueError(f"Poll interval must be positive, got {interval}")
        self._callback = callback
        self.interval = interval
        self._join_timeout = join_timeout
        self._verbose = verbose
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._retired: List[threading.Thread] = []
        self._lock = threading.Lock()

    def is_running(self) -> bool:
        with self._lock:
            return self._thread is not None and not self._stop_event.is_set()

    def start(self) -> None:
        with self._lock:
            if self._thread is not None:
                return
            self._stop_event = threading.Event()
            self._thread = threading.Thread(
                target=self._run, args=(self._stop_event,), name="PollTimer", daemon=True
            )
            self._thread.start()
        if self._verbose:
            logger.debug(f"PollTimer: started, interval={self.interval:.3f}s")

    def disarm(self) -> None:
        """Stop scheduling ticks without waiting for a running one."""
        with self._lock:
            if self._thread is not None:
                self._retired.append(self._thread)
                self._thread = None
            self._stop_event.set()

    def stop(self) -> None:
        self.disarm()
        self.join()

    def join(self) -> None:
        """Wait for ticks still running on threads retired by disarm()."""
        with self._lock:
            threads, self._retired = self._retired, []

        if not threads:
            return
        for thread in threads:
            if thread is threading.current_thread():
                continue
            thread.join(timeout=self._join_timeout)
            if thread.is_alive():
                logger.warning("PollTimer: tick still running after stop timeout")
        if self._verbose:
            logger.debug("PollTimer: stopped")

    def _run(self, stop_event: threading.Event) -> None:
        next_tick = time.monotonic() + self.interval
        while not stop_event.wait(max(0.0, next_tick - time.monotonic())):
            try:
                self._callback()
            except Exception as e:
                logger.error(f"PollTimer: tick failed: {type(e).__name__}: {e}")
            next_tick += self.interval
            # Skip ticks missed while a slow callback was running
            now = time.monotonic()
            if next_tick < now:
                next_tick = now
