# dictation/sync/InjectionGate.py
import logging
import threading
from typing import Callable, Optional, Union, TYPE_CHECKING

if TYPE_CHECKING:
    from dictation.protocols import TextSink

logger = logging.getLogger(__name__)

TextOrFactory = Union[str, Callable[[], str]]


class InjectionGate:
    """Allows at most one text injection in flight at a time.

    Policy is drop-newest-if-busy: a request that arrives while another
    injection is running is rejected rather than queued. The caller keeps its
    delta uncommitted, so the same words come back on the next poll tick.

    The text may be given as a callable. It is resolved only after the busy
    flag has been claimed, so a delta computed inside it can never race with
    another injection. ``on_delivered`` runs after a successful sink call
    while the flag is still held.

    Thread-safe - callers may be the poll timer thread and the thread that
    stops the session.

    Args:
        sink: Text sink that types into the focused window
        verbose: Enable verbose logging
    """

    def __init__(self, sink: 'TextSink', verbose: bool = False) -> None:
        self._sink = sink
        self._verbose = verbose
        self._busy = False
        self._condition = threading.Condition(threading.Lock())

    def is_busy(self) -> bool:
        with self._condition:
            return self._busy

    def wait_idle(self, timeout: Optional[float] = None) -> bool:
        """Block until no injection is in flight.

        Returns:
            True if the gate is idle, False if the timeout expired first
        """
        with self._condition:
            return self._condition.wait_for(lambda: not self._busy, timeout=timeout)

    def try_inject(self, text: TextOrFactory,
                   on_delivered: Optional[Callable[[], None]] = None) -> bool:
        """Deliver text to the sink unless an injection is already running.

        Args:
            text: Text to type, or a callable returning it. An empty result
                means there is nothing to type and the sink is not called.
            on_delivered: Called after the sink accepted the text, before the
                busy flag is released

        Returns:
            True if the text was typed, False if rejected (busy), empty,
            or the sink failed
        """
        with self._condition:
            if self._busy:
                if self._verbose:
                    logger.debug("InjectionGate: busy, dropping request")
                return False
            self._busy = True

        try:
            resolved = text() if callable(text) else text
            if not resolved:
                return False

            try:
                self._sink.inject_text(resolved)
            except Exception as e:
                logger.warning(f"InjectionGate: injection of {len(resolved)} chars failed: "
                               f"{type(e).__name__}: {e}")
                return False

            if self._verbose:
                logger.debug(f"InjectionGate: injected '{resolved}'")

            if on_delivered is not None:
                on_delivered()
            return True
        finally:
            with self._condition:
                self._busy = False
                self._condition.notify_all()
