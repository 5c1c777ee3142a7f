# dictation/sync/SyncEngine.py
import logging
import threading
import time
from typing import Callable, Optional, TYPE_CHECKING

from dictation.errors import RecognizerUnavailable
from dictation.sync.StabilityMatcher import stable_prefix, tokenize
from dictation.types import Session, SessionSnapshot

if TYPE_CHECKING:
    from dictation.protocols import HypothesisSource
    from dictation.sync.InjectionGate import InjectionGate

logger = logging.getLogger(__name__)


class SyncEngine:
    """Types the stable part of a revising hypothesis exactly once, in order.

    On every poll tick the engine compares the recognizer's current hypothesis
    with the one from the previous tick. Words both agree on (from the start)
    are stable; stable words beyond what was already typed form the delta,
    which is handed to the InjectionGate as one unit.

    Invariants:
    - ``last_hypothesis`` is replaced on every tick with a hypothesis, after
      the comparison, whether or not the delta was typed.
    - ``committed`` only grows, and only after the sink accepted the delta.
      A dropped or failed delta is therefore recomputed on a later tick.
    - Delta computation and commit happen while the gate is held, so two
      injections can never overlap or repeat words.

    Args:
        recognizer: Source of interim and final hypotheses
        gate: Serializes calls to the text sink
        finalize_delay: Seconds to wait before the final injection so the
            target window can settle its focus
        finalize_wait: Upper bound in seconds to wait for an in-flight
            injection before the final one
        verbose: Enable verbose logging
        sleep: Sleep function, replaceable in tests
    """

    def __init__(self, recognizer: 'HypothesisSource',
                 gate: 'InjectionGate',
                 finalize_delay: float = 0.05,
                 finalize_wait: float = 2.0,
                 verbose: bool = False,
                 sleep: Callable[[float], None] = time.sleep
                 ) -> None:
        self._recognizer = recognizer
        self._gate = gate
        self._finalize_delay = finalize_delay
        self._finalize_wait = finalize_wait
        self._verbose = verbose
        self._sleep = sleep

        self._session: Optional[Session] = None
        self._lock = threading.Lock()

    # --- Session ownership ---

    def begin_session(self) -> None:
        """Start a new session with empty committed text and hypothesis."""
        with self._lock:
            if self._session is not None:
                self._session.closed = True
            self._session = Session()
        if self._verbose:
            logger.debug("SyncEngine: session started")

    def discard_session(self) -> None:
        """Drop the current session; nothing more is typed for it."""
        with self._lock:
            session = self._session
            self._session = None
            if session is not None:
                session.closed = True
        if session is not None and self._verbose:
            logger.debug(f"SyncEngine: session discarded with {len(session.committed)} words typed")

    @property
    def committed_text(self) -> str:
        with self._lock:
            return self._session.committed_text if self._session else ""

    def snapshot(self) -> Optional[SessionSnapshot]:
        with self._lock:
            if self._session is None:
                return None
            return SessionSnapshot(
                committed_text=self._session.committed_text,
                last_hypothesis=self._session.last_hypothesis,
                committed_words=len(self._session.committed),
            )

    # --- Poll cycle ---

    def on_poll_tick(self) -> None:
        """Fetch the hypothesis and type any newly stable words.

        Recognizer failures and sink failures are logged and swallowed; the
        tick simply does nothing and the next tick tries again.
        """
        with self._lock:
            session = self._session
        if session is None or session.closed:
            return

        hypothesis = self._fetch_hypothesis()
        if not hypothesis or not hypothesis.strip():
            return

        with self._lock:
            if session.closed:
                return
            stable = stable_prefix(hypothesis, session.last_hypothesis)
            session.last_hypothesis = hypothesis
            pending = len(stable) > len(session.committed)

        if self._verbose:
            logger.debug(f"SyncEngine: hypothesis='{hypothesis}', stable_words={len(stable)}")

        if pending:
            self._deliver(session, stable)

    def _fetch_hypothesis(self) -> str:
        try:
            return self._recognizer.fetch_hypothesis()
        except RecognizerUnavailable as e:
            logger.debug(f"SyncEngine: recognizer unavailable: {e}")
        except Exception as e:
            logger.warning(f"SyncEngine: hypothesis fetch failed: {type(e).__name__}: {e}")
        return ""

    def _deliver(self, session: Session, target: list[str]) -> bool:
        """Type the words of target beyond the committed ones.

        The delta is computed inside the gate from the committed words at
        that moment. Only the typed words are appended to ``committed``, so
        it always equals the text the sink received.
        """
        delta: list[str] = []

        def compose() -> str:
            with self._lock:
                if session.closed or len(target) <= len(session.committed):
                    return ""
                delta[:] = target[len(session.committed):]
                separator = " " if session.committed else ""
                return separator + " ".join(delta)

        def advance() -> None:
            # committed + delta, not target: revised earlier words keep their
            # typed spelling, so committed text may differ from every
            # hypothesis seen but always equals the text typed so far
            with self._lock:
                session.committed.extend(delta)

        delivered = self._gate.try_inject(compose, on_delivered=advance)
        if delivered and self._verbose:
            logger.debug(f"SyncEngine: committed {len(delta)} words, total={len(session.committed)}")
        return delivered

    # --- Finalization ---

    def finalize(self, final_hypothesis: str) -> str:
        """Type whatever the final hypothesis has beyond the committed words.

        The final hypothesis is trusted in full: the words past the committed
        count are typed without a stability comparison. Best-effort, a failed
        final injection is logged and not retried. The session is closed
        afterwards.

        Args:
            final_hypothesis: Authoritative transcription at session end

        Returns:
            The complete text typed during the session
        """
        with self._lock:
            session = self._session
        if session is None or session.closed:
            return ""

        final_words = tokenize((final_hypothesis or "").strip())
        with self._lock:
            has_tail = len(final_words) > len(session.committed)

        if has_tail:
            if self._finalize_delay > 0:
                self._sleep(self._finalize_delay)
            if not self._gate.wait_idle(timeout=self._finalize_wait):
                logger.warning("SyncEngine: injection still in flight, final text may be dropped")
            if not self._deliver(session, final_words):
                logger.warning("SyncEngine: final text was not typed")

        with self._lock:
            session.closed = True
            if self._session is session:
                self._session = None
            typed = session.committed_text

        logger.info(f"SyncEngine: session finalized, {len(session.committed)} words typed")
        return typed
