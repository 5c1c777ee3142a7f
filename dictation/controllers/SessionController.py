"""
SessionController - Lifecycle of a dictation session with observer pattern.

State Machine:
- idle -> active (start, requires a loaded model)
- active -> finalizing (stop) -> idle (final text reconciled)
- active -> idle (cancel, nothing more is typed)

Lifecycle calls may arrive from any thread (GUI, toggle socket listener).
Observers are notified outside the lock with (old_status, new_status).
"""
import logging
import threading
from typing import Callable, Dict, List, Optional, Set, TYPE_CHECKING

from dictation.errors import NoModelLoaded
from dictation.sync.PollTimer import PollTimer
from dictation.types import SessionStatus

if TYPE_CHECKING:
    from dictation.protocols import HypothesisSource, SessionObserver
    from dictation.sync.SyncEngine import SyncEngine

logger = logging.getLogger(__name__)


class SessionController:
    """
    Starts, stops and cancels dictation sessions.

    Attributes:
        _status: Current SessionStatus
        _lock: Serializes lifecycle calls
        _timer: Poll timer driving SyncEngine.on_poll_tick
        _observers: Callables receiving (old_status, new_status)
        _end_listeners: Callables receiving the text typed during a finished session

    Args:
        recognizer: Speech recognizer, used for the model check and the final hypothesis
        engine: SyncEngine owning the session state
        poll_interval: Seconds between poll ticks
        timer: Optional pre-built timer (must call engine.on_poll_tick)
        verbose: Enable verbose logging
    """

    _VALID_TRANSITIONS: Dict[SessionStatus, Set[SessionStatus]] = {
        SessionStatus.IDLE: {SessionStatus.ACTIVE},
        SessionStatus.ACTIVE: {SessionStatus.FINALIZING, SessionStatus.IDLE},
        SessionStatus.FINALIZING: {SessionStatus.IDLE},
    }

    def __init__(self, recognizer: 'HypothesisSource',
                 engine: 'SyncEngine',
                 poll_interval: float = 0.4,
                 timer: Optional[PollTimer] = None,
                 verbose: bool = False) -> None:
        self._recognizer = recognizer
        self._engine = engine
        self._verbose = verbose
        self._timer = timer if timer is not None else PollTimer(
            engine.on_poll_tick, poll_interval, verbose=verbose
        )

        self._status = SessionStatus.IDLE
        self._lock = threading.Lock()
        self._observers: List['SessionObserver'] = []
        self._end_listeners: List[Callable[[str], None]] = []

    @property
    def status(self) -> SessionStatus:
        with self._lock:
            return self._status

    @property
    def committed_text(self) -> str:
        """Text typed so far in the running session, for display only."""
        return self._engine.committed_text

    def register_observer(self, observer: 'SessionObserver') -> None:
        with self._lock:
            self._observers.append(observer)

    def register_session_end_listener(self, listener: Callable[[str], None]) -> None:
        """
        Args:
            listener: Callable receiving the full text typed in the finished session
        """
        with self._lock:
            self._end_listeners.append(listener)

    # --- Lifecycle ---

    def start(self) -> bool:
        """
        Start a new session if idle.

        Returns:
            True if a session was started, False if one is already running

        Raises:
            NoModelLoaded: no speech model is loaded; status stays idle
        """
        with self._lock:
            if self._status is not SessionStatus.IDLE:
                return False
            if not self._is_model_ready():
                logger.warning("SessionController: start rejected, no speech model loaded")
                raise NoModelLoaded("No speech model is loaded")

            self._engine.begin_session()
            self._timer.start()
            old_status = self._set_status(SessionStatus.ACTIVE)

        logger.info("SessionController: session started")
        self._notify_observers(old_status, SessionStatus.ACTIVE)
        return True

    def stop(self) -> None:
        """
        Stop the session and type the rest of the final hypothesis.

        Does nothing unless a session is active.
        """
        with self._lock:
            if self._status is not SessionStatus.ACTIVE:
                return
            self._timer.disarm()
            old_status = self._set_status(SessionStatus.FINALIZING)
        # Join outside the lock, a tick may be blocked in a slow fetch
        self._timer.join()
        self._notify_observers(old_status, SessionStatus.FINALIZING)

        final_hypothesis = self._fetch_final_hypothesis()
        try:
            typed = self._engine.finalize(final_hypothesis)
        finally:
            with self._lock:
                old_status = self._set_status(SessionStatus.IDLE)
                listeners = list(self._end_listeners)
            self._notify_observers(old_status, SessionStatus.IDLE)

        logger.info(f"SessionController: session ended, typed {len(typed)} chars")
        for listener in listeners:
            listener(typed)

    def cancel(self) -> None:
        """
        Abort the session silently, nothing more is typed.

        Does nothing unless a session is active.
        """
        with self._lock:
            if self._status is not SessionStatus.ACTIVE:
                return
            self._timer.disarm()
            self._engine.discard_session()
            old_status = self._set_status(SessionStatus.IDLE)
        self._timer.join()

        logger.info("SessionController: session cancelled")
        self._notify_observers(old_status, SessionStatus.IDLE)

    def toggle(self) -> None:
        """Start when idle, stop when active. Ignored while finalizing."""
        status = self.status
        if status is SessionStatus.IDLE:
            self.start()
        elif status is SessionStatus.ACTIVE:
            self.stop()

    # --- Helpers ---

    def _is_model_ready(self) -> bool:
        try:
            return bool(self._recognizer.is_model_ready())
        except Exception as e:
            logger.warning(f"SessionController: model check failed: {type(e).__name__}: {e}")
            return False

    def _fetch_final_hypothesis(self) -> str:
        try:
            return self._recognizer.fetch_final_hypothesis() or ""
        except Exception as e:
            logger.warning(f"SessionController: final hypothesis unavailable: {type(e).__name__}: {e}")
            return ""

    def _set_status(self, new_status: SessionStatus) -> SessionStatus:
        """Must be called with the lock held. Returns the previous status.

        Raises ValueError
        """
        old_status = self._status
        if new_status not in self._VALID_TRANSITIONS[old_status]:
            raise ValueError(f"Invalid session transition: {old_status.name} -> {new_status.name}")
        self._status = new_status
        if self._verbose:
            logger.debug(f"SessionController: {old_status.name} -> {new_status.name}")
        return old_status

    def _notify_observers(self, old_status: SessionStatus, new_status: SessionStatus) -> None:
        with self._lock:
            observers = list(self._observers)
        for observer in observers:
            observer(old_status, new_status)
