"""Protocol definitions for the collaborators of the dictation core.

This module defines structural interfaces using Python's Protocol for duck typing.
The recognizer and the text sink live outside the core; the core only talks
to them through these narrow calls.
"""

from typing import Protocol

from dictation.types import Hypothesis, SessionStatus


class HypothesisSource(Protocol):
    """Pull interface to a running speech recognizer.

    Implementations may be queried from a background timer thread.
    """

    def fetch_hypothesis(self) -> Hypothesis:
        """Return the current best transcription for the session so far.

        May return an empty string. Transient failures are raised as
        RecognizerUnavailable (any other exception is treated the same way).
        """
        ...

    def fetch_final_hypothesis(self) -> Hypothesis:
        """Return the authoritative transcription once recording has stopped.

        Called exactly once per session.
        """
        ...

    def is_model_ready(self) -> bool:
        ...


class TextSink(Protocol):
    """Types text into whatever window currently has input focus."""

    def inject_text(self, text: str) -> None:
        """Type text at the cursor of the focused window.

        Raises:
            InjectionFailed: the text could not be typed
        """
        ...


class SessionObserver(Protocol):
    """Callable notified on every session status change.

    Called outside the controller lock, possibly from a background thread.
    """

    def __call__(self, old_status: SessionStatus, new_status: SessionStatus) -> None:
        ...
