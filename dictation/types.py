"""Type definitions for dictation session state."""

from dataclasses import dataclass, field
from enum import Enum, auto

# Immutable snapshot of the recognizer's current best transcription
Hypothesis = str


class SessionStatus(Enum):
    """Lifecycle states of a dictation session.

    Transition Rules:
    IDLE → ACTIVE: start() with a loaded model
    ACTIVE → FINALIZING: stop()
    FINALIZING → IDLE: final text reconciled
    ACTIVE → IDLE: cancel() (nothing else is typed)
    """
    IDLE = auto()
    ACTIVE = auto()
    FINALIZING = auto()


@dataclass
class Session:
    """Mutable state of one dictation session, owned by SyncEngine.

    Attributes:
        committed: Tokens already delivered to the text sink, append-only
        last_hypothesis: Hypothesis observed on the previous poll tick
        closed: Set once the session is finalized or discarded; a closed
            session never injects again
    """
    committed: list[str] = field(default_factory=list)
    last_hypothesis: Hypothesis = ""
    closed: bool = False

    @property
    def committed_text(self) -> str:
        return " ".join(self.committed)


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only view of a session for presentation purposes."""
    committed_text: str
    last_hypothesis: Hypothesis
    committed_words: int
