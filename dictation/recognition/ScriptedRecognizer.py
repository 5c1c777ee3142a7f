import logging
import threading
from pathlib import Path
from typing import Iterable, Optional

from dictation.errors import RecognizerUnavailable

logger = logging.getLogger(__name__)


class ScriptedRecognizer:
    """Replays a recorded sequence of hypotheses instead of live recognition.

    Each fetch_hypothesis() call returns the next hypothesis; once the
    sequence is exhausted the last one is returned again. The final
    hypothesis is the last entry. Used for testing and demos in place of a
    live recognizer, the way a WAV file stands in for the microphone.

    Args:
        hypotheses: Sequence of interim hypotheses, oldest first
        final_hypothesis: Terminal hypothesis; defaults to the last entry
    """

    def __init__(self, hypotheses: Iterable[str],
                 final_hypothesis: Optional[str] = None) -> None:
        self._hypotheses: list[str] = list(hypotheses)
        self._final = final_hypothesis
        self._position = 0
        self._lock = threading.Lock()

    @classmethod
    def from_file(cls, file_path: str) -> 'ScriptedRecognizer':
        """Load hypotheses from a UTF-8 text file, one per line.

        Raises:
            FileNotFoundError: the file does not exist
        """
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"Hypothesis file not found: {file_path}")

        lines = path.read_text(encoding='utf-8').splitlines()
        logger.info(f"ScriptedRecognizer: loaded {len(lines)} hypotheses from {path.name}")
        return cls(lines)

    def is_model_ready(self) -> bool:
        return bool(self._hypotheses)

    def fetch_hypothesis(self) -> str:
        with self._lock:
            if not self._hypotheses:
                raise RecognizerUnavailable("No hypotheses loaded")
            hypothesis = self._hypotheses[min(self._position, len(self._hypotheses) - 1)]
            self._position += 1
            return hypothesis

    def fetch_final_hypothesis(self) -> str:
        if self._final is not None:
            return self._final
        return self._hypotheses[-1] if self._hypotheses else ""

    def is_exhausted(self) -> bool:
        with self._lock:
            return self._position >= len(self._hypotheses)

    def rewind(self) -> None:
        with self._lock:
            self._position = 0
