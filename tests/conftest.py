# tests/conftest.py
import threading
from typing import Callable, List, Optional

import pytest

from dictation.errors import InjectionFailed, RecognizerUnavailable


class FakeRecognizer:
    """HypothesisSource returning queued hypotheses one per fetch.

    Entries that are exceptions are raised instead of returned.
    """

    def __init__(self, hypotheses=None, final: str = "", model_ready: bool = True) -> None:
        self.hypotheses: List = list(hypotheses or [])
        self.final = final
        self.model_ready = model_ready
        self.final_calls = 0

    def push(self, *hypotheses) -> None:
        self.hypotheses.extend(hypotheses)

    def fetch_hypothesis(self) -> str:
        if not self.hypotheses:
            raise RecognizerUnavailable("nothing queued")
        item = self.hypotheses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def fetch_final_hypothesis(self) -> str:
        self.final_calls += 1
        if isinstance(self.final, Exception):
            raise self.final
        return self.final

    def is_model_ready(self) -> bool:
        return self.model_ready


class RecordingSink:
    """TextSink remembering every injected text.

    fail_next makes the next N calls raise InjectionFailed. on_inject runs
    inside the sink call, before the text is recorded.
    """

    def __init__(self) -> None:
        self.injected: List[str] = []
        self.fail_next = 0
        self.on_inject: Optional[Callable[[str], None]] = None
        self._lock = threading.Lock()

    def inject_text(self, text: str) -> None:
        if self.on_inject is not None:
            self.on_inject(text)
        with self._lock:
            if self.fail_next > 0:
                self.fail_next -= 1
                raise InjectionFailed("sink rejected text")
            self.injected.append(text)

    @property
    def typed(self) -> str:
        return "".join(self.injected)


@pytest.fixture
def recognizer():
    return FakeRecognizer()


@pytest.fixture
def sink():
    return RecordingSink()
