# dictation/__init__.py
from .errors import DictationError, RecognizerUnavailable, InjectionFailed, NoModelLoaded
from .types import Session, SessionSnapshot, SessionStatus
from .sync.StabilityMatcher import stable_prefix, tokenize
from .sync.InjectionGate import InjectionGate
from .sync.SyncEngine import SyncEngine
from .controllers.SessionController import SessionController

__all__ = [
    'DictationError',
    'RecognizerUnavailable',
    'InjectionFailed',
    'NoModelLoaded',
    'Session',
    'SessionSnapshot',
    'SessionStatus',
    'stable_prefix',
    'tokenize',
    'InjectionGate',
    'SyncEngine',
    'SessionController',
]
