"""Exception types raised by the dictation core and its collaborators."""


class DictationError(Exception):
    """Base class for all dictation errors."""


class RecognizerUnavailable(DictationError):
    """The recognizer could not produce a hypothesis right now.

    Transient: a poll tick that hits this error does nothing and the next
    tick tries again.
    """


class InjectionFailed(DictationError):
    """The text sink could not type the requested text.

    The delta stays uncommitted and is offered again on a later tick.
    """


class NoModelLoaded(DictationError):
    """A session was requested before a speech model was loaded."""
