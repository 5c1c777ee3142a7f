"""Text sinks - deliver committed text to the focused window."""
from dictation.injection.FocusTracker import FocusTracker
from dictation.injection.WtypeInjector import WtypeInjector

__all__ = ['FocusTracker', 'WtypeInjector']
