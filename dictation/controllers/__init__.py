"""Session lifecycle controllers."""
from dictation.controllers.SessionController import SessionController

__all__ = ['SessionController']
