import logging
import threading
from typing import Any, Dict, Optional, TYPE_CHECKING

from dictation.controllers.SessionController import SessionController
from dictation.injection.FocusTracker import FocusTracker
from dictation.injection.WtypeInjector import WtypeInjector
from dictation.recognition.ScriptedRecognizer import ScriptedRecognizer
from dictation.server.ToggleServer import ToggleServer, default_socket_path
from dictation.sync.InjectionGate import InjectionGate
from dictation.sync.SyncEngine import SyncEngine

if TYPE_CHECKING:
    from dictation.protocols import HypothesisSource, TextSink

logger = logging.getLogger(__name__)


def create_text_sink(config: Dict[str, Any], verbose: bool = False) -> 'TextSink':
    """Build the text sink selected by config['injection']['backend'].

    The Wayland backend remembers the window focused at startup and types
    into it; pynput types into whatever window has focus.
    """
    injection = config['injection']
    if injection['backend'] == 'wtype':
        focus_tracker = None
        if injection['restore_focus']:
            focus_tracker = FocusTracker(verbose=verbose)
            focus_tracker.save_focus()
        return WtypeInjector(
            focus_tracker=focus_tracker,
            focus_delay=injection['focus_delay_ms'] / 1000.0,
            verbose=verbose
        )

    # pynput needs a display server at import time
    from dictation.injection.KeyboardSimulator import KeyboardSimulator
    return KeyboardSimulator()


class DictationApp:
    """Wires recognizer, text sink, sync engine and session controller together.

    A session runs until a newly launched instance asks it to stop through
    the toggle socket, or until a scripted recognizer has replayed all of its
    hypotheses.

    Args:
        config: Configuration dictionary (see dictation.config)
        recognizer: Source of hypotheses
        sink: Optional text sink; built from config when omitted
        verbose: Enable verbose logging
    """

    def __init__(self, config: Dict[str, Any], recognizer: 'HypothesisSource',
                 sink: Optional['TextSink'] = None, verbose: bool = False) -> None:
        self.config = config
        self.recognizer = recognizer
        self.poll_interval: float = config['sync']['poll_interval_ms'] / 1000.0

        self.sink: 'TextSink' = sink if sink is not None else create_text_sink(config, verbose)
        self.gate = InjectionGate(self.sink, verbose=verbose)
        self.engine = SyncEngine(
            recognizer,
            self.gate,
            finalize_delay=config['sync']['finalize_delay_ms'] / 1000.0,
            finalize_wait=config['sync']['finalize_wait_ms'] / 1000.0,
            verbose=verbose
        )
        self.controller = SessionController(
            recognizer, self.engine, poll_interval=self.poll_interval, verbose=verbose
        )

        self.toggle_server: Optional[ToggleServer] = None
        if config['toggle']['enabled']:
            self.toggle_server = ToggleServer(
                default_socket_path(config['toggle']['socket_name']),
                on_stop=self.controller.stop
            )

        self.typed_text: str = ""
        self._finished = threading.Event()
        self.controller.register_session_end_listener(self._on_session_end)

    def _on_session_end(self, text: str) -> None:
        self.typed_text = text
        self._finished.set()

    def _replay_finished(self) -> bool:
        return isinstance(self.recognizer, ScriptedRecognizer) and self.recognizer.is_exhausted()

    def run(self) -> str:
        """Run one dictation session to completion.

        Returns:
            The text typed during the session

        Raises:
            NoModelLoaded: the recognizer has no model loaded
        """
        if self.toggle_server is not None:
            self.toggle_server.start()

        try:
            self.controller.start()
            while not self._finished.wait(self.poll_interval):
                if self._replay_finished():
                    logger.info("DictationApp: replay finished, stopping session")
                    self.controller.stop()
        except KeyboardInterrupt:
            logger.info("DictationApp: interrupted, cancelling session")
            self.controller.cancel()
            raise
        finally:
            self.shutdown()

        return self.typed_text

    def shutdown(self) -> None:
        if self.toggle_server is not None:
            self.toggle_server.stop()
            self.toggle_server = None
