import logging
import subprocess
import time
from typing import Optional, TYPE_CHECKING

from dictation.errors import InjectionFailed

if TYPE_CHECKING:
    from dictation.injection.FocusTracker import FocusTracker

logger = logging.getLogger(__name__)


class WtypeInjector:
    """Text sink for Wayland compositors using the ``wtype`` tool.

    If a FocusTracker is given, the previously focused window is focused
    again before each injection.

    Args:
        focus_tracker: Optional tracker of the window to type into
        focus_delay: Seconds to let the focus change complete
        verbose: Enable verbose logging
    """

    def __init__(self, focus_tracker: Optional['FocusTracker'] = None,
                 focus_delay: float = 0.03, verbose: bool = False) -> None:
        self._focus_tracker = focus_tracker
        self._focus_delay = focus_delay
        self._verbose = verbose

    def inject_text(self, text: str) -> None:
        """Type text into the focused window.

        Raises:
            InjectionFailed: wtype is missing or exited with an error
        """
        if not text:
            return

        if self._focus_tracker is not None and self._focus_tracker.restore_focus():
            time.sleep(self._focus_delay)

        try:
            result = subprocess.run(["wtype", "--", text], capture_output=True, text=True)
        except OSError as e:
            raise InjectionFailed(f"Failed to run wtype: {e}") from e

        if result.returncode != 0:
            raise InjectionFailed(f"wtype failed: {result.stderr.strip()}")

        if self._verbose:
            logger.debug(f"WtypeInjector: typed {len(text)} chars")
