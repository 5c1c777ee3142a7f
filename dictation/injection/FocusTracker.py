import json
import logging
import subprocess
from typing import Optional

logger = logging.getLogger(__name__)


class FocusTracker:
    """Remembers the Hyprland window that had focus and brings it back.

    Used so that typed text lands in the window the user dictated into, not
    in the dictation overlay.
    """

    def __init__(self, verbose: bool = False) -> None:
        self._verbose = verbose
        self._saved_address: Optional[str] = None

    @property
    def saved_address(self) -> Optional[str]:
        return self._saved_address

    def save_focus(self) -> Optional[str]:
        try:
            result = subprocess.run(
                ["hyprctl", "activewindow", "-j"],
                capture_output=True, text=True, check=True, timeout=2,
            )
            self._saved_address = json.loads(result.stdout).get("address")
        except (OSError, subprocess.SubprocessError, ValueError, AttributeError) as e:
            logger.warning(f"FocusTracker: cannot read active window: {type(e).__name__}: {e}")
            self._saved_address = None

        if self._verbose:
            logger.info(f"FocusTracker: saved window={self._saved_address}")
        return self._saved_address

    def restore_focus(self) -> bool:
        if self._saved_address is None:
            return False

        try:
            result = subprocess.run(
                ["hyprctl", "dispatch", "focuswindow", f"address:{self._saved_address}"],
                capture_output=True, text=True, timeout=2,
            )
        except (OSError, subprocess.SubprocessError) as e:
            logger.warning(f"FocusTracker: cannot focus window: {type(e).__name__}: {e}")
            return False

        if self._verbose:
            logger.info(f"FocusTracker: restore window={self._saved_address} rc={result.returncode}")
        return result.returncode == 0

    def clear(self) -> None:
        self._saved_address = None
