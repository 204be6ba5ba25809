from __future__ import annotations

import logging
import plistlib
import shutil
import sys
import threading
from pathlib import Path

from .paths import LAUNCH_AGENT_LABEL, launch_agent_path

logger = logging.getLogger(__name__)


def default_program_arguments() -> list[str]:
    exe = shutil.which("breathebar")
    if exe:
        return [exe]
    return [sys.executable, "-m", "breathebar"]


class LaunchAgentLoginItem:
    """Registers BreatheBar to start at login via a per-user LaunchAgent plist."""

    def __init__(
        self,
        plist_path: Path | None = None,
        program_arguments: list[str] | None = None,
        label: str = LAUNCH_AGENT_LABEL,
    ):
        self._plist_path = Path(plist_path) if plist_path is not None else launch_agent_path()
        self._program_arguments = program_arguments or default_program_arguments()
        self._label = label
        self._lock = threading.Lock()

    @property
    def plist_path(self) -> Path:
        return self._plist_path

    @property
    def is_registered(self) -> bool:
        return self._plist_path.exists()

    def register(self) -> None:
        plist = {
            "Label": self._label,
            "ProgramArguments": list(self._program_arguments),
            "RunAtLoad": True,
            "ProcessType": "Interactive",
        }
        self._plist_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self._plist_path, "wb") as f:
            plistlib.dump(plist, f)

    def unregister(self) -> None:
        self._plist_path.unlink(missing_ok=True)

    def apply(self, enabled: bool) -> bool:
        """Register or unregister; failures are logged, never raised."""
        with self._lock:
            try:
                if enabled:
                    self.register()
                else:
                    self.unregister()
            except OSError as exc:
                logger.warning("Failed to update launch at login: %s", exc)
                return False
        return True

    def apply_async(self, enabled: bool) -> threading.Thread:
        thread = threading.Thread(
            target=self.apply,
            args=(enabled,),
            name="breathebar-login-item",
            daemon=True,
        )
        thread.start()
        return thread
