"""
System tray icon for BreatheBar
"""

from __future__ import annotations

from typing import Callable

import pystray
from PIL import Image

from .models import ReminderSnapshot

TrayAction = Callable[[str], None]


class TrayIcon:
    """System tray icon manager; menu clicks are forwarded as action names"""

    def __init__(
        self,
        post_action: TrayAction,
        snapshot: ReminderSnapshot,
        image: Image.Image,
        debug: bool = False,
    ):
        self._post_action = post_action
        self._snapshot = snapshot
        self._debug = debug
        self.icon = pystray.Icon("breathebar", image, "BreatheBar", self._build_menu())

    def _build_menu(self) -> pystray.Menu:
        items = [
            pystray.MenuItem(
                "Done",
                self._action("done"),
                visible=lambda item: self._snapshot.is_breathing_active,
            ),
            pystray.MenuItem(
                "Breathe now…",
                self._action("breathe"),
                default=True,
            ),
            pystray.Menu.SEPARATOR,
            pystray.MenuItem(
                "Remind me to Breathe",
                self._action("toggle_primed"),
                checked=lambda item: self._snapshot.is_primed,
            ),
            pystray.MenuItem("Settings…", self._action("settings")),
            pystray.MenuItem("About BreatheBar", self._action("about")),
            pystray.Menu.SEPARATOR,
        ]
        if self._debug:
            items.append(
                pystray.MenuItem(
                    lambda item: "Stop Test Animation" if self._snapshot.is_breathing_active else "Test Animation",
                    self._action("test_animation"),
                )
            )
        items.append(pystray.MenuItem("Quit BreatheBar", self._action("quit")))
        return pystray.Menu(*items)

    def _action(self, name: str):
        def _handler(icon, item) -> None:
            self._post_action(name)

        return _handler

    def update(self, snapshot: ReminderSnapshot, image: Image.Image, tooltip: str) -> None:
        self._snapshot = snapshot
        self.icon.icon = image
        self.icon.title = tooltip
        self.icon.update_menu()

    def set_image(self, image: Image.Image) -> None:
        self.icon.icon = image

    def run(self) -> None:
        """Start the icon without blocking; the tk main loop keeps running"""
        self.icon.run_detached()

    def stop(self) -> None:
        if self.icon:
            self.icon.stop()
