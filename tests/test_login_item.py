from __future__ import annotations

import plistlib
import tempfile
import unittest
from pathlib import Path

from breathebar.login_item import LaunchAgentLoginItem


class LoginItemTests(unittest.TestCase):
    def test_register_and_unregister(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            plist_path = Path(tmp_dir) / "LaunchAgents" / "dev.breathebar.app.plist"
            item = LaunchAgentLoginItem(plist_path, program_arguments=["/usr/local/bin/breathebar"])

            self.assertTrue(item.apply(True))
            self.assertTrue(item.is_registered)
            with open(plist_path, "rb") as f:
                plist = plistlib.load(f)
            self.assertEqual(plist["Label"], "dev.breathebar.app")
            self.assertEqual(plist["ProgramArguments"], ["/usr/local/bin/breathebar"])
            self.assertTrue(plist["RunAtLoad"])

            self.assertTrue(item.apply(False))
            self.assertFalse(item.is_registered)
            self.assertTrue(item.apply(False))

    def test_failures_are_swallowed(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            blocker = Path(tmp_dir) / "LaunchAgents"
            blocker.write_text("not a directory", encoding="utf-8")
            item = LaunchAgentLoginItem(blocker / "dev.breathebar.app.plist", program_arguments=["breathebar"])
            with self.assertLogs("breathebar.login_item", level="WARNING"):
                self.assertFalse(item.apply(True))


if __name__ == "__main__":
    unittest.main()
