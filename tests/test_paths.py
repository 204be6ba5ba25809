from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from breathebar import paths


class PathsTests(unittest.TestCase):
    def test_home_override(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            with mock.patch.dict(os.environ, {"BREATHEBAR_HOME": tmp_dir}):
                self.assertEqual(paths.data_directory(), Path(tmp_dir))
                self.assertEqual(paths.settings_path(), Path(tmp_dir) / "settings.json")
                self.assertEqual(paths.database_path(), Path(tmp_dir) / "breathebar.sqlite3")
                paths.ensure_directories()
                self.assertTrue(Path(tmp_dir).is_dir())

    def test_launch_agent_path(self) -> None:
        path = paths.launch_agent_path()
        self.assertEqual(path.name, "dev.breathebar.app.plist")
        self.assertEqual(path.parent.name, "LaunchAgents")


if __name__ == "__main__":
    unittest.main()
