import os
import unittest
from pathlib import Path
from unittest import mock

from coursesite.config import SiteConfig, default_base_dir


class TestSiteConfig(unittest.TestCase):
    def test_standard_layout(self) -> None:
        with mock.patch.dict(os.environ, {}, clear=True):
            cfg = SiteConfig.from_env("/srv/csb")
        self.assertEqual(cfg.sites_dir, Path("/srv/csb/sites"))
        self.assertEqual(cfg.courses_dir, Path("/srv/csb/data/courses"))
        self.assertEqual(cfg.subjects_path, Path("/srv/csb/data/subjects.json"))
        self.assertEqual(cfg.last_instructor_path, Path("/srv/csb/data/last_instructor.json"))
        self.assertEqual(cfg.base_dir, default_base_dir())

    def test_env_overrides(self) -> None:
        env = {"COURSESITE_SITES_DIR": "/var/www/courses", "COURSESITE_BASE_DIR": ""}
        with mock.patch.dict(os.environ, env, clear=True):
            cfg = SiteConfig.from_env("/srv/csb")
        self.assertEqual(cfg.sites_dir, Path("/var/www/courses"))
        self.assertEqual(cfg.courses_dir, Path("/srv/csb/data/courses"))
        # blank values fall back to the default
        self.assertEqual(cfg.base_dir, default_base_dir())

    def test_root_from_env(self) -> None:
        with mock.patch.dict(os.environ, {"COURSESITE_ROOT": "/opt/csb"}, clear=True):
            cfg = SiteConfig.from_env()
        self.assertEqual(cfg.root, Path("/opt/csb"))
        self.assertEqual(cfg.data_dir, Path("/opt/csb/data"))

    def test_explicit_root_wins_over_env_root(self) -> None:
        with mock.patch.dict(os.environ, {"COURSESITE_ROOT": "/opt/csb"}, clear=True):
            cfg = SiteConfig.from_env("/srv/csb")
        self.assertEqual(cfg.sites_dir, Path("/srv/csb/sites"))

    def test_for_root_ignores_env(self) -> None:
        with mock.patch.dict(os.environ, {"COURSESITE_SITES_DIR": "/var/www/courses"}, clear=True):
            cfg = SiteConfig.for_root("/srv/csb", base_dir="/srv/templates")
        self.assertEqual(cfg.sites_dir, Path("/srv/csb/sites"))
        self.assertEqual(cfg.base_dir, Path("/srv/templates"))

    def test_config_is_frozen(self) -> None:
        cfg = SiteConfig.for_root("/srv/csb")
        with self.assertRaises(Exception):
            cfg.sites_dir = Path("/elsewhere")

    def test_packaged_template_exists(self) -> None:
        self.assertTrue((default_base_dir() / "schedule.html").is_file())


if __name__ == "__main__":
    unittest.main()
