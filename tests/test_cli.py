"""
Tests for CLI entry points.

Every command runs against a temporary --root so no real course data
or sites are touched.
"""

import json
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from coursesite.cli import main


NEW_CSE219 = (
    "new", "CSE", "219",
    "--title", "Computer Science III",
    "--start", "2015-08-31",
    "--end", "2015-12-11",
    "--instructor-name", "Richard McKenna",
    "--instructor-url", "http://www.cs.stonybrook.edu/~richard",
    "--page", "INDEX",
    "--page", "SCHEDULE",
    "--lecture-day", "TUESDAY",
)


class TestCLI(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.root = Path(self._tmp.name)
        env = {k: v for k, v in os.environ.items() if not k.upper().startswith("COURSESITE_")}
        patcher = mock.patch.dict(os.environ, env, clear=True)
        patcher.start()
        self.addCleanup(patcher.stop)

    def _run(self, *argv: str) -> int:
        with self.assertRaises(SystemExit) as ctx:
            main(list(argv))
        return ctx.exception.code

    def test_new_saves_course_and_remembers_instructor(self) -> None:
        self.assertEqual(self._run("--root", str(self.root), *NEW_CSE219), 0)

        data = json.loads((self.root / "data" / "courses" / "CSE219.json").read_text(encoding="utf-8"))
        self.assertEqual(data["title"], "Computer Science III")
        self.assertEqual(data["pages"], ["INDEX", "SCHEDULE"])
        self.assertEqual(data["lectureDays"], ["TUESDAY"])
        self.assertEqual(data["year"], 2015)

        last = json.loads((self.root / "data" / "last_instructor.json").read_text(encoding="utf-8"))
        self.assertEqual(last["instructorName"], "Richard McKenna")

    def test_new_reuses_last_instructor(self) -> None:
        self._run("--root", str(self.root), *NEW_CSE219)
        code = self._run(
            "--root", str(self.root),
            "new", "ISE", "305", "--title", "Databases", "--start", "2015-08-31", "--end", "2015-09-04",
        )
        self.assertEqual(code, 0)
        data = json.loads((self.root / "data" / "courses" / "ISE305.json").read_text(encoding="utf-8"))
        self.assertEqual(data["instructor"]["instructorName"], "Richard McKenna")
        # no --page given: every page is selected
        self.assertEqual(len(data["pages"]), 5)

    def test_new_without_instructor_fails(self) -> None:
        code = self._run(
            "--root", str(self.root),
            "new", "CSE", "101", "--title", "Intro", "--start", "2024-01-01", "--end", "2024-01-05",
        )
        self.assertNotEqual(code, 0)

    def test_new_rejects_end_before_start(self) -> None:
        code = self._run(
            "--root", str(self.root),
            "new", "CSE", "101", "--title", "Intro", "--start", "2024-01-08", "--end", "2024-01-05",
            "--instructor-name", "Ada",
        )
        self.assertNotEqual(code, 0)

    def test_show_and_export(self) -> None:
        self._run("--root", str(self.root), *NEW_CSE219)
        self.assertEqual(self._run("--root", str(self.root), "show", "CSE219"), 0)
        self.assertEqual(self._run("--root", str(self.root), "export", "cse219"), 0)
        self.assertTrue((self.root / "sites" / "CSE219" / "schedule.html").exists())
        self.assertTrue((self.root / "sites" / "CSE219" / "css").is_dir())

    def test_export_by_path(self) -> None:
        self._run("--root", str(self.root), *NEW_CSE219)
        path = self.root / "data" / "courses" / "CSE219.json"
        self.assertEqual(self._run("--root", str(self.root), "export", str(path)), 0)

    def test_unknown_course_fails(self) -> None:
        self.assertEqual(self._run("--root", str(self.root), "export", "CSE999"), 1)

    def test_subjects_add_rejects_unknown_code(self) -> None:
        self.assertEqual(self._run("--root", str(self.root), "subjects", "--add", "bio"), 1)
        self.assertFalse((self.root / "data" / "subjects.json").exists())
        # an unknown code can never be used for a course either
        code = self._run(
            "--root", str(self.root),
            "new", "BIO", "101", "--title", "Biology", "--start", "2024-01-01", "--end", "2024-01-05",
            "--instructor-name", "Ada",
        )
        self.assertEqual(code, 2)

    def test_subjects_catalog_controls_new(self) -> None:
        self.assertEqual(self._run("--root", str(self.root), "subjects", "--remove", "ams"), 0)
        data = json.loads((self.root / "data" / "subjects.json").read_text(encoding="utf-8"))
        self.assertNotIn("AMS", data["subjects"])
        self.assertIn("CSE", data["subjects"])

        new_ams = (
            "--root", str(self.root),
            "new", "AMS", "210", "--title", "Applied Linear Algebra",
            "--start", "2024-01-01", "--end", "2024-01-05", "--instructor-name", "Ada",
        )
        self.assertEqual(self._run(*new_ams), 1)
        self.assertFalse((self.root / "data" / "courses" / "AMS210.json").exists())

        self.assertEqual(self._run("--root", str(self.root), "subjects", "--add", "AMS"), 0)
        self.assertEqual(self._run("--root", str(self.root), "subjects", "--add", "AMS"), 0)
        data = json.loads((self.root / "data" / "subjects.json").read_text(encoding="utf-8"))
        self.assertEqual(data["subjects"].count("AMS"), 1)

        self.assertEqual(self._run(*new_ams), 0)
        self.assertTrue((self.root / "data" / "courses" / "AMS210.json").exists())

    def test_site_directory_does_not_shadow_listing(self) -> None:
        self._run("--root", str(self.root), *NEW_CSE219)
        self.assertEqual(self._run("--root", str(self.root), "export", "CSE219"), 0)

        # from inside sites/, "CSE219" is also the name of the exported folder
        old_cwd = os.getcwd()
        os.chdir(self.root / "sites")
        self.addCleanup(os.chdir, old_cwd)
        self.assertEqual(self._run("--root", str(self.root), "export", "CSE219"), 0)
        self.assertEqual(self._run("--root", str(self.root), "show", "CSE219"), 0)

    def test_bad_date_is_a_usage_error(self) -> None:
        code = self._run("--root", str(self.root), "new", "CSE", "1", "--title", "x", "--start", "soon", "--end", "later")
        self.assertEqual(code, 2)


if __name__ == "__main__":
    unittest.main()
