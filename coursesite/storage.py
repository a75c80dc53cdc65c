"""
JSON persistence for courses, the last used instructor and the subjects list.

Files handled here:

    <courses_dir>/<subject><number>.json   one course
    <data_dir>/last_instructor.json        {"instructorName": ..., "homepageURL": ...}
    <data_dir>/subjects.json               {"subjects": [...]}

The encode_*/decode_* functions are pure (dict in, dict out) and never touch
the file system. CourseFileManager adds the file handling on top.

Course file schema (kept compatible with existing saved files):

    {
      "subject": "CSE",
      "number": 219,
      "title": "Computer Science III",
      "pages": ["INDEX", "SCHEDULE"],
      "instructor": {"instructorName": "...", "homepageURL": "..."},
      "startingMonday": {"year": 2015, "month": 8, "day": 31},
      "endingFriday": {"year": 2015, "month": 12, "day": 11},
      "lectureDays": ["MONDAY", "WEDNESDAY"],
      "semester": "FALL",
      "year": 2015
    }

"semester" and "year" are optional when loading.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Any, Iterable, TypeVar

from coursesite.config import SiteConfig
from coursesite.errors import MalformedDocument, PersistenceError
from coursesite.model import Course, CoursePage, DayOfWeek, Instructor, Semester, Subject

logger = logging.getLogger(__name__)

JSON_SUBJECTS = "subjects"
JSON_SUBJECT = "subject"
JSON_NUMBER = "number"
JSON_TITLE = "title"
JSON_SEMESTER = "semester"
JSON_YEAR = "year"
JSON_PAGES = "pages"
JSON_STARTING_MONDAY = "startingMonday"
JSON_ENDING_FRIDAY = "endingFriday"
JSON_MONTH = "month"
JSON_DAY = "day"
JSON_INSTRUCTOR = "instructor"
JSON_INSTRUCTOR_NAME = "instructorName"
JSON_HOMEPAGE_URL = "homepageURL"
JSON_LECTURE_DAYS = "lectureDays"
JSON_EXT = ".json"

E = TypeVar("E", bound=Enum)


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------


def _get(doc: Any, key: str, kind: type, where: str = "") -> Any:
    """
    Return doc[key] if present and of the given type, else raise MalformedDocument.
    """
    name = f"{where}.{key}" if where else key
    if not isinstance(doc, dict):
        raise MalformedDocument(f"expected an object around {name!r}", key=name)
    if key not in doc:
        raise MalformedDocument(f"missing key {name!r}", key=name)
    value = doc[key]
    # bool is a subclass of int, but true/false is never a valid number here
    if kind is int and isinstance(value, bool):
        raise MalformedDocument(f"{name!r} must be an integer", key=name)
    if not isinstance(value, kind):
        raise MalformedDocument(f"{name!r} must be of type {kind.__name__}", key=name)
    return value


def _enum(enum_cls: type[E], raw: Any, name: str) -> E:
    if not isinstance(raw, str):
        raise MalformedDocument(f"{name!r} must be a string", key=name)
    try:
        return enum_cls[raw]
    except KeyError:
        raise MalformedDocument(f"unknown {enum_cls.__name__} {raw!r} in {name!r}", key=name) from None


def _enum_list(enum_cls: type[E], doc: dict, key: str) -> set[E]:
    raw = _get(doc, key, list)
    return {_enum(enum_cls, x, f"{key}[{i}]") for i, x in enumerate(raw)}


def _encode_date(d: date) -> dict[str, int]:
    return {JSON_YEAR: d.year, JSON_MONTH: d.month, JSON_DAY: d.day}


def _decode_date(doc: dict, key: str) -> date:
    obj = _get(doc, key, dict)
    year = _get(obj, JSON_YEAR, int, key)
    month = _get(obj, JSON_MONTH, int, key)
    day = _get(obj, JSON_DAY, int, key)
    try:
        return date(year, month, day)
    except ValueError as exc:
        raise MalformedDocument(f"{key!r} is not a valid date: {exc}", key=key) from exc


# ---------------------------------------------------------------------------
# Codec
# ---------------------------------------------------------------------------


def course_file_name(subject: Subject, number: int) -> str:
    """
    File name of a course, e.g. 'CSE219.json'.
    """
    return f"{subject}{number}{JSON_EXT}"


def encode_instructor(instructor: Instructor) -> dict[str, str]:
    return {
        JSON_INSTRUCTOR_NAME: instructor.name,
        JSON_HOMEPAGE_URL: instructor.homepage_url,
    }


def decode_instructor(doc: Any, where: str = "") -> Instructor:
    return Instructor(
        name=_get(doc, JSON_INSTRUCTOR_NAME, str, where),
        homepage_url=_get(doc, JSON_HOMEPAGE_URL, str, where),
    )


def encode_course(course: Course) -> dict[str, Any]:
    """
    Convert a Course into its JSON document.

    Dates are written as {year, month, day} objects, not ISO strings.
    Pages and lecture days are sorted so that saving twice gives the same file.
    """
    if course.starting_monday is None or course.ending_friday is None:
        raise ValueError(f"course {course.listing} has no schedule dates")

    return {
        JSON_SUBJECT: str(course.subject),
        JSON_NUMBER: course.number,
        JSON_TITLE: course.title,
        JSON_PAGES: sorted(p.name for p in course.pages),
        JSON_INSTRUCTOR: encode_instructor(course.instructor),
        JSON_STARTING_MONDAY: _encode_date(course.starting_monday),
        JSON_ENDING_FRIDAY: _encode_date(course.ending_friday),
        JSON_LECTURE_DAYS: sorted(d.name for d in course.lecture_days),
        JSON_SEMESTER: course.semester.name,
        JSON_YEAR: course.year,
    }


def decode_course(doc: Any, target: Course | None = None) -> Course:
    """
    Build a Course from its JSON document.

    The whole document is validated before anything is assigned: on
    MalformedDocument the `target` course (if given) is left exactly as it was.
    """
    subject = _enum(Subject, _get(doc, JSON_SUBJECT, str), JSON_SUBJECT)
    number = _get(doc, JSON_NUMBER, int)
    title = _get(doc, JSON_TITLE, str)
    pages = _enum_list(CoursePage, doc, JSON_PAGES)
    lecture_days = _enum_list(DayOfWeek, doc, JSON_LECTURE_DAYS)
    instructor = decode_instructor(_get(doc, JSON_INSTRUCTOR, dict), JSON_INSTRUCTOR)
    starting_monday = _decode_date(doc, JSON_STARTING_MONDAY)
    ending_friday = _decode_date(doc, JSON_ENDING_FRIDAY)

    # optional fields: older files do not have them
    semester = Semester.FALL
    if JSON_SEMESTER in doc:
        semester = _enum(Semester, doc[JSON_SEMESTER], JSON_SEMESTER)
    year = _get(doc, JSON_YEAR, int) if JSON_YEAR in doc else starting_monday.year

    course = target if target is not None else Course(instructor=instructor)
    course.subject = subject
    course.number = number
    course.title = title
    course.semester = semester
    course.year = year
    course.instructor = instructor
    course.clear_pages()
    for page in pages:
        course.add_page(page)
    course.clear_lecture_days()
    for day in lecture_days:
        course.add_lecture_day(day)
    course.set_schedule_dates(starting_monday, ending_friday)
    return course


def encode_string_list(items: Iterable[Any], key: str = JSON_SUBJECTS) -> dict[str, list[str]]:
    return {key: [str(x) for x in items]}


def decode_string_list(doc: Any, key: str = JSON_SUBJECTS) -> list[str]:
    raw = _get(doc, key, list)
    out: list[str] = []
    for i, x in enumerate(raw):
        if not isinstance(x, str):
            raise MalformedDocument(f"'{key}[{i}]' must be a string", key=f"{key}[{i}]")
        out.append(x)
    return out


# ---------------------------------------------------------------------------
# File handling
# ---------------------------------------------------------------------------


def _read_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


def _write_json(path: Path, payload: Any) -> None:
    """
    Write JSON next to `path` first and rename it into place,
    so an interrupted write never leaves a truncated file behind.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    text = json.dumps(payload, indent=2, ensure_ascii=False)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(text)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


class CourseFileManager:
    """
    Saves and loads courses and the small convenience records as JSON files.

    Every failure (missing file, bad JSON, wrong document shape) is raised
    as PersistenceError carrying the path and the original exception.
    """

    def __init__(self, config: SiteConfig) -> None:
        self.config = config

    def course_path(self, course: Course) -> Path:
        return self.config.courses_dir / course_file_name(course.subject, course.number)

    def listing_path(self, listing: str) -> Path:
        """
        Path of a course file from its listing, e.g. 'CSE219'.
        """
        return self.config.courses_dir / f"{listing.strip().upper()}{JSON_EXT}"

    def save_course(self, course: Course) -> Path:
        path = self.course_path(course)
        try:
            _write_json(path, encode_course(course))
        except (OSError, ValueError) as exc:
            raise PersistenceError(path, exc) from exc
        logger.info("Saved course %s to %s", course.listing, path)
        return path

    def load_course(self, path: str | Path, target: Course | None = None) -> Course:
        path = Path(path)
        try:
            course = decode_course(_read_json(path), target)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError, MalformedDocument) as exc:
            raise PersistenceError(path, exc) from exc
        logger.info("Loaded course %s from %s", course.listing, path)
        return course

    def save_last_instructor(self, instructor: Instructor, path: str | Path | None = None) -> Path:
        out = Path(path) if path is not None else self.config.last_instructor_path
        try:
            _write_json(out, encode_instructor(instructor))
        except OSError as exc:
            raise PersistenceError(out, exc) from exc
        return out

    def load_last_instructor(self, path: str | Path | None = None) -> Instructor:
        src = Path(path) if path is not None else self.config.last_instructor_path
        try:
            return decode_instructor(_read_json(src))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError, MalformedDocument) as exc:
            raise PersistenceError(src, exc) from exc

    def save_subjects(self, subjects: Iterable[Any], path: str | Path | None = None) -> Path:
        out = Path(path) if path is not None else self.config.subjects_path
        try:
            _write_json(out, encode_string_list(subjects, JSON_SUBJECTS))
        except OSError as exc:
            raise PersistenceError(out, exc) from exc
        return out

    def load_subjects(self, path: str | Path | None = None) -> list[str]:
        src = Path(path) if path is not None else self.config.subjects_path
        try:
            return decode_string_list(_read_json(src), JSON_SUBJECTS)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError, MalformedDocument) as exc:
            raise PersistenceError(src, exc) from exc
