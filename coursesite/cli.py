"""
CLI (Command Line Interface).

Terminal commands for creating, inspecting and exporting course sites:

    coursesite new CSE 219 --title "Computer Science III" --start 2015-08-31 --end 2015-12-11
    coursesite show CSE219
    coursesite export CSE219
    coursesite subjects [--add MAT] [--remove PHY]

COURSE arguments accept either a listing (CSE219) looked up in the courses
directory, or a path to a course JSON file.

Paths come from SiteConfig.from_env(): the standard layout under --root
(default: current directory), overridable with COURSESITE_* variables.
"""

from __future__ import annotations

import argparse
import logging
from datetime import date
from pathlib import Path

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from coursesite.config import SiteConfig
from coursesite.errors import CourseSiteError
from coursesite.exporter import CourseSiteExporter
from coursesite.model import Course, CoursePage, DayOfWeek, Instructor, Semester, Subject
from coursesite.schedule import WEEKDAY_HEADERS, format_day, iter_weeks
from coursesite.storage import JSON_EXT, CourseFileManager

console = Console()


def _parse_date(text: str) -> date:
    try:
        return date.fromisoformat(text.strip())
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date {text!r}, expected YYYY-MM-DD") from None


def _course_path(files: CourseFileManager, ref: str) -> Path:
    """
    Resolve a COURSE argument: existing file or *.json path first, listing otherwise.

    Directories never count as a course file, so a site folder named like the
    listing (sites/CSE219/) does not shadow data/courses/CSE219.json.
    """
    candidate = Path(ref)
    if candidate.suffix == JSON_EXT or candidate.is_file():
        return candidate
    return files.listing_path(ref)


def _cmd_new(args: argparse.Namespace, files: CourseFileManager) -> int:
    """
    Create a course and save it to <courses_dir>/<subject><number>.json.
    """
    if args.end < args.start:
        console.print("End date must not be before start date.")
        return 1

    if args.subject not in _load_catalog(files):
        console.print(f"Subject {args.subject} is not in the subjects catalog.")
        return 1

    if args.instructor_name:
        instructor = Instructor(args.instructor_name, args.instructor_url or "")
    elif files.config.last_instructor_path.exists():
        # reuse whoever taught the last course created here
        instructor = files.load_last_instructor()
    else:
        console.print("Please provide --instructor-name (no remembered instructor yet).")
        return 1

    course = Course(instructor=instructor)
    course.subject = Subject[args.subject]
    course.number = args.number
    course.title = args.title
    course.semester = Semester[args.semester]
    course.year = args.year if args.year is not None else args.start.year
    course.set_schedule_dates(args.start, args.end)
    for page in args.page or [p.name for p in CoursePage]:
        course.select_page(CoursePage[page])
    for day in args.lecture_day or []:
        course.select_lecture_day(DayOfWeek[day], True)

    path = files.save_course(course)
    files.save_last_instructor(instructor)
    console.print(f"Saved {course.listing} to {escape(str(path))}")
    return 0


def _cmd_show(args: argparse.Namespace, files: CourseFileManager) -> int:
    """
    Print course details and its week-by-week schedule.
    """
    course = files.load_course(_course_path(files, args.course))

    console.print(f"[bold]{course.listing}[/bold] {escape(course.title)} ({course.semester} {course.year})")
    console.print(f"Instructor: {escape(course.instructor.name)} <{escape(course.instructor.homepage_url)}>")
    pages = ", ".join(sorted(p.name for p in course.pages)) or "-"
    days = ", ".join(d.name for d in DayOfWeek if d in course.lecture_days) or "-"
    console.print(f"Pages: {pages}")
    console.print(f"Lecture days: {days}")

    table = Table(box=box.SIMPLE_HEAVY)
    for label in WEEKDAY_HEADERS:
        table.add_column(label, justify="center")
    weeks = 0
    for week in iter_weeks(course.starting_monday, course.ending_friday):
        table.add_row(*[format_day(d) for d in week])
        weeks += 1
    console.print(table)
    console.print(f"{weeks} week(s)")
    return 0


def _cmd_export(args: argparse.Namespace, files: CourseFileManager) -> int:
    """
    Export the course site and print where the schedule page ended up.
    """
    course = files.load_course(_course_path(files, args.course))
    exporter = CourseSiteExporter(files.config)
    out_path = exporter.export_course_site(course)

    url = exporter.get_page_url_path(course, CoursePage.SCHEDULE)
    console.print(f"Exported {course.listing} to {escape(str(out_path))}")
    if url:
        console.print(f"Open: {escape(url)}")
    return 0


def _load_catalog(files: CourseFileManager) -> list[str]:
    """
    Subjects offered for new courses. Without a subjects.json every known
    subject is offered.
    """
    if files.config.subjects_path.exists():
        return files.load_subjects()
    return [s.value for s in Subject]


def _cmd_subjects(args: argparse.Namespace, files: CourseFileManager) -> int:
    """
    List the subjects catalog, optionally adding or removing one code first.

    Only known Subject codes can be added: the catalog restricts which
    subjects `new` accepts, it cannot introduce new ones.
    """
    subjects = _load_catalog(files)

    add = (args.add or "").strip().upper()
    if add:
        if add not in Subject.__members__:
            known = ", ".join(Subject.__members__)
            console.print(f"Unknown subject {escape(add)} (known: {known})")
            return 1
        if add in subjects:
            console.print(f"Already listed: {add}")
        else:
            subjects.append(add)
            files.save_subjects(subjects)
            console.print(f"Added: {add} (subjects: {len(subjects)})")

    remove = (args.remove or "").strip().upper()
    if remove:
        if remove not in subjects:
            console.print(f"Not listed: {escape(remove)}")
        else:
            subjects.remove(remove)
            files.save_subjects(subjects)
            console.print(f"Removed: {remove} (subjects: {len(subjects)})")

    for s in subjects:
        console.print(s)
    return 0


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="coursesite", description="Course site builder")
    parser.add_argument("--root", type=str, default=None, help="Project root (default: current directory)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p_new = sub.add_parser("new", help="Create and save a course")
    p_new.add_argument("subject", choices=[s.name for s in Subject], help="Subject code")
    p_new.add_argument("number", type=int, help="Course number (e.g. 219)")
    p_new.add_argument("--title", required=True, help="Course title")
    p_new.add_argument("--semester", choices=[s.name for s in Semester], default=Semester.FALL.name)
    p_new.add_argument("--year", type=int, default=None, help="Defaults to the year of --start")
    p_new.add_argument("--start", type=_parse_date, required=True, help="Starting Monday (YYYY-MM-DD)")
    p_new.add_argument("--end", type=_parse_date, required=True, help="Ending Friday (YYYY-MM-DD)")
    p_new.add_argument("--instructor-name", default=None)
    p_new.add_argument("--instructor-url", default=None)
    p_new.add_argument(
        "--page", action="append", choices=[p.name for p in CoursePage], help="Page to include (repeatable)"
    )
    p_new.add_argument(
        "--lecture-day", action="append", choices=[d.name for d in DayOfWeek], help="Lecture day (repeatable)"
    )

    p_show = sub.add_parser("show", help="Show a course and its schedule")
    p_show.add_argument("course", type=str, help="Listing (e.g. CSE219) or path to a course JSON file")

    p_export = sub.add_parser("export", help="Export the course site")
    p_export.add_argument("course", type=str, help="Listing (e.g. CSE219) or path to a course JSON file")

    p_subjects = sub.add_parser("subjects", help="List or edit the subjects catalog")
    p_subjects.add_argument("--add", type=str, default=None, help="Subject code to add")
    p_subjects.add_argument("--remove", type=str, default=None, help="Subject code to remove")

    return parser


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    files = CourseFileManager(SiteConfig.from_env(args.root))
    handlers = {
        "new": _cmd_new,
        "show": _cmd_show,
        "export": _cmd_export,
        "subjects": _cmd_subjects,
    }

    try:
        raise SystemExit(handlers[args.command](args, files))
    except CourseSiteError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise SystemExit(1) from exc
