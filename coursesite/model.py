"""
Central data model definitions used across the project.

This module defines the canonical structure of a Course so that:
- the JSON storage and the site exporter share the same field names
- a course's identity (subject + number) is computed in exactly one place

The model carries no validation beyond keeping pages and lecture days unique.
Dates are stored as given; nothing here checks that starting_monday really
is a Monday.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum


class Subject(Enum):
    """Department codes a course can belong to."""

    CSE = "CSE"
    ISE = "ISE"
    AMS = "AMS"
    MAT = "MAT"
    PHY = "PHY"
    ESE = "ESE"

    def __str__(self) -> str:
        return self.value


class Semester(Enum):
    FALL = "FALL"
    WINTER = "WINTER"
    SPRING = "SPRING"
    SUMMER = "SUMMER"

    def __str__(self) -> str:
        return self.value


class CoursePage(Enum):
    """Pages a course site can offer."""

    INDEX = "INDEX"
    SYLLABUS = "SYLLABUS"
    SCHEDULE = "SCHEDULE"
    HWS = "HWS"
    PROJECTS = "PROJECTS"

    def __str__(self) -> str:
        return self.value


class DayOfWeek(Enum):
    MONDAY = "MONDAY"
    TUESDAY = "TUESDAY"
    WEDNESDAY = "WEDNESDAY"
    THURSDAY = "THURSDAY"
    FRIDAY = "FRIDAY"
    SATURDAY = "SATURDAY"
    SUNDAY = "SUNDAY"

    def __str__(self) -> str:
        return self.value


@dataclass
class Instructor:
    """
    The person teaching a course.

    An Instructor belongs to one Course at a time, but can be swapped out
    with Course.instructor = Instructor(...).
    """

    name: str = ""
    homepage_url: str = ""


@dataclass
class Course:
    """
    Represents one course offering as stored in <subject><number>.json
    and exported as a course site.
    """

    instructor: Instructor
    subject: Subject = Subject.CSE
    number: int = 0
    title: str = ""
    semester: Semester = Semester.FALL
    year: int = 0
    starting_monday: date | None = None
    ending_friday: date | None = None
    pages: set[CoursePage] = field(default_factory=set)
    lecture_days: set[DayOfWeek] = field(default_factory=set)

    @property
    def listing(self) -> str:
        """
        External identity of the course, e.g. 'CSE219'.

        Used for both the JSON file name and the site directory name,
        so it must stay stable for existing saved files.
        """
        return f"{self.subject}{self.number}"

    def set_schedule_dates(self, starting_monday: date, ending_friday: date) -> None:
        self.starting_monday = starting_monday
        self.ending_friday = ending_friday

    # -- pages --------------------------------------------------------------

    def has_page(self, page: CoursePage) -> bool:
        return page in self.pages

    def add_page(self, page: CoursePage) -> None:
        self.pages.add(page)

    def select_page(self, page: CoursePage) -> None:
        self.pages.add(page)

    def unselect_page(self, page: CoursePage) -> None:
        self.pages.discard(page)

    def clear_pages(self) -> None:
        self.pages.clear()

    # -- lecture days -------------------------------------------------------

    def has_lecture_day(self, day: DayOfWeek) -> bool:
        return day in self.lecture_days

    def add_lecture_day(self, day: DayOfWeek) -> None:
        self.lecture_days.add(day)

    def select_lecture_day(self, day: DayOfWeek, selected: bool | None = None) -> None:
        """
        Select or unselect a lecture day.

        Without an explicit `selected` flag the day is toggled, which is what a
        checkbox click maps to.
        """
        if selected is None:
            selected = day not in self.lecture_days
        if selected:
            self.lecture_days.add(day)
        else:
            self.lecture_days.discard(day)

    def clear_lecture_days(self) -> None:
        self.lecture_days.clear()
