"""
Unit tests for the Course data model.

Model contract:
- listing = subject code + number, no separator
- pages and lecture days never hold duplicates
"""

import unittest
from datetime import date

from coursesite.model import Course, CoursePage, DayOfWeek, Instructor, Subject


def _course() -> Course:
    return Course(instructor=Instructor("Richard McKenna", "http://www.cs.stonybrook.edu/~richard"))


class TestCourse(unittest.TestCase):
    def test_listing_concatenates_subject_and_number(self) -> None:
        course = _course()
        course.subject = Subject.CSE
        course.number = 219
        self.assertEqual(course.listing, "CSE219")

    def test_select_page_is_idempotent(self) -> None:
        course = _course()
        course.select_page(CoursePage.HWS)
        course.select_page(CoursePage.HWS)
        self.assertEqual(course.pages, {CoursePage.HWS})
        self.assertTrue(course.has_page(CoursePage.HWS))

        course.unselect_page(CoursePage.HWS)
        course.unselect_page(CoursePage.HWS)
        self.assertFalse(course.has_page(CoursePage.HWS))

    def test_select_lecture_day_toggles_without_flag(self) -> None:
        course = _course()
        course.select_lecture_day(DayOfWeek.TUESDAY)
        self.assertTrue(course.has_lecture_day(DayOfWeek.TUESDAY))
        course.select_lecture_day(DayOfWeek.TUESDAY)
        self.assertFalse(course.has_lecture_day(DayOfWeek.TUESDAY))

    def test_select_lecture_day_with_flag(self) -> None:
        course = _course()
        course.select_lecture_day(DayOfWeek.MONDAY, True)
        course.select_lecture_day(DayOfWeek.MONDAY, True)
        self.assertEqual(course.lecture_days, {DayOfWeek.MONDAY})
        course.select_lecture_day(DayOfWeek.MONDAY, False)
        self.assertEqual(course.lecture_days, set())

    def test_clear(self) -> None:
        course = _course()
        course.add_page(CoursePage.INDEX)
        course.add_lecture_day(DayOfWeek.FRIDAY)
        course.clear_pages()
        course.clear_lecture_days()
        self.assertEqual(course.pages, set())
        self.assertEqual(course.lecture_days, set())

    def test_dates_are_not_validated(self) -> None:
        # a Wednesday start is kept as-is
        course = _course()
        course.set_schedule_dates(date(2024, 1, 3), date(2024, 1, 5))
        self.assertEqual(course.starting_monday, date(2024, 1, 3))
        self.assertEqual(course.ending_friday, date(2024, 1, 5))

    def test_separate_courses_do_not_share_sets(self) -> None:
        a = _course()
        b = _course()
        a.add_page(CoursePage.INDEX)
        self.assertEqual(b.pages, set())


if __name__ == "__main__":
    unittest.main()
