"""
Course site export (course data + HTML template -> static pages).

- Reads the base template directory (schedule.html, css/, images/)
- Fills the schedule page of one course:
  - <title>                  "<subject> <number>"
  - div#banner               "<subject><number> - <semester> <year>", <br>, title
  - div#navbar               links to the selected pages only
  - table#schedule           one header row + one date row per week
  - span#instructor_link     <a href=homepage>instructor name</a>
- Writes:
  - <sites_dir>/<subject><number>/schedule.html
  - <sites_dir>/<subject><number>/css/*      (first export only)
  - <sites_dir>/<subject><number>/images/*   (first export only)

Re-exporting a course overwrites schedule.html with identical output
as long as the course and the template did not change.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Any

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.dammit import EntitySubstitution
from bs4.formatter import HTMLFormatter

from coursesite.config import SiteConfig
from coursesite.errors import ExportError
from coursesite.model import Course, CoursePage, Instructor
from coursesite.schedule import WEEKDAY_HEADERS, format_day, iter_weeks

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Template insertion points
# ---------------------------------------------------------------------------

ID_NAVBAR = "navbar"
ID_BANNER = "banner"
ID_SCHEDULE = "schedule"
ID_INSTRUCTOR_LINK = "instructor_link"

CLASS_SCH = "sch"
CLASS_NAV = "nav"
CLASS_OPEN_NAV = "open_nav"

INDEX_PAGE = "index.html"
SYLLABUS_PAGE = "syllabus.html"
SCHEDULE_PAGE = "schedule.html"
HWS_PAGE = "hws.html"
PROJECTS_PAGE = "projects.html"

CSS_DIR = "css"
IMAGES_DIR = "images"

BANNER_DASH = " - "

# page -> (navbar link id, file name)
PAGE_LINKS: dict[CoursePage, tuple[str, str]] = {
    CoursePage.INDEX: ("home_link", INDEX_PAGE),
    CoursePage.SYLLABUS: ("syllabus_link", SYLLABUS_PAGE),
    CoursePage.SCHEDULE: ("schedule_link", SCHEDULE_PAGE),
    CoursePage.HWS: ("hws_link", HWS_PAGE),
    CoursePage.PROJECTS: ("projects_link", PROJECTS_PAGE),
}

# Escapes &, < and > like the default "minimal" formatter, with 2-space indents.
OUTPUT_FORMATTER = HTMLFormatter(entity_substitution=EntitySubstitution.substitute_xml, indent=2)


def page_file_name(page: Any) -> str:
    """
    File name of a course page.

    Anything that is not one of the known pages falls back to projects.html.
    This fallback is inherited from earlier versions of the builder and kept
    for compatibility; new CoursePage members need their own PAGE_LINKS entry.
    """
    link = PAGE_LINKS.get(page)
    return link[1] if link is not None else PROJECTS_PAGE


class CourseSiteExporter:
    """
    Builds the static site of one course from the base template.

    The exporter never reads or writes course JSON; it only consumes an
    already populated Course.
    """

    def __init__(self, config: SiteConfig) -> None:
        self.config = config

    # -- public API ---------------------------------------------------------

    def course_dir(self, course: Course) -> Path:
        return self.config.sites_dir / course.listing

    def export_course_site(self, course: Course) -> Path:
        """
        Export the site of `course` and return the path of its schedule page.

        The course directory is provisioned with the template's css/ and
        images/ only the first time; the schedule page is always regenerated.
        """
        out_dir = self.course_dir(course)
        if not out_dir.exists():
            self._setup_course_site(out_dir)
        return self.export_schedule_page(course, out_dir)

    def export_schedule_page(self, course: Course, output_dir: str | Path) -> Path:
        out_path = Path(output_dir) / SCHEDULE_PAGE
        soup = self.build_schedule_page(course)
        try:
            out_path.write_text(soup.prettify(formatter=OUTPUT_FORMATTER), encoding="utf-8")
        except (OSError, ValueError) as exc:
            raise ExportError("could not write schedule page", out_path, exc) from exc
        logger.info("Exported schedule page of %s to %s", course.listing, out_path)
        return out_path

    def build_schedule_page(self, course: Course) -> BeautifulSoup:
        """
        Parse the base schedule template and fill it with the course data.
        """
        template_path = self.config.base_dir / SCHEDULE_PAGE
        try:
            soup = BeautifulSoup(template_path.read_text(encoding="utf-8"), "html.parser")
        except (OSError, UnicodeDecodeError) as exc:
            raise ExportError("could not read schedule template", template_path, exc) from exc

        title = soup.find("title")
        if title is None:
            raise ExportError("template has no <title>", template_path)
        title.string = f"{course.subject} {course.number}"

        self._set_banner(soup, course)
        self._set_navbar(soup, course, current=CoursePage.SCHEDULE)
        self._fill_schedule_table(soup, course)
        self._append_instructor(soup, course.instructor)
        return soup

    def get_page_url_path(self, course: Course, page: Any) -> str | None:
        """
        Return the file:// URL of one page of the exported course site,
        or None if no URL can be built for it.
        """
        page_path = self.course_dir(course) / page_file_name(page)
        try:
            return page_path.resolve().as_uri()
        except (OSError, ValueError) as exc:
            logger.warning("No URL for %s: %s", page_path, exc)
            return None

    # -- helpers ------------------------------------------------------------

    def _setup_course_site(self, out_dir: Path) -> None:
        """
        Create the course directory and copy the template assets into it.

        Flat copy, existing files are overwritten. A failure aborts the export
        and leaves whatever was created so far in place.
        """
        logger.info("Setting up new course site in %s", out_dir)
        try:
            out_dir.mkdir(parents=True)
            for sub in (CSS_DIR, IMAGES_DIR):
                target = out_dir / sub
                target.mkdir()
                for src in sorted((self.config.base_dir / sub).iterdir()):
                    if not src.is_file():
                        continue
                    shutil.copyfile(src, target / src.name)
                    logger.debug("Copied %s -> %s", src, target / src.name)
        except OSError as exc:
            raise ExportError("could not set up course site", out_dir, exc) from exc

    def _find_by_id(self, soup: BeautifulSoup, tag_name: str, element_id: str) -> Tag:
        node = soup.find(tag_name, id=element_id)
        if node is None:
            raise ExportError(f"template has no <{tag_name} id={element_id!r}>")
        return node

    def _set_banner(self, soup: BeautifulSoup, course: Course) -> None:
        banner = self._find_by_id(soup, "div", ID_BANNER)
        banner.append(
            NavigableString(f"{course.subject}{course.number}{BANNER_DASH}{course.semester} {course.year}")
        )
        banner.append(soup.new_tag("br"))
        banner.append(NavigableString(course.title))

    def _set_navbar(self, soup: BeautifulSoup, course: Course, current: CoursePage) -> None:
        """
        Point the navbar links at the selected pages and drop the others.
        """
        navbar = self._find_by_id(soup, "div", ID_NAVBAR)
        for page, (link_id, file_name) in PAGE_LINKS.items():
            link = navbar.find("a", id=link_id)
            if not course.has_page(page):
                if link is not None:
                    link.decompose()
                continue
            if link is None:
                raise ExportError(f"template navbar has no <a id={link_id!r}>")
            link["href"] = file_name
            link["class"] = CLASS_OPEN_NAV if page is current else CLASS_NAV

    def _fill_schedule_table(self, soup: BeautifulSoup, course: Course) -> None:
        if course.starting_monday is None or course.ending_friday is None:
            raise ExportError(f"course {course.listing} has no schedule dates")

        table = self._find_by_id(soup, "table", ID_SCHEDULE)
        for week in iter_weeks(course.starting_monday, course.ending_friday):
            header_row = soup.new_tag("tr")
            for label in WEEKDAY_HEADERS:
                header_row.append(self._cell(soup, "th", label))

            data_row = soup.new_tag("tr")
            for day in week:
                data_row.append(self._cell(soup, "td", format_day(day)))

            table.append(header_row)
            table.append(data_row)

    @staticmethod
    def _cell(soup: BeautifulSoup, tag_name: str, text: str) -> Tag:
        cell = soup.new_tag(tag_name, attrs={"class": CLASS_SCH})
        cell.string = text
        return cell

    def _append_instructor(self, soup: BeautifulSoup, instructor: Instructor) -> None:
        span = self._find_by_id(soup, "span", ID_INSTRUCTOR_LINK)
        link = soup.new_tag("a", href=instructor.homepage_url)
        link.string = instructor.name
        span.append(link)
