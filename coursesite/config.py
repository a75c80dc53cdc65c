"""
Path configuration for the course site builder.

All locations the storage and export layers touch are collected in one
SiteConfig value that is passed in explicitly. Tests build their own
SiteConfig with for_root() pointing at a temporary directory.

Environment variables (prefix COURSESITE_):

    COURSESITE_ROOT          project root (default: current directory)
    COURSESITE_BASE_DIR      template directory (schedule.html, css/, images/)
    COURSESITE_SITES_DIR     root of the exported course sites
    COURSESITE_COURSES_DIR   where <subject><number>.json files live
    COURSESITE_DATA_DIR      subjects.json and last_instructor.json

Unset or blank directories fall back to the standard layout under the root.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

SUBJECTS_FILE = "subjects.json"
LAST_INSTRUCTOR_FILE = "last_instructor.json"


def default_base_dir() -> Path:
    """
    Return the template directory that ships inside the package.
    """
    return Path(__file__).resolve().parent / "templates" / "base"


def _standard_layout(root: Path) -> dict[str, Path]:
    """
    Standard directory structure under `root`:

        root/data/
        root/data/courses/
        root/sites/
    """
    return {
        "base_dir": default_base_dir(),
        "sites_dir": root / "sites",
        "courses_dir": root / "data" / "courses",
        "data_dir": root / "data",
    }


class SiteConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="COURSESITE_",
        extra="ignore",
        case_sensitive=False,
        frozen=True,
    )

    root: Path
    base_dir: Path
    sites_dir: Path
    courses_dir: Path
    data_dir: Path

    @model_validator(mode="before")
    @classmethod
    def _fill_defaults(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        values = dict(data)
        raw_root = str(values.get("root") or "").strip()
        root = Path(raw_root) if raw_root else Path.cwd()
        values["root"] = root
        for name, default in _standard_layout(root).items():
            if not str(values.get(name) or "").strip():
                values[name] = default
        return values

    @property
    def subjects_path(self) -> Path:
        return self.data_dir / SUBJECTS_FILE

    @property
    def last_instructor_path(self) -> Path:
        return self.data_dir / LAST_INSTRUCTOR_FILE

    @classmethod
    def for_root(cls, root: str | Path, base_dir: str | Path | None = None) -> "SiteConfig":
        """
        Standard layout under `root`, ignoring COURSESITE_* variables.
        """
        values = _standard_layout(Path(root))
        if base_dir is not None:
            values["base_dir"] = Path(base_dir)
        return cls(root=Path(root), **values)

    @classmethod
    def from_env(cls, root: str | Path | None = None) -> "SiteConfig":
        """
        Read COURSESITE_* variables. An explicit `root` takes precedence over
        COURSESITE_ROOT; the directory variables still override the layout.
        """
        if root is None:
            return cls()
        return cls(root=Path(root))
