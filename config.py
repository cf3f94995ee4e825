"""
E2E suite configuration module.

This module defines the settings the browser suite runs with and the
declarative project matrix (browser + device profiles). Values are loaded
from environment variables, optionally seeded from a local ``.env`` file,
with defaults that point at the shared staging test user.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path

import yaml
from dotenv import load_dotenv

# Base directory of the project
BASE_DIR = Path(__file__).resolve().parent

PROJECTS_FILE = BASE_DIR / "projects.yml"

SUPPORTED_BROWSERS = frozenset({"chromium", "firefox", "webkit"})

# Fixed staging account used by the sign-in flows and the session bootstrap
DEFAULT_USER_EMAIL = "t.adewale@getbookt.io"
DEFAULT_USER_PASSWORD = "Damilare@26"

_TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(name: str, default: str = "") -> bool:
    return os.environ.get(name, default).strip().lower() in _TRUTHY


@dataclass
class E2ESettings:
    """Runtime settings for the staging E2E suite."""

    base_url: str = "http://localhost:3000"
    user_email: str = DEFAULT_USER_EMAIL
    user_password: str = DEFAULT_USER_PASSWORD
    auth_state_path: Path = BASE_DIR / ".auth" / "user.json"
    auth_state_max_age_seconds: int = 3600
    headless: bool = True
    ci: bool = False
    retries: int = 0
    project: str | None = None
    allow_check_in: bool = False

    def url(self, path: str = "") -> str:
        """Join ``path`` onto the base URL."""
        if not path:
            return self.base_url
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"

    @classmethod
    def from_env(cls) -> "E2ESettings":
        """
        Build settings from the process environment.

        A ``.env`` file in the project root is loaded first; variables
        already present in the environment win over the file.
        """
        load_dotenv(BASE_DIR / ".env", override=False)

        ci = _env_flag("CI")
        auth_state = os.environ.get("AUTH_STATE_PATH")
        auth_state_path = Path(auth_state) if auth_state else BASE_DIR / ".auth" / "user.json"
        if not auth_state_path.is_absolute():
            auth_state_path = BASE_DIR / auth_state_path

        return cls(
            base_url=os.environ.get("BASE_URL") or "http://localhost:3000",
            user_email=os.environ.get("TEST_USER_EMAIL") or DEFAULT_USER_EMAIL,
            user_password=os.environ.get("TEST_USER_PASSWORD") or DEFAULT_USER_PASSWORD,
            auth_state_path=auth_state_path,
            auth_state_max_age_seconds=int(os.environ.get("AUTH_STATE_MAX_AGE", "3600")),
            headless=os.environ.get("PLAYWRIGHT_HEADLESS", "true").lower() in _TRUTHY,
            ci=ci,
            retries=2 if ci else 0,
            project=os.environ.get("E2E_PROJECT") or None,
            allow_check_in=_env_flag("E2E_ALLOW_CHECK_IN"),
        )


@lru_cache(maxsize=1)
def get_settings() -> E2ESettings:
    """Return the settings for this process (read once from the environment)."""
    return E2ESettings.from_env()


# -----------------------------------------------------------------------------
# Project matrix
# -----------------------------------------------------------------------------

@dataclass
class Project:
    """One browser/device profile from ``projects.yml``."""

    name: str
    browser: str
    device: str | None = None
    authenticated: bool = False
    test_match: list[str] = field(default_factory=list)
    test_ignore: list[str] = field(default_factory=list)

    def selects(self, nodeid: str) -> bool:
        """
        Decide whether a collected test belongs to this project.

        Args:
            nodeid: pytest node id, e.g. ``tests/e2e/dashboard/test_x.py::T::t``.

        Returns:
            True when the node id matches one of ``test_match`` (or no
            match rules are set) and none of ``test_ignore``.
        """
        if self.test_match and not any(re.search(p, nodeid) for p in self.test_match):
            return False
        return not any(re.search(p, nodeid) for p in self.test_ignore)


def _as_list(value) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return [str(item) for item in value]


def load_projects(path: Path = PROJECTS_FILE) -> dict[str, Project]:
    """
    Read the project matrix from a YAML file.

    Args:
        path: YAML file with a top-level ``projects`` list.

    Returns:
        Projects keyed by name, in file order.

    Raises:
        ValueError: If an entry lacks ``name``/``browser`` or names an
            unsupported browser.
    """
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}

    projects: dict[str, Project] = {}
    for entry in data.get("projects", []):
        name = entry.get("name")
        browser = entry.get("browser")
        if not name or not browser:
            raise ValueError(f"Project entry needs 'name' and 'browser': {entry!r}")
        if browser not in SUPPORTED_BROWSERS:
            raise ValueError(f"Project {name!r} uses unsupported browser {browser!r}")

        projects[name] = Project(
            name=name,
            browser=browser,
            device=entry.get("device"),
            authenticated=bool(entry.get("authenticated", False)),
            test_match=_as_list(entry.get("test_match")),
            test_ignore=_as_list(entry.get("test_ignore")),
        )
    return projects


def get_project(name: str, path: Path = PROJECTS_FILE) -> Project:
    """
    Look up a single project by name.

    Raises:
        KeyError: If the project is not declared in the matrix.
    """
    projects = load_projects(path)
    try:
        return projects[name]
    except KeyError:
        known = ", ".join(projects)
        raise KeyError(f"Unknown project {name!r}; known projects: {known}") from None
