"""
Session bootstrap for authenticated E2E runs.

Signs the staging test user in once, waits for the success overlay and the
redirect to the dashboard, then persists the browser storage state
(cookies + localStorage) to a JSON file. Authenticated test modules open
their browser contexts from that file instead of signing in again.

Run ``python -m shared.auth_state`` to refresh the file outside pytest.
"""

from __future__ import annotations

import json
import logging
import re
import time
from pathlib import Path

from playwright.sync_api import Browser, Error as PlaywrightError, expect, sync_playwright

from config import E2ESettings, get_settings

logger = logging.getLogger(__name__)

SUCCESS_TIMEOUT_MS = 10_000
REDIRECT_TIMEOUT_MS = 15_000


class AuthBootstrapError(RuntimeError):
    """Signing the test user in did not reach the dashboard."""


def dashboard_url_pattern(base_url: str) -> re.Pattern[str]:
    """Regex matching the dashboard root of ``base_url`` (optional trailing slash)."""
    return re.compile(rf"^{re.escape(base_url.rstrip('/'))}/?$")


def is_state_fresh(path: Path, max_age_seconds: int) -> bool:
    """
    Decide whether a saved storage state can be reused.

    Args:
        path: Storage state JSON written by ``BrowserContext.storage_state``.
        max_age_seconds: Maximum age of the file; 0 means never reuse.

    Returns:
        True when the file exists, is younger than ``max_age_seconds`` and
        holds a ``cookies`` list.
    """
    if max_age_seconds <= 0 or not path.exists():
        return False
    if time.time() - path.stat().st_mtime > max_age_seconds:
        return False
    try:
        with path.open("r", encoding="utf-8") as handle:
            state = json.load(handle)
    except (OSError, ValueError):
        return False
    return isinstance(state, dict) and isinstance(state.get("cookies"), list)


def sign_in_and_save_state(browser: Browser, settings: E2ESettings) -> Path:
    """
    Sign in through the UI and write the storage state file.

    Raises:
        AuthBootstrapError: If the success overlay or the dashboard redirect
            never appears.
    """
    path = settings.auth_state_path
    path.parent.mkdir(parents=True, exist_ok=True)

    context = browser.new_context(base_url=settings.base_url, ignore_https_errors=True)
    try:
        page = context.new_page()
        page.goto(settings.url("/sign-in"))

        page.locator('input[type="email"]').fill(settings.user_email)
        page.locator('input[type="password"]').fill(settings.user_password)
        page.get_by_role("button", name="Sign In").click()

        try:
            expect(page.get_by_role("heading", name="Success!")).to_be_visible(
                timeout=SUCCESS_TIMEOUT_MS
            )
            expect(page).to_have_url(
                dashboard_url_pattern(settings.base_url), timeout=REDIRECT_TIMEOUT_MS
            )
        except (AssertionError, PlaywrightError) as exc:
            raise AuthBootstrapError(
                f"Sign-in for {settings.user_email} did not reach the dashboard at "
                f"{settings.base_url}"
            ) from exc

        context.storage_state(path=str(path))
    finally:
        context.close()

    logger.info("Saved storage state for %s to %s", settings.user_email, path)
    return path


def ensure_auth_state(browser: Browser, settings: E2ESettings) -> Path:
    """Return a usable storage state file, signing in only when needed."""
    path = settings.auth_state_path
    if is_state_fresh(path, settings.auth_state_max_age_seconds):
        logger.info("Reusing storage state at %s", path)
        return path
    logger.info("Storage state at %s missing or stale; signing in", path)
    return sign_in_and_save_state(browser, settings)


def main() -> None:
    """Refresh the storage state with a headless chromium."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    settings = get_settings()
    with sync_playwright() as playwright:
        browser = playwright.chromium.launch(headless=settings.headless)
        try:
            sign_in_and_save_state(browser, settings)
        finally:
            browser.close()


if __name__ == "__main__":
    main()
