"""Playwright fixtures for the staging E2E tests."""

from __future__ import annotations

import re
from collections.abc import Generator
from pathlib import Path

import pytest
from playwright.sync_api import Browser, BrowserContext, Page

from config import E2ESettings
from shared import live_stack
from shared.test_helpers import take_timestamped_screenshot
from tests.e2e.pages.check_in_page import CheckInPage
from tests.e2e.pages.clone_event_page import CloneEventPage
from tests.e2e.pages.create_event_page import DEFAULT_IMAGE, CreateEventPage
from tests.e2e.pages.dashboard_page import DashboardPage
from tests.e2e.pages.edit_ticket_page import EditTicketPage
from tests.e2e.pages.sign_in_page import SignInPage
from tests.e2e.pages.sign_up_page import SignUpPage
from tests.e2e.pages.verification_modal import VerificationModal

DEFAULT_VIEWPORT = {"width": 1280, "height": 720}


@pytest.fixture(scope="session")
def staging_url(settings: E2ESettings) -> Generator[str, None, None]:
    """
    Return the staging base URL once it answers HTTP.

    Set E2E_SKIP_REACHABILITY=1 to skip the probe.
    """
    yield from live_stack.staging_url(settings.base_url)


@pytest.fixture(scope="session")
def browser_context_args(browser_context_args: dict, staging_url: str) -> dict:
    """
    Extend pytest-playwright's context args (device descriptor included).

    Device descriptors carry ``default_browser_type``, which ``new_context``
    does not accept.
    """
    args = dict(browser_context_args)
    args.pop("default_browser_type", None)
    args.setdefault("viewport", DEFAULT_VIEWPORT)
    args["base_url"] = staging_url
    args["ignore_https_errors"] = True
    return args


@pytest.fixture(scope="function")
def context(
    browser: Browser, browser_context_args: dict
) -> Generator[BrowserContext, None, None]:
    context = browser.new_context(**browser_context_args)
    yield context
    context.close()


@pytest.fixture(scope="function")
def page(context: BrowserContext) -> Generator[Page, None, None]:
    page = context.new_page()
    yield page
    page.close()


@pytest.fixture(scope="session")
def event_image() -> Path:
    """PNG uploaded by the create/clone wizard tests."""
    if not DEFAULT_IMAGE.exists():
        pytest.fail(f"Missing test asset {DEFAULT_IMAGE}")
    return DEFAULT_IMAGE


# -----------------------------------------------------------------------------
# Page objects
# -----------------------------------------------------------------------------

@pytest.fixture
def sign_in_page(page: Page, staging_url: str) -> SignInPage:
    return SignInPage(page, staging_url)


@pytest.fixture
def sign_up_page(page: Page, staging_url: str) -> SignUpPage:
    return SignUpPage(page, staging_url)


@pytest.fixture
def verification_modal(page: Page, staging_url: str) -> VerificationModal:
    return VerificationModal(page, staging_url)


@pytest.fixture
def dashboard_page(page: Page, staging_url: str) -> DashboardPage:
    return DashboardPage(page, staging_url)


@pytest.fixture
def create_event_page(page: Page, staging_url: str) -> CreateEventPage:
    return CreateEventPage(page, staging_url)


@pytest.fixture
def clone_event_page(page: Page, staging_url: str) -> CloneEventPage:
    return CloneEventPage(page, staging_url)


@pytest.fixture
def edit_ticket_page(page: Page, staging_url: str) -> EditTicketPage:
    return EditTicketPage(page, staging_url)


@pytest.fixture
def check_in_page(page: Page, staging_url: str) -> CheckInPage:
    return CheckInPage(page, staging_url)


@pytest.hookimpl(tryfirst=True, hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """Capture screenshot on UI test failure."""
    outcome = yield
    report = outcome.get_result()

    if report.when == "call" and report.failed:
        page = item.funcargs.get("page")
        if page:
            test_name = re.sub(r"[^\w.-]+", "_", item.name)
            try:
                screenshot_path = take_timestamped_screenshot(page, test_name)
                print(f"\nScreenshot saved: {screenshot_path}")
            except Exception as exc:  # pragma: no cover - best effort logging
                print(f"\nFailed to capture screenshot: {exc}")
