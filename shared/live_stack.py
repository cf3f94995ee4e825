"""Staging reachability helpers for the E2E suite."""

from __future__ import annotations

import logging
import os
import time
from collections.abc import Generator

import requests

logger = logging.getLogger(__name__)


def is_staging_reachable(url: str, timeout: int = 5) -> bool:
    """Return True when the staging front end answers with a non-5xx status."""
    try:
        response = requests.get(url, timeout=timeout, allow_redirects=True)
    except requests.RequestException as exc:
        logger.debug("Staging probe for %s failed: %s", url, exc)
        return False
    return response.status_code < 500


def wait_for_staging(url: str, timeout: int = 60, interval: int = 1) -> None:
    """Poll the staging base URL until it answers or ``timeout`` seconds pass."""
    deadline = time.time() + timeout
    while time.time() < deadline:
        if is_staging_reachable(url):
            return
        time.sleep(interval)
    raise RuntimeError(f"Staging at {url} not reachable after {timeout}s")


def staging_url(
    base_url: str,
    *,
    skip_probe_env: str = "E2E_SKIP_REACHABILITY",
    timeout: int = 60,
) -> Generator[str, None, None]:
    """
    Yield the staging base URL once it is reachable.

    The suite never starts or stops staging; it only refuses to open a
    browser against a deployment that is down. Set ``skip_probe_env`` to
    a truthy value to skip the probe (e.g. behind an auth proxy that
    rejects plain HTTP clients).
    """
    if os.getenv(skip_probe_env, "").lower() in {"1", "true", "yes"}:
        yield base_url
        return

    logger.info("Waiting for staging at %s", base_url)
    wait_for_staging(base_url, timeout=timeout)
    yield base_url
