"""
Ordered test classes that stop at their first failing step.

A class marked ``@pytest.mark.serial`` runs its tests as one chain: once a
step fails, every later step in the class is reported as xfail instead of
running against half-built staging data. A step that fails and then passes
on a pytest-rerunfailures rerun does not stop the chain.

Registered from ``tests/conftest.py`` via ``pytest_plugins``.
"""

from __future__ import annotations

import pytest

# Maps a serial class node id to the name of the step that failed in it
serial_failures_key = pytest.StashKey[dict]()


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "serial: class whose tests run in order and stop at the first failure"
    )


def _serial_key(item) -> str | None:
    if item.get_closest_marker("serial") is None or item.cls is None:
        return None
    return item.parent.nodeid


def _failures(config) -> dict[str, str]:
    return config.stash.setdefault(serial_failures_key, {})


def pytest_runtest_makereport(item, call):
    """Remember the failing step of a serial class, forget it once a rerun passes."""
    key = _serial_key(item)
    if key is None:
        return
    failures = _failures(item.config)

    if call.excinfo is None:
        if call.when == "call" and failures.get(key) == item.name:
            del failures[key]
        return
    if call.excinfo.errisinstance((pytest.skip.Exception, pytest.xfail.Exception)):
        return
    failures.setdefault(key, item.name)


def pytest_runtest_setup(item):
    """Stop a serial class after its first failure."""
    key = _serial_key(item)
    if key is None:
        return
    failed = _failures(item.config).get(key)
    if failed is not None and failed != item.name:
        pytest.xfail(f"previous step failed ({failed})")
