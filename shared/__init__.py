"""Helpers shared by the staging E2E suite and its unit tests."""
