"""Pytest configuration and shared fixtures."""

import logfire
import pytest


@pytest.fixture(scope="session", autouse=True)
def quiet_logfire():
    """Keep logfire local during tests; spans are created but never exported."""
    logfire.configure(send_to_logfire=False, console=False)
    yield
