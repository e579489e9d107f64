# tests/conftest.py

"""Shared pytest fixtures for all SIMS tests."""

from collections.abc import Generator
from unittest.mock import patch

import pytest

from src.config.settings import Settings


@pytest.fixture(autouse=True)
def fast_password_hashing() -> Generator[None, None, None]:
    """Use the cheapest bcrypt cost so sign-up / sign-in run instantly."""
    with patch.object(Settings, "BCRYPT_ROUNDS", 4):
        yield
