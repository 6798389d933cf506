# tests/conftest.py

"""Shared pytest fixtures for all catalog_client tests."""

from collections.abc import Generator

import pytest

from src.config.settings import Settings

TEST_API_BASE = "http://test/api/products"


@pytest.fixture(autouse=True)
def pin_api_base() -> Generator[None, None, None]:
    """Point every test at a fixed backend URL and restore it after."""
    original = Settings.API_BASE
    Settings.API_BASE = TEST_API_BASE
    yield
    Settings.API_BASE = original
