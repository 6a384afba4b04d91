"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest
from unittest.mock import MagicMock

from court_lookup.lib.config import LookupSettings
from court_lookup.models.case import CaseQuery

PAGES_DIR = Path(__file__).parent / "fixtures" / "pages"


@pytest.fixture
def mock_logger():
    """Mock logger for testing."""
    return MagicMock()


@pytest.fixture
def settings():
    """Settings with every delay switched off and no solver key."""
    return LookupSettings(
        base_url="https://court.example.test",
        settle_seconds=0,
        submit_settle_seconds=0,
        captcha_api_key=None,
        captcha_poll_interval_seconds=0,
    )


@pytest.fixture
def keyed_settings(settings):
    """Same as `settings` but with a solver API key."""
    from dataclasses import replace

    return replace(settings, captcha_api_key="test-key")


@pytest.fixture
def query():
    return CaseQuery(case_type="FAO", case_number="12345", filing_year=2023)


@pytest.fixture
def load_page():
    """Read an HTML fixture page by name (without extension)."""

    def _load(name: str) -> str:
        return (PAGES_DIR / f"{name}.html").read_text(encoding="utf-8")

    return _load
