"""Pytest configuration and fixtures."""

import os
from pathlib import Path

import pytest

from scriptlex.config import ScriptLexSettings, reset_settings, set_settings

FIXTURES_DIR = Path(__file__).parent / "fixtures" / "fountain"


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: mark test as unit test")
    config.addinivalue_line("markers", "integration: mark test as integration test")
    config.addinivalue_line(
        "markers", "slow: mark test as slow running (may need extended timeout)"
    )


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Run every test against default settings, free of SCRIPTLEX_ env vars."""
    for var in [k for k in os.environ if k.startswith("SCRIPTLEX_")]:
        monkeypatch.delenv(var, raising=False)

    set_settings(ScriptLexSettings())

    yield

    reset_settings()


@pytest.fixture
def fixtures_dir() -> Path:
    """Directory holding sample Fountain scripts."""
    return FIXTURES_DIR


@pytest.fixture
def coffee_shop_path() -> Path:
    """Path to the sample screenplay used across tests."""
    return FIXTURES_DIR / "coffee_shop.fountain"


@pytest.fixture
def coffee_shop_text(coffee_shop_path) -> str:
    """Contents of the sample screenplay."""
    return coffee_shop_path.read_text(encoding="utf-8")
