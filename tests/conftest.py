"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

import pytest

# Add project root to sys.path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from gateway import OriginGuard, OriginPolicy, PromptCatalog  # noqa: E402
from inference import StubModelBackend  # noqa: E402


@pytest.fixture
def origin_policy():
    return OriginPolicy(
        allowed_origins=("https://www.finovatools.com", "https://finovatools.com"),
        trusted_suffixes=("finovatools.com",),
        dev_prefixes=("http://localhost:5500", "http://127.0.0.1:5500"),
    )


@pytest.fixture
def origin_guard(origin_policy):
    return OriginGuard(origin_policy)


@pytest.fixture
def catalog():
    return PromptCatalog()


@pytest.fixture
def stub_backend():
    return StubModelBackend(reply="Prepaying cuts the <b>Principal</b>.")
