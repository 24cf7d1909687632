"""
Shared fixtures for Lessons Service tests.
"""

import pytest

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))
sys.path.append(os.path.dirname(__file__))

from shared.config import ServiceConfig

from doubles import FakeCache, FakeOrigin, make_entry


@pytest.fixture
def quarter_listing():
    """Directory listing for /en/2024-q1."""
    return [
        make_entry("en/2024-q1/01"),
        make_entry("en/2024-q1/02"),
        make_entry("en/2024-q1/info.yml", entry_type="file"),
    ]


@pytest.fixture
def day_entry():
    """Single file entry for /en/2024-q1/01/01.md."""
    return make_entry("en/2024-q1/01/01.md", entry_type="file", content="IyBEYXkgMQ==", encoding="base64")


@pytest.fixture
def fake_cache():
    return FakeCache()


@pytest.fixture
def fake_origin(quarter_listing, day_entry):
    return FakeOrigin({
        "/en/2024-q1": quarter_listing,
        "/en/2024-q1/01/01.md": day_entry,
        "/en/empty": [],
        "/en/null": None,
    })


@pytest.fixture
def test_config():
    """Service configuration with a dummy token."""
    return ServiceConfig(service_name="lessons", port=8020, github_token="test-token", env="test")
