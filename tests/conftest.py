"""Root pytest configuration for all tests.

Keeps the application logger quiet unless a test raises the level itself,
and provides the shared HTTP session double used by image tests.
"""

import logging

import pytest

from tests.fixtures.http_responses import make_session

logging.getLogger("xaml_markdown").setLevel(logging.WARNING)


@pytest.fixture
def mock_session():
    """Session double with no responses queued."""
    return make_session()


@pytest.fixture
def note_dir(tmp_path):
    """Output directory for a note under test."""
    output = tmp_path / "export"
    output.mkdir()
    return output
