"""
Shared pytest fixtures for the contact extraction tests.
"""

from __future__ import annotations

import pytest

from tests.helpers import FakeSession, envelope


@pytest.fixture
def inbox_session() -> FakeSession:
    """One message from test@example.com named "Test User"."""
    return FakeSession({"INBOX": [envelope(("test@example.com", "Test User"))]})
