"""Fixtures for API tests."""

import pytest
from fastapi.testclient import TestClient

from dexpool.api.endpoints import get_exchange
from dexpool.api.main import app
from dexpool.exchange import Exchange


@pytest.fixture
def client(exchange: Exchange):
    """Test client bound to the per-test exchange instead of the process default."""
    app.dependency_overrides[get_exchange] = lambda: exchange
    yield TestClient(app)
    app.dependency_overrides.clear()
