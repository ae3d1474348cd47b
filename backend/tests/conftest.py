"""Shared test configuration."""

import pytest
from fastapi.testclient import TestClient

from api.dependencies import get_oracle
from main import app


@pytest.fixture
def client_with_oracle():
    """Return a factory building a TestClient whose evaluator uses the given oracle."""

    def _make(oracle) -> TestClient:
        app.dependency_overrides[get_oracle] = lambda: oracle
        return TestClient(app)

    yield _make
    app.dependency_overrides.clear()
