import os
from typing import Iterator

import pytest
from fastapi.testclient import TestClient

# Set test environment variables
os.environ.update(
    {
        "PORT": "4242",
        "CLIENT_URL": "http://localhost:3000",
        "STRIPE_SECRET_KEY": "sk_test_123",
        "STRIPE_PUBLISHABLE_KEY": "pk_test_123",
        "STRIPE_WEBHOOK_SECRET": "whsec_test",
    }
)

# Import app modules after setting environment variables
from checkout_bridge.core.config import Settings, get_settings
from checkout_bridge.main import create_app


@pytest.fixture
def settings() -> Settings:
    return get_settings()


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app) -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
