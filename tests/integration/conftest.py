from unittest.mock import AsyncMock, Mock

import pytest
from fastapi.testclient import TestClient

from kraken_proxy.dependencies import get_kraken_service
from kraken_proxy.main import create_app
from kraken_proxy.settings import Settings

INTEGRATION_APP_SECRET = "integration-secret-0123456789abc"


@pytest.fixture
def settings():
    return Settings(_env_file=None, app_secret=INTEGRATION_APP_SECRET, mode="dev")


@pytest.fixture
def kraken_service():
    """Mocked Kraken service so no test ever reaches api.kraken.com."""
    service = Mock()
    service.get_ws_token = AsyncMock()
    service.get_balance = AsyncMock()
    return service


@pytest.fixture
def app(settings, kraken_service):
    app = create_app(settings)
    app.dependency_overrides[get_kraken_service] = lambda: kraken_service
    yield app
    app.dependency_overrides = {}


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def login(client):
    def _login(api_key="valid-key-12345", api_secret="valid-secret-12345") -> str:
        response = client.post("/login", json={"apiKey": api_key, "apiSecret": api_secret})
        assert response.status_code == 200
        return response.json()["token"]
    return _login
