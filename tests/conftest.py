import httpx
import pytest
from httpx import ASGITransport


@pytest.fixture
def mock_env(monkeypatch, tmp_path):
    monkeypatch.setenv("API_BASE_URL", "http://api.test")
    monkeypatch.setenv("CONTACT_EMAIL_PATH", str(tmp_path / "emails.json"))
    monkeypatch.setenv("TAX_RATE", "0.18")
    monkeypatch.setenv("MAX_GUESTS", "4")


@pytest.fixture
async def client(mock_env):
    from app.main import app, lifespan

    async with lifespan(app):
        async with httpx.AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
        ) as c:
            yield c
