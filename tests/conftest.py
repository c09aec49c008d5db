import httpx
import pytest
from fastapi.testclient import TestClient

from linkdash.core.config import Settings
from linkdash.core.security import hash_password
from linkdash.infrastructure.sql_store import SqlStore
from linkdash.main import create_app
from linkdash.services.links_api import LinkApiClient

PASSWORD = "correct horse"
LINK_API_URL = "https://links.example.test"
LINK_API_KEY = "test-key-123456"

# Hashing at the default cost would make every test slow
PASSWORD_HASH = hash_password(PASSWORD, rounds=4)


class FakeLinkApi:
    """Stands in for the link-issuing service behind an httpx.MockTransport."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.status_code = 201
        self.body = {"success": True, "uuid": "abc123", "short_url": "https://sho.rt/abc123"}
        self.headers: dict[str, str] = {}
        self.error: Exception | None = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code, json=self.body, headers=self.headers)


def make_event(tracking_id, timestamp, *, event_uuid=None, ip="10.0.0.1", brand="acme", **extra):
    item = {
        "tracking_id": tracking_id,
        "timestamp": timestamp,
        "event_uuid": event_uuid or f"{tracking_id}-{timestamp}",
        "brand": brand,
        "event_type": "click",
        "visitor_ip": ip,
    }
    item.update(extra)
    return item


def make_link(brand, uuid, *, created_at="2024-01-01T00:00:00.000Z", status="active", **extra):
    item = {
        "brand": brand,
        "UUID": uuid,
        "created_at": created_at,
        "created_by": "tester",
        "real_url": f"https://example.com/{uuid}",
        "short_url": f"https://sho.rt/{uuid}",
        "link_status": status,
    }
    item.update(extra)
    return item


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        environment="test",
        storage_backend="sql",
        database_url="sqlite:///:memory:",
        dashboard_password_hash=PASSWORD_HASH,
        jwt_secret="test-secret",
        link_api_url=LINK_API_URL,
        link_api_key=LINK_API_KEY,
        sessions_scan_limit=1000,
        sessions_scan_exhaustive=False,
        log_level="WARNING",
    )


@pytest.fixture
def store():
    return SqlStore.from_url("sqlite:///:memory:")


@pytest.fixture
def link_api():
    return FakeLinkApi()


@pytest.fixture
def link_client(settings, link_api):
    return LinkApiClient(
        settings.link_api_url,
        settings.link_api_key,
        transport=httpx.MockTransport(link_api),
    )


@pytest.fixture
def app(settings, store, link_client):
    return create_app(settings, store=store, link_client=link_client)


@pytest.fixture
def anon_client(app):
    # No context manager: the lifespan (and link client shutdown) stays with `client`
    return TestClient(app)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        r = c.post("/api/v1/auth/login", json={"password": PASSWORD})
        assert r.status_code == 200, r.text
        yield c
