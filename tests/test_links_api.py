import json

import httpx
import pytest

from conftest import LINK_API_KEY, make_link
from linkdash.core.errors import UpstreamAuthError
from linkdash.infrastructure.store import PLACEHOLDER_UUID
from linkdash.services.links_api import AUTH_MESSAGE, LinkApiClient, mask_key

PREFIX = "/api/v1"

NEW_LINK = {
    "real_url": "https://example.com",
    "brand": "acme",
    "created_by": "alice",
    "campaign_id": "spring",
}


def test_create_link_passes_upstream_body_through(client, link_api):
    r = client.post(f"{PREFIX}/links", json=NEW_LINK)
    assert r.status_code == 201
    assert r.json() == link_api.body

    (sent,) = link_api.requests
    assert sent.url.path == "/links"
    assert sent.headers["x-api-key"] == LINK_API_KEY
    payload = json.loads(sent.content)
    assert payload["real_url"] == "https://example.com"
    assert payload["brand"] == "acme"
    assert payload["campaign_id"] == "spring"
    assert "source" not in payload


@pytest.mark.parametrize("url", ["not-a-url", "ftp://example.com/file", "//example.com"])
def test_create_link_validates_url(client, link_api, url):
    r = client.post(f"{PREFIX}/links", json={**NEW_LINK, "real_url": url})
    assert r.status_code == 400
    assert link_api.requests == []


@pytest.mark.parametrize("status", [401, 403])
def test_upstream_auth_failure(client, link_api, status):
    link_api.status_code = status
    link_api.body = {"message": "Forbidden"}
    r = client.post(f"{PREFIX}/links", json=NEW_LINK)
    assert r.status_code == 403
    assert r.json() == {"error": "Authentication failed", "message": AUTH_MESSAGE}


def test_upstream_rate_limit(client, link_api):
    link_api.status_code = 429
    link_api.body = {"message": "Slow down"}
    link_api.headers = {"Retry-After": "30"}
    r = client.post(f"{PREFIX}/links", json=NEW_LINK)
    assert r.status_code == 429
    assert r.headers["retry-after"] == "30"
    assert r.json() == {"error": "Rate limit exceeded", "message": "Slow down", "retry_after": 30}


def test_upstream_rate_limit_retry_after_from_body(client, link_api):
    link_api.status_code = 429
    link_api.body = {"retryAfter": 12}
    r = client.post(f"{PREFIX}/links", json=NEW_LINK)
    assert r.status_code == 429
    assert r.json()["retry_after"] == 12


def test_upstream_server_error(client, link_api):
    link_api.status_code = 502
    link_api.body = {"error": "bad gateway"}
    r = client.post(f"{PREFIX}/links", json=NEW_LINK)
    assert r.status_code == 500
    assert r.json()["error"] == "Failed to create link"


def test_upstream_unreachable(client, link_api):
    link_api.error = httpx.ConnectError("refused")
    r = client.post(f"{PREFIX}/links", json=NEW_LINK)
    assert r.status_code == 500
    assert r.json()["error"] == "Failed to create link"


def test_missing_api_key_is_auth_failure(link_api):
    api = LinkApiClient("https://links.example.test", None, transport=httpx.MockTransport(link_api))
    with pytest.raises(UpstreamAuthError):
        api.create_link({"brand": "acme"})
    assert link_api.requests == []


def test_mask_key():
    assert mask_key("abcdefghij") == "****ghij"
    assert mask_key("abc") == "****"
    assert mask_key(None) is None


@pytest.fixture
def links(store):
    store.add_links(
        [
            make_link("acme", "old", created_at="2024-01-01T00:00:00.000Z"),
            make_link("acme", "new", created_at="2024-03-01T00:00:00.000Z", metadata={"tag": "x"}),
            make_link("globex", "mid", created_at="2024-02-01T00:00:00.000Z", status="expired"),
        ]
    )
    store.create_brand("acme-empty", created_at="2024-04-01T00:00:00.000Z")
    return store


def test_list_links_newest_first_without_placeholders(client, links):
    r = client.get(f"{PREFIX}/links")
    assert r.status_code == 200
    body = r.json()
    assert [l["uuid"] for l in body] == ["new", "mid", "old"]
    assert PLACEHOLDER_UUID not in {l["uuid"] for l in body}
    assert body[0]["metadata"] == {"tag": "x"}


def test_list_links_for_brand(client, links):
    r = client.get(f"{PREFIX}/links", params={"brand": "acme"})
    assert [l["uuid"] for l in r.json()] == ["new", "old"]


def test_get_link(client, links):
    r = client.get(f"{PREFIX}/links/globex/mid")
    assert r.status_code == 200
    assert r.json()["link_status"] == "expired"


@pytest.mark.parametrize("path", ["acme/missing", f"acme-empty/{PLACEHOLDER_UUID}"])
def test_get_link_not_found(client, links, path):
    r = client.get(f"{PREFIX}/links/{path}")
    assert r.status_code == 404
    assert r.json() == {"error": "Not found", "message": "Link not found"}


def test_delete_link(client, links):
    r = client.delete(f"{PREFIX}/links/acme/old")
    assert r.status_code == 204
    assert client.get(f"{PREFIX}/links/acme/old").status_code == 404
    assert client.delete(f"{PREFIX}/links/acme/old").status_code == 404


@pytest.mark.parametrize(
    "url",
    ["https://example.com/path/", "https://example.com/a%20b?q=1#frag", "http://EXAMPLE.com:8080"],
)
def test_real_url_forwarded_verbatim(client, link_api, url):
    assert client.post(f"{PREFIX}/links", json={**NEW_LINK, "real_url": url}).status_code == 201
    assert json.loads(link_api.requests[-1].content)["real_url"] == url
