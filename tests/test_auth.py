import time

import bcrypt
import pytest
from fastapi.testclient import TestClient
from jose import jwt

from conftest import PASSWORD
from linkdash.cli import main as cli_main
from linkdash.main import create_app

PREFIX = "/api/v1"


@pytest.mark.parametrize(
    "path",
    ["/sessions", "/events?brand=acme", "/brands", "/links", "/stats/overview", "/auth/session"],
)
def test_protected_routes_require_cookie(anon_client, path):
    r = anon_client.get(f"{PREFIX}{path}")
    assert r.status_code == 401
    assert r.json() == {"error": "Not authenticated"}


def test_health_is_public(anon_client):
    r = anon_client.get(f"{PREFIX}/health")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "healthy"
    assert body["environment"] == "test"


def test_login_sets_session_cookie(anon_client, settings):
    r = anon_client.post(f"{PREFIX}/auth/login", json={"password": PASSWORD})
    assert r.status_code == 200
    assert r.json() == {"success": True}
    assert settings.session_cookie_name in r.cookies

    session = anon_client.get(f"{PREFIX}/auth/session").json()
    assert session["authenticated"] is True
    assert session["expires_at"] > time.time()


def test_wrong_password(anon_client):
    r = anon_client.post(f"{PREFIX}/auth/login", json={"password": "nope"})
    assert r.status_code == 401
    assert r.json() == {"error": "Invalid password"}


def test_unconfigured_password_hash(settings, store, link_client):
    settings.dashboard_password_hash = None
    c = TestClient(create_app(settings, store=store, link_client=link_client))
    r = c.post(f"{PREFIX}/auth/login", json={"password": PASSWORD})
    assert r.status_code == 500
    assert r.json() == {"error": "Authentication failed"}


def test_logout_clears_session(client):
    assert client.get(f"{PREFIX}/brands").status_code == 200
    assert client.post(f"{PREFIX}/auth/logout").status_code == 200
    assert client.get(f"{PREFIX}/brands").status_code == 401


def test_forged_or_expired_token_rejected(anon_client, settings):
    forged = jwt.encode({"authenticated": True, "exp": int(time.time()) + 60}, "other-secret", algorithm="HS256")
    expired = jwt.encode({"authenticated": True, "exp": int(time.time()) - 60}, settings.jwt_secret, algorithm="HS256")
    for token in (forged, expired):
        r = anon_client.get(f"{PREFIX}/brands", headers={"Cookie": f"{settings.session_cookie_name}={token}"})
        assert r.status_code == 401
        assert r.json() == {"error": "Invalid session"}


def test_cli_hash_password(capsys):
    assert cli_main(["hash-password", "--password", "s3cret", "--rounds", "4"]) == 0
    out = capsys.readouterr().out
    values = dict(line.split("=", 1) for line in out.splitlines() if "=" in line)
    assert bcrypt.checkpw(b"s3cret", values["DASHBOARD_PASSWORD_HASH"].encode())
    assert len(values["JWT_SECRET"]) == 64
