import pytest
from jose import jwt

from gatekeeper.config import settings


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert "version" in data


@pytest.mark.asyncio
async def test_root(client):
    response = await client.get("/")
    assert response.status_code == 200
    assert response.json()["message"] == "Gatekeeper API"


@pytest.mark.asyncio
async def test_whoami_direct_peer(client):
    response = await client.get("/api/v1/whoami", headers={"User-Agent": "pytest"})
    assert response.status_code == 200
    assert response.json() == {"ip": "203.0.113.7", "version": 4, "user_agent": "pytest"}


@pytest.mark.asyncio
async def test_whoami_ignores_forwarded_for_without_proxy_mode(client):
    response = await client.get("/api/v1/whoami", headers={"X-Forwarded-For": "198.51.100.1"})
    assert response.json()["ip"] == "203.0.113.7"


@pytest.mark.asyncio
async def test_whoami_override_from_trusted_proxy(make_client):
    async with make_client("10.1.2.3") as client:
        response = await client.get("/api/v1/whoami", headers={"X-Client-IP": "2001:db8:1::9"})
    assert response.status_code == 200
    assert response.json()["ip"] == "2001:db8:1::9"
    assert response.json()["version"] == 6


@pytest.mark.asyncio
async def test_override_from_untrusted_peer_is_refused(client):
    response = await client.get("/api/health", headers={"X-Client-IP": "10.0.0.1"})
    assert response.status_code == 403
    assert response.json() == {"detail": "Invalid IP Address", "error": "UntrustedProxy"}


@pytest.mark.asyncio
async def test_unparsable_peer_is_refused(make_client):
    async with make_client("testclient") as client:
        response = await client.get("/api/health")
    assert response.status_code == 400
    assert response.json()["error"] == "MalformedPeerAddress"


async def login(client, password="changeme"):
    return await client.post(
        "/api/v1/token",
        data={"username": settings.admin_username, "password": password}
    )


@pytest.mark.asyncio
async def test_login(client):
    response = await login(client)
    assert response.status_code == 200
    data = response.json()
    assert "access_token" in data
    assert data["token_type"] == "bearer"


@pytest.mark.asyncio
async def test_login_wrong_password(client):
    response = await login(client, password="wrong")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_users_me(client):
    token = (await login(client)).json()["access_token"]
    response = await client.get("/api/v1/users/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200
    assert response.json()["username"] == settings.admin_username


@pytest.mark.asyncio
async def test_users_me_forged_token(client, make_token):
    forged = make_token({"sub": settings.admin_username})
    response = await client.get("/api/v1/users/me", headers={"Authorization": f"Bearer {forged}"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_audit_log_records_resolved_ip(make_client):
    async with make_client("192.168.100.4") as proxied:
        await login(proxied, password="wrong")
        token = (await proxied.post(
            "/api/v1/token",
            data={"username": settings.admin_username, "password": "changeme"},
            headers={"X-Client-IP": "198.51.100.77"}
        )).json()["access_token"]

        response = await proxied.get(
            "/api/v1/audit-logs/",
            params={"ip_address": "198.51.100.77"},
            headers={"Authorization": f"Bearer {token}"}
        )
        assert response.status_code == 200
        logs = response.json()
        assert [log["action"] for log in logs] == ["login_success"]
        assert logs[0]["user"] == settings.admin_username

        failed = await proxied.get(
            "/api/v1/audit-logs/",
            params={"action": "login_failed"},
            headers={"Authorization": f"Bearer {token}"}
        )
        assert failed.json()[0]["ip_address"] == "192.168.100.4"

        single = await proxied.get(
            f"/api/v1/audit-logs/{logs[0]['id']}",
            headers={"Authorization": f"Bearer {token}"}
        )
        assert single.json()["ip_address"] == "198.51.100.77"

        missing = await proxied.get(
            "/api/v1/audit-logs/9999",
            headers={"Authorization": f"Bearer {token}"}
        )
        assert missing.status_code == 404


@pytest.mark.asyncio
async def test_audit_logs_require_auth(client):
    response = await client.get("/api/v1/audit-logs/")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_inspect_issued_token(client):
    token = (await login(client)).json()["access_token"]
    response = await client.post("/api/v1/tokens/inspect", json={"token": token})
    assert response.status_code == 200
    data = response.json()
    assert data["verified"] is False
    assert data["claims"]["sub"] == settings.admin_username
    assert data["claims"]["iss"] == "gatekeeper"
    assert isinstance(data["claims"]["exp"], int)


@pytest.mark.asyncio
async def test_inspect_does_not_verify_signature(client):
    token = jwt.encode({"sub": "mallory"}, "some-other-key", algorithm="HS256")
    response = await client.post("/api/v1/tokens/inspect", json={"token": token})
    assert response.status_code == 200
    assert response.json()["claims"] == {"sub": "mallory"}


@pytest.mark.asyncio
@pytest.mark.parametrize("token,status_code,error", [
    ("no-dots-at-all", 401, "MalformedToken"),
    ("x.***.y", 400, "MalformedTokenBody"),
    ("x.bm90IGpzb24.y", 400, "MalformedTokenClaims"),
])
async def test_inspect_malformed(client, token, status_code, error):
    response = await client.post("/api/v1/tokens/inspect", json={"token": token})
    assert response.status_code == status_code
    assert response.json()["error"] == error
