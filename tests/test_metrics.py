import pytest

from app.models.user import UserRole


@pytest.mark.asyncio
async def test_root(client):
    res = await client.get("/")
    assert res.status_code == 200
    assert res.json()["status"] == "ok"


@pytest.mark.asyncio
async def test_metrics_endpoint(client):
    res = await client.get("/api/metrics")
    assert res.status_code == 200

    data = res.json()

    # Check structure
    assert data["status"] == "Online"
    assert "cpu" in data
    assert "ram" in data
    assert data["database"] == "Connected"

    # Check data types
    assert isinstance(data["uptime"], int)


@pytest.mark.asyncio
async def test_dashboard_stats_admin_only(client, make_user, headers):
    admin = await make_user(role=UserRole.Admin)
    student = await make_user()

    res = await client.get("/api/metrics/dashboard-stats", headers=headers(admin))
    assert res.status_code == 200
    assert res.json()["users"] == {"admin": 1, "student": 1}
    assert res.json()["courses"] == 0

    assert (await client.get("/api/metrics/dashboard-stats", headers=headers(student))).status_code == 403


@pytest.mark.asyncio
async def test_redis_stats_disabled_without_url(client, make_user, headers):
    admin = await make_user(role=UserRole.Admin)
    res = await client.get("/api/metrics/redis-stats", headers=headers(admin))
    assert res.json()["status"] == "Disabled"
