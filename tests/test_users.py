import uuid

import pytest

from app.core.academic import admission_year_for
from app.models.user import UserRole


@pytest.mark.asyncio
async def test_admin_creates_and_lists_users(client, make_user, headers):
    admin = await make_user(role=UserRole.Admin)
    await make_user(role=UserRole.Faculty, department="ECE")

    res = await client.post(
        "/api/users",
        json={
            "name": "Dr. Menon",
            "email": "menon@example.edu",
            "password": "password123",
            "role": "faculty",
            "department": "CSE",
            "faculty_code": "F-107",
        },
        headers=headers(admin),
    )
    assert res.status_code == 201

    faculty = await client.get("/api/users", params={"role": "faculty"}, headers=headers(admin))
    assert len(faculty.json()) == 2

    cse = await client.get("/api/users", params={"role": "faculty", "department": "cse"}, headers=headers(admin))
    assert [u["email"] for u in cse.json()] == ["menon@example.edu"]


@pytest.mark.asyncio
async def test_non_admin_cannot_manage_users(client, make_user, headers):
    prof = await make_user(role=UserRole.Faculty)
    assert (await client.get("/api/users", headers=headers(prof))).status_code == 403
    assert (await client.delete(f"/api/users/{prof.id}", headers=headers(prof))).status_code == 403


@pytest.mark.asyncio
async def test_user_read_visibility(client, make_user, headers):
    admin = await make_user(role=UserRole.Admin)
    prof = await make_user(role=UserRole.Faculty)
    taught = await make_user(admission_year=admission_year_for(2))
    stranger = await make_user(admission_year=admission_year_for(4))

    await client.post(
        "/api/courses",
        json={"course_code": "CSE201", "course_name": "DS", "department": "CSE", "year": 2},
        headers=headers(prof),
    )

    full = await client.get(f"/api/users/{taught.id}", headers=headers(admin))
    assert full.json()["admission_year"] == taught.admission_year

    itself = await client.get(f"/api/users/{taught.id}", headers=headers(taught))
    assert itself.status_code == 200
    assert "status" in itself.json()

    basic = await client.get(f"/api/users/{taught.id}", headers=headers(prof))
    assert basic.status_code == 200
    assert set(basic.json()) == {"id", "name", "email", "student_code", "department"}

    assert (await client.get(f"/api/users/{stranger.id}", headers=headers(prof))).status_code == 403
    assert (await client.get(f"/api/users/{stranger.id}", headers=headers(taught))).status_code == 403
    assert (await client.get(f"/api/users/{uuid.uuid4()}", headers=headers(prof))).status_code == 404


@pytest.mark.asyncio
async def test_update_toggle_and_delete(client, make_user, headers):
    admin = await make_user(role=UserRole.Admin)
    student = await make_user()

    res = await client.put(f"/api/users/{student.id}", json={"name": "Renamed", "department": "ece"}, headers=headers(admin))
    assert res.status_code == 200
    assert res.json()["name"] == "Renamed"
    assert res.json()["department"] == "ECE"

    # Role change must still satisfy the profile rules
    bad = await client.put(f"/api/users/{student.id}", json={"role": "admin"}, headers=headers(admin))
    assert bad.status_code == 400

    toggled = await client.patch(f"/api/users/{student.id}/toggle-status", headers=headers(admin))
    assert toggled.json()["status"] == "inactive"
    assert (await client.get("/api/account/me", headers=headers(student))).status_code == 401

    toggled = await client.patch(f"/api/users/{student.id}/toggle-status", headers=headers(admin))
    assert toggled.json()["status"] == "active"

    assert (await client.patch(f"/api/users/{admin.id}/toggle-status", headers=headers(admin))).status_code == 400

    assert (await client.delete(f"/api/users/{student.id}", headers=headers(admin))).status_code == 200
    assert (await client.get(f"/api/users/{student.id}", headers=headers(admin))).status_code == 404


@pytest.mark.asyncio
async def test_email_conflict_on_update(client, make_user, headers):
    admin = await make_user(role=UserRole.Admin)
    taken = await make_user(email="taken@example.edu")
    other = await make_user()

    res = await client.put(f"/api/users/{other.id}", json={"email": taken.email}, headers=headers(admin))
    assert res.status_code == 400
    assert res.json()["kind"] == "conflict"


@pytest.mark.asyncio
async def test_update_rejects_null_for_required_fields(client, make_user, headers):
    admin = await make_user(role=UserRole.Admin)
    student = await make_user(name="Asha", email="asha@example.edu")

    for body in ({"role": None}, {"email": None}, {"name": None}):
        res = await client.put(f"/api/users/{student.id}", json=body, headers=headers(admin))
        assert res.status_code == 422
        assert res.json()["kind"] == "validation"

    unchanged = (await client.get(f"/api/users/{student.id}", headers=headers(admin))).json()
    assert unchanged["name"] == "Asha"
    assert unchanged["email"] == "asha@example.edu"
    assert unchanged["role"] == "student"


@pytest.mark.asyncio
async def test_update_clears_optional_field_with_null(client, make_user, headers):
    admin = await make_user(role=UserRole.Admin)
    student = await make_user()

    await client.put(f"/api/users/{student.id}", json={"phone": "98450 00000"}, headers=headers(admin))
    res = await client.put(f"/api/users/{student.id}", json={"phone": None}, headers=headers(admin))
    assert res.status_code == 200
    assert res.json()["phone"] is None
