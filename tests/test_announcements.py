import uuid

import pytest

from app.core.academic import admission_year_for
from app.models.user import UserRole


def notice(title, **tags):
    return {
        "title": title,
        "description": f"{title} details",
        "type": "notice",
        "date": "2025-03-01",
        "tags": tags,
    }


async def post(client, author_headers, title, **tags):
    res = await client.post("/api/announcements", json=notice(title, **tags), headers=author_headers)
    assert res.status_code == 201, res.text
    return res.json()


@pytest.mark.asyncio
async def test_post_defaults_and_normalises_tags(client, make_user, headers):
    admin = await make_user(role=UserRole.Admin)

    created = await post(client, headers(admin), "Exam week", audience="students", department=" cse ")
    assert created["tags"] == {"audience": "students", "department": "CSE", "year": None}
    assert created["created_by_role"] == "admin"

    everyone = await post(client, headers(admin), "Holiday")
    assert everyone["tags"]["audience"] == "all"


@pytest.mark.asyncio
async def test_students_cannot_post(client, make_user, headers):
    student = await make_user()
    res = await client.post("/api/announcements", json=notice("x"), headers=headers(student))
    assert res.status_code == 403


@pytest.mark.asyncio
async def test_student_feed(client, make_user, headers):
    admin = await make_user(role=UserRole.Admin)
    third_year = await make_user(department="CSE", admission_year=admission_year_for(3))

    await post(client, headers(admin), "everyone")
    await post(client, headers(admin), "all students", audience="students")
    await post(client, headers(admin), "cse", audience="students", department="CSE")
    await post(client, headers(admin), "third years", audience="students", year=3)
    await post(client, headers(admin), "cse third years", audience="students", department="CSE", year=3)
    await post(client, headers(admin), "cse second years", audience="students", department="CSE", year=2)
    await post(client, headers(admin), "ece", audience="students", department="ECE")
    await post(client, headers(admin), "staff", audience="faculty")
    await post(client, headers(admin), "admins", audience="admin")

    res = await client.get("/api/announcements/feed", headers=headers(third_year))
    assert res.status_code == 200
    titles = [a["title"] for a in res.json()]
    assert set(titles) == {"everyone", "all students", "cse", "third years", "cse third years"}


@pytest.mark.asyncio
async def test_faculty_feed_and_own_posts(client, make_user, headers):
    admin = await make_user(role=UserRole.Admin)
    prof = await make_user(role=UserRole.Faculty, department="CSE")

    await post(client, headers(admin), "all staff", audience="faculty")
    await post(client, headers(admin), "cse staff", audience="faculty", department="CSE")
    await post(client, headers(admin), "ece staff", audience="faculty", department="ECE")
    own = await post(client, headers(prof), "quiz", audience="students", department="CSE", year=2)

    feed = await client.get("/api/announcements/feed", headers=headers(prof))
    assert {a["title"] for a in feed.json()} == {"all staff", "cse staff"}

    mine = await client.get("/api/announcements/mine", headers=headers(prof))
    assert [a["title"] for a in mine.json()] == ["quiz"]

    single = await client.get(f"/api/announcements/{own['id']}", headers=headers(prof))
    assert single.status_code == 200


@pytest.mark.asyncio
async def test_single_read_follows_feed(client, make_user, headers):
    admin = await make_user(role=UserRole.Admin)
    student = await make_user(department="CSE")

    hidden = await post(client, headers(admin), "ece only", audience="students", department="ECE")

    assert (await client.get(f"/api/announcements/{hidden['id']}", headers=headers(student))).status_code == 403
    assert (await client.get(f"/api/announcements/{uuid.uuid4()}", headers=headers(student))).status_code == 404
    assert (await client.get(f"/api/announcements/{hidden['id']}", headers=headers(admin))).status_code == 200


@pytest.mark.asyncio
async def test_admin_lists_and_deletes(client, make_user, headers):
    admin = await make_user(role=UserRole.Admin)
    prof = await make_user(role=UserRole.Faculty)

    first = await post(client, headers(prof), "first")
    await post(client, headers(admin), "second", audience="admin")

    everything = await client.get("/api/announcements", headers=headers(admin))
    assert [a["title"] for a in everything.json()] == ["second", "first"]

    assert (await client.get("/api/announcements", headers=headers(prof))).status_code == 403
    assert (await client.delete(f"/api/announcements/{first['id']}", headers=headers(prof))).status_code == 403

    res = await client.delete(f"/api/announcements/{first['id']}", headers=headers(admin))
    assert res.status_code == 200
    assert (await client.delete(f"/api/announcements/{first['id']}", headers=headers(admin))).status_code == 404
