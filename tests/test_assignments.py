import asyncio
import uuid

import pytest
from sqlmodel import select

from app.core.academic import admission_year_for, utcnow
from app.core.database import AsyncSessionLocal
from app.core.exceptions import Conflict
from app.core.identity import principal_from_user
from app.models.assignment import Assignment, Submission
from app.models.course import Course
from app.models.user import UserRole
from app.services.assignment_service import submit_assignment
from app.services.enrollment_service import sync_enrollment


async def setup_course(client, prof_headers):
    res = await client.post(
        "/api/courses",
        json={"course_code": "CSE220", "course_name": "Algorithms", "department": "CSE", "year": 2},
        headers=prof_headers,
    )
    return res.json()["id"]


async def create_assignment(client, prof_headers, course_id, title="HW1", due="2030-03-01T12:00:00"):
    res = await client.post(
        "/api/assignments",
        json={"course_id": course_id, "title": title, "due_date": due},
        headers=prof_headers,
    )
    assert res.status_code == 201
    return res.json()["id"]


@pytest.mark.asyncio
async def test_assignments_listed_by_due_date(client, make_user, headers):
    prof = await make_user(role=UserRole.Faculty)
    student = await make_user(admission_year=admission_year_for(2))
    course_id = await setup_course(client, headers(prof))

    await create_assignment(client, headers(prof), course_id, "later", "2030-05-01T00:00:00")
    await create_assignment(client, headers(prof), course_id, "sooner", "2030-02-01T00:00:00")

    res = await client.get(f"/api/assignments/course/{course_id}", headers=headers(student))
    assert res.status_code == 200
    assert [a["title"] for a in res.json()] == ["sooner", "later"]


@pytest.mark.asyncio
async def test_only_course_owner_creates_assignments(client, make_user, headers):
    prof = await make_user(role=UserRole.Faculty)
    other = await make_user(role=UserRole.Faculty)
    course_id = await setup_course(client, headers(prof))

    res = await client.post(
        "/api/assignments",
        json={"course_id": course_id, "title": "x", "due_date": "2030-01-01T00:00:00"},
        headers=headers(other),
    )
    assert res.status_code == 403


@pytest.mark.asyncio
async def test_submit_once(client, make_user, headers):
    prof = await make_user(role=UserRole.Faculty)
    student = await make_user(admission_year=admission_year_for(2))
    course_id = await setup_course(client, headers(prof))
    assignment_id = await create_assignment(client, headers(prof), course_id)

    url = f"/api/assignments/{assignment_id}/submissions"
    first = await client.post(url, json={"file_url": "https://files/a.pdf"}, headers=headers(student))
    assert first.status_code == 201
    assert first.json()["student_id"] == str(student.id)

    second = await client.post(url, json={"file_url": "https://files/b.pdf"}, headers=headers(student))
    assert second.status_code == 400
    assert second.json() == {"kind": "conflict", "detail": "Assignment already submitted"}


@pytest.mark.asyncio
async def test_submit_requires_enrollment_and_student_role(client, make_user, headers):
    prof = await make_user(role=UserRole.Faculty)
    outsider = await make_user(department="ECE", admission_year=admission_year_for(2))
    course_id = await setup_course(client, headers(prof))
    assignment_id = await create_assignment(client, headers(prof), course_id)

    url = f"/api/assignments/{assignment_id}/submissions"
    res = await client.post(url, json={"file_url": "https://files/a.pdf"}, headers=headers(outsider))
    assert res.status_code == 403

    res = await client.post(url, json={"file_url": "https://files/a.pdf"}, headers=headers(prof))
    assert res.status_code == 403

    res = await client.post(
        f"/api/assignments/{uuid.uuid4()}/submissions",
        json={"file_url": "https://files/a.pdf"},
        headers=headers(outsider),
    )
    assert res.status_code == 404


@pytest.mark.asyncio
async def test_concurrent_submissions_store_one(session, make_user):
    prof = await make_user(role=UserRole.Faculty)
    student = await make_user(admission_year=2024)

    course = Course(course_code="CSE230", course_name="OS", department="CSE", year=2, created_by=prof.id)
    session.add(course)
    await session.commit()
    await sync_enrollment(session, course, 2025)

    assignment = Assignment(course_id=course.id, title="Lab", due_date=utcnow(), created_by=prof.id)
    session.add(assignment)
    await session.commit()

    principal = principal_from_user(student)

    async def attempt(file_url):
        async with AsyncSessionLocal() as s:
            try:
                await submit_assignment(s, principal, assignment.id, file_url)
                return "ok"
            except Conflict:
                return "conflict"

    outcomes = await asyncio.gather(attempt("https://files/1.pdf"), attempt("https://files/2.pdf"))
    assert sorted(outcomes) == ["conflict", "ok"]

    rows = (await session.execute(
        select(Submission).where(Submission.assignment_id == assignment.id)
    )).scalars().all()
    assert len(rows) == 1


@pytest.mark.asyncio
async def test_submissions_and_status_for_owner(client, make_user, headers):
    prof = await make_user(role=UserRole.Faculty)
    other = await make_user(role=UserRole.Faculty)
    done = await make_user(name="Aarav", admission_year=admission_year_for(2))
    pending = await make_user(name="Bela", admission_year=admission_year_for(2))
    course_id = await setup_course(client, headers(prof))
    assignment_id = await create_assignment(client, headers(prof), course_id)

    await client.post(
        f"/api/assignments/{assignment_id}/submissions",
        json={"file_url": "https://files/a.pdf"},
        headers=headers(done),
    )

    res = await client.get(f"/api/assignments/{assignment_id}/submissions", headers=headers(prof))
    assert res.status_code == 200
    [submission] = res.json()
    assert submission["student"]["id"] == str(done.id)
    assert "password_hash" not in submission["student"]

    status = await client.get(f"/api/assignments/{assignment_id}/status", headers=headers(prof))
    assert [s["id"] for s in status.json()["submitted"]] == [str(done.id)]
    assert [s["id"] for s in status.json()["not_submitted"]] == [str(pending.id)]

    assert (await client.get(f"/api/assignments/{assignment_id}/submissions", headers=headers(other))).status_code == 403
    assert (await client.get(f"/api/assignments/{assignment_id}/status", headers=headers(done))).status_code == 403


@pytest.mark.asyncio
async def test_my_submissions(client, make_user, headers):
    prof = await make_user(role=UserRole.Faculty)
    student = await make_user(admission_year=admission_year_for(2))
    course_id = await setup_course(client, headers(prof))
    assignment_id = await create_assignment(client, headers(prof), course_id, title="Essay")

    await client.post(
        f"/api/assignments/{assignment_id}/submissions",
        json={"file_url": "https://files/essay.pdf"},
        headers=headers(student),
    )

    res = await client.get("/api/assignments/submissions/mine", headers=headers(student))
    assert res.status_code == 200
    [mine] = res.json()
    assert mine["assignment_title"] == "Essay"
    assert mine["course_id"] == course_id
