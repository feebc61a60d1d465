# app/core/visibility.py

"""
Visibility rules for every protected resource.

Two kinds of answers come out of this module:

* a coarse role gate, read from ``ACCESS_MATRIX`` (who may attempt an action
  at all), and
* a relationship check for the principal and a concrete record: ownership,
  enrollment or audience match. For collection reads it is expressed as a
  SQL predicate so filtering happens in the query, not in Python.

Single-record checks look the record up first and only then compare the
owner, so a missing record answers 404 and a foreign one 403.
"""

from enum import Enum
from typing import Any, Optional

from sqlalchemy import false, select, true
from sqlalchemy.sql.elements import ColumnElement

from app.core.exceptions import Forbidden, NotFound
from app.core.identity import Principal, authorize
from app.models.assignment import Assignment, Submission
from app.models.course import Course, CourseEnrollment
from app.models.placement import Placement
from app.models.user import User, UserRole


class Resource(str, Enum):
    Announcement = "announcement"
    Course = "course"
    Material = "material"
    Assignment = "assignment"
    Submission = "submission"
    Placement = "placement"
    User = "user"


class Action(str, Enum):
    Read = "read"
    ReadOwn = "read_own"
    ReadAll = "read_all"
    Create = "create"
    Update = "update"
    Delete = "delete"
    Sync = "sync"


STUDENT = UserRole.Student
FACULTY = UserRole.Faculty
ADMIN = UserRole.Admin

ACCESS_MATRIX: dict[tuple[Resource, Action], frozenset[UserRole]] = {
    # Announcements: everyone reads a targeted feed, only admins see everything
    (Resource.Announcement, Action.Read): frozenset({STUDENT, FACULTY, ADMIN}),
    (Resource.Announcement, Action.ReadOwn): frozenset({FACULTY, ADMIN}),
    (Resource.Announcement, Action.ReadAll): frozenset({ADMIN}),
    (Resource.Announcement, Action.Create): frozenset({FACULTY, ADMIN}),
    (Resource.Announcement, Action.Delete): frozenset({ADMIN}),

    # Courses and their content: faculty own, students are enrolled
    (Resource.Course, Action.Read): frozenset({STUDENT, FACULTY}),
    (Resource.Course, Action.Create): frozenset({FACULTY}),
    (Resource.Course, Action.Update): frozenset({FACULTY}),
    (Resource.Course, Action.Delete): frozenset({FACULTY}),
    (Resource.Course, Action.Sync): frozenset({FACULTY}),

    (Resource.Material, Action.Read): frozenset({STUDENT, FACULTY}),
    (Resource.Material, Action.Create): frozenset({FACULTY}),
    (Resource.Material, Action.Delete): frozenset({FACULTY}),

    (Resource.Assignment, Action.Read): frozenset({STUDENT, FACULTY}),
    (Resource.Assignment, Action.Create): frozenset({FACULTY}),

    (Resource.Submission, Action.Create): frozenset({STUDENT}),
    (Resource.Submission, Action.ReadOwn): frozenset({STUDENT}),
    (Resource.Submission, Action.Read): frozenset({FACULTY}),

    # Placements: admin-managed, students see their own
    (Resource.Placement, Action.ReadOwn): frozenset({STUDENT}),
    (Resource.Placement, Action.ReadAll): frozenset({ADMIN}),
    (Resource.Placement, Action.Create): frozenset({ADMIN}),
    (Resource.Placement, Action.Update): frozenset({ADMIN}),
    (Resource.Placement, Action.Delete): frozenset({ADMIN}),

    # Users
    (Resource.User, Action.Read): frozenset({STUDENT, FACULTY, ADMIN}),
    (Resource.User, Action.ReadOwn): frozenset({STUDENT, FACULTY, ADMIN}),
    (Resource.User, Action.ReadAll): frozenset({ADMIN}),
    (Resource.User, Action.Create): frozenset({ADMIN}),
    (Resource.User, Action.Update): frozenset({ADMIN}),
    (Resource.User, Action.Delete): frozenset({ADMIN}),
}


def allowed_roles(resource: Resource, action: Action) -> frozenset[UserRole]:
    # Unlisted combinations are closed to everyone
    return ACCESS_MATRIX.get((resource, action), frozenset())


def role_gate(principal: Principal, resource: Resource, action: Action) -> Principal:
    return authorize(principal, allowed_roles(resource, action))


# ------------------------------------------------------------
# Single-record checks (404 before 403)
# ------------------------------------------------------------
def ensure_exists(record: Optional[Any], noun: str) -> Any:
    if record is None:
        raise NotFound(f"{noun} not found")
    return record


def ensure_owner(
    record: Optional[Any],
    principal: Principal,
    noun: str,
    owner_field: str = "created_by",
    verb: str = "modify",
) -> Any:
    ensure_exists(record, noun)
    if getattr(record, owner_field) != principal.id:
        raise Forbidden(f"Not authorized to {verb} this {noun.lower()}")
    return record


def can_read_course(principal: Principal, course: Course, is_enrolled: bool) -> bool:
    if principal.is_faculty:
        return course.created_by == principal.id
    if principal.is_student:
        return is_enrolled
    return False


def ensure_course_readable(
    principal: Principal,
    course: Optional[Course],
    is_enrolled: bool,
) -> Course:
    ensure_exists(course, "Course")
    if can_read_course(principal, course, is_enrolled):
        return course
    if principal.is_student:
        raise Forbidden("You're not enrolled in this course")
    raise Forbidden("Unauthorized access to this course")


class UserView(str, Enum):
    Full = "full"
    Basic = "basic"


def user_view(principal: Principal, target: Optional[User], teaches_target: bool) -> UserView:
    """
    Admins and the user themself see the full profile. Faculty see the basic
    fields of students enrolled in one of their courses. Everyone else is
    refused.
    """
    ensure_exists(target, "User")
    if principal.is_admin or target.id == principal.id:
        return UserView.Full
    if principal.is_faculty and target.role == UserRole.Student and teaches_target:
        return UserView.Basic
    raise Forbidden("Access denied")


# ------------------------------------------------------------
# Collection predicates
# ------------------------------------------------------------
def enrolled_course_ids(user_id):
    return select(CourseEnrollment.course_id).where(CourseEnrollment.user_id == user_id)


def course_filter(principal: Principal) -> ColumnElement[bool]:
    if principal.is_faculty:
        return Course.created_by == principal.id
    if principal.is_student:
        return Course.id.in_(enrolled_course_ids(principal.id))
    return false()


def taught_students_filter(principal: Principal) -> ColumnElement[bool]:
    """Users enrolled in at least one course the principal created."""
    taught = (
        select(CourseEnrollment.user_id)
        .join(Course, Course.id == CourseEnrollment.course_id)
        .where(Course.created_by == principal.id)
    )
    return User.id.in_(taught)


def submission_filter(principal: Principal) -> ColumnElement[bool]:
    if principal.is_student:
        return Submission.student_id == principal.id
    if principal.is_faculty:
        own_assignments = select(Assignment.id).where(Assignment.created_by == principal.id)
        return Submission.assignment_id.in_(own_assignments)
    return false()


def placement_filter(
    principal: Principal,
    department: Optional[str] = None,
    batch_year: Optional[int] = None,
    company: Optional[str] = None,
) -> list[ColumnElement[bool]]:
    if principal.is_student:
        # Own records only, matched on both identifiers
        return [
            Placement.student_code == principal.student_code,
            Placement.email == principal.email,
        ]

    if not principal.is_admin:
        return [false()]

    conditions: list[ColumnElement[bool]] = [true()]
    if department:
        conditions.append(Placement.department == department)
    if batch_year is not None:
        conditions.append(Placement.batch_year == batch_year)
    if company:
        conditions.append(Placement.company == company)
    return conditions
