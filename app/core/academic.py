# app/core/academic.py

from datetime import datetime, timezone


def current_calendar_year() -> int:
    return datetime.now(timezone.utc).year


def academic_year(admission_year: int, current_year: int | None = None) -> int:
    """
    Year of study for a student admitted in ``admission_year``.

    A student admitted this calendar year is in year 1. An admission year in
    the future is clamped to 1 rather than rejected; nothing forbids
    registering an incoming batch early.
    """
    if current_year is None:
        current_year = current_calendar_year()
    return max(1, current_year - admission_year + 1)


def admission_year_for(course_year: int, current_year: int | None = None) -> int:
    """Admission year of the batch currently sitting in ``course_year``."""
    if current_year is None:
        current_year = current_calendar_year()
    return current_year - course_year + 1


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Naive datetimes are read as UTC; aware ones are converted to it."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
