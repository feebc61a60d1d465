# app/core/exceptions.py

"""
Domain errors raised by services and the rule engine.

Each error carries a stable machine-checkable ``kind`` and the HTTP status it
maps to. ``app.main`` registers a single handler that renders them as
``{"kind": ..., "detail": ...}``.
"""


class CampusError(Exception):
    kind = "error"
    status_code = 400

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class Unauthenticated(CampusError):
    kind = "unauthenticated"
    status_code = 401


class Forbidden(CampusError):
    kind = "forbidden"
    status_code = 403


class NotFound(CampusError):
    kind = "not_found"
    status_code = 404


class Conflict(CampusError):
    # Duplicates have always been answered with 400 by the public API
    kind = "conflict"
    status_code = 400


class ValidationFailed(CampusError):
    kind = "validation"
    status_code = 400
