# app/schemas/common.py

from datetime import datetime
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, BeforeValidator

from app.core.academic import as_utc


def normalize_code(value):
    """Strip and upper-case department / course codes; blank means absent."""
    if value is None:
        return None
    value = str(value).strip().upper()
    return value or None


def reject_null(value):
    # Partial updates may omit a required column but never blank it
    if value is None:
        raise ValueError("may be omitted but not set to null")
    return value


# Optional on the wire, NULL when blank
DepartmentCode = Annotated[Optional[str], BeforeValidator(normalize_code)]

# Must be present and non-blank
RequiredCode = Annotated[str, BeforeValidator(normalize_code)]

# Stored timezone-aware; naive input is taken as UTC
UtcDateTime = Annotated[datetime, AfterValidator(as_utc)]


class MessageResponse(BaseModel):
    message: str
