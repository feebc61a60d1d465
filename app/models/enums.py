from enum import Enum


class AnnouncementType(str, Enum):
    Academic = "academic"
    Event = "event"
    Notice = "notice"
    Holiday = "holiday"


class Audience(str, Enum):
    All = "all"
    Students = "students"
    Faculty = "faculty"
    Admin = "admin"


class MaterialType(str, Enum):
    Pdf = "pdf"
    Video = "video"
    Link = "link"
    Document = "document"
    Other = "other"


class PlacementType(str, Enum):
    FullTime = "fulltime"
    Internship = "internship"


def enum_values(enum_cls) -> list[str]:
    # Persist the lowercase values, not the member names
    return [member.value for member in enum_cls]
