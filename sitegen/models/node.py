"""Content node data models."""

from datetime import date, datetime, timezone
from typing import Any, ClassVar

from pydantic import BaseModel, Field, field_validator, model_validator

# Placeholder for series that have not been joined against posts yet
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class InvalidDateError(ValueError):
    """Raised when a date value cannot be read as a point in time."""


def parse_utc_datetime(value: Any) -> datetime:
    """Normalize a date value to an aware UTC datetime.

    Accepts datetimes, calendar dates (midnight UTC) and ISO 8601 strings.
    Naive values are read as UTC. Anything else raises InvalidDateError,
    never a fallback to "now" or the epoch.
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        try:
            dt = datetime.fromisoformat(value.strip())
        except ValueError as exc:
            raise InvalidDateError(f"Invalid date: {value!r}") from exc
    else:
        raise InvalidDateError(f"Invalid date: {value!r}")

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class NodeInternal(BaseModel):
    """Bookkeeping attached by the content source."""

    type_name: str
    origin: str = ""
    timestamp: datetime = Field(default_factory=_utcnow)


class DateInfo(BaseModel):
    """Zero-padded UTC calendar breakdown of a node date."""

    day: str
    month: str
    year: str
    path: str


class ImageRef(BaseModel):
    path: str | None = None


class ContentNode(BaseModel):
    """Fields shared by every node in the content graph."""

    TYPE_NAME: ClassVar[str] = ""

    id: str
    path: str | None = None
    slug: str | None = None
    title: str | None = None
    name: str | None = None
    description: str | None = None
    date: datetime | None = None
    date_info: DateInfo | None = None
    image: ImageRef | None = None
    internal: NodeInternal

    # Front matter keys we don't model (author, cover, ...) ride along
    model_config = {"extra": "allow"}

    @model_validator(mode="before")
    @classmethod
    def _default_internal(cls, data: Any) -> Any:
        """Fill in internal.type_name from the node class when omitted."""
        if isinstance(data, dict):
            internal = data.get("internal")
            if internal is None:
                data = {**data, "internal": {"type_name": cls.TYPE_NAME}}
            elif isinstance(internal, dict) and "type_name" not in internal:
                internal = {**internal, "type_name": cls.TYPE_NAME}
                data = {**data, "internal": internal}
        return data

    @field_validator("date", mode="before")
    @classmethod
    def _parse_date(cls, value: Any) -> datetime | None:
        if value is None:
            return None
        return parse_utc_datetime(value)


class BlogPost(ContentNode):
    """A dated article under /blog."""

    TYPE_NAME: ClassVar[str] = "BlogPost"

    date: datetime
    tags: list[str] | None = None
    series: str | None = None
    is_future: bool = False


class Series(ContentNode):
    """A named group of posts, one Markdown file per series."""

    TYPE_NAME: ClassVar[str] = "Series"

    has_posts: bool = False
    last_post: datetime | None = None


class Tag(ContentNode):
    TYPE_NAME: ClassVar[str] = "Tag"

    count: int = 0

