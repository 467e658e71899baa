"""Slug and date-path helpers for content nodes."""

from typing import Any

from slugify import slugify

from sitegen.models.node import DateInfo, parse_utc_datetime


def create_date_info(value: Any) -> DateInfo:
    """Break a date into zero-padded UTC parts plus a /YYYY/MM/DD/ fragment.

    Raises:
        InvalidDateError: If the value is not a valid date.
    """
    dt = parse_utc_datetime(value)
    year = str(dt.year)
    month = f"{dt.month:02d}"
    day = f"{dt.day:02d}"
    return DateInfo(day=day, month=month, year=year, path=f"/{year}/{month}/{day}/")


def make_slug(*candidates: str | None) -> str | None:
    """Slugify the first candidate that yields a non-empty slug.

    Returns None when every candidate is empty.
    """
    for candidate in candidates:
        if candidate:
            slug = slugify(str(candidate)).lower()
            if slug:
                return slug
    return None
