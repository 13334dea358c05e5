from __future__ import annotations

from datetime import datetime, timezone

UNTITLED = "Untitled"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def iso_timestamp(dt: datetime) -> str:
    """Format *dt* in UTC with millisecond precision and a ``Z`` suffix."""

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt = dt.astimezone(timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def build_front_matter(title: str, description: str, timestamp: str) -> str:
    lines = ["---", f'title: "{title or UNTITLED}"']
    if description:
        lines.append(f'description: "{description}"')
    lines.append(f'date: "{timestamp}"')
    lines.append("---")
    return "\n".join(lines) + "\n\n"


__all__ = ["UNTITLED", "build_front_matter", "iso_timestamp", "utc_now"]
