"""
Input normalization shared by the calculator, the schemas and the stores.

Metric values: anything missing, non-numeric or non-finite becomes 0.

Timestamps: valid dates/datetimes (or ISO-8601 strings) become the canonical
UTC form ``YYYY-MM-DDTHH:MM:SS.mmmZ``; naive values are read as UTC. A value
that cannot be parsed is kept as its string form so it can still act as part
of a record key.
"""
import math
from datetime import date, datetime, timezone
from typing import Any, Optional


def normalize_metric(value: Any) -> float:
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return 0.0
    else:
        return 0.0
    return number if math.isfinite(number) else 0.0


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Aware UTC datetime for a parseable value, else None."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text[-1] in "Zz":
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def format_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def normalize_timestamp(value: Any) -> str:
    parsed = parse_timestamp(value)
    if parsed is None:
        return "" if value is None else str(value)
    return format_timestamp(parsed)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
