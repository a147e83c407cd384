"""
Common model helpers

Conversions shared by the domain models (timestamps, UUIDs, JSON columns).
"""
import json
from datetime import date, datetime, timezone
from typing import Any, Optional, Union
from uuid import UUID


def utcnow() -> datetime:
    """Timezone-aware current UTC time"""
    return datetime.now(timezone.utc)


def iso(value: Optional[Union[date, datetime]]) -> Optional[str]:
    """ISO string or None"""
    return value.isoformat() if value else None


def uuid_str(value: Optional[UUID]) -> Optional[str]:
    return str(value) if value else None


def parse_uuid(value: Any) -> Optional[UUID]:
    """Accept UUID, str or None"""
    if value is None or value == "":
        return None
    if isinstance(value, UUID):
        return value
    return UUID(str(value))


def parse_datetime(value: Any) -> Optional[datetime]:
    """
    Parse an ISO timestamp (or date) into an aware datetime.

    Naive values are assumed to be UTC. A trailing 'Z' is accepted.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day)
    else:
        dt = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def parse_date(value: Any) -> Optional[date]:
    """Parse an ISO date (a full timestamp is truncated to its date)"""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value)
    if len(text) > 10:
        return parse_datetime(text).date()
    return date.fromisoformat(text)


def load_json(value: Any, default: Any = None) -> Any:
    """Decode a JSON/JSONB column that asyncpg may return as text"""
    if value is None:
        return default
    if isinstance(value, str):
        return json.loads(value)
    return value


def dump_json(value: Any) -> Optional[str]:
    """Encode a value for a JSONB parameter"""
    if value is None:
        return None
    return json.dumps(value, default=str)
