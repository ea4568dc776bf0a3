from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional, TypeVar

from knowtrack.errors import StoreError

T = TypeVar("T")


def parse_ts(value: Any) -> Optional[datetime]:
    """Parse a store timestamp; naive values are taken as UTC."""
    if not value:
        return None
    ts = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


def require_ts(value: Any, name: str) -> datetime:
    ts = parse_ts(value)
    if ts is None:
        raise ValueError(f"{name} is missing")
    return ts


def convert_rows(table: str, rows: Iterable[Dict[str, Any]], convert: Callable[[Dict[str, Any]], T]) -> List[T]:
    """Map store rows to models; a row that does not fit is a store failure."""
    out = []
    for r in rows:
        try:
            out.append(convert(r))
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise StoreError(f"Malformed row in {table}: {e!r}") from e
    return out


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()
