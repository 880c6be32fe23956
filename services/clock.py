"""
Time helpers and identifier tokens.

All timestamps leave the service as ISO-8601 UTC strings with millisecond
precision (``2025-01-10T10:00:00.000Z``).  Identifier tokens use a compact,
URL-safe rendering of the same instant (``20250110T100000000Z``).
"""

from __future__ import annotations

import threading
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_iso(moment: datetime) -> str:
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def parse_iso(value: str) -> datetime:
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def hours_between(since_iso: str, now: datetime) -> float:
    """Elapsed hours from an ISO timestamp to ``now``."""
    return (now - parse_iso(since_iso)).total_seconds() / 3600.0


def id_token(moment: datetime) -> str:
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y%m%dT%H%M%S") + f"{moment.microsecond // 1000:03d}Z"


class IdTokenGenerator:
    """Issues strictly increasing millisecond tokens.

    Two requests landing in the same millisecond would otherwise produce the
    same token.  When that happens the later one is pushed forward by one
    millisecond, so the token keeps its documented shape and stays unique.
    """

    def __init__(self) -> None:
        self._last: Optional[datetime] = None
        self._lock = threading.Lock()

    def next(self, moment: datetime) -> str:
        moment = moment.astimezone(timezone.utc).replace(
            microsecond=(moment.microsecond // 1000) * 1000
        )
        with self._lock:
            if self._last is not None and moment <= self._last:
                moment = self._last + timedelta(milliseconds=1)
            self._last = moment
        return id_token(moment)
