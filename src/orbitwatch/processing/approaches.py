"""Helpers for reading close-approach records from the NEO lookup API."""
from __future__ import annotations

import math
from datetime import date, datetime, time, timezone
from typing import Any, Iterable, List, Mapping

SECONDS_PER_DAY = 86_400


def parse_float(value: Any) -> float:
    """Parse an upstream numeric field; anything unparsable becomes NaN.

    NASA encodes distances and velocities as decimal strings. Numbers pass
    through unchanged so already-decoded payloads work too.
    """
    if isinstance(value, bool):
        return math.nan
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return math.nan
    return math.nan


def parse_approach_date(text: str) -> date:
    return date.fromisoformat(text)


def approach_instant(approach: Mapping[str, Any]) -> datetime:
    """Midnight UTC of the approach's calendar date."""
    return datetime.combine(parse_approach_date(approach["close_approach_date"]), time(), tzinfo=timezone.utc)


def as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def miss_distance_km(approach: Mapping[str, Any]) -> float:
    return parse_float((approach.get("miss_distance") or {}).get("kilometers"))


def velocity_km_per_hour(approach: Mapping[str, Any]) -> float:
    return parse_float((approach.get("relative_velocity") or {}).get("kilometers_per_hour"))


def sort_approaches(approaches: Iterable[Mapping[str, Any]]) -> List[Mapping[str, Any]]:
    """Chronological copy; approaches on the same day keep their input order."""
    return sorted(approaches, key=lambda approach: parse_approach_date(approach["close_approach_date"]))


def future_approaches(approaches: Iterable[Mapping[str, Any]], now: datetime) -> List[Mapping[str, Any]]:
    now = as_utc(now)
    return [approach for approach in approaches if approach_instant(approach) >= now]


def days_until(moment: datetime, now: datetime) -> int:
    """Whole days until ``moment``, rounded up."""
    return math.ceil((as_utc(moment) - as_utc(now)).total_seconds() / SECONDS_PER_DAY)


def minimum(values: Iterable[float]) -> float:
    """Smallest value, or NaN if any value is NaN."""
    values = list(values)
    if any(math.isnan(value) for value in values):
        return math.nan
    return min(values, default=math.inf)
