import math
from datetime import datetime, timedelta, timezone

from orbitwatch.processing.approaches import days_until, future_approaches, minimum, parse_float, sort_approaches

NOON = datetime(2025, 3, 10, 12, 0, tzinfo=timezone.utc)


def test_parse_float_accepts_strings_and_numbers():
    assert parse_float("45290298.225725659") == 45290298.225725659
    assert parse_float(" 12.5 ") == 12.5
    assert parse_float(3) == 3.0


def test_parse_float_turns_garbage_into_nan():
    for value in (None, "", "1,000", "abc", {}, True):
        assert math.isnan(parse_float(value))


def test_sort_does_not_touch_input():
    approaches = [{"close_approach_date": "2030-01-01"}, {"close_approach_date": "2010-01-01"}]
    ordered = sort_approaches(approaches)
    assert [a["close_approach_date"] for a in ordered] == ["2010-01-01", "2030-01-01"]
    assert approaches[0]["close_approach_date"] == "2030-01-01"


def test_future_includes_exact_instant():
    approaches = [{"close_approach_date": "2025-03-10"}, {"close_approach_date": "2025-03-11"}]
    midnight = datetime(2025, 3, 10, tzinfo=timezone.utc)
    assert len(future_approaches(approaches, midnight)) == 2
    assert len(future_approaches(approaches, NOON)) == 1


def test_days_until_uses_ceiling():
    assert days_until(NOON + timedelta(days=2, hours=12), NOON) == 3
    assert days_until(NOON + timedelta(days=2), NOON) == 2
    assert days_until(NOON + timedelta(minutes=1), NOON) == 1


def test_minimum_propagates_nan():
    assert minimum([3.0, 1.0, 2.0]) == 1.0
    assert math.isnan(minimum([3.0, math.nan]))
    assert minimum([]) == math.inf
