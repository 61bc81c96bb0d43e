import json
import math
from datetime import date, datetime, timezone

import pytest

from orbitwatch.processing.visualization import EmptyApproachHistoryError, process_neo_data

NOW = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)


def _approach(day, km, kph="10000"):
    return {
        "close_approach_date": day,
        "miss_distance": {"kilometers": km},
        "relative_velocity": {"kilometers_per_hour": kph},
    }


def _record(approaches, hazardous=False, kilometers=None):
    record = {
        "id": "3542519",
        "name": "(2010 PK9)",
        "is_potentially_hazardous_asteroid": hazardous,
        "close_approach_data": approaches,
    }
    if kilometers is not None:
        record["estimated_diameter"] = {"kilometers": kilometers}
    return record


def test_trend_is_sorted_chronologically():
    raw = _record(
        [
            _approach("2031-05-02", "7000000"),
            _approach("1999-12-31", "8000000"),
            _approach("2024-06-15", "6000000"),
        ]
    )
    result = process_neo_data(raw, now=NOW)
    dates = [date.fromisoformat(d) for d in result.miss_distance_trend.dates]
    assert dates == sorted(dates)


def test_trend_arrays_stay_aligned():
    raw = _record(
        [
            _approach("2030-01-01", "3000000", "30000"),
            _approach("2010-01-01", "1000000", "10000"),
            _approach("2020-01-01", "2000000", "20000"),
        ]
    )
    trend = process_neo_data(raw, now=NOW).miss_distance_trend
    assert trend.dates == ["2010-01-01", "2020-01-01", "2030-01-01"]
    assert trend.distances == [1000000.0, 2000000.0, 3000000.0]
    assert trend.velocities == [10000.0, 20000.0, 30000.0]


def test_same_day_approaches_keep_input_order():
    raw = _record([_approach("2020-01-01", "2"), _approach("2020-01-01", "1")])
    assert process_neo_data(raw, now=NOW).miss_distance_trend.distances == [2.0, 1.0]


def test_missing_diameter_defaults_to_zero():
    result = process_neo_data(_record([_approach("2020-01-01", "9000000")]), now=NOW)
    assert result.diameter.min == 0
    assert result.diameter.max == 0
    assert result.diameter.estimated == 0


def test_diameter_reads_catalog_field_names():
    kilometers = {"estimated_diameter_min": 0.2, "estimated_diameter_max": 0.4}
    result = process_neo_data(_record([_approach("2020-01-01", "9000000")], kilometers=kilometers), now=NOW)
    assert result.diameter.min == 0.2
    assert result.diameter.max == 0.4
    assert result.diameter.estimated == 0


def test_maximum_risk_score():
    raw = _record(
        [_approach("2020-01-01", "500000")],
        hazardous=True,
        kilometers={"estimated_min": 1.0, "estimated_max": 2.0, "estimated": 1.5},
    )
    assessment = process_neo_data(raw, now=NOW).hazard_assessment
    assert assessment.risk_score == 100
    assert assessment.risk_level == "high"


def test_risk_uses_closest_of_all_approaches():
    raw = _record([_approach("2000-01-01", "900000"), _approach("2030-01-01", "40000000")])
    assessment = process_neo_data(raw, now=NOW).hazard_assessment
    # default 0.1 km diameter adds nothing
    assert assessment.risk_score == 50
    assert assessment.risk_level == "high"


def test_past_only_history_has_no_next_approach():
    result = process_neo_data(_record([_approach("2000-03-04", "1000000")]), now=NOW)
    assert result.hazard_assessment.next_close_approach.to_dict() == {
        "date": "N/A",
        "distance": 0,
        "daysFromNow": 0,
    }
    assert result.statistics.future_approaches == 0


def test_days_from_now_rounds_up():
    # midnight Jan 4th is 2.5 days after noon Jan 1st
    result = process_neo_data(_record([_approach("2025-01-04", "1200000")]), now=NOW)
    nxt = result.hazard_assessment.next_close_approach
    assert nxt.date == "2025-01-04"
    assert nxt.distance == 1200000
    assert nxt.days_from_now == 3


def test_next_approach_is_nearest_future_one():
    raw = _record(
        [
            _approach("2040-01-01", "1"),
            _approach("2001-01-01", "2"),
            _approach("2026-07-01", "3"),
        ]
    )
    result = process_neo_data(raw, now=NOW)
    assert result.hazard_assessment.next_close_approach.date == "2026-07-01"
    assert result.statistics.future_approaches == 2
    assert result.statistics.total_approaches == 3


def test_approach_earlier_today_counts_as_past():
    result = process_neo_data(_record([_approach("2025-01-01", "1")]), now=NOW)
    assert result.hazard_assessment.next_close_approach.date == "N/A"


def test_averages():
    raw = _record(
        [
            _approach("2020-01-01", "1000000", "10000"),
            _approach("2021-01-01", "3000000", "20000"),
        ]
    )
    statistics = process_neo_data(raw, now=NOW).statistics
    assert statistics.average_distance == 2000000
    assert statistics.average_velocity == 15000


def test_closest_approach_comes_from_one_record():
    raw = _record(
        [
            _approach("2001-01-01", "5000000", "11111"),
            _approach("2002-01-01", "500000", "22222"),
            _approach("2003-01-01", "9000000", "33333"),
        ]
    )
    closest = process_neo_data(raw, now=NOW).statistics.closest_approach
    assert closest.distance == 500000
    assert closest.date == "2002-01-01"
    assert closest.velocity == 22222


def test_output_is_repeatable():
    raw = _record(
        [_approach("2030-01-01", "2500000"), _approach("2010-01-01", "700000")],
        hazardous=True,
        kilometers={"estimated": 0.7},
    )
    first = process_neo_data(raw, now=NOW)
    second = process_neo_data(raw, now=NOW)
    assert first.to_json() == second.to_json()
    assert first is not second


def test_input_is_not_mutated():
    approaches = [_approach("2030-01-01", "1"), _approach("2010-01-01", "2")]
    raw = _record(approaches)
    process_neo_data(raw, now=NOW)
    assert [a["close_approach_date"] for a in raw["close_approach_data"]] == ["2030-01-01", "2010-01-01"]


def test_unparsable_numbers_become_nan():
    raw = _record([_approach("2020-01-01", "n/a", "fast")], hazardous=True)
    result = process_neo_data(raw, now=NOW)
    assert math.isnan(result.statistics.average_distance)
    assert math.isnan(result.statistics.closest_approach.velocity)
    # only the hazard flag scores
    assert result.hazard_assessment.risk_score == 25
    assert json.loads(result.to_json())["statistics"]["averageDistance"] is None


@pytest.mark.parametrize("approaches", [None, []])
def test_empty_history_raises(approaches):
    raw = _record(approaches)
    with pytest.raises(EmptyApproachHistoryError, match="3542519"):
        process_neo_data(raw, now=NOW)


def test_serialized_keys_match_frontend_contract():
    payload = process_neo_data(_record([_approach("2030-01-01", "1")]), now=NOW).to_dict()
    assert set(payload) == {
        "id",
        "name",
        "isHazardous",
        "diameter",
        "missDistanceTrend",
        "statistics",
        "hazardAssessment",
    }
    assert set(payload["statistics"]) == {
        "closestApproach",
        "averageDistance",
        "averageVelocity",
        "totalApproaches",
        "futureApproaches",
    }
    assert set(payload["hazardAssessment"]) == {"riskLevel", "riskScore", "nextCloseApproach"}
    assert set(payload["hazardAssessment"]["nextCloseApproach"]) == {"date", "distance", "daysFromNow"}


def test_naive_now_is_treated_as_utc():
    naive = datetime(2025, 1, 1, 12, 0)
    result = process_neo_data(_record([_approach("2025-01-04", "1")]), now=naive)
    assert result.hazard_assessment.next_close_approach.days_from_now == 3
