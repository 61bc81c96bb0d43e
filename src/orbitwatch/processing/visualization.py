"""Transform a raw NEO lookup record into chart-ready statistics and a hazard assessment."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from orbitwatch.processing.approaches import (
    approach_instant,
    days_until,
    future_approaches,
    miss_distance_km,
    minimum,
    parse_float,
    sort_approaches,
    velocity_km_per_hour,
)
from orbitwatch.processing.models import (
    ApproachStatistics,
    ClosestApproach,
    Diameter,
    HazardAssessment,
    MissDistanceTrend,
    NextCloseApproach,
    ProcessedNEOData,
)
from orbitwatch.processing.risk import DEFAULT_ESTIMATED_DIAMETER_KM, calculate_risk_score, classify_risk


class EmptyApproachHistoryError(ValueError):
    """Raised when a NEO record has no close approaches to summarize."""

    def __init__(self, neo_id: Any) -> None:
        super().__init__(f"NEO {neo_id} has no close approach data")
        self.neo_id = neo_id


def _diameter_km(raw: Mapping[str, Any]) -> Mapping[str, Any]:
    return (raw.get("estimated_diameter") or {}).get("kilometers") or {}


def _diameter_field(kilometers: Mapping[str, Any], *keys: str, default: float) -> float:
    for key in keys:
        if kilometers.get(key) is not None:
            return parse_float(kilometers[key])
    return default


def process_neo_data(raw: Mapping[str, Any], now: Optional[datetime] = None) -> ProcessedNEOData:
    """Build the visualization payload for one NEO.

    Args:
        raw: JSON record from the NEO lookup endpoint.
        now: Reference time for splitting past and future approaches. Defaults
            to the current UTC time, read once.

    Raises:
        EmptyApproachHistoryError: if ``close_approach_data`` is missing or empty.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    approaches = sort_approaches(raw.get("close_approach_data") or [])
    if not approaches:
        raise EmptyApproachHistoryError(raw.get("id"))

    upcoming = future_approaches(approaches, now)

    trend = MissDistanceTrend(
        dates=[approach["close_approach_date"] for approach in approaches],
        distances=[miss_distance_km(approach) for approach in approaches],
        velocities=[velocity_km_per_hour(approach) for approach in approaches],
    )

    closest = 0
    for index, distance in enumerate(trend.distances):
        if distance < trend.distances[closest]:
            closest = index

    statistics = ApproachStatistics(
        closest_approach=ClosestApproach(
            date=trend.dates[closest],
            distance=trend.distances[closest],
            velocity=trend.velocities[closest],
        ),
        average_distance=sum(trend.distances) / len(trend.distances),
        average_velocity=sum(trend.velocities) / len(trend.velocities),
        total_approaches=len(approaches),
        future_approaches=len(upcoming),
    )

    next_approach = NextCloseApproach()
    if upcoming:
        nearest = upcoming[0]
        next_approach = NextCloseApproach(
            date=nearest["close_approach_date"],
            distance=miss_distance_km(nearest),
            days_from_now=days_until(approach_instant(nearest), now),
        )

    kilometers = _diameter_km(raw)
    is_hazardous = raw.get("is_potentially_hazardous_asteroid")
    risk_score = calculate_risk_score(
        minimum(trend.distances),
        _diameter_field(kilometers, "estimated", default=DEFAULT_ESTIMATED_DIAMETER_KM),
        bool(is_hazardous),
    )

    return ProcessedNEOData(
        id=raw.get("id"),
        name=raw.get("name"),
        is_hazardous=is_hazardous,
        diameter=Diameter(
            min=_diameter_field(kilometers, "estimated_min", "estimated_diameter_min", default=0),
            max=_diameter_field(kilometers, "estimated_max", "estimated_diameter_max", default=0),
            estimated=_diameter_field(kilometers, "estimated", default=0),
        ),
        miss_distance_trend=trend,
        statistics=statistics,
        hazard_assessment=HazardAssessment(
            risk_level=classify_risk(risk_score),
            risk_score=risk_score,
            next_close_approach=next_approach,
        ),
    )
