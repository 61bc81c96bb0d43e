"""Output models for the NEO visualization payload."""
from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from orbitwatch.processing.risk import RiskLevel


class CamelModel(BaseModel):
    """Serializes with the camelCase keys the frontend charts expect."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)

    def to_json(self) -> str:
        # NaN and infinity serialize as null
        return self.model_dump_json(by_alias=True)


class Diameter(CamelModel):
    min: float = 0
    max: float = 0
    estimated: float = 0


class MissDistanceTrend(CamelModel):
    dates: List[str] = Field(default_factory=list)
    distances: List[float] = Field(default_factory=list)
    velocities: List[float] = Field(default_factory=list)


class ClosestApproach(CamelModel):
    date: str
    distance: float
    velocity: float


class ApproachStatistics(CamelModel):
    closest_approach: ClosestApproach
    average_distance: float
    average_velocity: float
    total_approaches: int
    future_approaches: int


class NextCloseApproach(CamelModel):
    date: str = "N/A"
    distance: float = 0
    days_from_now: int = 0


class HazardAssessment(CamelModel):
    risk_level: RiskLevel
    risk_score: int
    next_close_approach: NextCloseApproach = Field(default_factory=NextCloseApproach)


class ProcessedNEOData(CamelModel):
    id: Any = None
    name: Any = None
    is_hazardous: Any = None
    diameter: Diameter = Field(default_factory=Diameter)
    miss_distance_trend: MissDistanceTrend = Field(default_factory=MissDistanceTrend)
    statistics: ApproachStatistics
    hazard_assessment: HazardAssessment
