"""Heuristic hazard scoring for near-Earth objects."""
from __future__ import annotations

from typing import Literal

RiskLevel = Literal["low", "medium", "high"]

DEFAULT_ESTIMATED_DIAMETER_KM = 0.1

# (threshold, points); every rule that matches contributes
DISTANCE_RULES = ((1_000_000, 30), (5_000_000, 20))
DIAMETER_RULES = ((1.0, 15), (0.5, 10))
HAZARD_FLAG_POINTS = 25

HIGH_RISK_SCORE = 50
MEDIUM_RISK_SCORE = 30


def calculate_risk_score(min_distance_km: float, estimated_diameter_km: float, is_hazardous: bool) -> int:
    """Additive score out of 100. NaN inputs simply fail their comparisons."""
    score = 0
    for threshold, points in DISTANCE_RULES:
        if min_distance_km < threshold:
            score += points
    if is_hazardous:
        score += HAZARD_FLAG_POINTS
    for threshold, points in DIAMETER_RULES:
        if estimated_diameter_km > threshold:
            score += points
    return score


def classify_risk(score: int) -> RiskLevel:
    if score >= HIGH_RISK_SCORE:
        return "high"
    if score >= MEDIUM_RISK_SCORE:
        return "medium"
    return "low"
