# verification/services/confidence.py
from __future__ import annotations

from .thresholds import (
    COSINE_POINTS,
    DEFAULT_THRESHOLDS,
    DISTANCE_POINTS,
    VARIANCE_POINTS,
    MatchThresholds,
)
from .types import ConfidenceLevel


def _cosine_points(cosine_sim: float, t: MatchThresholds) -> int:
    strong, good, fair = COSINE_POINTS
    if cosine_sim > t.cosine_strong:
        return strong
    if cosine_sim > t.cosine_good:
        return good
    if cosine_sim > t.cosine_fair:
        return fair
    return 0


def _distance_points(euclidean_dist: float, t: MatchThresholds) -> int:
    strong, good, fair = DISTANCE_POINTS
    if euclidean_dist < t.distance_strong:
        return strong
    if euclidean_dist < t.distance_good:
        return good
    if euclidean_dist < t.distance_fair:
        return fair
    return 0


def _variance_points(variance: float, t: MatchThresholds) -> int:
    rich, fair = VARIANCE_POINTS
    if variance > t.variance_rich:
        return rich
    if variance > t.variance_fair:
        return fair
    return 0


def confidence_score(
    cosine_sim: float,
    euclidean_dist: float,
    variance: float,
    thresholds: MatchThresholds = DEFAULT_THRESHOLDS,
) -> int:
    """Additive rubric over three independent bands, 0..10 with default points."""
    return (
        _cosine_points(cosine_sim, thresholds)
        + _distance_points(euclidean_dist, thresholds)
        + _variance_points(variance, thresholds)
    )


def classify_confidence(
    cosine_sim: float,
    euclidean_dist: float,
    variance: float,
    thresholds: MatchThresholds = DEFAULT_THRESHOLDS,
) -> ConfidenceLevel:
    score = confidence_score(cosine_sim, euclidean_dist, variance, thresholds)
    if score >= thresholds.very_high_score:
        return ConfidenceLevel.VERY_HIGH
    if score >= thresholds.high_score:
        return ConfidenceLevel.HIGH
    if score >= thresholds.medium_score:
        return ConfidenceLevel.MEDIUM
    return ConfidenceLevel.LOW
