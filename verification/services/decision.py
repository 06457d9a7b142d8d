# verification/services/decision.py
from __future__ import annotations

from .thresholds import DEFAULT_THRESHOLDS, MatchThresholds
from .types import ConfidenceLevel, MatchType


def decide_match(
    cosine_sim: float,
    euclidean_dist: float,
    confidence: ConfidenceLevel,
    variance: float,
    thresholds: MatchThresholds = DEFAULT_THRESHOLDS,
) -> bool:
    """
    Binary same-person decision: variance-adjusted cosine threshold plus a
    distance ceiling. `confidence` only counts when
    `thresholds.use_confidence_in_decision` is on.
    """
    t = thresholds
    quality_multiplier = 1.0 if variance > t.quality_variance else t.low_quality_multiplier
    adjusted_threshold = t.decision_cosine * quality_multiplier
    ok = cosine_sim > adjusted_threshold and euclidean_dist < t.decision_distance
    if t.use_confidence_in_decision:
        ok = ok and confidence >= t.decision_min_confidence
    return ok


def categorize_match(
    cosine_sim: float,
    euclidean_dist: float,
    confidence: ConfidenceLevel,
    thresholds: MatchThresholds = DEFAULT_THRESHOLDS,
) -> MatchType:
    # first rule that fires wins; independent of decide_match()
    t = thresholds
    if (
        confidence >= ConfidenceLevel.VERY_HIGH
        and cosine_sim > t.high_match_cosine
        and euclidean_dist < t.high_match_distance
    ):
        return MatchType.SAME_PERSON_HIGH_CONFIDENCE
    if (
        confidence >= ConfidenceLevel.HIGH
        and cosine_sim > t.medium_match_cosine
        and euclidean_dist < t.medium_match_distance
    ):
        return MatchType.SAME_PERSON_MEDIUM_CONFIDENCE
    return MatchType.DIFFERENT_PEOPLE
