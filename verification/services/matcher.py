# verification/services/matcher.py
from __future__ import annotations
from typing import Optional
import logging

from .confidence import classify_confidence
from .decision import categorize_match, decide_match
from .thresholds import DEFAULT_THRESHOLDS, MatchThresholds
from .types import MatchResult
from .vector_math import (
    VectorLike,
    as_pair,
    cosine_similarity,
    euclidean_distance,
    population_variance,
)

logger = logging.getLogger("app")


class EmbeddingMatcher:
    """
    Compares two embeddings and grades the result.

    Metrics are computed on the vectors as given; normalization is expected to
    have happened when the embeddings were produced. The quality score comes
    from the first embedding only unless `average_variance` is set.
    Stateless apart from the (frozen) thresholds, safe to share between threads.
    """
    def __init__(self, thresholds: Optional[MatchThresholds] = None):
        self.thresholds = thresholds or DEFAULT_THRESHOLDS

    def compare(self, embedding1: VectorLike, embedding2: VectorLike) -> MatchResult:
        t = self.thresholds
        e1, e2 = as_pair(embedding1, embedding2)

        cos = cosine_similarity(e1, e2)
        dist = euclidean_distance(e1, e2)
        variance = population_variance(e1)
        if t.average_variance:
            variance = (variance + population_variance(e2)) / 2.0

        confidence = classify_confidence(cos, dist, variance, t)
        is_match = decide_match(cos, dist, confidence, variance, t)
        match_type = categorize_match(cos, dist, confidence, t)

        logger.info(
            "match: cos=%.4f dist=%.4f var=%.5f -> %s match=%s type=%s",
            cos, dist, variance, confidence.name, is_match, match_type.name,
        )
        return MatchResult(
            cosine_similarity=cos,
            euclidean_distance=dist,
            composite_similarity=cos,
            confidence=confidence,
            is_match=is_match,
            match_type=match_type,
            quality_score=variance,
        )


def compare_embeddings(
    embedding1: VectorLike,
    embedding2: VectorLike,
    thresholds: Optional[MatchThresholds] = None,
) -> MatchResult:
    return EmbeddingMatcher(thresholds).compare(embedding1, embedding2)
