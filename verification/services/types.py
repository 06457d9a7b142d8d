# verification/services/types.py
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, Dict


class InvalidInput(ValueError):
    """Embeddings that cannot be compared (empty, mismatched length, NaN/inf)."""


class FaceNotFound(InvalidInput):
    """No face crop for one of the two images."""


class ConfidenceLevel(IntEnum):
    LOW = 0
    MEDIUM = 1
    HIGH = 2
    VERY_HIGH = 3


class MatchType(Enum):
    SAME_PERSON_HIGH_CONFIDENCE = "same_person_high_confidence"
    SAME_PERSON_MEDIUM_CONFIDENCE = "same_person_medium_confidence"
    DIFFERENT_PEOPLE = "different_people"


@dataclass(frozen=True)
class MatchResult:
    cosine_similarity: float
    euclidean_distance: float
    composite_similarity: float
    confidence: ConfidenceLevel
    is_match: bool
    match_type: MatchType
    quality_score: float

    def to_payload(self) -> Dict[str, Any]:
        """Mapping in the shape the mobile client reads (camelCase, enums by name)."""
        return {
            "isMatch": self.is_match,
            "matchType": self.match_type.name,
            "cosineSimilarity": self.cosine_similarity,
            "euclideanDistance": self.euclidean_distance,
            "compositeSimilarity": self.composite_similarity,
            "confidence": self.confidence.name,
            "qualityScore": self.quality_score,
        }
