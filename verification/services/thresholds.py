# verification/services/thresholds.py
from __future__ import annotations
import math
from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Dict, Mapping, Optional

from .types import ConfidenceLevel

# Score points per band of the confidence rubric
COSINE_POINTS = (4, 3, 2)
DISTANCE_POINTS = (4, 3, 2)
VARIANCE_POINTS = (2, 1)


@dataclass(frozen=True)
class MatchThresholds:
    """
    Hand-tuned cutpoints of the decision engine. Defaults reproduce the
    calibrated behavior exactly; every comparison against them is strict.
    """
    # confidence rubric: cosine band (>)
    cosine_strong: float = 0.90
    cosine_good: float = 0.80
    cosine_fair: float = 0.70
    # confidence rubric: distance band (<)
    distance_strong: float = 0.5
    distance_good: float = 1.0
    distance_fair: float = 1.5
    # confidence rubric: variance band (>)
    variance_rich: float = 0.01
    variance_fair: float = 0.005
    # score -> level (>=)
    very_high_score: int = 8
    high_score: int = 6
    medium_score: int = 4

    # match decision
    decision_cosine: float = 0.75
    decision_distance: float = 1.2
    quality_variance: float = 0.01
    low_quality_multiplier: float = 0.9
    use_confidence_in_decision: bool = False
    decision_min_confidence: ConfidenceLevel = ConfidenceLevel.HIGH

    # match type
    high_match_cosine: float = 0.85
    high_match_distance: float = 0.8
    medium_match_cosine: float = 0.75
    medium_match_distance: float = 1.2

    # quality score from both embeddings instead of the first one only
    average_variance: bool = False

    @classmethod
    def from_mapping(cls, overrides: Mapping[str, Any]) -> "MatchThresholds":
        known = {f.name: f for f in fields(cls)}
        unknown = sorted(set(overrides) - set(known))
        if unknown:
            raise KeyError(f"unknown threshold keys: {', '.join(unknown)}")

        values: Dict[str, Any] = {}
        for key, raw in overrides.items():
            default = getattr(cls, key)
            if isinstance(default, ConfidenceLevel):
                values[key] = raw if isinstance(raw, ConfidenceLevel) else ConfidenceLevel[str(raw).upper()]
            elif isinstance(default, bool):
                if not isinstance(raw, bool):
                    raise TypeError(f"{key} must be a bool, got {raw!r}")
                values[key] = raw
            elif isinstance(raw, bool):
                raise TypeError(f"{key} must be a number, got {raw!r}")
            elif isinstance(default, int):
                if isinstance(raw, float) and not raw.is_integer():
                    raise ValueError(f"{key} must be a whole number, got {raw!r}")
                values[key] = int(raw)
            else:
                value = float(raw)
                if not math.isfinite(value):
                    raise ValueError(f"{key} must be finite, got {raw!r}")
                values[key] = value
        return replace(cls(), **values)

    @classmethod
    def from_settings(cls, settings_obj: Optional[Any] = None) -> "MatchThresholds":
        """Build from `settings.FACE_MATCH`; bad keys or values -> ImproperlyConfigured."""
        from django.core.exceptions import ImproperlyConfigured

        if settings_obj is None:
            from django.conf import settings as settings_obj
        overrides = getattr(settings_obj, "FACE_MATCH", None) or {}
        try:
            return cls.from_mapping(overrides)
        except (KeyError, TypeError, ValueError) as e:
            raise ImproperlyConfigured(f"FACE_MATCH: {e}") from e

    def as_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        out["decision_min_confidence"] = self.decision_min_confidence.name
        return out


DEFAULT_THRESHOLDS = MatchThresholds()
