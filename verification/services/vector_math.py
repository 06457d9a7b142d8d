# verification/services/vector_math.py
from __future__ import annotations
from typing import Sequence, Tuple, Union
import numpy as np

from .types import InvalidInput

VectorLike = Union[Sequence[float], np.ndarray]

# bool, str and object arrays are not embeddings even when numpy could cast them
_NUMERIC_KINDS = "iuf"


def as_vector(values: VectorLike) -> np.ndarray:
    """Coerce to a 1-D float64 vector; empty, multi-dim, non-numeric or NaN/inf input is rejected."""
    try:
        raw = np.asarray(values)
    except (TypeError, ValueError) as e:
        raise InvalidInput(f"embedding is not numeric: {e}") from e
    if raw.dtype.kind not in _NUMERIC_KINDS:
        raise InvalidInput(f"embedding is not numeric: dtype {raw.dtype}")
    if raw.ndim != 1:
        raise InvalidInput(f"embedding must be 1-D, got shape {raw.shape}")
    if raw.size == 0:
        raise InvalidInput("embedding is empty")
    vec = raw.astype(np.float64, copy=False)
    if not np.all(np.isfinite(vec)):
        raise InvalidInput("embedding contains NaN or inf")
    return vec


def as_pair(a: VectorLike, b: VectorLike) -> Tuple[np.ndarray, np.ndarray]:
    va, vb = as_vector(a), as_vector(b)
    if va.shape != vb.shape:
        raise InvalidInput(f"embedding length mismatch: {va.size} != {vb.size}")
    return va, vb


def _peak(vec: np.ndarray) -> float:
    return float(np.max(np.abs(vec)))


def _finite(value, what: str) -> float:
    if not np.isfinite(value):
        raise InvalidInput(f"{what} is out of float range")
    return float(value)


# Every metric works on vectors divided by their largest component and scales
# the result back, so 1e200-sized values do not overflow and 1e-170-sized
# values do not underflow to zero.

def dot(a: VectorLike, b: VectorLike) -> float:
    va, vb = as_pair(a, b)
    sa, sb = _peak(va), _peak(vb)
    if sa == 0 or sb == 0:
        return 0.0
    with np.errstate(over="ignore", under="ignore"):
        return _finite(np.dot(va / sa, vb / sb) * sa * sb, "dot product")


def l2_norm(a: VectorLike) -> float:
    va = as_vector(a)
    s = _peak(va)
    if s == 0:
        return 0.0
    with np.errstate(over="ignore", under="ignore"):
        return _finite(s * np.linalg.norm(va / s), "norm")


def cosine_similarity(a: VectorLike, b: VectorLike) -> float:
    """dot / (|a| * |b|); a zero-norm operand gives 0.0 instead of a division fault."""
    va, vb = as_pair(a, b)
    sa, sb = _peak(va), _peak(vb)
    if sa == 0 or sb == 0:
        return 0.0
    ua, ub = va / sa, vb / sb
    return float(np.dot(ua, ub) / (np.linalg.norm(ua) * np.linalg.norm(ub)))


def euclidean_distance(a: VectorLike, b: VectorLike) -> float:
    va, vb = as_pair(a, b)
    s = max(_peak(va), _peak(vb))
    if s == 0:
        return 0.0
    with np.errstate(over="ignore", under="ignore"):
        return _finite(s * np.linalg.norm(va / s - vb / s), "distance")


def population_variance(a: VectorLike) -> float:
    # ddof=0: mean of squared deviations from the vector's own mean
    va = as_vector(a)
    s = _peak(va)
    if s == 0:
        return 0.0
    with np.errstate(over="ignore", under="ignore"):
        return _finite(np.var(va / s) * s * s, "variance")
