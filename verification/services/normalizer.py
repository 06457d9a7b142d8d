# verification/services/normalizer.py
from __future__ import annotations
import numpy as np

from .vector_math import VectorLike, as_vector

EPSILON = 1e-12


def normalize(embedding: VectorLike) -> np.ndarray:
    """
    L2 normalization. Vectors with norm <= EPSILON come back as zeros of the
    same length, never inf/NaN. The returned array is read-only.
    """
    vec = as_vector(embedding)
    peak = float(np.max(np.abs(vec)))
    out = np.zeros_like(vec)
    if peak > 0:
        unit = vec / peak
        unit_norm = float(np.linalg.norm(unit))
        if peak * unit_norm > EPSILON:
            out = unit / unit_norm
    out.flags.writeable = False
    return out
