# verification/services/pipeline.py
from __future__ import annotations
from typing import Optional
import logging
import numpy as np

from .face_embedder import FaceEmbedder, FaceEmbedderConfig
from .matcher import EmbeddingMatcher
from .types import FaceNotFound, MatchResult

logger = logging.getLogger("app")


def embedder_from_settings() -> FaceEmbedder:
    from django.conf import settings

    return FaceEmbedder(
        FaceEmbedderConfig(
            onnx_path=getattr(settings, "EMBEDDER_ONNX", "weights/facenet.onnx"),
            device=getattr(settings, "DEVICE", "auto"),
        )
    )


def verify_face_pair(
    embedder: FaceEmbedder,
    face_a: Optional[np.ndarray],
    face_b: Optional[np.ndarray],
    matcher: Optional[EmbeddingMatcher] = None,
) -> MatchResult:
    """Cropped face A vs cropped face B. A missing crop means no face was found."""
    for label, face in (("first", face_a), ("second", face_b)):
        if face is None or face.size == 0:
            logger.info("pair: no face crop for %s image", label)
            raise FaceNotFound(f"no face in {label} image")

    emb_a = embedder.embed(face_a)
    emb_b = embedder.embed(face_b)
    return (matcher or EmbeddingMatcher()).compare(emb_a, emb_b)
