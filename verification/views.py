# verification/views.py
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import cv2
import numpy as np
from django.conf import settings
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.utils.decorators import method_decorator
from django.views.decorators.csrf import csrf_exempt
from django.views.generic import View
from mlflow import (  # type: ignore
    log_metric,
    set_experiment,
    set_tracking_uri,
    start_run,
)

from facematch.decorators import log_call
from .services.face_embedder import FaceEmbedder
from .services.matcher import EmbeddingMatcher
from .services.pipeline import embedder_from_settings, verify_face_pair
from .services.thresholds import MatchThresholds
from .services.types import FaceNotFound, InvalidInput, MatchResult

logger = logging.getLogger("app")


# ============================ MODELS ============================

@dataclass
class ModelBundle:
    matcher: Optional[EmbeddingMatcher] = None
    embedder: Optional[FaceEmbedder] = None


MODEL_BUNDLE = ModelBundle()


def _ensure_matcher() -> EmbeddingMatcher:
    """Thresholds are read from settings once per process."""
    if MODEL_BUNDLE.matcher is None:
        thresholds = MatchThresholds.from_settings()
        MODEL_BUNDLE.matcher = EmbeddingMatcher(thresholds)
        logger.info(
            "Matcher initialized | use_confidence=%s | average_variance=%s",
            thresholds.use_confidence_in_decision, thresholds.average_variance,
        )
    return MODEL_BUNDLE.matcher


def _ensure_models() -> None:
    """Matcher plus the ONNX embedder; the model is loaded once per process."""
    _ensure_matcher()
    if MODEL_BUNDLE.embedder is None:
        MODEL_BUNDLE.embedder = embedder_from_settings()
        logger.info("Embedder initialized | dim=%d", MODEL_BUNDLE.embedder.embedding_size)


def _decode_crop(upload) -> Optional[np.ndarray]:
    """Uploaded face crop -> BGR array; an empty upload means no face was cropped."""
    data = upload.read()
    if not data:
        return None
    img = cv2.imdecode(np.frombuffer(data, np.uint8), cv2.IMREAD_COLOR)
    if img is None:
        raise ValueError(f"Failed to decode image: {upload.name}")
    return img


def _error(code: str, message: str, status: int = 400) -> JsonResponse:
    return JsonResponse({"error": code, "message": message}, status=status)


def _track(result: MatchResult) -> None:
    """Push comparison metrics to MLflow when a tracking server is configured."""
    uri = getattr(settings, "MLFLOW_TRACKING_URI", "")
    if not uri:
        return
    try:
        set_tracking_uri(uri)
        set_experiment(getattr(settings, "MLFLOW_EXPERIMENT", "face_verification"))
        with start_run():
            log_metric("cosine_sim", result.cosine_similarity)
            log_metric("euclidean_dist", result.euclidean_distance)
            log_metric("quality_score", result.quality_score)
            log_metric("is_match", int(result.is_match))
    except Exception as e:
        logger.error("MLflow logging error: %s", e)


# ============================ VIEWS ============================

@method_decorator(csrf_exempt, name="dispatch")
class CompareEmbeddingsView(View):
    """
    Accepts JSON: {"embedding1": [float, ...], "embedding2": [float, ...]}
    Returns the comparison result, or 400 with an error code.
    """

    @log_call("CompareEmbeddingsView.post")
    def post(self, request: HttpRequest, *args, **kwargs) -> HttpResponse:
        try:
            payload = json.loads(request.body.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError):
            return _error("INVALID_ARGUMENT", "Body must be JSON.")
        if not isinstance(payload, dict):
            return _error("INVALID_ARGUMENT", "Body must be a JSON object.")

        emb1 = payload.get("embedding1")
        emb2 = payload.get("embedding2")
        if emb1 is None or emb2 is None:
            return _error("INVALID_ARGUMENT", "One or both embeddings are missing.")

        try:
            result = _ensure_matcher().compare(emb1, emb2)
        except InvalidInput as e:
            logger.info("compare rejected: %s", e)
            return _error("INVALID_INPUT", str(e))

        _track(result)
        return JsonResponse(result.to_payload())


class ThresholdsView(View):
    """GET -> active decision thresholds."""

    @log_call("ThresholdsView.get")
    def get(self, request: HttpRequest, *args, **kwargs) -> JsonResponse:
        info: Dict[str, Any] = _ensure_matcher().thresholds.as_dict()
        return JsonResponse(info)


@method_decorator(csrf_exempt, name="dispatch")
class CompareFacesView(View):
    """
    Accepts multipart files `face1`, `face2`: already cropped face images.
    An empty file stands for "no face found" on that image.
    """

    @log_call("CompareFacesView.post")
    def post(self, request: HttpRequest, *args, **kwargs) -> HttpResponse:
        up1 = request.FILES.get("face1")
        up2 = request.FILES.get("face2")
        if up1 is None or up2 is None:
            return _error("INVALID_ARGUMENT", "One or both face images are missing.")

        try:
            face1 = _decode_crop(up1)
            face2 = _decode_crop(up2)
        except ValueError as e:
            logger.error("compare-faces: %s", e)
            return _error("INVALID_ARGUMENT", str(e))

        _ensure_models()
        try:
            result = verify_face_pair(MODEL_BUNDLE.embedder, face1, face2, MODEL_BUNDLE.matcher)
        except FaceNotFound as e:
            logger.info("compare-faces: %s", e)
            return _error("FACE_NOT_FOUND", "Could not detect face in one of the images.")
        except InvalidInput as e:
            logger.info("compare-faces rejected: %s", e)
            return _error("INVALID_INPUT", str(e))

        _track(result)
        return JsonResponse(result.to_payload())
