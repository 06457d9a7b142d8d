# facematch/settings.py
import os
from pathlib import Path

from .logging_config import build_logging

BASE_DIR = Path(__file__).resolve().parent.parent


def _env_bool(name: str, default: bool = False) -> bool:
    val = os.environ.get(name)
    if val is None:
        return default
    return val.strip().lower() in ("1", "true", "yes", "on")


SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "dev-insecure-facematch-key")
DEBUG = _env_bool("DJANGO_DEBUG", False)
ALLOWED_HOSTS = [h for h in os.environ.get("DJANGO_ALLOWED_HOSTS", "localhost,127.0.0.1").split(",") if h]

INSTALLED_APPS = [
    "verification",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

ROOT_URLCONF = "facematch.urls"
WSGI_APPLICATION = "facematch.wsgi.application"

# stateless JSON service, no models
DATABASES = {}

USE_TZ = True

# ---- logging ----
LOG_DIR = Path(os.environ.get("LOG_DIR", BASE_DIR / "logs"))
LOGGING = build_logging(LOG_DIR)

# ---- decision engine ----
# Any verification.services.thresholds.MatchThresholds field may be overridden here.
FACE_MATCH = {
    "use_confidence_in_decision": _env_bool("FACE_MATCH_USE_CONFIDENCE_IN_DECISION", False),
    "average_variance": _env_bool("FACE_MATCH_AVERAGE_VARIANCE", False),
}

# ---- embedding producer ----
EMBEDDER_ONNX = os.environ.get("EMBEDDER_ONNX", str(BASE_DIR / "weights" / "facenet.onnx"))
DEVICE = os.environ.get("DEVICE", "auto")

# ---- MLflow (empty URI disables tracking) ----
MLFLOW_TRACKING_URI = os.environ.get("MLFLOW_TRACKING_URI", "")
MLFLOW_EXPERIMENT = os.environ.get("MLFLOW_EXPERIMENT", "face_verification")
