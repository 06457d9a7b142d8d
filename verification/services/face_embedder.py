# verification/services/face_embedder.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, List, Tuple
import logging
import numpy as np
import cv2
import onnxruntime as ort

from .normalizer import normalize
from .types import InvalidInput

logger = logging.getLogger("app")

# per-channel gain applied to the crop before resizing
BRIGHTNESS_GAIN = 1.1


def _providers(device: str) -> List[str]:
    avail = set(ort.get_available_providers())
    if device in ("cuda", "auto") and "CUDAExecutionProvider" in avail:
        return ["CUDAExecutionProvider", "CPUExecutionProvider"]
    return ["CPUExecutionProvider"]


def _enhance(face_bgr: np.ndarray) -> np.ndarray:
    """Brighten every channel by BRIGHTNESS_GAIN, clamp to 0..255, truncate to uint8."""
    return np.clip(face_bgr.astype(np.float64) * BRIGHTNESS_GAIN, 0, 255).astype(np.uint8)


def _input_layout(shape) -> Tuple[int, int, bool]:
    """(width, height, channels_first) from a 4-D model input shape."""
    if len(shape) != 4:
        raise ValueError(f"Unsupported embedder input shape: {shape}")
    if shape[1] == 3:  # NCHW
        return int(shape[3]), int(shape[2]), True
    return int(shape[2]), int(shape[1]), False  # NHWC


@dataclass
class FaceEmbedderConfig:
    onnx_path: str
    device: str = "auto"  # "cuda", "cpu"
    providers: Optional[List[str]] = None


class FaceEmbedder:
    """
    Embedding producer over an ONNX face model. Takes an already cropped
    face (HxWx3 uint8 BGR) and returns its L2-normalized embedding.
    """
    def __init__(self, cfg: FaceEmbedderConfig):
        providers = cfg.providers or _providers(cfg.device)
        self.session = ort.InferenceSession(cfg.onnx_path, providers=providers)

        inp = self.session.get_inputs()[0]
        out = self.session.get_outputs()[0]
        self.input_name = inp.name
        self.output_name = out.name
        self.input_width, self.input_height, self.channels_first = _input_layout(inp.shape)
        self.embedding_size = int(out.shape[-1])
        logger.info(
            "Embedder ONNX loaded: %s | input=%sx%s %s | dim=%d | providers=%s",
            cfg.onnx_path, self.input_width, self.input_height,
            "NCHW" if self.channels_first else "NHWC",
            self.embedding_size, self.session.get_providers(),
        )

    def _preprocess(self, face_bgr: np.ndarray) -> np.ndarray:
        img = cv2.resize(_enhance(face_bgr), (self.input_width, self.input_height), interpolation=cv2.INTER_LINEAR)
        img = cv2.cvtColor(img, cv2.COLOR_BGR2RGB).astype(np.float32)
        img = (img - 127.5) / 127.5
        if self.channels_first:
            img = np.transpose(img, (2, 0, 1))
        return np.expand_dims(img, 0)

    def embed(self, face_bgr: np.ndarray) -> np.ndarray:
        if face_bgr is None or face_bgr.size == 0:
            raise InvalidInput("empty face crop")
        x = self._preprocess(face_bgr)
        y = self.session.run([self.output_name], {self.input_name: x})[0]
        vec = np.asarray(y, dtype=np.float64).reshape(-1)
        if vec.size != self.embedding_size:
            raise ValueError(f"Embedder returned {vec.size} values, expected {self.embedding_size}")
        return normalize(vec)
