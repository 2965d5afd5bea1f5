from __future__ import annotations

import asyncio
import math
import threading
from typing import List, Sequence

import cv2
import numpy as np

from ..core.constants import DEFAULT_DETECTION_CONFIDENCE
from ..sessions.model import Detection
from .source import DetectionSource


def weight_to_confidence(weight: float) -> float:
    """Squash a cascade level weight into [0, 1] (logistic)."""
    return 1.0 / (1.0 + math.exp(-float(weight)))


class HaarCascadeDetector(DetectionSource):
    """Face detection only (no identity); one Detection per face box.

    Boxes whose confidence is below ``min_confidence`` are dropped.
    """

    def __init__(
        self,
        *,
        min_confidence: float = DEFAULT_DETECTION_CONFIDENCE,
        scale_factor: float = 1.1,
        min_neighbors: int = 5,
        min_size: int = 40,
    ):
        self._min_confidence = float(min_confidence)
        self._scale_factor = scale_factor
        self._min_neighbors = min_neighbors
        self._min_size = (min_size, min_size)
        self._cascade = cv2.CascadeClassifier(cv2.data.haarcascades + "haarcascade_frontalface_default.xml")
        self._lock = threading.Lock()
        if self._cascade.empty():
            raise RuntimeError("Failed to load Haar cascade for face detection")

    async def detect(self, frame: np.ndarray) -> Sequence[Detection]:
        # Blocking OpenCV work stays off the event loop thread.
        return await asyncio.to_thread(self.detect_sync, frame)

    def detect_sync(self, frame: np.ndarray) -> List[Detection]:
        gray = cv2.cvtColor(frame, cv2.COLOR_BGR2GRAY) if frame.ndim == 3 else frame
        # A timed-out call keeps running in its thread; the next one must wait for it.
        with self._lock:
            rects, _levels, weights = self._cascade.detectMultiScale3(
                gray,
                scaleFactor=self._scale_factor,
                minNeighbors=self._min_neighbors,
                minSize=self._min_size,
                outputRejectLevels=True,
            )

        detections: List[Detection] = []
        # Top-to-bottom, then left-to-right, keeps box ids stable between ticks.
        order = sorted(range(len(rects)), key=lambda i: (int(rects[i][1]), int(rects[i][0])))
        for box_id, i in enumerate(order):
            confidence = weight_to_confidence(float(np.ravel(weights)[i]))
            if confidence >= self._min_confidence:
                detections.append(Detection(box_id=box_id, confidence=round(confidence, 4)))
        return detections
