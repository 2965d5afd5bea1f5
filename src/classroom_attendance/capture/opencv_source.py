from __future__ import annotations

import logging
import threading
from typing import Callable, List

import cv2
import numpy as np
from PIL import ImageGrab

from ..core.enums import VideoSourceKind
from ..core.exceptions import DetectionCycleFailed, SourceUnavailable
from .source import CaptureSource, CaptureStream

logger = logging.getLogger(__name__)


class _BaseStream:
    kind: VideoSourceKind

    def __init__(self):
        self._callbacks: List[Callable[[], None]] = []
        self._released = False

    def on_ended(self, callback: Callable[[], None]) -> None:
        self._callbacks.append(callback)

    def _signal_ended(self) -> None:
        for callback in list(self._callbacks):
            callback()


class WebcamStream(_BaseStream):
    """BGR frames from an OpenCV capture device."""

    kind = VideoSourceKind.WEBCAM

    def __init__(self, capture: "cv2.VideoCapture"):
        super().__init__()
        self._capture = capture
        # read_frame runs on a worker thread; release must not interleave with it.
        self._lock = threading.Lock()

    def read_frame(self) -> np.ndarray:
        with self._lock:
            if self._released:
                raise DetectionCycleFailed("Webcam already released")
            ok, frame = self._capture.read()
        if not ok or frame is None:
            logger.warning("Webcam returned no frame; treating stream as ended")
            self._signal_ended()
            raise DetectionCycleFailed("Webcam returned no frame")
        return frame

    def release(self) -> None:
        with self._lock:
            if not self._released:
                self._released = True
                self._capture.release()


class ScreenStream(_BaseStream):
    """Screen share: grabs the primary display with Pillow and returns BGR frames."""

    kind = VideoSourceKind.SCREEN

    def read_frame(self) -> np.ndarray:
        if self._released:
            raise DetectionCycleFailed("Screen capture already released")
        try:
            image = ImageGrab.grab()
        except OSError as e:
            self._signal_ended()
            raise DetectionCycleFailed(f"Screen capture failed: {e}") from e
        return cv2.cvtColor(np.asarray(image.convert("RGB")), cv2.COLOR_RGB2BGR)

    def release(self) -> None:
        self._released = True


class OpenCVCaptureSource(CaptureSource):
    def __init__(self, *, camera_index: int = 0, width: int = 1280, height: int = 720):
        self._camera_index = int(camera_index)
        self._width = width
        self._height = height

    async def acquire(self, kind: VideoSourceKind) -> CaptureStream:
        if kind == VideoSourceKind.WEBCAM:
            return self._open_webcam()
        return self._open_screen()

    def _open_webcam(self) -> WebcamStream:
        capture = cv2.VideoCapture(self._camera_index)
        if not capture.isOpened():
            capture.release()
            raise SourceUnavailable(f"Failed to access webcam #{self._camera_index}")
        capture.set(cv2.CAP_PROP_FRAME_WIDTH, self._width)
        capture.set(cv2.CAP_PROP_FRAME_HEIGHT, self._height)
        return WebcamStream(capture)

    def _open_screen(self) -> ScreenStream:
        try:
            ImageGrab.grab()
        except OSError as e:
            raise SourceUnavailable(f"Failed to access screen: {e}") from e
        return ScreenStream()
