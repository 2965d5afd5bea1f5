from __future__ import annotations

from typing import Any, Callable, Protocol, Sequence

from ..core.enums import VideoSourceKind
from ..sessions.model import Detection


class CaptureStream(Protocol):
    """An acquired video source. Must be released on every exit path."""

    kind: VideoSourceKind

    def read_frame(self) -> Any:
        raise NotImplementedError

    def release(self) -> None:
        raise NotImplementedError

    def on_ended(self, callback: Callable[[], None]) -> None:
        """Register a callback for a stream that stops on its own (device unplugged, share stopped)."""

        raise NotImplementedError


class CaptureSource(Protocol):
    async def acquire(self, kind: VideoSourceKind) -> CaptureStream:
        """Raise SourceUnavailable when permission is denied or no device exists."""

        raise NotImplementedError


class DetectionSource(Protocol):
    async def detect(self, frame: Any) -> Sequence[Detection]:
        raise NotImplementedError
