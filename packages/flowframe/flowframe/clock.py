"""FrameClock - maps frame numbers to elapsed time for a fixed tick rate."""

import math

from flowframe.types import ConfigurationError


class FrameClock:
    def __init__(self, fps: float) -> None:
        if not math.isfinite(fps) or fps <= 0:
            raise ConfigurationError("fps must be positive")
        self._fps = fps
        self._dt = 1.0 / fps

    @property
    def fps(self) -> float:
        return self._fps

    @property
    def dt(self) -> float:
        return self._dt

    def seconds(self, frame: float) -> float:
        return frame / self._fps

    def frame_at(self, seconds: float) -> int:
        """Last whole frame at or before ``seconds``."""
        return math.floor(seconds * self._fps + 1e-9)

    def frames(self, seconds: float) -> int:
        """Number of whole frames needed to cover ``seconds``."""
        return math.ceil(seconds * self._fps - 1e-9)
