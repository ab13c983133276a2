"""Player - drives frame evaluation for a host renderer."""

import logging
import math
import time
from typing import Callable, Iterable

from flowframe.clock import FrameClock
from flowframe.frame import FrameState, evaluate_frame
from flowframe.scene import SceneConfig

logger = logging.getLogger(__name__)

FrameHook = Callable[[FrameState], None]


class Player:
    """Walks frames through the engine and hands each result to hooks.

    The player only keeps a cursor. Every frame is evaluated from scratch,
    so seeking and rendering out of order give the same results as
    playing straight through.
    """

    def __init__(self, scene: SceneConfig) -> None:
        self._scene = scene
        self._clock = FrameClock(scene.fps)
        self._frame = 0
        self._start_hooks: list[Callable[[], None]] = []
        self._frame_hooks: list[FrameHook] = []
        self._stop_hooks: list[Callable[[], None]] = []
        self._stop_requested: bool = False
        self._last_phase: str | None = None

    @property
    def scene(self) -> SceneConfig:
        return self._scene

    @property
    def clock(self) -> FrameClock:
        return self._clock

    @property
    def frame(self) -> int:
        return self._frame

    def on_start(self, hook: Callable[[], None]) -> None:
        self._start_hooks.append(hook)

    def on_frame(self, hook: FrameHook) -> None:
        self._frame_hooks.append(hook)

    def on_stop(self, hook: Callable[[], None]) -> None:
        self._stop_hooks.append(hook)

    def request_stop(self) -> None:
        self._stop_requested = True

    def seek(self, frame: int) -> None:
        if frame < 0:
            raise ValueError(f"frame must be non-negative, got {frame}")
        self._frame = frame

    def _emit(self, frame: float) -> FrameState:
        state = evaluate_frame(self._scene, frame)
        if self._last_phase is not None and state.phase != self._last_phase:
            logger.info(
                "phase %s -> %s at frame %s (transition frame %s)",
                self._last_phase,
                state.phase,
                frame,
                state.window.transition_frame,
            )
        self._last_phase = state.phase
        for hook in self._frame_hooks:
            hook(state)
        return state

    def step(self) -> FrameState:
        """Evaluate the frame under the cursor, then advance the cursor."""
        self._stop_requested = False
        return self._advance()

    def _advance(self) -> FrameState:
        state = self._emit(self._frame)
        self._frame += 1
        return state

    def render(self, frames: Iterable[float]) -> list[FrameState]:
        """Evaluate the given frames in the order given."""
        self._stop_requested = False
        states = []
        for frame in frames:
            states.append(self._emit(frame))
            if self._stop_requested:
                break
        return states

    def _start(self) -> None:
        self._stop_requested = False
        for hook in self._start_hooks:
            hook()

    def _stop(self) -> None:
        for hook in self._stop_hooks:
            hook()

    def run(self, n: int) -> None:
        self._start()
        for _ in range(n):
            if self._stop_requested:
                break
            self._advance()
        self._stop()

    def run_seconds(self, seconds: float) -> None:
        self.run(self._clock.frames(seconds))

    def run_realtime(self, n: int | None = None) -> None:
        """Play at the scene's tick rate. Runs until stopped when ``n`` is None."""
        self._start()
        dt = self._clock.dt
        remaining = math.inf if n is None else n
        while remaining > 0 and not self._stop_requested:
            start = time.monotonic()
            self._advance()
            remaining -= 1
            if self._stop_requested:
                break
            sleep_time = dt - (time.monotonic() - start)
            if sleep_time > 0:
                time.sleep(sleep_time)
        self._stop()
