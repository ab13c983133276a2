"""Flow objects and their per-frame visual state.

A lane is an ordered sequence of flow objects sharing one start frame, one
spring tuning, one origin and one destination anchor. Each object runs its
own spring, offset by its delay, and every visual attribute is derived
from that progress.
"""
from __future__ import annotations

import math
from dataclasses import dataclass

from flowframe.interpolate import Curve, clamp01, curve
from flowframe.spring import SpringConfig, spring
from flowframe.types import ConfigurationError, Point


def _require_finite(owner: str, **values: float) -> None:
    for name, value in values.items():
        if not math.isfinite(value):
            raise ConfigurationError(f"{owner} {name} must be finite, got {value!r}")


@dataclass(frozen=True)
class FlowObject:
    """One bill or token. Identity is its index within the lane."""

    delay: int = 0
    offset: Point = (0.0, 0.0)
    rotation: float = 0.0
    scale: float = 0.6
    unit_value: float = 1.0

    def __post_init__(self) -> None:
        _require_finite(
            "flow object",
            delay=self.delay,
            offset_x=self.offset[0],
            offset_y=self.offset[1],
            rotation=self.rotation,
            scale=self.scale,
            unit_value=self.unit_value,
        )
        if self.delay < 0:
            raise ConfigurationError(f"delay must be non-negative, got {self.delay}")
        if self.unit_value < 0:
            raise ConfigurationError(
                f"unit_value must be non-negative, got {self.unit_value}"
            )
        if self.scale <= 0:
            raise ConfigurationError(f"scale must be positive, got {self.scale}")
        object.__setattr__(self, "offset", (float(self.offset[0]), float(self.offset[1])))


@dataclass(frozen=True)
class ObjectStyle:
    """Shape of the scale and opacity curves shared by a lane.

    Scale runs ``start_scale -> rest_scale -> rest_scale * settle_scale``
    over progress ``0 -> peak_at -> 1``. Opacity fades in until
    ``fade_in_until``; with ``fade_out_from`` set it fades back out to 0
    at progress 1.
    """

    start_scale: float = 0.3
    peak_at: float = 0.4
    settle_scale: float = 1.0
    fade_in_until: float = 0.2
    fade_out_from: float | None = None

    def __post_init__(self) -> None:
        _require_finite(
            "style", start_scale=self.start_scale, settle_scale=self.settle_scale
        )
        if not 0.0 < self.peak_at < 1.0:
            raise ConfigurationError(f"peak_at must be in (0, 1), got {self.peak_at}")
        if not 0.0 < self.fade_in_until < 1.0:
            raise ConfigurationError(
                f"fade_in_until must be in (0, 1), got {self.fade_in_until}"
            )
        if self.fade_out_from is not None and not (
            self.fade_in_until < self.fade_out_from < 1.0
        ):
            raise ConfigurationError(
                f"fade_out_from must be in ({self.fade_in_until}, 1), "
                f"got {self.fade_out_from}"
            )

    def scale_curve(self, rest_scale: float) -> Curve:
        return curve(
            (0.0, self.peak_at, 1.0),
            (self.start_scale, rest_scale, rest_scale * self.settle_scale),
        )

    def opacity_curve(self) -> Curve:
        if self.fade_out_from is None:
            return curve((0.0, self.fade_in_until, 1.0), (0.0, 1.0, 1.0))
        return curve(
            (0.0, self.fade_in_until, self.fade_out_from, 1.0), (0.0, 1.0, 1.0, 0.0)
        )


@dataclass(frozen=True)
class Bounce:
    """Landing bounce: a short dip and return once the object has nearly arrived.

    The window starts ``start`` frames after the object's own trigger frame
    and lasts ``length`` frames.
    """

    start: int = 27
    length: int = 8
    height: float = -5.0
    arm_at: float = 0.9

    def __post_init__(self) -> None:
        _require_finite(
            "bounce",
            start=self.start,
            length=self.length,
            height=self.height,
            arm_at=self.arm_at,
        )
        if self.length <= 0:
            raise ConfigurationError(f"bounce length must be positive, got {self.length}")
        if self.start < 0:
            raise ConfigurationError(f"bounce start must be non-negative, got {self.start}")


_BOUNCE_SHAPE = curve((0.0, 0.5, 1.0), (0.0, 1.0, 0.0))


@dataclass(frozen=True)
class Lane:
    """An ordered group of flow objects moving from ``origin`` to ``anchor``."""

    objects: tuple[FlowObject, ...]
    start_frame: int = 0
    spring: SpringConfig = SpringConfig()
    origin: Point = (0.0, 0.0)
    anchor: Point = (0.0, 0.0)
    style: ObjectStyle = ObjectStyle()
    bounce: Bounce | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "objects", tuple(self.objects))
        if not self.objects:
            raise ConfigurationError("lane needs at least one flow object")
        _require_finite(
            "lane",
            start_frame=self.start_frame,
            origin_x=self.origin[0],
            origin_y=self.origin[1],
            anchor_x=self.anchor[0],
            anchor_y=self.anchor[1],
        )
        if self.start_frame < 0:
            raise ConfigurationError(
                f"start_frame must be non-negative, got {self.start_frame}"
            )

    @property
    def total_value(self) -> float:
        return sum(obj.unit_value for obj in self.objects)

    @property
    def last_delay(self) -> int:
        return max(obj.delay for obj in self.objects)


@dataclass(frozen=True)
class ObjectState:
    """Visual attributes of one flow object at one frame."""

    index: int
    visible: bool
    progress: float
    x: float
    y: float
    rotation: float
    scale: float
    opacity: float

    @property
    def arrived(self) -> float:
        """Progress clamped to [0, 1], the fraction of value that has landed."""
        return clamp01(self.progress)


def local_frame(frame: float, start_frame: float, obj: FlowObject) -> float:
    return frame - start_frame - obj.delay


def object_progress(
    frame: float, start_frame: float, obj: FlowObject, lane: Lane, fps: float
) -> float:
    """Spring progress of ``obj`` at global ``frame``; 0 before it launches."""
    return spring(local_frame(frame, start_frame, obj), fps, lane.spring)


def evaluate_object(
    index: int, frame: float, start_frame: float, lane: Lane, fps: float
) -> ObjectState:
    obj = lane.objects[index]
    local = local_frame(frame, start_frame, obj)
    if local < 0:
        return ObjectState(
            index=index,
            visible=False,
            progress=0.0,
            x=lane.origin[0],
            y=lane.origin[1],
            rotation=0.0,
            scale=0.0,
            opacity=0.0,
        )

    progress = spring(local, fps, lane.spring)
    target_x = lane.anchor[0] + obj.offset[0]
    target_y = lane.anchor[1] + obj.offset[1]
    x = curve((0.0, 1.0), (lane.origin[0], target_x))(progress)
    y = curve((0.0, 1.0), (lane.origin[1], target_y))(progress)

    bounce = lane.bounce
    if bounce is not None and progress >= bounce.arm_at:
        window = curve(
            (float(bounce.start), float(bounce.start + bounce.length)), (0.0, 1.0)
        )
        y += bounce.height * _BOUNCE_SHAPE(window(local))

    return ObjectState(
        index=index,
        visible=True,
        progress=progress,
        x=x,
        y=y,
        rotation=curve((0.0, 1.0), (0.0, obj.rotation))(progress),
        scale=lane.style.scale_curve(obj.scale)(progress),
        opacity=lane.style.opacity_curve()(progress),
    )


def evaluate_lane(
    frame: float, start_frame: float, lane: Lane, fps: float, count: int | None = None
) -> tuple[ObjectState, ...]:
    """Evaluate the first ``count`` objects of the lane (all when None)."""
    n = len(lane.objects) if count is None else min(count, len(lane.objects))
    return tuple(evaluate_object(i, frame, start_frame, lane, fps) for i in range(n))
