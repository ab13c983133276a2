"""Wallet and safe containers: entrance, scale, and balance label."""
from __future__ import annotations

import math
from dataclasses import dataclass

from flowframe.interpolate import Curve, curve
from flowframe.spring import SpringConfig, spring
from flowframe.types import ConfigurationError, Phase, Point

SCALE_ENTRANCE = "entrance"
SCALE_TIMELINE = "timeline"
SCALE_BALANCE = "balance"

SCALE_MODES = (SCALE_ENTRANCE, SCALE_TIMELINE, SCALE_BALANCE)


@dataclass(frozen=True)
class ContainerSpec:
    """How a container (wallet or safe) enters and reacts to its balance.

    Attributes:
        position: Offset of the container from the shared anchor.
        fade_spring: Spring driving opacity 0 -> 1 from ``fade_delay``.
        motion_spring: Spring driving the ``entrance`` scale and rotation.
        motion_delay: Frames before the motion spring starts.
        scale_mode: ``entrance`` maps motion progress, ``timeline`` maps the
            global frame, ``balance`` maps the fill ratio through ``scale``.
        scale: Curve for the chosen scale mode.
        rotation: Curve of motion progress to degrees, or None for 0.
        show_balance: Whether a balance label is rendered.
        alert_value: Rounded balance at which the label starts blinking
            during accumulation. None disables blinking.
        blink_period: Frames per blink cycle.
        visible_from: First phase in which the container is drawn.
    """

    position: Point = (0.0, 0.0)
    fade_spring: SpringConfig = SpringConfig(damping=100.0)
    fade_delay: int = 0
    motion_spring: SpringConfig = SpringConfig(damping=80.0, stiffness=100.0)
    motion_delay: int = 0
    scale_mode: str = SCALE_BALANCE
    scale: Curve = Curve((0.0, 1.0), (0.3, 1.0))
    rotation: Curve | None = None
    show_balance: bool = True
    alert_value: float | None = None
    blink_period: int = 20
    visible_from: str = Phase.ACCUMULATING

    def __post_init__(self) -> None:
        for value in (*self.position, self.alert_value or 0.0):
            if not math.isfinite(value):
                raise ConfigurationError(
                    f"container position and alert_value must be finite, got {value!r}"
                )
        if self.scale_mode not in SCALE_MODES:
            raise ConfigurationError(
                f"Unknown scale_mode {self.scale_mode!r}, expected one of {SCALE_MODES}"
            )
        if self.visible_from not in Phase.ORDER:
            raise ConfigurationError(f"Unknown phase {self.visible_from!r}")
        if self.blink_period < 2:
            raise ConfigurationError(
                f"blink_period must be at least 2, got {self.blink_period}"
            )
        if self.fade_delay < 0 or self.motion_delay < 0:
            raise ConfigurationError("container delays must be non-negative")
        object.__setattr__(
            self, "position", (float(self.position[0]), float(self.position[1]))
        )


@dataclass(frozen=True)
class ContainerState:
    visible: bool
    x: float
    y: float
    scale: float
    rotation: float
    opacity: float
    balance: int | None
    label_opacity: float


def display_round(value: float) -> int:
    """Round half up, the way the balance labels have always been shown."""
    return math.floor(value + 0.5)


def blink_opacity(frame: float, period: int) -> float:
    half = period / 2
    return curve((0.0, half, float(period)), (1.0, 0.2, 1.0))(frame % period)


def evaluate_container(
    spec: ContainerSpec,
    frame: float,
    fps: float,
    phase: str,
    fill: float,
    balance: float,
) -> ContainerState:
    """Derive the container's visuals.

    ``fill`` is the 0..1 ratio used by the ``balance`` scale mode and
    ``balance`` the value shown on the label.
    """
    if Phase.ORDER.index(phase) < Phase.ORDER.index(spec.visible_from):
        return ContainerState(
            visible=False,
            x=spec.position[0],
            y=spec.position[1],
            scale=0.0,
            rotation=0.0,
            opacity=0.0,
            balance=None,
            label_opacity=0.0,
        )

    fade = spring(frame - spec.fade_delay, fps, spec.fade_spring)
    motion = spring(frame - spec.motion_delay, fps, spec.motion_spring)

    if spec.scale_mode == SCALE_ENTRANCE:
        scale = spec.scale(motion)
    elif spec.scale_mode == SCALE_TIMELINE:
        scale = spec.scale(frame)
    else:
        scale = spec.scale(fill)

    rounded = display_round(balance) if spec.show_balance else None
    label_opacity = 1.0 if spec.show_balance else 0.0
    if (
        rounded is not None
        and spec.alert_value is not None
        and phase == Phase.ACCUMULATING
        and rounded >= spec.alert_value
    ):
        label_opacity = blink_opacity(frame, spec.blink_period)

    return ContainerState(
        visible=True,
        x=spec.position[0],
        y=spec.position[1],
        scale=scale,
        rotation=spec.rotation(motion) if spec.rotation is not None else 0.0,
        opacity=curve((0.0, 1.0), (0.0, 1.0))(fade),
        balance=rounded,
        label_opacity=label_opacity,
    )
