"""Damped spring progress as a pure function of the frame number.

The spring starts at rest at 0 and settles on 1. Progress is evaluated in
closed form at ``t = frame / fps`` so any frame, fractional or not, can be
queried in any order without replaying earlier frames.

Two formulas are used, split at the critical damping boundary:

* underdamped (``zeta < 1``): oscillates around 1 with a decaying envelope.
* critically damped and beyond (``zeta >= 1``): the critically damped
  solution with the natural frequency, which approaches 1 monotonically.
"""
from __future__ import annotations

import math
from dataclasses import dataclass

from flowframe.types import ComputationError, ConfigurationError


@dataclass(frozen=True)
class SpringConfig:
    """Spring tuning. Defaults match the animation library the scenes were tuned in."""

    damping: float = 10.0
    stiffness: float = 100.0
    mass: float = 1.0
    overshoot_clamping: bool = False

    def __post_init__(self) -> None:
        for name in ("damping", "stiffness", "mass"):
            if not math.isfinite(getattr(self, name)):
                raise ConfigurationError(f"spring {name} must be finite")
        if self.stiffness <= 0:
            raise ConfigurationError(
                f"spring stiffness must be positive, got {self.stiffness}"
            )
        if self.damping < 0:
            raise ConfigurationError(
                f"spring damping must be non-negative, got {self.damping}"
            )
        if self.mass <= 0:
            raise ConfigurationError(f"spring mass must be positive, got {self.mass}")

    @property
    def natural_frequency(self) -> float:
        return math.sqrt(self.stiffness / self.mass)

    @property
    def damping_ratio(self) -> float:
        return self.damping / (2.0 * math.sqrt(self.stiffness * self.mass))


def spring(frame: float, fps: float, config: SpringConfig = SpringConfig()) -> float:
    """Return spring progress at ``frame`` frames after the spring was triggered.

    Negative frames have not started yet and return exactly ``0.0``.
    """
    if fps <= 0:
        raise ConfigurationError("fps must be positive")
    if not math.isfinite(frame):
        raise ComputationError("spring", frame)
    if frame < 0:
        return 0.0

    t = frame / fps
    omega0 = config.natural_frequency
    zeta = config.damping_ratio

    if zeta < 1.0:
        omega1 = omega0 * math.sqrt(1.0 - zeta * zeta)
        envelope = math.exp(-zeta * omega0 * t)
        value = 1.0 - envelope * (
            math.cos(omega1 * t) + (zeta * omega0 / omega1) * math.sin(omega1 * t)
        )
    else:
        value = 1.0 - math.exp(-omega0 * t) * (1.0 + omega0 * t)

    if not math.isfinite(value):
        raise ComputationError("spring", value)
    if config.overshoot_clamping and value > 1.0:
        return 1.0
    return value


def measure_spring(
    fps: float,
    config: SpringConfig = SpringConfig(),
    threshold: float = 0.005,
    max_frames: int = 100_000,
) -> int:
    """Return the first frame from which progress stays within ``threshold`` of 1.

    The envelope of both formulas decays monotonically, so once the envelope
    bound itself is inside ``threshold`` every later frame is too. The scan
    stops at the first frame where the bound holds and walks back over any
    frames that were already inside.
    """
    if threshold <= 0:
        raise ConfigurationError(f"threshold must be positive, got {threshold}")

    omega0 = config.natural_frequency
    zeta = config.damping_ratio

    def bound(frame: int) -> float:
        t = frame / fps
        if zeta < 1.0:
            omega1 = omega0 * math.sqrt(1.0 - zeta * zeta)
            amplitude = math.sqrt(1.0 + (zeta * omega0 / omega1) ** 2)
            return amplitude * math.exp(-zeta * omega0 * t)
        return math.exp(-omega0 * t) * (1.0 + omega0 * t)

    settled_from = None
    for frame in range(max_frames + 1):
        if bound(frame) <= threshold:
            settled_from = frame
            break
    if settled_from is None:
        raise ConfigurationError(
            f"spring {config} does not settle within {max_frames} frames"
        )

    while settled_from > 0 and abs(1.0 - spring(settled_from - 1, fps, config)) <= threshold:
        settled_from -= 1
    return settled_from
