"""Piecewise-linear interpolation across breakpoints."""
from __future__ import annotations

import functools
import math
from dataclasses import dataclass
from typing import Callable, Sequence

from flowframe.easing import get_easing
from flowframe.types import ComputationError, ConfigurationError

CLAMP = "clamp"
EXTEND = "extend"
IDENTITY = "identity"

EXTRAPOLATIONS = (CLAMP, EXTEND, IDENTITY)


def validate_breakpoints(
    input_range: Sequence[float], output_range: Sequence[float]
) -> None:
    """Raise ConfigurationError unless the ranges describe a usable mapping."""
    if len(input_range) < 2:
        raise ConfigurationError(
            f"input range needs at least 2 breakpoints, got {len(input_range)}"
        )
    if len(input_range) != len(output_range):
        raise ConfigurationError(
            f"input range has {len(input_range)} breakpoints "
            f"but output range has {len(output_range)}"
        )
    for value in (*input_range, *output_range):
        if not math.isfinite(value):
            raise ConfigurationError(f"breakpoints must be finite, got {value!r}")
    for lo, hi in zip(input_range, input_range[1:]):
        if hi <= lo:
            raise ConfigurationError(
                f"input range must be strictly increasing, got {list(input_range)}"
            )


def _validate_extrapolation(policy: str) -> None:
    if policy not in EXTRAPOLATIONS:
        raise ConfigurationError(
            f"Unknown extrapolation {policy!r}, expected one of {EXTRAPOLATIONS}"
        )


def _segment(
    x: float,
    in_lo: float,
    in_hi: float,
    out_lo: float,
    out_hi: float,
    easing: Callable[[float], float] | None,
) -> float:
    t = (x - in_lo) / (in_hi - in_lo)
    if easing is not None:
        t = easing(t)
    return out_lo + (out_hi - out_lo) * t


def _interpolate(
    x: float,
    input_range: Sequence[float],
    output_range: Sequence[float],
    extrapolate_left: str,
    extrapolate_right: str,
    easing: Callable[[float], float] | None,
) -> float:
    last = len(input_range) - 1

    if x < input_range[0]:
        if extrapolate_left == CLAMP:
            return output_range[0]
        if extrapolate_left == IDENTITY:
            return x
        i = 0
    elif x > input_range[last]:
        if extrapolate_right == CLAMP:
            return output_range[last]
        if extrapolate_right == IDENTITY:
            return x
        i = last - 1
    else:
        i = 0
        while i < last - 1 and x > input_range[i + 1]:
            i += 1
        if x == input_range[i + 1]:
            return output_range[i + 1]

    value = _segment(
        x,
        input_range[i],
        input_range[i + 1],
        output_range[i],
        output_range[i + 1],
        easing,
    )
    if not math.isfinite(value):
        raise ComputationError("interpolate", value)
    return value


def interpolate(
    x: float,
    input_range: Sequence[float],
    output_range: Sequence[float],
    extrapolate_left: str = CLAMP,
    extrapolate_right: str = CLAMP,
    easing: Callable[[float], float] | None = None,
) -> float:
    """Map ``x`` through the breakpoints.

    Each side outside the input range follows its own extrapolation policy:
    ``clamp`` holds the end value, ``extend`` continues the nearest segment,
    ``identity`` returns ``x`` unchanged. ``easing`` reshapes the position
    within each segment.
    """
    validate_breakpoints(input_range, output_range)
    _validate_extrapolation(extrapolate_left)
    _validate_extrapolation(extrapolate_right)
    return _interpolate(
        x, input_range, output_range, extrapolate_left, extrapolate_right, easing
    )


@dataclass(frozen=True)
class Curve:
    """Breakpoint mapping validated once at construction.

    Calling a curve skips validation, so curves built at configuration time
    can be evaluated many times per frame.
    """

    inputs: tuple[float, ...]
    outputs: tuple[float, ...]
    extrapolate_left: str = CLAMP
    extrapolate_right: str = CLAMP
    easing: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "inputs", tuple(float(v) for v in self.inputs))
        object.__setattr__(self, "outputs", tuple(float(v) for v in self.outputs))
        validate_breakpoints(self.inputs, self.outputs)
        _validate_extrapolation(self.extrapolate_left)
        _validate_extrapolation(self.extrapolate_right)
        if self.easing is not None:
            get_easing(self.easing)

    def __call__(self, x: float) -> float:
        easing_fn = get_easing(self.easing) if self.easing is not None else None
        return _interpolate(
            x,
            self.inputs,
            self.outputs,
            self.extrapolate_left,
            self.extrapolate_right,
            easing_fn,
        )


def clamp01(x: float) -> float:
    return max(0.0, min(1.0, x))


@functools.lru_cache(maxsize=1024)
def curve(
    inputs: tuple[float, ...],
    outputs: tuple[float, ...],
    extrapolate_left: str = CLAMP,
    extrapolate_right: str = CLAMP,
    easing: str | None = None,
) -> Curve:
    """Shared, cached Curve for hot per-frame paths."""
    return Curve(inputs, outputs, extrapolate_left, extrapolate_right, easing)
