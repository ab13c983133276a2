"""Easing functions for breakpoint interpolation."""
from __future__ import annotations

from typing import Callable

from flowframe.types import ConfigurationError


def linear(t: float) -> float:
    return t


def ease_in(t: float) -> float:
    return t * t


def ease_out(t: float) -> float:
    return t * (2 - t)


def ease_in_out(t: float) -> float:
    if t < 0.5:
        return 2 * t * t
    return 1 - (-2 * t + 2) ** 2 / 2


def smoothstep(t: float) -> float:
    return t * t * (3 - 2 * t)


EASINGS: dict[str, Callable[[float], float]] = {
    "linear": linear,
    "ease_in": ease_in,
    "ease_out": ease_out,
    "ease_in_out": ease_in_out,
    "smoothstep": smoothstep,
}


def get_easing(name: str) -> Callable[[float], float]:
    """Look up an easing by name. Raises ConfigurationError if unknown."""
    try:
        return EASINGS[name]
    except KeyError:
        raise ConfigurationError(
            f"Unknown easing {name!r}, expected one of {sorted(EASINGS)}"
        ) from None
