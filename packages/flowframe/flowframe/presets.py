"""SceneRegistry and the built-in animation variants."""
from __future__ import annotations

import copy
import logging
from typing import Any

from flowframe.config import scene_from_dict
from flowframe.scene import SceneConfig
from flowframe.spring import SpringConfig, measure_spring

logger = logging.getLogger(__name__)

Recipe = dict[str, Any]


def _merge(base: dict[str, Any], overrides: dict[str, Any]) -> None:
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _merge(base[key], value)
        else:
            base[key] = copy.deepcopy(value)


class SceneRegistry:
    """Stores named scene recipes. Recipes are pure JSON-serializable dicts."""

    def __init__(self) -> None:
        self._recipes: dict[str, Recipe] = {}

    def define(self, name: str, recipe: Recipe) -> None:
        """Define a named recipe. Overwrites if name exists."""
        self._recipes[name] = copy.deepcopy(recipe)

    def build(self, name: str, overrides: Recipe | None = None) -> SceneConfig:
        """Build a scene from a recipe. Raises KeyError if name not defined.

        Nested dicts in ``overrides`` are merged key by key; any other value
        (lists included) replaces the recipe's value.
        """
        if name not in self._recipes:
            raise KeyError(name)
        merged = copy.deepcopy(self._recipes[name])
        if overrides:
            _merge(merged, overrides)
        logger.debug("building scene %r (overrides: %s)", name, sorted(overrides or {}))
        return scene_from_dict(merged)

    def recipe(self, name: str) -> Recipe:
        """Return a copy of one recipe. Raises KeyError if not defined."""
        if name not in self._recipes:
            raise KeyError(name)
        return copy.deepcopy(self._recipes[name])

    def recipes(self) -> dict[str, Recipe]:
        """Return a copy of all defined recipes."""
        return copy.deepcopy(self._recipes)

    def names(self) -> list[str]:
        return list(self._recipes)

    def has(self, name: str) -> bool:
        """Check if recipe name is defined."""
        return name in self._recipes

    def remove(self, name: str) -> None:
        """Remove a recipe. Raises KeyError if not defined."""
        if name not in self._recipes:
            raise KeyError(name)
        del self._recipes[name]


# (delay, rotation, scale, offset_x, offset_y)
INCOMING_TOKENS = [
    (0, 10, 0.6, 0, 0),
    (15, -15, 0.65, 15, -10),
    (30, 20, 0.6, -10, -5),
    (45, -10, 0.7, 20, -15),
    (60, 15, 0.65, -5, -8),
    (75, -20, 0.6, 10, -12),
    (90, 8, 0.65, -15, -3),
    (105, -12, 0.6, 5, -18),
    (120, 18, 0.7, -20, 5),
    (135, -8, 0.65, 12, -22),
    (150, 12, 0.6, -8, -7),
    (165, -18, 0.65, 18, -14),
]

OUTGOING_TOKENS = [
    (0, 0, 0.6, 0, 0),
    (8, 5, 0.65, 15, -10),
    (16, -8, 0.6, -10, -5),
    (24, 10, 0.7, 20, -15),
    (32, -5, 0.65, -5, -8),
    (40, 8, 0.6, 10, -12),
    (48, -10, 0.65, -15, -3),
    (56, 3, 0.6, 5, -18),
    (64, -12, 0.65, -20, 5),
    (72, 8, 0.6, 12, -22),
    (80, -5, 0.65, -8, -7),
    (88, 10, 0.6, 18, -14),
]

MONEY_BILLS = [
    (0, 15, 0.6, 200, -150),
    (5, -20, 0.7, 300, -100),
    (10, 30, 0.65, 250, -200),
    (15, -15, 0.55, 350, -80),
    (20, 25, 0.6, 180, -120),
    (25, -30, 0.65, 400, -150),
    (30, 20, 0.7, 280, -180),
    (35, -25, 0.6, 320, -100),
]

TOKEN_SPRING = {"damping": 60, "stiffness": 240}
TOKENS_START_FRAME = 5
# Frames allowed for the last incoming token to land, then a short pause.
SETTLE_BUFFER = 60
TRANSFER_PAUSE = 10


def settle_frames(spring: dict[str, Any], fps: float = 30) -> int:
    """Frames to wait after the last launch: the buffer, or longer for slow springs."""
    return max(SETTLE_BUFFER, measure_spring(fps, SpringConfig(**spring)))


def _objects(rows: list[tuple], unit_value: float = 1) -> list[dict[str, Any]]:
    return [
        {
            "delay": delay,
            "rotation": rotation,
            "scale": scale,
            "offset": [dx, dy],
            "unit_value": unit_value,
        }
        for delay, rotation, scale, dx, dy in rows
    ]


def _incoming_lane(unit_value: float = 1) -> Recipe:
    return {
        "start_frame": TOKENS_START_FRAME,
        "spring": dict(TOKEN_SPRING),
        "origin": [-500, 0],
        "anchor": [0, 0],
        "style": {"start_scale": 0.3, "peak_at": 0.4, "fade_in_until": 0.2},
        "objects": _objects(INCOMING_TOKENS, unit_value),
    }


def _outgoing_lane(unit_value: float = 1) -> Recipe:
    return {
        "start_frame": 0,
        "spring": dict(TOKEN_SPRING),
        "origin": [0, 0],
        "anchor": [400, -250],
        "style": {"start_scale": 0.3, "peak_at": 0.4, "fade_in_until": 0.3},
        "bounce": {"start": 27, "length": 8, "height": -5},
        "objects": _objects(OUTGOING_TOKENS, unit_value),
    }


def wallet_recipe() -> Recipe:
    """Tokens fly in from the left; the wallet grows over eight seconds."""
    return {
        "fps": 30,
        "value_unit": "count",
        "incoming": _incoming_lane(),
        "wallet": {
            "scale_mode": "timeline",
            "scale": {"inputs": [0, 240], "outputs": [0.3, 1], "easing": "smoothstep"},
        },
    }


def money_flow_recipe() -> Recipe:
    """Bills burst out of the wallet and fade away."""
    return {
        "fps": 30,
        "value_unit": "currency",
        "incoming": {
            "start_frame": 30,
            "spring": {"damping": 50, "stiffness": 100},
            "origin": [0, 0],
            "anchor": [0, 0],
            "style": {
                "start_scale": 0.3,
                "peak_at": 0.3,
                "settle_scale": 0.8,
                "fade_in_until": 0.2,
                "fade_out_from": 0.8,
            },
            "objects": _objects(MONEY_BILLS, unit_value=20),
        },
        "wallet": {
            "scale_mode": "entrance",
            "motion_delay": 5,
            "motion_spring": {"damping": 80, "stiffness": 100},
            "scale": {"inputs": [0, 1], "outputs": [0.8, 1]},
            "rotation": {"inputs": [0, 1], "outputs": [-5, 0]},
            "show_balance": False,
        },
    }


def transfer_recipe() -> Recipe:
    """Tokens fill the wallet, then all of them move on to the safe."""
    last_delay = max(row[0] for row in INCOMING_TOKENS)
    return {
        "fps": 30,
        "value_unit": "count",
        "has_destination": True,
        "transfer_start_frame": TOKENS_START_FRAME
        + last_delay
        + settle_frames(TOKEN_SPRING)
        + TRANSFER_PAUSE,
        "incoming": _incoming_lane(),
        "outgoing": _outgoing_lane(),
        "wallet": {
            "scale_mode": "balance",
            "scale": {"inputs": [0, 1], "outputs": [0.3, 1.0]},
            "alert_value": len(INCOMING_TOKENS),
            "blink_period": 20,
        },
    }


def threshold_transfer_recipe() -> Recipe:
    """Currency variant: the transfer starts as soon as the wallet holds 500."""
    return {
        "fps": 30,
        "value_unit": "currency",
        "has_destination": True,
        "use_threshold": True,
        "threshold": 500,
        "incoming": _incoming_lane(unit_value=100),
        "outgoing": _outgoing_lane(unit_value=100),
        "wallet": {
            "scale_mode": "balance",
            "scale": {"inputs": [0, 1], "outputs": [0.3, 1.0]},
        },
    }


BUILTIN_RECIPES = {
    "wallet": wallet_recipe,
    "money_flow": money_flow_recipe,
    "transfer": transfer_recipe,
    "threshold_transfer": threshold_transfer_recipe,
}


def default_registry() -> SceneRegistry:
    """Registry preloaded with the built-in variants."""
    registry = SceneRegistry()
    for name, make in BUILTIN_RECIPES.items():
        registry.define(name, make())
    return registry
