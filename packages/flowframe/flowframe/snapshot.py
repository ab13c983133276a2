"""JSON-compatible frame dumps for an external renderer."""
from __future__ import annotations

import dataclasses
import json
import logging
from pathlib import Path
from typing import Any, Iterable

from flowframe.frame import FrameState, evaluate_frame
from flowframe.scene import SceneConfig

logger = logging.getLogger(__name__)

_SNAPSHOT_VERSION = 1


def _container(state: Any) -> dict[str, Any] | None:
    if state is None:
        return None
    return dataclasses.asdict(state)


def frame_to_dict(state: FrameState) -> dict[str, Any]:
    """Serialize a frame. Only visible objects are listed."""
    balances = state.balances
    return {
        "version": _SNAPSHOT_VERSION,
        "frame": state.frame,
        "phase": state.phase,
        "value_unit": state.value_unit,
        "threshold_reached_frame": state.window.threshold_reached_frame,
        "transition_frame": state.window.transition_frame,
        "frozen_source_balance": state.window.frozen_source_balance,
        "balances": {
            "source": balances.source,
            "destination": balances.destination,
            "in_flight": balances.in_flight,
            "pending": balances.pending,
            "displayed_source": balances.displayed_source,
        },
        "wallet": _container(state.wallet),
        "safe": _container(state.safe),
        "lane": state.lane,
        "objects": [dataclasses.asdict(obj) for obj in state.visible_objects],
    }


def export_frames(scene: SceneConfig, frames: Iterable[float]) -> list[dict[str, Any]]:
    return [frame_to_dict(evaluate_frame(scene, frame)) for frame in frames]


def dump_frames(scene: SceneConfig, frames: Iterable[float], path: str | Path) -> int:
    """Write the frames to ``path`` as a JSON list. Returns the frame count."""
    data = export_frames(scene, frames)
    path = Path(path)
    with path.open("w", encoding="utf-8") as fh:
        json.dump(data, fh, indent=2)
    logger.info("wrote %d frames to %s", len(data), path)
    return len(data)
