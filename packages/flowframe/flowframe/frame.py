"""FrameState - the complete animation state of one frame."""
from __future__ import annotations

from dataclasses import dataclass

from flowframe.containers import ContainerState, evaluate_container
from flowframe.interpolate import curve
from flowframe.phase import (
    Balances,
    PhaseWindow,
    allotments,
    balances_at,
    transfer_progress,
    transfer_start,
)
from flowframe.scene import SceneConfig
from flowframe.timeline import ObjectState, evaluate_lane

INCOMING = "incoming"
OUTGOING = "outgoing"

# Progress at which an arriving object starts growing the safe.
SAFE_GROWTH_FROM = 0.8


@dataclass(frozen=True)
class FrameState:
    """Everything a renderer needs to draw one frame.

    ``objects`` holds every object of the active lane, launched or not;
    ``visible_objects`` filters to the ones that should be drawn.
    """

    frame: float
    phase: str
    window: PhaseWindow
    balances: Balances
    value_unit: str
    wallet: ContainerState
    safe: ContainerState | None
    lane: str
    objects: tuple[ObjectState, ...]

    @property
    def visible_objects(self) -> tuple[ObjectState, ...]:
        return tuple(obj for obj in self.objects if obj.visible)


def _safe_fill(scene: SceneConfig, window: PhaseWindow, frame: float) -> float:
    if not window.transferring:
        return 0.0
    per_object = 1.0 / len(scene.outgoing.objects)
    growth = curve((SAFE_GROWTH_FROM, 1.0), (0.0, 1.0))
    return sum(
        per_object * growth(p)
        for p in transfer_progress(scene, window, frame)
        if p >= SAFE_GROWTH_FROM
    )


def _wallet_fill(scene: SceneConfig, window: PhaseWindow, balances: Balances) -> float:
    if window.transferring:
        frozen = window.frozen_source_balance or 0.0
        return 1.0 - balances.destination / frozen if frozen > 0 else 1.0
    total = scene.incoming_total
    return min(balances.source / total, 1.0) if total > 0 else 0.0


def evaluate_frame(scene: SceneConfig, frame: float) -> FrameState:
    """Evaluate ``frame`` from scratch. Equal inputs give equal outputs."""
    if frame < 0:
        raise ValueError(f"frame must be non-negative, got {frame}")

    window, balances = balances_at(scene, frame)

    wallet = evaluate_container(
        scene.wallet,
        frame,
        scene.fps,
        window.phase,
        _wallet_fill(scene, window, balances),
        balances.displayed_source,
    )

    safe = None
    if scene.has_destination:
        safe = evaluate_container(
            scene.safe,
            frame,
            scene.fps,
            window.phase,
            _safe_fill(scene, window, frame),
            balances.destination,
        )

    if window.transferring:
        lane = OUTGOING
        objects = evaluate_lane(
            frame,
            transfer_start(scene, window),
            scene.outgoing,
            scene.fps,
            count=len(allotments(scene, window.frozen_source_balance or 0.0)),
        )
    else:
        lane = INCOMING
        objects = evaluate_lane(
            frame, scene.incoming.start_frame, scene.incoming, scene.fps
        )

    return FrameState(
        frame=frame,
        phase=window.phase,
        window=window,
        balances=balances,
        value_unit=scene.value_unit,
        wallet=wallet,
        safe=safe,
        lane=lane,
        objects=objects,
    )


def phase_at(scene: SceneConfig, frame: float) -> str:
    return balances_at(scene, frame)[0].phase

