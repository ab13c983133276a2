"""Phase state machine and balance ledger.

Nothing here is cached between calls. Every query re-derives the phase
from the frame prefix ``[0, frame]``, so frames can be evaluated in any
order and always agree with each other:

* While accumulating, the wallet balance is the arrived value of the
  incoming lane.
* The transition frame is either fixed or discovered as the first whole
  frame whose wallet balance reaches the threshold.
* From the transition frame on, the wallet balance is frozen and the
  outgoing lane drains that frozen pool into the safe.
"""
from __future__ import annotations

import math
from dataclasses import dataclass

from flowframe.interpolate import clamp01
from flowframe.scene import SceneConfig
from flowframe.timeline import object_progress
from flowframe.types import Phase


@dataclass(frozen=True)
class PhaseWindow:
    """Phase bookkeeping for one queried frame.

    ``transition_frame`` and ``frozen_source_balance`` stay None until the
    queried frame has reached the transition. ``threshold_reached_frame``
    is only set for threshold-triggered scenes.
    """

    phase: str
    accumulation_start_frame: int
    threshold: float | None
    threshold_reached_frame: int | None
    transition_frame: int | None
    frozen_source_balance: float | None

    @property
    def transferring(self) -> bool:
        return self.phase == Phase.TRANSFERRING

    def relative_frame(self, frame: float) -> float:
        """Frames since the current phase began."""
        if self.transition_frame is not None:
            return frame - self.transition_frame
        return frame - self.accumulation_start_frame


@dataclass(frozen=True)
class Balances:
    """Where the value in play sits at one frame.

    ``source`` rests in the wallet, ``destination`` rests in the safe,
    ``in_flight`` is carried by moving objects and ``pending`` belongs to
    incoming objects that have not launched yet. ``displayed_source`` is
    the wallet label: while transferring, value in flight is still counted
    against the wallet until the safe is credited.
    """

    source: float
    destination: float
    in_flight: float
    pending: float
    displayed_source: float

    @property
    def total(self) -> float:
        return self.source + self.destination + self.in_flight + self.pending


def accumulated_balance(scene: SceneConfig, frame: float) -> float:
    """Arrived value of the incoming lane at ``frame``."""
    lane = scene.incoming
    return sum(
        obj.unit_value * clamp01(object_progress(frame, lane.start_frame, obj, lane, scene.fps))
        for obj in lane.objects
    )


def first_launch_frame(scene: SceneConfig) -> int:
    lane = scene.incoming
    return lane.start_frame + min(obj.delay for obj in lane.objects)


def find_threshold_frame(scene: SceneConfig, frame: float) -> int | None:
    """First whole frame in ``[0, frame]`` whose wallet balance reaches the threshold.

    Returns None when the threshold is not reached by ``frame`` (or the
    scene has no threshold). Frames before the first launch hold nothing
    and are skipped.
    """
    if not scene.use_threshold:
        return None
    last = math.floor(frame)
    for f in range(first_launch_frame(scene), last + 1):
        if scene.reached(accumulated_balance(scene, f)):
            return f
    return None


def resolve_window(scene: SceneConfig, frame: float) -> PhaseWindow:
    """Decide the phase of ``frame`` from its prefix alone."""
    threshold_frame = find_threshold_frame(scene, frame)

    if not scene.has_destination:
        transition = None
    elif scene.use_threshold:
        transition = threshold_frame
    elif frame >= scene.transfer_start_frame:
        transition = scene.transfer_start_frame
    else:
        transition = None

    if transition is None:
        return PhaseWindow(
            phase=Phase.ACCUMULATING,
            accumulation_start_frame=scene.incoming.start_frame,
            threshold=scene.threshold,
            threshold_reached_frame=threshold_frame,
            transition_frame=None,
            frozen_source_balance=None,
        )
    return PhaseWindow(
        phase=Phase.TRANSFERRING,
        accumulation_start_frame=scene.incoming.start_frame,
        threshold=scene.threshold,
        threshold_reached_frame=threshold_frame,
        transition_frame=transition,
        frozen_source_balance=accumulated_balance(scene, transition),
    )


def allotments(scene: SceneConfig, frozen: float) -> list[float]:
    """Share of the frozen pool carried by each participating outgoing object.

    Objects take their full unit value in order until the pool runs out;
    the last one may carry a partial value. Slivers below the threshold
    tolerance are not worth an object.
    """
    lane = scene.outgoing
    if lane is None:
        return []
    remaining = frozen
    slack = frozen * scene.threshold_tolerance
    shares: list[float] = []
    for obj in lane.objects:
        if remaining <= slack:
            break
        share = min(obj.unit_value, remaining)
        shares.append(share)
        remaining -= share
    return shares


def accumulation_balances(scene: SceneConfig, frame: float) -> Balances:
    lane = scene.incoming
    source = in_flight = pending = 0.0
    for obj in lane.objects:
        progress = object_progress(frame, lane.start_frame, obj, lane, scene.fps)
        if frame - lane.start_frame - obj.delay < 0:
            pending += obj.unit_value
            continue
        arrived = clamp01(progress)
        source += obj.unit_value * arrived
        in_flight += obj.unit_value * (1.0 - arrived)
    return Balances(
        source=source,
        destination=0.0,
        in_flight=in_flight,
        pending=pending,
        displayed_source=source,
    )


def transfer_start(scene: SceneConfig, window: PhaseWindow) -> int:
    """Global frame at which the outgoing lane's clock starts."""
    if window.transition_frame is None or scene.outgoing is None:
        raise ValueError("transfer_start needs a transferring window")
    return window.transition_frame + scene.outgoing.start_frame


def transfer_progress(scene: SceneConfig, window: PhaseWindow, frame: float) -> list[float]:
    """Spring progress of each participating outgoing object."""
    lane = scene.outgoing
    start = transfer_start(scene, window)
    count = len(allotments(scene, window.frozen_source_balance or 0.0))
    return [
        object_progress(frame, start, lane.objects[i], lane, scene.fps)
        for i in range(count)
    ]


def transfer_balances(scene: SceneConfig, window: PhaseWindow, frame: float) -> Balances:
    frozen = window.frozen_source_balance or 0.0
    shares = allotments(scene, frozen)
    progress = transfer_progress(scene, window, frame)

    destination = in_flight = 0.0
    for share, p in zip(shares, progress):
        arrived = clamp01(p)
        destination += share * arrived
        if p > 0.0 and arrived < 1.0:
            in_flight += share * (1.0 - arrived)
    destination = min(destination, frozen)
    source = max(0.0, frozen - destination - in_flight)
    return Balances(
        source=source,
        destination=destination,
        in_flight=in_flight,
        pending=0.0,
        displayed_source=max(0.0, frozen - destination),
    )


def balances_at(scene: SceneConfig, frame: float) -> tuple[PhaseWindow, Balances]:
    """Phase window and balances of ``frame``."""
    window = resolve_window(scene, frame)
    if window.transferring:
        return window, transfer_balances(scene, window, frame)
    return window, accumulation_balances(scene, frame)
