"""SceneConfig - one configuration struct for every flow animation variant."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from flowframe.containers import ContainerSpec
from flowframe.interpolate import Curve
from flowframe.timeline import Lane
from flowframe.types import ConfigurationError, Phase

logger = logging.getLogger(__name__)

VALUE_CURRENCY = "currency"
VALUE_COUNT = "count"

VALUE_UNITS = (VALUE_CURRENCY, VALUE_COUNT)

DEFAULT_SAFE = ContainerSpec(
    position=(400.0, -250.0),
    scale=Curve((0.0, 1.0), (0.3, 1.1)),
    visible_from=Phase.TRANSFERRING,
)


@dataclass(frozen=True)
class SceneConfig:
    """Everything needed to evaluate any frame of one animation.

    Attributes:
        incoming: Lane of objects accumulating into the wallet.
        outgoing: Lane of objects moving from the wallet to the safe.
        fps: Tick rate used to turn frames into spring time.
        has_destination: Whether a transfer phase and safe exist.
        use_threshold: Start the transfer when the wallet balance first
            reaches ``threshold``; otherwise at ``transfer_start_frame``.
        threshold: Balance that ends accumulation.
        threshold_tolerance: Relative slack when comparing against threshold.
        transfer_start_frame: Fixed transition frame when not using threshold.
        value_unit: ``currency`` or ``count``, carried to the output.
        wallet: Source container.
        safe: Destination container.
    """

    incoming: Lane
    outgoing: Lane | None = None
    fps: float = 30.0
    has_destination: bool = False
    use_threshold: bool = False
    threshold: float | None = None
    threshold_tolerance: float = 1e-6
    transfer_start_frame: int | None = None
    value_unit: str = VALUE_COUNT
    wallet: ContainerSpec = ContainerSpec()
    safe: ContainerSpec = DEFAULT_SAFE

    def __post_init__(self) -> None:
        if not math.isfinite(self.fps) or self.fps <= 0:
            raise ConfigurationError("fps must be positive")
        if self.value_unit not in VALUE_UNITS:
            raise ConfigurationError(
                f"Unknown value_unit {self.value_unit!r}, expected one of {VALUE_UNITS}"
            )
        if not 0.0 <= self.threshold_tolerance < 1.0:
            raise ConfigurationError(
                f"threshold_tolerance must be in [0, 1), got {self.threshold_tolerance}"
            )
        for name in ("threshold", "transfer_start_frame"):
            value = getattr(self, name)
            if value is not None and not math.isfinite(value):
                raise ConfigurationError(f"{name} must be finite, got {value!r}")

        if self.has_destination:
            if self.outgoing is None:
                raise ConfigurationError("has_destination requires an outgoing lane")
            if self.use_threshold:
                if self.threshold is None or self.threshold <= 0:
                    raise ConfigurationError(
                        f"use_threshold requires a positive threshold, got {self.threshold}"
                    )
                if not self.reached(self.incoming_total):
                    raise ConfigurationError(
                        f"threshold {self.threshold} can never be reached, the incoming "
                        f"lane carries {self.incoming_total}"
                    )
            elif self.transfer_start_frame is None or self.transfer_start_frame < 0:
                raise ConfigurationError(
                    "a transfer without threshold needs a non-negative transfer_start_frame"
                )
        else:
            if self.outgoing is not None:
                raise ConfigurationError("outgoing lane given but has_destination is off")
            if self.use_threshold:
                raise ConfigurationError("use_threshold requires has_destination")

        logger.debug(
            "scene ok: %d incoming, %s outgoing, fps=%s, threshold=%s",
            len(self.incoming.objects),
            len(self.outgoing.objects) if self.outgoing is not None else 0,
            self.fps,
            self.threshold if self.use_threshold else self.transfer_start_frame,
        )

    @property
    def incoming_total(self) -> float:
        return self.incoming.total_value

    def reached(self, balance: float) -> bool:
        """Whether ``balance`` counts as having reached the threshold."""
        if self.threshold is None:
            return False
        return balance >= self.threshold * (1.0 - self.threshold_tolerance)
