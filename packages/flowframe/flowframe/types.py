"""Shared type aliases, phase names and errors for the flow engine."""
from __future__ import annotations

Point = tuple[float, float]


class Phase:
    """Phase names. Accumulating always precedes Transferring; never reversed."""

    ACCUMULATING = "accumulating"
    TRANSFERRING = "transferring"

    ORDER = (ACCUMULATING, TRANSFERRING)


class ConfigurationError(ValueError):
    """Raised when a configuration value can never produce a valid frame."""


class ComputationError(ArithmeticError):
    """Raised when a non-finite value would escape an evaluation."""

    def __init__(self, where: str, value: float) -> None:
        self.where = where
        self.value = value
        super().__init__(f"{where} produced non-finite value {value!r}")
