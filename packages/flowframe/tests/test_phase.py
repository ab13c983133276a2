"""Tests for the phase state machine and balance ledger."""
from __future__ import annotations

import math
import random

import pytest

from flowframe import (
    ConfigurationError,
    FlowObject,
    Lane,
    Phase,
    SceneConfig,
    SpringConfig,
    balances_at,
    default_registry,
    find_threshold_frame,
    spring,
)
from flowframe.phase import accumulated_balance, allotments, resolve_window

FPS = 30
TOKEN = SpringConfig(damping=60, stiffness=240)


def _eight_hundreds() -> SceneConfig:
    """8 incoming objects of 100, far apart, with a threshold of 100."""
    incoming = Lane(
        objects=tuple(FlowObject(delay=i * 120, unit_value=100) for i in range(8)),
        spring=TOKEN,
    )
    outgoing = Lane(
        objects=tuple(FlowObject(delay=i * 8, unit_value=100) for i in range(8)),
        spring=TOKEN,
        anchor=(400.0, -250.0),
    )
    return SceneConfig(
        incoming=incoming,
        outgoing=outgoing,
        fps=FPS,
        has_destination=True,
        use_threshold=True,
        threshold=100,
        value_unit="currency",
    )


def _expected_crossing() -> int:
    return next(f for f in range(1000) if spring(f, FPS, TOKEN) >= 1.0 - 1e-6)


@pytest.fixture(scope="module")
def threshold_scene() -> SceneConfig:
    return default_registry().build("threshold_transfer")


@pytest.fixture(scope="module")
def transfer_scene() -> SceneConfig:
    return default_registry().build("transfer")


class TestThresholdDiscovery:
    def test_transitions_when_first_object_fully_arrives(self) -> None:
        """100 * progress >= 100 only once the first object's progress reaches 1."""
        scene = _eight_hundreds()
        expected = _expected_crossing()
        assert 0 < expected < 120
        assert find_threshold_frame(scene, expected) == expected
        assert find_threshold_frame(scene, expected - 1) is None

    @pytest.mark.parametrize("extra", [0, 1, 5, 50, 400])
    def test_discovery_is_stable_for_later_frames(self, extra: int) -> None:
        """Scanning any longer prefix finds the same crossing frame."""
        scene = _eight_hundreds()
        expected = _expected_crossing()
        assert find_threshold_frame(scene, expected + extra) == expected

    def test_phase_flips_at_crossing(self) -> None:
        scene = _eight_hundreds()
        expected = _expected_crossing()
        assert resolve_window(scene, expected - 1).phase == Phase.ACCUMULATING
        assert resolve_window(scene, expected - 0.5).phase == Phase.ACCUMULATING
        window = resolve_window(scene, expected)
        assert window.phase == Phase.TRANSFERRING
        assert window.threshold_reached_frame == expected
        assert window.transition_frame == expected
        assert math.isclose(window.frozen_source_balance, 100.0, rel_tol=1e-5)

    def test_single_participant(self) -> None:
        """A frozen pool of one object's value moves with exactly one object."""
        scene = _eight_hundreds()
        window = resolve_window(scene, _expected_crossing())
        shares = allotments(scene, window.frozen_source_balance)
        assert shares == [window.frozen_source_balance]

    def test_unreachable_threshold_is_rejected(self) -> None:
        """A threshold above the incoming total can never trigger the transfer."""
        base = _eight_hundreds()
        with pytest.raises(ConfigurationError, match="can never be reached"):
            SceneConfig(
                incoming=base.incoming,
                outgoing=base.outgoing,
                fps=FPS,
                has_destination=True,
                use_threshold=True,
                threshold=10_000,
            )

    def test_full_total_threshold_is_reached(self) -> None:
        """A threshold equal to the total transfers once every object lands."""
        base = _eight_hundreds()
        scene = SceneConfig(
            incoming=base.incoming,
            outgoing=base.outgoing,
            fps=FPS,
            has_destination=True,
            use_threshold=True,
            threshold=800,
        )
        crossing = find_threshold_frame(scene, 1000)
        assert crossing is not None
        assert 840 < crossing < 900
        frozen = resolve_window(scene, crossing).frozen_source_balance
        assert math.isclose(frozen, 800, rel_tol=1e-5)

    def test_preset_discovery_is_idempotent(self, threshold_scene: SceneConfig) -> None:
        crossing = find_threshold_frame(threshold_scene, 400)
        assert crossing is not None
        for frame in (crossing, crossing + 1, crossing + 37, 400):
            assert find_threshold_frame(threshold_scene, frame) == crossing
        assert find_threshold_frame(threshold_scene, crossing - 1) is None


class TestFixedTransition:
    def test_fixed_transfer_frame(self, transfer_scene: SceneConfig) -> None:
        assert transfer_scene.transfer_start_frame == 240
        assert resolve_window(transfer_scene, 239).phase == Phase.ACCUMULATING
        window = resolve_window(transfer_scene, 240)
        assert window.phase == Phase.TRANSFERRING
        assert window.transition_frame == 240
        assert window.threshold_reached_frame is None
        assert math.isclose(window.frozen_source_balance, 12.0, rel_tol=1e-9)

    def test_relative_frame(self, transfer_scene: SceneConfig) -> None:
        assert resolve_window(transfer_scene, 100).relative_frame(100) == 95
        assert resolve_window(transfer_scene, 250).relative_frame(250) == 10

    def test_no_destination_never_transfers(self) -> None:
        scene = default_registry().build("wallet")
        window = resolve_window(scene, 5000)
        assert window.phase == Phase.ACCUMULATING
        assert window.transition_frame is None
        assert window.frozen_source_balance is None


class TestBalances:
    def test_nothing_before_first_launch(self, transfer_scene: SceneConfig) -> None:
        _, b = balances_at(transfer_scene, 0)
        assert b.source == 0.0
        assert b.destination == 0.0
        assert b.in_flight == 0.0
        assert b.pending == 12

    @pytest.mark.parametrize("name", ["transfer", "threshold_transfer"])
    def test_conservation(self, name: str) -> None:
        """source + destination + in flight + pending is the pool in play."""
        scene = default_registry().build(name)
        for frame in range(0, 420, 3):
            window, b = balances_at(scene, frame)
            pool = window.frozen_source_balance if window.transferring else scene.incoming_total
            assert math.isclose(b.total, pool, rel_tol=1e-9, abs_tol=1e-9)
            assert b.source + b.destination <= pool + 1e-9
            assert min(b.source, b.destination, b.in_flight, b.pending) >= 0.0

    def test_full_wallet_before_transfer(self, transfer_scene: SceneConfig) -> None:
        """Once every token has landed the wallet holds the whole total."""
        _, b = balances_at(transfer_scene, 239)
        assert math.isclose(b.source, 12.0, rel_tol=1e-9)
        assert math.isclose(b.in_flight, 0.0, abs_tol=1e-9)

    def test_everything_lands_in_safe(self, transfer_scene: SceneConfig) -> None:
        window, b = balances_at(transfer_scene, 700)
        assert math.isclose(b.destination, window.frozen_source_balance, rel_tol=1e-9)
        assert math.isclose(b.displayed_source, 0.0, abs_tol=1e-9)
        assert math.isclose(b.in_flight, 0.0, abs_tol=1e-9)

    def test_no_discontinuity_at_transition(self, threshold_scene: SceneConfig) -> None:
        """The wallet label shows the same value either side of the switch."""
        crossing = find_threshold_frame(threshold_scene, 400)
        window, b = balances_at(threshold_scene, crossing)
        assert window.transferring
        assert b.displayed_source == accumulated_balance(threshold_scene, crossing)
        assert b.destination == 0.0

    def test_destination_never_overdraws(self, threshold_scene: SceneConfig) -> None:
        for frame in range(0, 600, 7):
            window, b = balances_at(threshold_scene, frame)
            if window.transferring:
                assert b.destination <= window.frozen_source_balance + 1e-9
                assert b.displayed_source >= 0.0

    def test_partial_final_object(self, threshold_scene: SceneConfig) -> None:
        """ceil(frozen / unit) objects carry the pool; the last one partially."""
        crossing = find_threshold_frame(threshold_scene, 400)
        frozen = resolve_window(threshold_scene, crossing).frozen_source_balance
        shares = allotments(threshold_scene, frozen)
        assert len(shares) == math.ceil(frozen / 100)
        assert math.isclose(sum(shares), frozen)
        assert all(share <= 100 for share in shares)
        assert shares[-1] < 100

    def test_wallet_drains_while_safe_fills(self, threshold_scene: SceneConfig) -> None:
        crossing = find_threshold_frame(threshold_scene, 400)
        previous = None
        for frame in range(crossing, crossing + 150, 5):
            _, b = balances_at(threshold_scene, frame)
            if previous is not None:
                assert b.destination >= previous.destination - 1e-12
                assert b.displayed_source <= previous.displayed_source + 1e-12
            previous = b


class TestSeekSafety:
    @pytest.mark.parametrize("name", ["transfer", "threshold_transfer"])
    def test_out_of_order_matches_in_order(self, name: str) -> None:
        scene = default_registry().build(name)
        frames = list(range(0, 400, 4)) + [12.5, 97.25, 250.75]
        in_order = {f: balances_at(scene, f) for f in sorted(frames)}
        shuffled = frames[:]
        random.Random(0).shuffle(shuffled)
        for f in shuffled:
            assert balances_at(scene, f) == in_order[f]

    def test_repeat_queries_are_identical(self, threshold_scene: SceneConfig) -> None:
        assert balances_at(threshold_scene, 123.5) == balances_at(threshold_scene, 123.5)
