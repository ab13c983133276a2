"""Tests for flow objects, lanes, and per-object visual state."""
from __future__ import annotations

import math

import pytest

from flowframe import Bounce, ConfigurationError, FlowObject, Lane, ObjectStyle, SpringConfig, spring
from flowframe.timeline import evaluate_lane, evaluate_object, object_progress

FPS = 30
TOKEN = SpringConfig(damping=60, stiffness=240)


def _lane(**kwargs) -> Lane:
    defaults = dict(
        objects=(
            FlowObject(delay=0, offset=(15, -10), rotation=-15, scale=0.65),
            FlowObject(delay=15, offset=(-10, -5), rotation=20, scale=0.6),
        ),
        start_frame=5,
        spring=TOKEN,
        origin=(-500.0, 0.0),
        anchor=(0.0, 0.0),
    )
    defaults.update(kwargs)
    return Lane(**defaults)


class TestValidation:
    def test_negative_delay(self) -> None:
        with pytest.raises(ConfigurationError, match="delay must be non-negative"):
            FlowObject(delay=-1)

    def test_negative_unit_value(self) -> None:
        with pytest.raises(ConfigurationError, match="unit_value must be non-negative"):
            FlowObject(unit_value=-5)

    def test_empty_lane(self) -> None:
        with pytest.raises(ConfigurationError, match="at least one flow object"):
            Lane(objects=())

    def test_negative_start_frame(self) -> None:
        with pytest.raises(ConfigurationError, match="start_frame"):
            _lane(start_frame=-1)

    def test_style_breakpoints_must_be_ordered(self) -> None:
        with pytest.raises(ConfigurationError, match="fade_out_from"):
            ObjectStyle(fade_in_until=0.5, fade_out_from=0.4)

    def test_bounce_length(self) -> None:
        with pytest.raises(ConfigurationError, match="bounce length"):
            Bounce(length=0)

    @pytest.mark.parametrize(
        "field, kwargs",
        [
            ("delay", {"delay": math.inf}),
            ("offset_x", {"offset": (math.nan, 0.0)}),
            ("offset_y", {"offset": (0.0, math.inf)}),
            ("rotation", {"rotation": math.nan}),
            ("scale", {"scale": math.nan}),
            ("unit_value", {"unit_value": math.nan}),
        ],
    )
    def test_non_finite_object_fields(self, field: str, kwargs: dict) -> None:
        with pytest.raises(ConfigurationError, match=f"flow object {field} must be finite"):
            FlowObject(**kwargs)

    @pytest.mark.parametrize("kwargs", [{"height": math.nan}, {"arm_at": math.inf}])
    def test_non_finite_bounce(self, kwargs: dict) -> None:
        with pytest.raises(ConfigurationError, match="bounce .* must be finite"):
            Bounce(**kwargs)

    @pytest.mark.parametrize(
        "kwargs",
        [{"start_frame": math.nan}, {"origin": (math.inf, 0.0)}, {"anchor": (0.0, math.nan)}],
    )
    def test_non_finite_lane(self, kwargs: dict) -> None:
        with pytest.raises(ConfigurationError, match="lane .* must be finite"):
            _lane(**kwargs)

    def test_non_finite_style(self) -> None:
        with pytest.raises(ConfigurationError, match="style settle_scale must be finite"):
            ObjectStyle(settle_scale=math.nan)

    def test_lane_totals(self) -> None:
        lane = _lane(objects=(FlowObject(unit_value=100), FlowObject(delay=30, unit_value=50)))
        assert lane.total_value == 150
        assert lane.last_delay == 30


class TestBeforeLaunch:
    def test_hidden_before_local_frame_zero(self) -> None:
        lane = _lane()
        state = evaluate_object(1, 19, lane.start_frame, lane, FPS)
        assert state.visible is False
        assert state.progress == 0.0
        assert state.opacity == 0.0

    def test_progress_zero_before_launch(self) -> None:
        lane = _lane()
        assert object_progress(4, lane.start_frame, lane.objects[0], lane, FPS) == 0.0

    def test_frame_zero_with_delays_shows_nothing(self) -> None:
        """All objects delayed past frame 0 means nothing is drawn at frame 0."""
        lane = _lane(
            objects=tuple(FlowObject(delay=(i + 1) * 10) for i in range(12)),
            start_frame=0,
        )
        states = evaluate_lane(0, lane.start_frame, lane, FPS)
        assert len(states) == 12
        assert not any(s.visible for s in states)


class TestInFlight:
    def test_launch_frame_starts_at_origin(self) -> None:
        lane = _lane()
        state = evaluate_object(0, 5, lane.start_frame, lane, FPS)
        assert state.visible is True
        assert state.progress == 0.0
        assert (state.x, state.y) == (-500.0, 0.0)
        assert state.scale == 0.3
        assert state.opacity == 0.0
        assert state.rotation == 0.0

    def test_progress_matches_spring(self) -> None:
        lane = _lane()
        state = evaluate_object(1, 32.5, lane.start_frame, lane, FPS)
        assert state.progress == spring(32.5 - 5 - 15, FPS, TOKEN)

    def test_position_follows_progress(self) -> None:
        lane = _lane()
        state = evaluate_object(0, 10, lane.start_frame, lane, FPS)
        p = state.progress
        assert 0.0 < p < 1.0
        assert math.isclose(state.x, -500 + (15 + 500) * p)
        assert math.isclose(state.y, -10 * p)

    def test_settled_object_rests_on_anchor_offset(self) -> None:
        lane = _lane(anchor=(400.0, -250.0))
        state = evaluate_object(0, 300, lane.start_frame, lane, FPS)
        assert math.isclose(state.x, 415.0, abs_tol=1e-9)
        assert math.isclose(state.y, -260.0, abs_tol=1e-9)
        assert math.isclose(state.rotation, -15.0, abs_tol=1e-9)
        assert math.isclose(state.scale, 0.65, abs_tol=1e-9)
        assert math.isclose(state.opacity, 1.0, abs_tol=1e-9)

    def test_fade_out_and_settle_scale(self) -> None:
        """Bills that fade out end invisible and 80% of their rest size."""
        lane = _lane(style=ObjectStyle(peak_at=0.3, settle_scale=0.8, fade_out_from=0.8))
        state = evaluate_object(0, 300, lane.start_frame, lane, FPS)
        assert state.visible is True
        assert math.isclose(state.opacity, 0.0, abs_tol=1e-9)
        assert math.isclose(state.scale, 0.65 * 0.8, abs_tol=1e-9)

    def test_evaluate_lane_count(self) -> None:
        lane = _lane()
        assert len(evaluate_lane(50, lane.start_frame, lane, FPS, count=1)) == 1
        assert len(evaluate_lane(50, lane.start_frame, lane, FPS, count=10)) == 2


class TestBounce:
    def test_dip_peaks_mid_window(self) -> None:
        """Halfway through the window the object sits ``height`` above its rest."""
        lane = _lane(bounce=Bounce(start=27, length=8, height=-5))
        # local frame 31 = halfway through [27, 35]
        state = evaluate_object(0, 5 + 31, lane.start_frame, lane, FPS)
        assert state.progress >= 0.9
        assert math.isclose(state.y, -10 - 5, abs_tol=1e-3)

    def test_returns_to_rest_after_window(self) -> None:
        lane = _lane(bounce=Bounce(start=27, length=8, height=-5))
        for local in (35, 40, 200):
            state = evaluate_object(0, 5 + local, lane.start_frame, lane, FPS)
            assert math.isclose(state.y, -10, abs_tol=1e-3)

    def test_anchored_to_object_trigger(self) -> None:
        """A delayed object bounces in its own window, not the lane's."""
        lane = _lane(bounce=Bounce(start=27, length=8, height=-5))
        # object 1 launches at 5 + 15 = 20; its window midpoint is local 31
        state = evaluate_object(1, 20 + 31, lane.start_frame, lane, FPS)
        assert math.isclose(state.y, -5 - 5, abs_tol=1e-3)

    def test_not_armed_before_arrival(self) -> None:
        """No bounce while progress is below arm_at, even inside the window."""
        bouncing = _lane(bounce=Bounce(start=0, length=8, height=-5))
        plain = _lane()
        a = evaluate_object(0, 5 + 2, bouncing.start_frame, bouncing, FPS)
        b = evaluate_object(0, 5 + 2, plain.start_frame, plain, FPS)
        assert a.progress < 0.9
        assert a.y == b.y
