"""flowframe - Frame-indexed wallet/safe flow animation engine."""

from flowframe.clock import FrameClock
from flowframe.config import load_scene, scene_from_dict
from flowframe.containers import ContainerSpec, ContainerState
from flowframe.easing import EASINGS
from flowframe.frame import FrameState, evaluate_frame
from flowframe.interpolate import Curve, interpolate
from flowframe.phase import Balances, PhaseWindow, balances_at, find_threshold_frame
from flowframe.player import Player
from flowframe.presets import SceneRegistry, default_registry
from flowframe.scene import SceneConfig
from flowframe.snapshot import dump_frames, export_frames, frame_to_dict
from flowframe.spring import SpringConfig, measure_spring, spring
from flowframe.timeline import Bounce, FlowObject, Lane, ObjectState, ObjectStyle
from flowframe.types import ComputationError, ConfigurationError, Phase

__all__ = [
    "evaluate_frame",
    "FrameState",
    "SceneConfig",
    "Lane",
    "FlowObject",
    "ObjectStyle",
    "ObjectState",
    "Bounce",
    "ContainerSpec",
    "ContainerState",
    "SpringConfig",
    "spring",
    "measure_spring",
    "interpolate",
    "Curve",
    "EASINGS",
    "Phase",
    "PhaseWindow",
    "Balances",
    "balances_at",
    "find_threshold_frame",
    "FrameClock",
    "Player",
    "SceneRegistry",
    "default_registry",
    "scene_from_dict",
    "load_scene",
    "frame_to_dict",
    "export_frames",
    "dump_frames",
    "ConfigurationError",
    "ComputationError",
]
