"""Build SceneConfig values from JSON-compatible dicts."""
from __future__ import annotations

import dataclasses
import functools
import json
import logging
from pathlib import Path
from typing import Any, Callable, TypeVar

from flowframe.containers import ContainerSpec
from flowframe.interpolate import Curve
from flowframe.scene import DEFAULT_SAFE, SceneConfig
from flowframe.spring import SpringConfig
from flowframe.timeline import Bounce, FlowObject, Lane, ObjectStyle
from flowframe.types import ConfigurationError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _fields(cls: type, data: dict[str, Any], where: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise ConfigurationError(f"{where} must be a mapping, got {type(data).__name__}")
    known = {f.name for f in dataclasses.fields(cls)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigurationError(f"Unknown keys in {where}: {unknown}")
    return dict(data)


def _build(factory: Callable[..., T], fields: dict[str, Any], where: str) -> T:
    """Call ``factory``; wrong value types surface as ConfigurationError."""
    try:
        return factory(**fields)
    except ConfigurationError:
        raise
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"invalid {where}: {exc}") from exc


def _point(value: Any, where: str) -> tuple[float, float]:
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise ConfigurationError(f"{where} must be a 2-item list, got {value!r}")
    try:
        return (float(value[0]), float(value[1]))
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"{where} must hold numbers, got {value!r}") from exc


def spring_from_dict(data: dict[str, Any], where: str = "spring") -> SpringConfig:
    return _build(SpringConfig, _fields(SpringConfig, data, where), where)


def curve_from_dict(data: dict[str, Any], where: str = "curve") -> Curve:
    fields = _fields(Curve, data, where)
    fields["inputs"] = tuple(fields.get("inputs", ()))
    fields["outputs"] = tuple(fields.get("outputs", ()))
    return _build(Curve, fields, where)


def object_from_dict(data: dict[str, Any], where: str = "object") -> FlowObject:
    fields = _fields(FlowObject, data, where)
    if "offset" in fields:
        fields["offset"] = _point(fields["offset"], f"{where}.offset")
    return _build(FlowObject, fields, where)


def lane_from_dict(data: dict[str, Any], where: str = "lane") -> Lane:
    fields = _fields(Lane, data, where)
    fields["objects"] = tuple(
        object_from_dict(obj, f"{where}.objects[{i}]")
        for i, obj in enumerate(fields.get("objects", []))
    )
    if "spring" in fields:
        fields["spring"] = spring_from_dict(fields["spring"], f"{where}.spring")
    for key in ("origin", "anchor"):
        if key in fields:
            fields[key] = _point(fields[key], f"{where}.{key}")
    if "style" in fields:
        style_where = f"{where}.style"
        fields["style"] = _build(
            ObjectStyle, _fields(ObjectStyle, fields["style"], style_where), style_where
        )
    if fields.get("bounce") is not None:
        bounce_where = f"{where}.bounce"
        fields["bounce"] = _build(
            Bounce, _fields(Bounce, fields["bounce"], bounce_where), bounce_where
        )
    return _build(Lane, fields, where)


def container_from_dict(
    data: dict[str, Any], where: str = "container", base: ContainerSpec | None = None
) -> ContainerSpec:
    """Build a ContainerSpec; keys missing from ``data`` come from ``base``."""
    fields = _fields(ContainerSpec, data, where)
    if "position" in fields:
        fields["position"] = _point(fields["position"], f"{where}.position")
    for key in ("fade_spring", "motion_spring"):
        if key in fields:
            fields[key] = spring_from_dict(fields[key], f"{where}.{key}")
    for key in ("scale", "rotation"):
        if fields.get(key) is not None:
            fields[key] = curve_from_dict(fields[key], f"{where}.{key}")
    if base is not None:
        return _build(functools.partial(dataclasses.replace, base), fields, where)
    return _build(ContainerSpec, fields, where)


def scene_from_dict(data: dict[str, Any]) -> SceneConfig:
    """Build a SceneConfig. Raises ConfigurationError on unknown or invalid keys."""
    fields = _fields(SceneConfig, data, "scene")
    if "incoming" not in fields:
        raise ConfigurationError("scene needs an incoming lane")
    fields["incoming"] = lane_from_dict(fields["incoming"], "incoming")
    if fields.get("outgoing") is not None:
        fields["outgoing"] = lane_from_dict(fields["outgoing"], "outgoing")
    if "wallet" in fields:
        fields["wallet"] = container_from_dict(fields["wallet"], "wallet")
    if "safe" in fields:
        fields["safe"] = container_from_dict(fields["safe"], "safe", base=DEFAULT_SAFE)
    return _build(SceneConfig, fields, "scene")


def load_scene(path: str | Path) -> SceneConfig:
    """Read a scene from a JSON file."""
    path = Path(path)
    with path.open(encoding="utf-8") as fh:
        data = json.load(fh)
    scene = scene_from_dict(data)
    logger.info("loaded scene from %s", path)
    return scene
