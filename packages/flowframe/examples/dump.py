"""Dump a preset's frames to JSON for an external renderer.

Run:
    python dump.py transfer --seconds 12 -o transfer.json
    python dump.py threshold_transfer --scene my_scene.json --every 2
"""
from __future__ import annotations

import argparse
import logging
import sys

from flowframe import FrameClock, default_registry, dump_frames, load_scene


def build_parser(names: list[str]) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("preset", nargs="?", default="transfer", choices=names)
    parser.add_argument("--scene", help="JSON scene file; overrides the preset")
    parser.add_argument("--seconds", type=float, default=10.0)
    parser.add_argument("--every", type=int, default=1, help="keep every Nth frame")
    parser.add_argument("-o", "--output", default="frames.json")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def main(argv: list[str] | None = None) -> int:
    registry = default_registry()
    args = build_parser(registry.names()).parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if args.every < 1:
        print("--every must be at least 1", file=sys.stderr)
        return 2

    scene = load_scene(args.scene) if args.scene else registry.build(args.preset)
    total = FrameClock(scene.fps).frames(args.seconds)
    count = dump_frames(scene, range(0, total, args.every), args.output)
    print(f"{count} frames -> {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
