"""Headless driver: play signs from a JSON file and print per-frame poses.

Usage::

    signpose-demo signs.json --fps 30 --preset snappy > frames.jsonl

The input is one sign record or a list of them, in the sign dictionary's
camelCase shape. Each output line is one frame: time, active gloss, and the
blended pose.
"""

import argparse
import json
import logging
import sys

from signpose.animation.pose_blender import BlenderConfig, PoseBlender
from signpose.animation.sign_sequencer import SignSequencer
from signpose.animation.spring import SPRING_PRESETS
from signpose.constants import TARGET_FPS
from signpose.core.clock import DeltaClock
from signpose.core.config_loader import load_sign_records
from signpose.core.events import EventBus, EventType
from signpose.core.sign import Sign
from signpose.retarget import default_retargeter

logger = logging.getLogger(__name__)


def load_signs(path) -> list[Sign]:
    return [Sign.from_dict(r) for r in load_sign_records(path)]


def run(signs: list[Sign], fps: int, speed: float, preset: str | None, settle: float, out,
        arm_ik: bool = False) -> int:
    """Play *signs* to completion plus *settle* seconds; returns frames written.

    With *arm_ik* each pose also carries upper-arm and forearm rotations
    solved from its hand positions against the stock rest skeleton.
    """
    retargeter = default_retargeter() if arm_ik else None
    config = BlenderConfig.load()
    blender = PoseBlender(config)
    if preset:
        blender.set_spring_preset(preset)

    bus = EventBus()
    bus.subscribe(EventType.SIGN_STARTED, lambda sign: logger.info("Sign started: %s", sign.gloss))
    bus.subscribe(EventType.SIGN_COMPLETED, lambda sign: logger.info("Sign completed: %s", sign.gloss))

    sequencer = SignSequencer(blender, bus)
    sequencer.set_speed(speed)
    sequencer.queue_signs(signs)

    clock = DeltaClock.fixed(fps)
    settle_frames = int(round(settle * fps))
    while sequencer.current_sign is not None or settle_frames > 0:
        if sequencer.current_sign is None:
            settle_frames -= 1
        gloss = sequencer.current_sign.gloss if sequencer.current_sign else None
        record = {"frame": clock.frame, "time": round(clock.elapsed, 6), "gloss": gloss}
        pose = sequencer.tick(clock.get_delta())
        if retargeter is not None:
            pose = retargeter.solve_arms(pose)
        record["pose"] = pose.to_dict()
        out.write(json.dumps(record) + "\n")
    return clock.frame


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Play signs and print blended poses as JSON lines")
    parser.add_argument("signs", help="JSON file with one sign record or a list of them")
    parser.add_argument("--fps", type=int, default=TARGET_FPS, help="Frame rate (default: %(default)s)")
    parser.add_argument("--speed", type=float, default=1.0, help="Playback speed multiplier")
    parser.add_argument("--preset", choices=sorted(SPRING_PRESETS), help="Spring preset override")
    parser.add_argument("--settle", type=float, default=0.5,
                        help="Seconds to keep blending after the last sign (default: %(default)s)")
    parser.add_argument("--arm-ik", action="store_true",
                        help="Solve arm bone rotations from hand positions")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(name)s: %(message)s",
        stream=sys.stderr,
    )

    if args.fps <= 0:
        parser.error("--fps must be positive")
    if args.speed <= 0:
        parser.error("--speed must be positive")

    try:
        signs = load_signs(args.signs)
    except (FileNotFoundError, ValueError, KeyError, TypeError) as e:
        logger.error("Could not load signs from %s: %s", args.signs, e)
        return 1

    frames = run(signs, args.fps, args.speed, args.preset, args.settle, sys.stdout, args.arm_ik)
    logger.info("Wrote %d frames for %d signs", frames, len(signs))
    return 0


if __name__ == "__main__":
    sys.exit(main())
