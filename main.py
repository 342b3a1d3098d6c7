"""
main.py — Face Attribute Engine replay entry point

Runs the engine over a still frame and a JSON dump of detector output,
then prints the per-face attribute records in the plugin bridge layout.

Detector JSON layout (one entry per face, detector order):
  [
    {
      "box": {"x": 0.25, "y": 0.25, "width": 0.5, "height": 0.5},
      "landmarks": {"left_eye": [[0.2, 0.7], ...], "outer_lips": [...], ...},
      "roll": 0.05, "yaw": -0.1,          # radians, optional
      "face_id": 1                        # optional tracking key
    }
  ]

Usage:
  python main.py --image frame.png --faces faces.json
  python main.py --image frame.png --faces faces.json --viewport 390x844
  python main.py --image frame.png --faces faces.json --repeat 5   # let EMA settle
"""

import argparse
import json
import sys
from typing import List, Optional

import cv2

from face_engine.attribute_engine import FaceAttributeEngine
from face_engine.data_structures import (
    FaceAttributes, FaceBox, FaceObservation, LandmarkFamily, Viewport,
)
from core.logger import get_logger

log = get_logger("main")


# ──────────────────────────────────────────────────────────────────────────────
# Input parsing
# ──────────────────────────────────────────────────────────────────────────────

def parse_args(argv: Optional[List[str]] = None):
    p = argparse.ArgumentParser(description="Face Attribute Engine — replay a detector dump")
    p.add_argument("--image", required=True,
                   help="Frame image readable by OpenCV.")
    p.add_argument("--faces", required=True,
                   help="JSON file with detector observations.")
    p.add_argument("--viewport", default=None,
                   help="Destination display size as WIDTHxHEIGHT.")
    p.add_argument("--repeat", type=int, default=1,
                   help="Process the frame N times (EMA warm-up).")
    p.add_argument("--seed-ema", action="store_true",
                   help="Seed eye smoothing from the first reading.")
    p.add_argument("--no-cheeks", action="store_true",
                   help="Omit LEFT_CHEEK / RIGHT_CHEEK contours.")
    return p.parse_args(argv)


def parse_viewport(text: Optional[str]) -> Optional[Viewport]:
    if not text:
        return None
    try:
        w, h = text.lower().split("x")
        return Viewport(float(w), float(h))
    except ValueError:
        raise ValueError(f"Viewport must look like 390x844, got {text!r}") from None


def observation_from_dict(data: dict) -> FaceObservation:
    """Build a FaceObservation from one entry of the detector JSON dump."""
    box = data.get("box", {})
    landmarks = {}
    for name, points in data.get("landmarks", {}).items():
        family = LandmarkFamily(name)
        landmarks[family] = [tuple(p) for p in points]

    return FaceObservation(
        box=FaceBox(
            x=float(box.get("x", 0.0)),
            y=float(box.get("y", 0.0)),
            width=float(box.get("width", 0.0)),
            height=float(box.get("height", 0.0)),
        ),
        landmarks=landmarks,
        roll_rad=data.get("roll"),
        yaw_rad=data.get("yaw"),
        face_id=data.get("face_id"),
    )


def load_observations(path: str) -> List[FaceObservation]:
    with open(path, encoding="utf-8") as f:
        raw = json.load(f)
    return [observation_from_dict(entry) for entry in raw]


# ──────────────────────────────────────────────────────────────────────────────
# Main
# ──────────────────────────────────────────────────────────────────────────────

def run(args) -> List[FaceAttributes]:
    frame = cv2.imread(args.image, cv2.IMREAD_UNCHANGED)
    if frame is None:
        log.error(f"Cannot read image: {args.image}")
        return []

    faces = load_observations(args.faces)
    viewport = parse_viewport(args.viewport)

    engine = FaceAttributeEngine(
        seed_with_first=args.seed_ema,
        include_cheeks=not args.no_cheeks,
    )

    results: List[FaceAttributes] = []
    for _ in range(max(args.repeat, 1)):
        results = engine.process(frame, faces, viewport=viewport)

    log.info(f"Processed {len(faces)} face(s) from {args.image}")
    return results


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    try:
        results = run(args)
    except (OSError, ValueError) as e:
        log.error(str(e))
        return 1

    json.dump([r.to_dict() for r in results], sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
