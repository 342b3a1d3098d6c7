# =============================================================================
# conftest.py — Shared synthetic landmark fixtures (no camera required)
#
# All landmark helpers produce points local to the face box, in detector
# space (y-up). With the default box (0.25, 0.25, 0.5, 0.5) on a 640×480
# frame, one local unit is 320 px horizontally and 240 px vertically.
# =============================================================================

import os

os.environ.setdefault("FACE_ENGINE_LOG_TO_FILE", "0")

import numpy as np
import pytest

from face_engine.data_structures import FaceBox, FaceObservation, LandmarkFamily

FRAME_W = 640
FRAME_H = 480
DEFAULT_BOX = FaceBox(0.25, 0.25, 0.5, 0.5)


def make_eye(cx: float, cy: float, half_width: float, half_height: float) -> list:
    """Six-point eye in canonical order: outer, upper×2, inner, lower×2."""
    return [
        (cx - half_width, cy),
        (cx - half_width / 3.0, cy + half_height),
        (cx + half_width / 3.0, cy + half_height),
        (cx + half_width, cy),
        (cx + half_width / 3.0, cy - half_height),
        (cx - half_width / 3.0, cy - half_height),
    ]


def make_lips(cx: float, cy: float, half_width: float, half_height: float,
              count: int = 8) -> list:
    """Closed lip ring starting at the left corner, running over the top."""
    angles = np.pi - np.arange(count) * (2.0 * np.pi / count)
    return [
        (cx + half_width * np.cos(a), cy + half_height * np.sin(a))
        for a in angles
    ]


def make_face_contour(count: int = 9) -> list:
    """Jaw-line arc from the left temple under the chin to the right temple."""
    angles = np.linspace(np.pi, 2.0 * np.pi, count)
    return [(0.5 + 0.48 * np.cos(a), 0.6 + 0.55 * np.sin(a)) for a in angles]


def make_observation(
    eye_half_height: float = 0.04,
    lip_half_height: float = 0.05,
    box: FaceBox = DEFAULT_BOX,
    face_id=None,
    roll_rad=None,
    yaw_rad=None,
) -> FaceObservation:
    """
    Full synthetic face. With the default box each eye's EAR is
    10 · eye_half_height (0.4 → fully open, 0.02 → closed).
    """
    landmarks = {
        LandmarkFamily.FACE_CONTOUR:  make_face_contour(),
        LandmarkFamily.LEFT_EYEBROW:  [(0.15, 0.82), (0.25, 0.86), (0.38, 0.84)],
        LandmarkFamily.RIGHT_EYEBROW: [(0.62, 0.84), (0.75, 0.86), (0.85, 0.82)],
        LandmarkFamily.LEFT_EYE:      make_eye(0.30, 0.70, 0.075, eye_half_height),
        LandmarkFamily.RIGHT_EYE:     make_eye(0.70, 0.70, 0.075, eye_half_height),
        LandmarkFamily.NOSE_CREST:    [(0.5, 0.70), (0.5, 0.60), (0.5, 0.50)],
        LandmarkFamily.NOSE:          [(0.44, 0.45), (0.5, 0.42), (0.56, 0.45)],
        LandmarkFamily.OUTER_LIPS:    make_lips(0.5, 0.30, 0.15, lip_half_height),
        LandmarkFamily.INNER_LIPS:    make_lips(0.5, 0.30, 0.10, lip_half_height / 2.0),
    }
    return FaceObservation(
        box=box,
        landmarks=landmarks,
        roll_rad=roll_rad,
        yaw_rad=yaw_rad,
        face_id=face_id,
    )


@pytest.fixture
def frame():
    """Mid-grey 640×480 RGB frame."""
    return np.full((FRAME_H, FRAME_W, 3), 128, dtype=np.uint8)


@pytest.fixture
def open_face():
    return make_observation(eye_half_height=0.04)


@pytest.fixture
def closed_face():
    return make_observation(eye_half_height=0.002)
