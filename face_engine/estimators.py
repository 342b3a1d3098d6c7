# =============================================================================
# face_engine/estimators.py
#
# Pure geometric estimators. Each derives one scalar or categorical signal
# from a landmark point sequence and keeps no state.
#
# ── EAR (Soukupová & Čech) ────────────────────────────────────────────────────
#
#          ||p2−p6|| + ||p3−p5||
#  EAR  =  ──────────────────────
#               2 · ||p1−p4||
#
#   p1 = outer corner, p4 = inner corner
#   p2,p3 = upper lid,  p5,p6 = lower lid
#
# ── Smile ─────────────────────────────────────────────────────────────────────
#   corners p[0], p[n/2]; top p[n/4]; bottom p[3n/4]
#   ratio = ||top−bottom|| / ||left−right||
#   prob  = clip((ratio − 0.2) / 0.3, 0, 1)
#
# ── Pitch proxy ───────────────────────────────────────────────────────────────
#   d     = |mean_y(mouth) − mean_y(eyes)| / face_height
#   pitch = (0.5 − d) · 60          (coarse, saturates at ±30°)
# =============================================================================

import math
from typing import Optional, Sequence

import numpy as np

from config import (
    EAR_MIN_POINTS, EAR_MIN, EAR_MAX,
    EYE_CLOSED_THRESHOLD, EYE_OPEN_THRESHOLD,
    SMILE_MIN_POINTS, SMILE_RATIO_OFFSET, SMILE_RATIO_RANGE,
    PITCH_NEUTRAL_RATIO, PITCH_DEGREES_SCALE, PITCH_LIMIT_DEG,
)
from face_engine.data_structures import EyeOpenState

_EPS = 1e-9


def _as_points(points: Sequence) -> np.ndarray:
    return np.asarray(points, dtype=np.float64).reshape(-1, 2)


# ── Eye ───────────────────────────────────────────────────────────────────────

def _canonical_eye_indices(n: int) -> list:
    """
    Six indices sampled evenly around an n-point eye contour.
    Identity for n = 6; for an 8-point contour gives [0, 1, 3, 4, 5, 7].
    """
    return [int(k * n / 6.0 + 0.5) % n for k in range(6)]


def eye_aspect_ratio(points: Sequence) -> Optional[float]:
    """
    Compute Eye Aspect Ratio for one eye.

    Args:
        points: ≥ 6 (x, y) points in canonical contour order.

    Returns:
        EAR, or None if fewer than 6 points, zero horizontal span, or a
        non-finite coordinate.
    """
    pts = _as_points(points)
    if pts.shape[0] < EAR_MIN_POINTS:
        return None

    p1, p2, p3, p4, p5, p6 = pts[_canonical_eye_indices(pts.shape[0])]

    d_top    = np.linalg.norm(p2 - p6)
    d_middle = np.linalg.norm(p3 - p5)
    d_horiz  = np.linalg.norm(p1 - p4)

    if not d_horiz >= _EPS:
        return None

    ear = float((d_top + d_middle) / (2.0 * d_horiz))
    return ear if math.isfinite(ear) else None


def ear_to_probability(ear: Optional[float],
                       baseline: Optional[float] = None) -> Optional[float]:
    """
    Remap EAR onto an eye-open probability in [0, 1].

    Uses the empirical [EAR_MIN, EAR_MAX] range, or divides by a calibrated
    subject-specific open-eye `baseline` when one is supplied.
    """
    if ear is None or not math.isfinite(ear):
        return None

    if baseline is not None and baseline > 0:
        prob = ear / baseline
    else:
        prob = (ear - EAR_MIN) / (EAR_MAX - EAR_MIN)
    if not math.isfinite(prob):
        return None

    return float(np.clip(prob, 0.0, 1.0))


def eye_state(probability: Optional[float]) -> EyeOpenState:
    """Classify a smoothed open probability; the middle band is UNKNOWN."""
    if probability is None:
        return EyeOpenState.UNKNOWN
    if probability < EYE_CLOSED_THRESHOLD:
        return EyeOpenState.CLOSED
    if probability > EYE_OPEN_THRESHOLD:
        return EyeOpenState.OPEN
    return EyeOpenState.UNKNOWN


# ── Mouth ─────────────────────────────────────────────────────────────────────

def smile_probability(lip_points: Sequence) -> Optional[float]:
    """
    Smile probability from the mouth opening relative to its width.

    Returns:
        Value in [0, 1], or None for fewer than 6 points, zero width, or
        non-finite coordinates.
    """
    pts = _as_points(lip_points)
    n = pts.shape[0]
    if n < SMILE_MIN_POINTS:
        return None

    left_corner  = pts[0]
    right_corner = pts[n // 2]
    top_mid      = pts[n // 4]
    bottom_mid   = pts[3 * n // 4]

    width  = np.linalg.norm(left_corner - right_corner)
    height = np.linalg.norm(top_mid - bottom_mid)

    if not width >= _EPS:
        return None

    ratio = height / width
    if not math.isfinite(ratio):
        return None

    return float(np.clip((ratio - SMILE_RATIO_OFFSET) / SMILE_RATIO_RANGE, 0.0, 1.0))


# ── Head Pose ─────────────────────────────────────────────────────────────────

def pitch_proxy(
    left_eye: Sequence,
    right_eye: Sequence,
    outer_lips: Sequence,
    face_height: float,
) -> float:
    """
    Coarse pitch estimate from the eye-to-mouth vertical distance.

    All point sets and `face_height` must share one coordinate space.
    Returns 0.0 when any landmark family is missing, the face has no
    height, or a coordinate is not finite.
    """
    left  = _as_points(left_eye)
    right = _as_points(right_eye)
    mouth = _as_points(outer_lips)

    if left.shape[0] == 0 or right.shape[0] == 0 or mouth.shape[0] == 0:
        return 0.0
    if face_height is None or face_height <= 0:
        return 0.0

    eye_center_y   = (left[:, 1].mean() + right[:, 1].mean()) / 2.0
    mouth_center_y = mouth[:, 1].mean()
    ratio = abs(mouth_center_y - eye_center_y) / face_height

    if not math.isfinite(ratio):
        return 0.0

    pitch = (PITCH_NEUTRAL_RATIO - ratio) * PITCH_DEGREES_SCALE
    return float(np.clip(pitch, -PITCH_LIMIT_DEG, PITCH_LIMIT_DEG))


def radians_to_degrees(angle: Optional[float]) -> Optional[float]:
    """Detector roll/yaw pass-through; None stays None."""
    if angle is None:
        return None
    return math.degrees(angle)
