# =============================================================================
# face_engine/data_structures.py
# Shared types that flow between every module of the face attribute engine.
#
# Two coordinate spaces are in play:
#   • Normalized detector space — unit square, origin bottom-left, y-up.
#     Landmark regions are additionally local to their face box.
#   • Pixel / display space — origin top-left, y-down, unbounded floats.
# =============================================================================

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Hashable, List, NamedTuple, Optional, Sequence


# ── Points & Boxes ────────────────────────────────────────────────────────────

class NormalizedPoint(NamedTuple):
    """Landmark coordinate in detector space (y-up, origin bottom-left)."""
    x: float
    y: float


class PixelPoint(NamedTuple):
    """Point in pixel / display space (y-down, origin top-left)."""
    x: float
    y: float


@dataclass(frozen=True)
class FaceBox:
    """Normalized face bounding box; (x, y) is the bottom-left corner."""
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0


@dataclass(frozen=True)
class PixelRect:
    """Bounding box in pixel space; (x, y) is the top-left corner."""
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2.0

    @property
    def center_y(self) -> float:
        return self.y + self.height / 2.0


@dataclass(frozen=True)
class Viewport:
    """Destination display size in pixels, passed explicitly by the caller."""
    width: float
    height: float


# ── Landmark Families ─────────────────────────────────────────────────────────

class LandmarkFamily(Enum):
    """Landmark regions delivered by the upstream detector."""
    FACE_CONTOUR  = "face_contour"
    LEFT_EYEBROW  = "left_eyebrow"
    RIGHT_EYEBROW = "right_eyebrow"
    LEFT_EYE      = "left_eye"
    RIGHT_EYE     = "right_eye"
    NOSE_CREST    = "nose_crest"
    NOSE          = "nose"
    OUTER_LIPS    = "outer_lips"
    INNER_LIPS    = "inner_lips"


class EyeOpenState(str, Enum):
    OPEN    = "OPEN"
    CLOSED  = "CLOSED"
    UNKNOWN = "UNKNOWN"


# Contour key → landmark family that is mapped for it
CONTOUR_SOURCES: Dict[str, LandmarkFamily] = {
    "FACE":              LandmarkFamily.FACE_CONTOUR,
    "LEFT_EYEBROW_TOP":  LandmarkFamily.LEFT_EYEBROW,
    "RIGHT_EYEBROW_TOP": LandmarkFamily.RIGHT_EYEBROW,
    "LEFT_EYE":          LandmarkFamily.LEFT_EYE,
    "RIGHT_EYE":         LandmarkFamily.RIGHT_EYE,
    "NOSE_BRIDGE":       LandmarkFamily.NOSE_CREST,
    "NOSE_BOTTOM":       LandmarkFamily.NOSE,
    "UPPER_LIP_TOP":     LandmarkFamily.OUTER_LIPS,
    "UPPER_LIP_BOTTOM":  LandmarkFamily.INNER_LIPS,
}

# Contour key → key whose point list it shares (same list object)
CONTOUR_ALIASES: Dict[str, str] = {
    "LEFT_EYEBROW_BOTTOM":  "LEFT_EYEBROW_TOP",
    "RIGHT_EYEBROW_BOTTOM": "RIGHT_EYEBROW_TOP",
    "LOWER_LIP_TOP":        "UPPER_LIP_BOTTOM",
    "LOWER_LIP_BOTTOM":     "UPPER_LIP_TOP",
}

ContourMap = Dict[str, List[PixelPoint]]
LandmarkRegion = Sequence[NormalizedPoint]


# ── Engine Input ──────────────────────────────────────────────────────────────

@dataclass
class FaceObservation:
    """
    One face as reported by the external landmark detector.

    Landmark regions are expressed relative to `box` (local normalized
    space). `face_id` is an optional caller-supplied tracking key; the
    engine keeps a separate eye smoother per id.
    """
    box: FaceBox = field(default_factory=FaceBox)
    landmarks: Dict[LandmarkFamily, LandmarkRegion] = field(default_factory=dict)
    # Detector head angles in radians, None if not reported
    roll_rad: Optional[float] = None
    yaw_rad: Optional[float] = None
    face_id: Optional[Hashable] = None

    def region(self, family: LandmarkFamily) -> LandmarkRegion:
        region = self.landmarks.get(family)
        return region if region is not None else ()


# ── Engine Output ─────────────────────────────────────────────────────────────

@dataclass
class FaceAttributes:
    """
    Master output record for one detected face.
    Probability fields are either in [0, 1] or None.
    """
    bounds: PixelRect = field(default_factory=PixelRect)
    contours: ContourMap = field(default_factory=dict)
    # Degrees; roll and yaw are None when the detector did not report them
    roll_angle:  Optional[float] = None
    pitch_angle: float = 0.0
    yaw_angle:   Optional[float] = None
    # Frame brightness, 0–100
    brightness: float = 0.0
    # Smoothed eye-open probabilities
    left_eye_open_probability:  Optional[float] = None
    right_eye_open_probability: Optional[float] = None
    left_eye_state:  EyeOpenState = EyeOpenState.UNKNOWN
    right_eye_state: EyeOpenState = EyeOpenState.UNKNOWN
    smiling_probability: Optional[float] = None
    face_id: Optional[Hashable] = None

    def to_dict(self) -> Dict[str, Any]:
        """Flatten into the key layout used by the camera plugin bridge."""
        return {
            "rollAngle":  self.roll_angle,
            "pitchAngle": self.pitch_angle,
            "yawAngle":   self.yaw_angle,
            "bounds": {
                "x":               self.bounds.x,
                "y":               self.bounds.y,
                "width":           self.bounds.width,
                "height":          self.bounds.height,
                "boundingCenterX": self.bounds.center_x,
                "boundingCenterY": self.bounds.center_y,
                "boundingExactCenterX": self.bounds.center_x,
                "boundingExactCenterY": self.bounds.center_y,
            },
            "contours": {
                name: [{"x": p.x, "y": p.y} for p in points]
                for name, points in self.contours.items()
            },
            "brightness": self.brightness,
            "leftEyeOpenProbability":  self.left_eye_open_probability,
            "rightEyeOpenProbability": self.right_eye_open_probability,
            "leftEyeState":  self.left_eye_state.value,
            "rightEyeState": self.right_eye_state.value,
            "smilingProbability": self.smiling_probability,
        }
