# =============================================================================
# face_engine/attribute_engine.py
#
# FaceAttributeEngine — single public entry point of the engine.
#
# Call flow per frame:
#   1. estimate_brightness(frame)                 → once per frame
#   2. for each FaceObservation, in detector order:
#        CoordinateMapper.rect(box)               → pixel bounds
#        CoordinateMapper.region(...)             → ContourMap (+ aliases)
#        eye_aspect_ratio → ear_to_probability    → raw eye-open probability
#        EyeSmoother.update(...)                  → smoothed probability
#        eye_state / smile_probability / pitch_proxy / radians_to_degrees
#   3. Pack everything into FaceAttributes and return the list
#
# Smoothing state is kept per FaceObservation.face_id. Faces reported
# without an id share a single smoother, so in multi-face scenes their eye
# signals bleed into each other unless the caller supplies stable ids.
# A smoother whose id goes unseen for more than smoother_ttl_frames
# processed frames is dropped.
# =============================================================================

from typing import Callable, Dict, Hashable, List, Optional, Sequence, Tuple

import numpy as np

from config import (
    EYE_EMA_ALPHA, EYE_EMA_SEED_WITH_FIRST, EYE_SMOOTHER_TTL_FRAMES,
    INCLUDE_CHEEK_CONTOURS,
)
from face_engine.brightness import estimate_brightness
from face_engine.coordinate_mapper import CoordinateMapper
from face_engine.data_structures import (
    CONTOUR_ALIASES, CONTOUR_SOURCES,
    ContourMap, FaceAttributes, FaceObservation,
    PixelPoint, Viewport,
)
from face_engine.estimators import (
    eye_aspect_ratio, ear_to_probability, eye_state,
    smile_probability, pitch_proxy, radians_to_degrees,
)
from face_engine.smoothing import EyeSmoother
from core.logger import get_logger

log = get_logger(__name__)

Detector = Callable[[np.ndarray], Sequence[FaceObservation]]


# ── Cheek extrapolation ───────────────────────────────────────────────────────

def _cheek_point(eye: List[PixelPoint], face: List[PixelPoint]) -> Optional[PixelPoint]:
    """Midpoint between the eye's outer corner and the nearest face-edge point."""
    if not eye or not face:
        return None
    corner = np.asarray(eye[0], dtype=np.float64)
    edge = np.asarray(face, dtype=np.float64)
    nearest = edge[int(np.argmin(np.linalg.norm(edge - corner, axis=1)))]
    mid = (corner + nearest) / 2.0
    return PixelPoint(float(mid[0]), float(mid[1]))


# ── Engine ────────────────────────────────────────────────────────────────────

class FaceAttributeEngine:
    """
    Turns detector landmarks into per-face attribute records.

    Thread safety: NOT thread-safe. Call serially from one frame loop per
    instance, or give each concurrent path its own engine.

    Usage:
        engine = FaceAttributeEngine()
        faces  = engine.process(rgb_frame, observations)
        faces  = engine.analyze(rgb_frame, detector)   # detector(frame) → observations
    """

    def __init__(
        self,
        ema_alpha: float = EYE_EMA_ALPHA,
        seed_with_first: bool = EYE_EMA_SEED_WITH_FIRST,
        include_cheeks: bool = INCLUDE_CHEEK_CONTOURS,
        ear_baseline: Optional[float] = None,
        smoother_ttl_frames: int = EYE_SMOOTHER_TTL_FRAMES,
    ):
        if not 0.0 < ema_alpha <= 1.0:
            raise ValueError(f"ema_alpha must be in (0, 1], got {ema_alpha}")
        if ear_baseline is not None and ear_baseline <= 0:
            raise ValueError(f"ear_baseline must be positive, got {ear_baseline}")
        if smoother_ttl_frames < 0:
            raise ValueError(f"smoother_ttl_frames must be >= 0, got {smoother_ttl_frames}")

        self.ema_alpha = ema_alpha
        self.seed_with_first = seed_with_first
        self.include_cheeks = include_cheeks
        self.ear_baseline = ear_baseline
        self.smoother_ttl_frames = smoother_ttl_frames

        self._smoothers: Dict[Optional[Hashable], EyeSmoother] = {}
        self._last_seen: Dict[Optional[Hashable], int] = {}
        self._frame_index = 0

        log.info(
            f"FaceAttributeEngine initialized (alpha={ema_alpha}, "
            f"seed_with_first={seed_with_first}, cheeks={include_cheeks}, "
            f"ear_baseline={ear_baseline}, ttl={smoother_ttl_frames})"
        )

    # ── Public API ────────────────────────────────────────────────────────────

    def process(
        self,
        frame: Optional[np.ndarray],
        faces: Sequence[FaceObservation],
        frame_size: Optional[Tuple[int, int]] = None,
        viewport: Optional[Viewport] = None,
    ) -> List[FaceAttributes]:
        """
        Main entry point. Process one frame's detector output.

        Args:
            frame:      Pixel buffer (H, W, C); used for brightness and size
            faces:      Detector observations, in detector order
            frame_size: (width, height); defaults to the frame's shape
            viewport:   Destination display size for aspect-corrected output

        Returns:
            One FaceAttributes per observation; [] if the frame is unreadable
        """
        if frame is None:
            log.warning("Frame buffer unavailable; dropping frame")
            return []

        self._frame_index += 1

        if not faces:
            self._evict_stale()
            return []

        if frame_size is None:
            shape = np.asarray(frame).shape
            frame_h, frame_w = shape[:2] if len(shape) >= 2 else (0, 0)
        else:
            frame_w, frame_h = frame_size

        mapper = CoordinateMapper(frame_w, frame_h, viewport)
        brightness = estimate_brightness(frame)

        results = [self._process_face(face, mapper, brightness) for face in faces]
        self._evict_stale()
        return results

    def analyze(
        self,
        frame: Optional[np.ndarray],
        detector: Detector,
        frame_size: Optional[Tuple[int, int]] = None,
        viewport: Optional[Viewport] = None,
    ) -> List[FaceAttributes]:
        """
        Run an external detector on the frame, then process its output.
        A detector failure aborts the whole frame and yields [].
        """
        if frame is None:
            log.warning("Frame buffer unavailable; dropping frame")
            return []

        try:
            faces = detector(frame)
        except Exception:
            log.exception("Landmark detector failed; dropping frame")
            return []

        return self.process(frame, faces or [], frame_size, viewport)

    def forget(self, face_id: Optional[Hashable]) -> None:
        """Drop smoothing state for a face that left the scene."""
        self._smoothers.pop(face_id, None)
        self._last_seen.pop(face_id, None)

    def reset(self) -> None:
        """Drop all smoothing state."""
        self._smoothers.clear()
        self._last_seen.clear()
        log.info("FaceAttributeEngine reset.")

    @property
    def tracked_faces(self) -> int:
        return len(self._smoothers)

    # ── Private Helpers ───────────────────────────────────────────────────────

    def _smoother_for(self, face_id: Optional[Hashable]) -> EyeSmoother:
        smoother = self._smoothers.get(face_id)
        if smoother is None:
            smoother = EyeSmoother(self.ema_alpha, self.seed_with_first)
            self._smoothers[face_id] = smoother
        self._last_seen[face_id] = self._frame_index
        return smoother

    def _evict_stale(self) -> None:
        cutoff = self._frame_index - self.smoother_ttl_frames
        stale = [key for key, seen in self._last_seen.items() if seen < cutoff]
        for key in stale:
            del self._smoothers[key]
            del self._last_seen[key]
        if stale:
            log.debug(f"Dropped smoothing state for {len(stale)} unseen face(s)")

    def _build_contours(self, face: FaceObservation, mapper: CoordinateMapper) -> ContourMap:
        """Map each landmark family once, then attach aliased keys."""
        contours: ContourMap = {
            name: mapper.region(face.region(family), face.box)
            for name, family in CONTOUR_SOURCES.items()
        }
        for alias, source in CONTOUR_ALIASES.items():
            contours[alias] = contours[source]

        if self.include_cheeks:
            left = _cheek_point(contours["LEFT_EYE"], contours["FACE"])
            right = _cheek_point(contours["RIGHT_EYE"], contours["FACE"])
            if left is not None:
                contours["LEFT_CHEEK"] = [left]
            if right is not None:
                contours["RIGHT_CHEEK"] = [right]

        return contours

    def _process_face(
        self,
        face: FaceObservation,
        mapper: CoordinateMapper,
        brightness: float,
    ) -> FaceAttributes:
        """Construct a fully populated FaceAttributes for one face."""
        bounds = mapper.rect(face.box)
        contours = self._build_contours(face, mapper)

        left_eye = contours["LEFT_EYE"]
        right_eye = contours["RIGHT_EYE"]
        outer_lips = contours["UPPER_LIP_TOP"]

        # ── Eyes ─────────────────────────────────────────────────────────────
        raw_left = ear_to_probability(eye_aspect_ratio(left_eye), self.ear_baseline)
        raw_right = ear_to_probability(eye_aspect_ratio(right_eye), self.ear_baseline)
        left_prob, right_prob = self._smoother_for(face.face_id).update(raw_left, raw_right)

        # ── Mouth / Pose ──────────────────────────────────────────────────────
        smile = smile_probability(outer_lips)
        pitch = pitch_proxy(left_eye, right_eye, outer_lips, bounds.height)

        return FaceAttributes(
            bounds=bounds,
            contours=contours,
            roll_angle=radians_to_degrees(face.roll_rad),
            pitch_angle=pitch,
            yaw_angle=radians_to_degrees(face.yaw_rad),
            brightness=brightness,
            left_eye_open_probability=left_prob,
            right_eye_open_probability=right_prob,
            left_eye_state=eye_state(left_prob),
            right_eye_state=eye_state(right_prob),
            smiling_probability=smile,
            face_id=face.face_id,
        )
