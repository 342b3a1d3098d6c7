# =============================================================================
# face_engine/coordinate_mapper.py
#
# Converts detector-space coordinates into pixel / display space.
#
#   Detector space: unit square, origin bottom-left, y-up.
#   Pixel space:    origin top-left, y-down.
#
#   Face box:        x_px = x · W
#                    y_px = (1 − y − h) · H        (top edge after flip)
#   Landmark point:  n   = box.origin + local · box.size
#                    x_px = n.x · W
#                    y_px = (1 − n.y) · H
#
# Display-aspect variant (viewport of a different aspect ratio):
#   scale    = view_h / H
#   offset_x = (view_w − W · scale) / 2
#   x' = x_px · scale + offset_x,   y' = y_px · scale
# A viewport equal to the frame size gives scale = 1, offset_x = 0.
# =============================================================================

from typing import List, Optional

import numpy as np

from face_engine.data_structures import (
    FaceBox, LandmarkRegion, NormalizedPoint, PixelPoint, PixelRect, Viewport,
)
from core.logger import get_logger

log = get_logger(__name__)


class CoordinateMapper:
    """
    Maps normalized boxes and landmark regions of one frame into pixel space,
    optionally re-projected into a destination viewport.

    Usage:
        mapper = CoordinateMapper(1280, 720, viewport=Viewport(390, 844))
        rect   = mapper.rect(face.box)
        points = mapper.region(face.region(LandmarkFamily.LEFT_EYE), face.box)
    """

    def __init__(self, image_width: float, image_height: float,
                 viewport: Optional[Viewport] = None):
        self.image_width = float(image_width)
        self.image_height = float(image_height)
        self.viewport = viewport

        self.degenerate = self.image_width <= 0 or self.image_height <= 0
        self.scale = 1.0
        self.offset_x = 0.0

        if viewport is not None and not self.degenerate:
            if viewport.width <= 0 or viewport.height <= 0:
                self.degenerate = True
            else:
                self.scale = viewport.height / self.image_height
                self.offset_x = (viewport.width - self.image_width * self.scale) / 2.0

        if self.degenerate:
            log.debug(
                f"Degenerate mapping ({image_width}×{image_height}, "
                f"viewport={viewport}); emitting zero geometry"
            )

    # ── Public API ────────────────────────────────────────────────────────────

    def rect(self, box: FaceBox) -> PixelRect:
        """Denormalize a face box. Degenerate input yields a zero rectangle."""
        if self.degenerate:
            return PixelRect()

        x = box.x * self.image_width
        y = (1.0 - box.y - box.height) * self.image_height
        width = box.width * self.image_width
        height = box.height * self.image_height

        return PixelRect(
            x=x * self.scale + self.offset_x,
            y=y * self.scale,
            width=width * self.scale,
            height=height * self.scale,
        )

    def point(self, local: NormalizedPoint, box: FaceBox) -> PixelPoint:
        """Map one point given in the face box's local normalized frame."""
        mapped = self.region([local], box)
        return mapped[0]

    def region(self, region: LandmarkRegion, box: FaceBox) -> List[PixelPoint]:
        """
        Map an ordered landmark region in one vectorized pass.

        Accepts a sequence of (x, y) pairs or an (N, 2) array; order is kept.
        """
        pts = np.asarray(region, dtype=np.float64).reshape(-1, 2)
        if pts.shape[0] == 0:
            return []
        if self.degenerate:
            return [PixelPoint(0.0, 0.0) for _ in range(pts.shape[0])]

        nx = box.x + pts[:, 0] * box.width
        ny = box.y + pts[:, 1] * box.height

        px = nx * self.image_width * self.scale + self.offset_x
        py = (1.0 - ny) * self.image_height * self.scale

        return [PixelPoint(float(x), float(y)) for x, y in zip(px, py)]


# ── Functional wrappers ───────────────────────────────────────────────────────

def denormalize(box: FaceBox, image_width: float, image_height: float) -> PixelRect:
    return CoordinateMapper(image_width, image_height).rect(box)


def map_point(local: NormalizedPoint, box: FaceBox,
              image_width: float, image_height: float) -> PixelPoint:
    return CoordinateMapper(image_width, image_height).point(local, box)


def map_region(region: LandmarkRegion, box: FaceBox,
               image_width: float, image_height: float) -> List[PixelPoint]:
    return CoordinateMapper(image_width, image_height).region(region, box)


def denormalize_to_viewport(box: FaceBox, image_width: float, image_height: float,
                            viewport: Viewport) -> PixelRect:
    return CoordinateMapper(image_width, image_height, viewport).rect(box)


def map_point_to_viewport(local: NormalizedPoint, box: FaceBox,
                          image_width: float, image_height: float,
                          viewport: Viewport) -> PixelPoint:
    return CoordinateMapper(image_width, image_height, viewport).point(local, box)
