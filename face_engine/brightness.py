# =============================================================================
# face_engine/brightness.py
#
# Ambient brightness sampler.
#
# Reduces a whole frame to one scalar with a single area-average call:
#   (c0, c1, c2, _) = cv2.mean(frame)
#   brightness      = mean(colour channels) / full_scale · 100
#
# Channel order (RGB / BGR / RGBA / BGRA) does not matter since all colour
# channels are averaged; a fourth (alpha) channel is ignored.
# Empty or unreadable frames return 0.0 instead of raising.
# =============================================================================

from typing import Optional

import cv2
import numpy as np

from core.logger import get_logger

log = get_logger(__name__)


def _full_scale(dtype: np.dtype) -> float:
    """Value of a fully saturated channel for this pixel dtype."""
    if np.issubdtype(dtype, np.integer):
        return float(np.iinfo(dtype).max)
    return 1.0


def estimate_brightness(frame: Optional[np.ndarray]) -> float:
    """
    Estimate frame brightness on a 0–100 scale.

    Args:
        frame: (H, W), (H, W, 3) or (H, W, 4) pixel array

    Returns:
        Brightness in [0, 100]; 0.0 for empty or unreadable frames.
    """
    if frame is None:
        return 0.0

    frame = np.asarray(frame)
    if frame.size == 0 or frame.ndim not in (2, 3):
        log.debug(f"Brightness: unusable frame shape {frame.shape}")
        return 0.0

    channels = 1 if frame.ndim == 2 else frame.shape[2]
    if channels not in (1, 3, 4):
        log.warning(f"Brightness: unsupported channel count {channels}")
        return 0.0

    if frame.dtype == np.float16 or frame.dtype == np.bool_:
        frame = frame.astype(np.float32)

    try:
        means = cv2.mean(frame)
    except cv2.error as e:
        log.warning(f"Brightness: cv2.mean failed ({e})")
        return 0.0

    colour = means[:1] if channels == 1 else means[:3]
    level = float(np.mean(colour)) / _full_scale(frame.dtype)
    return float(np.clip(level * 100.0, 0.0, 100.0))
