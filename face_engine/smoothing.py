# =============================================================================
# face_engine/smoothing.py
#
# Single-pole exponential moving average for the eye-open probabilities.
#
#   s_t = s_{t−1} · (1 − α) + r_t · α          α = EYE_EMA_ALPHA (0.3)
#
# From a cold start at 0, n identical readings r give
#   s_n = r · (1 − (1 − α)ⁿ)
# =============================================================================

import math
from typing import Optional, Tuple

from config import EYE_EMA_ALPHA, EYE_EMA_INITIAL, EYE_EMA_SEED_WITH_FIRST
from core.logger import get_logger

log = get_logger(__name__)


class EMASmoother:
    """
    Exponential moving average for one scalar signal.

    Usage:
        ema = EMASmoother(alpha=0.3)
        smoothed = ema.update(raw_measurement)
    """

    def __init__(
        self,
        alpha: float = EYE_EMA_ALPHA,
        initial_value: float = EYE_EMA_INITIAL,
        seed_with_first: bool = EYE_EMA_SEED_WITH_FIRST,
    ):
        if not 0.0 < alpha <= 1.0:
            raise ValueError(f"EMA alpha must be in (0, 1], got {alpha}")

        self.alpha = alpha
        self.seed_with_first = seed_with_first
        self._value = float(initial_value)
        self._initial_value = float(initial_value)
        self._updates = 0

    def update(self, measurement: float) -> float:
        """
        Feed a new raw measurement and return the smoothed estimate.
        A non-finite measurement is ignored and the current estimate returned.
        """
        if not math.isfinite(measurement):
            log.debug(f"Ignoring non-finite EMA measurement: {measurement}")
            return self._value

        if self.seed_with_first and self._updates == 0:
            self._value = float(measurement)
        else:
            self._value = self._value * (1.0 - self.alpha) + measurement * self.alpha
        self._updates += 1
        return self._value

    def reset(self, value: Optional[float] = None) -> None:
        """Return to the cold-start state (or to `value`)."""
        self._value = self._initial_value if value is None else float(value)
        self._updates = 0

    @property
    def value(self) -> float:
        """Current smoothed estimate without updating."""
        return self._value

    @property
    def updates(self) -> int:
        return self._updates


class EyeSmoother:
    """
    Left/right pair of EMA smoothers owned by one tracked face.

    An eye without a measurement this frame keeps its previous state and
    reports None.
    """

    def __init__(
        self,
        alpha: float = EYE_EMA_ALPHA,
        seed_with_first: bool = EYE_EMA_SEED_WITH_FIRST,
    ):
        self.left = EMASmoother(alpha, EYE_EMA_INITIAL, seed_with_first)
        self.right = EMASmoother(alpha, EYE_EMA_INITIAL, seed_with_first)

    def update(
        self,
        left_prob: Optional[float],
        right_prob: Optional[float],
    ) -> Tuple[Optional[float], Optional[float]]:
        """
        Returns:
            (left, right) smoothed probabilities, None where the raw value was None
        """
        left = self.left.update(left_prob) if left_prob is not None else None
        right = self.right.update(right_prob) if right_prob is not None else None
        return left, right

    def reset(self) -> None:
        self.left.reset()
        self.right.reset()
