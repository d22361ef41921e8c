"""
Tap/flick gating: debounce and probability-to-flick classification.
"""
import math
from typing import Optional

from loguru import logger


class GestureDebouncer:
    """
    Rate-limits throw/catch actions.

    Taps and flicks share this one clock, so a physical tap that also shows
    up as a high flick probability only fires once.
    """

    def __init__(self, debounce_ms: float = 100.0):
        self.debounce_ms = debounce_ms
        self._last_action_ms: Optional[float] = None

    def try_act(self, now_ms: float) -> bool:
        if self._last_action_ms is not None and now_ms - self._last_action_ms < self.debounce_ms:
            logger.debug(f"Action debounced ({now_ms - self._last_action_ms:.1f}ms since last)")
            return False
        self._last_action_ms = now_ms
        return True


class FlickClassifier:
    """
    Turns a per-frame tap probability into a binary flick decision.

    The UI sensitivity s is remapped to an internal sensitivity
    clamp(a*s^2 + b*s, 0, 1); the acceptance threshold is
    (1 - internal) ** exponent.
    """

    def __init__(self, exponent: float = 3.0, quadratic_a: float = -1.8, quadratic_b: float = 2.8):
        self.exponent = exponent
        self.quadratic_a = quadratic_a
        self.quadratic_b = quadratic_b

    def internal_sensitivity(self, sensitivity_ui: float) -> float:
        raw = self.quadratic_a * sensitivity_ui ** 2 + self.quadratic_b * sensitivity_ui
        return max(0.0, min(1.0, raw))

    def threshold(self, sensitivity_ui: float) -> float:
        return (1.0 - self.internal_sensitivity(sensitivity_ui)) ** self.exponent

    def classify(self, tap_probability: float, sensitivity_ui: float) -> bool:
        # Sensitivity 0 leaves the discrete tap as the only trigger
        if sensitivity_ui <= 0 or not math.isfinite(tap_probability):
            return False
        threshold = self.threshold(sensitivity_ui)
        if tap_probability >= threshold:
            logger.debug(
                f"Flick detected: prob {tap_probability:.3f} >= threshold {threshold:.5f} "
                f"(ui sensitivity {sensitivity_ui:.2f})"
            )
            return True
        return False
