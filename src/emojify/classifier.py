"""Expression classifier: smile / eye-open probabilities to an emoji.

Rule-based, no model. Winks take priority over closed eyes only when
exactly one eye is closed.

Example:
    >>> from emojify.classifier import classify
    >>> classify(face)
    <EmojiCategory.SMILE: 'smile'>
"""

import logging
from typing import Optional

from emojify.config import EYE_OPEN_THRESHOLD, SMILING_THRESHOLD, EmojifyConfig
from emojify.types import EmojiCategory, FaceObservation

logger = logging.getLogger(__name__)

# (smiling, left_closed, right_closed) -> category
_DECISION_TABLE = {
    (True, True, False): EmojiCategory.LEFT_WINK,
    (True, False, True): EmojiCategory.RIGHT_WINK,
    (True, True, True): EmojiCategory.CLOSED_EYE_SMILE,
    (True, False, False): EmojiCategory.SMILE,
    (False, True, False): EmojiCategory.LEFT_WINK_FROWN,
    (False, False, True): EmojiCategory.RIGHT_WINK_FROWN,
    (False, True, True): EmojiCategory.CLOSED_EYE_FROWN,
    (False, False, False): EmojiCategory.FROWN,
}


def classify(
    observation: FaceObservation,
    smiling_threshold: float = SMILING_THRESHOLD,
    eye_open_threshold: float = EYE_OPEN_THRESHOLD,
) -> EmojiCategory:
    """Pick the emoji category for a face.

    Comparisons are strict: a smiling probability equal to the threshold is
    not smiling, and an eye-open probability equal to the threshold is open.
    Sentinel values (e.g. -1 for "not computed") and NaN still map to a
    category.

    Args:
        observation: Detector output for one face.
        smiling_threshold: Smiling when probability > this.
        eye_open_threshold: Eye closed when open probability < this.

    Returns:
        Exactly one EmojiCategory.
    """
    smiling = observation.smiling_probability > smiling_threshold
    left_closed = observation.left_eye_open_probability < eye_open_threshold
    right_closed = observation.right_eye_open_probability < eye_open_threshold

    category = _DECISION_TABLE[(smiling, left_closed, right_closed)]

    logger.debug(
        f"classify: smiling={observation.smiling_probability:.3f} "
        f"left_open={observation.left_eye_open_probability:.3f} "
        f"right_open={observation.right_eye_open_probability:.3f} -> {category.name}"
    )
    return category


class ExpressionClassifier:
    """Callable classifier bound to configured thresholds.

    Args:
        config: Source of the thresholds. Defaults to EmojifyConfig().
    """

    def __init__(self, config: Optional[EmojifyConfig] = None):
        config = config or EmojifyConfig()
        self._smiling_threshold = config.smiling_threshold
        self._eye_open_threshold = config.eye_open_threshold

    @property
    def smiling_threshold(self) -> float:
        return self._smiling_threshold

    @property
    def eye_open_threshold(self) -> float:
        return self._eye_open_threshold

    def classify(self, observation: FaceObservation) -> EmojiCategory:
        return classify(
            observation,
            smiling_threshold=self._smiling_threshold,
            eye_open_threshold=self._eye_open_threshold,
        )

    __call__ = classify


__all__ = ["classify", "ExpressionClassifier"]
