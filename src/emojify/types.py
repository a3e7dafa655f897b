"""Emojify domain types.

All observation types are frozen dataclasses: the detector produces them
and nothing downstream mutates them.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

import numpy as np


@dataclass(frozen=True)
class BoundingBox:
    """Face bounding box in image pixel coordinates.

    Attributes:
        x: Left edge in pixels.
        y: Top edge in pixels.
        width: Box width in pixels.
        height: Box height in pixels.
    """

    x: float
    y: float
    width: float
    height: float

    @property
    def is_valid(self) -> bool:
        """True when the box is finite and has a positive area."""
        if not all(math.isfinite(v) for v in (self.x, self.y, self.width, self.height)):
            return False
        return self.width > 0 and self.height > 0

    @property
    def center(self) -> tuple[float, float]:
        return (self.x + self.width / 2, self.y + self.height / 2)


@dataclass(frozen=True)
class FaceObservation:
    """Detector output for a single face.

    Attributes:
        bbox: Face bounding box in pixels.
        smiling_probability: Probability the face is smiling [0, 1].
        left_eye_open_probability: Probability the left eye is open [0, 1].
        right_eye_open_probability: Probability the right eye is open [0, 1].
    """

    bbox: BoundingBox
    smiling_probability: float
    left_eye_open_probability: float
    right_eye_open_probability: float


class EmojiCategory(Enum):
    """The eight emoji an expression can map to."""

    SMILE = "smile"
    FROWN = "frown"
    LEFT_WINK = "left_wink"
    RIGHT_WINK = "right_wink"
    LEFT_WINK_FROWN = "left_wink_frown"
    RIGHT_WINK_FROWN = "right_wink_frown"
    CLOSED_EYE_SMILE = "closed_eye_smile"
    CLOSED_EYE_FROWN = "closed_eye_frown"

    @classmethod
    def from_string(cls, value: str) -> "EmojiCategory":
        """Parse a category from its name or value (case-insensitive)."""
        key = value.strip().lower()
        for category in cls:
            if key in (category.value, category.name.lower()):
                return category
        raise ValueError(f"Unknown emoji category: {value!r}")


class NoticeKind(Enum):
    """User-facing notices produced by a composite pass."""

    NO_FACES_DETECTED = "no_faces_detected"
    NO_EMOJI_FOR_FACE = "no_emoji_for_face"
    INVALID_FACE_GEOMETRY = "invalid_face_geometry"


@dataclass(frozen=True)
class Notice:
    """A non-fatal event for the caller to present.

    Attributes:
        kind: What happened.
        face_index: Index of the face in detector order, or None for
            image-level notices.
        message: Human-readable description.
    """

    kind: NoticeKind
    face_index: Optional[int] = None
    message: str = ""


@dataclass
class OverlayPlacement:
    """A scaled emoji ready to be drawn at a canvas position.

    Attributes:
        face_index: Index of the face in detector order.
        category: Category the emoji was chosen for.
        image: Scaled emoji pixels (H, W, C).
        x: Left edge on the canvas (may be negative).
        y: Top edge on the canvas (may be negative).
    """

    face_index: int
    category: EmojiCategory
    image: np.ndarray
    x: int
    y: int

    @property
    def width(self) -> int:
        return int(self.image.shape[1])

    @property
    def height(self) -> int:
        return int(self.image.shape[0])


@dataclass
class CompositeResult:
    """Output of a composite pass.

    Attributes:
        image: Final canvas. The caller's photo object itself when no faces
            were supplied, otherwise a fresh buffer.
        notices: Notices in the order they were raised.
        placements: Overlays that were drawn, in draw order.
    """

    image: np.ndarray
    notices: List[Notice] = field(default_factory=list)
    placements: List[OverlayPlacement] = field(default_factory=list)

    @property
    def overlay_count(self) -> int:
        return len(self.placements)

    @property
    def categories(self) -> List[EmojiCategory]:
        return [p.category for p in self.placements]


__all__ = [
    "BoundingBox",
    "FaceObservation",
    "EmojiCategory",
    "NoticeKind",
    "Notice",
    "OverlayPlacement",
    "CompositeResult",
]
