"""Shared fixtures for emojify tests.

All images and detections are synthetic; no detector model needed.
"""

import numpy as np
import pytest

from emojify.types import BoundingBox, EmojiCategory, FaceObservation

# One distinct BGR color per category
CATEGORY_COLORS = {
    category: (10 * (i + 1), 20 * (i + 1), 30 * (i + 1))
    for i, category in enumerate(EmojiCategory)
}


@pytest.fixture
def make_face():
    """Factory fixture for FaceObservation with sensible defaults (a smile)."""
    def _make(
        x: float = 100,
        y: float = 80,
        width: float = 100,
        height: float = 120,
        smiling: float = 0.9,
        left_open: float = 0.9,
        right_open: float = 0.9,
    ) -> FaceObservation:
        return FaceObservation(
            bbox=BoundingBox(x=x, y=y, width=width, height=height),
            smiling_probability=smiling,
            left_eye_open_probability=left_open,
            right_eye_open_probability=right_open,
        )
    return _make


@pytest.fixture
def solid_assets():
    """Opaque 100x100 BGR emoji, one solid color per category."""
    return {
        category: np.full((100, 100, 3), color, dtype=np.uint8)
        for category, color in CATEGORY_COLORS.items()
    }


@pytest.fixture
def photo():
    """300x400 BGR photo with random content."""
    rng = np.random.default_rng(42)
    return rng.integers(0, 256, size=(300, 400, 3), dtype=np.uint8)
