"""Compositor: draws one scaled emoji per face onto a copy of the photo.

The pass is a left fold over faces in detector order. Planning an overlay
(classify, look up, scale, place) is pure and can run in parallel;
drawing is always sequential so later faces paint over earlier ones.

Example:
    >>> from emojify.compositor import composite
    >>> result = composite(photo, faces, assets)
    >>> result.image.shape == photo.shape
    True
"""

from __future__ import annotations

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Optional, Sequence, Tuple, Union

import cv2
import numpy as np

from emojify.assets import AssetLookup, as_lookup
from emojify.classifier import ExpressionClassifier
from emojify.config import EmojifyConfig
from emojify.errors import InvalidImageError
from emojify.types import (
    BoundingBox,
    CompositeResult,
    EmojiCategory,
    FaceObservation,
    Notice,
    NoticeKind,
    OverlayPlacement,
)

logger = logging.getLogger(__name__)

PlanResult = Tuple[Optional[OverlayPlacement], Optional[Notice]]

# Largest emoji accepted, as a multiple of the canvas size per axis
MAX_CANVAS_RATIO = 4


def _round_px(value: float) -> int:
    """Round half up to a pixel coordinate."""
    return int(math.floor(value + 0.5))


def validate_image(image: np.ndarray, what: str = "photo") -> None:
    """Reject missing or empty images.

    Raises:
        InvalidImageError: If the image is None, not an array, empty, or
            not (H, W) / (H, W, C).
    """
    if image is None:
        raise InvalidImageError(f"No {what} supplied")
    if not isinstance(image, np.ndarray):
        raise InvalidImageError(f"{what} must be a numpy array, got {type(image).__name__}")
    if image.size == 0 or image.ndim not in (2, 3):
        raise InvalidImageError(f"{what} is empty or has unsupported shape {image.shape}")
    if image.ndim == 3 and image.shape[2] not in (3, 4):
        raise InvalidImageError(f"{what} is empty or has unsupported shape {image.shape}")


def compute_emoji_size(
    bbox: BoundingBox,
    emoji_shape: Tuple[int, ...],
    scale_factor: float,
    height_scale: float,
) -> Tuple[int, int]:
    """Target (width, height) of the emoji for a face.

    Width follows the face box width. Height keeps the emoji's aspect ratio
    and is multiplied by ``height_scale`` (the scale factor again, in the
    original app's formula).

    Args:
        bbox: Face bounding box in pixels.
        emoji_shape: Shape of the unscaled emoji (H, W[, C]).
        scale_factor: Emoji width / face width.
        height_scale: Extra factor on the emoji height.

    Returns:
        (width, height) in pixels. Either may be 0 for tiny faces.
    """
    emoji_h, emoji_w = emoji_shape[:2]
    new_width = _round_px(bbox.width * scale_factor)
    new_height = _round_px(emoji_h * new_width / emoji_w * height_scale)
    return new_width, new_height


def compute_position(bbox: BoundingBox, width: int, height: int) -> Tuple[int, int]:
    """Top-left canvas position for a scaled emoji.

    Centered horizontally on the face; vertically the emoji's top third sits
    above the face center.
    """
    cx, cy = bbox.center
    return _round_px(cx - width / 2), _round_px(cy - height / 3)


def _asset_supported(image: np.ndarray) -> bool:
    if image.ndim == 2:
        return True
    return image.ndim == 3 and image.shape[2] in (1, 3, 4)


def plan_overlay(
    face_index: int,
    face: FaceObservation,
    lookup: AssetLookup,
    classifier: Callable[[FaceObservation], EmojiCategory],
    config: EmojifyConfig,
    canvas_shape: Optional[Tuple[int, ...]] = None,
) -> PlanResult:
    """Classify a face and pre-render its scaled emoji.

    Pure: touches no canvas, so faces can be planned concurrently. Errors
    raised by the classifier, the lookup or the resize skip the face with a
    notice instead of propagating.

    Args:
        face_index: Position of the face in detector order.
        face: Detector output for the face.
        lookup: EmojiCategory -> image or None.
        classifier: Face -> category.
        config: Scaling settings.
        canvas_shape: Shape of the target photo. When given, emoji more than
            MAX_CANVAS_RATIO times larger than the canvas are rejected.

    Returns:
        (placement, None) on success, (None, notice) when the face is
        skipped.
    """
    try:
        category = classifier(face)
    except Exception as e:
        logger.warning(f"face {face_index}: classifier failed: {e!r}")
        return None, Notice(
            NoticeKind.NO_EMOJI_FOR_FACE, face_index, f"Classifier failed: {e!r}"
        )

    try:
        emoji = lookup(category)
    except Exception as e:
        logger.warning(f"face {face_index}: emoji lookup for {category.name} failed: {e!r}")
        emoji = None
    if emoji is None:
        return None, Notice(
            NoticeKind.NO_EMOJI_FOR_FACE,
            face_index,
            f"No emoji registered for {category.name}",
        )
    emoji = np.asarray(emoji)
    if emoji.size == 0 or not _asset_supported(emoji):
        return None, Notice(
            NoticeKind.NO_EMOJI_FOR_FACE,
            face_index,
            f"Emoji for {category.name} has unusable shape {emoji.shape}",
        )

    if not face.bbox.is_valid:
        return None, Notice(
            NoticeKind.INVALID_FACE_GEOMETRY,
            face_index,
            f"Face box has non-positive size ({face.bbox.width}x{face.bbox.height})",
        )

    width, height = compute_emoji_size(
        face.bbox, emoji.shape, config.scale_factor, config.height_scale
    )
    if width <= 0 or height <= 0:
        return None, Notice(
            NoticeKind.INVALID_FACE_GEOMETRY,
            face_index,
            f"Face too small for an emoji ({width}x{height} px)",
        )
    if canvas_shape is not None:
        canvas_h, canvas_w = canvas_shape[:2]
        if width > MAX_CANVAS_RATIO * canvas_w or height > MAX_CANVAS_RATIO * canvas_h:
            return None, Notice(
                NoticeKind.INVALID_FACE_GEOMETRY,
                face_index,
                f"Emoji of {width}x{height} px is far larger than the "
                f"{canvas_w}x{canvas_h} photo",
            )

    try:
        scaled = cv2.resize(emoji, (width, height), interpolation=cv2.INTER_NEAREST)
    except (cv2.error, MemoryError) as e:
        logger.warning(f"face {face_index}: resize to {width}x{height} failed: {e}")
        return None, Notice(
            NoticeKind.INVALID_FACE_GEOMETRY,
            face_index,
            f"Cannot scale emoji to {width}x{height} px",
        )
    if scaled.ndim == 3 and scaled.shape[2] == 1:
        scaled = scaled[:, :, 0]
    x, y = compute_position(face.bbox, width, height)

    logger.debug(
        f"face {face_index}: {category.name} {width}x{height} at ({x}, {y})"
    )
    return OverlayPlacement(face_index, category, scaled, x, y), None


def _split_alpha(
    emoji: np.ndarray, canvas_channels: int
) -> Tuple[np.ndarray, Optional[np.ndarray]]:
    """Convert emoji pixels to the canvas color layout and split off alpha.

    Returns:
        (color, alpha) where color matches the canvas channel count (0 for a
        grayscale canvas) and alpha is a float32 (H, W, 1) in [0, 1] or None
        for opaque emoji.
    """
    alpha = None
    if emoji.ndim == 3 and emoji.shape[2] == 4:
        max_value = np.iinfo(emoji.dtype).max if np.issubdtype(emoji.dtype, np.integer) else 1.0
        alpha = emoji[:, :, 3:4].astype(np.float32) / max_value
        emoji = emoji[:, :, :3]

    if canvas_channels == 0:
        if emoji.ndim == 3:
            emoji = cv2.cvtColor(np.ascontiguousarray(emoji), cv2.COLOR_BGR2GRAY)
        if alpha is not None:
            alpha = alpha[:, :, 0]
        return emoji, alpha

    if emoji.ndim == 2:
        emoji = cv2.cvtColor(emoji, cv2.COLOR_GRAY2BGR)
    if canvas_channels == 4:
        emoji = np.concatenate(
            [emoji, np.full(emoji.shape[:2] + (1,), 255, dtype=emoji.dtype)], axis=2
        )
    return emoji, alpha


def draw_overlay(canvas: np.ndarray, placement: OverlayPlacement) -> np.ndarray:
    """Draw a planned overlay onto the canvas in place.

    Parts of the emoji outside the canvas are clipped. Emoji with an alpha
    channel are blended; others are copied opaquely. On a BGRA canvas the
    alpha channel keeps the more opaque of canvas and emoji.

    Args:
        canvas: Image (H, W), (H, W, 3) or (H, W, 4). Modified in place.
        placement: Scaled emoji and its top-left position.

    Returns:
        The same canvas array.
    """
    canvas_h, canvas_w = canvas.shape[:2]
    x, y = placement.x, placement.y
    h, w = placement.height, placement.width

    x1, y1 = max(x, 0), max(y, 0)
    x2, y2 = min(x + w, canvas_w), min(y + h, canvas_h)
    if x1 >= x2 or y1 >= y2:
        logger.debug(f"face {placement.face_index}: emoji entirely off canvas")
        return canvas

    canvas_channels = canvas.shape[2] if canvas.ndim == 3 else 0
    color, alpha = _split_alpha(placement.image, canvas_channels)

    crop = (slice(y1 - y, y2 - y), slice(x1 - x, x2 - x))
    fg = color[crop]
    roi = canvas[y1:y2, x1:x2]

    if alpha is None:
        roi[...] = fg.astype(canvas.dtype)
        return canvas

    a = alpha[crop]
    if canvas_channels == 4:
        blended = fg[:, :, :3].astype(np.float32) * a + roi[:, :, :3].astype(np.float32) * (1.0 - a)
        roi[:, :, :3] = np.rint(blended).astype(canvas.dtype)
        emoji_alpha = np.rint(a[:, :, 0] * 255).astype(canvas.dtype)
        roi[:, :, 3] = np.maximum(roi[:, :, 3], emoji_alpha)
    else:
        blended = fg.astype(np.float32) * a + roi.astype(np.float32) * (1.0 - a)
        roi[...] = np.rint(blended).astype(canvas.dtype)
    return canvas


def _plan_all(
    faces: Sequence[FaceObservation],
    lookup: AssetLookup,
    classifier: Callable[[FaceObservation], EmojiCategory],
    config: EmojifyConfig,
    canvas_shape: Tuple[int, ...],
) -> list[PlanResult]:
    def plan(indexed):
        index, face = indexed
        return plan_overlay(index, face, lookup, classifier, config, canvas_shape)

    workers = config.max_workers or 1
    if workers > 1 and len(faces) > 1:
        with ThreadPoolExecutor(
            max_workers=min(workers, len(faces)),
            thread_name_prefix="emoji_plan_",
        ) as executor:
            return list(executor.map(plan, enumerate(faces)))
    return [plan(item) for item in enumerate(faces)]


def composite(
    photo: np.ndarray,
    faces: Sequence[FaceObservation],
    assets: Union[AssetLookup, dict],
    config: Optional[EmojifyConfig] = None,
    classifier: Optional[Callable[[FaceObservation], EmojiCategory]] = None,
) -> CompositeResult:
    """Overlay an emoji on every face of a photo.

    The photo is never modified. With no faces the photo object itself is
    returned along with a NO_FACES_DETECTED notice; otherwise the result is
    a fresh buffer holding the photo plus every overlay that could be drawn.
    Faces that cannot be drawn are skipped with a notice.

    Args:
        photo: Decoded image (H, W), (H, W, 3) or (H, W, 4).
        faces: Face observations in detector order.
        assets: EmojiCategory -> image mapping or lookup callable.
        config: Scaling and threading settings. Defaults to EmojifyConfig().
        classifier: Face -> category. Defaults to an ExpressionClassifier
            built from ``config``.

    Returns:
        CompositeResult with the image, notices and drawn placements.

    Raises:
        InvalidImageError: If the photo is missing or empty.
    """
    validate_image(photo)
    config = config or EmojifyConfig()
    classifier = classifier or ExpressionClassifier(config)
    lookup = as_lookup(assets)

    if not faces:
        logger.debug("No faces to emojify")
        return CompositeResult(
            image=photo,
            notices=[Notice(NoticeKind.NO_FACES_DETECTED, None, "No faces detected")],
        )

    result = CompositeResult(image=photo.copy())
    for placement, notice in _plan_all(faces, lookup, classifier, config, photo.shape):
        if notice is not None:
            logger.debug(f"face {notice.face_index} skipped: {notice.message}")
            result.notices.append(notice)
            continue
        result.image = draw_overlay(result.image, placement)
        result.placements.append(placement)

    logger.debug(
        f"Composited {result.overlay_count}/{len(faces)} faces "
        f"({len(result.notices)} skipped)"
    )
    return result


class Compositor:
    """Composite pass bound to a config and an asset lookup.

    Args:
        assets: EmojiCategory -> image mapping or lookup callable.
        config: Settings. Defaults to EmojifyConfig().

    Example:
        >>> compositor = Compositor(EmojiAssets.from_directory("emoji"))
        >>> result = compositor.composite(photo, faces)
    """

    def __init__(
        self,
        assets: Union[AssetLookup, dict],
        config: Optional[EmojifyConfig] = None,
    ):
        self._config = config or EmojifyConfig()
        self._lookup = as_lookup(assets)
        self._classifier = ExpressionClassifier(self._config)

    @property
    def config(self) -> EmojifyConfig:
        return self._config

    def composite(
        self, photo: np.ndarray, faces: Sequence[FaceObservation]
    ) -> CompositeResult:
        return composite(
            photo,
            faces,
            self._lookup,
            config=self._config,
            classifier=self._classifier,
        )


__all__ = [
    "validate_image",
    "compute_emoji_size",
    "compute_position",
    "plan_overlay",
    "draw_overlay",
    "composite",
    "Compositor",
]
