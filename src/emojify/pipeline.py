"""End-to-end emojify: detect faces, pick emoji, composite.

The caller owns the image lifecycle and the detector. Detector errors are
not caught here; deciding on retries or fallbacks is the caller's job.

Example:
    >>> from emojify import emojify, EmojiAssets, MediaPipeFaceBackend
    >>> detector = MediaPipeFaceBackend()
    >>> detector.initialize()
    >>> result = emojify(photo, detector, EmojiAssets.from_directory("emoji"))
    >>> for notice in result.notices:
    ...     print(notice.message)
"""

import logging
from pathlib import Path
from typing import Optional, Union

import cv2
import numpy as np

from emojify.assets import AssetLookup
from emojify.backends.base import FaceDetector
from emojify.compositor import composite, validate_image
from emojify.config import EmojifyConfig
from emojify.errors import InvalidImageError
from emojify.types import CompositeResult

logger = logging.getLogger(__name__)


def emojify(
    photo: np.ndarray,
    detector: FaceDetector,
    assets: Union[AssetLookup, dict],
    config: Optional[EmojifyConfig] = None,
) -> CompositeResult:
    """Detect faces in a photo and overlay an emoji on each.

    Args:
        photo: Decoded image (BGR, BGRA or grayscale).
        detector: Initialized face detector.
        assets: EmojiCategory -> image mapping or lookup callable.
        config: Settings. Defaults to EmojifyConfig().

    Returns:
        CompositeResult with the final image and notices.

    Raises:
        InvalidImageError: If the photo is missing or empty.
    """
    validate_image(photo)

    faces = detector.detect(photo)
    logger.debug(f"emojify: number of faces = {len(faces)}")

    return composite(photo, faces, assets, config=config)


def emojify_file(
    input_path: Union[str, Path],
    output_path: Union[str, Path],
    detector: FaceDetector,
    assets: Union[AssetLookup, dict],
    config: Optional[EmojifyConfig] = None,
) -> CompositeResult:
    """Emojify an image file and write the result.

    The output format follows the output file extension.

    Raises:
        InvalidImageError: If the input cannot be decoded or the output
            cannot be written.
    """
    input_path = Path(input_path)
    output_path = Path(output_path)

    photo = cv2.imread(str(input_path), cv2.IMREAD_UNCHANGED)
    if photo is None:
        raise InvalidImageError(f"Cannot decode image: {input_path}")

    result = emojify(photo, detector, assets, config=config)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    if not cv2.imwrite(str(output_path), result.image):
        raise InvalidImageError(f"Cannot write image: {output_path}")

    logger.info(
        f"Wrote {output_path} ({result.overlay_count} emoji, {len(result.notices)} notices)"
    )
    return result


__all__ = ["emojify", "emojify_file"]
