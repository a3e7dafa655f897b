"""emojify - Overlay expression-matched emoji on detected faces.

Example:
    >>> from emojify import EmojiAssets, MediaPipeFaceBackend, emojify
    >>> detector = MediaPipeFaceBackend()
    >>> detector.initialize()
    >>> result = emojify(photo, detector, EmojiAssets.from_directory("emoji"))
"""

from emojify.types import (
    BoundingBox,
    CompositeResult,
    EmojiCategory,
    FaceObservation,
    Notice,
    NoticeKind,
    OverlayPlacement,
)
from emojify.errors import (
    AssetLoadError,
    ConfigError,
    DetectorUnavailableError,
    EmojifyError,
    InvalidImageError,
)
from emojify.config import EmojifyConfig
from emojify.classifier import ExpressionClassifier, classify
from emojify.assets import DEFAULT_ASSET_FILES, EmojiAssets
from emojify.compositor import Compositor, composite
from emojify.backends import FaceDetector, MediaPipeFaceBackend, StaticFaceDetector
from emojify.pipeline import emojify, emojify_file

__version__ = "0.1.0"

__all__ = [
    "BoundingBox",
    "CompositeResult",
    "EmojiCategory",
    "FaceObservation",
    "Notice",
    "NoticeKind",
    "OverlayPlacement",
    "AssetLoadError",
    "ConfigError",
    "DetectorUnavailableError",
    "EmojifyError",
    "InvalidImageError",
    "EmojifyConfig",
    "ExpressionClassifier",
    "classify",
    "DEFAULT_ASSET_FILES",
    "EmojiAssets",
    "Compositor",
    "composite",
    "FaceDetector",
    "MediaPipeFaceBackend",
    "StaticFaceDetector",
    "emojify",
    "emojify_file",
]
