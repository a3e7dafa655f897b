"""MediaPipe Face Landmarker backend.

Face blendshapes stand in for classification probabilities:

- smiling = mean(mouthSmileLeft, mouthSmileRight)
- left eye open = 1 - eyeBlinkLeft
- right eye open = 1 - eyeBlinkRight

The bounding box is the pixel extent of the face mesh landmarks.
"""

from pathlib import Path
from typing import Dict, List, Optional
import logging
import urllib.request

import numpy as np

from emojify.errors import DetectorUnavailableError
from emojify.types import BoundingBox, FaceObservation

logger = logging.getLogger(__name__)

FACE_LANDMARKER_MODEL_URL = (
    "https://storage.googleapis.com/mediapipe-models/face_landmarker/"
    "face_landmarker/float16/1/face_landmarker.task"
)


def _get_model_path(cache_dir: Optional[Path] = None) -> Path:
    """Get path to face landmarker model, downloading if necessary."""
    cache_dir = cache_dir or Path.home() / ".cache" / "emojify" / "models"
    cache_dir.mkdir(parents=True, exist_ok=True)

    model_path = cache_dir / "face_landmarker.task"

    if not model_path.exists():
        logger.info(f"Downloading face landmarker model to {model_path}...")
        try:
            urllib.request.urlretrieve(FACE_LANDMARKER_MODEL_URL, model_path)
            logger.info("Download complete.")
        except Exception as e:
            raise DetectorUnavailableError(
                "mediapipe",
                f"failed to download model: {e}. "
                f"Download {FACE_LANDMARKER_MODEL_URL} manually and save it to {model_path}",
            ) from e

    return model_path


def blendshapes_to_probabilities(scores: Dict[str, float]) -> tuple[float, float, float]:
    """Map blendshape scores to (smiling, left_open, right_open).

    Missing blendshapes count as 0 activation.
    """
    smiling = (scores.get("mouthSmileLeft", 0.0) + scores.get("mouthSmileRight", 0.0)) / 2
    left_open = 1.0 - scores.get("eyeBlinkLeft", 0.0)
    right_open = 1.0 - scores.get("eyeBlinkRight", 0.0)
    return smiling, left_open, right_open


def landmarks_to_bbox(points: np.ndarray, width: int, height: int) -> BoundingBox:
    """Pixel bounding box around normalized (x, y) landmarks, clamped to the image."""
    xs = np.clip(points[:, 0], 0.0, 1.0) * width
    ys = np.clip(points[:, 1], 0.0, 1.0) * height
    x1, y1 = float(xs.min()), float(ys.min())
    return BoundingBox(x=x1, y=y1, width=float(xs.max()) - x1, height=float(ys.max()) - y1)


class MediaPipeFaceBackend:
    """Face detector using the MediaPipe Tasks FaceLandmarker.

    Args:
        max_faces: Maximum number of faces to detect (default: 10).
        min_detection_confidence: Minimum confidence for detection (default: 0.5).
        model_dir: Where to cache the model (default: ~/.cache/emojify/models).

    Example:
        >>> backend = MediaPipeFaceBackend()
        >>> backend.initialize()
        >>> faces = backend.detect(image)
        >>> backend.cleanup()
    """

    def __init__(
        self,
        max_faces: int = 10,
        min_detection_confidence: float = 0.5,
        model_dir: Optional[Path] = None,
    ):
        self._max_faces = max_faces
        self._min_detection_confidence = min_detection_confidence
        self._model_dir = model_dir
        self._landmarker: Optional[object] = None
        self._initialized = False

    def initialize(self) -> None:
        """Create the FaceLandmarker, downloading the model on first use."""
        if self._initialized:
            return

        try:
            from mediapipe.tasks import python
            from mediapipe.tasks.python import vision
        except ImportError as e:
            raise DetectorUnavailableError(
                "mediapipe",
                "MediaPipe is not installed. Install it with: pip install emojify[mediapipe]",
            ) from e

        model_path = _get_model_path(self._model_dir)

        base_options = python.BaseOptions(model_asset_path=str(model_path))
        options = vision.FaceLandmarkerOptions(
            base_options=base_options,
            running_mode=vision.RunningMode.IMAGE,
            num_faces=self._max_faces,
            min_face_detection_confidence=self._min_detection_confidence,
            min_face_presence_confidence=self._min_detection_confidence,
            output_face_blendshapes=True,
        )

        self._landmarker = vision.FaceLandmarker.create_from_options(options)
        self._initialized = True
        logger.info("MediaPipe face landmarker initialized")

    def detect(self, image: np.ndarray) -> List[FaceObservation]:
        """Detect faces and their expression probabilities.

        Args:
            image: BGR, BGRA or grayscale image as numpy array.

        Returns:
            One FaceObservation per detected face.
        """
        if not self._initialized or self._landmarker is None:
            raise RuntimeError("Backend not initialized. Call initialize() first.")

        import cv2
        import mediapipe as mp

        if image.ndim == 2:
            image_rgb = cv2.cvtColor(image, cv2.COLOR_GRAY2RGB)
        elif image.shape[2] == 4:
            image_rgb = cv2.cvtColor(image, cv2.COLOR_BGRA2RGB)
        else:
            image_rgb = cv2.cvtColor(image, cv2.COLOR_BGR2RGB)

        mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=image_rgb)
        result = self._landmarker.detect(mp_image)

        height, width = image.shape[:2]
        faces = []
        for idx, face_lms in enumerate(result.face_landmarks or []):
            points = np.array([[lm.x, lm.y] for lm in face_lms], dtype=np.float32)
            scores = {}
            if result.face_blendshapes and idx < len(result.face_blendshapes):
                scores = {c.category_name: c.score for c in result.face_blendshapes[idx]}

            smiling, left_open, right_open = blendshapes_to_probabilities(scores)
            faces.append(
                FaceObservation(
                    bbox=landmarks_to_bbox(points, width, height),
                    smiling_probability=smiling,
                    left_eye_open_probability=left_open,
                    right_eye_open_probability=right_open,
                )
            )

        logger.debug(f"MediaPipe detected {len(faces)} faces")
        return faces

    def cleanup(self) -> None:
        """Release MediaPipe resources."""
        if self._landmarker is not None:
            self._landmarker.close()
            self._landmarker = None
        self._initialized = False
        logger.info("MediaPipe face landmarker cleaned up")


__all__ = [
    "MediaPipeFaceBackend",
    "blendshapes_to_probabilities",
    "landmarks_to_bbox",
    "FACE_LANDMARKER_MODEL_URL",
]
