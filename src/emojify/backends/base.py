"""Backend protocol definitions for face detection."""

import json
from pathlib import Path
from typing import Any, Dict, List, Protocol, Sequence, Union, runtime_checkable

import numpy as np

from emojify.types import BoundingBox, FaceObservation


@runtime_checkable
class FaceDetector(Protocol):
    """Protocol for face detection backends.

    A backend locates faces and reports smiling / eye-open probabilities.
    Implementations should be swappable without changing compositor logic.
    A detector that finds nothing returns an empty list; that is a normal
    outcome, not an error.
    """

    def initialize(self) -> None:
        """Initialize the backend and load models."""
        ...

    def detect(self, image: np.ndarray) -> List[FaceObservation]:
        """Detect faces in an image.

        Args:
            image: BGR image as numpy array (H, W, 3).

        Returns:
            Face observations in detection order.
        """
        ...

    def cleanup(self) -> None:
        """Release resources and unload models."""
        ...


class StaticFaceDetector:
    """Detector that always reports the same faces.

    Useful for synthetic fixtures and for replaying detections produced
    elsewhere.

    Args:
        faces: Observations returned by every detect() call.
    """

    def __init__(self, faces: Sequence[FaceObservation] = ()):
        self._faces = list(faces)
        self.calls = 0

    def initialize(self) -> None:
        pass

    def detect(self, image: np.ndarray) -> List[FaceObservation]:
        self.calls += 1
        return list(self._faces)

    def cleanup(self) -> None:
        pass

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "StaticFaceDetector":
        """Load faces from a JSON list of records.

        Each record has ``x``, ``y``, ``width``, ``height``, ``smiling``,
        ``left_eye_open`` and ``right_eye_open``.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If a record is malformed.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Faces file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            records = json.load(f)

        if not isinstance(records, list):
            raise ValueError(f"Faces file must contain a JSON list: {path}")
        return cls([_face_from_dict(r) for r in records])


def _face_from_dict(record: Dict[str, Any]) -> FaceObservation:
    try:
        return FaceObservation(
            bbox=BoundingBox(
                x=float(record["x"]),
                y=float(record["y"]),
                width=float(record["width"]),
                height=float(record["height"]),
            ),
            smiling_probability=float(record["smiling"]),
            left_eye_open_probability=float(record["left_eye_open"]),
            right_eye_open_probability=float(record["right_eye_open"]),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise ValueError(f"Malformed face record {record!r}: {e}") from e


__all__ = ["FaceDetector", "StaticFaceDetector"]
