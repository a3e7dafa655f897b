"""Configuration for emojify.

Example:
    >>> from emojify.config import EmojifyConfig
    >>> config = EmojifyConfig(scale_factor=0.8, double_scale_height=False)
    >>> config = EmojifyConfig.from_yaml("emojify.yaml")
"""

import math
import os
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional

from emojify.errors import ConfigError

SMILING_THRESHOLD = 0.15
EYE_OPEN_THRESHOLD = 0.5
SCALE_FACTOR = 0.9


@dataclass
class EmojifyConfig:
    """Settings for classification, compositing and detection.

    Attributes:
        smiling_threshold: Smiling when probability is strictly above this.
        eye_open_threshold: An eye is closed when its open probability is
            strictly below this.
        scale_factor: Emoji width as a fraction of the face box width.
        double_scale_height: Apply ``scale_factor`` a second time to the
            emoji height, as the original Emojify app does. Disable to keep
            the emoji's native aspect ratio exactly.
        max_workers: Thread count for pre-rendering overlays. ``None`` or 1
            renders sequentially.
        assets_dir: Directory holding the emoji PNGs.
        max_faces: Maximum faces the detector backend reports.
        min_detection_confidence: Detector confidence cut-off.

    Example:
        >>> config = EmojifyConfig.from_dict({"scale_factor": 1.0})
        >>> config.to_dict()["scale_factor"]
        1.0
    """

    smiling_threshold: float = SMILING_THRESHOLD
    eye_open_threshold: float = EYE_OPEN_THRESHOLD
    scale_factor: float = SCALE_FACTOR
    double_scale_height: bool = True
    max_workers: Optional[int] = None
    assets_dir: Optional[str] = None
    max_faces: int = 10
    min_detection_confidence: float = 0.5

    def __post_init__(self) -> None:
        self._check_types()
        for name in ("smiling_threshold", "eye_open_threshold", "min_detection_confidence"):
            value = getattr(self, name)
            if not (0.0 <= value <= 1.0):
                raise ConfigError(f"{name} must be in [0, 1], got {value}")
        if not math.isfinite(self.scale_factor) or self.scale_factor <= 0:
            raise ConfigError(f"scale_factor must be positive, got {self.scale_factor}")
        if self.max_workers is not None and self.max_workers < 1:
            raise ConfigError(f"max_workers must be >= 1, got {self.max_workers}")
        if self.max_faces < 1:
            raise ConfigError(f"max_faces must be >= 1, got {self.max_faces}")

    def _check_types(self) -> None:
        # bool is an int subclass; reject it for numeric fields
        for name in ("smiling_threshold", "eye_open_threshold", "scale_factor", "min_detection_confidence"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigError(f"{name} must be a number, got {value!r}")
        for name, optional in (("max_workers", True), ("max_faces", False)):
            value = getattr(self, name)
            if value is None and optional:
                continue
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigError(f"{name} must be an integer, got {value!r}")
        if not isinstance(self.double_scale_height, bool):
            raise ConfigError(f"double_scale_height must be true or false, got {self.double_scale_height!r}")
        if self.assets_dir is not None and not isinstance(self.assets_dir, (str, os.PathLike)):
            raise ConfigError(f"assets_dir must be a path, got {self.assets_dir!r}")

    @property
    def height_scale(self) -> float:
        """Extra factor applied to the emoji height."""
        return self.scale_factor if self.double_scale_height else 1.0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EmojifyConfig":
        """Create EmojifyConfig from a dictionary (e.g., loaded from YAML).

        Unknown keys are rejected so typos do not pass silently.

        Args:
            data: Dictionary with configuration data.

        Returns:
            EmojifyConfig instance.

        Raises:
            ConfigError: On unknown keys or invalid values.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")
        return cls(**data)

    @classmethod
    def from_yaml(cls, yaml_path: str) -> "EmojifyConfig":
        """Load EmojifyConfig from a YAML file.

        Args:
            yaml_path: Path to the YAML configuration file.

        Returns:
            EmojifyConfig instance.

        Raises:
            ImportError: If PyYAML is not installed.
            FileNotFoundError: If the file doesn't exist.
        """
        try:
            import yaml
        except ImportError:
            raise ImportError(
                "PyYAML is required for YAML config support. "
                "Install it with: pip install pyyaml"
            )

        with open(yaml_path) as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ConfigError(f"Config file must contain a mapping: {yaml_path}")

        return cls.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {f.name: getattr(self, f.name) for f in fields(self)}


__all__ = [
    "EmojifyConfig",
    "SMILING_THRESHOLD",
    "EYE_OPEN_THRESHOLD",
    "SCALE_FACTOR",
]
