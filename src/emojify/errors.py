"""Exceptions raised by emojify.

Per-face problems never raise; they are reported as
:class:`emojify.types.Notice` entries. Only conditions that leave nothing
to operate on are exceptions.
"""


class EmojifyError(Exception):
    """Base class for emojify errors."""


class InvalidImageError(EmojifyError):
    """Raised when the input photo is missing, empty or undecodable."""


class AssetLoadError(EmojifyError):
    """Raised when emoji assets cannot be loaded in strict mode."""


class ConfigError(EmojifyError):
    """Raised for out-of-range or malformed configuration values."""


class DetectorUnavailableError(EmojifyError):
    """Raised when a face detection backend cannot be initialized.

    Attributes:
        backend: Name of the backend that failed.
    """

    def __init__(self, backend: str, reason: str):
        self.backend = backend
        super().__init__(f"Face detector '{backend}' unavailable: {reason}")


__all__ = [
    "EmojifyError",
    "InvalidImageError",
    "AssetLoadError",
    "ConfigError",
    "DetectorUnavailableError",
]
