"""Emoji asset lookup.

Assets are decoded once and handed to the compositor as a
category -> image lookup, so the compositor never knows where they
came from.
"""

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Callable, Dict, Iterator, List, Optional, Union

import cv2
import numpy as np

from emojify.errors import AssetLoadError
from emojify.types import EmojiCategory

logger = logging.getLogger(__name__)

AssetLookup = Callable[[EmojiCategory], Optional[np.ndarray]]

DEFAULT_ASSET_FILES: Dict[EmojiCategory, str] = {
    EmojiCategory.SMILE: "smile.png",
    EmojiCategory.FROWN: "frown.png",
    EmojiCategory.LEFT_WINK: "leftwink.png",
    EmojiCategory.RIGHT_WINK: "rightwink.png",
    EmojiCategory.LEFT_WINK_FROWN: "leftwinkfrown.png",
    EmojiCategory.RIGHT_WINK_FROWN: "rightwinkfrown.png",
    EmojiCategory.CLOSED_EYE_SMILE: "closed_smile.png",
    EmojiCategory.CLOSED_EYE_FROWN: "closed_frown.png",
}


class EmojiAssets(Mapping):
    """Read-only mapping of EmojiCategory to decoded emoji image.

    Calling the instance with a category returns the image, or None when
    no asset is registered.

    Args:
        images: Category -> image (H, W, 3) BGR or (H, W, 4) BGRA.

    Example:
        >>> assets = EmojiAssets.from_directory("assets/emoji")
        >>> smile = assets(EmojiCategory.SMILE)
    """

    def __init__(self, images: Optional[Dict[EmojiCategory, np.ndarray]] = None):
        self._images: Dict[EmojiCategory, np.ndarray] = {}
        for category, image in (images or {}).items():
            if not isinstance(category, EmojiCategory):
                raise TypeError(f"Asset key must be EmojiCategory, got {category!r}")
            self._images[category] = np.asarray(image)

    def __getitem__(self, category: EmojiCategory) -> np.ndarray:
        return self._images[category]

    def __iter__(self) -> Iterator[EmojiCategory]:
        return iter(self._images)

    def __len__(self) -> int:
        return len(self._images)

    def __call__(self, category: EmojiCategory) -> Optional[np.ndarray]:
        return self._images.get(category)

    @property
    def missing(self) -> List[EmojiCategory]:
        """Categories with no registered asset."""
        return [c for c in EmojiCategory if c not in self._images]

    @classmethod
    def from_directory(
        cls,
        directory: Union[str, Path],
        files: Optional[Dict[EmojiCategory, str]] = None,
        strict: bool = False,
    ) -> "EmojiAssets":
        """Load emoji PNGs from a directory.

        Images are read with their alpha channel. Files that are missing or
        cannot be decoded are skipped with a warning, leaving the category
        unregistered.

        Args:
            directory: Directory containing the emoji files.
            files: Category -> file name. Defaults to DEFAULT_ASSET_FILES.
            strict: Raise AssetLoadError instead of skipping.

        Returns:
            EmojiAssets instance.

        Raises:
            AssetLoadError: If the directory doesn't exist, or in strict mode
                when any file is missing or undecodable.
        """
        directory = Path(directory)
        if not directory.is_dir():
            raise AssetLoadError(f"Asset directory not found: {directory}")

        images = {}
        for category, filename in (files or DEFAULT_ASSET_FILES).items():
            path = directory / filename
            image = cv2.imread(str(path), cv2.IMREAD_UNCHANGED) if path.exists() else None
            if image is None or image.size == 0:
                if strict:
                    raise AssetLoadError(f"Cannot load emoji for {category.name}: {path}")
                logger.warning(f"Emoji asset for {category.name} not loaded: {path}")
                continue
            images[category] = image

        logger.info(f"Loaded {len(images)}/{len(EmojiCategory)} emoji assets from {directory}")
        return cls(images)


def as_lookup(source: Union[AssetLookup, Mapping]) -> AssetLookup:
    """Normalize a mapping or callable into an asset lookup function.

    Args:
        source: EmojiCategory -> image mapping, or a callable returning an
            image or None.

    Returns:
        Callable that returns None for unregistered categories.
    """
    if isinstance(source, EmojiAssets):
        return source
    if isinstance(source, Mapping):
        return source.get
    if callable(source):
        return source
    raise TypeError(f"Asset source must be a mapping or callable, got {type(source).__name__}")


__all__ = ["AssetLookup", "DEFAULT_ASSET_FILES", "EmojiAssets", "as_lookup"]
