"""Folder-backed photo source.

Scans a directory for still images and builds `PhotoItem`s carrying the
capture date and GPS position needed for default captions. Items are ordered
newest first, matching how photo libraries present albums.
"""

from __future__ import annotations

from collections.abc import Iterator
from datetime import datetime
from pathlib import Path

from loguru import logger

from core.models import PhotoItem
from infrastructure.image_service import PIL_HEIF_AVAILABLE
from infrastructure.utils import get_filesystem_creation_datetime, read_photo_metadata

IMAGE_EXTENSIONS: frozenset[str] = frozenset({".jpg", ".jpeg", ".png", ".tif", ".tiff", ".webp"})
HEIF_EXTENSIONS: frozenset[str] = frozenset({".heic", ".heif"})


def supported_extensions() -> frozenset[str]:
    """Extensions the current Pillow build can decode."""
    if PIL_HEIF_AVAILABLE:
        return IMAGE_EXTENSIONS | HEIF_EXTENSIONS
    return IMAGE_EXTENSIONS


class FolderPhotoSource:
    """Loads `PhotoItem`s from the image files of a folder."""

    def __init__(self, recursive: bool = False) -> None:
        self._recursive = recursive

    def iter_paths(self, folder: str | Path) -> Iterator[Path]:
        """Yield supported image paths under `folder` in name order."""
        root = Path(folder)
        if not root.is_dir():
            logger.warning("Photo folder does not exist: {}", root)
            return
        exts = supported_extensions()
        pattern = "**/*" if self._recursive else "*"
        for path in sorted(root.glob(pattern)):
            if path.is_file() and path.suffix.lower() in exts and not path.name.startswith("."):
                yield path

    def load_item(self, path: str | Path) -> PhotoItem:
        """Build a `PhotoItem` for a single file; identity is the resolved path."""
        resolved = str(Path(path).resolve())
        shot_date, coordinate, (width, height) = read_photo_metadata(resolved)
        creation_date = shot_date or get_filesystem_creation_datetime(resolved)
        return PhotoItem(
            photo_id=resolved,
            file_path=resolved,
            creation_date=creation_date,
            coordinate=coordinate,
            pixel_width=width or None,
            pixel_height=height or None,
        )

    def load(self, folder: str | Path) -> list[PhotoItem]:
        """Return items for every supported image in `folder`, newest first."""
        items = [self.load_item(p) for p in self.iter_paths(folder)]
        items.sort(key=lambda it: it.creation_date or datetime.min, reverse=True)
        logger.info("Loaded {} photos from {}", len(items), folder)
        return items
