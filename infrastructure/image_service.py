"""Image loading, preview rendering, and caching utilities.

Decodes source photos with Pillow (optional Pillow-HEIF support for HEIC),
renders polaroid previews through the compositor, and caches both in memory.
Previews are keyed by `compute_preview_key`, so a preview is regenerated
exactly when the photo, its caption text, or the typography changes.
"""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass
import hashlib
import os
from threading import Lock
from typing import Any

from loguru import logger
from PIL import Image, ImageOps
from PySide6.QtGui import QColor, QImage

from core.models import (
    PREVIEW_FONT_SCALE,
    PREVIEW_LAYOUT,
    LayoutParams,
    PhotoItem,
    RenderFailure,
    RenderFailureKind,
    RenderRequest,
    RenderResult,
    TypographySettings,
)
from core.services.interfaces import Renderer
from core.services.preview_key import compute_preview_key

try:  # pragma: no cover - optional dependency
    from pillow_heif import register_heif_opener  # type: ignore

    register_heif_opener()
    PIL_HEIF_AVAILABLE = True
except ImportError:  # pragma: no cover - optional dependency
    PIL_HEIF_AVAILABLE = False

PLACEHOLDER_SIDE = 64
PLACEHOLDER_GREY = 220


def _compute_cache_key(path: str, size_key: int) -> str:
    """Compute a stable cache key from path, mtime, size, and requested side."""
    try:
        st = os.stat(path)
        sig = f"{path}|{int(st.st_mtime_ns)}|{int(st.st_size)}|{int(size_key)}".encode(
            "utf-8", errors="ignore"
        )
    except OSError:
        sig = f"{path}|0|0|{int(size_key)}".encode("utf-8", errors="ignore")
    return hashlib.sha1(sig).hexdigest()


@dataclass
class _MemCacheItem:
    key: str
    image: Any


class _LRUCache:
    def __init__(self, capacity: int) -> None:
        self._cap = max(1, int(capacity or 1))
        self._data: OrderedDict[str, _MemCacheItem] = OrderedDict()
        self._lock = Lock()

    def __len__(self) -> int:
        return len(self._data)

    def get(self, key: str) -> Any | None:
        """Return cached image for key, moving it to the MRU position."""
        with self._lock:
            item = self._data.get(key)
            if not item:
                return None
            self._data.move_to_end(key)
            return item.image

    def put(self, key: str, image: Any) -> None:
        """Insert or update `key` with `image`, evicting LRU when over capacity."""
        with self._lock:
            if key in self._data:
                self._data.move_to_end(key)
            self._data[key] = _MemCacheItem(key, image)
            while len(self._data) > self._cap:
                self._data.popitem(last=False)

    def clear(self) -> None:
        """Remove all entries."""
        with self._lock:
            self._data.clear()


class ImageService:
    """High-level image service with source/preview memory caches."""

    def __init__(
        self,
        renderer: Renderer,
        settings: object | None = None,
        preview_layout: LayoutParams = PREVIEW_LAYOUT,
        preview_font_scale: float = PREVIEW_FONT_SCALE,
    ) -> None:
        """Initialize caches and preview parameters from settings."""
        self._renderer = renderer
        self._preview_layout = preview_layout
        self._preview_font_scale = preview_font_scale
        self._source_cap = 16
        self._preview_cap = 64
        self._preview_source_side = 2048
        if settings is not None:
            self._source_cap = self._int_setting(settings, "cache.source_images", 16)
            self._preview_cap = self._int_setting(settings, "cache.previews", 64)
            self._preview_source_side = self._int_setting(
                settings, "cache.preview_source_side", 2048
            )
        self._source_cache = _LRUCache(self._source_cap)
        self._preview_cache = _LRUCache(self._preview_cap)
        self._pillow_heif_available = bool(PIL_HEIF_AVAILABLE)

    @staticmethod
    def _int_setting(settings: Any, key: str, default: int) -> int:
        try:
            return int(settings.get(key, default) or default)
        except (ValueError, TypeError):
            return default

    # Public API
    def load_source(self, path: str, max_side: int | None = None) -> Image.Image | None:
        """Return a decoded, orientation-corrected image bounded by `max_side`.

        Full resolution when `max_side` is None. Returns None if decoding fails.
        """
        key = _compute_cache_key(path, max_side or 0)
        cached = self._source_cache.get(key)
        if cached is not None:
            return cached

        img = self._load_via_pillow(path, max_side)
        if img is not None:
            self._source_cache.put(key, img)
        return img

    def get_preview(self, item: PhotoItem, typography: TypographySettings) -> RenderResult:
        """Return the preview for `item`, reusing the cached bitmap when its key matches."""
        key = self.preview_key(item, typography)
        cached = self._preview_cache.get(key)
        if cached is not None:
            return RenderResult(image=cached)

        source = self.load_source(item.file_path, self._preview_source_side)
        if source is None:
            logger.warning("Preview skipped, cannot decode {}", item.file_path)
            return RenderResult(
                failure=RenderFailure(
                    RenderFailureKind.INVALID_SOURCE, f"Cannot decode {item.file_path}"
                )
            )

        request = RenderRequest.from_settings(
            source,
            item.line1,
            item.line2,
            self._preview_layout,
            typography.scaled(self._preview_font_scale),
        )
        result = self._renderer.render(request)
        if result.ok:
            self._preview_cache.put(key, result.image)
        return result

    def preview_key(self, item: PhotoItem, typography: TypographySettings) -> str:
        """Fingerprint of everything that affects `item`'s preview pixels."""
        return compute_preview_key(item.photo_id, item.line1, item.line2, typography)

    def clear_previews(self) -> None:
        """Forget every cached preview bitmap."""
        self._preview_cache.clear()

    # Internal helpers
    def _load_via_pillow(self, path: str, max_side: int | None) -> Image.Image | None:
        """Load image with Pillow (HEIF supported if pillow-heif is registered)."""
        try:
            with Image.open(path) as im:
                try:
                    im = ImageOps.exif_transpose(im)
                except (OSError, ValueError, AttributeError):
                    pass
                im.load()
                img = im.convert("RGBA") if im.mode in ("RGBA", "LA", "P") else im.convert("RGB")
                if max_side and max_side > 0:
                    img.thumbnail((max_side, max_side), Image.Resampling.LANCZOS)
                return img
        except (OSError, ValueError, Image.DecompressionBombError) as ex:
            logger.debug("Pillow load failed for {}: {}", path, ex)
            return None


def pil_to_qimage(pil_img: Any) -> QImage | None:
    """Convert a Pillow image to `QImage` and detach from the source buffer."""
    try:
        mode = pil_img.mode
        if mode not in ("RGBA", "RGB"):
            pil_img = pil_img.convert("RGBA")
            mode = pil_img.mode
        if mode == "RGB":
            data = pil_img.tobytes("raw", "RGB")
            qimg = QImage(
                data, pil_img.width, pil_img.height, pil_img.width * 3, QImage.Format_RGB888
            )
        else:
            data = pil_img.tobytes("raw", "RGBA")
            qimg = QImage(
                data, pil_img.width, pil_img.height, pil_img.width * 4, QImage.Format_RGBA8888
            )
        if qimg is None or qimg.isNull():
            return None
        return qimg.copy()
    except (ValueError, TypeError, AttributeError) as ex:
        logger.debug("PIL->QImage convert failed: {}", ex)
        return None


def placeholder_qimage() -> QImage:
    """Grey tile shown in a preview slot whose render failed."""
    img = QImage(PLACEHOLDER_SIDE, PLACEHOLDER_SIDE, QImage.Format_ARGB32)
    img.fill(QColor(PLACEHOLDER_GREY, PLACEHOLDER_GREY, PLACEHOLDER_GREY))
    return img
