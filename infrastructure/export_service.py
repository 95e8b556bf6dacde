"""Export of rendered polaroid cards to JPEG files.

Renders each selected photo at full resolution and writes one file per item,
named by capture date and batch position. A failing item is logged and
reported, and the batch continues with the remaining photos.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
import os
from pathlib import Path

from loguru import logger
from PIL import Image

from core.models import EXPORT_LAYOUT, LayoutParams, PhotoItem, RenderRequest, TypographySettings
from core.services.interfaces import ExportResult, ImageLoader, Renderer

JPEG_QUALITY = 90
FILENAME_DATE_FMT = "%Y-%m-%d"


def export_filename(creation_date: datetime | None, position: int) -> str:
    """Return "polaroid_{yyyy-mm-dd}_{position}.jpg"; undated photos use today."""
    date_str = (creation_date or datetime.now()).strftime(FILENAME_DATE_FMT)
    return f"polaroid_{date_str}_{position}.jpg"


def flatten_to_rgb(image: Image.Image, background: tuple[int, int, int] = (255, 255, 255)):
    """Composite an RGBA card onto an opaque background for JPEG encoding."""
    if image.mode != "RGBA":
        return image.convert("RGB")
    base = Image.new("RGB", image.size, background)
    base.paste(image, mask=image.getchannel("A"))
    return base


class ExportService:
    """Coordinates full-resolution renders and JPEG writes."""

    def __init__(
        self,
        renderer: Renderer,
        loader: ImageLoader,
        layout: LayoutParams = EXPORT_LAYOUT,
        quality: int = JPEG_QUALITY,
    ) -> None:
        self._renderer = renderer
        self._loader = loader
        self._layout = layout
        self._quality = int(quality)

    def export(
        self,
        items: Iterable[PhotoItem],
        out_dir: str | Path,
        typography: TypographySettings,
    ) -> ExportResult:
        """Render and write every item in `items` into `out_dir`."""
        out_path = Path(out_dir)
        out_path.mkdir(parents=True, exist_ok=True)
        result = ExportResult()

        for index, item in enumerate(items):
            reason = self._export_one(item, index + 1, out_path, typography, result)
            if reason is not None:
                logger.error("Export failed for item {} ({}): {}", index, item.photo_id, reason)
                result.failed.append((item.photo_id, reason))

        logger.info(
            "Export finished: {} written, {} failed, into {}",
            len(result.success_paths),
            len(result.failed),
            out_path,
        )
        return result

    def _export_one(
        self,
        item: PhotoItem,
        position: int,
        out_path: Path,
        typography: TypographySettings,
        result: ExportResult,
    ) -> str | None:
        """Export a single item; return a failure reason or None on success."""
        source = self._loader.load_source(item.file_path, None)
        if source is None:
            return "Failed to load image"

        request = RenderRequest.from_settings(
            source, item.line1, item.line2, self._layout, typography
        )
        rendered = self._renderer.render(request)
        if not rendered.ok:
            failure = rendered.failure
            return f"Failed to render polaroid: {failure.reason if failure else 'no image'}"

        file_path = os.path.normpath(str(out_path / export_filename(item.creation_date, position)))
        try:
            flatten_to_rgb(rendered.image).save(file_path, "JPEG", quality=self._quality)
        except (OSError, ValueError) as ex:
            return f"Failed to write {file_path}: {ex}"

        logger.info("Exported: {}", Path(file_path).name)
        result.success_paths.append(file_path)
        return None
