from __future__ import annotations

from datetime import datetime
from pathlib import Path

from PIL import Image

from core.models import PREVIEW_LAYOUT, PhotoItem, TypographySettings
from infrastructure.export_service import ExportService, export_filename, flatten_to_rgb
from infrastructure.image_service import ImageService
from infrastructure.polaroid_renderer import PolaroidRenderer


def _service() -> ExportService:
    renderer = PolaroidRenderer()
    return ExportService(renderer, ImageService(renderer), layout=PREVIEW_LAYOUT)


def test_export_filename_uses_date_and_position() -> None:
    assert export_filename(datetime(2025, 9, 8, 10, 0), 3) == "polaroid_2025-09-08_3.jpg"


def test_export_filename_without_date_uses_today() -> None:
    today = datetime.now().strftime("%Y-%m-%d")
    assert export_filename(None, 1) == f"polaroid_{today}_1.jpg"


def test_flatten_puts_transparency_on_white() -> None:
    card = Image.new("RGBA", (4, 4), (0, 0, 0, 0))
    flat = flatten_to_rgb(card)
    assert flat.mode == "RGB"
    assert flat.getpixel((0, 0)) == (255, 255, 255)


def test_export_writes_one_jpeg_per_item(photo_file, tmp_path) -> None:
    items = [
        PhotoItem("a", str(photo_file("a.jpg")), datetime(2025, 9, 8), line1="08 Sep 2025"),
        PhotoItem("b", str(photo_file("b.jpg")), creation_date=datetime(2025, 9, 9), line2="Hi"),
    ]
    out_dir = tmp_path / "out"

    result = _service().export(items, out_dir, TypographySettings())

    assert result.failed == []
    names = [Path(p).name for p in result.success_paths]
    assert names == ["polaroid_2025-09-08_1.jpg", "polaroid_2025-09-09_2.jpg"]
    with Image.open(result.success_paths[0]) as img:
        assert img.format == "JPEG"
        assert img.mode == "RGB"
        assert img.width == int(PREVIEW_LAYOUT.export_width)


def test_failed_item_does_not_stop_batch(photo_file, tmp_path) -> None:
    items = [
        PhotoItem("gone", str(tmp_path / "missing.jpg"), creation_date=datetime(2025, 1, 1)),
        PhotoItem("ok", str(photo_file("ok.jpg")), creation_date=datetime(2025, 1, 2)),
    ]

    result = _service().export(items, tmp_path / "out", TypographySettings())

    assert len(result.failed) == 1
    assert result.failed[0][0] == "gone"
    assert "load" in result.failed[0][1]
    assert [Path(p).name for p in result.success_paths] == ["polaroid_2025-01-02_2.jpg"]
