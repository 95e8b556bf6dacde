from __future__ import annotations

import pytest

from core.models import (
    PREVIEW_LAYOUT,
    PhotoItem,
    RenderFailureKind,
    RenderResult,
    TypographySettings,
)
from infrastructure.image_service import ImageService, pil_to_qimage, placeholder_qimage
from infrastructure.polaroid_renderer import PolaroidRenderer

TYPOGRAPHY = TypographySettings()


class CountingRenderer:
    def __init__(self) -> None:
        self._inner = PolaroidRenderer()
        self.requests = []

    def render(self, request) -> RenderResult:
        self.requests.append(request)
        return self._inner.render(request)


class DictSettings:
    def __init__(self, values: dict) -> None:
        self._values = values

    def get(self, key, default=None):
        return self._values.get(key, default)


@pytest.fixture
def renderer() -> CountingRenderer:
    return CountingRenderer()


def _item(path, line1="08 Sep 2025", line2="") -> PhotoItem:
    return PhotoItem(photo_id=str(path), file_path=str(path), line1=line1, line2=line2)


def test_load_source_bounds_long_side(photo_file, renderer) -> None:
    service = ImageService(renderer)
    path = photo_file(size=(800, 400))

    img = service.load_source(str(path), 200)

    assert img is not None
    assert max(img.size) == 200
    assert img.mode == "RGB"
    assert service.load_source(str(path), 200) is img


def test_load_source_missing_file(tmp_path, renderer) -> None:
    service = ImageService(renderer)
    assert service.load_source(str(tmp_path / "nope.jpg")) is None


def test_preview_is_cached_until_caption_changes(photo_file, renderer) -> None:
    service = ImageService(renderer)
    item = _item(photo_file())

    first = service.get_preview(item, TYPOGRAPHY)
    second = service.get_preview(item, TYPOGRAPHY)
    assert first.ok and second.ok
    assert second.image is first.image
    assert len(renderer.requests) == 1

    item.line2 = "Paris, Fr"
    third = service.get_preview(item, TYPOGRAPHY)
    assert third.ok
    assert len(renderer.requests) == 2


def test_preview_uses_preview_layout_and_scaled_fonts(photo_file, renderer) -> None:
    service = ImageService(renderer)
    service.get_preview(_item(photo_file()), TYPOGRAPHY)

    request = renderer.requests[0]
    assert request.layout == PREVIEW_LAYOUT
    assert request.line1_style.size_pt == pytest.approx(TYPOGRAPHY.line1_size * 0.5)


def test_clear_previews_forces_rerender(photo_file, renderer) -> None:
    service = ImageService(renderer)
    item = _item(photo_file())
    service.get_preview(item, TYPOGRAPHY)
    service.clear_previews()
    service.get_preview(item, TYPOGRAPHY)
    assert len(renderer.requests) == 2


def test_preview_of_missing_file_is_not_ok(tmp_path, renderer) -> None:
    service = ImageService(renderer)
    result = service.get_preview(_item(tmp_path / "missing.jpg"), TYPOGRAPHY)
    assert not result.ok
    assert result.image is None
    assert result.failure.kind is RenderFailureKind.INVALID_SOURCE
    assert "missing.jpg" in result.failure.reason
    assert renderer.requests == []


def test_settings_bound_preview_cache(photo_file, renderer) -> None:
    service = ImageService(renderer, DictSettings({"cache.previews": 1}))
    a = _item(photo_file("a.jpg"))
    b = _item(photo_file("b.jpg"))

    service.get_preview(a, TYPOGRAPHY)
    service.get_preview(b, TYPOGRAPHY)
    service.get_preview(a, TYPOGRAPHY)

    assert len(renderer.requests) == 3


def test_pil_to_qimage_keeps_size(make_image) -> None:
    qimg = pil_to_qimage(make_image((40, 30)).convert("RGBA"))
    assert qimg is not None
    assert (qimg.width(), qimg.height()) == (40, 30)


def test_placeholder_is_grey_tile() -> None:
    img = placeholder_qimage()
    assert not img.isNull()
    assert img.width() == img.height() == 64
