from __future__ import annotations

import json

import pytest

from core.models import EXPORT_LAYOUT, PREVIEW_LAYOUT, RGBA
from infrastructure.settings import (
    JsonSettings,
    load_geocoding_options,
    load_layout,
    load_typography,
)


def _write(tmp_path, data: dict) -> JsonSettings:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return JsonSettings(path)


def test_dotted_get(tmp_path) -> None:
    settings = _write(tmp_path, {"cache": {"previews": 12}})
    assert settings.get("cache.previews") == 12
    assert settings.get("cache.missing", 5) == 5
    assert settings.get("cache.previews.deeper") is None


def test_missing_file_raises(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        JsonSettings(tmp_path / "nope.json")


def test_typography_from_settings(tmp_path) -> None:
    settings = _write(
        tmp_path,
        {
            "typography": {
                "line1_font": "Georgia",
                "line2_size": "40",
                "line1_kern": "wide",
                "text_color": "#000080",
            }
        },
    )

    typography = load_typography(settings)

    assert typography.line1_font == "Georgia"
    assert typography.line2_size == 40.0
    assert typography.line1_kern == 1.3
    assert typography.text_color == RGBA(0, 0, 128, 255)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ([85, 85, 85], RGBA(85, 85, 85, 255)),
        ([0, 0, 0, 128], RGBA(0, 0, 0, 128)),
        ("#ff000080", RGBA(255, 0, 0, 128)),
        ([300, 0, 0], RGBA(0, 0, 0, 255)),
        ("black", RGBA(0, 0, 0, 255)),
    ],
)
def test_text_color_parsing(tmp_path, raw, expected) -> None:
    settings = _write(tmp_path, {"typography": {"text_color": raw}})
    assert load_typography(settings).text_color == expected


def test_layout_sections(tmp_path) -> None:
    settings = _write(tmp_path, {"layout": {"preview": {"export_width": 600}}})

    assert load_layout(settings, "export") == EXPORT_LAYOUT
    preview = load_layout(settings, "preview")
    assert preview.export_width == 600
    assert preview.outer_margin == PREVIEW_LAYOUT.outer_margin


def test_geocoding_defaults(tmp_path) -> None:
    options = load_geocoding_options(_write(tmp_path, {}))
    assert options["enabled"] is True
    assert options["min_request_interval"] == 1.5
    assert options["max_cache_size"] == 100


def test_shipped_settings_file_loads() -> None:
    from pathlib import Path

    settings = JsonSettings(Path(__file__).resolve().parent.parent / "settings.json")
    assert load_layout(settings, "export") == EXPORT_LAYOUT
    assert load_typography(settings).line1_size == 65
