"""Settings access helpers for JSON-based configuration."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from loguru import logger

from core.models import (
    EXPORT_LAYOUT,
    PREVIEW_LAYOUT,
    RGBA,
    LayoutParams,
    TypographySettings,
)
from infrastructure.geocoding import DEFAULT_MAX_CACHE_SIZE, DEFAULT_MIN_REQUEST_INTERVAL


class JsonSettings:
    """Lightweight JSON settings reader with dotted-key access."""

    def __init__(self, settings_path: str | Path) -> None:
        self._path = Path(settings_path)
        if not self._path.exists():
            raise FileNotFoundError(f"settings.json not found: {self._path}")
        with self._path.open("r", encoding="utf-8") as f:
            self._data = json.load(f)

    def get(self, key: str, default: Any | None = None) -> Any:
        """Return value for dotted `key`, or `default` if not present."""
        parts = key.split(".")
        node: Any = self._data
        for part in parts:
            if isinstance(node, dict) and part in node:
                node = node[part]
            else:
                return default
        return node


def _float(settings: JsonSettings, key: str, default: float) -> float:
    raw = settings.get(key, default)
    try:
        return float(raw)
    except (ValueError, TypeError):
        logger.warning("Invalid number for {}: {!r}, using {}", key, raw, default)
        return default


def _color(raw: Any, default: RGBA) -> RGBA:
    """Parse `[r, g, b]`, `[r, g, b, a]` or "#rrggbb[aa]" into `RGBA`."""
    try:
        if isinstance(raw, str) and raw.startswith("#") and len(raw) in (7, 9):
            comps = [int(raw[i : i + 2], 16) for i in range(1, len(raw), 2)]
        elif isinstance(raw, (list, tuple)) and len(raw) in (3, 4):
            comps = [int(c) for c in raw]
        else:
            return default
    except (ValueError, TypeError):
        return default
    if len(comps) == 3:
        comps.append(255)
    if any(c < 0 or c > 255 for c in comps):
        return default
    return RGBA(*comps)


def load_typography(settings: JsonSettings) -> TypographySettings:
    """Build `TypographySettings` from the `typography` section."""
    d = TypographySettings()
    return TypographySettings(
        line1_font=str(settings.get("typography.line1_font", d.line1_font)),
        line2_font=str(settings.get("typography.line2_font", d.line2_font)),
        line1_size=_float(settings, "typography.line1_size", d.line1_size),
        line2_size=_float(settings, "typography.line2_size", d.line2_size),
        line1_kern=_float(settings, "typography.line1_kern", d.line1_kern),
        line2_kern=_float(settings, "typography.line2_kern", d.line2_kern),
        line2_baseline=_float(settings, "typography.line2_baseline", d.line2_baseline),
        text_color=_color(settings.get("typography.text_color"), d.text_color),
    )


def load_layout(settings: JsonSettings, section: str) -> LayoutParams:
    """Build `LayoutParams` from `layout.export` or `layout.preview`."""
    d = PREVIEW_LAYOUT if section == "preview" else EXPORT_LAYOUT
    prefix = f"layout.{section}"
    return LayoutParams(
        export_width=_float(settings, f"{prefix}.export_width", d.export_width),
        outer_margin=_float(settings, f"{prefix}.outer_margin", d.outer_margin),
        bottom_band=_float(settings, f"{prefix}.bottom_band", d.bottom_band),
        card_corner_radius=_float(settings, f"{prefix}.card_corner_radius", d.card_corner_radius),
        photo_corner_radius=_float(
            settings, f"{prefix}.photo_corner_radius", d.photo_corner_radius
        ),
    )


def load_geocoding_options(settings: JsonSettings) -> dict[str, Any]:
    """Return keyword arguments for the geocoding stack."""
    return {
        "enabled": bool(settings.get("geocoding.enabled", True)),
        "user_agent": str(settings.get("geocoding.user_agent", "polaroid-maker")),
        "language": str(settings.get("geocoding.language", "en")),
        "min_request_interval": _float(
            settings, "geocoding.min_request_interval", DEFAULT_MIN_REQUEST_INTERVAL
        ),
        "max_cache_size": int(
            _float(settings, "geocoding.max_cache_size", DEFAULT_MAX_CACHE_SIZE)
        ),
    }
