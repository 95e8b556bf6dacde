"""Polaroid card compositor.

Renders a source photo onto a white rounded card with a soft drop shadow and a
two-line caption band underneath. The same entry point serves on-screen
previews and full-resolution exports; callers pick the layout parameters.

Geometry, from `export_width` and the margins:

    photo_width  = (export_width - 2 * outer_margin) * 0.95
    photo_height = source_height * photo_width / source_width
    canvas       = export_width x (outer_margin * 2 + photo_height + bottom_band)

The photo sits `outer_margin` below the top edge, leaving `outer_margin` of
card between its bottom edge and the caption band.
"""

from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Any

from loguru import logger
from PIL import Image, ImageChops, ImageDraw, ImageFilter

from core.models import (
    LayoutParams,
    RenderFailure,
    RenderFailureKind,
    RenderRequest,
    RenderResult,
)
from infrastructure.text_layout import TextLayoutEngine

MAX_DIMENSION: float = 10000
PHOTO_WIDTH_RATIO: float = 0.95
CARD_COLOR: tuple[int, int, int, int] = (255, 255, 255, 255)

SHADOW_RADIUS: float = 18
SHADOW_OFFSET: tuple[float, float] = (0, 2)  # x, y (positive y is downward)
SHADOW_OPACITY: float = 0.18

BAND_TEXT_INSET: float = 64
BAND_TOP_PADDING: float = 10
BAND_BOTTOM_PADDING: float = 10
INTER_LINE_SPACING: float = 18


@dataclass(frozen=True)
class PolaroidGeometry:
    """Canvas layout in top-down pixel coordinates (floats, not yet rounded)."""

    canvas_width: float
    canvas_height: float
    scale: float
    photo_x: float
    photo_y: float
    photo_width: float
    photo_height: float
    band_y: float
    band_height: float

    @property
    def pixel_size(self) -> tuple[int, int]:
        """Canvas size in whole pixels (truncated)."""
        return int(self.canvas_width), int(self.canvas_height)

    @property
    def photo_box(self) -> tuple[int, int, int, int]:
        """Photo rectangle as integer (left, top, right, bottom)."""
        left = int(round(self.photo_x))
        top = int(round(self.photo_y))
        return (
            left,
            top,
            left + max(1, int(round(self.photo_width))),
            top + max(1, int(round(self.photo_height))),
        )


def compute_geometry(source_size: tuple[float, float], layout: LayoutParams) -> PolaroidGeometry:
    """Derive the card geometry for a source of `source_size` (width, height)."""
    src_w, src_h = source_size
    photo_max_width = layout.export_width - 2 * layout.outer_margin
    photo_width = photo_max_width * PHOTO_WIDTH_RATIO
    scale = photo_width / src_w
    photo_height = src_h * scale

    canvas_width = layout.export_width
    # Top margin plus top inset: both contribute `outer_margin`.
    canvas_height = layout.outer_margin + layout.outer_margin + photo_height + layout.bottom_band

    return PolaroidGeometry(
        canvas_width=canvas_width,
        canvas_height=canvas_height,
        scale=scale,
        photo_x=(canvas_width - photo_width) / 2,
        photo_y=canvas_height - (layout.bottom_band + layout.outer_margin) - photo_height,
        photo_width=photo_width,
        photo_height=photo_height,
        band_y=canvas_height - layout.bottom_band,
        band_height=layout.bottom_band,
    )


def _validate(request: RenderRequest) -> RenderFailure | None:
    """Return a failure describing the first invalid input, or None."""
    image = request.source_image
    size = getattr(image, "size", None)
    if not size or size[0] <= 0 or size[1] <= 0:
        return RenderFailure(RenderFailureKind.INVALID_SOURCE, f"Invalid image size: {size}")

    layout = request.layout
    if not math.isfinite(layout.export_width) or not 0 < layout.export_width <= MAX_DIMENSION:
        return RenderFailure(
            RenderFailureKind.INVALID_DIMENSIONS, f"Invalid export width: {layout.export_width}"
        )
    for name in ("outer_margin", "bottom_band", "card_corner_radius", "photo_corner_radius"):
        value = getattr(layout, name)
        if not math.isfinite(value) or not 0 <= value <= MAX_DIMENSION:
            return RenderFailure(RenderFailureKind.INVALID_DIMENSIONS, f"Invalid {name}: {value}")
    if layout.export_width - 2 * layout.outer_margin <= 0:
        return RenderFailure(
            RenderFailureKind.INVALID_DIMENSIONS,
            f"Margins {layout.outer_margin} leave no room for the photo",
        )
    return None


class PolaroidRenderer:
    """Synchronous, stateless compositor; safe to call from any worker thread."""

    def __init__(self, text_engine: TextLayoutEngine | None = None) -> None:
        self._text = text_engine or TextLayoutEngine()

    def render(self, request: RenderRequest) -> RenderResult:
        """Render `request` to an RGBA card, or return a typed failure."""
        failure = _validate(request)
        if failure is not None:
            logger.warning("Render rejected: {}", failure.reason)
            return RenderResult(failure=failure)

        geometry = compute_geometry(request.source_image.size, request.layout)
        width, height = geometry.pixel_size
        if not (0 < geometry.canvas_height <= MAX_DIMENSION) or width <= 0 or height <= 0:
            failure = RenderFailure(
                RenderFailureKind.INVALID_DIMENSIONS,
                f"Canvas {geometry.canvas_width:.2f}x{geometry.canvas_height:.2f} out of range",
            )
            logger.warning("Render rejected: {}", failure.reason)
            return RenderResult(failure=failure)

        try:
            canvas = Image.new("RGBA", (width, height), (0, 0, 0, 0))
            self._draw_card_with_shadow(canvas, request.layout.card_corner_radius)
            self._draw_photo(canvas, request.source_image, geometry, request.layout)
            self._draw_caption(canvas, request, geometry)
        except (MemoryError, Image.DecompressionBombError) as ex:
            failure = RenderFailure(
                RenderFailureKind.ALLOCATION_FAILED, f"Bitmap allocation failed: {ex}"
            )
            logger.error("Render failed for {}x{} canvas: {}", width, height, ex)
            return RenderResult(failure=failure)

        return RenderResult(image=canvas)

    # Drawing steps
    def _draw_card_with_shadow(self, canvas: Image.Image, corner: float) -> None:
        """Composite the blurred shadow, then the opaque card, over the full canvas."""
        box = (0, 0, canvas.width - 1, canvas.height - 1)
        radius = int(round(corner))

        shadow_mask = Image.new("L", canvas.size, 0)
        dx, dy = (int(round(v)) for v in SHADOW_OFFSET)
        ImageDraw.Draw(shadow_mask).rounded_rectangle(
            (box[0] + dx, box[1] + dy, box[2] + dx, box[3] + dy),
            radius=radius,
            fill=int(round(255 * SHADOW_OPACITY)),
        )
        shadow_mask = shadow_mask.filter(ImageFilter.GaussianBlur(SHADOW_RADIUS / 2))
        shadow = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
        shadow.putalpha(shadow_mask)
        canvas.alpha_composite(shadow)

        ImageDraw.Draw(canvas).rounded_rectangle(box, radius=radius, fill=CARD_COLOR)

    def _draw_photo(
        self, canvas: Image.Image, source: Any, geometry: PolaroidGeometry, layout: LayoutParams
    ) -> None:
        """Scale the photo into its rect and composite it over the card with rounded corners."""
        left, top, right, bottom = geometry.photo_box
        target = (right - left, bottom - top)
        photo = source.convert("RGBA").resize(target, Image.Resampling.LANCZOS)

        mask = Image.new("L", target, 0)
        ImageDraw.Draw(mask).rounded_rectangle(
            (0, 0, target[0] - 1, target[1] - 1),
            radius=int(round(layout.photo_corner_radius)),
            fill=255,
        )
        photo.putalpha(ImageChops.multiply(photo.getchannel("A"), mask))
        canvas.alpha_composite(photo, (left, top))

    def _draw_caption(
        self, canvas: Image.Image, request: RenderRequest, geometry: PolaroidGeometry
    ) -> None:
        band_width = geometry.canvas_width - 2 * BAND_TEXT_INSET
        if band_width <= 0:
            return
        result = self._text.layout_two_lines(
            request.line1,
            request.line2,
            request.line1_style,
            request.line2_style,
            band_width=band_width,
            band_height=geometry.band_height,
            top_padding=BAND_TOP_PADDING,
            bottom_padding=BAND_BOTTOM_PADDING,
            inter_line_spacing=INTER_LINE_SPACING,
        )
        if result.is_empty:
            return
        self._text.draw(
            ImageDraw.Draw(canvas),
            result,
            (BAND_TEXT_INSET, geometry.band_y),
            request.line1_style,
            request.line2_style,
            request.text_color,
        )
