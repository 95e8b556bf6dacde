"""Measurement and placement of the two caption lines inside the card band.

Lines are never wrapped. A line wider than the band is shortened with a
middle ellipsis and re-centred. All results are pure functions of the text,
the style and the band bounds, so identical inputs always lay out identically.
"""

from __future__ import annotations

import re
from typing import Any

from PIL import ImageDraw

from core.models import RGBA, LayoutResult, LineLayout, TextStyle
from infrastructure.fonts import FontResolver

ELLIPSIS = "…"

_WHITESPACE_RUN = re.compile(r"\s+")


def clean_text(text: str | None) -> str:
    """Trim `text` and collapse internal whitespace runs to single spaces."""
    if not text:
        return ""
    return _WHITESPACE_RUN.sub(" ", text.strip())


class TextLayoutEngine:
    """Lays out and draws up to two centred caption lines."""

    def __init__(self, fonts: FontResolver | None = None) -> None:
        self._fonts = fonts or FontResolver()

    def font_for(self, style: TextStyle) -> Any:
        """Return the resolved Pillow font for `style`."""
        return self._fonts.resolve(style.font_family, style.size_pt)

    # Measurement
    def text_width(self, text: str, style: TextStyle) -> float:
        """Single-line advance width of `text`, including tracking between glyphs."""
        if not text:
            return 0.0
        font = self.font_for(style)
        if style.tracking_pt == 0:
            return float(font.getlength(text))
        advances = sum(float(font.getlength(ch)) for ch in text)
        return advances + style.tracking_pt * (len(text) - 1)

    def line_height(self, style: TextStyle) -> float:
        """Line box height for `style` (font ascent plus descent)."""
        ascent, descent = self.font_for(style).getmetrics()
        return float(ascent + descent)

    def measure(self, text: str, style: TextStyle) -> tuple[float, float]:
        """Return (width, height) of `text` set on a single unconstrained line."""
        return self.text_width(text, style), self.line_height(style)

    def truncate_middle(self, text: str, style: TextStyle, max_width: float) -> str:
        """Return `text` or its longest middle-ellipsised form that fits `max_width`.

        Characters are dropped from the visual centre; the head keeps the extra
        character when an odd number is retained. Returns an empty string if
        not even the ellipsis fits.
        """
        if self.text_width(text, style) <= max_width:
            return text

        n = len(text)

        def candidate(keep: int) -> str:
            head = (keep + 1) // 2
            tail = keep // 2
            return text[:head] + ELLIPSIS + (text[n - tail :] if tail else "")

        best: str | None = None
        lo, hi = 0, n - 1
        while lo <= hi:
            mid = (lo + hi) // 2
            trial = candidate(mid)
            if self.text_width(trial, style) <= max_width:
                best = trial
                lo = mid + 1
            else:
                hi = mid - 1
        return best if best is not None else ""

    # Layout
    def _layout_line(
        self, text: str, style: TextStyle, band_width: float, y: float
    ) -> LineLayout:
        width, height = self.measure(text, style)
        fits = width <= band_width
        if not fits:
            text = self.truncate_middle(text, style, band_width)
            width = self.text_width(text, style)
        return LineLayout(
            text=text,
            width=width,
            height=height,
            x=(band_width - width) / 2,
            y=y,
            fits_without_truncation=fits,
        )

    def layout_two_lines(
        self,
        line1: str,
        line2: str,
        style1: TextStyle,
        style2: TextStyle,
        band_width: float,
        band_height: float,
        top_padding: float,
        bottom_padding: float,
        inter_line_spacing: float,
    ) -> LayoutResult:
        """Compute the caption block for `line1` over `line2` inside the band.

        Coordinates in the result are relative to the band's top-left corner.
        The block is centred vertically in the space left after padding; when
        it is taller than that space it starts right after the top padding.
        """
        text1 = clean_text(line1)
        text2 = clean_text(line2)
        if not text1 and not text2:
            return LayoutResult()

        height1 = self.line_height(style1) if text1 else 0.0
        height2 = self.line_height(style2) if text2 else 0.0
        spacing = inter_line_spacing if text1 and text2 else 0.0
        block_height = height1 + spacing + height2

        available = band_height - top_padding - bottom_padding
        start_y = top_padding + max(0.0, (available - block_height) / 2)

        layout1 = self._layout_line(text1, style1, band_width, start_y) if text1 else None
        layout2 = None
        if text2:
            y2 = start_y + height1 + spacing if text1 else start_y
            layout2 = self._layout_line(text2, style2, band_width, y2)
        return LayoutResult(line1=layout1, line2=layout2, block_height=block_height)

    # Drawing
    def draw(
        self,
        draw: ImageDraw.ImageDraw,
        result: LayoutResult,
        origin: tuple[float, float],
        style1: TextStyle,
        style2: TextStyle,
        color: RGBA,
    ) -> None:
        """Draw a computed layout with its band's top-left corner at `origin`."""
        fill = tuple(color)
        for line, style in ((result.line1, style1), (result.line2, style2)):
            if line is None or not line.text:
                continue
            font = self.font_for(style)
            x = origin[0] + line.x
            # Positive baseline offsets raise the glyphs.
            y = origin[1] + line.y - style.baseline_offset_pt
            if style.tracking_pt == 0:
                draw.text((x, y), line.text, font=font, fill=fill)
                continue
            for ch in line.text:
                draw.text((x, y), ch, font=font, fill=fill)
                x += float(font.getlength(ch)) + style.tracking_pt
