"""Core domain models for photos, captions, typography and render requests."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Any, NamedTuple


class RGBA(NamedTuple):
    """Text colour with integer components in 0..255."""

    red: int
    green: int
    blue: int
    alpha: int = 255


class Coordinate(NamedTuple):
    """GPS position in decimal degrees."""

    latitude: float
    longitude: float


@dataclass(frozen=True)
class Placemark:
    """Structured reverse-geocoding result for a coordinate."""

    city: str | None = None
    sub_admin_area: str | None = None
    country: str | None = None


@dataclass(frozen=True)
class TextStyle:
    """Font family, size and spacing for one caption line."""

    font_family: str
    size_pt: float
    tracking_pt: float = 0.0
    baseline_offset_pt: float = 0.0


LINE1_FONT_OPTIONS: list[str] = [
    "SF Pro",
    "SF Pro Rounded",
    "New York",
    "Georgia",
    "Avenir",
    "Baskerville",
]
LINE2_FONT_OPTIONS: list[str] = [
    "Patrick Hand",
    "Bradley Hand",
    "Marker Felt",
    "Noteworthy",
    "SF Pro",
    "New York",
    "Georgia",
]
COLOR_OPTIONS: list[tuple[str, RGBA]] = [
    ("Black", RGBA(0, 0, 0)),
    ("Dark Gray", RGBA(85, 85, 85)),
    ("Navy", RGBA(0, 0, 128)),
]


@dataclass(frozen=True)
class TypographySettings:
    """User-selected typography shared by every photo in the library."""

    line1_font: str = "New York"
    line2_font: str = "New York"
    line1_size: float = 65.0
    line2_size: float = 65.0
    line1_kern: float = 1.3
    line2_kern: float = 1.3
    line2_baseline: float = -2.0
    text_color: RGBA = RGBA(0, 0, 0)

    def line1_style(self) -> TextStyle:
        """Style for the date/location line."""
        return TextStyle(self.line1_font, self.line1_size, self.line1_kern, 0.0)

    def line2_style(self) -> TextStyle:
        """Style for the free-text line."""
        return TextStyle(self.line2_font, self.line2_size, self.line2_kern, self.line2_baseline)

    def scaled(self, factor: float) -> TypographySettings:
        """Return a copy with both font sizes multiplied by `factor`."""
        return replace(
            self,
            line1_size=self.line1_size * factor,
            line2_size=self.line2_size * factor,
        )


@dataclass(frozen=True)
class LayoutParams:
    """Card geometry inputs, in output pixels."""

    export_width: float
    outer_margin: float
    bottom_band: float
    card_corner_radius: float
    photo_corner_radius: float


EXPORT_LAYOUT = LayoutParams(1800, 72, 340, 28, 16)
PREVIEW_LAYOUT = LayoutParams(900, 36, 170, 14, 8)
PREVIEW_FONT_SCALE: float = 0.5


@dataclass
class RenderRequest:
    """Everything the compositor needs to produce one card bitmap.

    `source_image` is a Pillow image owned by the request; the renderer never
    mutates it.
    """

    source_image: Any
    line1: str
    line2: str
    layout: LayoutParams
    line1_style: TextStyle
    line2_style: TextStyle
    text_color: RGBA = RGBA(0, 0, 0)

    @classmethod
    def from_settings(
        cls,
        source_image: Any,
        line1: str,
        line2: str,
        layout: LayoutParams,
        typography: TypographySettings,
    ) -> RenderRequest:
        """Build a request from library-wide typography settings."""
        return cls(
            source_image=source_image,
            line1=line1,
            line2=line2,
            layout=layout,
            line1_style=typography.line1_style(),
            line2_style=typography.line2_style(),
            text_color=typography.text_color,
        )


@dataclass(frozen=True)
class LineLayout:
    """Placement of a single caption line relative to the caption band."""

    text: str
    width: float
    height: float
    x: float
    y: float
    fits_without_truncation: bool


@dataclass(frozen=True)
class LayoutResult:
    """Computed caption block; `line1`/`line2` are None when the line is empty."""

    line1: LineLayout | None = None
    line2: LineLayout | None = None
    block_height: float = 0.0

    @property
    def is_empty(self) -> bool:
        """True when neither line has anything to draw."""
        return self.line1 is None and self.line2 is None


class RenderFailureKind(Enum):
    """Why a render produced no bitmap."""

    INVALID_SOURCE = "invalid_source"
    INVALID_DIMENSIONS = "invalid_dimensions"
    ALLOCATION_FAILED = "allocation_failed"


@dataclass(frozen=True)
class RenderFailure:
    """Typed render failure with a human readable diagnostic."""

    kind: RenderFailureKind
    reason: str


@dataclass
class RenderResult:
    """Outcome of a render: exactly one of `image` or `failure` is set."""

    image: Any = None
    failure: RenderFailure | None = None

    @property
    def ok(self) -> bool:
        """True when a bitmap was produced."""
        return self.failure is None and self.image is not None


@dataclass
class PhotoItem:
    """A library photo with its editable two-line caption."""

    photo_id: str
    file_path: str
    creation_date: datetime | None = None
    coordinate: Coordinate | None = None
    line1: str = ""
    line2: str = ""
    is_selected: bool = False
    # Set once the user types into line1; stops geocoding from overwriting it.
    is_line1_manually_edited: bool = False
    pixel_width: int | None = None
    pixel_height: int | None = None
