"""Core service interfaces and shared data structures.

This module defines the collaborator protocols used by the caption and export
pipelines, plus the result dataclasses reported back to the UI layers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol

from core.models import Coordinate, Placemark, RenderRequest, RenderResult


class ReverseGeocoder(Protocol):
    """External reverse-geocoding service.

    Implementations may raise on network or service errors; callers are
    expected to absorb them.
    """

    def lookup(self, latitude: float, longitude: float) -> Placemark | None:
        """Return the best placemark for the coordinate, or None."""
        raise NotImplementedError


class LocationLookup(Protocol):
    """Anything that turns a coordinate into a formatted location string."""

    async def reverse_geocode(self, latitude: float, longitude: float) -> str:
        """Return the formatted location, or an empty string when unknown."""
        raise NotImplementedError


class Renderer(Protocol):
    """Polaroid compositor."""

    def render(self, request: RenderRequest) -> RenderResult:
        """Render `request` into a bitmap or a typed failure."""
        raise NotImplementedError


class ImageLoader(Protocol):
    """Source of decoded photo pixels."""

    def load_source(self, path: str, max_side: int | None = None) -> Any:
        """Return a Pillow image for `path`, or None when it cannot be decoded."""
        raise NotImplementedError


@dataclass
class ExportResult:
    """Outcome of an export batch.

    Attributes:
        success_paths: Files written successfully, in batch order.
        failed: Tuples of (photo_id, reason) for items that were skipped.
    """

    success_paths: list[str] = field(default_factory=list)
    failed: list[tuple[str, str]] = field(default_factory=list)


def coordinate_of(latitude: float | None, longitude: float | None) -> Coordinate | None:
    """Return a `Coordinate` when both components are present numbers."""
    if not isinstance(latitude, (int, float)) or not isinstance(longitude, (int, float)):
        return None
    return Coordinate(float(latitude), float(longitude))
