"""Default caption composition from capture date and location."""

from __future__ import annotations

from datetime import datetime

from core.models import Coordinate
from core.services.interfaces import LocationLookup

# Fixed English abbreviations so captions do not depend on the process locale.
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

CAPTION_SEPARATOR = " — "


def format_caption_date(dt: datetime | None) -> str:
    """Format `dt` as "dd MMM yyyy" (e.g. "08 Sep 2025"); empty string when None."""
    if dt is None:
        return ""
    return f"{dt.day:02d} {_MONTHS[dt.month - 1]} {dt.year:04d}"


class CaptionComposer:
    """Builds the default first caption line for a photo."""

    def __init__(self, locations: LocationLookup) -> None:
        self._locations = locations

    async def compose_default_caption(
        self, creation_date: datetime | None, coordinate: Coordinate | None
    ) -> str:
        """Return "{date} — {location}", or the date alone when no place is known."""
        date_label = format_caption_date(creation_date)
        if coordinate is None:
            return date_label

        location = await self._locations.reverse_geocode(coordinate.latitude, coordinate.longitude)
        if not location:
            return date_label
        if not date_label:
            return location
        return f"{date_label}{CAPTION_SEPARATOR}{location}"
