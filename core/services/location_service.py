"""Formatting of reverse-geocoded places into caption-ready strings."""

from __future__ import annotations

from core.countries import resolve_country_code
from core.models import Placemark


def format_location(city: str | None, country: str | None) -> str:
    """Combine `city` and an abbreviated `country` into one display string.

    Missing or empty parts are skipped; returns an empty string when both are
    absent.
    """
    city = city or ""
    short_country = resolve_country_code(country) if country else ""

    if city and short_country:
        return f"{city}, {short_country}"
    if city:
        return city
    if short_country:
        return short_country
    return ""


def format_placemark(placemark: Placemark) -> str:
    """Format a placemark, using the sub-administrative area when city is absent."""
    city = placemark.city or placemark.sub_admin_area
    return format_location(city, placemark.country)
