"""Utilities for photo metadata extraction (EXIF and filesystem).

This module centralizes capture-date and GPS parsing so the rest of the app
can depend on a single behavior. It uses best-effort parsing and will not
raise on errors; callers should expect `None` when data is not available.
"""

from __future__ import annotations

from datetime import datetime
import os
from typing import Any

from loguru import logger
from PIL import Image

from core.models import Coordinate

EXIF_DATETIME_ORIGINAL = 36867
EXIF_DATETIME = 306
EXIF_IFD_POINTER = 0x8769
GPS_IFD_POINTER = 0x8825

# GPS IFD tags
GPS_LATITUDE_REF = 1
GPS_LATITUDE = 2
GPS_LONGITUDE_REF = 3
GPS_LONGITUDE = 4


def get_filesystem_creation_datetime(path: str) -> datetime | None:
    """Best-effort file creation time.

    On Windows, `os.path.getctime` returns creation time. On other systems it may
    return ctime (metadata change). We accept that as a best-effort value.
    """
    try:
        ts = os.path.getctime(path)
        return datetime.fromtimestamp(ts)
    except (OSError, ValueError) as ex:
        logger.debug("getctime failed for {}: {}", path, ex)
        return None


def parse_exif_datetime(value: Any) -> datetime | None:
    """Parse an EXIF timestamp such as "2025:09:08 14:03:11"."""
    if not value:
        return None
    val_str = str(value).strip().rstrip("\x00")
    try:
        if len(val_str) >= 19 and val_str[4] == ":" and val_str[7] == ":":
            return datetime.strptime(val_str[:19], "%Y:%m:%d %H:%M:%S")
        return datetime.fromisoformat(val_str.replace("/", "-"))
    except (ValueError, TypeError):
        return None


def get_exif_datetime_original(exif: Any) -> datetime | None:
    """Return DateTimeOriginal (falling back to DateTime) from a Pillow `Exif`."""
    if not exif:
        return None
    try:
        sub_ifd = exif.get_ifd(EXIF_IFD_POINTER)
    except (KeyError, AttributeError, ValueError):
        sub_ifd = {}
    val = (sub_ifd or {}).get(EXIF_DATETIME_ORIGINAL) or exif.get(EXIF_DATETIME_ORIGINAL)
    return parse_exif_datetime(val or exif.get(EXIF_DATETIME))


def _dms_to_degrees(dms: Any, ref: Any) -> float | None:
    try:
        degrees, minutes, seconds = (float(part) for part in dms)
    except (TypeError, ValueError, ZeroDivisionError):
        return None
    value = degrees + minutes / 60.0 + seconds / 3600.0
    if str(ref).strip().upper() in {"S", "W"}:
        value = -value
    return value


def get_exif_coordinate(exif: Any) -> Coordinate | None:
    """Return the GPS position stored in a Pillow `Exif`, if any."""
    if not exif:
        return None
    try:
        gps = exif.get_ifd(GPS_IFD_POINTER)
    except (KeyError, AttributeError, ValueError):
        return None
    if not gps or GPS_LATITUDE not in gps or GPS_LONGITUDE not in gps:
        return None
    lat = _dms_to_degrees(gps[GPS_LATITUDE], gps.get(GPS_LATITUDE_REF, "N"))
    lon = _dms_to_degrees(gps[GPS_LONGITUDE], gps.get(GPS_LONGITUDE_REF, "E"))
    if lat is None or lon is None:
        return None
    return Coordinate(lat, lon)


def read_photo_metadata(path: str) -> tuple[datetime | None, Coordinate | None, tuple[int, int]]:
    """Read (capture date, GPS coordinate, pixel size) from `path` via Pillow.

    Missing data yields None / (0, 0); decoding errors are logged, not raised.
    """
    try:
        with Image.open(path) as im:
            exif = im.getexif()
            return get_exif_datetime_original(exif), get_exif_coordinate(exif), im.size
    except (OSError, ValueError, SyntaxError) as ex:
        logger.debug("EXIF read failed for {}: {}", path, ex)
        return None, None, (0, 0)
