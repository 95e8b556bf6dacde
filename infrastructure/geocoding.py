"""Rate-limited, size-bounded reverse geocoding cache.

`GeocodeCache` is the only caller of the external reverse-geocoding service.
Hits return immediately. Misses wait for a shared minimum interval since the
last issued request, call the service on a worker thread and cache the
formatted result. Failures are logged and cached as an empty string so they
are not retried.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
import threading
import time

from geopy.geocoders import Nominatim
from loguru import logger

from core.models import Placemark
from core.services.interfaces import ReverseGeocoder
from core.services.location_service import format_placemark

DEFAULT_MIN_REQUEST_INTERVAL: float = 1.5
DEFAULT_MAX_CACHE_SIZE: int = 100
COORDINATE_PRECISION: int = 6


def cache_key(latitude: float, longitude: float) -> str:
    """Quantise a coordinate pair to a stable string key."""
    return f"{latitude:.{COORDINATE_PRECISION}f},{longitude:.{COORDINATE_PRECISION}f}"


class NominatimGeocoder:
    """`ReverseGeocoder` backed by OpenStreetMap Nominatim through geopy."""

    def __init__(
        self,
        user_agent: str = "polaroid-maker",
        language: str = "en",
        timeout: float = 10.0,
        geolocator: object | None = None,
    ) -> None:
        self._geolocator = geolocator or Nominatim(user_agent=user_agent, timeout=timeout)
        self._language = language

    def lookup(self, latitude: float, longitude: float) -> Placemark | None:
        """Return the placemark for the coordinate; geopy errors propagate."""
        location = self._geolocator.reverse(  # type: ignore[attr-defined]
            (latitude, longitude), exactly_one=True, language=self._language
        )
        if location is None:
            return None
        raw = getattr(location, "raw", None) or {}
        address = raw.get("address") or {}
        if not address:
            return None
        return Placemark(
            city=address.get("city") or address.get("town") or address.get("village"),
            sub_admin_area=(
                address.get("county") or address.get("state_district") or address.get("state")
            ),
            country=address.get("country"),
        )


class GeocodeCache:
    """Coordinate -> location string cache with a process-wide request limiter.

    Meant to be driven by one asyncio event loop at a time. The limiter lock is
    recreated when a different loop calls in, so sequential `asyncio.run`
    sessions can share one cache; the last-request time carries over. Concurrent
    misses on the same key may issue redundant lookups; issuing itself is always
    serialised and spaced by `min_request_interval`.
    """

    def __init__(
        self,
        geocoder: ReverseGeocoder,
        min_request_interval: float = DEFAULT_MIN_REQUEST_INTERVAL,
        max_cache_size: int = DEFAULT_MAX_CACHE_SIZE,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._geocoder = geocoder
        self._min_interval = max(0.0, float(min_request_interval))
        self._max_size = max(1, int(max_cache_size))
        self._clock = clock
        self._sleep = sleep
        # dicts keep insertion order, which drives eviction.
        self._cache: dict[str, str] = {}
        self._write_lock = threading.Lock()
        self._rate_lock: asyncio.Lock | None = None
        self._rate_lock_loop: asyncio.AbstractEventLoop | None = None
        self._last_request: float | None = None

    def __len__(self) -> int:
        return len(self._cache)

    def __contains__(self, key: object) -> bool:
        return key in self._cache

    def get_cached(self, latitude: float, longitude: float) -> str | None:
        """Return the cached value, or None when the coordinate was never queried."""
        return self._cache.get(cache_key(latitude, longitude))

    async def reverse_geocode(self, latitude: float, longitude: float) -> str:
        """Return the formatted location for the coordinate ("" when unknown)."""
        key = cache_key(latitude, longitude)
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        await self._wait_for_slot()
        try:
            placemark = await asyncio.to_thread(self._geocoder.lookup, latitude, longitude)
        except Exception as ex:  # pylint: disable=broad-exception-caught
            logger.warning("Geocoding failed for {}: {}", key, ex)
            self._store(key, "")
            return ""

        if placemark is None:
            logger.debug("No placemark for {}", key)
            self._store(key, "")
            return ""

        result = format_placemark(placemark)
        self._store(key, result)
        return result

    def clear(self) -> None:
        """Drop every cached entry."""
        with self._write_lock:
            self._cache.clear()

    async def _wait_for_slot(self) -> None:
        """Sleep until `min_request_interval` has passed since the last issued call.

        The timestamp is only stamped once the wait completes, so a caller
        cancelled while sleeping leaves the limiter untouched.
        """
        loop = asyncio.get_running_loop()
        if self._rate_lock is None or self._rate_lock_loop is not loop:
            self._rate_lock = asyncio.Lock()
            self._rate_lock_loop = loop
        async with self._rate_lock:
            if self._last_request is not None:
                elapsed = self._clock() - self._last_request
                if elapsed < self._min_interval:
                    await self._sleep(self._min_interval - elapsed)
            self._last_request = self._clock()

    def _store(self, key: str, value: str) -> None:
        with self._write_lock:
            self._cache[key] = value
            if len(self._cache) > self._max_size:
                self._trim()

    def _trim(self) -> None:
        """Evict the oldest fifth of the capacity (insertion order)."""
        batch = max(1, self._max_size // 5)
        for key in list(self._cache)[:batch]:
            del self._cache[key]
        logger.debug("Geocode cache trimmed by {} entries to {}", batch, len(self._cache))
