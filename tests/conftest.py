from __future__ import annotations

import asyncio
from collections.abc import Callable
from pathlib import Path

from PIL import Image
import pytest

from core.models import Placemark


class FakeClock:
    """Monotonic clock advanced only by `FakeClock.sleep`."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, delay: float) -> None:
        self.sleeps.append(delay)
        self.now += delay
        await asyncio.sleep(0)


class FakeGeocoder:
    """Records lookups and answers from a fixed placemark or raises."""

    def __init__(
        self,
        placemark: Placemark | None = None,
        error: Exception | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self._placemark = placemark
        self._error = error
        self._clock = clock
        self.calls: list[tuple[float, float]] = []
        self.call_times: list[float] = []

    def lookup(self, latitude: float, longitude: float) -> Placemark | None:
        self.calls.append((latitude, longitude))
        if self._clock is not None:
            self.call_times.append(self._clock())
        if self._error is not None:
            raise self._error
        return self._placemark


class FakeLocations:
    """`LocationLookup` returning a fixed string."""

    def __init__(self, result: str) -> None:
        self.result = result
        self.calls: list[tuple[float, float]] = []

    async def reverse_geocode(self, latitude: float, longitude: float) -> str:
        self.calls.append((latitude, longitude))
        return self.result


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_image() -> Callable[..., Image.Image]:
    def _make(size: tuple[int, int] = (400, 300), color=(200, 30, 30)) -> Image.Image:
        return Image.new("RGB", size, color)

    return _make


@pytest.fixture
def photo_file(tmp_path: Path) -> Callable[..., Path]:
    """Write a solid-colour JPEG and return its path."""

    def _write(
        name: str = "photo.jpg",
        size: tuple[int, int] = (400, 300),
        color=(30, 120, 200),
        shot_date: str | None = None,
    ) -> Path:
        path = tmp_path / name
        img = Image.new("RGB", size, color)
        if shot_date is not None:
            exif = Image.Exif()
            exif[306] = shot_date
            img.save(path, "JPEG", exif=exif)
        else:
            img.save(path, "JPEG")
        return path

    return _write
