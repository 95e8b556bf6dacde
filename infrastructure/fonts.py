"""Font resolution for caption rendering.

Families are resolved through an ordered table of candidate file names. The
first candidate Pillow can open wins; when none can be opened the Pillow
built-in default font is used at the requested size.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from loguru import logger
from PIL import ImageFont

MIN_FONT_SIZE: float = 1.0
MAX_FONT_SIZE: float = 1000.0
FONT_EXTENSIONS: tuple[str, ...] = (".ttf", ".otf", ".ttc")

# Face-name patterns tried inside a family, in order.
FACE_PATTERNS: tuple[str, ...] = (
    "{family}",
    "{compact}",
    "{family}-Regular",
    "{compact}-Regular",
    "{family} Regular",
    "{family}-Book",
    "{family}-Text",
    "{family} Text",
    "{family}-Roman",
)

# Extra names for families whose files do not follow the family name.
FAMILY_ALIASES: dict[str, tuple[str, ...]] = {
    "SF Pro": ("SF-Pro", "SF-Pro-Text-Regular", "SFNS"),
    "SF Pro Rounded": ("SFRounded-Regular", "SF-Pro-Rounded-Regular"),
    "New York": ("NewYork-Regular", "NewYork", "New York"),
    "Patrick Hand": ("PatrickHand-Regular",),
    "Bradley Hand": ("Bradley Hand Bold", "BradleyHandITCTT-Bold"),
    "Marker Felt": ("MarkerFelt",),
    "Noteworthy": ("Noteworthy",),
}


def clamp_font_size(size: float) -> int:
    """Clamp to a sane point size and round to whole pixels."""
    return int(round(max(MIN_FONT_SIZE, min(float(size), MAX_FONT_SIZE))))


def candidate_names(family: str) -> list[str]:
    """Return the ordered, de-duplicated file-name stems to try for `family`."""
    compact = family.replace(" ", "")
    names: list[str] = []
    for pattern in FACE_PATTERNS:
        names.append(pattern.format(family=family, compact=compact))
    names.extend(FAMILY_ALIASES.get(family, ()))
    seen: set[str] = set()
    ordered: list[str] = []
    for name in names:
        if name and name not in seen:
            seen.add(name)
            ordered.append(name)
    return ordered


class FontResolver:
    """Resolve (family, size) pairs to Pillow fonts with a guaranteed fallback."""

    def __init__(self, fonts_dir: str | Path | None = None) -> None:
        self._fonts_dir = Path(fonts_dir) if fonts_dir else None
        self._resolve = lru_cache(maxsize=64)(self._resolve_uncached)

    def resolve(self, family: str, size: float) -> ImageFont.FreeTypeFont:
        """Return a font for `family` at `size`, falling back to the default font."""
        return self._resolve(family, clamp_font_size(size))

    def _candidate_paths(self, family: str) -> list[str]:
        paths: list[str] = []
        for stem in candidate_names(family):
            for ext in FONT_EXTENSIONS:
                file_name = f"{stem}{ext}"
                if self._fonts_dir is not None:
                    paths.append(str(self._fonts_dir / file_name))
                paths.append(file_name)
        return paths

    def _resolve_uncached(self, family: str, size: int) -> ImageFont.FreeTypeFont:
        for path in self._candidate_paths(family):
            try:
                return ImageFont.truetype(path, size)
            except OSError:
                continue
        logger.debug("Font family {} not found, using default font at {}px", family, size)
        return ImageFont.load_default(size=size)
