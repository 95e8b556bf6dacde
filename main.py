from __future__ import annotations

import argparse
import asyncio
from pathlib import Path

from loguru import logger

from app.viewmodels.library_vm import LibraryVM
from core.services.caption_service import CaptionComposer
from infrastructure.export_service import JPEG_QUALITY, ExportService
from infrastructure.fonts import FontResolver
from infrastructure.geocoding import GeocodeCache, NominatimGeocoder
from infrastructure.image_service import ImageService
from infrastructure.logging import init_logging
from infrastructure.photo_source import FolderPhotoSource
from infrastructure.polaroid_renderer import PolaroidRenderer
from infrastructure.settings import (
    JsonSettings,
    load_geocoding_options,
    load_layout,
    load_typography,
)
from infrastructure.text_layout import TextLayoutEngine

BASE_DIR = Path(__file__).parent


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Render the photos of a folder as polaroid cards."
    )
    parser.add_argument("photos", help="folder containing the source photos")
    parser.add_argument("output", help="folder that receives the exported JPEG files")
    parser.add_argument("--line2", default="", help="free text for the second caption line")
    parser.add_argument("--settings", default=str(BASE_DIR / "settings.json"))
    parser.add_argument("--recursive", action="store_true", help="scan sub-folders too")
    parser.add_argument("--no-geocode", action="store_true", help="skip location lookups")
    return parser.parse_args(argv)


def _build_vm(settings: JsonSettings, no_geocode: bool, recursive: bool) -> LibraryVM:
    fonts_dir = settings.get("fonts_dir") or None
    renderer = PolaroidRenderer(TextLayoutEngine(FontResolver(fonts_dir)))
    images = ImageService(renderer, settings, preview_layout=load_layout(settings, "preview"))
    exporter = ExportService(
        renderer,
        images,
        layout=load_layout(settings, "export"),
        quality=int(settings.get("export.jpeg_quality", JPEG_QUALITY) or JPEG_QUALITY),
    )

    composer: CaptionComposer | None = None
    geo = load_geocoding_options(settings)
    if geo["enabled"] and not no_geocode:
        cache = GeocodeCache(
            NominatimGeocoder(user_agent=geo["user_agent"], language=geo["language"]),
            min_request_interval=geo["min_request_interval"],
            max_cache_size=geo["max_cache_size"],
        )
        composer = CaptionComposer(cache)

    return LibraryVM(
        FolderPhotoSource(recursive=recursive),
        composer,
        exporter,
        typography=load_typography(settings),
    )


async def _run(vm: LibraryVM, args: argparse.Namespace) -> int:
    vm.load_folder(args.photos)
    if not vm.items:
        logger.warning("No photos found in {}", args.photos)
        return 1
    for item in vm.items:
        vm.set_line2(item.photo_id, args.line2)
    vm.select_all()
    result = await vm.export_selected(args.output)
    for photo_id, reason in result.failed:
        logger.warning("Skipped {}: {}", photo_id, reason)
    return 0 if not result.failed else 2


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    init_logging(console_level="INFO")
    settings = JsonSettings(args.settings)
    vm = _build_vm(settings, args.no_geocode, args.recursive)
    return asyncio.run(_run(vm, args))


if __name__ == "__main__":
    raise SystemExit(main())
