"""ViewModel for a photo library: captions, selection, and export."""

from __future__ import annotations

import asyncio
from pathlib import Path

from loguru import logger

from core.models import PhotoItem, TypographySettings
from core.services.caption_service import CaptionComposer, format_caption_date
from core.services.interfaces import ExportResult

# Pause between background location loads to avoid flooding the geocoder queue.
LOCATION_LOAD_DELAY_SEC = 0.1


class LibraryVM:
    """Main library view-model.

    Owns the `PhotoItem` list and the library-wide typography. Decides when to
    auto-populate line1; the caption composer itself never looks at the
    manual-edit flag.
    """

    def __init__(
        self,
        source,
        composer: CaptionComposer | None,
        exporter,
        typography: TypographySettings | None = None,
        location_delay: float = LOCATION_LOAD_DELAY_SEC,
    ) -> None:
        """Create a LibraryVM.

        Args:
            source: Photo source with `load(folder) -> list[PhotoItem]`.
            composer: Caption composer, or None to disable geocoded captions.
            exporter: Export service with `export(items, out_dir, typography)`.
            typography: Initial typography (defaults to `TypographySettings()`).
            location_delay: Seconds to wait between background location loads.
        """
        self._source = source
        self._composer = composer
        self._exporter = exporter
        self._location_delay = location_delay
        self.typography = typography or TypographySettings()
        self.items: list[PhotoItem] = []
        self._folder: str | None = None

    # Loading
    def load_folder(self, folder: str | Path) -> None:
        """Load photos from `folder` with line1 set to the capture date."""
        items = list(self._source.load(folder))
        for item in items:
            item.line1 = format_caption_date(item.creation_date)
            item.line2 = ""
        self.items = items
        self._folder = str(folder)

    def get_folder(self) -> str | None:
        """Return the last-loaded folder, if any."""
        return self._folder

    def find(self, photo_id: str) -> PhotoItem | None:
        """Return the item with `photo_id`, or None."""
        for item in self.items:
            if item.photo_id == photo_id:
                return item
        return None

    # Captions
    async def load_location_for_photo(self, item: PhotoItem) -> None:
        """Refresh line1 from date and location unless the user edited it."""
        current = self.find(item.photo_id)
        if current is None or current.is_line1_manually_edited or self._composer is None:
            return
        line1 = await self._composer.compose_default_caption(
            current.creation_date, current.coordinate
        )
        # The user may have typed while the lookup was pending.
        if not current.is_line1_manually_edited:
            current.line1 = line1

    async def load_locations_for_all(self) -> None:
        """Populate line1 for every photo, one lookup at a time."""
        for item in list(self.items):
            await self.load_location_for_photo(item)
            if self._location_delay > 0:
                await asyncio.sleep(self._location_delay)

    def set_line1(self, photo_id: str, text: str) -> None:
        """Apply a user edit to line1 and stop auto-population for that photo."""
        item = self.find(photo_id)
        if item is None:
            return
        item.line1 = text
        item.is_line1_manually_edited = True

    def set_line2(self, photo_id: str, text: str) -> None:
        """Apply a user edit to line2."""
        item = self.find(photo_id)
        if item is not None:
            item.line2 = text

    async def reset_line1_manual_edit(self, photo_id: str) -> None:
        """Clear the manual-edit flag and regenerate line1."""
        item = self.find(photo_id)
        if item is None:
            return
        item.is_line1_manually_edited = False
        await self.load_location_for_photo(item)

    # Selection
    @property
    def selected_items(self) -> list[PhotoItem]:
        """Selected items in library order."""
        return [it for it in self.items if it.is_selected]

    @property
    def selected_count(self) -> int:
        """Number of selected items."""
        return len(self.selected_items)

    @property
    def all_selected(self) -> bool:
        """True when the library is non-empty and every item is selected."""
        return bool(self.items) and all(it.is_selected for it in self.items)

    def toggle_selection(self, photo_id: str) -> None:
        """Flip the selection state of one item."""
        item = self.find(photo_id)
        if item is not None:
            item.is_selected = not item.is_selected

    def select_all(self) -> None:
        """Select every item."""
        for item in self.items:
            item.is_selected = True

    def clear_selection(self) -> None:
        """Deselect every item."""
        for item in self.items:
            item.is_selected = False

    def selection_index(self, photo_id: str) -> int | None:
        """1-based position of the item among selected items, or None."""
        for position, item in enumerate(self.selected_items, start=1):
            if item.photo_id == photo_id:
                return position
        return None

    # Export
    async def export_selected(self, out_dir: str | Path) -> ExportResult:
        """Make sure captions are loaded, then export the selected photos."""
        selected = self.selected_items
        for item in selected:
            await self.load_location_for_photo(item)
        logger.info("Exporting {} selected photos to {}", len(selected), out_dir)
        return await asyncio.to_thread(self._exporter.export, selected, out_dir, self.typography)
