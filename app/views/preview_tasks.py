from __future__ import annotations

from dataclasses import dataclass
from threading import Lock
from typing import Any

from PySide6.QtCore import QObject, QRunnable, QThreadPool
from loguru import logger

from core.models import PhotoItem, TypographySettings
from infrastructure.image_service import pil_to_qimage, placeholder_qimage


@dataclass
class _PendingPreview:
    item: PhotoItem
    typography: TypographySettings
    token: str


class _PreviewTask(QRunnable):
    """QRunnable for background preview rendering.

    Emits `receiver.previewRendered(token, slot, image)` upon completion. The
    receiver is expected to own a Qt `Signal(str, str, object)` named
    `previewRendered`. Failed renders deliver a grey placeholder.
    """

    def __init__(
        self,
        *,
        runner: PreviewTaskRunner,
        slot: str,
        request: _PendingPreview,
    ) -> None:
        super().__init__()
        self._runner = runner
        self._slot = slot
        self._request = request

    def run(self) -> None:  # type: ignore[override]
        image: Any = None
        try:
            result = self._runner.service.get_preview(
                self._request.item, self._request.typography
            )
            if result.ok:
                image = pil_to_qimage(result.image)
        except Exception as ex:  # pragma: no cover - GUI background task
            logger.error("Preview task failed: {}", ex)
        if image is None:
            image = placeholder_qimage()
        try:
            self._runner.receiver.previewRendered.emit(  # type: ignore[attr-defined]
                self._request.token, self._slot, image
            )
        finally:
            self._runner.finished(self._slot)


class PreviewTaskRunner:
    """Dispatches preview renders to a thread pool, one in flight per slot.

    Tokens keep the format "preview|{slot}|{preview_key}". A request for a
    slot that is already rendering replaces any queued request for that slot;
    the latest one starts as soon as the current render finishes.
    """

    def __init__(
        self, *, service: Any, receiver: QObject, pool: QThreadPool | None = None
    ) -> None:
        self.service = service
        self.receiver = receiver
        self._pool = pool or QThreadPool.globalInstance()
        self._lock = Lock()
        self._in_flight: set[str] = set()
        self._pending: dict[str, _PendingPreview] = {}

    def request_preview(self, slot: str, item: PhotoItem, typography: TypographySettings) -> str:
        """Request a preview of `item` for `slot`. Returns the token string."""
        key = self.service.preview_key(item, typography)
        token = f"preview|{slot}|{key}"
        request = _PendingPreview(item=item, typography=typography, token=token)
        with self._lock:
            if slot in self._in_flight:
                self._pending[slot] = request
                return token
            self._in_flight.add(slot)
        self._start(slot, request)
        return token

    def is_busy(self, slot: str) -> bool:
        """True while a render for `slot` is running or queued."""
        with self._lock:
            return slot in self._in_flight

    def finished(self, slot: str) -> None:
        """Called by tasks on completion; starts the newest queued request, if any."""
        with self._lock:
            request = self._pending.pop(slot, None)
            if request is None:
                self._in_flight.discard(slot)
                return
        self._start(slot, request)

    def _start(self, slot: str, request: _PendingPreview) -> None:
        self._pool.start(_PreviewTask(runner=self, slot=slot, request=request))
