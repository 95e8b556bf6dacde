from __future__ import annotations

import threading

from PIL import Image
from PySide6.QtCore import QCoreApplication, QThreadPool
import pytest

from app.views.preview_tasks import PreviewTaskRunner
from core.models import PhotoItem, RenderResult, TypographySettings

TYPOGRAPHY = TypographySettings()


class RecordingSignal:
    def __init__(self) -> None:
        self.emitted: list[tuple[str, str, object]] = []
        self._lock = threading.Lock()

    def emit(self, token, slot, image) -> None:
        with self._lock:
            self.emitted.append((token, slot, image))


class FakeReceiver:
    def __init__(self) -> None:
        self.previewRendered = RecordingSignal()


class GatedService:
    """Preview service whose first render blocks until released."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.gate = threading.Event()
        self.started = threading.Event()
        self.rendered: list[str] = []

    def preview_key(self, item, typography) -> str:
        return item.line1

    def get_preview(self, item, typography) -> RenderResult:
        self.started.set()
        self.gate.wait(timeout=5)
        self.rendered.append(item.line1)
        if self.fail:
            return RenderResult()
        return RenderResult(image=Image.new("RGBA", (30, 20), (255, 255, 255, 255)))


@pytest.fixture(scope="module", autouse=True)
def qt_app():
    return QCoreApplication.instance() or QCoreApplication([])


@pytest.fixture
def pool():
    pool = QThreadPool()
    pool.setMaxThreadCount(2)
    yield pool
    pool.waitForDone()


def _item(line1: str) -> PhotoItem:
    return PhotoItem(photo_id="p", file_path="/p.jpg", line1=line1)


def test_token_format(pool) -> None:
    service = GatedService()
    service.gate.set()
    runner = PreviewTaskRunner(service=service, receiver=FakeReceiver(), pool=pool)

    token = runner.request_preview("left", _item("k1"), TYPOGRAPHY)

    assert token == "preview|left|k1"


def test_latest_request_replaces_queued_ones(pool) -> None:
    service = GatedService()
    receiver = FakeReceiver()
    runner = PreviewTaskRunner(service=service, receiver=receiver, pool=pool)

    runner.request_preview("slot", _item("first"), TYPOGRAPHY)
    assert service.started.wait(timeout=5)
    runner.request_preview("slot", _item("second"), TYPOGRAPHY)
    runner.request_preview("slot", _item("third"), TYPOGRAPHY)
    assert runner.is_busy("slot")

    service.gate.set()
    pool.waitForDone()

    assert service.rendered == ["first", "third"]
    tokens = [token for token, _, _ in receiver.previewRendered.emitted]
    assert tokens == ["preview|slot|first", "preview|slot|third"]
    assert not runner.is_busy("slot")
    image = receiver.previewRendered.emitted[-1][2]
    assert (image.width(), image.height()) == (30, 20)


def test_failed_render_delivers_placeholder(pool) -> None:
    service = GatedService(fail=True)
    service.gate.set()
    receiver = FakeReceiver()
    runner = PreviewTaskRunner(service=service, receiver=receiver, pool=pool)

    runner.request_preview("slot", _item("broken"), TYPOGRAPHY)
    pool.waitForDone()

    (token, slot, image) = receiver.previewRendered.emitted[0]
    assert token == "preview|slot|broken"
    assert slot == "slot"
    assert (image.width(), image.height()) == (64, 64)
