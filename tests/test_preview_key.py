from __future__ import annotations

from dataclasses import replace

import pytest

from core.models import RGBA, TypographySettings
from core.services.preview_key import compute_preview_key

BASE = TypographySettings()


def _key(photo_id="p1", line1="08 Sep 2025", line2="", typography=BASE) -> str:
    return compute_preview_key(photo_id, line1, line2, typography)


def test_equal_inputs_give_equal_keys() -> None:
    assert _key() == _key(typography=TypographySettings())


@pytest.mark.parametrize(
    "changes",
    [
        {"photo_id": "p2"},
        {"line1": "09 Sep 2025"},
        {"line2": "with friends"},
    ],
)
def test_caption_and_identity_change_the_key(changes) -> None:
    assert _key(**changes) != _key()


@pytest.mark.parametrize(
    "field, value",
    [
        ("line1_font", "Georgia"),
        ("line2_font", "Patrick Hand"),
        ("line1_size", 64.0),
        ("line2_size", 70.0),
        ("line1_kern", 0.0),
        ("line2_kern", 2.0),
        ("line2_baseline", 0.0),
        ("text_color", RGBA(0, 0, 128)),
    ],
)
def test_typography_changes_the_key(field, value) -> None:
    assert _key(typography=replace(BASE, **{field: value})) != _key()


def test_parts_do_not_run_together() -> None:
    assert _key(line1="ab", line2="c") != _key(line1="a", line2="bc")
