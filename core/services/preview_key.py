"""Fingerprints that decide when a cached preview bitmap is stale.

The key covers every input that changes preview pixels for a fixed preview
layout: photo identity, both caption lines and all typography settings.
"""

from __future__ import annotations

import hashlib

from core.models import TypographySettings


def compute_preview_key(
    photo_id: str, line1: str, line2: str, typography: TypographySettings
) -> str:
    """Return a stable hex digest for (photo, caption text, typography)."""
    color = typography.text_color
    line1_style = typography.line1_style()
    line2_style = typography.line2_style()
    parts = [
        photo_id,
        line1,
        line2,
        line1_style.font_family,
        line2_style.font_family,
        repr(float(line1_style.size_pt)),
        repr(float(line2_style.size_pt)),
        repr(float(line1_style.tracking_pt)),
        repr(float(line2_style.tracking_pt)),
        repr(float(line1_style.baseline_offset_pt)),
        repr(float(line2_style.baseline_offset_pt)),
        f"{int(color.red)},{int(color.green)},{int(color.blue)},{int(color.alpha)}",
    ]
    # Length-prefix each part so that ("ab", "c") and ("a", "bc") never collide.
    sig = "|".join(f"{len(p)}:{p}" for p in parts).encode("utf-8", errors="surrogatepass")
    return hashlib.sha1(sig).hexdigest()
