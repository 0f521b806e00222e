from __future__ import annotations

from ..core.constants import DISPLAY_ID_WIDTH


def next_display_id(prefix: str, existing_count: int) -> str:
    """``BRI006`` for the sixth record; based on a count snapshot, so not unique under concurrent creates."""
    return f"{prefix}{existing_count + 1:0{DISPLAY_ID_WIDTH}d}"
