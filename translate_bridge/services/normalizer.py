"""Validate and clip raw request items before they reach the cache or codex."""

import logging

from translate_bridge.constants import TRUNCATION_MARKER
from translate_bridge.models import TranslationItem

logger = logging.getLogger(__name__)


def clip_text(text: str, max_chars: int) -> str:
    """Clip ``text`` to ``max_chars`` characters plus a visible marker."""
    if len(text) <= max_chars:
        return text
    return f"{text[:max_chars]}{TRUNCATION_MARKER}"


def normalize_items(raw_items, max_chars_per_item: int) -> list[TranslationItem]:
    """
    Turn the request's ``items`` into an ordered list of unique items.

    Rules:
    - entries that are not objects, or whose text is empty after trimming, are dropped
    - a non-empty caller id is kept; otherwise ``item-<position>`` is generated
    - generated ids never reuse a caller id, wherever it appears in the list
    - a later entry reusing a caller id that is already taken is dropped
    - text longer than ``max_chars_per_item`` is clipped with a marker

    Never raises; an unusable payload simply yields an empty list.
    """
    if not isinstance(raw_items, list):
        return []

    candidates = []
    for index, current in enumerate(raw_items):
        if not isinstance(current, dict):
            continue

        text = current.get('text')
        text = text.replace('\r\n', '\n').strip() if isinstance(text, str) else ''
        if not text:
            continue

        raw_id = current.get('id')
        caller_id = raw_id.strip() if isinstance(raw_id, str) and raw_id.strip() else None
        candidates.append((index, caller_id, text))

    # Caller ids are reserved before any id is generated
    reserved = {caller_id for _, caller_id, _ in candidates if caller_id}

    items = []
    taken = set()

    for index, caller_id, text in candidates:
        if caller_id:
            if caller_id in taken:
                logger.debug(f"Dropping duplicate item id={caller_id}")
                continue
            item_id = caller_id
        else:
            item_id = _generated_id(index, taken | reserved)

        taken.add(item_id)
        items.append(TranslationItem(id=item_id, text=clip_text(text, max_chars_per_item)))

    return items


def _generated_id(index: int, unavailable: set) -> str:
    base = f"item-{index + 1}"
    candidate = base
    suffix = 2
    while candidate in unavailable:
        candidate = f"{base}-{suffix}"
        suffix += 1
    return candidate
