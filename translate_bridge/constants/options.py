"""Translation option constants, the single source of truth for the bridge.

Must stay in sync with the extension's DEFAULT_SETTINGS.
"""

import math

TRANSLATION_MODES = {
    'bilingual',
    'translation-only',
}

TRANSLATION_TONES = {
    'natural',
    'faithful',
    'concise',
}

DEFAULT_SOURCE_LANG = 'auto'
DEFAULT_TARGET_LANG = 'zh-CN'
DEFAULT_MODE = 'bilingual'
DEFAULT_TONE = 'natural'

DEFAULT_BATCH_SIZE = 6
MIN_BATCH_SIZE = 1
MAX_BATCH_SIZE = 20

DEFAULT_MAX_CHARS = 1200
MIN_MAX_CHARS = 100
MAX_MAX_CHARS = 5000

TRUNCATION_MARKER = '...'


def normalize_mode(mode) -> str:
    """Return ``mode`` if it is a known mode, otherwise the default."""
    return mode if mode in TRANSLATION_MODES else DEFAULT_MODE


def normalize_tone(tone) -> str:
    """Return ``tone`` if it is a known tone, otherwise the default."""
    return tone if tone in TRANSLATION_TONES else DEFAULT_TONE


def clamp_int(value, minimum: int, maximum: int, default: int) -> int:
    """Clamp a numeric option into ``[minimum, maximum]``.

    Out-of-range numbers are clamped, not rejected. Anything that is not a
    finite number (strings, None, booleans, NaN) falls back to ``default``.
    Fractional values are floored.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    if isinstance(value, float) and not math.isfinite(value):
        if math.isnan(value):
            return default
        return maximum if value > 0 else minimum
    return min(maximum, max(minimum, math.floor(value)))
