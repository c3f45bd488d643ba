"""Shared constants for the translation bridge."""

from translate_bridge.constants.options import (
    TRANSLATION_MODES,
    TRANSLATION_TONES,
    DEFAULT_SOURCE_LANG,
    DEFAULT_TARGET_LANG,
    DEFAULT_BATCH_SIZE,
    MIN_BATCH_SIZE,
    MAX_BATCH_SIZE,
    DEFAULT_MAX_CHARS,
    MIN_MAX_CHARS,
    MAX_MAX_CHARS,
    TRUNCATION_MARKER,
    normalize_mode,
    normalize_tone,
    clamp_int,
)

__all__ = [
    'TRANSLATION_MODES',
    'TRANSLATION_TONES',
    'DEFAULT_SOURCE_LANG',
    'DEFAULT_TARGET_LANG',
    'DEFAULT_BATCH_SIZE',
    'MIN_BATCH_SIZE',
    'MAX_BATCH_SIZE',
    'DEFAULT_MAX_CHARS',
    'MIN_MAX_CHARS',
    'MAX_MAX_CHARS',
    'TRUNCATION_MARKER',
    'normalize_mode',
    'normalize_tone',
    'clamp_int',
]
