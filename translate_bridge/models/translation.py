"""Translation request and result records."""

from dataclasses import dataclass

from translate_bridge.constants import (
    DEFAULT_SOURCE_LANG,
    DEFAULT_TARGET_LANG,
    DEFAULT_BATCH_SIZE,
    MIN_BATCH_SIZE,
    MAX_BATCH_SIZE,
    DEFAULT_MAX_CHARS,
    MIN_MAX_CHARS,
    MAX_MAX_CHARS,
    normalize_mode,
    normalize_tone,
    clamp_int,
)


@dataclass(frozen=True)
class TranslationItem:
    """One text fragment to translate. ``id`` is unique within a request."""

    id: str
    text: str

    def to_dict(self):
        return {'id': self.id, 'text': self.text}


@dataclass(frozen=True)
class BatchResult:
    """One translated fragment, keyed by the id of its source item."""

    id: str
    translated_text: str

    def to_dict(self):
        return {'id': self.id, 'translatedText': self.translated_text}


@dataclass(frozen=True)
class TranslationOptions:
    """Options that shape a translation. Every field that changes the output
    must also be part of the cache key (see ``services.cache.cache_key``)."""

    source_lang: str = DEFAULT_SOURCE_LANG
    target_lang: str = DEFAULT_TARGET_LANG
    model: str = ''
    mode: str = 'bilingual'
    tone: str = 'natural'
    batch_size: int = DEFAULT_BATCH_SIZE
    max_chars_per_item: int = DEFAULT_MAX_CHARS

    @classmethod
    def from_payload(cls, payload: dict) -> 'TranslationOptions':
        """Build options from a request body, defaulting and clamping fields."""
        source_lang = payload.get('sourceLang')
        target_lang = payload.get('targetLang')
        model = payload.get('model')

        return cls(
            source_lang=source_lang if isinstance(source_lang, str) and source_lang.strip() else DEFAULT_SOURCE_LANG,
            target_lang=target_lang if isinstance(target_lang, str) and target_lang.strip() else DEFAULT_TARGET_LANG,
            model=model.strip() if isinstance(model, str) else '',
            mode=normalize_mode(payload.get('mode')),
            tone=normalize_tone(payload.get('tone')),
            batch_size=clamp_int(payload.get('batchSize'), MIN_BATCH_SIZE, MAX_BATCH_SIZE, DEFAULT_BATCH_SIZE),
            max_chars_per_item=clamp_int(
                payload.get('maxCharsPerItem'), MIN_MAX_CHARS, MAX_MAX_CHARS, DEFAULT_MAX_CHARS
            ),
        )
