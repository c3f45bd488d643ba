"""Batch translation through the codex CLI, with caching and per-item fallback."""

import json
import logging
import time

from translate_bridge.models import TranslationOptions, BatchResult
from translate_bridge.services.cache import cache_key
from translate_bridge.services.extractor import extract_results
from translate_bridge.services.normalizer import normalize_items
from translate_bridge.utils.errors import (
    BadRequest,
    ServiceUnavailable,
    UpstreamTimeout,
    UpstreamFailure,
    ParseFailure,
    tail,
)

logger = logging.getLogger(__name__)

PROVIDER = 'openai-codex-auth'

TONE_INSTRUCTIONS = {
    'faithful': 'Translate conservatively. Keep sentence structure and terminology close to the source.',
    'concise': 'Translate naturally but keep the output concise and compact.',
    'natural': 'Translate naturally with fluent target-language phrasing while preserving meaning.',
}

MODE_INSTRUCTIONS = {
    'translation-only': 'Only output the translated text without adding source-language fragments.',
    'bilingual': 'Output should read well as bilingual reading support context.',
}


def chunk(items, size):
    """Split ``items`` into consecutive lists of at most ``size``."""
    return [items[index:index + size] for index in range(0, len(items), size)]


def build_prompt(options: TranslationOptions, items) -> str:
    """Build the codex prompt for one chunk of items."""
    source = 'auto-detect' if options.source_lang == 'auto' else options.source_lang
    payload = json.dumps([item.to_dict() for item in items], ensure_ascii=False)

    return '\n'.join([
        'You are a translation engine.',
        f'Task: translate text from {source} to {options.target_lang}.',
        TONE_INSTRUCTIONS.get(options.tone, TONE_INSTRUCTIONS['natural']),
        MODE_INSTRUCTIONS.get(options.mode, MODE_INSTRUCTIONS['bilingual']),
        'Output constraints:',
        '1) Return ONLY strict JSON, no markdown and no extra text.',
        '2) Use exactly this schema: {"results":[{"id":"string","translatedText":"string"}]}',
        '3) Each input id must appear exactly once in results.',
        '4) Preserve URLs, code snippets, numbers, and proper nouns unless translation is clearly needed.',
        'Input:',
        payload,
    ])


class TranslationService:
    """
    Per-request pipeline:

        normalize -> health gate -> partition (cache hit / pending)
                  -> for each chunk: invoke codex -> extract -> merge
                  -> assemble

    Chunks of one request run one after another; codex is a single logged-in
    session. A chunk-level failure (timeout, failed run, unparseable output)
    fails the whole request. A missing id inside an otherwise good chunk only
    produces a warning and falls back to the source text.
    """

    def __init__(self, cache, health_monitor, codex):
        self.cache = cache
        self.health_monitor = health_monitor
        self.codex = codex

    def translate_batch(self, payload: dict) -> dict:
        """
        Translate a ``/translate-batch`` request body.

        Args:
            payload: ``{sourceLang, targetLang, model?, mode?, tone?,
                batchSize?, maxCharsPerItem?, items: [{id?, text}]}``

        Returns:
            ``{ok, results: [{id, translatedText}], warnings, meta}`` with
            exactly one result per normalized item, in input order.

        Raises:
            BadRequest: no translatable items
            ServiceUnavailable: codex missing or not logged in
            UpstreamTimeout, UpstreamFailure, ParseFailure: a chunk failed
        """
        started = time.perf_counter()
        options = TranslationOptions.from_payload(payload)

        items = normalize_items(payload.get('items'), options.max_chars_per_item)
        if not items:
            raise BadRequest('No translatable items were provided')

        logger.info(
            f"[translate] items={len(items)} source={options.source_lang} target={options.target_lang} "
            f"batchSize={options.batch_size} model={options.model or 'default'}"
        )

        self._ensure_available()

        result_by_id = {}
        pending = []
        cache_hits = 0

        for item in items:
            cached = self.cache.get(cache_key(item.text, options))
            if cached is not None:
                result_by_id[item.id] = cached
                cache_hits += 1
            else:
                pending.append(item)

        warnings = []
        for batch in chunk(pending, options.batch_size):
            rows = self._translate_chunk(batch, options)
            parsed_by_id = {row.id: row.translated_text for row in rows}

            for item in batch:
                translated = parsed_by_id.get(item.id)
                if not translated:
                    logger.warning(f"Missing translation for id={item.id}")
                    warnings.append(f"Missing translation for id={item.id}; falling back to source text.")
                    result_by_id[item.id] = item.text
                    continue

                result_by_id[item.id] = translated
                self.cache.put(cache_key(item.text, options), translated)

        results = [
            BatchResult(id=item.id, translated_text=result_by_id.get(item.id) or item.text).to_dict()
            for item in items
        ]
        generated = len(items) - cache_hits

        logger.info(
            f"[translate] done items={len(items)} generated={generated} cacheHits={cache_hits} "
            f"durationMs={int((time.perf_counter() - started) * 1000)}"
        )

        return {
            'ok': True,
            'results': results,
            'warnings': warnings,
            'meta': {
                'provider': PROVIDER,
                'model': options.model or 'default',
                'total': len(items),
                'cacheHits': cache_hits,
                'generated': generated,
            },
        }

    def _ensure_available(self):
        """Pre-flight gate: refuse before spawning anything if codex is unusable."""
        health = self.health_monitor.snapshot()
        if not health.installed:
            raise ServiceUnavailable('codex CLI is not available. Install Codex CLI first.')
        if not health.logged_in:
            raise ServiceUnavailable(
                'OpenAI auth is not ready. Run `codex login` in terminal and complete ChatGPT sign-in.'
            )

    def _translate_chunk(self, batch, options: TranslationOptions) -> list[BatchResult]:
        prompt = build_prompt(options, batch)

        try:
            result = self.codex.exec_translation(prompt, options.model)
        except OSError as e:
            logger.error(f"Failed to start codex: {e}")
            raise UpstreamFailure(f"Failed to start codex exec: {e}") from e

        if result.timed_out:
            logger.error(f"codex exec timed out for {len(batch)} item(s)")
            raise UpstreamTimeout('Codex request timed out')

        if result.exit_code != 0 and not result.output_text:
            details = tail(result.stderr_text, 20)
            logger.error(f"codex exec failed (exit {result.exit_code})")
            raise UpstreamFailure(f"Codex exec failed (exit {result.exit_code}). {details}".strip())

        try:
            return extract_results(result.output_text, batch)
        except ParseFailure as e:
            details = tail(result.stderr_text, 12)
            logger.error(f"Could not parse codex output for {len(batch)} item(s)")
            message = f"{e.message} | stderr: {details}" if details else e.message
            raise ParseFailure(message) from e
