"""Recover ``{id -> translatedText}`` rows from raw codex output.

Codex is asked for strict JSON, but the text it returns is not a contract:
it may be clean JSON, JSON inside a fenced block, JSON wrapped in prose, a
differently shaped JSON value, or plain text. Candidates are tried in this
order and the first one that yields at least one row wins:

1. the whole trimmed output
2. the inner content of each fenced block (```json ... ```)
3. each top-level balanced ``{...}`` / ``[...]`` slice, scanning left to right

If nothing structured yields a row and the batch holds a single item, the
whole output is that item's translation. Otherwise ``ParseFailure``.
"""

import json
import logging
import re

from translate_bridge.models import BatchResult
from translate_bridge.utils.errors import ParseFailure, tail

logger = logging.getLogger(__name__)

FENCED_BLOCK = re.compile(r'```[A-Za-z0-9_+-]*[ \t]*\n?(.*?)```', re.DOTALL)

OPENERS = {'{': '}', '[': ']'}
TEXT_FIELDS = ('translatedText', 'translation', 'text')

EXCERPT_LINES = 12


def slice_balanced(text: str, start: int) -> str | None:
    """Return the balanced JSON-looking slice opening at ``text[start]``.

    Braces and brackets inside string literals are ignored; inside a string a
    backslash escapes the next character, so ``\\"`` does not end it. A
    mismatched or unexpected closer aborts the scan.
    """
    stack = []
    in_string = False
    escaped = False

    for index in range(start, len(text)):
        char = text[index]

        if in_string:
            if escaped:
                escaped = False
            elif char == '\\':
                escaped = True
            elif char == '"':
                in_string = False
            continue

        if char == '"':
            in_string = True
        elif char in OPENERS:
            stack.append(OPENERS[char])
        elif char in ('}', ']'):
            if not stack or stack.pop() != char:
                return None
            if not stack:
                return text[start:index + 1]

    return None


def _loads(candidate):
    try:
        return True, json.loads(candidate)
    except ValueError:
        return False, None


def iter_candidates(output: str):
    """Yield parsed JSON values found in ``output``, in priority order.

    The balanced scan only considers top-level slices: once a slice parses,
    scanning resumes after its end, so values nested inside it (e.g. a list
    of strings under an unrelated key) are never tried on their own.
    """
    ok, parsed = _loads(output)
    if ok:
        yield parsed

    for match in FENCED_BLOCK.finditer(output):
        fenced = match.group(1).strip()
        if fenced:
            ok, parsed = _loads(fenced)
            if ok:
                yield parsed

    index = 0
    while index < len(output):
        if output[index] not in OPENERS:
            index += 1
            continue
        candidate = slice_balanced(output, index)
        ok, parsed = _loads(candidate) if candidate else (False, None)
        if not ok:
            index += 1
            continue
        yield parsed
        index += len(candidate)


def _resolve_id(row: dict, index: int, batch_items) -> str | None:
    row_id = row.get('id')
    if isinstance(row_id, bool):
        return None
    if isinstance(row_id, str):
        return row_id.strip()
    if isinstance(row_id, int):
        return str(row_id)
    if row_id is None and index < len(batch_items):
        return batch_items[index].id
    return None


def _resolve_text(row: dict) -> str:
    for field in TEXT_FIELDS:
        value = row.get(field)
        if isinstance(value, str):
            return value
    return ''


def normalize_rows(parsed, batch_items) -> list[BatchResult]:
    """Normalize a parsed JSON value into result rows.

    Accepted shapes: a bare list, or an object with a ``results`` or
    ``translations`` list. A row is either a string (paired with the batch
    item at the same position) or an object with ``id`` and one of
    ``translatedText`` / ``translation`` / ``text``. The first row for an id
    wins; rows with an empty id or blank text are dropped.
    """
    rows = []
    if isinstance(parsed, list):
        rows = parsed
    elif isinstance(parsed, dict):
        if isinstance(parsed.get('results'), list):
            rows = parsed['results']
        elif isinstance(parsed.get('translations'), list):
            rows = parsed['translations']

    normalized = []
    seen = set()

    for index, row in enumerate(rows):
        if isinstance(row, str):
            if index >= len(batch_items):
                continue
            row_id, text = batch_items[index].id, row
        elif isinstance(row, dict):
            row_id, text = _resolve_id(row, index, batch_items), _resolve_text(row)
        else:
            continue

        text = text.strip()
        if not row_id or not text or row_id in seen:
            continue

        seen.add(row_id)
        normalized.append(BatchResult(id=row_id, translated_text=text))

    return normalized


def extract_results(raw_output: str, batch_items) -> list[BatchResult]:
    """Recover translation rows for ``batch_items`` from ``raw_output``.

    Raises:
        ParseFailure: the output is empty, or no strategy recovered a row
            for a multi-item batch. The message carries a bounded tail of
            the output, never all of it.
    """
    output = (raw_output or '').strip()
    if not output:
        raise ParseFailure('Codex returned empty output')

    for parsed in iter_candidates(output):
        rows = normalize_rows(parsed, batch_items)
        if rows:
            return rows

    if len(batch_items) == 1:
        logger.debug(f"No JSON in codex output, using raw text for id={batch_items[0].id}")
        text = output[1:] if output.startswith('"') else output
        text = text[:-1] if text.endswith('"') else text
        return [BatchResult(id=batch_items[0].id, translated_text=text.strip())]

    raise ParseFailure(
        f"Unable to parse Codex output as translation JSON. Output tail: {tail(output, EXCERPT_LINES)}"
    )
