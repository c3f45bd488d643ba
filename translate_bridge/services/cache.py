"""In-memory translation cache shared by all requests of the process."""

import hashlib
import threading

DEFAULT_MAX_ENTRIES = 3000


def cache_key(text: str, options) -> str:
    """Generate the cache key for ``text`` translated under ``options``.

    Every option that affects the output is part of the key, so a translation
    made for another language pair, model, mode or tone is never reused.
    """
    parts = [
        options.source_lang,
        options.target_lang,
        options.model or '',
        options.mode,
        options.tone,
        text,
    ]
    return hashlib.sha256('\u0001'.join(parts).encode('utf-8')).hexdigest()


class TranslationCache:
    """Bounded mapping of cache key -> translated text.

    When full, the oldest-inserted entry is evicted to admit a new one.
    Reads do not refresh an entry's position. Eviction and insertion happen
    as one step under the lock, so overlapping requests cannot double-evict.
    """

    def __init__(self, max_entries: int = DEFAULT_MAX_ENTRIES):
        if max_entries < 1:
            raise ValueError('max_entries must be at least 1')
        self.max_entries = max_entries
        self._entries = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._entries.get(key)

    def put(self, key: str, value: str):
        with self._lock:
            if key not in self._entries and len(self._entries) >= self.max_entries:
                oldest = next(iter(self._entries))
                del self._entries[oldest]
            self._entries[key] = value

    def clear(self):
        with self._lock:
            self._entries.clear()

    def __contains__(self, key):
        with self._lock:
            return key in self._entries

    def __len__(self):
        with self._lock:
            return len(self._entries)
