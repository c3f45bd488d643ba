"""Cached view of whether the codex CLI is installed and logged in."""

import logging
import re
import threading
import time
from datetime import datetime, timezone

from translate_bridge.models import HealthSnapshot
from translate_bridge.services.codex import sanitize_output

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 10

LOGGED_IN = re.compile(r'logged in', re.IGNORECASE)
NOT_LOGGED_IN = re.compile(r'not logged in', re.IGNORECASE)


class HealthMonitor:
    """Check codex installation and login state, caching the result for a TTL.

    Purely observational: checking never touches translation state. The
    TTL check and the refresh run under one lock, so overlapping requests
    share a single check instead of racing.
    """

    def __init__(self, codex, ttl_seconds: float = DEFAULT_TTL_SECONDS, clock=time.monotonic):
        self.codex = codex
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._snapshot = None
        self._snapshot_at = 0.0
        self._lock = threading.Lock()

    def snapshot(self, force: bool = False) -> HealthSnapshot:
        """Return a snapshot younger than the TTL, checking again if needed.

        ``force=True`` always runs the checks.
        """
        with self._lock:
            if (
                not force
                and self._snapshot is not None
                and self._clock() - self._snapshot_at < self.ttl_seconds
            ):
                return self._snapshot

            snapshot = self._check()
            # Stamped once the checks have finished
            snapshot.captured_at = datetime.now(timezone.utc)
            self._snapshot = snapshot
            self._snapshot_at = self._clock()
            return snapshot

    def _check(self) -> HealthSnapshot:
        snapshot = HealthSnapshot()

        try:
            version = self.codex.version()
        except OSError as e:
            logger.warning(f"codex version check failed: {e}")
            snapshot.message = f"Failed to run codex: {e}"
            return snapshot

        if version.exit_code == 0 and not version.timed_out:
            snapshot.installed = True
            snapshot.version = sanitize_output(version.stdout_text) or sanitize_output(version.stderr_text)

        try:
            login = self.codex.login_status()
        except OSError as e:
            logger.warning(f"codex login check failed: {e}")
            snapshot.message = f"Failed to check login status: {e}"
            return snapshot

        combined = sanitize_output(f"{login.stdout_text}\n{login.stderr_text}")
        snapshot.message = combined or 'No login status returned'
        snapshot.logged_in = bool(LOGGED_IN.search(combined)) and not NOT_LOGGED_IN.search(combined)

        logger.info(f"codex health: installed={snapshot.installed} logged_in={snapshot.logged_in}")
        return snapshot
