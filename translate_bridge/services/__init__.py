"""Core services of the translation bridge.

- normalizer: validate and clip request items
- cache: bounded in-memory translation cache
- extractor: recover result rows from raw codex output
- process_runner: subprocess lifecycle with timeout escalation
- codex: codex CLI invocations
- health: cached codex install/login snapshot
- translation: the batch orchestrator tying the above together
"""

from translate_bridge.services.cache import TranslationCache
from translate_bridge.services.codex import CodexCli
from translate_bridge.services.health import HealthMonitor
from translate_bridge.services.process_runner import ProcessRunner
from translate_bridge.services.translation import TranslationService


def build_translation_service(config, runner=None) -> TranslationService:
    """Construct the process-wide service state from app config.

    Called once per app; tests pass a fake ``runner`` so the codex CLI is
    never spawned.
    """
    codex = CodexCli(
        runner or ProcessRunner(),
        binary=config.get('CODEX_BIN', 'codex'),
        exec_timeout=config.get('REQUEST_TIMEOUT_SECONDS', 120),
    )
    return TranslationService(
        cache=TranslationCache(max_entries=config.get('CACHE_MAX_ENTRIES', 3000)),
        health_monitor=HealthMonitor(codex, ttl_seconds=config.get('HEALTH_TTL_SECONDS', 10)),
        codex=codex,
    )


__all__ = [
    'TranslationCache',
    'CodexCli',
    'HealthMonitor',
    'ProcessRunner',
    'TranslationService',
    'build_translation_service',
]
