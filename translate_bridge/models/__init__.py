"""Data records for the translation bridge."""

from .translation import TranslationItem, TranslationOptions, BatchResult
from .health import HealthSnapshot
from .process import ProcessResult

__all__ = ['TranslationItem', 'TranslationOptions', 'BatchResult', 'HealthSnapshot', 'ProcessResult']
