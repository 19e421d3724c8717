"""Host queries used by collectors"""
from .base import CollectionStrategy, StrategyResult, StrategyStatus, ProcessLister, LogWindowReader
from .host import PgrepProcessLister, JournalctlLogReader

__all__ = [
    'CollectionStrategy',
    'StrategyResult',
    'StrategyStatus',
    'ProcessLister',
    'LogWindowReader',
    'PgrepProcessLister',
    'JournalctlLogReader',
]
