"""Core session state: search history and result aggregation."""
from tunesearch.core.history import HistoryStore
from tunesearch.core.aggregator import ResultAggregator, PageState, SessionState

__all__ = [
    "HistoryStore",
    "ResultAggregator",
    "PageState",
    "SessionState",
]
