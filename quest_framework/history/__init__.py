"""
History module - append-only session log.
"""

from quest_framework.history.store import HistoryStore

__all__ = ["HistoryStore"]
