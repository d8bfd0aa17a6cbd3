"""History module - Console history persistence"""

from .store import HistoryStore, load_history, save_history, default_history_file

__all__ = ['HistoryStore', 'load_history', 'save_history', 'default_history_file']
