"""
qshell - Console support library for query shells

Renders results as text tables, keeps command history between
sessions and loads XML datastore/connector manifests.
"""

__version__ = "1.0.0"

from .core.renderer import render_result
from .history.store import HistoryStore, load_history, save_history
from .manifest.parser import parse_manifest, parse_manifest_file, ManifestError

__all__ = [
    "render_result",
    "HistoryStore", "load_history", "save_history",
    "parse_manifest", "parse_manifest_file", "ManifestError",
]
