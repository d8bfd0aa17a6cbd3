"""
History Store - Keeps console history between sessions

History lives in a plain UTF-8 file, one statement per line:

    19/10/2026 10:15:02|SELECT * FROM users;

Features:
- Entries older than the retention window are dropped on load
- Corrupt lines are skipped, the rest of the file still loads
- Statements of a session are appended on save
"""

import logging
import os
from datetime import datetime, timedelta
from typing import Iterable, List, Optional

_log = logging.getLogger(__name__)

# Number of days a history entry is kept
DAYS_HISTORY_ENTRY_VALID = 30

DEFAULT_DATE_FORMAT = "%d/%m/%Y %H:%M:%S"
HISTORY_DIR_NAME = ".qshell"
HISTORY_FILE_NAME = "history.txt"
SEPARATOR = "|"


def default_history_file(home: Optional[str] = None) -> str:
    """Path of the history file under the user's home directory"""
    home = home or os.path.expanduser("~")
    return os.path.join(home, HISTORY_DIR_NAME, HISTORY_FILE_NAME)


def load_history(
    path: str,
    now: Optional[datetime] = None,
    date_format: str = DEFAULT_DATE_FORMAT,
    retention_days: int = DAYS_HISTORY_ENTRY_VALID,
    logger: Optional[logging.Logger] = None,
) -> List[str]:
    """
    Read the statements still inside the retention window.

    The file and its directory are created when missing.

    Args:
        path: History file
        now: Reference time for expiry (defaults to the current time)
        date_format: strptime pattern of the timestamps
        retention_days: Entries this many whole days old or older are dropped
        logger: Logger to report to (defaults to this module's logger)

    Returns:
        Statements in file order

    Raises:
        OSError: If the file can't be opened or read
    """
    log = logger or _log
    now = now or datetime.now()

    _ensure_file(path, log)
    log.debug("Retrieving history from %s", os.path.abspath(path))

    statements = []
    with open(path, 'rb') as f:
        for line_no, raw in enumerate(f, 1):
            try:
                line = raw.decode('utf-8').rstrip('\r\n')
            except UnicodeDecodeError as e:
                log.warning("Skipping history line %d: %s", line_no, e)
                continue

            if not line:
                continue

            timestamp, sep, statement = line.partition(SEPARATOR)
            if not sep:
                log.warning("Skipping history line %d: no separator", line_no)
                continue

            try:
                entry_date = datetime.strptime(timestamp, date_format)
            except ValueError as e:
                log.warning("Cannot parse date in history line %d: %s", line_no, e)
                continue

            if _age(now, entry_date).days < retention_days:
                statements.append(statement)

    log.info("History retrieved")
    return statements


def save_history(
    path: str,
    entries: Iterable[str],
    now: Optional[datetime] = None,
    date_format: str = DEFAULT_DATE_FORMAT,
    logger: Optional[logging.Logger] = None,
) -> None:
    """
    Append the statements of a session to the history file.

    Every entry is stamped with the same save time. Line breaks inside
    a statement are replaced by spaces.

    Raises:
        OSError: If the file can't be created or written
    """
    log = logger or _log
    now = now or datetime.now()
    if '%z' in date_format and now.tzinfo is None:
        now = now.astimezone()
    stamp = now.strftime(date_format)

    count = 0
    with open(path, 'a', encoding='utf-8') as f:
        for entry in entries:
            f.write(f"{stamp}{SEPARATOR}{_single_line(entry)}\n")
            count += 1
        f.flush()

    log.debug("Saved %d history entries to %s", count, path)


def _age(now: datetime, entry_date: datetime) -> timedelta:
    """Time elapsed since an entry, comparing naive and aware times in local time"""
    if entry_date.tzinfo is not None:
        return now.astimezone(entry_date.tzinfo) - entry_date
    if now.tzinfo is not None:
        now = now.astimezone().replace(tzinfo=None)
    return now - entry_date


def _single_line(statement: str) -> str:
    return ' '.join(statement.splitlines())


def _ensure_file(path: str, log: logging.Logger) -> None:
    """Create the history file and its directory if they don't exist"""
    directory = os.path.dirname(path)
    if directory and not os.path.isdir(directory):
        try:
            os.makedirs(directory, exist_ok=True)
        except OSError as e:
            log.error("Cannot create history directory %s: %s", os.path.abspath(directory), e)

    if not os.path.exists(path):
        try:
            open(path, 'a', encoding='utf-8').close()
        except OSError as e:
            log.error("Cannot create history file %s: %s", os.path.abspath(path), e)


class HistoryStore:
    """
    History file bound to a format and retention window.

    Usage:
        store = HistoryStore()
        console.history = store.load()
        ...
        store.save(console.history)
    """

    def __init__(
        self,
        path: Optional[str] = None,
        date_format: str = DEFAULT_DATE_FORMAT,
        retention_days: int = DAYS_HISTORY_ENTRY_VALID,
        logger: Optional[logging.Logger] = None,
    ):
        self.path = path or default_history_file()
        self.date_format = date_format
        self.retention_days = retention_days
        self.logger = logger or _log

    def load(self, now: Optional[datetime] = None) -> List[str]:
        """Statements of previous sessions still inside the retention window"""
        return load_history(self.path, now, self.date_format,
                            self.retention_days, self.logger)

    def save(self, entries: Iterable[str], now: Optional[datetime] = None) -> None:
        save_history(self.path, entries, now, self.date_format, self.logger)

    def retrieve(self, console, now: Optional[datetime] = None) -> str:
        """
        Replace a console's history with the stored one.

        Args:
            console: Any object with a `history` list attribute

        Returns:
            Path of the history file
        """
        console.history = self.load(now)
        return self.path

    def persist(self, console, now: Optional[datetime] = None) -> None:
        """Append a console's history to the file"""
        self.save(list(console.history), now)
