"""
Console - Interactive shell and command line tool for qshell

Wires the renderer, the history store and the manifest parser
together. Statements are handed to an executor callable which
returns a result; the console only displays it.
"""

import json
import logging
import sys
from typing import Any, Callable, Dict, List, Optional

from .renderer import render_result
from .result import (
    CommandResult, ConnectResult, ErrorResult, MetadataResult, QueryResult,
    ResultSet, StorageResult, ColumnMetadata,
)
from ..history.store import (
    DAYS_HISTORY_ENTRY_VALID, DEFAULT_DATE_FORMAT, HistoryStore, default_history_file,
)
from ..manifest.parser import ManifestError, parse_manifest_file


def echo_executor(statement: str) -> CommandResult:
    """Default executor: hands the statement back"""
    return CommandResult(statement)


class QueryConsole:
    """
    Interactive console front-end.

    Features:
    - Multi-line statements (ending with ;)
    - History restored at startup and saved on exit
    - Special commands (.history, .help, .quit)
    """

    BANNER = """
qshell interactive console
Type .help for commands. Statements must end with a semicolon (;).
"""

    HELP = """
Special Commands:
  .help             Show this help message
  .history [n]      Show the last n statements (default 20)
  .quit / .exit     Exit the console
"""

    def __init__(self, store: HistoryStore,
                 executor: Callable[[str], Any] = echo_executor,
                 output=None):
        self.store = store
        self.executor = executor
        self.output = output or sys.stdout
        self.history: List[str] = []
        self.running = False
        self.buffer: List[str] = []

    def run(self, read_line: Callable[[str], str] = input) -> None:
        """Start the console loop."""
        self.store.retrieve(self)
        self.running = True
        self._print(self.BANNER)

        try:
            while self.running:
                try:
                    self.process_line(read_line(self._get_prompt()))
                except KeyboardInterrupt:
                    self._print("\n(Use .quit to exit)")
                except EOFError:
                    self._print("")
                    self.running = False
        finally:
            self.store.persist(self)

    def _get_prompt(self) -> str:
        if self.buffer:
            return "   ...> "
        return "qshell> "

    def process_line(self, line: str) -> None:
        """Handle one line of input."""
        line = line.strip()
        if not line:
            return

        if not self.buffer and line.startswith('.'):
            self._handle_command(line)
            return

        self.buffer.append(line)
        statement = ' '.join(self.buffer)
        if statement.rstrip().endswith(';'):
            self.buffer = []
            self.history.append(statement)
            self.execute(statement)

    def execute(self, statement: str) -> None:
        """Run a statement and display its result."""
        try:
            result = self.executor(statement)
        except Exception as e:
            result = ErrorResult(f"Error: {e}")
        self._print(render_result(result))

    def _handle_command(self, cmd: str) -> None:
        parts = cmd.split(None, 1)
        command = parts[0].lower()
        args = parts[1] if len(parts) > 1 else None

        if command in ('.quit', '.exit', '.q'):
            self._print("Goodbye!")
            self.running = False
        elif command == '.help':
            self._print(self.HELP)
        elif command == '.history':
            self._show_history(args)
        else:
            self._print(f"Unknown command: {command}")
            self._print("Type .help for available commands.")

    def _show_history(self, count: Optional[str]) -> None:
        try:
            n = int(count) if count else 20
        except ValueError:
            self._print("Usage: .history [n]")
            return
        for statement in self.history[-n:] if n > 0 else []:
            self._print(f"  {statement}")

    def _print(self, text: str) -> None:
        print(text, file=self.output)


def result_from_dict(data: Dict[str, Any]) -> Any:
    """
    Build a result from its JSON description.

    Example:
        {"type": "query", "columns": ["id", "name"],
         "rows": [{"id": 1, "name": "Alice"}], "last": true}

    Raises:
        ValueError: If the type is missing or unknown
    """
    kind = str(data.get('type', '')).lower()

    if kind == 'query':
        columns = [
            ColumnMetadata.of(col['name'], col.get('alias'), col.get('type'))
            if isinstance(col, dict) else col
            for col in data.get('columns', [])
        ]
        return QueryResult(ResultSet.of(columns, data.get('rows', [])),
                           last_result_set=data.get('last', True))
    elif kind == 'command':
        return CommandResult(data['result'])
    elif kind == 'connect':
        return ConnectResult(data['session_id'])
    elif kind == 'metadata':
        return MetadataResult(data['operation'], data.get('target', ''))
    elif kind == 'storage':
        return StorageResult(data['message'])
    elif kind == 'error':
        return ErrorResult(data['message'])

    raise ValueError(f"Unknown result type: {data.get('type')}")


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the command line tool."""
    import argparse

    parser = argparse.ArgumentParser(
        prog='qshell',
        description="qshell - Console support tools for query shells"
    )
    parser.add_argument(
        '--history-file',
        default=default_history_file(),
        help='History file (default: ~/.qshell/history.txt)'
    )
    parser.add_argument(
        '--date-format',
        default=DEFAULT_DATE_FORMAT,
        help='Timestamp format of the history file'
    )
    parser.add_argument(
        '--retention-days',
        type=int,
        default=DAYS_HISTORY_ENTRY_VALID,
        help='Days a history entry is kept (default: 30)'
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Log debug messages'
    )

    commands = parser.add_subparsers(dest='command')

    history_cmd = commands.add_parser('history', help='Show stored history')
    history_cmd.add_argument('-n', type=int, default=None, help='Only the last n statements')

    manifest_cmd = commands.add_parser('manifest', help='Validate a manifest file')
    manifest_cmd.add_argument('kind', choices=['datastore', 'connector'])
    manifest_cmd.add_argument('path')

    render_cmd = commands.add_parser('render', help='Render a JSON result description')
    render_cmd.add_argument('path')

    commands.add_parser('shell', help='Start the interactive console')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    store = HistoryStore(args.history_file, args.date_format, args.retention_days)

    if args.command == 'history':
        statements = store.load()
        if args.n is not None:
            statements = statements[-args.n:] if args.n > 0 else []
        for statement in statements:
            print(statement)
        return 0

    if args.command == 'manifest':
        try:
            manifest = parse_manifest_file(args.kind, args.path)
        except ManifestError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        print(manifest)
        return 0

    if args.command == 'render':
        try:
            with open(args.path, 'r', encoding='utf-8') as f:
                result = result_from_dict(json.load(f))
        except (OSError, ValueError, KeyError) as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        print(render_result(result))
        return 0

    QueryConsole(store).run()
    return 0


if __name__ == '__main__':
    sys.exit(main())
