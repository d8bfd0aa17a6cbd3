"""
Result Module - Structured results handed to the console for display

A result is one of:
- QueryResult: a page of rows with column metadata
- CommandResult: plain text answer to a shell command
- ConnectResult: session opened against the server
- MetadataResult: outcome of a catalog/table operation
- StorageResult: outcome of an insert/delete style operation
- ErrorResult: error reported by the server

Every variant carries a ResultType tag the renderer dispatches on.
"""

from enum import Enum, auto
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional


class ResultType(Enum):
    """Kinds of results a console can receive"""
    QUERY = auto()
    COMMAND = auto()
    CONNECT = auto()
    METADATA = auto()
    STORAGE = auto()
    ERROR = auto()


class ErrorType(Enum):
    """Origin of an error result"""
    PARSING = auto()
    VALIDATION = auto()
    EXECUTION = auto()
    CONNECTION = auto()
    NOT_SUPPORTED = auto()


class ResultSetError(ValueError):
    """Rows of a result set do not match its declared columns"""
    pass


# ============================================================================
# Result set
# ============================================================================

@dataclass(frozen=True)
class ColumnName:
    """Column name as stored, plus the alias requested by the query"""
    name: str
    alias: Optional[str] = None

    @property
    def column_name_to_show(self) -> str:
        return self.alias if self.alias else self.name


@dataclass(frozen=True)
class ColumnMetadata:
    """Describes one column of a result set"""
    name: ColumnName
    column_type: Optional[str] = None

    @classmethod
    def of(cls, name: str, alias: Optional[str] = None,
           column_type: Optional[str] = None) -> 'ColumnMetadata':
        return cls(ColumnName(name, alias), column_type)


@dataclass(frozen=True)
class Cell:
    """A single value of a row"""
    value: Any

    def __str__(self) -> str:
        if self.value is None:
            return "null"
        return str(self.value)


@dataclass
class Row:
    """Cells of a row keyed by column internal name"""
    cells: Dict[str, Cell] = field(default_factory=dict)

    @classmethod
    def of(cls, values: Dict[str, Any]) -> 'Row':
        """Build a row from plain values, wrapping them in cells"""
        return cls({key: value if isinstance(value, Cell) else Cell(value)
                    for key, value in values.items()})

    def get_cell(self, name: str) -> Cell:
        return self.cells[name]


@dataclass
class ResultSet:
    """Ordered rows plus the metadata of their columns"""
    rows: List[Row] = field(default_factory=list)
    column_metadata: List[ColumnMetadata] = field(default_factory=list)

    @classmethod
    def of(cls, columns: List[Any], rows: List[Dict[str, Any]]) -> 'ResultSet':
        """
        Build a result set from column names and row dictionaries.

        Args:
            columns: Column names, or ColumnMetadata instances
            rows: One dictionary per row, keyed by column name

        Returns:
            A new ResultSet
        """
        metadata = [col if isinstance(col, ColumnMetadata) else ColumnMetadata.of(col)
                    for col in columns]
        return cls([Row.of(row) for row in rows], metadata)

    def column_names(self) -> List[str]:
        return [col.name.name for col in self.column_metadata]

    def is_empty(self) -> bool:
        return not self.rows

    def __iter__(self) -> Iterator[Row]:
        return iter(self.rows)

    def __len__(self) -> int:
        return len(self.rows)


# ============================================================================
# Results
# ============================================================================

@dataclass(frozen=True)
class QueryResult:
    """One page of rows returned by a query"""
    result_set: ResultSet
    last_result_set: bool = True
    result_page: int = 0
    query_id: str = ""
    result_type: ResultType = field(default=ResultType.QUERY, init=False)


@dataclass(frozen=True)
class CommandResult:
    """Textual answer to a console command"""
    result: str
    result_type: ResultType = field(default=ResultType.COMMAND, init=False)


@dataclass(frozen=True)
class ConnectResult:
    """Session established with the server"""
    session_id: str
    result_type: ResultType = field(default=ResultType.CONNECT, init=False)


@dataclass(frozen=True)
class MetadataResult:
    """Outcome of an operation on catalogs or tables"""
    operation: str
    target: str = ""
    result_type: ResultType = field(default=ResultType.METADATA, init=False)

    def __str__(self) -> str:
        if self.target:
            return f"{self.operation} {self.target} OK"
        return f"{self.operation} OK"


@dataclass(frozen=True)
class StorageResult:
    """Outcome of a storage operation (insert, delete, truncate...)"""
    message: str
    result_type: ResultType = field(default=ResultType.STORAGE, init=False)

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class ErrorResult:
    """Error reported while processing a statement"""
    error_message: str
    error_type: ErrorType = ErrorType.EXECUTION
    result_type: ResultType = field(default=ResultType.ERROR, init=False)
