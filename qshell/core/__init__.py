"""Core module - Results, Renderer, Console"""

from .result import (
    ResultType, ErrorType, ResultSetError,
    ColumnName, ColumnMetadata, Cell, Row, ResultSet,
    QueryResult, CommandResult, ConnectResult, MetadataResult, StorageResult, ErrorResult,
)
from .renderer import render_result, render_query_result, calculate_col_widths

__all__ = [
    'ResultType', 'ErrorType', 'ResultSetError',
    'ColumnName', 'ColumnMetadata', 'Cell', 'Row', 'ResultSet',
    'QueryResult', 'CommandResult', 'ConnectResult', 'MetadataResult', 'StorageResult',
    'ErrorResult',
    'render_result', 'render_query_result', 'calculate_col_widths',
]
