"""
Renderer - Turns results into text for the console

Query results are drawn as fixed-width tables:

    Partial result: false
    --------------
    | id | name  |
    --------------
    | 1  | Alice |
    | 2  | Bob   |
    --------------
"""

from typing import Any, Dict, List

from .result import QueryResult, ResultSet, ResultSetError, ResultType

UNKNOWN_RESULT = "Unknown result"
EMPTY_RESULT = "\nOK"


def render_result(result: Any) -> str:
    """
    Convert a result into the string shown to the user.

    Args:
        result: Any of the result variants from qshell.core.result

    Returns:
        Text for the console. Values without a known result type
        render as "Unknown result".
    """
    result_type = getattr(result, 'result_type', None)

    if result_type == ResultType.ERROR:
        return result.error_message
    elif result_type == ResultType.QUERY:
        return render_query_result(result)
    elif result_type == ResultType.COMMAND:
        return str(result.result)
    elif result_type == ResultType.CONNECT:
        return f"Connected with SessionId={result.session_id}"
    elif result_type in (ResultType.METADATA, ResultType.STORAGE):
        return str(result)

    return UNKNOWN_RESULT


def render_query_result(query_result: QueryResult) -> str:
    """Draw the rows of a query result as a table"""
    result_set = query_result.result_set
    if result_set.is_empty():
        return EMPTY_RESULT

    columns = result_set.column_names()
    col_widths = calculate_col_widths(result_set)
    bar = '-' * (get_total_width(col_widths, columns) + len(columns) * 3 + 1)

    lines = [f"Partial result: {str(not query_result.last_result_set).lower()}", bar]

    header = "| "
    for col in result_set.column_metadata:
        header += col.name.column_name_to_show.ljust(col_widths[col.name.name] + 1) + "| "
    lines.append(header)
    lines.append(bar)

    for row in result_set:
        line = "| "
        for name in columns:
            line += str(row.get_cell(name)).ljust(col_widths[name]) + " | "
        lines.append(line)

    lines.append(bar)
    return "\n".join(lines) + "\n"


def calculate_col_widths(result_set: ResultSet) -> Dict[str, int]:
    """
    Compute the display width of every column.

    The width is the longest of the column's displayed name and
    the text of each of its cells.

    Raises:
        ResultSetError: If a row's cells don't match the declared columns
    """
    # Column names or aliases
    widths: Dict[str, int] = {}
    for col in result_set.column_metadata:
        name = col.name.name
        widths[name] = max(widths.get(name, 0), len(col.name.column_name_to_show))

    for index, row in enumerate(result_set):
        _check_row(index, row.cells.keys(), widths)
        for name, cell in row.cells.items():
            widths[name] = max(widths[name], len(str(cell)))

    return widths


def get_total_width(col_widths: Dict[str, int], columns: List[str]) -> int:
    """Sum of the widths of the displayed columns, repeats included"""
    return sum(col_widths[name] for name in columns)


def _check_row(index: int, keys: Any, widths: Dict[str, int]) -> None:
    missing: List[str] = [name for name in widths if name not in keys]
    unexpected: List[str] = [name for name in keys if name not in widths]
    if missing or unexpected:
        raise ResultSetError(
            f"Row {index} does not match result columns "
            f"(missing: {missing}, unexpected: {unexpected})"
        )
