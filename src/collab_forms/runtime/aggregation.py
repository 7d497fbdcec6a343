"""Column aggregation for data table fields.

Aggregates are recomputed from the full row set on every request. Cells that
are not numbers (or numeric strings) are skipped, never counted as zero.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional

from collab_forms.schemas.data_table import AggregationType, DataTableColumn
from collab_forms.utils.number_parsing import Number, format_number, parse_finite_number


def column_values(column: DataTableColumn, rows: Iterable[Mapping[str, Any]]) -> List[Number]:
    """Numeric values of a column, in row order, skipping non-numeric cells."""
    values: List[Number] = []
    for row in rows:
        number = parse_finite_number(row.get(column.id))
        if number is not None:
            values.append(number)
    return values


def compute_aggregation(
    column: DataTableColumn,
    rows: Iterable[Mapping[str, Any]],
) -> Optional[Number]:
    """
    Compute the configured aggregate of a column.

    Args:
        column: Column definition
        rows: Table rows

    Returns:
        sum / average / count of the included values, or None when the column
        has no aggregation. The average of no values is 0.
    """
    if not column.has_aggregation:
        return None

    values = column_values(column, rows)
    aggregation_type = column.aggregation.type

    if aggregation_type == AggregationType.SUM:
        return sum(values)
    if aggregation_type == AggregationType.AVERAGE:
        return sum(values) / len(values) if values else 0
    if aggregation_type == AggregationType.COUNT:
        return len(values)
    return None


def get_aggregations(
    columns: Iterable[DataTableColumn],
    rows: List[Mapping[str, Any]],
) -> Dict[str, Number]:
    """Aggregates keyed by column id; columns without aggregation are omitted."""
    aggregations: Dict[str, Number] = {}
    for column in columns:
        result = compute_aggregation(column, rows)
        if result is not None:
            aggregations[column.id] = result
    return aggregations


def format_aggregation(column: DataTableColumn, value: Number) -> str:
    """Display text for a subtotal cell, honouring the column's num_decimals."""
    decimals = column.constraints.num_decimals if column.constraints else None
    return format_number(value, decimals)
