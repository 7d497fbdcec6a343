"""
Row ids for data table rows.

Ids look like "row_<epoch-ms>_<7 hex chars>". A factory never hands out the
same id twice, including ids it adopted from stored data.
"""

import time
import uuid
from typing import Any, Callable, Set

from collab_forms.schemas.data_table import ROW_ID_KEY


def has_row_id(row: Any) -> bool:
    row_id = row.get(ROW_ID_KEY) if isinstance(row, dict) else None
    return isinstance(row_id, str) and bool(row_id)


class RowIdFactory:
    """Issues row ids of the form "row_<epoch-ms>_<7 hex chars>".

    Every issued (or adopted) id is remembered and never handed out again.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._issued: Set[str] = set()

    def __call__(self) -> str:
        while True:
            row_id = f"row_{int(self._clock() * 1000)}_{uuid.uuid4().hex[:7]}"
            if row_id not in self._issued:
                self._issued.add(row_id)
                return row_id

    def adopt(self, row_id: str) -> None:
        """Reserve an id that came from stored data."""
        self._issued.add(row_id)


def assign_row_ids(value: Any, row_ids: RowIdFactory) -> Any:
    """Give every dict row of a table value a `_row_id`.

    Existing ids are adopted first so new ids never collide with them. Values
    that are not lists pass through, and a list whose rows all carry ids is
    returned as is.

    Args:
        value: Stored value of a data table field
        row_ids: Factory issuing the missing ids

    Returns:
        The value with ids filled in
    """
    if not isinstance(value, list):
        return value

    for row in value:
        if has_row_id(row):
            row_ids.adopt(row[ROW_ID_KEY])

    if all(has_row_id(row) for row in value if isinstance(row, dict)):
        return value

    return [
        {**row, ROW_ID_KEY: row_ids()} if isinstance(row, dict) and not has_row_id(row) else row
        for row in value
    ]
