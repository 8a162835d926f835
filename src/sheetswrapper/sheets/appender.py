import csv
import logging
import time
from collections.abc import Iterable
from decimal import Decimal
from pathlib import Path
from typing import Any, TextIO

from .helper import SheetHelper
from .requests import GoogleSheetsUpdateRequestResponse
from .resources import CellData, ExtendedValue, RowData

logger = logging.getLogger(__name__)

def to_cell_data(value: Any) -> CellData:
    """
    Best guess cell for an untyped value, numbers and bools keep their type
    and everything else is written as text.
    """
    if value is None:
        return CellData()
    if isinstance(value, bool):
        return CellData(ExtendedValue(boolValue=value))
    if isinstance(value, (int, float)):
        return CellData(ExtendedValue(numberValue=value))
    if isinstance(value, Decimal):
        return CellData(ExtendedValue(numberValue=float(value)))
    return CellData(ExtendedValue(stringValue=str(value)))

class SheetAppender():
    """
    Bulk append of plain rows, a CSV file say, to the helper's tab.
    Large inputs go in batches, with an optional pause between batches to
    stay under the per minute write quota.
    """
    def __init__(self, helper: SheetHelper) -> None:
        self.helper = helper

    def append_rows(self, rows: Iterable[Iterable[Any]],
                    batch_size: int = 100,
                    batch_wait_seconds: float = 0) -> list[GoogleSheetsUpdateRequestResponse]:
        """Append in-memory rows, see to_cell_data() for how values are typed"""
        row_data = (RowData([to_cell_data(v) for v in row]) for row in rows)
        return self._append_batches(row_data, batch_size, batch_wait_seconds)

    def _append_batches(self, rows: Iterable[RowData], batch_size: int,
                        batch_wait_seconds: float) -> list[GoogleSheetsUpdateRequestResponse]:
        if batch_size < 1:
            raise ValueError(f"batch_size must be 1 or greater, got {batch_size}")
        responses = []
        batch = []
        for row in rows:
            batch.append(row)
            if len(batch) >= batch_size:
                responses.append(self._send(batch, bool(responses), batch_wait_seconds))
                batch = []
        if batch:
            responses.append(self._send(batch, bool(responses), batch_wait_seconds))
        return responses

    def _send(self, batch: list[RowData], wait: bool, batch_wait_seconds: float) -> GoogleSheetsUpdateRequestResponse:
        if wait and batch_wait_seconds > 0:
            logger.debug("waiting %ss before next batch", batch_wait_seconds)
            time.sleep(batch_wait_seconds)
        return self.helper.append_rows_raw(batch)

    def append_csv(self, source: str|Path|TextIO,
                   include_header: bool = True,
                   batch_size: int = 100,
                   batch_wait_seconds: float = 0,
                   **csv_options) -> list[GoogleSheetsUpdateRequestResponse]:
        """
        Append every line of a CSV file or open text stream.  Cells are written
        as text, exactly as they appear in the file.  include_header=False
        skips the first line.  csv_options go to csv.reader (delimiter etc).
        """
        if isinstance(source, (str, Path)):
            with open(source, 'r', newline='', encoding='utf-8-sig') as f:
                return self._append_csv(f, include_header, batch_size, batch_wait_seconds, csv_options)
        return self._append_csv(source, include_header, batch_size, batch_wait_seconds, csv_options)

    def _append_csv(self, stream: TextIO, include_header: bool, batch_size: int,
                    batch_wait_seconds: float, csv_options: dict) -> list[GoogleSheetsUpdateRequestResponse]:
        reader = csv.reader(stream, **csv_options)
        if not include_header:
            next(reader, None)
        # keep the text as text, a zip code '01234' stays '01234'
        rows = (RowData([CellData(ExtendedValue(stringValue=v)) if v != "" else CellData() for v in line])
                for line in reader)
        responses = self._append_batches(rows, batch_size, batch_wait_seconds)
        logger.info("appended csv in %d batch(es) to %r", len(responses), self.helper.tab_name)
        return responses
