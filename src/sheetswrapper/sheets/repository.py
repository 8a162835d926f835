import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from .helper import RecordSheetHelper
from .range import SheetRange
from .record import BaseRecord
from .requests import GoogleSheetsUpdateRequestResponse

logger = logging.getLogger(__name__)

@dataclass
class SchemaValidationResult():
    is_valid: bool = field(default=True)
    error_message: str = field(default="")

    def __bool__(self) -> bool:
        return self.is_valid

class BaseRepository():
    """
    CRUD over the records of one tab.  The tab holds one record per row, from
    row 2 when there's a header row, otherwise from row 1.

    Records are addressed by row_id and nothing keeps those in step with the
    sheet: after a delete_record() every record read from below it points one
    row too low until read again.  Last write wins.
    """
    def __init__(self, helper: RecordSheetHelper, has_header_row: bool = True) -> None:
        self.helper = helper
        self.has_header_row = has_header_row

    @property
    def record_type(self) -> type[BaseRecord]:
        return self.helper.record_type

    @property
    def first_data_row(self) -> int:
        return 2 if self.has_header_row else 1

    @property
    def sheet_data_range(self) -> SheetRange:
        """Every data row, across the columns the record type declares"""
        rt = self.record_type
        return SheetRange(self.helper.tab_name, rt.min_column_id(), self.first_data_row,
                          rt.max_column_id(), None)

    @property
    def sheet_header_range(self) -> SheetRange:
        rt = self.record_type
        return SheetRange(self.helper.tab_name, rt.min_column_id(), 1, rt.max_column_id(), 1)

    def validate_schema(self) -> SchemaValidationResult:
        """
        Check the header row names the declared fields in the declared columns.
        Names compare case-insensitively and ignoring surrounding space.
        """
        if not self.has_header_row:
            return SchemaValidationResult()
        rows = self.helper.get_rows_formatted(self.sheet_header_range)
        header = rows[0] if rows else []
        lo = self.record_type.min_column_id()
        problems = []
        for name, meta in self.record_type.sheet_fields():
            expected = meta.display_name or name
            idx = meta.column_id - lo
            actual = str(header[idx]) if idx < len(header) and header[idx] is not None else ""
            if actual.strip().casefold() != expected.strip().casefold():
                col = SheetRange.column_to_letters(meta.column_id)
                problems.append(f"column {col} expected '{expected}' found '{actual}'")
        if problems:
            message = f"{self.record_type.__name__} header mismatch: " + "; ".join(problems)
            logger.warning("%s", message)
            return SchemaValidationResult(False, message)
        return SchemaValidationResult()

    def get_all_records(self) -> list[BaseRecord]:
        records = self.helper.get_records(self.sheet_data_range)
        logger.debug("read %d %s record(s)", len(records), self.record_type.__name__)
        return records

    def add_record(self, record: BaseRecord) -> GoogleSheetsUpdateRequestResponse:
        return self.helper.append_row(record)

    def add_records(self, records: Iterable[BaseRecord]) -> GoogleSheetsUpdateRequestResponse:
        return self.helper.append_rows(records)

    def save_field(self, record: BaseRecord, field_name: str) -> GoogleSheetsUpdateRequestResponse:
        """Write one attribute of a record already in the sheet"""
        return self.save_fields(record, field_name)

    def save_fields(self, record: BaseRecord, *field_names: str) -> GoogleSheetsUpdateRequestResponse:
        updates = [record.field_update_request(self.helper.tab_name, name) for name in field_names]
        return self.helper.batch_update(updates)

    def save_record(self, record: BaseRecord) -> GoogleSheetsUpdateRequestResponse:
        """Write every attribute of a record already in the sheet"""
        return self.helper.batch_update(record.to_update_requests(self.helper.tab_name))

    def delete_record(self, record: BaseRecord) -> GoogleSheetsUpdateRequestResponse:
        if record.row_id < self.first_data_row:
            raise ValueError(f"{record.row_id} is not a data row of {self.helper.tab_name!r}")
        return self.helper.delete_row(record.row_id)
