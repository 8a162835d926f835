import logging
from collections.abc import Iterable

from googleapiclient.discovery import Resource

from ..access import build_service, service_account_credentials
from . import ops
from .range import SheetRange
from .record import BaseRecord, BatchUpdateRequestObject
from .requests import *
from .resources import CellData, GridRange, RowData

logger = logging.getLogger(__name__)

class SheetHelper():
    """
    Session on one tab of one spreadsheet.  Holds the spreadsheet ID,
    the tab title and the sheet ID behind it, and the service used to make
    calls.  Every operation is a single API call.

    A service comes from, in order:
        - init() with a service account JSON key
        - the service argument, for a service built elsewhere
        - the gsheets singleton in access
    """
    def __init__(self, spreadsheet_id: str,
                 service_account_email: str|None = None,
                 tab_name: str = "",
                 scopes: str|list[str] = "sheets",
                 service: Resource|None = None) -> None:
        self.spreadsheet_id = spreadsheet_id
        self.service_account_email = service_account_email
        self.scopes = scopes
        self.service = service
        self._tab_name = tab_name or ""
        self._sheet_id = None

    def __str__(self) -> str:
        return f"{self.spreadsheet_id}:{self._tab_name}({self._sheet_id})"

    def __repr__(self) -> str:
        return f"{self.__class__}:{str(self)}"

    @property
    def tab_name(self) -> str:
        return self._tab_name

    @property
    def sheet_id(self) -> int:
        """
        Numeric ID of the tab, looked up from the title on first use
        if init() or update_tab_name() hasn't already.
        """
        if self._sheet_id is None:
            self.update_tab_name(self._tab_name)
        return self._sheet_id

    @sheet_id.setter
    def sheet_id(self, value: int|None) -> None:
        self._sheet_id = None if value is None else int(value)

    def init(self, json_credentials: str|bytes|dict) -> None:
        """
        Authenticate as a service account, acting as service_account_email,
        and select the tab.
        """
        creds = service_account_credentials(json_credentials, self.service_account_email, self.scopes)
        self.service = build_service(creds, "sheets", "v4")
        self.update_tab_name(self._tab_name)

    def update_tab_name(self, new_tab_name: str) -> None:
        """
        Point the helper at another tab.  Titles match case-insensitively,
        an empty title means the first tab.
        """
        spreadsheet = ops.get(self.spreadsheet_id, service=self.service)
        if not spreadsheet.sheets:
            raise KeyError(f"spreadsheet {self.spreadsheet_id} has no tabs")
        if new_tab_name:
            wanted = new_tab_name.casefold()
            matches = [s for s in spreadsheet.sheets if s.properties.title.casefold() == wanted]
            if not matches:
                raise KeyError(f"{new_tab_name} not in tabs of {self.spreadsheet_id}")
            sheet = matches[0]
        else:
            sheet = spreadsheet.sheets[0]
        self._sheet_id = sheet.properties.sheetId
        self._tab_name = sheet.properties.title
        logger.info("selected tab %r (sheet id %d) of %s", self._tab_name,
                    self._sheet_id, self.spreadsheet_id)

    def get_all_tab_names(self) -> list[str]:
        return ops.get(self.spreadsheet_id, service=self.service).tab_titles()

    def _range(self, range: SheetRange|str) -> SheetRange:
        """A range without a tab is taken to be on this tab"""
        r = range if isinstance(range, SheetRange) else SheetRange.from_a1(range)
        if not r.tab_name and self._tab_name:
            r = SheetRange(self._tab_name, r.start_column, r.start_row, r.end_column, r.end_row)
        return r

    def get_rows(self, range: SheetRange|str) -> list[list]:
        """
        Raw values, numbers as numbers and dates as serial day numbers.
        Trailing empty cells and rows are left off by the API.
        """
        values = ops.getValues(self.spreadsheet_id, self._range(range),
                               valueRenderOption="UNFORMATTED",
                               dateTimeRenderOption="SERIAL",
                               service=self.service)
        return values.values or []

    def get_rows_formatted(self, range: SheetRange|str) -> list[list]:
        """Values as strings the way the sheet displays them"""
        values = ops.getValues(self.spreadsheet_id, self._range(range),
                               valueRenderOption="FORMATTED",
                               dateTimeRenderOption="FORMATTED",
                               service=self.service)
        return values.values or []

    def _batch(self, requests: list[GoogleSheetsUpdateRequestBase]) -> GoogleSheetsUpdateRequestResponse:
        return ops.batchUpdate(self.spreadsheet_id, make_request(requests), service=self.service)

    @staticmethod
    def _column_index(column: int|str) -> int:
        return SheetRange.letters_to_column(column) if isinstance(column, str) else int(column)

    def delete_column(self, column: int|str) -> GoogleSheetsUpdateRequestResponse:
        """column is a 1-based index or letters"""
        col = self._column_index(column)
        return self._batch([DeleteDimensionRequest.for_indexes(self.sheet_id, "COLUMNS", col, col)])

    def delete_row(self, row: int) -> GoogleSheetsUpdateRequestResponse:
        """Rows below move up one"""
        return self._batch([DeleteDimensionRequest.for_indexes(self.sheet_id, "ROWS", row, row)])

    def delete_rows(self, start_row: int, end_row: int) -> GoogleSheetsUpdateRequestResponse:
        """Delete start_row to end_row inclusive"""
        return self._batch([DeleteDimensionRequest.for_indexes(self.sheet_id, "ROWS", start_row, end_row)])

    def insert_blank_column(self, column: int|str) -> GoogleSheetsUpdateRequestResponse:
        """
        Insert a blank column at the 1-based index (or letters), what was
        there moves right.
        """
        col = self._column_index(column)
        return self._batch([InsertDimensionRequest.for_index(self.sheet_id, "COLUMNS", col)])

    def insert_blank_row(self, row: int) -> GoogleSheetsUpdateRequestResponse:
        return self._batch([InsertDimensionRequest.for_index(self.sheet_id, "ROWS", row)])

    def batch_update(self, updates: Iterable[BatchUpdateRequestObject]) -> GoogleSheetsUpdateRequestResponse:
        """
        Write a set of single cells in one call, which is the way to stay
        under the API write quota when touching many cells.
        """
        requests = []
        for update in updates:
            r = update.range
            grid = GridRange(self.sheet_id,
                             startRowIndex=r.start_row - 1, endRowIndex=r.start_row,
                             startColumnIndex=r.start_column - 1, endColumnIndex=r.start_column)
            requests.append(RepeatCellRequest(grid, update.data, "*"))
        if not requests:
            return GoogleSheetsUpdateRequestResponse(self.spreadsheet_id)
        logger.info("writing %d cell(s) to %r", len(requests), self._tab_name)
        return self._batch(requests)

    def append_rows_raw(self, rows: Iterable[RowData]) -> GoogleSheetsUpdateRequestResponse:
        """Append after the last row with data"""
        row_list = [r if isinstance(r, RowData) else RowData(list(r)) for r in rows]
        if not row_list:
            return GoogleSheetsUpdateRequestResponse(self.spreadsheet_id)
        logger.info("appending %d row(s) to %r", len(row_list), self._tab_name)
        return self._batch([AppendCellsRequest(self.sheet_id, row_list, "*")])

class RecordSheetHelper(SheetHelper):
    """
    SheetHelper that reads and appends rows as record_type instances.
    """
    def __init__(self, record_type: type[BaseRecord], spreadsheet_id: str,
                 service_account_email: str|None = None,
                 tab_name: str = "",
                 scopes: str|list[str] = "sheets",
                 service: Resource|None = None) -> None:
        super().__init__(spreadsheet_id, service_account_email, tab_name, scopes, service)
        if not (isinstance(record_type, type) and issubclass(record_type, BaseRecord)):
            raise TypeError(f"record_type must be a BaseRecord subclass, not {record_type!r}")
        self.record_type = record_type

    def append_row(self, record: BaseRecord) -> GoogleSheetsUpdateRequestResponse:
        return self.append_rows([record])

    def append_rows(self, records: Iterable[BaseRecord]) -> GoogleSheetsUpdateRequestResponse:
        """
        appendCells always starts at column A so rows are padded out to
        put each attribute in its declared column.
        """
        pad = self.record_type.min_column_id() - 1
        rows = []
        for record in records:
            if not isinstance(record, self.record_type):
                raise TypeError(f"expected {self.record_type.__name__}, got {type(record).__name__}")
            rows.append(RowData([CellData() for _ in range(pad)] + record.to_cell_data()))
        return self.append_rows_raw(rows)

    def get_records(self, range: SheetRange|str) -> list[BaseRecord]:
        """
        Read range as records, row_id set from the range start row.
        Blank rows inside the range are skipped.
        """
        r = self._range(range)
        records = []
        for offset, row in enumerate(self.get_rows(r)):
            if not any(v is not None and v != "" for v in row):
                continue
            records.append(self.record_type.from_row(row, r.start_row + offset, r.start_column))
        return records
