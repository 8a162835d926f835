from dataclasses import dataclass, field
from typing import List
import re

from ..resources import GoogleSheetsResourceBase
from .resources import CellData, DimensionRange, GridRange, RowData, Spreadsheet

class GoogleSheetsUpdateRequestBase(GoogleSheetsResourceBase):
    """
    Base class for sheet batchUpdate requests to get the actual
    request dict into the right format.
    """
    def to_request(self) -> dict[str,dict]:
        name = self.__class__.__name__
        # need to strip off the trailing 'Request' class name and
        # set the first letter to lower case.  could be done
        # several ways but lets go re
        m = re.match("^([a-zA-Z])([a-zA-Z]+)Request$", name)
        if not m:
            raise RuntimeError("Invalid Google Sheets request format for class name")
        key = m.group(1).lower() + m.group(2)
        return {key: self.trim()}

# the request key is pulled out of the class name so the names have to match the API

@dataclass
class DeleteDimensionRequest(GoogleSheetsUpdateRequestBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/request#deletedimensionrequest
    """
    range: DimensionRange|dict = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.fixup()

    def fixup(self) -> None:
        self.range = DimensionRange.from_base(self.range)

    @classmethod
    def for_indexes(cls, sheetId: int, dimension: str, start: int, end: int) -> "DeleteDimensionRequest":
        """
        start and end are 1-based and inclusive, as a user counts rows
        """
        if start < 1 or end < start:
            raise ValueError(f"invalid {dimension} span to delete: {start}-{end}")
        return cls(DimensionRange(sheetId, dimension, start - 1, end))

@dataclass
class InsertDimensionRequest(GoogleSheetsUpdateRequestBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/request#insertdimensionrequest
    inheritFromBefore takes formatting from the row/col before the insert
    which there isn't one of at index 0.
    """
    range: DimensionRange|dict = field(default_factory=dict)
    inheritFromBefore: bool = field(default=False)

    def __post_init__(self) -> None:
        self.fixup()

    def fixup(self) -> None:
        self.range = DimensionRange.from_base(self.range)

    @classmethod
    def for_index(cls, sheetId: int, dimension: str, index: int) -> "InsertDimensionRequest":
        """index is 1-based, the new blank row/col lands there"""
        if index < 1:
            raise ValueError(f"{dimension.lower()} index value must be 1 or greater")
        return cls(DimensionRange(sheetId, dimension, index - 1, index), index > 1)

@dataclass
class AppendCellsRequest(GoogleSheetsUpdateRequestBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/request#appendcellsrequest
    Adds rows after the last row with data in the sheet.
    """
    sheetId: int = field(default=-1)
    rows: List[RowData|dict] = field(default_factory=list)
    fields: str = field(default="*")

    def __post_init__(self) -> None:
        self.fixup()

    def fixup(self) -> None:
        self.rows = [r if isinstance(r,RowData) else RowData.from_base(r) for r in self.rows]

@dataclass
class RepeatCellRequest(GoogleSheetsUpdateRequestBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/request#repeatcellrequest
    Writes the one cell over every cell of the range.
    """
    range: GridRange|dict = field(default_factory=dict)
    cell: CellData|dict = field(default_factory=dict)
    fields: str = field(default="*")

    def __post_init__(self) -> None:
        self.fixup()

    def fixup(self) -> None:
        self.range = GridRange.from_base(self.range)
        self.cell = CellData.from_base(self.cell)

@dataclass
class GoogleSheetsUpdateRequest(GoogleSheetsResourceBase):
    """
    Generate a GSheet Batch Update request body.
    Most likely you'd use make_request() directly to generate
    the request dict JIT
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/batchUpdate#request-body
    """
    requests: List[GoogleSheetsUpdateRequestBase|dict]
    includeSpreadsheetInResponse: bool = field(default=False)
    responseRanges: List[str] = field(default_factory=list)
    responseIncludeGridData: bool = field(default=False)

    def to_base(self) -> dict:
        return {
            'requests': [r.to_request() if isinstance(r, GoogleSheetsUpdateRequestBase) else dict(r)
                         for r in self.requests],
            'includeSpreadsheetInResponse': self.includeSpreadsheetInResponse,
            'responseRanges': list(self.responseRanges),
            'responseIncludeGridData': self.responseIncludeGridData
        }

def make_request(requests: list[GoogleSheetsUpdateRequestBase|dict],
                 includeSpreadsheetInResponse: bool = False,
                 responseRanges: list[str]|None = None,
                 responseIncludeGridData: bool = False) -> dict:
    """
    Convenience function to assemble the request with the usual parameters.
    """
    return GoogleSheetsUpdateRequest(requests=requests,
                                     includeSpreadsheetInResponse=includeSpreadsheetInResponse,
                                     responseRanges=responseRanges or [],
                                     responseIncludeGridData=responseIncludeGridData).to_base()


@dataclass
class GoogleSheetsUpdateRequestResponse(GoogleSheetsResourceBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/batchUpdate#response-body
    """
    spreadsheetId: str = field(default="")
    replies: List[dict] = field(default_factory=list)
    updatedSpreadsheet: Spreadsheet|dict = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.fixup()

    def __bool__(self) -> bool:
        return bool(self.spreadsheetId)

    def fixup(self) -> None:
        self.updatedSpreadsheet = Spreadsheet.from_base(self.updatedSpreadsheet)
