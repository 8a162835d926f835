"""
Class implementations of sheets request resources.
As these are just logical groupings of data fields we use dataclasses
to implement.  dataclass.asdict() gives exactly the dict the request client
needs, the other direction is from_base() plus a fixup() on anything
holding nested resources.
Only the resources this package sends or reads are implemented.
"""
from dataclasses import dataclass, field
from typing import List,ClassVar

from ..resources import GoogleSheetsResourceBase

class GoogleSheetsEnum():
    """
    An 'enum' in the sheets client is just a string so this is
    just to translate and validate input.
    """
    _VALID_VALUE_RENDER_OPTIONS = {
        "FORMATTED": "FORMATTED_VALUE",
        "FORMATTED_VALUE": "FORMATTED_VALUE",
        "UNFORMATTED": "UNFORMATTED_VALUE",
        "UNFORMATTED_VALUE": "UNFORMATTED_VALUE",
        "FORMULA": "FORMULA"
    }
    _VALID_DATE_TIME_RENDER_OPTIONS = {
        "SERIAL": "SERIAL_NUMBER",
        "SERIAL_NUMBER": "SERIAL_NUMBER",
        "FORMATTED": "FORMATTED_STRING",
        "FORMATTED_STRING": "FORMATTED_STRING"
    }
    _VALID_DIMENSION_OPTIONS = {
        "ROWS": "ROWS",
        "R": "ROWS",
        "C": "COLUMNS",
        "COLS": "COLUMNS",
        "COLUMNS": "COLUMNS"
    }
    @classmethod
    def valueRenderOption(cls, option: str) -> str:
        """https://developers.google.com/sheets/api/reference/rest/v4/ValueRenderOption"""
        return cls._VALID_VALUE_RENDER_OPTIONS.get(str(option).upper(), "")

    @classmethod
    def dateTimeRenderOption(cls, option: str) -> str:
        """https://developers.google.com/sheets/api/reference/rest/v4/DateTimeRenderOption"""
        return cls._VALID_DATE_TIME_RENDER_OPTIONS.get(str(option).upper(), "")

    @classmethod
    def dimension(cls, dim: str) -> str:
        """https://developers.google.com/sheets/api/reference/rest/v4/Dimension"""
        return cls._VALID_DIMENSION_OPTIONS.get(str(dim).upper(), "")

@dataclass
class NumberFormat(GoogleSheetsResourceBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/cells#numberformat
    """
    type: str = field(default="")
    pattern: str = field(default="")

    valid_values: ClassVar[List[str]] = ['TEXT', 'NUMBER', 'PERCENT',
                                         'CURRENCY', 'DATE', 'TIME',
                                         'DATE_TIME', 'SCIENTIFIC']

    def __post_init__(self):
        self.fixup()

    def __bool__(self) -> bool:
        return bool(self.type) and self.type in self.valid_values

    def fixup(self) -> None:
        if self.type:
            self.type = self.type if isinstance(self.type,str) else str(self.type)
            if self.type not in self.valid_values:
                t = str(self.type).upper()
                if t in self.valid_values:
                    self.type = t
                else:
                    raise ValueError('Invalid number format type: ' + t)

@dataclass
class CellFormat(GoogleSheetsResourceBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/cells#cellformat
    Only the number format is modelled, it's the part that decides how a
    typed value displays.
    """
    numberFormat: NumberFormat|dict = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.fixup()

    def fixup(self) -> None:
        self.numberFormat = NumberFormat.from_base(self.numberFormat)

    def __bool__(self) -> bool:
        return bool(self.numberFormat)

@dataclass
class ExtendedValue(GoogleSheetsResourceBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/other#extendedvalue
    Union field, at most one of these should be set.
    """
    numberValue: int|float|None = field(default=None)
    stringValue: str|None = field(default=None)
    boolValue: bool|None = field(default=None)
    formulaValue: str|None = field(default=None)

    def __bool__(self) -> bool:
        return any(v is not None for v in (self.numberValue, self.stringValue,
                                           self.boolValue, self.formulaValue))

    @property
    def value(self) -> int|float|str|bool|None:
        for v in (self.numberValue, self.stringValue, self.boolValue, self.formulaValue):
            if v is not None:
                return v
        return None

@dataclass
class CellData(GoogleSheetsResourceBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/cells#celldata
    What gets written for a single cell.  An empty CellData written with
    fields='*' clears the cell.
    """
    userEnteredValue: ExtendedValue|dict = field(default_factory=dict)
    userEnteredFormat: CellFormat|dict = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.fixup()

    def fixup(self) -> None:
        self.userEnteredValue = ExtendedValue.from_base(self.userEnteredValue)
        self.userEnteredFormat = CellFormat.from_base(self.userEnteredFormat)

    def __bool__(self) -> bool:
        return bool(self.userEnteredValue)

    @property
    def value(self) -> int|float|str|bool|None:
        return self.userEnteredValue.value

@dataclass
class RowData(GoogleSheetsResourceBase):
    """https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/sheets#rowdata"""
    values: List[CellData|dict] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.fixup()

    def fixup(self) -> None:
        self.values = [c if isinstance(c,CellData) else CellData.from_base(c) for c in self.values]

    def __len__(self) -> int:
        return len(self.values)

@dataclass
class SheetProperties(GoogleSheetsResourceBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/sheets#sheetproperties
    The tab title and the sheetId behind it are all a helper needs, grid
    sizes and the like are dropped on the way in.
    """
    sheetId: int = field(default=-1)
    title: str = field(default="")
    index: int = field(default=-1)
    sheetType: str = field(default="")

    def __bool__(self) -> bool:
        # sheetId 0 is the usual first tab so only negative is unset
        return self.sheetId >= 0 and bool(self.title)

@dataclass
class Sheet(GoogleSheetsResourceBase):
    """https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/sheets#sheet"""
    properties: SheetProperties|dict = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.fixup()

    def fixup(self) -> None:
        self.properties = SheetProperties.from_base(self.properties)

@dataclass
class SpreadsheetProperties(GoogleSheetsResourceBase):
    """https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets#SpreadsheetProperties"""
    title: str = field(default="")
    locale: str = field(default="")
    timeZone: str = field(default="")

@dataclass
class Spreadsheet(GoogleSheetsResourceBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets#resource:-spreadsheet
    Only read for the tab list, sheets are properties only.
    """
    spreadsheetId: str = field(default="")
    properties: SpreadsheetProperties|dict = field(default_factory=dict)
    sheets: List[Sheet|dict] = field(default_factory=list)
    spreadsheetUrl: str = field(default="")

    def __post_init__(self) -> None:
        self.fixup()

    def fixup(self) -> None:
        self.properties = SpreadsheetProperties.from_base(self.properties)
        self.sheets = [s if isinstance(s,Sheet) else Sheet.from_base(s) for s in self.sheets]

    def __bool__(self) -> bool:
        return bool(self.spreadsheetId)

    def tab_titles(self) -> list[str]:
        return [s.properties.title for s in self.sheets]

@dataclass
class GridRange(GoogleSheetsResourceBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/other#gridrange
    Indexes are 0-based and half open, start inclusive and end exclusive.
    """
    sheetId: int = field(default=-1)
    startRowIndex: int|None = field(default=None)
    endRowIndex: int|None = field(default=None)
    startColumnIndex: int|None = field(default=None)
    endColumnIndex: int|None = field(default=None)

    def __bool__(self) -> bool:
        return self.sheetId >= 0

@dataclass
class DimensionRange(GoogleSheetsResourceBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/DimensionRange
    Indexes are 0-based and half open, start inclusive and end exclusive.
    """
    sheetId: int = field(default=-1)
    dimension: str = field(default="")
    startIndex: int|None = field(default=None)
    endIndex: int|None = field(default=None)

    def __post_init__(self) -> None:
        self.fixup()

    def fixup(self) -> None:
        if self.dimension:
            d = str(self.dimension)
            self.dimension = GoogleSheetsEnum.dimension(d)
            if not self.dimension:
                raise ValueError(f"Invalid dimension value: {d}")

    def __bool__(self) -> bool:
        return self.sheetId >= 0 and bool(self.dimension)

@dataclass
class ValueRange(GoogleSheetsResourceBase):
    """https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets.values#resource:-valuerange"""
    range: str = field(default="")
    majorDimension: str = field(default="")
    values: list[list[bool|str|int|float|None]] = field(default_factory=list)

    def __post_init__(self):
        self.fixup()

    def fixup(self) -> None:
        if self.majorDimension:
            self.majorDimension = GoogleSheetsEnum.dimension(str(self.majorDimension))

    def __bool__(self) -> bool:
        """
        A ValueRange is valid if the range string is not empty
        and the majorDimension has a valid value.
        """
        return bool(self.range) and bool(self.majorDimension)
