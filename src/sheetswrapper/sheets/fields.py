"""
Declarative column metadata for record fields.

A record field is tied to a sheet column with sheet_field(), which is a
dataclasses.field() carrying a SheetField in its metadata:

    @dataclass
    class Employee(BaseRecord):
        name: str|None = sheet_field(1, "Name")
        salary: Decimal|None = sheet_field(3, "Salary", SheetFieldType.CURRENCY)

SheetField knows how to turn what the values API hands back (unformatted
values, dates as serial numbers) into a python value and how to turn a python
value back into the CellData written by a batchUpdate.
"""
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any
import re

from .resources import CellData, CellFormat, ExtendedValue, NumberFormat

SHEET_FIELD_METADATA_KEY = "sheetswrapper.field"

# day 0 in Sheets (and Lotus/Excel with the 1900 leap year bug) is 1899-12-30
SERIAL_EPOCH = datetime(1899, 12, 30)

class SheetFieldType(Enum):
    STRING = "STRING"
    NUMBER = "NUMBER"
    CURRENCY = "CURRENCY"
    PHONE_NUMBER = "PHONE_NUMBER"
    DATE_TIME = "DATE_TIME"
    BOOLEAN = "BOOLEAN"

# (number format type, default pattern) written with each cell
_NUMBER_FORMATS = {
    SheetFieldType.NUMBER: ("NUMBER", ""),
    SheetFieldType.CURRENCY: ("CURRENCY", "$#,##0.00"),
    SheetFieldType.PHONE_NUMBER: ("NUMBER", "(###) ###-####"),
    SheetFieldType.DATE_TIME: ("DATE_TIME", "yyyy-mm-dd hh:mm:ss"),
}

_TRUE_STRINGS = {"TRUE", "YES", "Y", "1"}
_FALSE_STRINGS = {"FALSE", "NO", "N", "0"}

def datetime_to_serial(value: datetime|date) -> float:
    """Serial day number, whole part is days since the epoch, fraction is time of day"""
    if not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day)
    if value.tzinfo is not None:
        # sheets has no time zones, keep the wall clock time
        value = value.replace(tzinfo=None)
    return (value - SERIAL_EPOCH) / timedelta(days=1)

def serial_to_datetime(serial: int|float) -> datetime:
    # sheets keeps milliseconds, rounding there keeps float noise out of round trips
    return SERIAL_EPOCH + timedelta(milliseconds=round(float(serial) * 86400000))

def _reject_bool(value: Any) -> None:
    if isinstance(value, bool):
        raise TypeError("boolean where a number was expected")

def _parse_string(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        # the API hands back numeric looking text as a number
        return str(int(value))
    return str(value)

def _parse_number(value: Any) -> int|float:
    _reject_bool(value)
    if isinstance(value, (int, float)):
        return value
    text = str(value).strip().replace(",", "")
    return int(text) if re.fullmatch(r"[-+]?\d+", text) else float(text)

def _parse_currency(value: Any) -> Decimal:
    _reject_bool(value)
    if isinstance(value, Decimal):
        return value
    text = str(value).strip().replace("$", "").replace(",", "")
    try:
        return Decimal(text)
    except InvalidOperation as e:
        raise ValueError(str(e)) from e

def _parse_phone_number(value: Any) -> int:
    _reject_bool(value)
    if isinstance(value, (int, float)):
        return int(value)
    return int(re.sub(r"\D", "", str(value)))

def _parse_date_time(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    _reject_bool(value)
    if isinstance(value, (int, float)):
        return serial_to_datetime(value)
    return datetime.fromisoformat(str(value).strip())

def _parse_boolean(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    text = str(value).strip().upper()
    if text in _TRUE_STRINGS:
        return True
    if text in _FALSE_STRINGS:
        return False
    raise ValueError(f"not a boolean: {value!r}")

_PARSERS = {
    SheetFieldType.STRING: _parse_string,
    SheetFieldType.NUMBER: _parse_number,
    SheetFieldType.CURRENCY: _parse_currency,
    SheetFieldType.PHONE_NUMBER: _parse_phone_number,
    SheetFieldType.DATE_TIME: _parse_date_time,
    SheetFieldType.BOOLEAN: _parse_boolean,
}

@dataclass(frozen=True)
class SheetField():
    """
    Where a field lives in a row and how its cells are typed.
    column_id is 1-based and fixed for the life of the record type.
    """
    column_id: int
    display_name: str = ""
    field_type: SheetFieldType = SheetFieldType.STRING
    number_format_pattern: str|None = None

    def __post_init__(self) -> None:
        if isinstance(self.column_id, bool) or not isinstance(self.column_id, int) or self.column_id < 1:
            raise ValueError(f"column_id must be an integer of 1 or greater, got {self.column_id!r}")
        if not isinstance(self.field_type, SheetFieldType):
            # allow 'currency' etc
            object.__setattr__(self, 'field_type', SheetFieldType(str(self.field_type).upper()))

    @property
    def number_format(self) -> NumberFormat:
        """Format written alongside the value, empty for text and booleans"""
        fmt = _NUMBER_FORMATS.get(self.field_type)
        if fmt is None:
            return NumberFormat()
        ftype, pattern = fmt
        if self.number_format_pattern is not None:
            pattern = self.number_format_pattern
        if self.field_type == SheetFieldType.NUMBER and not pattern:
            return NumberFormat()
        return NumberFormat(ftype, pattern)

    def parse(self, value: Any, name: str = "") -> Any:
        """
        Convert a raw cell value to the python type for this field.
        Missing cells are None, a bad value raises ValueError.
        """
        if value is None:
            return None
        if isinstance(value, str) and not value.strip() and self.field_type != SheetFieldType.STRING:
            return None
        try:
            return self._parse(value)
        except (ValueError, TypeError, ArithmeticError) as e:
            label = name or self.display_name or f"column {self.column_id}"
            raise ValueError(f"cannot read {value!r} as {self.field_type.value} for {label}") from e

    def _parse(self, value: Any) -> Any:
        parser = _PARSERS.get(self.field_type)
        if parser is None:
            raise ValueError(f"unsupported field type {self.field_type}")
        return parser(value)

    def to_raw(self, value: Any, name: str = "") -> Any:
        """
        The JSON ready value for the cell, what parse() would get back
        from an unformatted read.  Values go through the same parsing as a
        read so '$1,234.50' or 'FALSE' are written as the number or bool.

        The API has no empty string cell, "" is written as an empty cell
        and reads back as None.
        """
        if value is None or (isinstance(value, str) and not value.strip() and
                             self.field_type != SheetFieldType.STRING):
            return None
        try:
            return self._to_raw(value)
        except (ValueError, TypeError, ArithmeticError) as e:
            label = name or self.display_name or f"column {self.column_id}"
            raise ValueError(f"cannot write {value!r} as {self.field_type.value} for {label}") from e

    def _to_raw(self, value: Any) -> Any:
        t = self.field_type
        if t == SheetFieldType.STRING:
            return str(value) if value != "" else None
        elif t == SheetFieldType.DATE_TIME:
            return datetime_to_serial(_parse_date_time(value))
        elif t == SheetFieldType.BOOLEAN:
            return _parse_boolean(value)
        raw = self._parse(value)
        if isinstance(raw, Decimal):
            return float(raw)
        return raw

    def to_cell_data(self, value: Any, name: str = "") -> CellData:
        """
        Cell to write for value, with the number format so the sheet displays
        it as the declared type.  None gives an empty cell.
        """
        raw = self.to_raw(value, name)
        if raw is None:
            return CellData()
        if self.field_type == SheetFieldType.STRING:
            return CellData(ExtendedValue(stringValue=raw))
        if self.field_type == SheetFieldType.BOOLEAN:
            return CellData(ExtendedValue(boolValue=raw))
        return CellData(ExtendedValue(numberValue=raw), CellFormat(self.number_format))

def sheet_field(column_id: int, display_name: str = "",
                field_type: SheetFieldType|str = SheetFieldType.STRING,
                number_format_pattern: str|None = None,
                default: Any = None):
    """
    dataclasses.field() for a record attribute stored in column column_id.
    """
    meta = SheetField(column_id, display_name, field_type, number_format_pattern)
    return field(default=default, metadata={SHEET_FIELD_METADATA_KEY: meta})
