from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from sheetswrapper.sheets import BaseRecord, SheetFieldType, sheet_field

@dataclass
class Employee(BaseRecord):
    name: str|None = sheet_field(1, "Name")
    hired: datetime|None = sheet_field(2, "Hired", SheetFieldType.DATE_TIME)
    salary: Decimal|None = sheet_field(3, "Salary", SheetFieldType.CURRENCY)
    phone: int|None = sheet_field(4, "Phone", SheetFieldType.PHONE_NUMBER)
    rating: float|None = sheet_field(5, "Rating", SheetFieldType.NUMBER)
    active: bool|None = sheet_field(6, "Active", SheetFieldType.BOOLEAN)

@dataclass
class Offset(BaseRecord):
    """Columns C and E only, nothing in A, B or D"""
    code: str|None = sheet_field(3, "Code")
    count: int|None = sheet_field(5, "Count", SheetFieldType.NUMBER)
    note: str = ""

def ann() -> Employee:
    return Employee("Ann", datetime(2021, 3, 15, 9, 30), Decimal("85000.50"),
                    5551234567, 4.5, True)
