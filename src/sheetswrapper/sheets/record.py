from dataclasses import dataclass, field, fields
from typing import Any, Self

from .fields import SHEET_FIELD_METADATA_KEY, SheetField
from .range import SheetRange
from .resources import CellData

@dataclass
class BatchUpdateRequestObject():
    """
    A single cell write, the range is only used for its start cell.
    """
    range: SheetRange
    data: CellData

@dataclass
class BaseRecord():
    """
    Base for a typed row.  Subclass as a dataclass and declare each column
    with sheet_field(), anything declared without one isn't stored in the sheet.

    row_id is the 1-based row the record was read from, 0 for a record that
    hasn't been written yet.  It is keyword only so subclass fields keep
    their positions.
    """
    row_id: int = field(default=0, kw_only=True, compare=False)

    @classmethod
    def sheet_fields(cls) -> list[tuple[str, SheetField]]:
        """
        (attribute name, SheetField) for every stored attribute, ordered by column.
        """
        found = []
        seen = {}
        for f in fields(cls):
            meta = f.metadata.get(SHEET_FIELD_METADATA_KEY)
            if meta is None:
                continue
            if meta.column_id in seen:
                raise ValueError(f"{cls.__name__}: column {meta.column_id} declared by both "
                                 f"{seen[meta.column_id]} and {f.name}")
            seen[meta.column_id] = f.name
            found.append((f.name, meta))
        if not found:
            raise ValueError(f"{cls.__name__} declares no sheet fields")
        return sorted(found, key=lambda nf: nf[1].column_id)

    @classmethod
    def sheet_field(cls, name: str) -> SheetField:
        for n, meta in cls.sheet_fields():
            if n == name:
                return meta
        raise KeyError(f"{cls.__name__} has no sheet field {name!r}")

    @classmethod
    def min_column_id(cls) -> int:
        return cls.sheet_fields()[0][1].column_id

    @classmethod
    def max_column_id(cls) -> int:
        return cls.sheet_fields()[-1][1].column_id

    @classmethod
    def header_row(cls) -> list[str]:
        """Display names laid out by column, gaps are empty"""
        lo = cls.min_column_id()
        header = [""] * (cls.max_column_id() - lo + 1)
        for name, meta in cls.sheet_fields():
            header[meta.column_id - lo] = meta.display_name or name
        return header

    @classmethod
    def from_row(cls, row: list[Any], row_id: int = 0, min_column_id: int = 1) -> Self:
        """
        Build a record from raw cell values, row[0] being column min_column_id.
        The API leaves off trailing empty cells so a short row is normal.
        """
        kwargs = {}
        for name, meta in cls.sheet_fields():
            idx = meta.column_id - min_column_id
            if idx < 0:
                raise ValueError(f"{cls.__name__}.{name} is in column {meta.column_id}, "
                                 f"before the first column read ({min_column_id})")
            value = row[idx] if idx < len(row) else None
            kwargs[name] = meta.parse(value, name)
        return cls(**kwargs, row_id=row_id)

    def to_row(self) -> list[Any]:
        """
        Raw values from min_column_id() to max_column_id() in the form
        an unformatted read returns them, gaps are None.
        """
        lo = self.min_column_id()
        row = [None] * (self.max_column_id() - lo + 1)
        for name, meta in self.sheet_fields():
            row[meta.column_id - lo] = meta.to_raw(getattr(self, name), name)
        return row

    def to_cell_data(self) -> list[CellData]:
        """Cells from min_column_id() to max_column_id(), gaps are empty"""
        lo = self.min_column_id()
        cells = [CellData() for _ in range(self.max_column_id() - lo + 1)]
        for name, meta in self.sheet_fields():
            cells[meta.column_id - lo] = meta.to_cell_data(getattr(self, name), name)
        return cells

    def field_update_request(self, tab_name: str, name: str) -> BatchUpdateRequestObject:
        """Write for a single attribute at (its column, row_id)"""
        meta = self.sheet_field(name)
        if self.row_id < 1:
            raise ValueError(f"{self.__class__.__name__} has no row to update, row_id is {self.row_id}")
        cell = SheetRange(tab_name, meta.column_id, self.row_id, meta.column_id, self.row_id)
        return BatchUpdateRequestObject(cell, meta.to_cell_data(getattr(self, name), name))

    def to_update_requests(self, tab_name: str) -> list[BatchUpdateRequestObject]:
        return [self.field_update_request(tab_name, name) for name, _ in self.sheet_fields()]
