import re

from typing import Self

from . import GoogleSheetsMaxColumns

class SheetRange():
    """
    A rectangular block of cells on a tab, addressed by 1-based row and column
    indices.  This is the one place that knows how to turn indices into the
    notations the Sheets API accepts.
    See https://developers.google.com/sheets/api/guides/concepts#cell

    Two notations are produced:

        A1:    <tab>!<start col><start row>:<end col><end row>
        R1C1:  <tab>!R<start row>C<start col>:R<end row>C<end col>

    An end of None means unbounded, so SheetRange("Data", 1, 2, 4) is every
    row from 2 down in columns A-D, or Data!A2:D.
    A1 can't express a bounded end row with an unbounded end column
    (there is no 'A1:5'), R1C1 can ('R1C1:R5') so notation picks whichever works.

    Tab titles that aren't plain identifiers are wrapped in single quotes
    with any embedded quote doubled, as the sheets UI does.
    """
    # tab, then start cell, then optional end
    _A1REGEXSTR = r"^\s*(?:(?P<tab>'(?:[^']|'')+'|[^'!:]+)!)?(?P<start_col>[A-Za-z]{0,3})(?P<start_row>\d*)(?::(?P<end_col>[A-Za-z]{0,3})(?P<end_row>\d*))?\s*$"
    _COLREGEXSTR = r"^[A-Z]{1,3}$"
    _PLAINTABREGEXSTR = r"^[A-Za-z_][A-Za-z0-9_]*$"

    _a1_re = re.compile(_A1REGEXSTR)
    _col_re = re.compile(_COLREGEXSTR)
    _plain_tab_re = re.compile(_PLAINTABREGEXSTR)
    _cell_re = re.compile(r"^[A-Za-z]{1,3}\d+$")
    # titles the API would read as a cell, Q1 or R2C3
    _cell_like_tab_re = re.compile(r"^(?:[A-Za-z]{1,3}\d+|[Rr]\d*[Cc]\d*)$")

    def __init__(self, tab_name: str = "",
                 start_column: int = 1, start_row: int = 1,
                 end_column: int|None = None, end_row: int|None = None) -> None:
        self.tab_name = str(tab_name) if tab_name else ""
        self.start_column = int(start_column)
        self.start_row = int(start_row)
        self.end_column = None if end_column is None else int(end_column)
        self.end_row = None if end_row is None else int(end_row)
        self._validate()

    def _validate(self) -> None:
        if self.start_column < 1 or self.start_row < 1:
            raise ValueError(f"row and column indices are 1-based: {self!r}")
        if self.start_column > GoogleSheetsMaxColumns:
            raise ValueError(f"start column past the sheets column limit: {self.start_column}")
        if self.end_column is not None:
            if self.end_column < self.start_column:
                raise ValueError(f"end column before start column: {self!r}")
            if self.end_column > GoogleSheetsMaxColumns:
                raise ValueError(f"end column past the sheets column limit: {self.end_column}")
        if self.end_row is not None and self.end_row < self.start_row:
            raise ValueError(f"end row before start row: {self!r}")

    def __repr__(self) -> str:
        return (f"{self.__class__.__name__}({self.tab_name!r}, {self.start_column}, {self.start_row}, "
                f"{self.end_column}, {self.end_row})")

    def __str__(self) -> str:
        return self.notation

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SheetRange):
            return NotImplemented
        return ((self.tab_name, self.start_column, self.start_row, self.end_column, self.end_row) ==
                (other.tab_name, other.start_column, other.start_row, other.end_column, other.end_row))

    def __hash__(self) -> int:
        return hash((self.tab_name, self.start_column, self.start_row, self.end_column, self.end_row))

    @classmethod
    def letters_to_column(cls, letters: str) -> int:
        """
        Convert a sheet column A-ZZZ to its 1-based integer index, so 'A' goes to 1.
        """
        c = str(letters).strip().upper()
        if not cls._col_re.match(c):
            raise ValueError(f"invalid column letters: {letters!r}")
        num = 0
        for ch in c:
            num = num * 26 + (ord(ch) - 64)
        return num

    @classmethod
    def column_to_letters(cls, index: int) -> str:
        """
        Translate a 1-based column index to its A-ZZZ letters.
        Bijective base 26, there is no zero digit so 26 is 'Z' and 27 is 'AA'.
        """
        i = int(index)
        if i < 1 or i > GoogleSheetsMaxColumns:
            raise ValueError(f"column index out of range: {index}")
        col = ""
        while i:
            i, r = divmod(i - 1, 26)
            col = chr(r + 65) + col
        return col

    @classmethod
    def quote_tab_name(cls, tab_name: str) -> str:
        if not tab_name:
            return tab_name
        if cls._plain_tab_re.match(tab_name) and not cls._cell_like_tab_re.match(tab_name):
            return tab_name
        escaped = tab_name.replace("'", "''")
        return f"'{escaped}'"

    @classmethod
    def from_a1(cls, a1: str) -> Self:
        """
        Parse an A1 string.  Open starts default to column A and row 1,
        so 'Data!C:E' is columns C-E from row 1 and 'Data!3:7' is rows 3-7
        of every column from A.
        """
        text = str(a1).strip()
        if text and "!" not in text and ":" not in text and not cls._cell_re.match(text):
            # no cell part at all so it's a bare tab title
            if len(text) > 1 and text[0] == "'" and text[-1] == "'":
                text = text[1:-1].replace("''", "'")
            return cls(text)
        m = cls._a1_re.match(text)
        if not m or not (m.group('start_col') or m.group('start_row') or m.group('tab')):
            raise ValueError(f"invalid A1 notation: {a1!r}")
        tab = m.group('tab') or ""
        if tab.startswith("'"):
            tab = tab[1:-1].replace("''", "'")
        sc = m.group('start_col')
        sr = m.group('start_row')
        ec = m.group('end_col')
        er = m.group('end_row')
        if ec is None and er is None:
            # single cell, or just the tab meaning the whole sheet
            if not (sc or sr):
                return cls(tab)
            if not (sc and sr):
                raise ValueError(f"a single cell needs both column and row: {a1!r}")
            c = cls.letters_to_column(sc)
            r = int(sr)
            return cls(tab, c, r, c, r)
        if not (sc or sr) or not (ec or er):
            raise ValueError(f"invalid A1 notation: {a1!r}")
        return cls(tab,
                   cls.letters_to_column(sc) if sc else 1,
                   int(sr) if sr else 1,
                   cls.letters_to_column(ec) if ec else None,
                   int(er) if er else None)

    @property
    def can_support_a1_notation(self) -> bool:
        """A1 has no form for a bounded end row with an open end column"""
        return not (self.end_column is None and self.end_row is not None)

    @property
    def is_single_cell(self) -> bool:
        return self.end_column == self.start_column and self.end_row == self.start_row

    def _prefix(self) -> str:
        tab = self.quote_tab_name(self.tab_name)
        return f"{tab}!" if tab else ""

    @property
    def a1_notation(self) -> str:
        if not self.can_support_a1_notation:
            raise ValueError(f"range cannot be written in A1 notation: {self!r}")
        start = f"{self.column_to_letters(self.start_column)}{self.start_row}"
        if self.is_single_cell:
            return self._prefix() + start
        end = ""
        if self.end_column is not None:
            end = self.column_to_letters(self.end_column)
            if self.end_row is not None:
                end += str(self.end_row)
        elif self.end_row is None:
            if self.tab_name and self.start_column == 1 and self.start_row == 1:
                # the whole tab
                return self.quote_tab_name(self.tab_name)
            # open in both directions, the widest A1 can go is ZZZ
            end = self.column_to_letters(GoogleSheetsMaxColumns)
        return f"{self._prefix()}{start}:{end}"

    @property
    def r1c1_notation(self) -> str:
        start = f"R{self.start_row}C{self.start_column}"
        if self.is_single_cell:
            return self._prefix() + start
        end = ""
        if self.end_row is not None:
            end += f"R{self.end_row}"
        if self.end_column is not None:
            end += f"C{self.end_column}"
        if not end:
            return self._prefix() + start + ":" + f"C{GoogleSheetsMaxColumns}"
        return f"{self._prefix()}{start}:{end}"

    @property
    def notation(self) -> str:
        """Whichever notation can express the range, A1 preferred"""
        return self.a1_notation if self.can_support_a1_notation else self.r1c1_notation

    @property
    def num_rows(self) -> int:
        """0 when the rows are unbounded"""
        return 0 if self.end_row is None else self.end_row - self.start_row + 1

    @property
    def num_columns(self) -> int:
        """0 when the columns are unbounded"""
        return 0 if self.end_column is None else self.end_column - self.start_column + 1
