import csv
import logging
from pathlib import Path
from typing import TextIO

import openpyxl

from .helper import SheetHelper
from .range import SheetRange

logger = logging.getLogger(__name__)

# excel's own limit on worksheet titles
_EXCEL_TITLE_MAX = 31
_EXCEL_TITLE_BAD_CHARS = str.maketrans({c: "_" for c in '[]:*?/\\'})

class SheetExporter():
    """
    Dump a range of the helper's tab to CSV or an Excel workbook.
    """
    def __init__(self, helper: SheetHelper) -> None:
        self.helper = helper

    def _rows(self, range: SheetRange|str, formatted: bool) -> list[list]:
        if formatted:
            return self.helper.get_rows_formatted(range)
        return self.helper.get_rows(range)

    def export_as_csv(self, range: SheetRange|str, destination: str|Path|TextIO,
                      formatted: bool = True, **csv_options) -> int:
        """
        Write the rows of range as CSV.  Formatted values are the text the
        sheet displays, unformatted are raw numbers and serial dates.
        Returns the number of rows written.
        """
        rows = self._rows(range, formatted)
        if isinstance(destination, (str, Path)):
            with open(destination, 'w', newline='', encoding='utf-8') as f:
                csv.writer(f, **csv_options).writerows(rows)
        else:
            csv.writer(destination, **csv_options).writerows(rows)
        logger.info("exported %d row(s) of %r to csv", len(rows), self.helper.tab_name)
        return len(rows)

    def export_as_excel(self, range: SheetRange|str, path: str|Path,
                        sheet_title: str|None = None, formatted: bool = False) -> int:
        """
        Write the rows of range to a new workbook with one worksheet, titled
        after the tab unless sheet_title is given.  Unformatted values are the
        default so numbers land in Excel as numbers.
        Returns the number of rows written.
        """
        rows = self._rows(range, formatted)
        wb = openpyxl.Workbook()
        ws = wb.active
        title = (sheet_title or self.helper.tab_name or "Sheet1").translate(_EXCEL_TITLE_BAD_CHARS)
        ws.title = title[:_EXCEL_TITLE_MAX]
        for row in rows:
            ws.append(list(row))
        out = Path(path)
        out.parent.mkdir(parents=True, exist_ok=True)
        wb.save(str(out))
        logger.info("exported %d row(s) of %r to %s", len(rows), self.helper.tab_name, out)
        return len(rows)
