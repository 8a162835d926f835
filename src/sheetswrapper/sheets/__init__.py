"""
Classes to facilitate working with Google Sheets
"""

# can address up to 'ZZZ'
GoogleSheetsMaxColumns = 18278

from .range import SheetRange
from .fields import SheetField, SheetFieldType, sheet_field
from .record import BaseRecord, BatchUpdateRequestObject
from .helper import SheetHelper, RecordSheetHelper
from .repository import BaseRepository, SchemaValidationResult
from .appender import SheetAppender
from .exporter import SheetExporter
