"""
A typed layer over the Google Sheets v4 Python client.
Rows of a tab map to dataclass records whose fields are tagged with a column,
a display name and a cell type, with read/append/update/delete of records and
CSV/Excel import and export on top.

Python dataclasses are used for the API resource structs and most of the logic
is translating between those and the raw dicts the client sends.
"""
from .access import gsheets
from .sheets import *
