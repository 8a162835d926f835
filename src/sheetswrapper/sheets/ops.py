import logging

from googleapiclient.discovery import Resource

from .resources import *
from .requests import *
from .range import SheetRange

from functools import partial

from ..access import gsheets

logger = logging.getLogger(__name__)

# module level fallback when the caller hasn't built its own service
_get_service = partial(gsheets.get_service, "sheets", "v4")

def _sheets(service: Resource|None) -> Resource:
    s = service if service is not None else _get_service()
    if s is None:
        raise RuntimeError("No Google Sheets service available, credentials not configured")
    return s.spreadsheets()

def get(spreadsheetid: str,
        ranges : list[SheetRange|str]|None = None,
        includeGridData: bool = False,
        service: Resource|None = None) -> Spreadsheet:
    """
    Wrapper for calling the get() spreadsheet method.
    See https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/get
    This is for retrieving spreadsheet properties, the tab list in particular.
    """
    ret = Spreadsheet()
    if spreadsheetid:
        range_list = [str(r) for r in ranges or []]
        logger.debug("spreadsheets.get %s ranges=%s", spreadsheetid, range_list)
        response = _sheets(service).get(spreadsheetId=spreadsheetid,
                                        ranges=range_list,
                                        includeGridData=includeGridData).execute()
        if response:
            ret = Spreadsheet.from_base(response)
    return ret

def batchUpdate(spreadsheetid: str, request: GoogleSheetsUpdateRequest|dict,
                service: Resource|None = None) -> GoogleSheetsUpdateRequestResponse:
    """
    Wrapper for calling the batchUpdate() spreadsheet method.
    See https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/batchUpdate
    Structural changes (insert/delete rows and cols) and cell writes with
    formats go through here.
    """
    body = request.to_base() if isinstance(request, GoogleSheetsUpdateRequest) else request
    logger.debug("spreadsheets.batchUpdate %s with %d request(s)", spreadsheetid, len(body.get('requests', [])))
    response = _sheets(service).batchUpdate(spreadsheetId=spreadsheetid, body=body).execute()
    if response:
        return GoogleSheetsUpdateRequestResponse.from_base(response)
    return GoogleSheetsUpdateRequestResponse()

def getValues(spreadsheetId: str,
              range: SheetRange|str,
              dimension: str = "ROWS",
              valueRenderOption: str = "UNFORMATTED",
              dateTimeRenderOption: str = "SERIAL",
              service: Resource|None = None) -> ValueRange:
    """
    Wrapper for calling the get() method on the values resource.
    See https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets.values/get
    Trailing empty rows and cells are not returned by the API, so rows
    can be ragged and a blank range comes back with no values at all.
    """
    dim = GoogleSheetsEnum.dimension(dimension)
    if not dim:
        raise ValueError(f"Invalid majorDimension value: {dimension}")
    value_render = GoogleSheetsEnum.valueRenderOption(valueRenderOption)
    if not value_render:
        raise ValueError(f"Invalid valueRenderOption value: {valueRenderOption}")
    date_time_render = GoogleSheetsEnum.dateTimeRenderOption(dateTimeRenderOption)
    if not date_time_render and value_render != "FORMATTED_VALUE":
        raise ValueError(f"Invalid dateTimeRenderOption value: {dateTimeRenderOption}")
    notation = range.notation if isinstance(range, SheetRange) else str(range)
    kwargs = {'spreadsheetId': spreadsheetId,
              'range': notation,
              'majorDimension': dim,
              'valueRenderOption': value_render}
    if date_time_render:
        kwargs['dateTimeRenderOption'] = date_time_render
    logger.debug("spreadsheets.values.get %s %s (%s)", spreadsheetId, notation, value_render)
    r = _sheets(service).values().get(**kwargs).execute()
    if r:
        return ValueRange.from_base(r)
    return ValueRange(notation, dim)
