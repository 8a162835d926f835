import pytest

from sheetswrapper.sheets import RecordSheetHelper, SheetHelper, SheetRange

from fake_service import FakeSheetsService
from sample_records import Employee, Offset, ann

TABS = [("Summary", 0), ("Staff", 42)]

def body(*requests) -> dict:
    return {'requests': list(requests),
            'includeSpreadsheetInResponse': False,
            'responseRanges': [],
            'responseIncludeGridData': False}

def make_helper(tab_name="Staff", data=None) -> tuple[SheetHelper, FakeSheetsService]:
    service = FakeSheetsService(TABS, data)
    return SheetHelper("ss1", tab_name=tab_name, service=service), service

def test_tab_lookup():
    helper, service = make_helper("staff")
    assert(helper.sheet_id == 42)
    assert(helper.tab_name == "Staff")
    # looked up once
    helper.sheet_id
    assert(service.get_requests == ["ss1"])

def test_empty_tab_is_first():
    helper, _ = make_helper("")
    assert(helper.sheet_id == 0)
    assert(helper.tab_name == "Summary")

def test_unknown_tab():
    helper, _ = make_helper("Payroll")
    with pytest.raises(KeyError):
        helper.sheet_id

def test_update_tab_name():
    helper, _ = make_helper()
    helper.update_tab_name("SUMMARY")
    assert((helper.tab_name, helper.sheet_id) == ("Summary", 0))
    assert(helper.get_all_tab_names() == ["Summary", "Staff"])

def test_get_rows_render_options():
    helper, service = make_helper(data={"Staff!A2:F": [["Ann", 44270]]})
    assert(helper.get_rows("A2:F") == [["Ann", 44270]])
    assert(service.value_requests[-1] == {'spreadsheetId': 'ss1', 'range': 'Staff!A2:F',
                                          'majorDimension': 'ROWS',
                                          'valueRenderOption': 'UNFORMATTED_VALUE',
                                          'dateTimeRenderOption': 'SERIAL_NUMBER'})
    assert(helper.get_rows_formatted(SheetRange("Other", 1, 1, 2, 2)) == [])
    assert(service.value_requests[-1]['range'] == 'Other!A1:B2')
    assert(service.value_requests[-1]['valueRenderOption'] == 'FORMATTED_VALUE')
    assert(service.value_requests[-1]['dateTimeRenderOption'] == 'FORMATTED_STRING')

def test_get_rows_open_columns_uses_r1c1():
    helper, service = make_helper()
    helper.get_rows("Staff!3:7")
    assert(service.value_requests[-1]['range'] == 'Staff!R3C1:R7')

def test_delete_row():
    helper, service = make_helper()
    helper.delete_row(5)
    assert(service.batch_bodies == [body({'deleteDimension': {'range': {
        'sheetId': 42, 'dimension': 'ROWS', 'startIndex': 4, 'endIndex': 5}}})])

def test_delete_rows_inclusive():
    helper, service = make_helper()
    helper.delete_rows(3, 6)
    assert(service.requests == [{'deleteDimension': {'range': {
        'sheetId': 42, 'dimension': 'ROWS', 'startIndex': 2, 'endIndex': 6}}}])
    with pytest.raises(ValueError):
        helper.delete_rows(6, 3)
    with pytest.raises(ValueError):
        helper.delete_row(0)

def test_delete_column():
    helper, service = make_helper()
    helper.delete_column("B")
    helper.delete_column(27)
    assert(service.requests == [
        {'deleteDimension': {'range': {'sheetId': 42, 'dimension': 'COLUMNS', 'startIndex': 1, 'endIndex': 2}}},
        {'deleteDimension': {'range': {'sheetId': 42, 'dimension': 'COLUMNS', 'startIndex': 26, 'endIndex': 27}}}])

def test_first_tab_sheet_id_zero_is_sent():
    helper, service = make_helper("Summary")
    helper.delete_row(1)
    assert(service.requests[0]['deleteDimension']['range']['sheetId'] == 0)
    assert(service.requests[0]['deleteDimension']['range']['startIndex'] == 0)

def test_insert_blank():
    helper, service = make_helper()
    helper.insert_blank_row(1)
    helper.insert_blank_column("C")
    assert(service.requests == [
        {'insertDimension': {'range': {'sheetId': 42, 'dimension': 'ROWS', 'startIndex': 0, 'endIndex': 1},
                             'inheritFromBefore': False}},
        {'insertDimension': {'range': {'sheetId': 42, 'dimension': 'COLUMNS', 'startIndex': 2, 'endIndex': 3},
                             'inheritFromBefore': True}}])
    with pytest.raises(ValueError):
        helper.insert_blank_row(0)

def test_batch_update():
    helper, service = make_helper()
    e = ann()
    e.row_id = 4
    helper.batch_update([e.field_update_request("Staff", "name"),
                         e.field_update_request("Staff", "salary")])
    assert(service.requests == [
        {'repeatCell': {'range': {'sheetId': 42, 'startRowIndex': 3, 'endRowIndex': 4,
                                  'startColumnIndex': 0, 'endColumnIndex': 1},
                        'cell': {'userEnteredValue': {'stringValue': 'Ann'}},
                        'fields': '*'}},
        {'repeatCell': {'range': {'sheetId': 42, 'startRowIndex': 3, 'endRowIndex': 4,
                                  'startColumnIndex': 2, 'endColumnIndex': 3},
                        'cell': {'userEnteredValue': {'numberValue': 85000.5},
                                 'userEnteredFormat': {'numberFormat': {'type': 'CURRENCY',
                                                                        'pattern': '$#,##0.00'}}},
                        'fields': '*'}}])

def test_batch_update_empty_makes_no_call():
    helper, service = make_helper()
    assert(helper.batch_update([]).spreadsheetId == "ss1")
    assert(service.batch_bodies == [])
    assert(service.get_requests == [])

def test_record_helper_type_checks():
    with pytest.raises(TypeError):
        RecordSheetHelper(dict, "ss1")
    helper = RecordSheetHelper(Employee, "ss1", tab_name="Staff", service=FakeSheetsService(TABS))
    with pytest.raises(TypeError):
        helper.append_row(Offset("X-1", 1))

def test_append_row():
    service = FakeSheetsService(TABS)
    helper = RecordSheetHelper(Employee, "ss1", tab_name="Staff", service=service)
    response = helper.append_row(ann())
    assert(response.spreadsheetId == "ss1")
    (request,) = service.requests
    append = request['appendCells']
    assert(append['sheetId'] == 42)
    assert(append['fields'] == '*')
    cells = append['rows'][0]['values']
    assert(len(cells) == 6)
    assert(cells[0] == {'userEnteredValue': {'stringValue': 'Ann'}})
    assert(cells[5] == {'userEnteredValue': {'boolValue': True}})

def test_append_pads_to_first_column():
    service = FakeSheetsService(TABS)
    helper = RecordSheetHelper(Offset, "ss1", tab_name="Staff", service=service)
    helper.append_rows([Offset("X-1", 12), Offset("X-2", None)])
    rows = service.requests[0]['appendCells']['rows']
    assert(rows[0]['values'] == [{}, {}, {'userEnteredValue': {'stringValue': 'X-1'}},
                                 {}, {'userEnteredValue': {'numberValue': 12}}])
    assert(rows[1]['values'] == [{}, {}, {'userEnteredValue': {'stringValue': 'X-2'}}, {}, {}])

def test_get_records():
    data = {"Staff!A2:F": [["Ann", 44270, 85000.5, 5551234567, 4.5, True],
                           [],
                           ["", None],
                           ["Bob"]]}
    service = FakeSheetsService(TABS, data)
    helper = RecordSheetHelper(Employee, "ss1", tab_name="Staff", service=service)
    records = helper.get_records("A2:F")
    assert([(r.name, r.row_id) for r in records] == [("Ann", 2), ("Bob", 5)])
    assert(records[0].salary == 85000.5)
    assert(records[1].phone is None)

def test_get_records_from_later_column():
    data = {"Staff!C2:E": [["X-1", None, 3]]}
    service = FakeSheetsService(TABS, data)
    helper = RecordSheetHelper(Offset, "ss1", tab_name="Staff", service=service)
    (record,) = helper.get_records(SheetRange("Staff", 3, 2, 5))
    assert(record == Offset("X-1", 3))
    assert(record.row_id == 2)

def test_get_rows_whole_tab_with_cell_like_title():
    helper, service = make_helper("FY2024")
    helper.get_rows(SheetRange("FY2024"))
    assert(service.value_requests[-1]['range'] == "'FY2024'")

def test_init_with_service_account(monkeypatch):
    import sheetswrapper.sheets.helper as helper_module
    seen = {}
    service = FakeSheetsService(TABS)

    def fake_credentials(json_credentials, subject=None, scopes="sheets"):
        seen.update(json=json_credentials, subject=subject, scopes=scopes)
        return "creds"

    def fake_build(credentials, name, version):
        seen.update(credentials=credentials, name=name, version=version)
        return service

    monkeypatch.setattr(helper_module, "service_account_credentials", fake_credentials)
    monkeypatch.setattr(helper_module, "build_service", fake_build)
    helper = SheetHelper("ss1", "me@example.com", "STAFF", scopes=["sheets", "drive-file"])
    helper.init('{"type": "service_account"}')
    assert(seen == {'json': '{"type": "service_account"}', 'subject': "me@example.com",
                    'scopes': ["sheets", "drive-file"], 'credentials': "creds",
                    'name': "sheets", 'version': "v4"})
    assert(helper.service is service)
    assert((helper.tab_name, helper.sheet_id) == ("Staff", 42))
    assert(service.get_requests == ["ss1"])
