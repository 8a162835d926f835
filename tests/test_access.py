import json
from pathlib import Path

from google.oauth2 import service_account

import sheetswrapper.access as access_module
from sheetswrapper import gsheets
from sheetswrapper.access import SHEETS_SCOPE, get_scope, to_scope_list

def fresh():
    return type(gsheets)()

def test_get_scope():
    assert(get_scope("sheets") == SHEETS_SCOPE)
    assert(get_scope("sheets-ro") == "https://www.googleapis.com/auth/spreadsheets.readonly")
    assert(get_scope("https://www.googleapis.com/auth/drive.appdata") == "https://www.googleapis.com/auth/drive.appdata")
    assert(get_scope("calendar") == "")

def test_to_scope_list():
    assert(to_scope_list(None) == [])
    assert(to_scope_list("sheets") == [SHEETS_SCOPE])
    assert(to_scope_list(["sheets", SHEETS_SCOPE, "bogus", "drive-file"]) ==
           [SHEETS_SCOPE, "https://www.googleapis.com/auth/drive.file"])

def test_defaults():
    a = fresh()
    assert(not a)
    assert(a.scopes == [SHEETS_SCOPE])
    assert(a.service_account_file is None)
    assert(a.session_scopes == [])

def test_config_round_trip(tmp_path):
    a = fresh()
    a.config = {'secrets': str(tmp_path / "secrets.json"),
                'cache': str(tmp_path / "tokens.json"),
                'service_account': str(tmp_path / "key.json"),
                'subject': "me@example.com",
                'scopes': ["sheets-ro", "drive-file"],
                'server': "127.0.0.1",
                'port': "8765",
                'auth_prompt_msg': "go to {url}"}
    config = a.config
    assert(config['secrets'] == str(tmp_path / "secrets.json"))
    assert(config['service_account'] == str(tmp_path / "key.json"))
    assert(config['subject'] == "me@example.com")
    assert(config['scopes'] == ["https://www.googleapis.com/auth/spreadsheets.readonly",
                                "https://www.googleapis.com/auth/drive.file"])
    assert(config['port'] == 8765)
    assert(config['auth_prompt_msg'] == "go to {url}")
    b = fresh()
    b.config = config
    assert(b.config == config)

def test_config_partial_keeps_rest():
    a = fresh()
    a.config = {'port': 9000}
    assert(a.auth_port == 9000)
    assert(a.scopes == [SHEETS_SCOPE])
    assert(a.cred_cache == type(gsheets)._DEFAULT_CACHE)

def test_append_scopes():
    a = fresh()
    a.append_scopes("drive-file", ["sheets", "drive-ro"])
    assert(a.scopes == [SHEETS_SCOPE,
                        "https://www.googleapis.com/auth/drive.file",
                        "https://www.googleapis.com/auth/drive.readonly"])

def test_connect_with_service_account(tmp_path, monkeypatch):
    key = tmp_path / "key.json"
    key.write_text(json.dumps({"type": "service_account", "client_email": "bot@example.iam.gserviceaccount.com"}))
    seen = {}

    def fake_credentials(info, subject=None, scopes="sheets"):
        seen.update(info=info, subject=subject, scopes=scopes)
        return service_account.Credentials(object(), info["client_email"],
                                           "https://oauth2.googleapis.com/token", scopes=scopes)

    built = []
    monkeypatch.setattr(access_module, "service_account_credentials", fake_credentials)
    monkeypatch.setattr(access_module, "build_service", lambda creds, name, version: built.append((name, version)) or object())

    a = fresh()
    a.service_account_file = key
    a.subject = "me@example.com"
    assert(a.connect())
    assert(seen['subject'] == "me@example.com")
    assert(seen['scopes'] == [SHEETS_SCOPE])
    assert(a.session_scopes == [SHEETS_SCOPE])
    s = a.get_service("sheets", "v4")
    assert(a.get_service("sheets", "v4") is s)
    assert(built == [("sheets", "v4")])

    # a scope the session wasn't granted drops it
    a.append_scopes("drive")
    assert(not a)

def test_no_credentials(tmp_path, monkeypatch):
    import google.auth
    import google.auth.exceptions

    def no_default(scopes=None):
        raise google.auth.exceptions.DefaultCredentialsError("none")

    monkeypatch.setattr(google.auth, "default", no_default)
    a = fresh()
    a.client_secrets = tmp_path / "missing.json"
    a.cred_cache = Path(tmp_path / "missing_tokens.json")
    assert(a.get_service("sheets", "v4") is None)

def test_package_exposes_module_and_singleton():
    import sheetswrapper
    assert(sheetswrapper.access is access_module)
    assert(isinstance(sheetswrapper.gsheets, access_module._SheetsAccess))
    assert(access_module.gsheets is gsheets)
