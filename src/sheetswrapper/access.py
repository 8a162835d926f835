from collections.abc import Iterable
from pathlib import Path
import json
import copy
import logging

import google.auth
import google.auth.exceptions
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google.oauth2 import service_account
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import build, Resource

logger = logging.getLogger(__name__)

SHEETS_SCOPE = "https://www.googleapis.com/auth/spreadsheets"

_SCOPES = {
    "sheets": SHEETS_SCOPE,
    "sheets-ro": "https://www.googleapis.com/auth/spreadsheets.readonly",
    "drive-file": "https://www.googleapis.com/auth/drive.file",
    "drive": "https://www.googleapis.com/auth/drive",
    "drive-ro": "https://www.googleapis.com/auth/drive.readonly",
}
_SCOPE_URL_PREFIX = "https://www.googleapis.com/"

def get_scope(scope: str) -> str:
    """
    Get a scope based on simplified label.
    A raw URL will also be expected.
    """
    s = str(scope)
    sc = _SCOPES.get(s, "")
    if not sc and s.startswith(_SCOPE_URL_PREFIX):
        sc = s
    return sc

def to_scope_list(value: None|str|Iterable[str]) -> list[str]:
    """Resolve a label, URL or list of either to scope URLs, dropping unknowns"""
    if value is None:
        return []
    values = [value] if isinstance(value, str) or not isinstance(value, Iterable) else value
    slist = []
    for v in values:
        s = get_scope(str(v))
        if s and s not in slist:
            slist.append(s)
    return slist

def service_account_credentials(json_credentials: str|bytes|dict,
                                subject: str|None = None,
                                scopes: None|str|Iterable[str] = "sheets") -> service_account.Credentials:
    """
    Credentials for a service account from the JSON key Google hands out.
    subject is the account to act as, for a service account with domain wide
    delegation that would be a user, otherwise it's just the service account
    email and may be left out.
    """
    info = json_credentials if isinstance(json_credentials, dict) else json.loads(json_credentials)
    creds = service_account.Credentials.from_service_account_info(info, scopes=to_scope_list(scopes))
    if subject:
        creds = creds.with_subject(subject)
    return creds

def build_service(credentials, name: str = "sheets", version: str = "v4") -> Resource:
    """
    Build a client service.  The discovery document is bundled with the client
    library so there is no file cache to configure.
    """
    logger.debug("building %s:%s service", name, version)
    return build(name, version, credentials=credentials, cache_discovery=False)

class _SheetsAccess():
    """
    Class encapsulating authenticated access to Google Sheets for callers that
    don't hand a service to each helper themselves.
    See https://developers.google.com/workspace/guides/create-credentials#choose_the_access_credential_that_is_right_for_you
    for an overview of what you'll need.  In order of preference a connect() uses:

        1. A service account key file, optionally acting as a subject.
        2. The OAuth token cache from a previous run, refreshed as needed.
        3. The installed app OAuth flow from a client secrets file.
        4. Application default credentials (GOOGLE_APPLICATION_CREDENTIALS etc).

    It makes no sense to have multiple authenticated sessions per application
    so this is a module singleton, the services it builds are cached per name and version.
    """

    _DEFAULT_AUTH_PROMPT_MSG = "Please visit this URL to authorize access to your spreadsheets: {url}"
    _DEFAULT_AUTH_FLOW_SUCCESS_MSG = "Authorization complete, you may close this window."
    _DEFAULT_SECRETS = Path.home() / "gsheets_client_secrets.json"
    _DEFAULT_CACHE = Path.home() / "gsheets_tokens.json"

    def __init__(self) -> None:
        self.reset()

    def __bool__(self) -> bool:
        """True is we are connected and authenticated"""
        return self.connected

    def __str__(self) -> str:
        if self.connected:
            return f"Connected:{str(self.session_scopes)}"
        return f"Disconnected:{str(self._scopes)}"

    def __repr__(self) -> str:
        return f"{str(self.__class__)}:{str(self)}"

    @property
    def client_secrets(self) -> Path:
        """
        Path to client secrets file as provided by Google when generating OAuth credentials.
        """
        return self._secrets

    @client_secrets.setter
    def client_secrets(self, value: Path|str) -> None:
        val = value if isinstance(value, Path) else Path(str(value))
        if val != self._secrets:
            self._secrets = val
            self.clear()

    @property
    def cred_cache(self) -> Path:
        """
        Path to local credential cache to not have to do full authentication each time.
        """
        return self._cache

    @cred_cache.setter
    def cred_cache(self, value: Path|str) -> None:
        val = value if isinstance(value, Path) else Path(str(value))
        if val != self._cache:
            self._cache = val
            self.clear()

    @property
    def service_account_file(self) -> Path|None:
        """Service account JSON key, takes precedence over OAuth when set"""
        return self._service_account_file

    @service_account_file.setter
    def service_account_file(self, value: Path|str|None) -> None:
        self._service_account_file = None if value is None else Path(str(value))
        self.clear()

    @property
    def subject(self) -> str|None:
        """Account a service account acts as"""
        return self._subject

    @subject.setter
    def subject(self, value: str|None) -> None:
        self._subject = None if not value else str(value)
        self.clear()

    def clear(self) -> None:
        """Drop any session, the next get_service() reconnects"""
        self._creds = None
        self._services = {}

    @property
    def connected(self) -> bool:
        """
        Are we authenticated with Google?
        Service account credentials are only valid after first use so
        having them at all counts.
        """
        if isinstance(self._creds, service_account.Credentials):
            return True
        return bool(self._creds) and bool(self._creds.valid)

    @property
    def session_scopes(self) -> list[str]:
        """
        Scopes authenticated by Google for this session.
        This differs to self.scopes as that is what is requested or to be requested.
        """
        if self.connected:
            return list(self._creds.scopes or [])
        return []

    @property
    def scopes(self) -> list[str]:
        """
        The scopes requested or to be requested on next authentication sequence.
        """
        return self._scopes

    @scopes.setter
    def scopes(self, value: None|list[str]|str) -> None:
        """
        Override a new list of session scopes.
        This drops the session if the new list contains scopes
        that are not part of the current authenticated list.
        """
        self._scopes = to_scope_list(value)
        if not all(s in self.session_scopes for s in self._scopes):
            self.clear()

    def append_scopes(self, *args) -> None:
        """
        Adding to the current scope list.
        """
        for s in to_scope_list([i for a in args for i in ([a] if isinstance(a, str) else a)]):
            if s not in self._scopes:
                self._scopes.append(s)
        if not all(s in self.session_scopes for s in self._scopes):
            self.clear()

    @property
    def creds(self):
        """
        Current active access credentials or None
        """
        return self._creds

    @property
    def config(self) -> dict:
        """
        Get all configuration state as a dict.
        Convenience for getting it all at once for pushing into a json, toml, ini, etc, file.
        """
        config = {
            'secrets': str(self._secrets),
            'cache': str(self._cache),
            'service_account': str(self._service_account_file) if self._service_account_file else None,
            'subject': self._subject,
            'scopes': list(self._scopes),
            'server': self.auth_server,
            'port': self.auth_port,
            'auth_prompt_msg': self.auth_prompt_msg,
            'flow_success_msg': self.auth_flow_success_msg
        }
        return config

    @config.setter
    def config(self, config: dict) -> None:
        """
        Set configuration state from a dict.
        Convenience method for inserting state pulled from a config file or equivalent.
        Anything not present is left as is.
        """
        reconnect = False
        v = config.get('port', None)
        if v is not None:
            self.auth_port = int(v)
        v = config.get('server', None)
        if v is not None:
            self.auth_server = str(v)
        v = config.get('scopes', [])
        if v:
            self._scopes = to_scope_list(v)
            reconnect = True
        v = config.get('cache', None)
        if v is not None:
            self._cache = Path(v)
            reconnect = True
        v = config.get('secrets', None)
        if v is not None:
            self._secrets = Path(v)
            reconnect = True
        v = config.get('service_account', None)
        if v is not None:
            self._service_account_file = Path(v)
            reconnect = True
        v = config.get('subject', None)
        if v is not None:
            self._subject = str(v)
            reconnect = True
        v = config.get('auth_prompt_msg', None)
        if v is not None:
            self.auth_prompt_msg = str(v)
        v = config.get('flow_success_msg', None)
        if v is not None:
            self.auth_flow_success_msg = str(v)
        if reconnect:
            self.clear()

    def reset(self) -> None:
        """
        Reset all connection state to defaults.
        """
        self._secrets = self._DEFAULT_SECRETS
        self._cache = self._DEFAULT_CACHE
        self._service_account_file = None
        self._subject = None
        self._creds = None
        self._scopes = [SHEETS_SCOPE]
        self._services = {}
        self.auth_server = 'localhost'
        self.auth_port = 0
        self.auth_prompt_msg = self._DEFAULT_AUTH_PROMPT_MSG
        self.auth_flow_success_msg = self._DEFAULT_AUTH_FLOW_SUCCESS_MSG

    def _load_cached_creds(self, requested_scopes: list[str]) -> None:
        if not (self._cache.exists() and self._cache.is_file()):
            return
        cf = self._cache.resolve()
        with open(cf, 'r', encoding='utf-8') as f:
            j = json.load(f)
        # the cache doesn't know what it was granted for, we write the scopes
        # in ourselves and throw it away if they don't cover the request
        scopes = j.get('scopes', [])
        if not all(s in scopes for s in requested_scopes):
            logger.info("cached credentials lack requested scopes, discarding %s", cf)
            self._cache.unlink()
            return
        self._creds = Credentials.from_authorized_user_file(str(cf), requested_scopes)
        if not self.connected and self._creds.refresh_token:
            try:
                self._creds.refresh(Request())
            except google.auth.exceptions.RefreshError as e:
                logger.warning("failed to refresh stored creds: %s...deleting cred cache and re-authorizing", e)
            if not self.connected:
                self._creds = None
                self._cache.unlink()

    def _save_cached_creds(self, requested_scopes: list[str]) -> None:
        user_info = {'refresh_token': self._creds.refresh_token, 'client_id': self._creds.client_id,
                     'client_secret': self._creds.client_secret, 'scopes': requested_scopes}
        with open(self._cache.resolve(), 'w', encoding='utf-8') as f:
            json.dump(user_info, f, ensure_ascii=False, indent=2)

    def connect(self) -> bool:
        """
        Establish a new authentication session.
        OAuth sessions are saved in the cache file to reuse on subsequent invocations.
        """
        self.clear()
        if not self._scopes:
            return False
        requested_scopes = copy.copy(self._scopes)

        if self._service_account_file is not None:
            logger.info("using service account key %s", self._service_account_file)
            with open(self._service_account_file, 'r', encoding='utf-8') as f:
                self._creds = service_account_credentials(json.load(f), self._subject, requested_scopes)
            return self.connected

        self._load_cached_creds(requested_scopes)
        if not self.connected:
            if self._secrets.exists() and self._secrets.is_file():
                flow = InstalledAppFlow.from_client_secrets_file(str(self._secrets), requested_scopes)
                self._creds = flow.run_local_server(host=self.auth_server, port=self.auth_port,
                                                    authorization_prompt_message=self.auth_prompt_msg,
                                                    success_message=self.auth_flow_success_msg)
                if self.connected:
                    self._save_cached_creds(requested_scopes)
            else:
                # this will look at the GOOGLE_APPLICATION_CREDENTIALS envvar and
                # other cloud default locations
                try:
                    self._creds, _ = google.auth.default(scopes=requested_scopes)
                except google.auth.exceptions.DefaultCredentialsError as e:
                    logger.warning("no Google credentials found: %s", e)
                    self._creds = None
                else:
                    if not self._creds.valid:
                        self._creds.refresh(Request())
        return self.connected

    def get_service(self, name: str, version: str) -> Resource|None:
        """
        Build the requested service if not already available, connecting if required.
        Can return None if no connection present.
        """
        if not self.connected:
            self.connect()
        if not self.connected:
            return None
        id = f'{name}:{version}'
        s = self._services.get(id, None)
        if s is None:
            s = build_service(self._creds, name, version)
            self._services[id] = s
        return s

gsheets = _SheetsAccess()
