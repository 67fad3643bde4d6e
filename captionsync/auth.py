import json
from datetime import datetime, timedelta, timezone
from google.auth import credentials as ga_credentials
from google.auth import exceptions as ga_exceptions
from google.auth.transport.requests import AuthorizedSession, Request

from captionsync.config import T, E
from captionsync.token_cache import load_tokens, save_tokens, clear_tokens
from captionsync.usage import record_api_call

API_KEY_PATH = "/auth/api-key"
REFRESH_PATH = "/auth/refresh"
DEFAULT_TOKEN_LIFETIME = 3600


class AuthError(Exception):
    """Raised when no valid access token can be obtained. Fatal for the whole run."""


def _utcnow():
    # google-auth compares expiry against naive UTC datetimes
    return datetime.now(timezone.utc).replace(tzinfo=None)


class ApiVideoCredentials(ga_credentials.Credentials):
    """Bearer credentials for api.video, obtained from an API key and renewed with the refresh token."""

    def __init__(self, api_key, base_url, translator, cache_path=None):
        super().__init__()
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._translator = translator
        self._cache_path = cache_path
        self._refresh_token = None

        if cache_path:
            cached = load_tokens(cache_path)
            if cached:
                self.token = cached['access_token']
                self.expiry = cached['expiry']
                self._refresh_token = cached['refresh_token']

    @property
    def refresh_token(self):
        return self._refresh_token

    def refresh(self, request):
        if self._refresh_token:
            print(self._translator.get('auth.token_expired', T_INFO=T.INFO, E_INFO=E.INFO))
            try:
                self._exchange(request, REFRESH_PATH, {'refreshToken': self._refresh_token}, 'auth.refresh')
                return
            except ga_exceptions.RefreshError as e:
                print(self._translator.get('auth.token_refresh_failed', T_WARN=T.WARN, E_WARN=E.WARN, e=e))
                self._refresh_token = None
                if self._cache_path:
                    clear_tokens(self._cache_path)

        print(self._translator.get('auth.authenticating', T_INFO=T.INFO, E_KEY=E.KEY))
        self._exchange(request, API_KEY_PATH, {'apiKey': self._api_key}, 'auth.api_key')

    def _exchange(self, request, path, payload, api_call_name):
        try:
            response = request(
                url=f"{self._base_url}{path}",
                method="POST",
                body=json.dumps(payload).encode("utf-8"),
                headers={"Content-Type": "application/json"},
            )
        except ga_exceptions.TransportError as e:
            raise ga_exceptions.RefreshError(f"Token request failed: {e}") from e
        record_api_call(api_call_name)

        if response.status != 200:
            raise ga_exceptions.RefreshError(f"Token request returned HTTP {response.status}")

        try:
            data = json.loads(response.data)
            access_token = data['access_token']
        except (ValueError, KeyError, TypeError) as e:
            raise ga_exceptions.RefreshError("No access token received in response") from e

        self.token = access_token
        self._refresh_token = data.get('refresh_token', self._refresh_token)
        self.expiry = _utcnow() + timedelta(seconds=int(data.get('expires_in') or DEFAULT_TOKEN_LIFETIME))

        if self._cache_path:
            save_tokens(self._cache_path, self.token, self._refresh_token, self.expiry)
        print(self._translator.get('auth.auth_success', T_OK=T.OK, E_SUCCESS=E.SUCCESS, expiry=self.expiry.isoformat(timespec='seconds')))


def ensure_valid_token(credentials, translator, request=None):
    """Makes sure the credentials carry a usable access token, refreshing them if needed."""
    print(translator.get('auth.ensuring_token', T_INFO=T.INFO, E_KEY=E.KEY))
    if credentials.valid:
        print(translator.get('auth.cached_token', T_INFO=T.INFO, E_INFO=E.INFO))
        return
    try:
        credentials.refresh(request or Request())
    except ga_exceptions.GoogleAuthError as e:
        raise AuthError(translator.get('auth.failed', e=e)) from e


def get_authenticated_session(settings, translator):
    """Returns a requests session that injects and renews the api.video bearer token."""
    credentials = ApiVideoCredentials(
        settings.api_key,
        settings.api_base_url,
        translator,
        cache_path=settings.token_cache_file,
    )
    ensure_valid_token(credentials, translator)
    return AuthorizedSession(credentials)
