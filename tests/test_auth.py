import json
import pytest
from datetime import timedelta
from unittest.mock import MagicMock
from google.auth import exceptions as ga_exceptions
from captionsync.auth import ApiVideoCredentials, AuthError, ensure_valid_token, _utcnow
from captionsync.token_cache import save_tokens, load_tokens
from captionsync import usage

BASE_URL = "https://ws.api.video"

@pytest.fixture
def mock_translator():
    """Fixture to mock the Translator class."""
    translator = MagicMock()
    translator.get.side_effect = lambda key, **kwargs: key
    return translator

@pytest.fixture(autouse=True)
def reset_usage():
    usage.reset_usage()
    yield

@pytest.fixture
def cache_path(tmp_path):
    return str(tmp_path / ".token_cache.json")

def token_response(status=200, access_token="access-1", refresh_token="refresh-1", expires_in=3600):
    response = MagicMock()
    response.status = status
    response.data = json.dumps({
        'token_type': 'Bearer', 'expires_in': expires_in,
        'access_token': access_token, 'refresh_token': refresh_token
    }).encode('utf-8')
    return response

def test_refresh_with_api_key(mock_translator, cache_path):
    request = MagicMock(return_value=token_response())
    credentials = ApiVideoCredentials("my-key", BASE_URL, mock_translator, cache_path=cache_path)

    credentials.refresh(request)

    assert credentials.token == "access-1"
    assert credentials.refresh_token == "refresh-1"
    assert credentials.valid
    _, kwargs = request.call_args
    assert kwargs['url'] == f"{BASE_URL}/auth/api-key"
    assert json.loads(kwargs['body']) == {'apiKey': 'my-key'}
    assert load_tokens(cache_path)['access_token'] == "access-1"
    assert usage.get_api_call_count('auth.api_key') == 1

def test_cached_token_is_reused(mock_translator, cache_path):
    save_tokens(cache_path, "cached-access", "cached-refresh", _utcnow() + timedelta(minutes=30))
    request = MagicMock()

    credentials = ApiVideoCredentials("my-key", BASE_URL, mock_translator, cache_path=cache_path)
    ensure_valid_token(credentials, mock_translator, request=request)

    assert credentials.token == "cached-access"
    request.assert_not_called()

def test_expired_token_uses_refresh_token(mock_translator, cache_path):
    save_tokens(cache_path, "old-access", "cached-refresh", _utcnow() - timedelta(minutes=5))
    request = MagicMock(return_value=token_response(access_token="access-2", refresh_token="refresh-2"))

    credentials = ApiVideoCredentials("my-key", BASE_URL, mock_translator, cache_path=cache_path)
    ensure_valid_token(credentials, mock_translator, request=request)

    _, kwargs = request.call_args
    assert kwargs['url'] == f"{BASE_URL}/auth/refresh"
    assert json.loads(kwargs['body']) == {'refreshToken': 'cached-refresh'}
    assert credentials.token == "access-2"
    assert credentials.refresh_token == "refresh-2"

def test_failed_refresh_falls_back_to_api_key(mock_translator, cache_path):
    save_tokens(cache_path, "old-access", "stale-refresh", _utcnow() - timedelta(minutes=5))
    request = MagicMock(side_effect=[token_response(status=400), token_response(access_token="access-3")])

    credentials = ApiVideoCredentials("my-key", BASE_URL, mock_translator, cache_path=cache_path)
    ensure_valid_token(credentials, mock_translator, request=request)

    urls = [c.kwargs['url'] for c in request.call_args_list]
    assert urls == [f"{BASE_URL}/auth/refresh", f"{BASE_URL}/auth/api-key"]
    assert credentials.token == "access-3"

def test_rejected_api_key_raises_auth_error(mock_translator, cache_path):
    request = MagicMock(return_value=token_response(status=401))
    credentials = ApiVideoCredentials("bad-key", BASE_URL, mock_translator, cache_path=cache_path)

    with pytest.raises(AuthError):
        ensure_valid_token(credentials, mock_translator, request=request)

def test_network_error_raises_auth_error(mock_translator):
    request = MagicMock(side_effect=ga_exceptions.TransportError("unreachable"))
    credentials = ApiVideoCredentials("my-key", BASE_URL, mock_translator)

    with pytest.raises(AuthError):
        ensure_valid_token(credentials, mock_translator, request=request)

def test_response_without_token_raises(mock_translator):
    response = MagicMock(status=200, data=b'{}')
    credentials = ApiVideoCredentials("my-key", BASE_URL, mock_translator)

    with pytest.raises(ga_exceptions.RefreshError):
        credentials.refresh(MagicMock(return_value=response))

def test_cached_token_without_expiry_is_refreshed(mock_translator, cache_path):
    save_tokens(cache_path, "stale-access", "stale-refresh", None)
    request = MagicMock(return_value=token_response(access_token="access-4"))

    credentials = ApiVideoCredentials("my-key", BASE_URL, mock_translator, cache_path=cache_path)
    ensure_valid_token(credentials, mock_translator, request=request)

    assert request.call_args.kwargs['url'] == f"{BASE_URL}/auth/api-key"
    assert credentials.token == "access-4"
