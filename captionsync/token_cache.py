import os
import json
from datetime import datetime

def load_tokens(cache_path):
    """
    Reads cached tokens written by save_tokens.
    Returns None if the cache file is missing, unreadable or has no expiry.
    """
    if not os.path.exists(cache_path):
        return None

    try:
        with open(cache_path, 'r', encoding='utf-8') as f:
            cache_data = json.load(f)

        # A token without an expiry would never be refreshed
        if not cache_data.get('expires_at'):
            return None
        return {
            'access_token': cache_data['access_token'],
            'refresh_token': cache_data.get('refresh_token'),
            'expiry': datetime.fromisoformat(cache_data['expires_at']),
        }
    except (json.JSONDecodeError, KeyError, ValueError, TypeError, IOError):
        # Corrupted cache file, treat as a cache miss
        return None

def save_tokens(cache_path, access_token, refresh_token, expiry):
    """Writes tokens with their expiry so the next run can reuse them."""
    cache_data = {
        'access_token': access_token,
        'refresh_token': refresh_token,
        'expires_at': expiry.isoformat() if expiry else None,
        'saved_at': datetime.now().isoformat(),
    }

    try:
        with open(cache_path, 'w', encoding='utf-8') as f:
            json.dump(cache_data, f, indent=4)
    except IOError as e:
        print(f"Warning: Could not write token cache file {cache_path}: {e}")

def clear_tokens(cache_path):
    if os.path.exists(cache_path):
        os.remove(cache_path)
