import os
import sys
import json
from dataclasses import dataclass, fields, replace
from colorama import init, Fore, Style

init(autoreset=True)

# --- Style Definitions ---
class T:
    HEADER, OK, INFO, WARN, FAIL = Fore.MAGENTA + Style.BRIGHT, Fore.GREEN + Style.BRIGHT, Fore.CYAN, Fore.YELLOW, Fore.RED + Style.BRIGHT

class E:
    SUCCESS, INFO, WARN, FAIL, KEY, ROCKET, FILE, PROCESS, VIDEO, TRASH, REPORT, LIST, GLOBE, EMPTY = "✅", "ℹ️", "⚠️", "❌", "🔑", "🚀", "📄", "⚙️", "🎞️", "🗑️", "📊", "📋", "🌍", "📭"

# --- Configuration ---
CONFIG_FILE = "config.json"
CAPTION_SUFFIX = ".vtt"
DEFAULT_EXPECTED_LANGUAGES = ("en", "ar", "fr", "es", "it")

ENV_OVERRIDES = {
    "API_VIDEO_KEY": "api_key",
    "VTT_OUTPUT_FOLDER": "caption_folder",
    "CAPTION_LANGUAGE": "default_language",
    "CAPTION_PACING_DELAY": "pacing_delay",
    "API_VIDEO_BASE_URL": "api_base_url",
}


@dataclass(frozen=True)
class Settings:
    api_key: str = ""
    caption_folder: str = "./subtitles"
    default_language: str = "en"
    pacing_delay: float = 2.0
    api_base_url: str = "https://ws.api.video"
    request_timeout: float = 30
    token_cache_file: str = ".token_cache.json"


def _coerce(name, value):
    if name in ("pacing_delay", "request_timeout"):
        return float(value)
    return str(value)

def settings_from_dict(data, environ=None):
    """Builds Settings from a config dict, letting environment variables win."""
    known = {f.name for f in fields(Settings)}
    values = {k: _coerce(k, v) for k, v in data.items() if k in known}
    settings = Settings(**values)

    environ = os.environ if environ is None else environ
    overrides = {}
    for env_name, field_name in ENV_OVERRIDES.items():
        if environ.get(env_name):
            overrides[field_name] = _coerce(field_name, environ[env_name])
    return replace(settings, **overrides)

def validate_config(settings, translator):
    """Validates the values of a Settings instance."""
    if not settings.api_key:
        raise ValueError(translator.get('config.api_key_required'))
    if not settings.default_language.strip():
        raise ValueError(translator.get('config.language_required'))
    if settings.pacing_delay < 0:
        raise ValueError(translator.get('config.negative_delay', delay=settings.pacing_delay))
    if settings.request_timeout <= 0:
        raise ValueError(translator.get('config.invalid_timeout', timeout=settings.request_timeout))

def load_config(translator, config_file=CONFIG_FILE, environ=None):
    data = {}
    try:
        if os.path.exists(config_file):
            with open(config_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError(translator.get('config.must_be_dict'))
        settings = settings_from_dict(data, environ)
        validate_config(settings, translator)
        return settings
    except json.JSONDecodeError as e:
        print(translator.get('config.invalid_json', T_FAIL=T.FAIL, E_FAIL=E.FAIL, e=e))
        sys.exit(1)
    except ValueError as e:
        print(translator.get('config.config_error', T_FAIL=T.FAIL, E_FAIL=E.FAIL, e=e))
        sys.exit(1)
