import os
import json
from captionsync.config import T, E

LOCALES_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "locales")
DEFAULT_LANGUAGE = "en"

class Translator:
    """Renders console messages from the JSON locale files shipped with the package."""

    def __init__(self, language=DEFAULT_LANGUAGE, locales_dir=LOCALES_DIR):
        self.language = language
        self.locales_dir = locales_dir
        self.messages = self._load_messages()

    def _locale_path(self, language):
        return os.path.join(self.locales_dir, f"{language}.json")

    def _load_messages(self):
        locale_path = self._locale_path(self.language)
        if not os.path.exists(locale_path):
            print(f"{T.WARN}{E.WARN} No messages for display language '{self.language}'. Falling back to '{DEFAULT_LANGUAGE}'.")
            self.language = DEFAULT_LANGUAGE
            locale_path = self._locale_path(DEFAULT_LANGUAGE)
            if not os.path.exists(locale_path):
                return {}

        try:
            with open(locale_path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            print(f"{T.FAIL}{E.FAIL} Failed to load locale file {locale_path}: {e}")
            return {}

    def get(self, key, **kwargs):
        """
        Looks up a dotted key such as 'batch.summary_header' and formats it.
        Falls back to the key itself when the message is missing or cannot be formatted.
        """
        value = self.messages
        try:
            for part in key.split('.'):
                value = value[part]
            return value.format(**kwargs)
        except (KeyError, TypeError):
            return key
        except (IndexError, ValueError) as e:
            print(f"{T.WARN}    {E.WARN} Message formatting error for key '{key}': {e}")
            return key
