"""Shared constants for the configuration manager package."""
from __future__ import annotations

from pathlib import Path

MODULE_DIR = Path(__file__).resolve().parent
SCRIPT_DIR = MODULE_DIR.parent.parent.resolve()
CONF_DIR = SCRIPT_DIR / "conf"
DEFAULT_CONFIG_PATH = CONF_DIR / "config.json"
DEFAULT_LOCAL_CONFIG_PATH = CONF_DIR / "config.local.json"

DEFAULT_STORAGE_DIR = Path("~/.hoverdict")
CACHE_FILENAME_TEMPLATE = "{provider_id}.cache.ndjson"

DEFAULT_PROVIDER = "free-dictionary"
DEFAULT_REQUEST_TIMEOUT_SECONDS = 10.0
DEFAULT_FREE_DICTIONARY_URL = "https://api.dictionaryapi.dev/api/v2/entries/en"
DEFAULT_WORDS_API_URL = "https://wordsapiv1.p.mashape.com/words"
