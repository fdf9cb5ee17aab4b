"""Configuration management — JSON-based, stored in ~/.config/symbolinput/."""
import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = {
    "enabled": True,
    "leader": "\\",
    "eager_replacement_enabled": True,
    "languages": ["lean", "lean4", "markdown", "plaintext"],
    "custom_translations": {},
    "debug_logging": False,
}

CONFIG_DIR = Path.home() / ".config" / "symbolinput"
CONFIG_FILE = CONFIG_DIR / "config.json"


class Config:
    def __init__(self, path=None):
        self._path = Path(path) if path is not None else CONFIG_FILE
        self._data = json.loads(json.dumps(DEFAULT_CONFIG))  # deep copy
        self.load()

    @property
    def path(self) -> Path:
        return self._path

    def load(self):
        if self._path.exists():
            try:
                with open(self._path, "r", encoding="utf-8") as f:
                    stored = json.load(f)
                if isinstance(stored, dict):
                    self._data.update(stored)
                else:
                    logger.warning("Ignoring config %s: not a JSON object", self._path)
            except (json.JSONDecodeError, IOError) as e:
                logger.warning("Ignoring unreadable config %s: %s", self._path, e)

    def save(self):
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with open(self._path, "w", encoding="utf-8") as f:
            json.dump(self._data, f, indent=2, ensure_ascii=False)

    def get(self, key, default=None):
        return self._data.get(key, default)

    def set(self, key, value):
        self._data[key] = value
        self.save()

    @property
    def enabled(self):
        return self._data["enabled"]

    @enabled.setter
    def enabled(self, val):
        self._data["enabled"] = bool(val)
        self.save()

    @property
    def leader(self) -> str:
        leader = self._data.get("leader") or DEFAULT_CONFIG["leader"]
        if len(leader) != 1:
            logger.warning("Leader %r is not a single character, using %r",
                           leader, DEFAULT_CONFIG["leader"])
            return DEFAULT_CONFIG["leader"]
        return leader

    @leader.setter
    def leader(self, val):
        if len(val) != 1:
            raise ValueError(f"leader must be a single character, got {val!r}")
        self._data["leader"] = val
        self.save()

    @property
    def eager_replacement_enabled(self) -> bool:
        return bool(self._data["eager_replacement_enabled"])

    @eager_replacement_enabled.setter
    def eager_replacement_enabled(self, val):
        self._data["eager_replacement_enabled"] = bool(val)
        self.save()

    @property
    def languages(self):
        return list(self._data["languages"])

    @languages.setter
    def languages(self, val):
        self._data["languages"] = list(val)
        self.save()

    @property
    def custom_translations(self) -> dict:
        return dict(self._data.get("custom_translations") or {})

    @custom_translations.setter
    def custom_translations(self, val):
        self._data["custom_translations"] = dict(val)
        self.save()

    @property
    def debug_logging(self):
        return self._data["debug_logging"]
