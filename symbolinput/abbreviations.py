"""Abbreviation table — answers queries about mnemonic → symbol mappings."""
import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from symbolinput.errors import AbbreviationTableError

logger = logging.getLogger(__name__)

CURSOR_PLACEHOLDER = "$CURSOR"

RESOURCE_FILE = Path(__file__).parent / "resources" / "abbreviations.json"


def load_abbreviation_file(path) -> Dict[str, str]:
    """Read a ``{mnemonic: symbol}`` JSON object from ``path``."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, IOError) as e:
        raise AbbreviationTableError(f"cannot read abbreviations from {path}: {e}") from e
    _validate(data, path)
    return data


def _validate(data, origin):
    if not isinstance(data, dict):
        raise AbbreviationTableError(f"{origin}: expected a JSON object")
    for mnemonic, symbol in data.items():
        if not isinstance(mnemonic, str) or not isinstance(symbol, str):
            raise AbbreviationTableError(
                f"{origin}: entry {mnemonic!r} must map a string to a string")
        if symbol.count(CURSOR_PLACEHOLDER) > 1:
            raise AbbreviationTableError(
                f"{origin}: symbol for {mnemonic!r} has more than one {CURSOR_PLACEHOLDER}")


class AbbreviationTable:
    """Bundled abbreviations merged with user custom translations.

    Custom translations override bundled entries with the same mnemonic.
    There are only about a thousand entries, so queries scan the table
    instead of maintaining a trie.
    """

    def __init__(self, bundled: Optional[Dict[str, str]] = None,
                 custom: Optional[Dict[str, str]] = None):
        if bundled is None:
            bundled = load_abbreviation_file(RESOURCE_FILE)
        else:
            _validate(bundled, "bundled abbreviations")
        self._bundled = dict(bundled)
        self._custom: Dict[str, str] = {}
        self._symbols: Dict[str, str] = {}
        self._replacement_cache: Dict[str, Optional[str]] = {}
        self.update_custom(custom or {})

    def update_custom(self, custom: Dict[str, str]):
        """Replace the custom translations and rebuild the merged table."""
        _validate(custom, "custom translations")
        self._custom = dict(custom)
        self._symbols = {**self._bundled, **self._custom}
        self._replacement_cache.clear()
        logger.debug("Abbreviation table rebuilt: %d entries (%d custom)",
                     len(self._symbols), len(self._custom))

    def __len__(self):
        return len(self._symbols)

    def __contains__(self, mnemonic):
        return mnemonic in self._symbols

    def items(self):
        return self._symbols.items()

    def exact_match(self, mnemonic: str) -> Optional[str]:
        return self._symbols.get(mnemonic)

    def prefix_matches(self, prefix: str) -> List[str]:
        """All mnemonics starting with ``prefix``, shortest first."""
        matches = [m for m in self._symbols if m.startswith(prefix)]
        matches.sort(key=len)
        return matches

    def replacement_text(self, mnemonic: str) -> Optional[str]:
        """Convert the longest convertible prefix of ``mnemonic``.

        The best match is the symbol of the shortest mnemonic starting with
        the input; characters that extend nothing are carried over verbatim.

            replacement_text("alp")  -> "α"
            replacement_text("alp7") -> "α7"
            replacement_text("")     -> None
        """
        if mnemonic in self._replacement_cache:
            return self._replacement_cache[mnemonic]
        result = self._find_replacement_text(mnemonic)
        self._replacement_cache[mnemonic] = result
        return result

    def _find_replacement_text(self, mnemonic: str) -> Optional[str]:
        if not mnemonic:
            return None
        matches = self.prefix_matches(mnemonic)
        if matches:
            return self._symbols[matches[0]]
        prefix_replacement = self.replacement_text(mnemonic[:-1])
        if prefix_replacement:
            return prefix_replacement + mnemonic[-1]
        return None

    def abbreviations_for(self, symbol: str) -> List[str]:
        """Every mnemonic that produces exactly ``symbol``."""
        return [m for m, s in self._symbols.items() if s == symbol]

    def symbols_in(self, text: str) -> List[str]:
        """Distinct symbols that ``text`` starts with."""
        result = []
        for symbol in self._symbols.values():
            if text.startswith(symbol) and symbol not in result:
                result.append(symbol)
        return result

    def auto_closing_abbreviations(self, opening: str) -> List[Tuple[str, str]]:
        """``(mnemonic, closing)`` pairs for symbols of the form ``opening$CURSORclosing``."""
        head = opening + CURSOR_PLACEHOLDER
        return [(m, s[len(head):]) for m, s in self._symbols.items() if s.startswith(head)]
