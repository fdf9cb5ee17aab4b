"""Tests for the hover text describing how to type a symbol."""
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from symbolinput.abbreviations import AbbreviationTable
from symbolinput.hover import hover_text


def make_table():
    return AbbreviationTable({
        "glb": "⊓",
        "sqcap": "⊓",
        "langle": "⟨",
        "<>": "⟨$CURSOR⟩",
        "to": "→",
    })


def test_symbol_with_several_abbreviations():
    assert hover_text("x ⊓ y", 2, make_table()) == "Type ⊓ using `\\glb` or `\\sqcap`"


def test_auto_closing_pair_is_mentioned():
    text = hover_text("⟨a, b⟩", 0, make_table())
    assert text == "Type ⟨ using `\\langle`. ⟨ can be auto-closed with ⟩ using `\\<>`."


def test_plain_text_has_no_hover():
    assert hover_text("x ⊓ y", 0, make_table()) is None
    assert hover_text("", 0, make_table()) is None
    assert hover_text("→", 1, make_table()) is None


def test_custom_leader():
    assert hover_text("→", 0, make_table(), leader=";") == "Type → using `;to`"


if __name__ == '__main__':
    test_symbol_with_several_abbreviations()
    test_auto_closing_pair_is_mentioned()
    test_plain_text_has_no_hover()
    test_custom_leader()
    print("All hover tests passed.")
