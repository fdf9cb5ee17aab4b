"""Tests for per-editor activation and settings changes."""
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import pytest

from symbolinput.abbreviations import AbbreviationTable
from symbolinput.buffer import TextBuffer
from symbolinput.config import Config
from symbolinput.errors import AbbreviationTableError
from symbolinput.feature import AbbreviationFeature
from symbolinput.rewriter import CONVERT_COMMAND


@pytest.fixture
def config(tmp_path):
    return Config(path=tmp_path / "config.json")


@pytest.fixture
def feature(config):
    f = AbbreviationFeature(config, AbbreviationTable())
    yield f
    f.dispose()


def type_keys(buf, keys):
    for char in keys:
        buf.add_char(char)


def test_enabled_language_gets_rewriter(feature):
    buf = TextBuffer()
    rewriter = feature.editor_opened(buf, "lean4")
    assert rewriter is not None
    assert feature.rewriter_for(buf) is rewriter
    type_keys(buf, "\\to ")
    assert buf.text == "→ "


def test_other_language_is_left_alone(feature):
    buf = TextBuffer()
    assert feature.editor_opened(buf, "python") is None
    type_keys(buf, "\\to ")
    assert buf.text == "\\to "
    assert not buf.has_command(CONVERT_COMMAND)


def test_disabling_clears_decorations(feature, config):
    buf = TextBuffer()
    feature.editor_opened(buf, "markdown")
    type_keys(buf, "\\al")
    assert buf.input_active
    assert buf.underlines

    config._data["enabled"] = False
    feature.config_changed()
    assert feature.rewriter_for(buf) is None
    assert buf.underlines == []
    assert not buf.input_active
    type_keys(buf, "pha ")
    assert buf.text == "\\alpha "

    config._data["enabled"] = True
    feature.config_changed()
    assert feature.rewriter_for(buf) is not None
    type_keys(buf, "\\b ")
    assert buf.text == "\\alpha β "


def test_language_list_change(feature, config):
    buf = TextBuffer()
    feature.editor_opened(buf, "python")
    config._data["languages"] = ["python"]
    feature.config_changed()
    assert feature.rewriter_for(buf) is not None


def test_custom_translations_applied(feature, config):
    buf = TextBuffer()
    feature.editor_opened(buf, "lean")
    config._data["custom_translations"] = {"zz": "ℤℤ"}
    feature.config_changed()
    type_keys(buf, "\\zz ")
    assert buf.text == "ℤℤ "


def test_invalid_custom_translations_raise(feature, config):
    buf = TextBuffer()
    feature.editor_opened(buf, "lean")
    config._data["custom_translations"] = {"x": "$CURSOR$CURSOR"}
    with pytest.raises(AbbreviationTableError):
        feature.config_changed()


def test_editor_closed_disposes(feature):
    buf = TextBuffer()
    feature.editor_opened(buf, "lean4")
    feature.editor_closed(buf)
    assert feature.rewriter_for(buf) is None
    assert not buf.has_command(CONVERT_COMMAND)
    # Closing twice is harmless.
    feature.editor_closed(buf)


def test_editors_are_independent(feature):
    first, second = TextBuffer(), TextBuffer()
    feature.editor_opened(first, "lean4")
    feature.editor_opened(second, "lean4")
    type_keys(first, "\\al")
    assert first.input_active
    assert not second.input_active
    type_keys(second, "\\to ")
    assert second.text == "→ "
    assert len(feature.rewriter_for(first).tracked_abbreviations) == 1


if __name__ == '__main__':
    pytest.main([__file__, "-v"])
