"""Tests for the Qt editor host (offscreen)."""
import sys
import os
import logging
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
QtWidgets = pytest.importorskip("PyQt5.QtWidgets")
QtGui = pytest.importorskip("PyQt5.QtGui")

from symbolinput.abbreviations import AbbreviationTable
from symbolinput.config import Config
from symbolinput.host import Edit
from symbolinput.qt_editor import QtEditorHost, index_to_utf16, minimal_edit, utf16_to_index
from symbolinput.rewriter import AbbreviationRewriter, CONVERT_COMMAND
from symbolinput.span import Span


@pytest.fixture(scope="module")
def app():
    return QtWidgets.QApplication.instance() or QtWidgets.QApplication([])


@pytest.fixture
def editor(app):
    widget = QtWidgets.QPlainTextEdit()
    yield widget
    widget.deleteLater()


@pytest.fixture
def config(tmp_path):
    config = Config(path=tmp_path / "config.json")
    config._data["eager_replacement_enabled"] = False
    return config


def test_utf16_conversion():
    text = "a😀b"
    assert utf16_to_index(text, 0) == 0
    assert utf16_to_index(text, 1) == 1
    assert utf16_to_index(text, 3) == 2
    assert utf16_to_index(text, 4) == 3
    assert index_to_utf16(text, 2) == 3
    assert index_to_utf16(text, 3) == 4
    assert index_to_utf16("αβ", 2) == 2


def test_minimal_edit():
    assert minimal_edit("hello", "hallo", 10) == Edit(Span(11, 1), "a")
    assert minimal_edit("ab", "abc", 0) == Edit(Span(2, 0), "c")
    assert minimal_edit("aa", "aaa", 5) == Edit(Span(7, 0), "a")
    assert minimal_edit("abc", "", 0) == Edit(Span(0, 3), "")


def test_typing_is_reported_as_edits(editor):
    host = QtEditorHost(editor)
    seen = []
    host.on_buffer_changed(seen.append)
    editor.insertPlainText("x")
    editor.insertPlainText("y")
    assert seen == [[Edit(Span(0, 0), "x")], [Edit(Span(1, 0), "y")]]
    assert host.get_selections() == [Span(2, 0)]


def test_apply_edits_and_selections(editor):
    editor.setPlainText("a \\alpha b")
    host = QtEditorHost(editor)
    seen = []
    host.on_buffer_changed(seen.append)
    assert host.apply_edits([Edit(Span(2, 6), "α")])
    assert editor.toPlainText() == "a α b"
    assert seen == [[Edit(Span(2, 6), "α")]]

    host.set_selections([Span(3, 0)])
    assert editor.textCursor().position() == 3
    assert host.get_selections() == [Span(3, 0)]


def test_apply_edits_rejects_out_of_range(editor):
    editor.setPlainText("abc")
    host = QtEditorHost(editor)
    assert not host.apply_edits([Edit(Span(2, 5), "x")])
    assert editor.toPlainText() == "abc"


def test_rewriter_in_qt_editor(editor, config):
    host = QtEditorHost(editor)
    active = []
    host.inputActiveChanged.connect(active.append)
    rewriter = AbbreviationRewriter(config, AbbreviationTable(), host, strict=True)

    for char in "\\alpha":
        editor.insertPlainText(char)
    [abbr] = rewriter.tracked_abbreviations
    assert abbr.text == "alpha"
    assert len(editor.extraSelections()) == 1
    assert active == [True]

    assert host.execute_command(CONVERT_COMMAND)
    assert editor.toPlainText() == "α"
    assert editor.textCursor().position() == 1
    assert editor.extraSelections() == []
    assert active == [True, False]
    rewriter.dispose()


def type_into(editor, keys):
    for char in keys:
        editor.insertPlainText(char)


def test_terminating_character_replaces_while_typing(editor, config):
    host = QtEditorHost(editor)
    rewriter = AbbreviationRewriter(config, AbbreviationTable(), host, strict=True)
    type_into(editor, "\\alpha x")
    assert editor.toPlainText() == "α x"
    assert editor.textCursor().position() == 3
    assert rewriter.tracked_abbreviations == ()
    assert editor.extraSelections() == []
    assert not host.input_active
    rewriter.dispose()


def test_eager_replacement_while_typing(editor, config):
    config._data["eager_replacement_enabled"] = True
    host = QtEditorHost(editor)
    rewriter = AbbreviationRewriter(config, AbbreviationTable(), host, strict=True)
    type_into(editor, "a \\qed")
    # "qed" is the only mnemonic starting with "q".
    assert editor.toPlainText() == "a ∎"
    assert editor.textCursor().position() == 3
    type_into(editor, " b")
    assert editor.toPlainText() == "a ∎ b"
    assert rewriter.tracked_abbreviations == ()
    rewriter.dispose()


def test_stale_document_edit_is_rejected(editor, config, caplog):
    host = QtEditorHost(editor)
    rewriter = AbbreviationRewriter(config, AbbreviationTable(), host, strict=True)
    type_into(editor, "\\alpha")

    # Change the document without the host hearing about it.
    document = editor.document()
    document.blockSignals(True)
    cursor = QtGui.QTextCursor(document)
    cursor.setPosition(0)
    cursor.insertText("ZZ")
    document.blockSignals(False)
    caret = editor.textCursor().position()

    with caplog.at_level(logging.WARNING, logger="symbolinput.rewriter"):
        rewriter.convert_all()
    assert editor.toPlainText() == "ZZ\\alpha"
    assert editor.textCursor().position() == caret
    assert rewriter.tracked_abbreviations == ()
    assert "Unable to replace" in caplog.text
    rewriter.dispose()


def test_settings_window_saves(app, tmp_path):
    from symbolinput.feature import AbbreviationFeature
    from symbolinput.settings_ui import SettingsWindow

    config = Config(path=tmp_path / "config.json")
    feature = AbbreviationFeature(config, AbbreviationTable())
    window = SettingsWindow(config, feature)
    window._leader_input.setText(";")
    window._append_row("zz", "ℤℤ")
    window._save()

    reloaded = Config(path=tmp_path / "config.json")
    assert reloaded.leader == ";"
    assert reloaded.custom_translations == {"zz": "ℤℤ"}
    assert feature.table.exact_match("zz") == "ℤℤ"
    window.deleteLater()


def test_settings_window_rejects_bad_translation(app, tmp_path):
    from symbolinput.feature import AbbreviationFeature
    from symbolinput.settings_ui import SettingsWindow

    config = Config(path=tmp_path / "config.json")
    feature = AbbreviationFeature(config, AbbreviationTable())
    window = SettingsWindow(config, feature)
    window._append_row("bad", "$CURSOR$CURSOR")
    window._save()

    assert config.custom_translations == {}
    assert "bad" not in feature.table
    window.deleteLater()


if __name__ == '__main__':
    pytest.main([__file__, "-v"])
