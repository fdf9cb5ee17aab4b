"""Qt editor host and demo editor window."""
import logging
from typing import List

from PyQt5.QtCore import QEvent, QObject, Qt, pyqtSignal
from PyQt5.QtGui import QColor, QFont, QTextCharFormat, QTextCursor
from PyQt5.QtWidgets import (
    QAction, QComboBox, QLabel, QMainWindow, QPlainTextEdit, QTextEdit,
    QToolBar, QToolTip,
)

from symbolinput.host import Edit, EditorHost
from symbolinput.hover import hover_text
from symbolinput.rewriter import CONVERT_COMMAND
from symbolinput.span import Span

logger = logging.getLogger(__name__)


def utf16_to_index(text: str, pos: int) -> int:
    """Convert a Qt (UTF-16) document position into a Python string index."""
    units = 0
    for index, char in enumerate(text):
        if units >= pos:
            return index
        units += 2 if ord(char) > 0xFFFF else 1
    return len(text)


def index_to_utf16(text: str, index: int) -> int:
    """Convert a Python string index into a Qt (UTF-16) document position."""
    return index + sum(1 for char in text[:index] if ord(char) > 0xFFFF)


def minimal_edit(old: str, new: str, offset: int) -> Edit:
    """Shrink a reported change of ``old`` into ``new`` at ``offset`` to what really changed.

    Qt may report a whole block as removed and re-added when only one
    character was typed.
    """
    prefix = 0
    limit = min(len(old), len(new))
    while prefix < limit and old[prefix] == new[prefix]:
        prefix += 1
    suffix = 0
    while (suffix < limit - prefix
           and old[len(old) - 1 - suffix] == new[len(new) - 1 - suffix]):
        suffix += 1
    return Edit(Span(offset + prefix, len(old) - prefix - suffix),
                new[prefix:len(new) - suffix])


class QtEditorHost(QObject, EditorHost):
    """Editor host backed by a ``QPlainTextEdit``.

    Offsets exchanged with the rewriter are Python string indices; the
    host converts them from and to Qt's UTF-16 document positions.
    """

    inputActiveChanged = pyqtSignal(bool)

    def __init__(self, editor: QPlainTextEdit, parent=None):
        QObject.__init__(self, parent)
        EditorHost.__init__(self)
        self.editor = editor
        self._text = editor.toPlainText()
        self._input_active = False
        self._applying = False
        self._underline_format = QTextCharFormat()
        self._underline_format.setFontUnderline(True)
        self._underline_format.setUnderlineColor(QColor(0x42, 0x85, 0xF4))

        editor.document().contentsChange.connect(self._on_contents_change)
        editor.cursorPositionChanged.connect(self._on_cursor_position_changed)

    @property
    def input_active(self) -> bool:
        return self._input_active

    def _on_contents_change(self, position: int, removed: int, added: int):
        if self._applying:
            return
        old_text = self._text
        new_text = self.editor.toPlainText()
        self._text = new_text

        start = utf16_to_index(old_text, position)
        old_end = utf16_to_index(old_text, position + removed)
        new_end = utf16_to_index(new_text, position + added)
        edit = minimal_edit(old_text[start:old_end], new_text[start:new_end], start)
        if edit.span.is_empty and not edit.new_text:
            return
        self._emit_buffer_changed([edit])
        self._emit_selections_changed(self.get_selections())

    def _on_cursor_position_changed(self):
        if self._applying or self.editor.toPlainText() != self._text:
            # The cursor moved because of an edit we have not seen yet;
            # selections are reported once that edit is processed.
            return
        self._emit_selections_changed(self.get_selections())

    def _span_from_cursor(self, cursor: QTextCursor) -> Span:
        start = utf16_to_index(self._text, cursor.selectionStart())
        end = utf16_to_index(self._text, cursor.selectionEnd())
        return Span.from_bounds(start, end)

    # --- host interface ---

    def apply_edits(self, edits: List[Edit]) -> bool:
        text = self.editor.toPlainText()
        if text != self._text:
            logger.debug("Document changed behind our back, rejecting edit")
            self._text = text
            return False
        if any(e.span.end > len(text) for e in edits):
            return False

        # Qt does not report edits made while it is delivering contentsChange,
        # which is exactly when most replacements happen, so the edit is
        # reported to listeners here instead.
        self._applying = True
        cursor = QTextCursor(self.editor.document())
        cursor.beginEditBlock()
        try:
            for edit in sorted(edits, key=lambda e: e.span.offset, reverse=True):
                cursor.setPosition(index_to_utf16(text, edit.span.offset))
                cursor.setPosition(index_to_utf16(text, edit.span.end), QTextCursor.KeepAnchor)
                cursor.insertText(edit.new_text)
        finally:
            cursor.endEditBlock()
            self._applying = False
            self._text = self.editor.toPlainText()
        self._emit_buffer_changed(edits)
        return True

    def get_selections(self) -> List[Span]:
        return [self._span_from_cursor(self.editor.textCursor())]

    def set_selections(self, selections: List[Span]):
        if not selections:
            return
        # QPlainTextEdit has a single cursor; the primary selection wins.
        selection = selections[0]
        cursor = QTextCursor(self.editor.document())
        cursor.setPosition(index_to_utf16(self._text, selection.offset))
        cursor.setPosition(index_to_utf16(self._text, selection.end), QTextCursor.KeepAnchor)
        self.editor.setTextCursor(cursor)

    def set_underlines(self, spans: List[Span]):
        selections = []
        for span in spans:
            extra = QTextEdit.ExtraSelection()
            cursor = QTextCursor(self.editor.document())
            cursor.setPosition(index_to_utf16(self._text, span.offset))
            cursor.setPosition(index_to_utf16(self._text, span.end), QTextCursor.KeepAnchor)
            extra.cursor = cursor
            extra.format = self._underline_format
            selections.append(extra)
        self.editor.setExtraSelections(selections)

    def set_input_active(self, active: bool):
        if active != self._input_active:
            self._input_active = active
            self.inputActiveChanged.emit(active)


class EditorWindow(QMainWindow):
    """Small editor with live abbreviation input."""

    LANGUAGES = ["lean4", "lean", "markdown", "plaintext", "python"]

    def __init__(self, config, table, feature, parent=None):
        super().__init__(parent)
        self.config = config
        self.table = table
        self.feature = feature
        self._settings_window = None

        self.setWindowTitle("symbolinput")
        self.resize(720, 480)

        self.editor = QPlainTextEdit()
        self.editor.setFont(QFont("Monospace", 12))
        self.editor.installEventFilter(self)
        self.editor.viewport().installEventFilter(self)
        self.setCentralWidget(self.editor)

        self.host = QtEditorHost(self.editor, self)
        self.host.inputActiveChanged.connect(self._on_input_active_changed)

        toolbar = QToolBar("Main")
        self.addToolBar(toolbar)

        self._language_combo = QComboBox()
        self._language_combo.addItems(self.LANGUAGES)
        self._language_combo.currentTextChanged.connect(self._on_language_changed)
        toolbar.addWidget(QLabel("Language: "))
        toolbar.addWidget(self._language_combo)

        convert_action = QAction("Convert abbreviations", self)
        convert_action.setShortcut("Ctrl+Shift+Space")
        convert_action.triggered.connect(lambda: self.host.execute_command(CONVERT_COMMAND))
        toolbar.addAction(convert_action)

        settings_action = QAction("Settings…", self)
        settings_action.triggered.connect(self._show_settings)
        toolbar.addAction(settings_action)

        self._status = QLabel()
        self.statusBar().addWidget(self._status)

        self.feature.editor_opened(self.host, self._language_combo.currentText())
        self._on_input_active_changed(False)

    def _on_language_changed(self, language_id: str):
        self.feature.editor_closed(self.host)
        self.feature.editor_opened(self.host, language_id)
        self._on_input_active_changed(self.host.input_active)

    def _on_input_active_changed(self, active: bool):
        if self.feature.rewriter_for(self.host) is None:
            self._status.setText("Abbreviation input off for this language")
        elif active:
            self._status.setText("Abbreviation input active, Tab converts")
        else:
            self._status.setText(f"Type {self.config.leader} to start an abbreviation")

    def _show_settings(self):
        from symbolinput.settings_ui import SettingsWindow
        if self._settings_window is None:
            self._settings_window = SettingsWindow(self.config, self.feature, self)
            self._settings_window.settingsSaved.connect(
                lambda: self._on_input_active_changed(self.host.input_active))
        self._settings_window.show()
        self._settings_window.raise_()

    def eventFilter(self, obj, event):
        if (obj is self.editor and event.type() == QEvent.KeyPress
                and event.key() == Qt.Key_Tab and self.host.input_active):
            self.host.execute_command(CONVERT_COMMAND)
            return True
        if obj is self.editor.viewport() and event.type() == QEvent.ToolTip:
            self._show_hover(event)
            return True
        return super().eventFilter(obj, event)

    def _show_hover(self, event):
        cursor = self.editor.cursorForPosition(event.pos())
        line = cursor.block().text()
        column = utf16_to_index(line, cursor.positionInBlock())
        text = hover_text(line, column, self.table, self.config.leader)
        if text:
            QToolTip.showText(event.globalPos(), text.replace("`", ""), self.editor)
        else:
            QToolTip.hideText()
