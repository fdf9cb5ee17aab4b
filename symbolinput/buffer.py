"""Text buffer — in-memory editor host with multi-cursor typing."""
import logging
from typing import List, Optional

from symbolinput.host import Edit, EditorHost
from symbolinput.span import Span

logger = logging.getLogger(__name__)


def _map_offset(offset: int, edits: List[Edit]) -> int:
    """Map a pre-edit offset through non-overlapping edits."""
    shift = 0
    for edit in sorted(edits, key=lambda e: e.span.offset):
        if edit.span.end <= offset and not (edit.span.is_empty and edit.span.offset == offset):
            shift += len(edit.new_text) - edit.span.length
        elif edit.span.offset < offset:
            # Offset was inside replaced text: land after the new text.
            return edit.span.offset + shift + len(edit.new_text)
        else:
            break
    return offset + shift


def _merge(selections: List[Span]) -> List[Span]:
    """Drop duplicate selections, like an editor merging cursors that meet."""
    merged = []
    for s in selections:
        if s not in merged:
            merged.append(s)
    return merged


class TextBuffer(EditorHost):
    """Plain-text buffer with a list of selections.

    Mirrors how an editor widget behaves: a user edit updates the text and
    moves the selections first, then reports the edit, then reports the new
    selections. Programmatic edits (``apply_edits``) report the edit and the
    adjusted selections the same way.
    """

    def __init__(self, text: str = "", selections: Optional[List[Span]] = None):
        super().__init__()
        self._text = text
        self._selections = list(selections) if selections else [Span(len(text), 0)]
        self._underlines: List[Span] = []
        self._input_active = False
        self.read_only = False

    @property
    def text(self) -> str:
        return self._text

    @property
    def caret(self) -> int:
        """Offset of the primary cursor."""
        return self._selections[0].end

    @property
    def underlines(self) -> List[Span]:
        return list(self._underlines)

    @property
    def input_active(self) -> bool:
        return self._input_active

    def text_at(self, span: Span) -> str:
        return self._text[span.offset:span.end]

    # --- user actions ---

    def add_char(self, char: str):
        """Type ``char`` at every cursor, replacing selected text."""
        self.type_text(char)

    def type_text(self, text: str):
        """Type ``text`` as one keystroke at every cursor."""
        edits = [Edit(s, text) for s in self._selections]
        self._user_edit(edits, caret_after_insert=True)

    def handle_backspace(self):
        """Delete the selection, or the character before each caret."""
        edits = []
        for s in self._selections:
            if not s.is_empty:
                edits.append(Edit(s, ""))
            elif s.offset > 0:
                edits.append(Edit(Span(s.offset - 1, 1), ""))
        if edits:
            self._user_edit(edits, caret_after_insert=True)

    def replace(self, span: Span, text: str):
        """Edit made outside the cursors, e.g. a paste elsewhere or a refactoring."""
        self._user_edit([Edit(span, text)], caret_after_insert=False)

    def move_cursor(self, offset: int):
        self.select(Span(offset, 0))

    def select(self, *selections: Span):
        self._selections = _merge(selections)
        self._emit_selections_changed(self._selections)

    def _user_edit(self, edits: List[Edit], caret_after_insert: bool):
        if caret_after_insert:
            new_selections = self._carets_after(edits)
        else:
            new_selections = [Span(_map_offset(s.offset, edits), 0) if s.is_empty
                              else Span.from_bounds(_map_offset(s.offset, edits),
                                                    _map_offset(s.end, edits))
                              for s in self._selections]
        self._text = self._apply(edits)
        self._selections = _merge(new_selections)
        self._emit_buffer_changed(edits)
        self._emit_selections_changed(self._selections)

    @staticmethod
    def _carets_after(edits: List[Edit]) -> List[Span]:
        carets = []
        shift = 0
        for edit in sorted(edits, key=lambda e: e.span.offset):
            carets.append(Span(edit.span.offset + shift + len(edit.new_text), 0))
            shift += len(edit.new_text) - edit.span.length
        return carets

    def _apply(self, edits: List[Edit]) -> str:
        ordered = sorted(edits, key=lambda e: e.span.offset)
        for a, b in zip(ordered, ordered[1:]):
            if b.span.offset < a.span.end:
                raise ValueError(f"overlapping edits {a.span} and {b.span}")
        text = self._text
        for edit in reversed(ordered):
            if edit.span.end > len(text):
                raise ValueError(f"edit {edit.span} outside buffer of length {len(text)}")
            text = text[:edit.span.offset] + edit.new_text + text[edit.span.end:]
        return text

    # --- host interface ---

    def apply_edits(self, edits: List[Edit]) -> bool:
        if self.read_only:
            logger.debug("Rejecting %d edit(s): buffer is read-only", len(edits))
            return False
        try:
            new_text = self._apply(edits)
        except ValueError as e:
            logger.debug("Rejecting edits: %s", e)
            return False
        selections = [Span.from_bounds(_map_offset(s.offset, edits),
                                       max(_map_offset(s.offset, edits), _map_offset(s.end, edits)))
                      for s in self._selections]
        self._text = new_text
        self._selections = _merge(selections)
        self._emit_buffer_changed(edits)
        self._emit_selections_changed(self._selections)
        return True

    def get_selections(self) -> List[Span]:
        return list(self._selections)

    def set_selections(self, selections: List[Span]):
        self.select(*selections)

    def set_underlines(self, spans: List[Span]):
        self._underlines = list(spans)

    def set_input_active(self, active: bool):
        self._input_active = active

    def render(self, show_caret: bool = False) -> str:
        """Buffer text, with ``|`` at each caret when ``show_caret`` is set."""
        if not show_caret:
            return self._text
        text = self._text
        for offset in sorted({s.end for s in self._selections}, reverse=True):
            text = text[:offset] + "|" + text[offset:]
        return text
