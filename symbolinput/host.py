"""Editor host interface — what the rewriter needs from a text editor.

A host owns the buffer, its selections and the underline decorations. It
reports edits and selection changes to registered callbacks and applies
the rewriter's replacements as one transaction.
"""
import logging
from dataclasses import dataclass
from typing import Callable, Dict, List

from symbolinput.span import Span

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Edit:
    """Replace ``span`` (pre-edit coordinates) with ``new_text``."""
    span: Span
    new_text: str


class Disposable:
    """Handle returned by a registration; ``dispose()`` undoes it once."""

    def __init__(self, on_dispose: Callable[[], None]):
        self._on_dispose = on_dispose

    def dispose(self):
        if self._on_dispose is not None:
            on_dispose, self._on_dispose = self._on_dispose, None
            on_dispose()


class EditorHost:
    """Base class for editor hosts.

    Subclasses implement the buffer operations (``apply_edits``,
    ``get_selections``, ``set_selections``) and the decoration sink
    (``set_underlines``, ``set_input_active``), and call
    ``_emit_buffer_changed`` / ``_emit_selections_changed`` when the
    editor reports a change.
    """

    def __init__(self):
        self._buffer_listeners: List[Callable[[List[Edit]], None]] = []
        self._selection_listeners: List[Callable[[List[Span]], None]] = []
        self._commands: Dict[str, Callable[[], None]] = {}

    # --- registration ---

    def on_buffer_changed(self, callback: Callable[[List[Edit]], None]) -> Disposable:
        self._buffer_listeners.append(callback)
        return Disposable(lambda: self._discard(self._buffer_listeners, callback))

    def on_selections_changed(self, callback: Callable[[List[Span]], None]) -> Disposable:
        self._selection_listeners.append(callback)
        return Disposable(lambda: self._discard(self._selection_listeners, callback))

    def register_command(self, name: str, callback: Callable[[], None]) -> Disposable:
        if name in self._commands:
            logger.warning("Command %s already registered, replacing it", name)
        self._commands[name] = callback

        def _unregister():
            if self._commands.get(name) is callback:
                del self._commands[name]

        return Disposable(_unregister)

    def execute_command(self, name: str) -> bool:
        """Run a registered command. Returns False if it is not registered."""
        callback = self._commands.get(name)
        if callback is None:
            return False
        callback()
        return True

    def has_command(self, name: str) -> bool:
        return name in self._commands

    @staticmethod
    def _discard(listeners, callback):
        if callback in listeners:
            listeners.remove(callback)

    def _emit_buffer_changed(self, edits: List[Edit]):
        for callback in list(self._buffer_listeners):
            callback(list(edits))

    def _emit_selections_changed(self, selections: List[Span]):
        for callback in list(self._selection_listeners):
            callback(list(selections))

    # --- buffer operations ---

    def apply_edits(self, edits: List[Edit]) -> bool:
        raise NotImplementedError

    def get_selections(self) -> List[Span]:
        raise NotImplementedError

    def set_selections(self, selections: List[Span]):
        raise NotImplementedError

    # --- decoration sink ---

    def set_underlines(self, spans: List[Span]):
        raise NotImplementedError

    def set_input_active(self, active: bool):
        raise NotImplementedError
