"""Abbreviations currently being typed, and the set that owns them."""
import logging
from typing import Callable, Iterator, List, NamedTuple, Optional

from symbolinput.span import Span

logger = logging.getLogger(__name__)


class EditResult(NamedTuple):
    is_affected: bool
    should_stop_tracking: bool


class TrackedAbbreviation:
    """A mnemonic the user is typing right now.

    ``span`` covers the mnemonic characters (without the leader) and
    ``text`` mirrors the buffer contents of ``span``. Both are updated from
    raw edits only; the buffer is never read back. With several cursors,
    several abbreviations can be tracked at once.
    """

    def __init__(self, span: Span, text: str, table):
        self._span = span
        self._text = text
        self._table = table
        self._finished = False

    @property
    def span(self) -> Span:
        return self._span

    @property
    def replaceable_span(self) -> Span:
        """The span including the leader character."""
        return self._span.shift_start_keep_end(-1)

    @property
    def text(self) -> str:
        return self._text

    @property
    def finished(self) -> bool:
        """Set once the mnemonic was continued with a character that extends no entry.

        Finished abbreviations should be flushed right away.
        """
        return self._finished

    def matching_symbol(self) -> Optional[str]:
        return self._table.exact_match(self._text)

    def is_unique_and_complete(self) -> bool:
        return (len(self._table.prefix_matches(self._text)) == 1
                and self._table.exact_match(self._text) is not None)

    def process_edit(self, edit_span: Span, new_text: str) -> EditResult:
        """Absorb one raw edit given in pre-edit buffer coordinates."""
        if self._span.contains(edit_span):
            self._finished = False

            if edit_span.offset >= self._span.end:
                # Pure append to the mnemonic.
                if not self._table.prefix_matches(self._text + new_text):
                    self._finished = True
                    return EditResult(False, False)

            relative_start = edit_span.offset - self._span.offset
            relative_end = edit_span.end - self._span.offset
            self._text = self._text[:relative_start] + new_text + self._text[relative_end:]
            self._span = self._span.resize_end(len(new_text) - edit_span.length)
            return EditResult(True, False)

        if edit_span.is_before(self.replaceable_span):
            self._span = self._span.translate(len(new_text) - edit_span.length)
            return EditResult(False, False)

        if edit_span.is_after(self.replaceable_span):
            return EditResult(False, False)

        # The edit straddles a boundary; text would be ill-defined.
        return EditResult(False, True)

    def __repr__(self):
        return (f"TrackedAbbreviation({self._text!r} at {self._span}"
                f"{', finished' if self._finished else ''})")


class TrackedAbbreviationSet:
    """Insertion-ordered set of tracked abbreviations for one buffer."""

    def __init__(self):
        self._items: List[TrackedAbbreviation] = []

    def add(self, abbr: TrackedAbbreviation):
        if abbr not in self._items:
            self._items.append(abbr)

    def remove(self, abbr: TrackedAbbreviation):
        if abbr in self._items:
            self._items.remove(abbr)

    def remove_all(self, predicate: Callable[[TrackedAbbreviation], bool]) -> List[TrackedAbbreviation]:
        """Remove and return every abbreviation matching ``predicate``."""
        kept, removed = [], []
        for abbr in self._items:
            (removed if predicate(abbr) else kept).append(abbr)
        self._items = kept
        return removed

    def clear(self):
        self._items.clear()

    def snapshot(self) -> List[TrackedAbbreviation]:
        return list(self._items)

    def spans(self) -> List[Span]:
        return [a.replaceable_span for a in self._items]

    def overlapping_pairs(self):
        """Pairs of tracked abbreviations whose leader-inclusive spans overlap."""
        ordered = sorted(self._items, key=lambda a: a.replaceable_span.offset)
        return [(a, b) for a, b in zip(ordered, ordered[1:])
                if b.replaceable_span.offset < a.replaceable_span.end]

    def __iter__(self) -> Iterator[TrackedAbbreviation]:
        return iter(list(self._items))

    def __len__(self):
        return len(self._items)

    def __contains__(self, abbr):
        return abbr in self._items
