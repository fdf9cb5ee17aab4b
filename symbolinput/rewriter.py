"""Abbreviation rewriter — tracks abbreviations in one buffer and replaces them."""
import enum
import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from symbolinput.abbreviations import CURSOR_PLACEHOLDER
from symbolinput.errors import AbbreviationInvariantError
from symbolinput.host import Edit
from symbolinput.span import Span
from symbolinput.tracked import TrackedAbbreviation, TrackedAbbreviationSet

logger = logging.getLogger(__name__)

CONVERT_COMMAND = "symbolinput.convert"


class RewriterState(enum.Enum):
    IDLE = "idle"
    # Our own replacement edit is being applied. Buffer changes seen in this
    # state still move tracked spans but never start tracking, and selection
    # changes are ignored.
    APPLYING_OWN_EDIT = "applying_own_edit"


@dataclass(frozen=True)
class Replacement:
    span: Span           # leader-inclusive span being replaced
    new_text: str        # symbol without the cursor placeholder
    caret_offset: int    # caret position relative to span.offset after insertion

    @property
    def delta(self) -> int:
        return len(self.new_text) - self.span.length


def compute_replacements(abbreviations: Iterable[TrackedAbbreviation]) -> List[Replacement]:
    """Replacements for abbreviations with a matching symbol, highest offset first."""
    replacements = []
    for abbr in abbreviations:
        symbol = abbr.matching_symbol()
        if symbol is None:
            logger.debug("Dropping %r: no matching symbol", abbr)
            continue
        new_text = symbol.replace(CURSOR_PLACEHOLDER, "", 1)
        caret_offset = symbol.find(CURSOR_PLACEHOLDER)
        if caret_offset == -1:
            caret_offset = len(new_text)
        replacements.append(Replacement(abbr.replaceable_span, new_text, caret_offset))
    replacements.sort(key=lambda r: r.span.offset, reverse=True)
    return replacements


def remap_selection(selection: Span, replacements: List[Replacement]) -> Span:
    """Where ``selection`` ends up once ``replacements`` are applied.

    ``replacements`` must be sorted by descending offset.
    """
    result = selection
    for r in replacements:
        if r.span.is_before(result) and not r.span.contains(result):
            result = result.translate(r.delta)
        elif r.span.intersects(result) or r.span.contains(result):
            result = Span(r.span.offset + r.caret_offset, 0)
    return result


class AbbreviationRewriter:
    """Tracks abbreviations in a single editor and replaces them as the user types.

    All tracked abbreviations are disjoint. The rewriter subscribes to the
    host on construction; call ``dispose()`` (or use it as a context
    manager) to unsubscribe.
    """

    def __init__(self, config, table, host, strict: bool = False):
        self.config = config
        self.table = table
        self.host = host
        self.strict = strict
        self._tracked = TrackedAbbreviationSet()
        self._state = RewriterState.IDLE
        self._disposables = [
            host.on_buffer_changed(self.on_buffer_changed),
            host.on_selections_changed(self.on_selections_changed),
            host.register_command(CONVERT_COMMAND, self.convert_all),
        ]

    @property
    def state(self) -> RewriterState:
        return self._state

    @property
    def tracked_abbreviations(self) -> Tuple[TrackedAbbreviation, ...]:
        return tuple(self._tracked)

    # --- event handlers ---

    def on_buffer_changed(self, edits: List[Edit]):
        # Process the edits at the bottom first, so that edits at the top
        # cannot move spans that later edits are expressed against.
        for edit in sorted(edits, key=lambda e: e.span.offset, reverse=True):
            self._process_edit(edit)
        self._check_disjoint()
        self._update_state()

        if self._state is RewriterState.APPLYING_OWN_EDIT:
            # Re-entered from our own replacement; the outer flush owns the buffer.
            return
        eager = self.config.eager_replacement_enabled
        self.flush([a for a in self._tracked
                    if a.finished or (eager and a.is_unique_and_complete())])

    def on_selections_changed(self, selections: List[Span]):
        if self._state is RewriterState.APPLYING_OWN_EDIT:
            return
        carets = [s.with_length(0) for s in selections]
        self.flush([a for a in self._tracked
                    if not any(a.replaceable_span.contains(c) for c in carets)])

    def convert_all(self):
        """Replace every tracked abbreviation now."""
        self.flush(list(self._tracked))

    def reset(self):
        """Stop tracking everything without touching the buffer."""
        self._tracked.clear()
        self._update_state()

    # --- internals ---

    def _process_edit(self, edit: Edit):
        affected: List[TrackedAbbreviation] = []

        def _stops_tracking(abbr):
            result = abbr.process_edit(edit.span, edit.new_text)
            if result.is_affected:
                affected.append(abbr)
            if result.should_stop_tracking:
                logger.debug("Stopped tracking %r: edit %s overlaps its boundary", abbr, edit.span)
            return result.should_stop_tracking

        self._tracked.remove_all(_stops_tracking)

        if len(affected) > 1:
            message = f"edit {edit.span} affected {len(affected)} tracked abbreviations: {affected}"
            if self.strict:
                raise AbbreviationInvariantError(message)
            logger.error("Invariant violated, %s", message)
            for abbr in affected:
                self._tracked.remove(abbr)

        if (edit.new_text == self.config.leader
                and not affected
                and self._state is RewriterState.IDLE):
            abbr = TrackedAbbreviation(Span(edit.span.offset + 1, 0), "", self.table)
            self._tracked.add(abbr)
            logger.debug("Tracking new abbreviation at %d", edit.span.offset)

    def _check_disjoint(self):
        pairs = self._tracked.overlapping_pairs()
        if not pairs:
            return
        message = f"tracked abbreviations overlap: {pairs}"
        if self.strict:
            raise AbbreviationInvariantError(message)
        logger.error("Invariant violated, %s", message)
        for a, b in pairs:
            self._tracked.remove(a)
            self._tracked.remove(b)

    def flush(self, abbreviations: List[TrackedAbbreviation]):
        """Replace ``abbreviations`` by their symbols, or drop them if they have none."""
        if not abbreviations:
            return
        # Forget them before editing, so our own edit is not taken for typing.
        for abbr in abbreviations:
            self._tracked.remove(abbr)

        replacements = compute_replacements(abbreviations)
        if replacements:
            self._replace(replacements)
        self._update_state()

    def _replace(self, replacements: List[Replacement]):
        self._state = RewriterState.APPLYING_OWN_EDIT
        try:
            new_selections = [remap_selection(s, replacements)
                              for s in self.host.get_selections()]
            edits = [Edit(r.span, r.new_text) for r in replacements]
            if self._apply_edits(edits):
                self.host.set_selections(new_selections)
                logger.debug("Replaced %d abbreviation(s)", len(edits))
            else:
                logger.warning("Unable to replace abbreviation(s) at %s",
                               ", ".join(str(r.span) for r in replacements))
        finally:
            self._state = RewriterState.IDLE

    def _apply_edits(self, edits: List[Edit]) -> bool:
        # Sent once: the offsets belong to the buffer they were computed against.
        try:
            return bool(self.host.apply_edits(edits))
        except Exception as e:
            logger.warning("Error while replacing abbreviation: %s", e)
            return False

    def _update_state(self):
        self.host.set_underlines(self._tracked.spans())
        self.host.set_input_active(len(self._tracked) > 0)

    def dispose(self):
        for d in self._disposables:
            d.dispose()
        self._disposables = []
        self._tracked.clear()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.dispose()
        return False
