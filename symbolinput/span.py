"""Offset/length spans over a text buffer."""
from dataclasses import dataclass


@dataclass(frozen=True)
class Span:
    """Half-open interval ``[offset, offset + length)`` of buffer offsets.

    A span of length 0 is a pure insertion point. All operations return new
    spans; a span is never mutated.
    """

    offset: int
    length: int

    def __post_init__(self):
        if self.length < 0:
            raise ValueError(f"span length must be >= 0, got {self.length}")
        if self.offset < 0:
            raise ValueError(f"span offset must be >= 0, got {self.offset}")

    @classmethod
    def from_bounds(cls, start: int, end: int) -> "Span":
        return cls(start, end - start)

    @property
    def end(self) -> int:
        """Exclusive end offset."""
        return self.offset + self.length

    @property
    def end_inclusive(self) -> int:
        return self.offset + self.length - 1

    @property
    def is_empty(self) -> bool:
        return self.length == 0

    def contains_offset(self, offset: int) -> bool:
        return self.offset <= offset < self.end

    def contains(self, other: "Span") -> bool:
        # An empty span at either boundary counts as contained.
        return self.offset <= other.offset and other.end <= self.end

    def is_before(self, other: "Span") -> bool:
        """True if this span ends at or before ``other`` starts."""
        return self.end <= other.offset

    def is_after(self, other: "Span") -> bool:
        """True if this span starts at or after ``other`` ends."""
        return other.end <= self.offset

    def intersects(self, other: "Span") -> bool:
        return not self.is_before(other) and not self.is_after(other)

    def translate(self, delta: int) -> "Span":
        return Span(self.offset + delta, self.length)

    def resize_end(self, delta: int) -> "Span":
        return Span(self.offset, self.length + delta)

    def shift_start_keep_end(self, delta: int) -> "Span":
        if delta > self.length:
            raise ValueError(f"cannot move start by {delta} past end of {self}")
        return Span(self.offset + delta, self.length - delta)

    def with_length(self, length: int) -> "Span":
        return Span(self.offset, length)

    def __str__(self):
        return f"[{self.offset}, +{self.length})"
