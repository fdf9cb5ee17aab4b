"""Exception types raised by symbolinput."""


class SymbolInputError(Exception):
    """Base class for all symbolinput errors."""


class AbbreviationInvariantError(SymbolInputError):
    """Tracked abbreviations overlap, or one raw edit touched several of them.

    Only raised by a rewriter constructed with ``strict=True``; otherwise the
    violation is logged and the affected abbreviations stop being tracked.
    """


class AbbreviationTableError(SymbolInputError):
    """The abbreviation resource or a custom translation file is unusable."""
