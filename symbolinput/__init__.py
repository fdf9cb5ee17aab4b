"""symbolinput — type Unicode symbols through leader-prefixed abbreviations."""

__version__ = "0.1.0"
