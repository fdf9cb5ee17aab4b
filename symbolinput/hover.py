"""Reverse lookup: how to type the symbol under the cursor."""
from typing import Optional


def hover_text(line_text: str, column: int, table, leader: str = "\\") -> Optional[str]:
    """Describe how to type each symbol that starts at ``column``.

    Returns e.g. "Type ⊓ using `\\glb` or `\\sqcap`", one paragraph per
    symbol, or None when no symbol with known abbreviations starts there.
    """
    context = line_text[column:]
    paragraphs = []
    for symbol in table.symbols_in(context):
        abbrevs = table.abbreviations_for(symbol)
        if not abbrevs:
            continue
        info = f"Type {symbol} using " + " or ".join(f"`{leader}{a}`" for a in abbrevs)
        closing = table.auto_closing_abbreviations(symbol)
        if closing:
            info += (f". {symbol} can be auto-closed with "
                     + " or ".join(f"{c} using `{leader}{a}`" for a, c in closing) + ".")
        paragraphs.append(info)
    if not paragraphs:
        return None
    return "\n\n".join(paragraphs)
