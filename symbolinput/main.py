"""Entry point for symbolinput.

Usage:
    python -m symbolinput.main                     # editor window
    python -m symbolinput.main --type '\\alpha x'   # simulate typing, print result
    python -m symbolinput.main --expand alp7       # best replacement for a mnemonic
    python -m symbolinput.main --lookup α          # abbreviations for a symbol
"""
import sys
import signal
import logging
import argparse


def setup_logging(debug: bool = False):
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def simulate_typing(config, table, text: str, show_caret: bool = False) -> str:
    """Type ``text`` one character at a time into a live buffer; return the result."""
    from symbolinput.buffer import TextBuffer
    from symbolinput.rewriter import AbbreviationRewriter

    buffer = TextBuffer()
    with AbbreviationRewriter(config, table, buffer) as rewriter:
        for char in text:
            buffer.add_char(char)
        rewriter.convert_all()
    return buffer.render(show_caret=show_caret)


def run_editor(config, table):
    """Run the editor window."""
    from PyQt5.QtWidgets import QApplication
    from symbolinput.feature import AbbreviationFeature
    from symbolinput.qt_editor import EditorWindow

    app = QApplication(sys.argv)
    app.setApplicationName("symbolinput")

    feature = AbbreviationFeature(config, table)
    window = EditorWindow(config, table, feature)
    window.show()

    exit_code = app.exec_()
    feature.dispose()
    return exit_code


def main(argv=None):
    signal.signal(signal.SIGINT, signal.SIG_DFL)

    parser = argparse.ArgumentParser(description="Unicode input via abbreviations")
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--type", metavar="TEXT", dest="type_text",
                       help="Simulate typing TEXT and print the rewritten buffer")
    group.add_argument("--expand", metavar="MNEMONIC",
                       help="Print the replacement for MNEMONIC (without leader)")
    group.add_argument("--lookup", metavar="SYMBOL",
                       help="Print every abbreviation producing SYMBOL")
    parser.add_argument("--show-caret", action="store_true",
                        help="With --type, mark the caret with '|'")
    parser.add_argument("--config", metavar="PATH",
                        help="Use PATH instead of ~/.config/symbolinput/config.json")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    from symbolinput.abbreviations import AbbreviationTable
    from symbolinput.config import Config
    from symbolinput.errors import AbbreviationTableError

    config = Config(args.config)
    setup_logging(args.debug or config.debug_logging)
    logger = logging.getLogger(__name__)

    try:
        table = AbbreviationTable(custom=config.custom_translations)
    except AbbreviationTableError as e:
        logger.error("%s", e)
        return 1

    if args.type_text is not None:
        print(simulate_typing(config, table, args.type_text, args.show_caret))
        return 0
    if args.expand is not None:
        replacement = table.replacement_text(args.expand)
        if replacement is None:
            logger.error("No abbreviation matches %r", args.expand)
            return 1
        print(replacement)
        return 0
    if args.lookup is not None:
        abbrevs = table.abbreviations_for(args.lookup)
        if not abbrevs:
            logger.error("No abbreviation produces %r", args.lookup)
            return 1
        for abbrev in abbrevs:
            print(config.leader + abbrev)
        return 0
    return run_editor(config, table)


if __name__ == "__main__":
    sys.exit(main())
