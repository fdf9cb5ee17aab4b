"""Activation layer — one rewriter per eligible editor."""
import logging
from typing import Dict, Optional

from symbolinput.rewriter import AbbreviationRewriter

logger = logging.getLogger(__name__)


class AbbreviationFeature:
    """Creates and disposes rewriters as editors open and close.

    An editor gets a rewriter when input mode is enabled and its language
    is listed in the configuration. ``config_changed()`` re-evaluates every
    open editor after the settings were edited.
    """

    def __init__(self, config, table):
        self.config = config
        self.table = table
        self._editors: Dict[object, str] = {}  # host -> language id
        self._rewriters: Dict[object, AbbreviationRewriter] = {}

    def _should_enable(self, language_id: str) -> bool:
        return bool(self.config.enabled) and language_id in self.config.languages

    def editor_opened(self, host, language_id: str) -> Optional[AbbreviationRewriter]:
        self._editors[host] = language_id
        self._sync(host)
        return self._rewriters.get(host)

    def editor_closed(self, host):
        self._editors.pop(host, None)
        rewriter = self._rewriters.pop(host, None)
        if rewriter is not None:
            rewriter.dispose()

    def rewriter_for(self, host) -> Optional[AbbreviationRewriter]:
        return self._rewriters.get(host)

    def config_changed(self):
        self.table.update_custom(self.config.custom_translations)
        for host in list(self._editors):
            self._sync(host)

    def _sync(self, host):
        wanted = self._should_enable(self._editors[host])
        rewriter = self._rewriters.get(host)
        if wanted and rewriter is None:
            self._rewriters[host] = AbbreviationRewriter(self.config, self.table, host)
            logger.info("Abbreviation input enabled for %s editor", self._editors[host])
        elif not wanted and rewriter is not None:
            # Clears underlines and the input-active flag on the host.
            rewriter.reset()
            rewriter.dispose()
            del self._rewriters[host]
            logger.info("Abbreviation input disabled for %s editor", self._editors[host])

    def dispose(self):
        for rewriter in self._rewriters.values():
            rewriter.dispose()
        self._rewriters.clear()
        self._editors.clear()
