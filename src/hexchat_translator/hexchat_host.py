"""``Host`` implementation backed by HexChat's embedded ``hexchat`` module.

The ``hexchat`` module only exists inside a running HexChat, so it is
passed in by the addon script rather than imported here.  That keeps the
rest of the package importable (and testable) anywhere.

HexChat's callbacks carry a ``userdata`` argument the plugin has no use
for; the wrappers below drop it and convert ``Eat`` back to the plain
integers HexChat expects.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from types import ModuleType
from typing import Any

from hexchat_translator.host import CommandCallback, PrintCallback, TimerCallback

logger = logging.getLogger(__name__)

# hexchat.strip flags: 1 = colours, 2 = attributes.
STRIP_BOTH = 3


class HexChatContext:
    """A HexChat context object viewed through ``HostContext``."""

    def __init__(self, context: Any) -> None:
        self._context = context

    def command(self, text: str) -> None:
        self._context.command(text)

    def prnt(self, text: str) -> None:
        self._context.prnt(text)

    def emit_print(self, event_name: str, *args: str) -> None:
        self._context.emit_print(event_name, *args)


class HexChatHost:
    """The ``hexchat`` module viewed through ``Host``."""

    def __init__(self, hexchat: ModuleType | Any) -> None:
        self._hc = hexchat

    def hook_command(self, name: str, callback: CommandCallback, help_text: str) -> Any:
        def _on_command(word, word_eol, userdata):
            return int(callback(word, word_eol))

        return self._hc.hook_command(name, _on_command, help=help_text)

    def hook_print(self, event_name: str, callback: PrintCallback) -> Any:
        def _on_print(word, word_eol, userdata):
            return int(callback(word))

        return self._hc.hook_print(event_name, _on_print)

    def hook_timer(self, interval_ms: int, callback: TimerCallback) -> Any:
        def _on_timer(userdata):
            return bool(callback())

        return self._hc.hook_timer(interval_ms, _on_timer)

    def hook_unload(self, callback: Callable[[], None]) -> Any:
        def _on_unload(userdata):
            callback()

        return self._hc.hook_unload(_on_unload)

    def unhook(self, handle: Any) -> None:
        self._hc.unhook(handle)

    def get_info(self, name: str) -> str | None:
        return self._hc.get_info(name)

    def find_context(self, network: str, channel: str) -> HexChatContext | None:
        context = self._hc.find_context(server=network, channel=channel)
        if context is None:
            return None
        return HexChatContext(context)

    def prnt(self, text: str) -> None:
        self._hc.prnt(text)

    def strip(self, text: str) -> str | None:
        try:
            return self._hc.strip(text, -1, STRIP_BOTH)
        except (TypeError, ValueError):
            logger.warning("hexchat.strip failed", exc_info=True)
            return None
