"""Boundary between the translator and the chat client hosting it.

The dispatcher and command handlers only talk to the client through the
``Host`` and ``HostContext`` protocols below.  ``hexchat_host`` adapts the
real ``hexchat`` module to them; the test suite supplies a recording fake.

Every method on these protocols must be called from the client's main
thread.  Worker threads never touch a ``Host``; they post continuations to
``dispatch.ControlQueue`` instead.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from enum import IntEnum
from typing import Any, Protocol

# mIRC colour codes understood by HexChat.
IRC_COLOR = "\x03"
IRC_MAGENTA = f"{IRC_COLOR}06"
IRC_CYAN = f"{IRC_COLOR}11"

# Prefix for every diagnostic line the plugin prints.
DIAGNOSTIC = IRC_MAGENTA

# Prefix for the echo of an untranslated original.
ORIGINAL = IRC_CYAN


class Eat(IntEnum):
    """What a hook tells the client to do with the command or event.

    Values match HexChat's ``EAT_*`` constants.

    NONE:    not handled; the client and other plugins process it.
    HEXCHAT: handled; suppress the client's default processing but let
             other plugins see it.
    PLUGIN:  let the client process it but hide it from other plugins.
    ALL:     fully handled; nobody else sees it.
    """

    NONE = 0
    HEXCHAT = 1
    PLUGIN = 2
    ALL = 3


CommandCallback = Callable[[Sequence[str], Sequence[str]], Eat]
PrintCallback = Callable[[Sequence[str]], Eat]
TimerCallback = Callable[[], bool]


class HostContext(Protocol):
    """A single chat window."""

    def command(self, text: str) -> None:
        """Run a client command (without the leading ``/``) in this window."""

    def prnt(self, text: str) -> None:
        """Print a line locally in this window."""

    def emit_print(self, event_name: str, *args: str) -> None:
        """Emit a text event in this window, running every print hook."""


class Host(Protocol):
    """The chat client as seen from the main thread."""

    def hook_command(self, name: str, callback: CommandCallback, help_text: str) -> Any:
        """Register ``/name``; the callback gets ``(word, word_eol)``."""

    def hook_print(self, event_name: str, callback: PrintCallback) -> Any:
        """Register a text-event hook; the callback gets ``word``."""

    def hook_timer(self, interval_ms: int, callback: TimerCallback) -> Any:
        """Call ``callback`` every ``interval_ms`` while it returns ``True``."""

    def hook_unload(self, callback: Callable[[], None]) -> Any:
        """Call ``callback`` when the plugin is unloaded."""

    def unhook(self, handle: Any) -> None:
        """Remove a hook returned by one of the ``hook_*`` methods."""

    def get_info(self, name: str) -> str | None:
        """Return client info (``"network"``, ``"channel"``) for the current window."""

    def find_context(self, network: str, channel: str) -> HostContext | None:
        """Locate an open window, or ``None`` if it has gone away."""

    def prnt(self, text: str) -> None:
        """Print a line in the current window."""

    def strip(self, text: str) -> str | None:
        """Remove colour and attribute codes; ``None`` if that fails."""
