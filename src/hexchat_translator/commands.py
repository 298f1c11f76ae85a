"""User commands and text-event hooks.

Commands
--------
``/LISTLANG``             list supported languages and their codes.
``/SETLANG <src> <tgt>``  switch translation on for the current window.
``/OFFLANG``              switch it off again.
``/LSAY <text>``          like ``/SAY``, but translated first.
``/LME <text>``           like ``/ME``, but translated first.

Without ``/LSAY`` or ``/LME`` the user's messages are sent unchanged even
in a translating window.  Incoming messages in a translating window are
always translated.

Each handler receives HexChat's ``word`` / ``word_eol`` lists, where
``word[0]`` is the command name itself.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from functools import partial

from hexchat_translator.dispatch import TRANSLATION_OFF_MESSAGE, Dispatcher
from hexchat_translator.errors import (
    ContextResolutionError,
    DuplicateLanguageError,
    UnknownLanguageError,
    UsageError,
)
from hexchat_translator.host import DIAGNOSTIC, ORIGINAL, Eat, Host
from hexchat_translator.languages import format_language_table, resolve_pair
from hexchat_translator.registry import ChannelKey, LanguagePair, SessionRegistry

logger = logging.getLogger(__name__)

LISTLANG_HELP = (
    "/LISTLANG - Lists languages supported and their abbreviations. "
    "This command takes no parameters."
)
SETLANG_HELP = "/SETLANG <src> <tgt> - Sets source and target languages for the channel."
OFFLANG_HELP = (
    "/OFFLANG - Deactivates translation on the channel. This command takes no parameters."
)
LSAY_HELP = "/LSAY <message> - Sends a translated message to the channel."
LME_HELP = "/LME <message> - Sends a channel action message translated."

BAD_LANGUAGE_MESSAGE = (
    "BAD LANGUAGE PARAMETERS. Use /LISTLANG to get a list of supported languages."
)
SAME_LANGUAGE_MESSAGE = (
    "BAD LANGUAGE PARAMETERS. Don't set translation source and target languages the same."
)

# Text events whose message is translated in a translating window.
TEXT_EVENTS: tuple[str, ...] = (
    "Channel Message",
    "Channel Msg Hilight",
    "Channel Action",
    "Channel Action Hilight",
    "Private Message",
    "Private Message to Dialog",
    "Private Action",
    "Private Action to Dialog",
)

PART_EVENTS: tuple[str, ...] = ("You Part", "You Part with Reason")
DISCONNECT_EVENT = "Disconnected"


@dataclass(frozen=True)
class SayCommand:
    """Configuration for one translating send command.

    Attributes:
        name:         Command the user types (``"LSAY"``).
        send_command: Plain command the translation is sent with (``"SAY"``).
        help_text:    ``/HELP`` text and usage string.
    """

    name: str
    send_command: str
    help_text: str


SAY_COMMANDS: tuple[SayCommand, ...] = (
    SayCommand(name="LSAY", send_command="SAY", help_text=LSAY_HELP),
    SayCommand(name="LME", send_command="ME", help_text=LME_HELP),
)


class TranslatorCommands:
    """Command and event handlers bound to one registry and dispatcher.

    Args:
        host:               Client API.
        registry:           Shared session registry.
        dispatcher:         Translation dispatcher.
        deactivate_on_part: Drop a window's session when the user parts it,
                            and every session of a network on disconnect.
    """

    def __init__(
        self,
        *,
        host: Host,
        registry: SessionRegistry,
        dispatcher: Dispatcher,
        deactivate_on_part: bool = True,
    ) -> None:
        self._host = host
        self._registry = registry
        self._dispatcher = dispatcher
        self._deactivate_on_part = deactivate_on_part

    def register(self) -> list:
        """Hook every command and event into the host.

        Returns:
            The hook handles, for unhooking on unload.
        """
        host = self._host
        hooks = [
            host.hook_command("LISTLANG", self.on_listlang, LISTLANG_HELP),
            host.hook_command("SETLANG", self.on_setlang, SETLANG_HELP),
            host.hook_command("OFFLANG", self.on_offlang, OFFLANG_HELP),
        ]
        for say in SAY_COMMANDS:
            hooks.append(host.hook_command(say.name, partial(self.on_say, say), say.help_text))
        for event_name in TEXT_EVENTS:
            hooks.append(host.hook_print(event_name, partial(self.on_text_event, event_name)))
        for event_name in PART_EVENTS:
            hooks.append(host.hook_print(event_name, self.on_part))
        hooks.append(host.hook_print(DISCONNECT_EVENT, self.on_disconnect))
        return hooks

    # ── Helpers ───────────────────────────────────────────────────────────────

    def _print(self, text: str) -> None:
        self._host.prnt(f"{DIAGNOSTIC}{text}")

    def _usage(self, error: UsageError) -> Eat:
        self._host.prnt(str(error))
        return Eat.ALL

    # ── Commands ──────────────────────────────────────────────────────────────

    def on_listlang(self, word: Sequence[str], word_eol: Sequence[str]) -> Eat:
        if len(word) != 1:
            return self._usage(UsageError(LISTLANG_HELP))

        self._host.prnt("")
        for line in format_language_table():
            self._host.prnt(f"{ORIGINAL}{line}")
        self._host.prnt("")
        return Eat.ALL

    def on_setlang(self, word: Sequence[str], word_eol: Sequence[str]) -> Eat:
        if len(word) != 3:
            return self._usage(UsageError(SETLANG_HELP))

        try:
            source, target = resolve_pair(word[1], word[2])
        except UnknownLanguageError as exc:
            logger.info("SETLANG rejected: %s", exc)
            self._print(BAD_LANGUAGE_MESSAGE)
            return Eat.ALL
        except DuplicateLanguageError as exc:
            logger.info("SETLANG rejected: %s", exc)
            self._print(SAME_LANGUAGE_MESSAGE)
            return Eat.ALL

        try:
            key = self._dispatcher.current_key()
        except ContextResolutionError:
            self._print("Failed to get channel information during activation.")
            return Eat.ALL

        self._registry.activate(key, LanguagePair(source=source.code, target=target.code))
        self._print(
            f"TRANSLATION IS ON FOR THIS CHANNEL! {source.name} (you) to {target.name} (them)."
        )
        return Eat.ALL

    def on_offlang(self, word: Sequence[str], word_eol: Sequence[str]) -> Eat:
        if len(word) != 1:
            return self._usage(UsageError(OFFLANG_HELP))

        try:
            key = self._dispatcher.current_key()
        except ContextResolutionError:
            self._print("Failed to get channel information during deactivation.")
            return Eat.ALL

        self._registry.deactivate(key)
        self._print(TRANSLATION_OFF_MESSAGE)
        return Eat.ALL

    def on_say(self, say: SayCommand, word: Sequence[str], word_eol: Sequence[str]) -> Eat:
        """``/LSAY`` and ``/LME``: hand the rest of the line to the dispatcher."""
        if len(word) < 2 or len(word_eol) < 2:
            return self._usage(UsageError(say.help_text))
        return self._dispatcher.send(say.send_command, word_eol[1])

    # ── Events ────────────────────────────────────────────────────────────────

    def on_text_event(self, event_name: str, word: Sequence[str]) -> Eat:
        return self._dispatcher.receive(event_name, word)

    def on_part(self, word: Sequence[str]) -> Eat:
        """Forget the session of a channel the user has left.

        ``You Part`` fields are ``nick, host, channel[, reason]``.
        """
        if not self._deactivate_on_part:
            return Eat.NONE
        network = self._host.get_info("network")
        channel = word[2] if len(word) > 2 else self._host.get_info("channel")
        if network is None or channel is None:
            logger.debug("Part event without network/channel: %r", list(word))
            return Eat.NONE
        self._registry.deactivate(ChannelKey(network=network, channel=channel))
        return Eat.NONE

    def on_disconnect(self, word: Sequence[str]) -> Eat:
        """Forget every session on a network that has disconnected."""
        if not self._deactivate_on_part:
            return Eat.NONE
        network = self._host.get_info("network")
        if network is None:
            logger.debug("Disconnect event without network")
            return Eat.NONE
        self._registry.deactivate_network(network)
        return Eat.NONE


__all__ = [
    "DISCONNECT_EVENT",
    "LISTLANG_HELP",
    "LME_HELP",
    "LSAY_HELP",
    "OFFLANG_HELP",
    "PART_EVENTS",
    "SAY_COMMANDS",
    "SETLANG_HELP",
    "TEXT_EVENTS",
    "SayCommand",
    "TranslatorCommands",
]
