"""Dispatch core: translate off-thread, deliver on the HexChat thread.

HexChat runs every hook on one thread and its API is not safe to call from
anywhere else.  A translation blocks on the network for up to the backend
timeout, so the dispatcher splits each message into two halves:

1. On the HexChat thread (``send`` / ``receive``): look up the window's
   language pair, strip formatting, snapshot everything the rest of the
   job needs into a frozen request, start a worker thread, and return at
   once.
2. On the worker thread: call the backend.  The outcome is never applied
   there; a continuation is posted to ``ControlQueue``.
3. Back on the HexChat thread: a timer drains ``ControlQueue``.  Each
   continuation re-locates the window by ``(network, channel)`` because it
   may have closed in the meantime, then sends, prints, or re-emits.

Ordering
--------
Continuations run in the order they were posted.  Translations themselves
finish in whatever order the network returns them, so two quick messages
in one window can be shown out of order.  There is no cancellation: a
result that arrives after ``/OFFLANG`` is still delivered if the window is
open.

Re-entrancy
-----------
Delivering an incoming translation re-emits the original text event with
the translated text.  HexChat runs print hooks synchronously inside
``emit_print``, so our own hook sees the echo.  ``SyntheticEventGuard`` is
raised around the emit and the hook lets anything seen under it pass.
"""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any

from hexchat_translator.errors import (
    ConfigurationError,
    ContextResolutionError,
    FormattingStripError,
)
from hexchat_translator.host import DIAGNOSTIC, ORIGINAL, Eat, Host, HostContext
from hexchat_translator.registry import ChannelKey, LanguagePair, SessionRegistry
from hexchat_translator.translation.backend import (
    Failed,
    TranslationBackend,
    TranslationOutcome,
)

logger = logging.getLogger(__name__)

Continuation = Callable[[], None]
Spawner = Callable[[Callable[[], None]], None]

TRANSLATION_OFF_MESSAGE = "Translation turned OFF for this channel."
CONTEXT_LOST_MESSAGE = "Failed to get context."
BASIC_FAILURE_MESSAGE = (
    "Translator Error: Basic failure retrieving channel information, "
    "or unable to strip original message."
)


def spawn_thread(job: Callable[[], None]) -> None:
    """Run ``job`` on a new daemon thread."""
    threading.Thread(target=job, name="translator-worker", daemon=True).start()


# ── Marshal-back channel ──────────────────────────────────────────────────────


class ControlQueue:
    """FIFO of continuations waiting to run on the HexChat thread.

    ``post`` may be called from any thread.  ``drain`` must only be called
    on the HexChat thread; the plugin calls it from a HexChat timer.
    """

    def __init__(self) -> None:
        self._queue: queue.SimpleQueue[Continuation] = queue.SimpleQueue()

    def post(self, continuation: Continuation) -> None:
        self._queue.put(continuation)

    def drain(self, limit: int | None = None) -> int:
        """Run queued continuations in posting order.

        A continuation that raises is logged and skipped; the rest still
        run.

        Args:
            limit: Stop after this many continuations (``None`` = all that
                   are queued).

        Returns:
            Number of continuations run.
        """
        ran = 0
        while limit is None or ran < limit:
            try:
                continuation = self._queue.get_nowait()
            except queue.Empty:
                break
            ran += 1
            try:
                continuation()
            except Exception:
                logger.exception("Translator continuation failed")
        return ran

    def __len__(self) -> int:
        return self._queue.qsize()


class SyntheticEventGuard:
    """Flags text events that the dispatcher itself is emitting."""

    def __init__(self) -> None:
        self._depth = 0

    @property
    def active(self) -> bool:
        return self._depth > 0

    @contextmanager
    def emitting(self) -> Iterator[None]:
        self._depth += 1
        try:
            yield
        finally:
            self._depth -= 1


# ── Request snapshots ─────────────────────────────────────────────────────────


@dataclass(frozen=True)
class OutgoingRequest:
    """Everything needed to finish one ``/LSAY`` or ``/LME``.

    Attributes:
        key:     Window the command was typed in.
        pair:    Direction of translation (user → channel language).
        command: Plain client command to send with (``"SAY"`` / ``"ME"``).
        message: Text as typed, echoed locally afterwards.
        text:    ``message`` with formatting stripped; sent to the backend.
    """

    key: ChannelKey
    pair: LanguagePair
    command: str
    message: str
    text: str


@dataclass(frozen=True)
class IncomingRequest:
    """Everything needed to re-emit one received text event.

    Attributes:
        key:        Window the event arrived in.
        pair:       Direction of translation (channel → user language).
        event_name: HexChat text event, e.g. ``"Channel Message"``.
        sender:     Nick of the sender (``word[0]``).
        message:    Message as received (``word[1]``), echoed locally.
        mode_char:  Sender's mode prefix (``word[2]``), or ``""``.
        text:       ``message`` with formatting stripped.
    """

    key: ChannelKey
    pair: LanguagePair
    event_name: str
    sender: str
    message: str
    mode_char: str
    text: str


# ── Dispatcher ────────────────────────────────────────────────────────────────


class Dispatcher:
    """Runs the outgoing and incoming translation workflows.

    Attributes:
        _host:     Client API; only touched on the HexChat thread.
        _registry: Shared session registry.
        _backend:  Translation provider; only touched on workers.
        _queue:    Marshal-back channel.
        _guard:    Re-entrancy flag for re-emitted events.
        _spawn:    Starts a worker; tests substitute an inline runner.
    """

    def __init__(
        self,
        *,
        host: Host,
        registry: SessionRegistry,
        backend: TranslationBackend,
        control_queue: ControlQueue,
        guard: SyntheticEventGuard | None = None,
        spawn: Spawner = spawn_thread,
    ) -> None:
        self._host = host
        self._registry = registry
        self._backend = backend
        self._queue = control_queue
        self._guard = guard or SyntheticEventGuard()
        self._spawn = spawn

    @property
    def guard(self) -> SyntheticEventGuard:
        return self._guard

    # ── Context helpers ───────────────────────────────────────────────────────

    def current_key(self) -> ChannelKey:
        """Identify the window the current hook fired in.

        Raises:
            ContextResolutionError: HexChat returned no network or channel.
        """
        network = self._host.get_info("network")
        channel = self._host.get_info("channel")
        if network is None or channel is None:
            raise ContextResolutionError("network or channel unavailable")
        return ChannelKey(network=network, channel=channel)

    def _strip(self, message: str) -> str:
        stripped = self._host.strip(message)
        if stripped is None:
            raise FormattingStripError("could not strip message formatting")
        return stripped

    def _diagnostic(self, text: str, ctx: HostContext | None = None) -> None:
        line = f"{DIAGNOSTIC}{text}"
        if ctx is None:
            self._host.prnt(line)
        else:
            ctx.prnt(line)

    # ── Outgoing ──────────────────────────────────────────────────────────────

    def send(self, command: str, message: str) -> Eat:
        """Translate ``message`` and send it with ``command`` (``/LSAY`` path).

        Returns:
            ``Eat.NONE`` when the window is not translating, otherwise
            ``Eat.ALL``; the send happens later, from the control queue.
        """
        try:
            key = self.current_key()
        except ContextResolutionError:
            logger.warning("LSAY: cannot resolve current context")
            self._diagnostic(BASIC_FAILURE_MESSAGE)
            return Eat.ALL

        pair = self._registry.lookup(key)
        if pair is None:
            return Eat.NONE

        try:
            self._backend.ensure_configured()
            text = self._strip(message)
        except ConfigurationError as exc:
            self._diagnostic(f"Translation Error: {exc}")
            return Eat.ALL
        except FormattingStripError:
            self._diagnostic(BASIC_FAILURE_MESSAGE)
            return Eat.ALL

        request = OutgoingRequest(
            key=key, pair=pair, command=command, message=message, text=text
        )
        logger.debug("Dispatching outgoing %s for %s", command, key)
        self._spawn(lambda: self._run(request, pair, self._deliver_outgoing))
        return Eat.ALL

    def _deliver_outgoing(self, request: OutgoingRequest, outcome: TranslationOutcome) -> None:
        ctx = self._host.find_context(request.key.network, request.key.channel)
        if ctx is None:
            logger.warning("Dropping outgoing translation: %s is gone", request.key)
            self._diagnostic(CONTEXT_LOST_MESSAGE)
            return

        ctx.command(f"{request.command} {outcome.text}")
        ctx.prnt(f"{ORIGINAL}{request.message}")
        self._report_failure(ctx, request.key, outcome)

    # ── Incoming ──────────────────────────────────────────────────────────────

    def receive(self, event_name: str, word: Sequence[str]) -> Eat:
        """Intercept a received text event in a translating window.

        Args:
            event_name: HexChat text event name.
            word:       Event fields: sender, message, optional mode char.

        Returns:
            ``Eat.HEXCHAT`` when the event was taken over (HexChat's own
            rendering is suppressed until the translation is shown),
            otherwise ``Eat.NONE``.

        A failure before dispatch (unknown window, unstrippable text, no
        API key) prints a diagnostic and still returns ``Eat.NONE`` rather
        than treating the event as handled, so HexChat shows the original
        message instead of dropping it.
        """
        if self._guard.active or len(word) < 2:
            return Eat.NONE

        try:
            key = self.current_key()
        except ContextResolutionError:
            logger.warning("%s: cannot resolve current context", event_name)
            self._diagnostic(BASIC_FAILURE_MESSAGE)
            return Eat.NONE

        pair = self._registry.lookup(key)
        if pair is None:
            return Eat.NONE

        sender, message = word[0], word[1]
        try:
            self._backend.ensure_configured()
            text = self._strip(message)
        except ConfigurationError as exc:
            self._diagnostic(f"Translation Error: {exc}")
            return Eat.NONE
        except FormattingStripError:
            self._diagnostic(BASIC_FAILURE_MESSAGE)
            return Eat.NONE

        incoming_pair = pair.reversed()
        request = IncomingRequest(
            key=key,
            pair=incoming_pair,
            event_name=event_name,
            sender=sender,
            message=message,
            mode_char=word[2] if len(word) > 2 else "",
            text=text,
        )
        logger.debug("Dispatching incoming %r from %s in %s", event_name, sender, key)
        self._spawn(lambda: self._run(request, incoming_pair, self._deliver_incoming))
        return Eat.HEXCHAT

    def _deliver_incoming(self, request: IncomingRequest, outcome: TranslationOutcome) -> None:
        ctx = self._host.find_context(request.key.network, request.key.channel)
        if ctx is None:
            logger.warning("Dropping incoming translation: %s is gone", request.key)
            self._diagnostic(CONTEXT_LOST_MESSAGE)
            return

        fields = [request.sender, outcome.text]
        if request.mode_char:
            fields.append(request.mode_char)
        with self._guard.emitting():
            ctx.emit_print(request.event_name, *fields)
        ctx.prnt(f"{ORIGINAL}{request.message}")
        self._report_failure(ctx, request.key, outcome)

    # ── Shared ────────────────────────────────────────────────────────────────

    def _run(
        self,
        request: OutgoingRequest | IncomingRequest,
        pair: LanguagePair,
        deliver: Callable[[Any, TranslationOutcome], None],
    ) -> None:
        """Worker body: translate, then post the delivery to the control queue."""
        try:
            outcome = self._backend.attempt(request.text, pair.source, pair.target)
        except Exception as exc:
            logger.exception("Translation backend raised unexpectedly")
            outcome = Failed(
                partial_text=request.text,
                message=f"Translation Error: {exc}",
            )
        self._queue.post(lambda: deliver(request, outcome))

    def _report_failure(
        self, ctx: HostContext, key: ChannelKey, outcome: TranslationOutcome
    ) -> None:
        if not isinstance(outcome, Failed):
            return
        ctx.prnt(f"{DIAGNOSTIC}{outcome.message}")
        if outcome.rate_limited:
            self._registry.deactivate(key)
            logger.warning("Rate limited; translation disabled for %s", key)
            ctx.prnt(f"{DIAGNOSTIC}{TRANSLATION_OFF_MESSAGE}")


__all__ = [
    "BASIC_FAILURE_MESSAGE",
    "CONTEXT_LOST_MESSAGE",
    "TRANSLATION_OFF_MESSAGE",
    "ControlQueue",
    "Dispatcher",
    "IncomingRequest",
    "OutgoingRequest",
    "SyntheticEventGuard",
    "spawn_thread",
]
