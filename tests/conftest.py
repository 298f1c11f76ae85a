"""
Shared pytest fixtures for the translator test suite.

This module provides fixtures that are automatically available to all test files:
- A recording fake of the HexChat host (windows, commands, prints, timers)
- A scriptable fake translation backend
- Registry, control queue and dispatcher instances wired to the fakes
- Environment isolation so a developer's real DEEPL_API_KEY or config file
  never leaks into a test

Workers run inline by default (``spawn=lambda job: job()``), so a test
drives a full translation with ``dispatcher.send(...)`` followed by
``control_queue.drain()``.
"""

import logging
import re
from collections.abc import Callable, Sequence
from typing import Any

import pytest

from hexchat_translator.commands import TranslatorCommands
from hexchat_translator.dispatch import ControlQueue, Dispatcher, SyntheticEventGuard
from hexchat_translator.errors import TranslationFailure
from hexchat_translator.host import Eat
from hexchat_translator.registry import SessionRegistry
from hexchat_translator.translation.backend import TranslationBackend

NETWORK = "Libera"
CHANNEL = "#python"

_FORMATTING_RE = re.compile(r"\x03(\d{1,2}(,\d{1,2})?)?|[\x02\x0f\x16\x1d\x1f]")


# ============================================================================
# FAKE HOST
# ============================================================================


class FakeContext:
    """One chat window; records what the plugin did in it."""

    def __init__(self, host: "FakeHost", network: str, channel: str) -> None:
        self._host = host
        self.network = network
        self.channel = channel
        self.commands: list[str] = []
        self.lines: list[str] = []
        self.emitted: list[tuple[str, tuple[str, ...]]] = []

    def command(self, text: str) -> None:
        self.commands.append(text)

    def prnt(self, text: str) -> None:
        self.lines.append(text)

    def emit_print(self, event_name: str, *args: str) -> None:
        self.emitted.append((event_name, args))
        # HexChat runs print hooks synchronously inside emit_print.
        self._host.fire_print(event_name, list(args), network=self.network, channel=self.channel)


class FakeHost:
    """In-memory stand-in for HexChat.

    ``network`` / ``channel`` name the window hooks fire in.  Setting
    ``info_available`` to False makes ``get_info`` return None, and
    ``strip_available`` to False makes ``strip`` fail.
    """

    def __init__(self) -> None:
        self.network: str | None = NETWORK
        self.channel: str | None = CHANNEL
        self.info_available = True
        self.strip_available = True
        self.lines: list[str] = []
        self.command_hooks: dict[str, Callable] = {}
        self.command_help: dict[str, str] = {}
        self.print_hooks: dict[str, list[Callable]] = {}
        self.timers: list[tuple[int, Callable[[], bool]]] = []
        self.unload_hooks: list[Callable[[], None]] = []
        self.unhooked: list[Any] = []
        self.contexts: dict[tuple[str, str], FakeContext] = {}
        self.open(NETWORK, CHANNEL)

    # ── Window management ─────────────────────────────────────────────────────

    def open(self, network: str, channel: str) -> FakeContext:
        ctx = self.contexts.get((network, channel))
        if ctx is None:
            ctx = FakeContext(self, network, channel)
            self.contexts[(network, channel)] = ctx
        return ctx

    def close(self, network: str, channel: str) -> None:
        self.contexts.pop((network, channel), None)

    def switch_to(self, network: str, channel: str) -> FakeContext:
        self.network = network
        self.channel = channel
        return self.open(network, channel)

    def context(self, network: str = NETWORK, channel: str = CHANNEL) -> FakeContext:
        return self.contexts[(network, channel)]

    # ── Host protocol ─────────────────────────────────────────────────────────

    def hook_command(self, name: str, callback: Callable, help_text: str) -> str:
        self.command_hooks[name] = callback
        self.command_help[name] = help_text
        return f"command:{name}"

    def hook_print(self, event_name: str, callback: Callable) -> str:
        self.print_hooks.setdefault(event_name, []).append(callback)
        return f"print:{event_name}"

    def hook_timer(self, interval_ms: int, callback: Callable[[], bool]) -> str:
        self.timers.append((interval_ms, callback))
        return f"timer:{len(self.timers)}"

    def hook_unload(self, callback: Callable[[], None]) -> str:
        self.unload_hooks.append(callback)
        return "unload"

    def unhook(self, handle: Any) -> None:
        self.unhooked.append(handle)

    def get_info(self, name: str) -> str | None:
        if not self.info_available:
            return None
        return {"network": self.network, "channel": self.channel}.get(name)

    def find_context(self, network: str, channel: str) -> FakeContext | None:
        return self.contexts.get((network, channel))

    def prnt(self, text: str) -> None:
        self.lines.append(text)

    def strip(self, text: str) -> str | None:
        if not self.strip_available:
            return None
        return _FORMATTING_RE.sub("", text)

    # ── Driving the plugin ────────────────────────────────────────────────────

    def run_command(self, line: str) -> Eat:
        """Invoke a hooked command the way HexChat splits ``/NAME args``."""
        word = line.split()
        word_eol = [line.split(None, i)[-1] for i in range(len(word))]
        return self.command_hooks[word[0].upper()](word, word_eol)

    def fire_print(
        self,
        event_name: str,
        word: Sequence[str],
        *,
        network: str | None = None,
        channel: str | None = None,
    ) -> list[Eat]:
        """Run every print hook for ``event_name`` in the given window."""
        previous = (self.network, self.channel)
        if network is not None and channel is not None:
            self.network, self.channel = network, channel
        try:
            return [hook(list(word)) for hook in self.print_hooks.get(event_name, [])]
        finally:
            self.network, self.channel = previous

    def tick(self) -> None:
        """Fire every timer once."""
        for _, callback in list(self.timers):
            callback()


# ============================================================================
# FAKE BACKEND
# ============================================================================


class FakeBackend(TranslationBackend):
    """Backend returning canned translations and recording every call.

    ``translations`` maps input text to output text; unknown input comes
    back upper-cased.  Set ``failure`` to a ``TranslationFailure`` class to
    make every call fail with it.
    """

    name = "Fake"

    def __init__(self, translations: dict[str, str] | None = None) -> None:
        self.translations = dict(translations or {})
        self.calls: list[tuple[str, str, str]] = []
        self.failure: type[TranslationFailure] | None = None
        self.configured = True

    @property
    def is_configured(self) -> bool:
        return self.configured

    def translate(self, text: str, source: str, target: str) -> str:
        self.calls.append((text, source, target))
        if self.failure is not None:
            raise self.failure("backend unavailable", partial_text=text)
        return self.translations.get(text, text.upper())


# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Keep real credentials and config files out of every test."""
    for name in (
        "DEEPL_API_KEY",
        "TRANSLATOR_BACKEND",
        "TRANSLATOR_API_URL",
        "TRANSLATOR_TIMEOUT_SECONDS",
        "TRANSLATOR_POLL_INTERVAL_MS",
        "TRANSLATOR_DEACTIVATE_ON_PART",
        "TRANSLATOR_LOG_LEVEL",
        "TRANSLATOR_LOG_FILE",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("TRANSLATOR_CONFIG", str(tmp_path / "no-such-translator.ini"))


@pytest.fixture(autouse=True)
def restore_package_logger():
    """Undo configure_logging so later tests see a pristine logger."""
    logger = logging.getLogger("hexchat_translator")
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield
    for handler in list(logger.handlers):
        if handler not in handlers:
            logger.removeHandler(handler)
            handler.close()
    logger.setLevel(level)
    logger.propagate = propagate


@pytest.fixture
def host() -> FakeHost:
    return FakeHost()


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend({"Hello there": "Hallo dort", "Guten Tag": "Good day"})


@pytest.fixture
def registry() -> SessionRegistry:
    return SessionRegistry()


@pytest.fixture
def control_queue() -> ControlQueue:
    return ControlQueue()


@pytest.fixture
def dispatcher(host, registry, backend, control_queue) -> Dispatcher:
    """Dispatcher whose workers run inline on the calling thread."""
    return Dispatcher(
        host=host,
        registry=registry,
        backend=backend,
        control_queue=control_queue,
        guard=SyntheticEventGuard(),
        spawn=lambda job: job(),
    )


@pytest.fixture
def commands(host, registry, dispatcher) -> TranslatorCommands:
    """Command surface registered into the fake host."""
    surface = TranslatorCommands(host=host, registry=registry, dispatcher=dispatcher)
    surface.register()
    return surface
