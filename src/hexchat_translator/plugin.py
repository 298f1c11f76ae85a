"""Plugin lifecycle: wire everything together inside HexChat.

Load order
----------
1. ``load_config()``       INI file + environment.
2. ``configure_logging``   package logger only.
3. ``create_backend``      translation provider.
4. ``SessionRegistry``, ``ControlQueue``, ``SyntheticEventGuard``,
   ``Dispatcher``          the shared core, one of each per load.
5. ``TranslatorCommands``  command and text-event hooks.
6. A HexChat timer drains the ``ControlQueue`` every
   ``dispatch.poll_interval_ms``; this is where worker results reach the
   UI.
7. An unload hook removes the timer and prints the farewell line.

Session state is not persisted; a reload starts with every window off.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import ModuleType
from typing import Any

from hexchat_translator import __version__
from hexchat_translator.commands import TranslatorCommands
from hexchat_translator.config import PluginConfig, load_config
from hexchat_translator.dispatch import (
    ControlQueue,
    Dispatcher,
    Spawner,
    SyntheticEventGuard,
    spawn_thread,
)
from hexchat_translator.hexchat_host import HexChatHost
from hexchat_translator.host import DIAGNOSTIC, Host
from hexchat_translator.logging_config import configure_logging
from hexchat_translator.registry import SessionRegistry
from hexchat_translator.translation import create_backend

logger = logging.getLogger(__name__)

PLUGIN_NAME = "Language Translator"
PLUGIN_VERSION = __version__
PLUGIN_DESCRIPTION = "Instantly translated conversation in over 30 languages."


@dataclass
class TranslatorPlugin:
    """Everything one loaded instance of the plugin owns."""

    host: Host
    config: PluginConfig
    registry: SessionRegistry
    control_queue: ControlQueue
    dispatcher: Dispatcher
    commands: TranslatorCommands
    hooks: list = field(default_factory=list)
    timer: Any = None

    def start(self) -> None:
        """Register hooks and the drain timer."""
        self.hooks = self.commands.register()
        self.timer = self.host.hook_timer(self.config.dispatch.poll_interval_ms, self._on_timer)
        self.host.hook_unload(self.stop)
        if not self.config.has_credentials:
            self.host.prnt(
                f"{DIAGNOSTIC}{PLUGIN_NAME}: no API key configured. "
                "Set DEEPL_API_KEY or add api_key to the [translation] config section."
            )
        self.host.prnt(f"{PLUGIN_NAME} loaded")
        logger.info("%s %s loaded", PLUGIN_NAME, PLUGIN_VERSION)

    def stop(self) -> None:
        """Remove the drain timer and say goodbye.

        HexChat unhooks command and print hooks itself when a script
        unloads; the timer is removed here so no continuation runs after.
        """
        if self.timer is not None:
            self.host.unhook(self.timer)
            self.timer = None
        pending = len(self.control_queue)
        if pending:
            logger.info("Discarding %d undelivered translation(s) on unload", pending)
        self.host.prnt(f"{PLUGIN_NAME} unloaded")

    def _on_timer(self) -> bool:
        self.control_queue.drain()
        return True


def build_plugin(
    host: Host,
    cfg: PluginConfig | None = None,
    *,
    spawn: Spawner = spawn_thread,
) -> TranslatorPlugin:
    """Assemble a plugin instance without registering anything.

    Args:
        host:  Client API.
        cfg:   Configuration; loaded from disk and environment when omitted.
        spawn: Worker starter passed to the dispatcher.
    """
    cfg = cfg or load_config()
    configure_logging(cfg.logging)

    registry = SessionRegistry()
    control_queue = ControlQueue()
    dispatcher = Dispatcher(
        host=host,
        registry=registry,
        backend=create_backend(cfg.translation),
        control_queue=control_queue,
        guard=SyntheticEventGuard(),
        spawn=spawn,
    )
    commands = TranslatorCommands(
        host=host,
        registry=registry,
        dispatcher=dispatcher,
        deactivate_on_part=cfg.dispatch.deactivate_on_part,
    )
    return TranslatorPlugin(
        host=host,
        config=cfg,
        registry=registry,
        control_queue=control_queue,
        dispatcher=dispatcher,
        commands=commands,
    )


def load(hexchat: ModuleType | Any, cfg: PluginConfig | None = None) -> TranslatorPlugin:
    """Entry point called by the addon script with HexChat's ``hexchat`` module."""
    plugin = build_plugin(HexChatHost(hexchat), cfg)
    plugin.start()
    return plugin
