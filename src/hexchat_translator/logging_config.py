"""Logging setup for the plugin.

The plugin shares the HexChat process with every other Python script, so
it never touches the root logger.  ``configure_logging`` installs exactly
one handler on the ``hexchat_translator`` package logger and replaces it
on the next call, which happens on every plugin (re)load.
"""

from __future__ import annotations

import logging

from hexchat_translator.config import LoggingSettings

PACKAGE_LOGGER = "hexchat_translator"

_FORMATS = {
    "simple": "%(levelname)s %(name)s: %(message)s",
    "detailed": "%(asctime)s %(levelname)-8s [%(threadName)s] %(name)s: %(message)s",
}

# Marks the handler this module installed so reloads can find it.
_HANDLER_ATTR = "_hexchat_translator_handler"


def configure_logging(settings: LoggingSettings) -> logging.Logger:
    """Attach a stream or file handler to the package logger.

    Args:
        settings: Level, format name and optional log file.

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)

    for existing in list(logger.handlers):
        if getattr(existing, _HANDLER_ATTR, False):
            logger.removeHandler(existing)
            existing.close()

    handler: logging.Handler
    if settings.file:
        handler = logging.FileHandler(settings.file, encoding="utf-8")
    else:
        handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_FORMATS.get(settings.format, _FORMATS["simple"])))
    setattr(handler, _HANDLER_ATTR, True)

    level = logging.getLevelName(settings.level.upper())
    if not isinstance(level, int):
        level = logging.WARNING
    logger.setLevel(level)
    logger.addHandler(handler)
    logger.propagate = False
    return logger
