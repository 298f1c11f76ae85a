"""HexChat Language Translator.

A HexChat plugin that translates a channel's conversation in both
directions.  Messages sent with ``/LSAY`` or ``/LME`` are translated into
the channel's language before they go out; messages arriving in the
channel are translated back into the user's language for display.  The
user sees both texts, everyone else sees only what was sent.

Version Management
------------------
``__version__`` is read from the installed package metadata at import
time.  The single source of truth is the ``version`` field in
``pyproject.toml``.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

try:
    __version__: str = version("hexchat-translator")
except PackageNotFoundError:
    __version__ = "0.3.0"
