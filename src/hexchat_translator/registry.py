"""Session registry: which chat windows have translation switched on.

``SessionRegistry`` maps a ``ChannelKey`` (network, channel) to the
``LanguagePair`` chosen with ``/SETLANG``.  A key is present exactly while
translation is active for that window.

Locking strategy:
    One ``threading.Lock`` guards the whole map.  Commands are rare
    compared with network latency, so a per-key scheme would buy nothing.
    Writes only ever happen on the HexChat thread; the lock exists because
    the registry is shared by every handler and may be read while a
    worker's continuation is being applied.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChannelKey:
    """Identity of a chat window.

    Equality is exact and case-sensitive, the same way HexChat reports
    ``network`` and ``channel``.
    """

    network: str
    channel: str

    def __str__(self) -> str:
        return f"{self.channel}@{self.network}"


@dataclass(frozen=True)
class LanguagePair:
    """Canonical language codes for one translating window.

    Attributes:
        source: The user's language.  Outgoing text is translated from it,
                incoming text into it.
        target: The channel's language.
    """

    source: str
    target: str

    def reversed(self) -> LanguagePair:
        """Return the pair for the incoming direction (target → source)."""
        return LanguagePair(source=self.target, target=self.source)


class SessionRegistry:
    """Thread-safe ``ChannelKey → LanguagePair`` map.

    One instance lives for the lifetime of the loaded plugin and is passed
    to every command and event handler at registration time.
    """

    def __init__(self) -> None:
        self._sessions: dict[ChannelKey, LanguagePair] = {}
        self._lock = threading.Lock()

    def activate(self, key: ChannelKey, pair: LanguagePair) -> None:
        """Switch translation on for ``key``, replacing any previous pair."""
        with self._lock:
            self._sessions[key] = pair
        logger.info("Translation on for %s: %s -> %s", key, pair.source, pair.target)

    def deactivate(self, key: ChannelKey) -> LanguagePair | None:
        """Switch translation off for ``key``.

        Returns:
            The pair that was removed, or ``None`` if the window was not
            translating (which is not an error).
        """
        with self._lock:
            removed = self._sessions.pop(key, None)
        if removed is not None:
            logger.info("Translation off for %s", key)
        return removed

    def lookup(self, key: ChannelKey) -> LanguagePair | None:
        """Return the active pair for ``key``, or ``None``."""
        with self._lock:
            return self._sessions.get(key)

    def deactivate_network(self, network: str) -> int:
        """Switch translation off for every window on ``network``.

        Returns:
            Number of sessions removed.
        """
        with self._lock:
            doomed = [key for key in self._sessions if key.network == network]
            for key in doomed:
                del self._sessions[key]
        if doomed:
            logger.info("Translation off for %d window(s) on %s", len(doomed), network)
        return len(doomed)

    def snapshot(self) -> dict[ChannelKey, LanguagePair]:
        """Return a copy of the current map."""
        with self._lock:
            return dict(self._sessions)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._sessions
