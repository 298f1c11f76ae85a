"""Translation backend abstraction and outcome types.

A backend performs exactly one blocking translation call.  It reports
failure by raising a ``TranslationFailure`` subclass; ``attempt`` turns
that into a ``Failed`` outcome so worker threads can hand a plain value
back to the HexChat thread.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

from hexchat_translator.errors import ConfigurationError, TranslationFailure

logger = logging.getLogger(__name__)

# Source-language sentinel asking the provider to detect the language.
AUTO_DETECT = "auto"


@dataclass(frozen=True)
class Translated:
    """Successful translation."""

    text: str

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failed:
    """Failed translation.

    Attributes:
        partial_text: What to show and send instead; the original text when
                      nothing could be translated.
        message:      One-line diagnostic for the user.
        rate_limited: ``True`` when the provider signalled quota exhaustion.
    """

    partial_text: str
    message: str
    rate_limited: bool = False

    @property
    def ok(self) -> bool:
        return False

    @property
    def text(self) -> str:
        return self.partial_text

    @classmethod
    def from_failure(cls, failure: TranslationFailure) -> Failed:
        return cls(
            partial_text=failure.partial_text,
            message=str(failure),
            rate_limited=failure.rate_limited,
        )


TranslationOutcome = Translated | Failed


class TranslationBackend(ABC):
    """Base class for translation providers."""

    name: str = "backend"

    @property
    @abstractmethod
    def is_configured(self) -> bool:
        """``True`` when the backend has the credentials it needs."""

    @abstractmethod
    def translate(self, text: str, source: str, target: str) -> str:
        """Translate ``text`` from ``source`` to ``target``.

        Args:
            text:   Plain text (formatting already stripped).
            source: Catalog code of the text's language, or ``"auto"``.
            target: Catalog code to translate into.

        Returns:
            The translated text.

        Raises:
            TranslationFailure: Any failure, carrying ``text`` as the
                partial result.
        """

    def ensure_configured(self) -> None:
        """Raise ``ConfigurationError`` if the backend cannot translate at all."""
        if not self.is_configured:
            raise ConfigurationError(f"{self.name} backend has no API key configured")

    def attempt(self, text: str, source: str, target: str) -> TranslationOutcome:
        """Translate and fold any ``TranslationFailure`` into a ``Failed`` outcome."""
        try:
            return Translated(self.translate(text, source, target))
        except TranslationFailure as failure:
            logger.warning("%s translation %s->%s failed: %s", self.name, source, target, failure)
            return Failed.from_failure(failure)
