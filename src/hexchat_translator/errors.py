"""Typed exceptions for the translator plugin.

Two families live here:

- Local failures raised on the HexChat thread before any background work
  starts (missing credential, unresolvable context, bad command
  arguments).  Command and event handlers catch these and print a single
  diagnostic line.
- ``TranslationFailure`` and its subclasses, raised by a translation
  backend inside a worker thread.  They always carry the text that should
  be shown in place of a translation (``partial_text``) so that a failed
  translation never drops the user's message.
"""

from __future__ import annotations


class TranslatorError(RuntimeError):
    """Base exception for the plugin."""


class ConfigurationError(TranslatorError):
    """Plugin configuration is unusable (no API key, unknown backend)."""


class ContextResolutionError(TranslatorError):
    """The network/channel of a chat window could not be determined."""


class FormattingStripError(TranslatorError):
    """HexChat could not strip colour and attribute codes from a message."""


class UsageError(TranslatorError):
    """A command was invoked with the wrong number of arguments.

    Args:
        help_text: The command's help string, printed after ``USAGE:``.
    """

    def __init__(self, help_text: str) -> None:
        super().__init__(f"USAGE: {help_text}")
        self.help_text = help_text


class UnknownLanguageError(TranslatorError):
    """A language token matched neither a catalog name nor a code."""

    def __init__(self, token: str) -> None:
        super().__init__(f"unsupported language: {token!r}")
        self.token = token


class DuplicateLanguageError(TranslatorError):
    """Source and target language resolve to the same catalog entry."""

    def __init__(self, code: str) -> None:
        super().__init__(f"source and target language are both {code!r}")
        self.code = code


class TranslationFailure(TranslatorError):
    """A translation attempt failed.

    Args:
        message:      Human-readable description of what went wrong.
        partial_text: Text to display and send instead of a translation.
                      Backends pass the original input here.
        cause:        Optional underlying exception.
    """

    rate_limited: bool = False

    def __init__(
        self,
        message: str,
        *,
        partial_text: str,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.partial_text = partial_text
        self.cause = cause

    def __str__(self) -> str:
        return f"Translation Error: {self.message}"


class AuthFailure(TranslationFailure):
    """No credential is configured; no request was made."""


class RateLimited(TranslationFailure):
    """The provider refused the request for quota or authorisation reasons.

    Callers stop translating for the affected channel when they see this.
    """

    rate_limited = True


class ProtocolFailure(TranslationFailure):
    """Transport error, timeout, or an unexpected response body."""
