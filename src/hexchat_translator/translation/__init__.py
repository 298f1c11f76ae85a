"""Translation providers for the plugin.

Package structure
-----------------
backend.py   TranslationBackend: abstract provider; ``Translated`` /
             ``Failed`` outcome values.
deepl.py     DeepLBackend: synchronous HTTP client for DeepL v2.

``create_backend`` builds the provider named in the ``[translation]``
config section.  Only one provider ships today; the registry below is the
single place a second one would be added.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from hexchat_translator.errors import ConfigurationError
from hexchat_translator.translation.backend import (
    AUTO_DETECT,
    Failed,
    Translated,
    TranslationBackend,
    TranslationOutcome,
)
from hexchat_translator.translation.deepl import DeepLBackend

if TYPE_CHECKING:
    from hexchat_translator.config import TranslationSettings

BACKENDS: dict[str, type[TranslationBackend]] = {
    "deepl": DeepLBackend,
}


def create_backend(settings: TranslationSettings) -> TranslationBackend:
    """Instantiate the configured backend.

    Raises:
        ConfigurationError: ``settings.backend`` names no known provider.
    """
    backend_cls = BACKENDS.get(settings.backend.lower())
    if backend_cls is None:
        known = ", ".join(sorted(BACKENDS))
        raise ConfigurationError(
            f"unknown translation backend {settings.backend!r} (expected one of: {known})"
        )
    return backend_cls(
        api_key=settings.api_key,
        api_url=settings.api_url,
        timeout_seconds=settings.timeout_seconds,
    )


__all__ = [
    "AUTO_DETECT",
    "BACKENDS",
    "DeepLBackend",
    "Failed",
    "Translated",
    "TranslationBackend",
    "TranslationOutcome",
    "create_backend",
]
