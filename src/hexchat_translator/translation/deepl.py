"""DeepL HTTP backend.

``DeepLBackend`` is a thin, synchronous wrapper around the DeepL v2
``/translate`` endpoint and the only place in the plugin that makes a
network call.  It always runs on a worker thread, so blocking for up to
``timeout_seconds`` never stalls HexChat.

Request shape::

    POST /v2/translate
    Authorization: DeepL-Auth-Key <key>
    {"text": ["<message>"], "target_lang": "DE", "source_lang": "EN"}

``source_lang`` is omitted when the source is ``"auto"``.  Only the first
entry of the response's ``translations`` list is used; messages are never
batched.

Failure classes
---------------
- no API key                     → ``AuthFailure`` (no request made)
- HTTP 403 / 429 / 456           → ``RateLimited``
- timeout, connection error,
  other HTTP error, bad JSON,
  empty ``translations``         → ``ProtocolFailure``

Every failure carries the input text as its partial result.
"""

from __future__ import annotations

import logging

import requests

from hexchat_translator.errors import AuthFailure, ProtocolFailure, RateLimited
from hexchat_translator.translation.backend import AUTO_DETECT, TranslationBackend

logger = logging.getLogger(__name__)

DEEPL_FREE_API_URL = "https://api-free.deepl.com/v2/translate"
DEEPL_PRO_API_URL = "https://api.deepl.com/v2/translate"

DEFAULT_TIMEOUT_SECONDS = 5.0

# 403: bad or exhausted key, 429: too many requests, 456: quota exceeded.
RATE_LIMIT_STATUSES = frozenset({403, 429, 456})

# Free-tier keys carry this suffix and must use the free endpoint.
_FREE_KEY_SUFFIX = ":fx"

_DEEPL_CODES = {
    "zh": "ZH",
    "en": "EN",
    "de": "DE",
    "fr": "FR",
    "it": "IT",
    "ja": "JA",
    "es": "ES",
    "nl": "NL",
    "pl": "PL",
    "pt": "PT",
    "ru": "RU",
    "bg": "BG",
    "cs": "CS",
    "da": "DA",
    "el": "EL",
    "et": "ET",
    "fi": "FI",
    "hu": "HU",
    "id": "ID",
    "lv": "LV",
    "lt": "LT",
    "ro": "RO",
    "sk": "SK",
    "sl": "SL",
    "sv": "SV",
    "tr": "TR",
    "uk": "UK",
    "ar": "AR",
    "hi": "HI",
    "ko": "KO",
    "nb": "NB",
    "no": "NB",
}


def to_deepl_code(code: str) -> str:
    """Map a catalog code to DeepL's spelling; unknown codes pass through."""
    return _DEEPL_CODES.get(code.lower(), code)


def default_endpoint(api_key: str | None) -> str:
    """Pick the free or pro endpoint from the shape of the key."""
    if api_key and api_key.endswith(_FREE_KEY_SUFFIX):
        return DEEPL_FREE_API_URL
    return DEEPL_PRO_API_URL


class DeepLBackend(TranslationBackend):
    """Synchronous DeepL client.

    Attributes:
        _api_key:     DeepL authentication key, or ``None``.
        _api_url:     Full ``/v2/translate`` URL.
        _timeout:     HTTP timeout in seconds.
    """

    name = "DeepL"

    def __init__(
        self,
        *,
        api_key: str | None,
        api_url: str | None = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self._api_key = api_key or None
        self._api_url = api_url or default_endpoint(self._api_key)
        self._timeout = timeout_seconds

    @property
    def api_url(self) -> str:
        return self._api_url

    @property
    def is_configured(self) -> bool:
        return self._api_key is not None

    def translate(self, text: str, source: str, target: str) -> str:
        if self._api_key is None:
            raise AuthFailure(
                "DeepL API key not found. Set DEEPL_API_KEY environment variable.",
                partial_text=text,
            )

        try:
            response = requests.post(
                self._api_url,
                json=self._build_payload(text, source, target),
                headers={"Authorization": f"DeepL-Auth-Key {self._api_key}"},
                timeout=self._timeout,
            )
            response.raise_for_status()
        except requests.exceptions.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            if status in RATE_LIMIT_STATUSES:
                logger.warning("DeepLBackend: rate limited (HTTP %s)", status)
                raise RateLimited(
                    f"DeepL API request failed: {exc}", partial_text=text, cause=exc
                ) from exc
            raise ProtocolFailure(
                f"DeepL API request failed: {exc}", partial_text=text, cause=exc
            ) from exc
        except requests.exceptions.Timeout as exc:
            logger.warning(
                "DeepLBackend: request timed out after %.1fs (endpoint=%s)",
                self._timeout,
                self._api_url,
            )
            raise ProtocolFailure(
                f"DeepL API request timed out after {self._timeout:g}s",
                partial_text=text,
                cause=exc,
            ) from exc
        except requests.exceptions.RequestException as exc:
            logger.error("DeepLBackend: request failed: %s", exc)
            raise ProtocolFailure(
                f"DeepL API request failed: {exc}", partial_text=text, cause=exc
            ) from exc

        return self._parse_response(response, text)

    # ── Internal helpers ──────────────────────────────────────────────────────

    def _build_payload(self, text: str, source: str, target: str) -> dict:
        payload: dict = {
            "text": [text],
            "target_lang": to_deepl_code(target),
        }
        if source.lower() != AUTO_DETECT:
            payload["source_lang"] = to_deepl_code(source)
        return payload

    def _parse_response(self, response: requests.Response, text: str) -> str:
        try:
            data = response.json()
            translations = data["translations"]
        except (ValueError, KeyError, TypeError) as exc:
            raise ProtocolFailure(
                f"Failed to parse DeepL response: {exc}", partial_text=text, cause=exc
            ) from exc

        if not translations:
            raise ProtocolFailure("No translation returned from DeepL API", partial_text=text)

        try:
            return str(translations[0]["text"])
        except (KeyError, TypeError) as exc:
            raise ProtocolFailure(
                f"Failed to parse DeepL response: {exc}", partial_text=text, cause=exc
            ) from exc
