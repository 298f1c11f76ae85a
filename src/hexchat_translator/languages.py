"""Supported-language catalog.

The catalog is a fixed, ordered table of ``(display name, code)`` pairs
for the languages DeepL translates.  It is built once at import time and
never mutated.  Lookups accept either form, in any letter case; the first
entry in declaration order wins, so the order of ``SUPPORTED_LANGUAGES``
is also the tie-break order.
"""

from __future__ import annotations

from dataclasses import dataclass

from hexchat_translator.errors import DuplicateLanguageError, UnknownLanguageError


@dataclass(frozen=True)
class Language:
    """One catalog entry.

    Attributes:
        name: Display name shown by ``/LISTLANG`` (e.g. ``"German"``).
        code: Canonical lower-case short code (e.g. ``"de"``).
    """

    name: str
    code: str


SUPPORTED_LANGUAGES: tuple[Language, ...] = (
    Language("Arabic", "ar"),
    Language("Bulgarian", "bg"),
    Language("Chinese", "zh"),
    Language("Czech", "cs"),
    Language("Danish", "da"),
    Language("Dutch", "nl"),
    Language("English", "en"),
    Language("Estonian", "et"),
    Language("Finnish", "fi"),
    Language("French", "fr"),
    Language("German", "de"),
    Language("Greek", "el"),
    Language("Hungarian", "hu"),
    Language("Indonesian", "id"),
    Language("Italian", "it"),
    Language("Japanese", "ja"),
    Language("Korean", "ko"),
    Language("Latvian", "lv"),
    Language("Lithuanian", "lt"),
    Language("Norwegian", "nb"),
    Language("Polish", "pl"),
    Language("Portuguese", "pt"),
    Language("Romanian", "ro"),
    Language("Russian", "ru"),
    Language("Slovak", "sk"),
    Language("Slovenian", "sl"),
    Language("Spanish", "es"),
    Language("Swedish", "sv"),
    Language("Turkish", "tr"),
    Language("Ukrainian", "uk"),
    Language("Hindi", "hi"),
)

# Column widths used by /LISTLANG.
_NAME_WIDTH = 15
_CODE_WIDTH = 3
_COLUMN_GAP = " " * 8

_TABLE_HEADER = "------------------------ Supported Languages ------------------------"


def find_language(token: str) -> Language | None:
    """Look up a language by display name or code, ignoring case.

    Args:
        token: Either a display name (``"german"``) or a code (``"DE"``).

    Returns:
        The first matching catalog entry, or ``None``.
    """
    needle = token.strip().lower()
    if not needle:
        return None
    for language in SUPPORTED_LANGUAGES:
        if needle == language.name.lower() or needle == language.code:
            return language
    return None


def list_languages() -> tuple[Language, ...]:
    """Return every catalog entry in declaration order."""
    return SUPPORTED_LANGUAGES


def resolve_pair(source: str, target: str) -> tuple[Language, Language]:
    """Resolve the two ``/SETLANG`` arguments to catalog entries.

    Args:
        source: The user's own language (name or code).
        target: The channel's language (name or code).

    Returns:
        ``(source_language, target_language)``.

    Raises:
        UnknownLanguageError: Either token is not in the catalog.
        DuplicateLanguageError: Both tokens name the same language, in
            any spelling (``en`` / ``EN`` / ``English``).
    """
    source_language = find_language(source)
    if source_language is None:
        raise UnknownLanguageError(source)
    target_language = find_language(target)
    if target_language is None:
        raise UnknownLanguageError(target)
    if source_language.code == target_language.code:
        raise DuplicateLanguageError(source_language.code)
    return source_language, target_language


def format_language_table(columns: int = 3) -> list[str]:
    """Render the catalog as printable lines for ``/LISTLANG``.

    Each cell is the display name padded to 15 characters followed by the
    code padded to 3; cells are separated by eight spaces.  When the
    catalog size is not a multiple of ``columns`` the last row is short.

    Args:
        columns: Cells per row.

    Returns:
        The header line followed by one line per row.
    """
    if columns < 1:
        raise ValueError("columns must be at least 1")

    lines = [_TABLE_HEADER]
    languages = list_languages()
    for start in range(0, len(languages), columns):
        cells = [
            f"{language.name:<{_NAME_WIDTH}}{language.code:<{_CODE_WIDTH}}"
            for language in languages[start : start + columns]
        ]
        lines.append(_COLUMN_GAP.join(cells).rstrip())
    return lines
