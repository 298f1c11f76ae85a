"""
Command-line interface for the HexChat Language Translator.

Lets the translation side of the plugin be checked without HexChat:

- languages: Print the supported-language table
- translate: Translate one message with the configured backend
- config:    Show the configuration in effect (API key masked)

Usage:
    hexchat-translator languages
    hexchat-translator translate --source en --target de Hello there
    hexchat-translator translate --source auto --target en Guten Tag
    hexchat-translator config

Environment Variables:
    DEEPL_API_KEY:     DeepL authentication key
    TRANSLATOR_CONFIG: Path to an INI file overriding the default location
"""

import argparse
import sys

from hexchat_translator.config import load_config, print_config_summary
from hexchat_translator.errors import ConfigurationError, TranslatorError
from hexchat_translator.languages import find_language, format_language_table
from hexchat_translator.translation import AUTO_DETECT, Failed, create_backend


def _positive_int(value: str) -> int:
    """argparse type for a count of at least 1."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def cmd_languages(args: argparse.Namespace) -> int:
    """
    Print the supported-language table.

    Returns:
        0 always
    """
    for line in format_language_table(columns=args.columns):
        print(line)
    return 0


def _resolve_code(token: str, *, allow_auto: bool) -> str:
    """Turn a language name or code into a catalog code."""
    if allow_auto and token.lower() == AUTO_DETECT:
        return AUTO_DETECT
    language = find_language(token)
    if language is None:
        raise TranslatorError(
            f"unsupported language: {token!r} (see 'hexchat-translator languages')"
        )
    return language.code


def cmd_translate(args: argparse.Namespace) -> int:
    """
    Translate one message and print the result.

    On failure the untranslated text is still printed to stdout, followed
    by the diagnostic on stderr, mirroring what the plugin shows in a
    channel.

    Returns:
        0 on success, 1 on any failure
    """
    text = " ".join(args.text)
    if not text.strip():
        print("Error: nothing to translate.", file=sys.stderr)
        return 1

    try:
        source = _resolve_code(args.source, allow_auto=True)
        target = _resolve_code(args.target, allow_auto=False)
        if source == target:
            raise TranslatorError("source and target language must differ")
        cfg = load_config(args.config) if args.config else load_config()
        backend = create_backend(cfg.translation)
        backend.ensure_configured()
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1
    except TranslatorError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    outcome = backend.attempt(text, source, target)
    print(outcome.text)
    if isinstance(outcome, Failed):
        print(outcome.message, file=sys.stderr)
        return 1
    return 0


def cmd_config(args: argparse.Namespace) -> int:
    """
    Print the configuration summary.

    Returns:
        0 always
    """
    cfg = load_config(args.config) if args.config else load_config()
    print_config_summary(cfg, args.config)
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for all subcommands."""
    parser = argparse.ArgumentParser(
        prog="hexchat-translator",
        description="HexChat Language Translator - live chat translation via DeepL",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        help="INI file to read instead of ~/.config/hexchat/translator.ini",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # languages command
    languages_parser = subparsers.add_parser(
        "languages",
        help="List supported languages",
        description="Print every supported language with the code /SETLANG accepts.",
    )
    languages_parser.add_argument(
        "--columns",
        type=_positive_int,
        default=3,
        help="Languages per row (default: 3)",
    )
    languages_parser.set_defaults(func=cmd_languages)

    # translate command
    translate_parser = subparsers.add_parser(
        "translate",
        help="Translate one message",
        description=(
            "Translate a message with the configured backend. "
            "Use --source auto to let the provider detect the language."
        ),
    )
    translate_parser.add_argument(
        "--source", "-s", required=True, help="Source language or 'auto'"
    )
    translate_parser.add_argument("--target", "-t", required=True, help="Target language")
    translate_parser.add_argument("text", nargs="+", help="Text to translate")
    translate_parser.set_defaults(func=cmd_translate)

    # config command
    config_parser = subparsers.add_parser(
        "config",
        help="Show configuration",
        description="Print the configuration in effect. The API key is masked.",
    )
    config_parser.set_defaults(func=cmd_config)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
