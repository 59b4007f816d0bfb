"""Command-line interface for microlex."""

from __future__ import annotations

import argparse
import logging
import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from microlex.errors import RefinementError, RuleError, UnknownLanguageError

FORMATS = ("json", "text")


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    input_file: Path
    output_file: Path | None
    language: str
    output_format: str
    indent: int | None
    validate: bool
    debug: bool


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="microlex",
        description="Tokenize source code into typed tokens for highlighting",
    )
    p.add_argument("input", nargs="?", help="Input source file")
    p.add_argument("-o", "--output", help="Output file (default: stdout)")
    p.add_argument(
        "-l",
        "--language",
        help="Language name or alias (default: from config, then file extension)",
    )
    p.add_argument(
        "-f",
        "--format",
        choices=FORMATS,
        default=None,
        help="Output format (default: json)",
    )
    p.add_argument("--indent", type=int, default=None, metavar="N", help="JSON indentation")
    p.add_argument(
        "--config",
        metavar="FILE",
        help="Config file (default: auto-discover microlex.toml)",
    )
    p.add_argument(
        "--validate",
        action="store_true",
        help="Check every refinement reproduces its match",
    )
    p.add_argument(
        "--list-languages",
        action="store_true",
        help="List available languages and exit",
    )
    p.add_argument("--debug", action="store_true", help="Dump tokens to stderr")
    return p


def load_config(config_path: Path | None, input_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else input_dir / "microlex.toml"

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        return tomllib.load(f)


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: config file < CLI flags. Raises ValueError on bad config
    values and UnknownLanguageError on an unknown language.
    """
    from microlex.languages import get_language, language_for_path

    input_file = Path(args.input)
    input_dir = input_file.parent
    if not input_dir.parts:
        input_dir = Path(".")

    config_path = Path(args.config) if args.config else None
    config = load_config(config_path, input_dir)

    cfg_tokenize = config.get("tokenize")
    if not isinstance(cfg_tokenize, dict):
        cfg_tokenize = {}
    cfg_output = config.get("output")
    if not isinstance(cfg_output, dict):
        cfg_output = {}
    cfg_extensions = config.get("extensions")
    if not isinstance(cfg_extensions, dict):
        cfg_extensions = {}

    # Language: CLI > config > file extension > generic
    language = args.language
    if language is None:
        cfg_language = cfg_tokenize.get("language")
        if isinstance(cfg_language, str):
            language = cfg_language
    if language is None:
        extra = {str(k): str(v) for k, v in cfg_extensions.items()}
        language = language_for_path(input_file, extra)
    if language is None:
        language = "generic"
    language = get_language(language).name

    # Output format: config < CLI
    output_format = "json"
    cfg_format = cfg_output.get("format")
    if cfg_format is not None:
        if cfg_format not in FORMATS:
            raise ValueError(f"invalid output format in config: {cfg_format!r}")
        output_format = cfg_format
    if args.format is not None:
        output_format = args.format

    indent: int | None = None
    cfg_indent = cfg_output.get("indent")
    if isinstance(cfg_indent, int) and not isinstance(cfg_indent, bool):
        indent = cfg_indent
    if args.indent is not None:
        indent = args.indent

    validate = bool(cfg_tokenize.get("validate", False)) or args.validate

    output_file = Path(args.output) if args.output else None

    return CliOptions(
        input_file=input_file,
        output_file=output_file,
        language=language,
        output_format=output_format,
        indent=indent,
        validate=validate,
        debug=args.debug,
    )


def tokenize_file(options: CliOptions) -> str:
    """Read, tokenize, and serialize a source file."""
    from microlex.debug import dump_tokens
    from microlex.engine import tokenize
    from microlex.export import to_json, to_text
    from microlex.languages import get_language

    source = options.input_file.read_text(encoding="utf-8")
    tokens = tokenize(source, get_language(options.language), validate=options.validate)

    if options.debug:
        dump_tokens(tokens, file=sys.stderr)

    if options.output_format == "text":
        return to_text(tokens)
    return to_json(tokens, indent=options.indent) + "\n"


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.debug:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr)

    if args.list_languages:
        from microlex.languages import available_languages, get_language

        for name in available_languages():
            aliases = ", ".join(get_language(name).aliases)
            sys.stdout.write(f"{name}\t{aliases}\n" if aliases else f"{name}\n")
        return 0

    if args.input is None:
        print("error: the following arguments are required: input", file=sys.stderr)
        return 2

    try:
        options = resolve_options(args)
    except UnknownLanguageError as exc:
        print(str(exc), file=sys.stderr)
        return 2
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    try:
        output = tokenize_file(options)
    except OSError as exc:
        print(f"error: cannot read {options.input_file}: {exc.strerror}", file=sys.stderr)
        return 2
    except UnicodeDecodeError as exc:
        print(f"error: cannot decode {options.input_file}: {exc.reason}", file=sys.stderr)
        return 2
    except (RuleError, RefinementError) as exc:
        print(str(exc), file=sys.stderr)
        return 1

    if options.output_file:
        options.output_file.write_text(output, encoding="utf-8")
    else:
        sys.stdout.write(output)

    return 0
