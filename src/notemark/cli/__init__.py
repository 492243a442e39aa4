"""Command-line interface for the notemark converter.

The converter itself is pure; this module is the only place that reads
files, writes output and configures logging.

Examples
--------
Parse markup into a JSON tree::

    $ notemark parse notes.md --indent 2

Serialize a JSON tree produced by the editor::

    $ notemark serialize tree.json -o notes.md

Normalize markup by parsing and re-serializing it::

    $ cat notes.md | notemark normalize

Use a specific configuration file::

    $ notemark normalize notes.md --config .notemark.toml

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.
# src/notemark/cli/__init__.py
import argparse
import logging
import os
import sys
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Optional

from notemark.api import from_ast, to_ast
from notemark.ast.serialization import ast_to_json, json_to_ast
from notemark.cli.config import CONFIG_ENV_VAR, load_config_with_priority, options_from_config
from notemark.constants import EXIT_ERROR, EXIT_SUCCESS, EXIT_USAGE
from notemark.exceptions import NotemarkError
from notemark.logging_utils import configure_logging
from notemark.options.markdown import MarkdownParserOptions, MarkdownSerializerOptions

logger = logging.getLogger(__name__)


def _get_version() -> str:
    """Installed version of notemark, or "unknown" when running from a source tree."""
    try:
        return version("notemark")
    except PackageNotFoundError:
        return "unknown"


def _add_global_arguments(parser: argparse.ArgumentParser, with_defaults: bool = True) -> None:
    """Add the options shared by every subcommand.

    Parameters
    ----------
    parser : argparse.ArgumentParser
        Parser to extend
    with_defaults : bool, default True
        When False, unset options leave the namespace untouched so that values
        given before the subcommand are not overwritten by subcommand defaults

    """

    def default(value: object) -> object:
        return value if with_defaults else argparse.SUPPRESS

    parser.add_argument(
        "-o",
        "--output",
        metavar="PATH",
        default=default(None),
        help="Write the result to PATH instead of stdout",
    )
    parser.add_argument(
        "--config",
        metavar="PATH",
        default=default(None),
        help="Path to configuration file (TOML, YAML or JSON). If not specified, searches for "
        ".notemark.toml, .notemark.yaml, .notemark.json or [tool.notemark] in pyproject.toml "
        "from the current directory upward.",
    )
    parser.add_argument(
        "--no-config",
        action="store_true",
        dest="no_config",
        default=default(False),
        help=f"Disable loading of configuration files, including {CONFIG_ENV_VAR} and --config.",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        default=default(False),
        help="Enable verbose output with detailed logging (equivalent to --log-level DEBUG)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=default("WARNING"),
        help="Set logging level (default: WARNING)",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        metavar="PATH",
        default=default(None),
        help="Write log messages to specified file in addition to console output",
    )
    parser.add_argument(
        "--trace",
        action="store_true",
        default=default(False),
        help="Enable trace mode with timestamps and logger names in log output",
    )


def create_parser() -> argparse.ArgumentParser:
    """Build the argument parser with one subcommand per conversion direction.

    Global options are accepted both before and after the subcommand.

    Returns
    -------
    argparse.ArgumentParser
        Configured parser

    """
    parser = argparse.ArgumentParser(
        prog="notemark",
        description="Convert between note markup and the editor's JSON document tree",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  notemark parse notes.md --indent 2
  notemark serialize tree.json -o notes.md
  cat notes.md | notemark normalize
""",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {_get_version()}")
    _add_global_arguments(parser)

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    parse_cmd = subparsers.add_parser("parse", help="Parse markup into a JSON document tree")
    parse_cmd.add_argument("input", nargs="?", metavar="FILE", help="Markup file (default: stdin)")
    parse_cmd.add_argument(
        "--indent",
        type=int,
        metavar="N",
        default=None,
        help="Indent the JSON output by N spaces (default: compact)",
    )
    _add_global_arguments(parse_cmd, with_defaults=False)

    serialize_cmd = subparsers.add_parser("serialize", help="Serialize a JSON document tree to markup")
    serialize_cmd.add_argument("input", nargs="?", metavar="FILE", help="JSON tree file (default: stdin)")
    _add_global_arguments(serialize_cmd, with_defaults=False)

    normalize_cmd = subparsers.add_parser("normalize", help="Parse and re-serialize markup into its canonical form")
    normalize_cmd.add_argument("input", nargs="?", metavar="FILE", help="Markup file (default: stdin)")
    _add_global_arguments(normalize_cmd, with_defaults=False)

    return parser


def _effective_log_level(parsed_args: argparse.Namespace) -> str:
    """Level name for this run: --trace, then --verbose, then --log-level."""
    if parsed_args.trace:
        return "DEBUG"
    # --verbose only applies when --log-level was left at its default
    if parsed_args.verbose and parsed_args.log_level == "WARNING":
        return "DEBUG"
    return parsed_args.log_level


def _read_input(path: Optional[str]) -> bytes:
    """Read raw input bytes from ``path``, or from stdin when ``path`` is None or ``-``."""
    if path is None or path == "-":
        logger.debug("Reading input from stdin")
        return sys.stdin.buffer.read()
    logger.debug("Reading input from %s", path)
    return Path(path).read_bytes()


def _write_output(content: str, path: Optional[str]) -> None:
    """Write ``content`` to ``path``, or to stdout when ``path`` is None or ``-``."""
    if path is None or path == "-":
        sys.stdout.write(content)
        sys.stdout.flush()
        return
    Path(path).write_text(content, encoding="utf-8")
    logger.info("Wrote %d characters to %s", len(content), path)


def _load_options(
    parsed_args: argparse.Namespace,
) -> tuple[MarkdownParserOptions, MarkdownSerializerOptions]:
    if parsed_args.no_config:
        return MarkdownParserOptions(), MarkdownSerializerOptions()
    config = load_config_with_priority(explicit_path=parsed_args.config, env_var_path=os.environ.get(CONFIG_ENV_VAR))
    if config:
        logger.debug("Loaded configuration sections: %s", ", ".join(sorted(config)))
    return options_from_config(config)


def run_command(
    command: str,
    data: bytes,
    parser_options: MarkdownParserOptions,
    serializer_options: MarkdownSerializerOptions,
    indent: Optional[int] = None,
) -> str:
    """Run one conversion command over raw input.

    Parameters
    ----------
    command : {"parse", "serialize", "normalize"}
        Conversion to run
    data : bytes
        Raw input; markup for ``parse`` and ``normalize``, JSON for ``serialize``
    parser_options : MarkdownParserOptions
        Parser options
    serializer_options : MarkdownSerializerOptions
        Serializer options
    indent : int, optional
        JSON indentation for ``parse``

    Returns
    -------
    str
        Command output

    Raises
    ------
    NotemarkError
        If the input is not valid UTF-8 or not a valid document tree

    """
    if command == "parse":
        tree = to_ast(data, parser_options=parser_options)
        return ast_to_json(tree, indent=indent) + "\n"

    if command == "serialize":
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise NotemarkError(f"Input is not valid UTF-8: {e}", original_error=e) from e
        return from_ast(json_to_ast(text), serializer_options=serializer_options)

    if command == "normalize":
        tree = to_ast(data, parser_options=parser_options)
        return from_ast(tree, serializer_options=serializer_options)

    raise ValueError(f"Unknown command: {command}")


def main(args: list[str] | None = None) -> int:
    """Execute the notemark command line.

    Parameters
    ----------
    args : list of str, optional
        Command-line arguments; defaults to ``sys.argv[1:]``

    Returns
    -------
    int
        Exit code: 0 on success, 1 on input or validation errors, 2 on usage errors

    """
    parser = create_parser()
    try:
        parsed_args = parser.parse_args(args)
    except SystemExit as e:
        # argparse exits with 0 for --help/--version and 2 for usage errors
        return e.code if isinstance(e.code, int) else EXIT_USAGE

    configure_logging(
        _effective_log_level(parsed_args), log_file=parsed_args.log_file, trace_mode=parsed_args.trace
    )

    try:
        parser_options, serializer_options = _load_options(parsed_args)
    except argparse.ArgumentTypeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR

    input_path = getattr(parsed_args, "input", None)
    try:
        data = _read_input(input_path)
        output = run_command(
            parsed_args.command,
            data,
            parser_options,
            serializer_options,
            indent=getattr(parsed_args, "indent", None),
        )
        _write_output(output, parsed_args.output)
    except NotemarkError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR

    return EXIT_SUCCESS


if __name__ == "__main__":
    sys.exit(main())
