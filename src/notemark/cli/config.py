#  Copyright (c) 2025 Tom Villani, Ph.D.

"""Configuration file discovery and loading for the notemark CLI.

A configuration file holds up to two tables, ``parser`` and ``serializer``,
whose keys are field names of ``MarkdownParserOptions`` and
``MarkdownSerializerOptions``::

    # .notemark.toml
    [parser]
    task_markers_case_sensitive = true

    [serializer]
    bullet_symbol = "*"

The same tables may live under ``[tool.notemark]`` in ``pyproject.toml``.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Callable, Dict, NamedTuple, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[import-not-found,unused-ignore]

import yaml

from notemark.options.base import CloneFrozenMixin
from notemark.options.markdown import MarkdownParserOptions, MarkdownSerializerOptions

CONFIG_FILENAMES = [".notemark.toml", ".notemark.yaml", ".notemark.yml", ".notemark.json"]

CONFIG_ENV_VAR = "NOTEMARK_CONFIG"

PYPROJECT_FILENAME = "pyproject.toml"

CONFIG_SECTIONS: Dict[str, type[CloneFrozenMixin]] = {
    "parser": MarkdownParserOptions,
    "serializer": MarkdownSerializerOptions,
}


class _ConfigFormat(NamedTuple):
    label: str
    binary: bool
    decode: Callable[[Any], Any]
    decode_error: type


_TOML = _ConfigFormat("TOML", True, tomllib.load, tomllib.TOMLDecodeError)
_YAML = _ConfigFormat("YAML", False, yaml.safe_load, yaml.YAMLError)
_JSON = _ConfigFormat("JSON", False, json.load, json.JSONDecodeError)

_FORMATS_BY_SUFFIX = {".toml": _TOML, ".yaml": _YAML, ".yml": _YAML, ".json": _JSON}


def _read_mapping(path: Path, fmt: _ConfigFormat) -> Dict[str, Any]:
    """Decode ``path`` and check that the top level is a mapping.

    An empty YAML document decodes to None and is treated as an empty mapping.
    """
    try:
        if fmt.binary:
            with open(path, "rb") as stream:
                data = fmt.decode(stream)
        else:
            with open(path, "r", encoding="utf-8") as stream:
                data = fmt.decode(stream)
    except fmt.decode_error as e:
        raise argparse.ArgumentTypeError(f"Invalid {fmt.label} in config file {path}: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise argparse.ArgumentTypeError(f"Error reading {fmt.label} config {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise argparse.ArgumentTypeError(
            f"{fmt.label} config file {path} must contain a mapping at the top level, got {type(data).__name__}"
        )
    return data


def _pyproject_section(pyproject_path: Path) -> Dict[str, Any]:
    """Return the ``[tool.notemark]`` table of a pyproject.toml, or an empty dict."""
    section = _read_mapping(pyproject_path, _TOML).get("tool", {}).get("notemark")
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise argparse.ArgumentTypeError(
            f"[tool.notemark] section in {pyproject_path} must be a table, got {type(section).__name__}"
        )
    return section


def _has_notemark_section(pyproject_path: Path) -> bool:
    # pyproject files we cannot read belong to another project
    try:
        return bool(_pyproject_section(pyproject_path))
    except argparse.ArgumentTypeError:
        return False


def find_config_in_parents(start_dir: Optional[Path] = None) -> Optional[Path]:
    """Search ``start_dir`` and its ancestors for a configuration file.

    In each directory the dedicated ``.notemark.*`` files are checked in
    ``CONFIG_FILENAMES`` order, then a ``pyproject.toml`` that has a
    ``[tool.notemark]`` section. The nearest directory wins.

    Parameters
    ----------
    start_dir : Path, optional
        Directory to start from, defaults to the working directory

    Returns
    -------
    Path or None
        The first configuration file found, or None

    """
    directory = (start_dir or Path.cwd()).resolve()
    for candidate_dir in (directory, *directory.parents):
        for filename in CONFIG_FILENAMES:
            candidate = candidate_dir / filename
            if candidate.is_file():
                return candidate

        pyproject = candidate_dir / PYPROJECT_FILENAME
        if pyproject.is_file() and _has_notemark_section(pyproject):
            return pyproject
    return None


def load_config_file(config_path: Path | str) -> Dict[str, Any]:
    """Read one configuration file.

    The format follows the file suffix; a file named ``pyproject.toml``
    yields only its ``[tool.notemark]`` table.

    Parameters
    ----------
    config_path : Path or str
        File to read

    Returns
    -------
    dict
        The decoded configuration

    Raises
    ------
    argparse.ArgumentTypeError
        If the file is missing, unreadable, malformed, or of an unknown format

    """
    path = Path(config_path)
    if not path.exists():
        raise argparse.ArgumentTypeError(f"Configuration file does not exist: {path}")
    if not path.is_file():
        raise argparse.ArgumentTypeError(f"Configuration path is not a file: {path}")

    if path.name.lower() == PYPROJECT_FILENAME:
        return _pyproject_section(path)

    fmt = _FORMATS_BY_SUFFIX.get(path.suffix.lower())
    if fmt is None:
        supported = ", ".join(sorted(_FORMATS_BY_SUFFIX))
        raise argparse.ArgumentTypeError(f"Unsupported config file format '{path.suffix}'. Use one of: {supported}")
    return _read_mapping(path, fmt)


def load_config_with_priority(
    explicit_path: Optional[str] = None, env_var_path: Optional[str] = None
) -> Dict[str, Any]:
    """Load the configuration that applies to this run.

    The ``--config`` path beats the ``NOTEMARK_CONFIG`` path, which beats a
    discovered file. With none of them the result is an empty dict.

    Raises
    ------
    argparse.ArgumentTypeError
        If the chosen file cannot be loaded

    """
    chosen = explicit_path or env_var_path or find_config_in_parents()
    if not chosen:
        return {}
    return load_config_file(chosen)


def options_from_config(config: Dict[str, Any]) -> tuple[MarkdownParserOptions, MarkdownSerializerOptions]:
    """Build parser and serializer options from a configuration dictionary.

    Parameters
    ----------
    config : dict
        Configuration with optional ``parser`` and ``serializer`` tables

    Returns
    -------
    tuple of (MarkdownParserOptions, MarkdownSerializerOptions)
        Options with configured fields applied over the defaults

    Raises
    ------
    argparse.ArgumentTypeError
        On unknown sections or keys, or on values the options reject

    Examples
    --------
    >>> parser_options, serializer_options = options_from_config({"serializer": {"bullet_symbol": "*"}})
    >>> serializer_options.bullet_symbol
    '*'

    """
    unknown_sections = sorted(set(config) - set(CONFIG_SECTIONS))
    if unknown_sections:
        raise argparse.ArgumentTypeError(
            f"Unknown configuration section(s): {', '.join(unknown_sections)}. "
            f"Expected: {', '.join(CONFIG_SECTIONS)}"
        )

    built: Dict[str, Any] = {}
    for section, options_class in CONFIG_SECTIONS.items():
        values = config.get(section) or {}
        if not isinstance(values, dict):
            raise argparse.ArgumentTypeError(f"Configuration section '{section}' must be a table")

        unknown_keys = options_class.unknown_fields(values)
        if unknown_keys:
            raise argparse.ArgumentTypeError(
                f"Unknown option(s) in '{section}': {', '.join(unknown_keys)}. "
                f"Valid options: {', '.join(options_class.field_names())}"
            )

        try:
            built[section] = options_class(**values)
        except (TypeError, ValueError) as e:
            raise argparse.ArgumentTypeError(f"Invalid value in '{section}' configuration: {e}") from e

    return built["parser"], built["serializer"]
