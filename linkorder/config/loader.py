"""Helpers for loading resolver configuration from TOML/JSON sources.

This module provides a single entry point `load_resolver_config`
that accepts various configuration sources:

* None -> default ResolverConfig
* dict -> ResolverConfig.from_dict
* Path / path-like string -> load .toml/.json from filesystem
* Inline JSON/TOML strings
"""

from __future__ import annotations

import json
import logging
import re
import tomllib
from pathlib import Path
from typing import Any, Dict, Tuple, Union

from linkorder.config.schema import ResolverConfig

logger = logging.getLogger("linkorder.config.loader")

ConfigSource = Union[str, Path, Dict[str, Any], None]

_TOML_HEADER = re.compile(r'\[\[?[A-Za-z0-9_."\- ]+\]\]?(\s*#.*)?')
_DOCUMENT_SUFFIXES = {".json", ".toml", ".tml"}


def _is_file(source: Union[str, Path]) -> bool:
    try:
        return Path(source).is_file()
    except (OSError, ValueError):
        # Inline documents can exceed filename limits.
        return False


def _looks_like_path(text: str) -> bool:
    text = text.strip()
    if not text or "\n" in text:
        return False
    return Path(text).suffix.lower() in _DOCUMENT_SUFFIXES


def _guess_format(text: str) -> str:
    stripped = text.lstrip()
    if stripped.startswith("{"):
        return "json"
    if stripped.startswith("["):
        # "[table]" headers are TOML; "[1, 2]" or "[{...}]" are JSON arrays.
        first_line = stripped.splitlines()[0].strip()
        return "toml" if _TOML_HEADER.fullmatch(first_line) else "json"
    return "toml"


def read_structured_source(source: Union[str, Path]) -> Tuple[Dict[str, Any], str]:
    """Read a TOML/JSON document from a path or an inline string.

    Args:
        source: Filesystem path, or inline TOML/JSON text (auto-detected).

    Returns:
        Tuple[Dict[str, Any], str]: Parsed mapping and the detected format.

    Raises:
        FileNotFoundError: If ``source`` names a .json/.toml file that does
            not exist.
        ValueError: If the document is not a mapping or cannot be decoded
            (``json.JSONDecodeError`` and ``tomllib.TOMLDecodeError`` are
            both ``ValueError`` subclasses).
    """
    path = Path(source)
    if isinstance(source, Path) or _is_file(source):
        text = path.read_text(encoding="utf-8")
        suffix = path.suffix.lower()
        if suffix in {".toml", ".tml"}:
            fmt = "toml"
        elif suffix == ".json":
            fmt = "json"
        else:
            fmt = _guess_format(text)
        logger.info("Loading %s document from file: %s", fmt, path)
    elif _looks_like_path(str(source)):
        raise FileNotFoundError(f"No such file: '{source}'")
    else:
        text = str(source)
        fmt = _guess_format(text)
        logger.debug("Loading inline %s document", fmt)

    data = json.loads(text) if fmt == "json" else tomllib.loads(text)
    if not isinstance(data, dict):
        raise ValueError("Top-level document must be a mapping/dict")
    return data, fmt


def load_resolver_config(source: ConfigSource) -> ResolverConfig:
    """Load ResolverConfig from various configuration sources.

    Args:
        source: One of:
            * None: returns the default ResolverConfig
            * dict: treated as already-parsed configuration mapping
            * str/Path: either a filesystem path to a .toml/.json file,
              or an inline TOML/JSON string (auto-detected)

    Returns:
        ResolverConfig instance.

    Raises:
        ValidationError: If a value is out of range or unknown.
        ValueError: If the source cannot be decoded.
    """
    if source is None:
        logger.debug("No config source provided; using default ResolverConfig")
        return ResolverConfig()

    if isinstance(source, dict):
        logger.debug("Loading ResolverConfig from provided dict")
        return ResolverConfig.from_dict(source)

    if isinstance(source, (str, Path)):
        data, _fmt = read_structured_source(source)
        # Allow the settings to live under a [resolver] table.
        section = data.get("resolver", data)
        return ResolverConfig.from_dict(section)

    raise TypeError(f"Unsupported config source type: {type(source)!r}")


__all__ = ["ConfigSource", "load_resolver_config", "read_structured_source"]
