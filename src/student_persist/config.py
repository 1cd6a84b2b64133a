r"""
Store configuration — explicit settings object plus a `.properties` loader.

Usage::

    config = load_config("config.properties")
    store = StudentStore(config)

The properties file uses Java-style ``key=value`` (or ``key: value``) lines
without sections::

    # where record files live (trailing separator required)
    student_data_path=C:\\data\\students\\

Supported from the ``.properties`` format: ``#`` / ``!`` comments, leading
whitespace, backslash line continuations, the ``\t \n \r \f \uXXXX``
escapes (any other escaped character stands for itself), duplicate keys
(last one wins) and keys without a value. Not supported: escaped delimiters
inside keys, and a line that is entirely ``[...]``, which is read as a
section header.

The environment variable ``STUDENT_DATA_PATH`` overrides the file value.
"""

from __future__ import annotations

import codecs
import configparser
import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional

from student_persist.exceptions import ConfigError

__all__ = ["StoreConfig", "load_config", "DEFAULT_CONFIG_PATH", "ENV_DATA_PATH"]

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config.properties"
ENV_DATA_PATH = "STUDENT_DATA_PATH"

# configparser needs a section header; properties files have none
_SECTION = "properties"

_KEY_DATA_PATH = "student_data_path"
_KEY_ENCODING = "student_data_encoding"
_KEY_ATOMIC = "student_atomic_updates"

_ESCAPE_RE = re.compile(r"\\(u[0-9a-fA-F]{4}|.)", re.DOTALL)
_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}


def _check_encoding(name: str) -> None:
    try:
        codecs.lookup(name)
    except LookupError as exc:
        raise ConfigError(f"Unknown record file encoding: {name!r}") from exc


@dataclass
class StoreConfig:
    """Runtime configuration for StudentStore."""
    storage_dir:    str  = ""          # prefix for record files, keeps its trailing separator
    encoding:       str  = "utf-8"
    atomic_updates: bool = True        # False = legacy delete-then-write updates

    def __post_init__(self) -> None:
        _check_encoding(self.encoding)


def _unescape(value: str) -> str:
    def _sub(m: re.Match) -> str:
        token = m.group(1)
        if len(token) == 5:
            return chr(int(token[1:], 16))
        return _ESCAPES.get(token, token)

    return _ESCAPE_RE.sub(_sub, value)


def _logical_lines(text: str) -> Iterator[str]:
    """Strip leading whitespace and join backslash-continued lines."""
    pending: Optional[str] = None
    for raw in text.splitlines():
        line = raw.lstrip()
        if pending is None:
            if not line or line[0] in "#!":
                yield line
                continue
            pending = ""
        pending += line
        trailing = len(pending) - len(pending.rstrip("\\"))
        if trailing % 2:
            pending = pending[:-1]
            continue
        yield pending
        pending = None
    if pending is not None:
        yield pending


def _read_properties(path: Path) -> dict[str, str]:
    parser = configparser.ConfigParser(
        delimiters=("=", ":"),
        comment_prefixes=("#", "!"),
        interpolation=None,
        strict=False,
        allow_no_value=True,
    )
    # keys are case-sensitive in .properties files
    parser.optionxform = str  # type: ignore[assignment,method-assign]
    text = "\n".join(_logical_lines(path.read_text(encoding="utf-8")))
    parser.read_string(f"[{_SECTION}]\n{text}", source=str(path))
    return {key: _unescape(value or "") for key, value in parser[_SECTION].items()}


def load_config(path: Optional[str] = None) -> StoreConfig:
    """
    Build a StoreConfig from a properties file and the environment.

    A missing or unreadable file is logged at CRITICAL and the defaults are
    returned (empty storage_dir), mirroring a store that was never configured.

    Args:
        path: Properties file to read; defaults to ./config.properties.

    Returns:
        The resolved StoreConfig.

    Raises:
        ConfigError: student_atomic_updates is not a recognised boolean, or
            student_data_encoding names no known codec.
    """
    config = StoreConfig()
    cfg_path = Path(path or DEFAULT_CONFIG_PATH).expanduser()

    props: Optional[dict[str, str]] = None
    if cfg_path.is_file():
        try:
            props = _read_properties(cfg_path)
        except (OSError, UnicodeDecodeError, configparser.Error):
            logger.critical("Failed to load config properties from %s", cfg_path, exc_info=True)
    else:
        logger.critical("Config file not found: %s", cfg_path)

    if props is not None:
        config.storage_dir = props.get(_KEY_DATA_PATH, "").strip()
        encoding = props.get(_KEY_ENCODING, "").strip()
        if encoding:
            _check_encoding(encoding)
            config.encoding = encoding
        if _KEY_ATOMIC in props:
            flag = props[_KEY_ATOMIC].strip().lower()
            if flag not in configparser.ConfigParser.BOOLEAN_STATES:
                raise ConfigError(
                    f"{_KEY_ATOMIC} must be a boolean, got {props[_KEY_ATOMIC]!r}"
                )
            config.atomic_updates = configparser.ConfigParser.BOOLEAN_STATES[flag]

    env_dir = os.environ.get(ENV_DATA_PATH)
    if env_dir:
        logger.debug("Using %s from environment", ENV_DATA_PATH)
        config.storage_dir = env_dir

    logger.info("Store configured with storage_dir: %r", config.storage_dir)
    return config
