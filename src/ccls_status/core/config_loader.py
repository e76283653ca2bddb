"""Configuration file loading utilities - JSONC parsing, env substitution, deep merge."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Dict

import commentjson

from ..util.log import Log

log = Log.create({"service": "config.loader"})


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Deep merge two dictionaries."""
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def expand_dotted(data: Dict[str, Any]) -> Dict[str, Any]:
    """Expand editor-style dotted keys into nested dictionaries.

    ``{"ccls.misc.compilationDatabaseDirectory": "build"}`` becomes
    ``{"ccls": {"misc": {"compilationDatabaseDirectory": "build"}}}``.
    """
    result: Dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, dict):
            value = expand_dotted(value)
        parts = key.split(".")
        for part in reversed(parts[1:]):
            value = {part: value}
        result = deep_merge(result, {parts[0]: value})
    return result


def substitute_env_vars(text: str) -> str:
    """Replace ``{env:VAR}`` patterns with environment variable values."""
    def replacer(match: re.Match[str]) -> str:
        return os.environ.get(match.group(1), "")

    return re.sub(r'\{env:([^}]+)\}', replacer, text)


def _skip_comment(text: str, i: int) -> int:
    """Index just past a comment starting at ``i``, or ``i`` if there is none."""
    if text.startswith("//", i) or text.startswith("#", i):
        end = text.find("\n", i)
        return len(text) if end == -1 else end
    if text.startswith("/*", i):
        end = text.find("*/", i + 2)
        return len(text) if end == -1 else end + 2
    return i


def strip_trailing_commas(text: str) -> str:
    """Drop commas that directly precede ``}`` or ``]``.

    Editor settings files routinely end objects with a trailing comma,
    which commentjson rejects. Strings and comments are left untouched.
    """
    out = []
    i = 0
    in_string = False
    while i < len(text):
        ch = text[i]
        if in_string:
            out.append(ch)
            if ch == "\\" and i + 1 < len(text):
                out.append(text[i + 1])
                i += 1
            elif ch == '"':
                in_string = False
            i += 1
            continue

        if ch == '"':
            in_string = True
        elif ch == ",":
            j = i + 1
            while j < len(text):
                if text[j].isspace():
                    j += 1
                    continue
                after = _skip_comment(text, j)
                if after == j:
                    break
                j = after
            if j < len(text) and text[j] in "}]":
                i += 1
                continue
        else:
            end = _skip_comment(text, i)
            if end != i:
                out.append(text[i:end])
                i = end
                continue
        out.append(ch)
        i += 1
    return "".join(out)


def read_json_file(filepath: str) -> Dict[str, Any]:
    """Read a JSON or JSONC file, raising on I/O or parse errors."""
    text = Path(filepath).read_text(encoding="utf-8")
    data = commentjson.loads(strip_trailing_commas(substitute_env_vars(text)))
    if not isinstance(data, dict):
        raise ValueError("top-level value must be an object")
    return data


def load_json_file(filepath: str) -> Dict[str, Any]:
    """Load a JSON or JSONC file, returning ``{}`` on any I/O or parse error."""
    if not Path(filepath).exists():
        return {}

    try:
        return read_json_file(filepath)
    except (OSError, ValueError, UnicodeDecodeError) as e:
        log.error("failed to load config file", {"path": filepath, "error": str(e)})
        return {}
