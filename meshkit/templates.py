"""Merging data into simple HTML-escaped templates with {{.field}} actions."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

_ACTION = re.compile(r"\{\{(-\s)?(.*?)(\s-)?\}\}", re.DOTALL)
_FIELD_CHAIN = re.compile(r"(?:\.[A-Za-z_]\w*)+")
_HTML_ESCAPES = str.maketrans(
    {
        "\0": "\ufffd",
        '"': "&#34;",
        "&": "&amp;",
        "'": "&#39;",
        "+": "&#43;",
        "<": "&lt;",
        ">": "&gt;",
    }
)


class TemplateError(ValueError):
    """A template could not be parsed or executed."""


def _resolve(data: Any, fields: list[str]) -> Any:
    value = data
    for name in fields:
        if value is None:
            raise TemplateError(f"nil data; no entry for key {name!r}")
        if isinstance(value, Mapping):
            value = value.get(name)
        else:
            try:
                value = getattr(value, name)
            except AttributeError:
                raise TemplateError(
                    f"can't evaluate field {name} in type {type(value).__name__}"
                ) from None
    return value


def _render(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value).translate(_HTML_ESCAPES)


def _evaluate(action: str, data: Any) -> str:
    action = action.strip()
    if action.startswith("/*") and action.endswith("*/"):
        return ""
    if not action:
        raise TemplateError("missing value for command")
    if action == ".":
        return _render(data)
    if _FIELD_CHAIN.fullmatch(action):
        return _render(_resolve(data, action[1:].split(".")))
    raise TemplateError(f"unsupported template action: {action!r}")


def merge_to_template(template: bytes | str, data: Any) -> bytes:
    """Merge data into template and return the result as bytes.

    Actions of the form {{.a.b}} look up keys or attributes; a missing key
    yields an empty string. Values are HTML escaped.
    """
    text = template.decode("utf-8") if isinstance(template, bytes) else template
    parts: list[str] = []
    position = 0
    trim_next = False
    for match in _ACTION.finditer(text):
        literal = text[position:match.start()]
        if trim_next:
            literal = literal.lstrip()
        if match.group(1):
            literal = literal.rstrip()
        parts.append(literal)
        parts.append(_evaluate(match.group(2), data))
        trim_next = bool(match.group(3))
        position = match.end()
    tail = text[position:]
    if "{{" in tail:
        raise TemplateError("unclosed action")
    if trim_next:
        tail = tail.lstrip()
    parts.append(tail)
    return "".join(parts).encode("utf-8")