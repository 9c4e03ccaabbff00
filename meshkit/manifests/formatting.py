"""Turning identifiers into readable titles and cleaning CRD manifests."""

from __future__ import annotations

import re
from enum import Enum

_DOCUMENT_SEPARATOR = "\n---\n"
_TEMPLATE_EXPRESSION = re.compile(r"{{.+}}")
_TEMPLATE_REPLACEMENT = "meshery"

# Words formatted by hand rather than by the spacing rules.
_DICTIONARY = {
    "MeshSync": "MeshSync",
    "additionalProperties": "additionalProperties",
    "caBundle": "CA Bundle",
    "mtls": "mTLS",
    "mTLS": "mTLS",
}
_INVERTED_DICTIONARY = {
    "MeshSync": "MeshSync",
    "additionalProperties": "additionalProperties",
    "CA Bundle": "caBundle",
    "mTLS": "mTLS",
}


class _Spacing(Enum):
    NONE = 0
    AFTER = 1
    BEFORE = 2


def _is_big(ch: str) -> bool:
    return "A" <= ch <= "Z"


def _is_small(ch: str) -> bool:
    return "a" <= ch <= "z"


def _is_exception(text: str, prev: int, curr: int, nxt: int) -> bool:
    last = len(text) - 1
    if nxt == last:
        return _is_small(text[nxt])
    # Alternating text such as "IPsRoute" keeps "IPs" together.
    return _is_big(text[curr]) and _is_small(text[nxt]) and _is_big(text[nxt + 1])


def _spacing(text: str, prev: int, curr: int, nxt: int) -> _Spacing:
    if _is_exception(text, prev, curr, nxt):
        return _Spacing.NONE
    if _is_small(text[curr]) and _is_big(text[nxt]):
        return _Spacing.AFTER
    if _is_big(text[curr]) and _is_big(text[prev]) and _is_small(text[nxt]):
        return _Spacing.BEFORE
    return _Spacing.NONE


def format_to_readable_string(text: str) -> str:
    """Split a camel-case identifier into space separated words.

    A space goes between a small letter and a following capital, and before
    the last capital of a run of capitals followed by a small letter, with
    exceptions that keep plurals of acronyms such as "IPs" together.
    """
    if not text:
        return ""
    if text in _DICTIONARY:
        return _DICTIONARY[text]
    pieces = [text[0]]
    for index in range(1, len(text) - 1):
        ch = text[index]
        spacing = _spacing(text, index - 1, index, index + 1)
        if spacing is _Spacing.AFTER:
            pieces.append(ch + " ")
        elif spacing is _Spacing.BEFORE:
            pieces.append(" " + ch)
        else:
            pieces.append(ch)
    pieces.append(text[-1])
    return " ".join("".join(pieces).split())


def deformat_readable_string(text: str) -> str:
    """Undo format_to_readable_string by removing the spaces it added."""
    if text in _INVERTED_DICTIONARY:
        return _INVERTED_DICTIONARY[text]
    return text.replace(" ", "")


def remove_helm_templating(crd_yaml: str) -> str:
    """Replace helm template expressions in a multi-document YAML with a placeholder.

    Empty documents are dropped.
    """
    documents = (
        _TEMPLATE_EXPRESSION.sub(_TEMPLATE_REPLACEMENT, document)
        for document in crd_yaml.split(_DOCUMENT_SEPARATOR)
        if document
    )
    return _DOCUMENT_SEPARATOR.join(documents)