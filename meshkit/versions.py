"""Ordering of version-like, dot separated strings."""

from __future__ import annotations

from functools import cmp_to_key

_STABLE = "stable"
_REPLACEMENTS = (("alpha", ".0"), ("beta", ".1"), ("rc", ".2"), ("stable", ".4"))
_KEEP = frozenset("0123456789.")
_PAD = "3"


def _cleanup(version: str) -> str:
    if version.startswith(_STABLE):
        version = version[len(_STABLE):] + _STABLE
    for word, replacement in _REPLACEMENTS:
        version = version.replace(word, replacement)
    return "".join(ch for ch in version if ch in _KEEP)


def _number(segment: str) -> int:
    return int(segment) if segment else 0


def _compare(left: str, right: str) -> int:
    lparts = _cleanup(left).split(".")
    rparts = _cleanup(right).split(".")
    width = max(len(lparts), len(rparts))
    lparts += [_PAD] * (width - len(lparts))
    rparts += [_PAD] * (width - len(rparts))
    for lseg, rseg in zip(lparts, rparts):
        p, q = _number(lseg), _number(rseg)
        if p != q:
            return -1 if p < q else 1
    return 0


def sort_dotted_strings_by_digits(versions: list[str]) -> list[str]:
    """Sort version strings in place by their numeric parts and return the list.

    Only digits and dots count, plus the words alpha, beta, rc and stable,
    which rank in that order; for the same version stable ranks above edge.
    """
    versions.sort(key=cmp_to_key(_compare))
    return versions