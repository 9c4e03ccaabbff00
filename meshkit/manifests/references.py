"""Inlining OpenAPI "$ref" references from a table of definitions."""

from __future__ import annotations

import json
from collections.abc import Mapping, MutableMapping
from typing import Any

from meshkit.general import marshal

JSON_SCHEMA_PROPS_REF = "JSONSchemaProps"
_REF = "$ref"


class UnresolvedReferenceError(LookupError):
    """A reference names a definition that does not exist."""


def _parse_object(document: bytes | str) -> dict[str, Any] | None:
    parsed = json.loads(document)
    if parsed is not None and not isinstance(parsed, dict):
        raise ValueError(f"expected a JSON object, got {type(parsed).__name__}")
    return parsed


def _encode(value: Any) -> bytes:
    return marshal(value).encode("utf-8")


class OpenApiRefResolver:
    """Replaces "$ref" objects with the definitions they point to.

    A JSONSchemaProps reference met while already resolving one is replaced
    by the string "string", which keeps the recursion finite.
    """

    def __init__(self) -> None:
        self._inside_json_schema_props = False

    def resolve_references(
        self,
        manifest: bytes | str,
        definitions: Mapping[str, Any],
        cache: MutableMapping[str, bytes] | None = None,
    ) -> bytes:
        """Return manifest as JSON with every reference replaced by its definition.

        definitions maps the last segment of a reference path to its value;
        cache holds already resolved definitions and is filled as they are resolved.
        """
        if cache is None:
            cache = {}
        val = _parse_object(manifest)
        if val is None:
            return b"null"

        ref = val.get(_REF)
        if isinstance(ref, str):
            return self._resolve_ref(val, ref, definitions, cache)

        for key, value in list(val.items()):
            if isinstance(value, list):
                val[key] = [
                    self._resolve_value(item, definitions, cache) if isinstance(item, dict) else item
                    for item in value
                ]
            elif isinstance(value, dict):
                val[key] = self._resolve_value(value, definitions, cache)
        return _encode(val)

    def _resolve_value(self, value: dict[str, Any], definitions, cache) -> Any:
        return json.loads(self.resolve_references(_encode(value), definitions, cache))

    def _resolve_ref(self, val: dict[str, Any], ref: str, definitions, cache) -> bytes:
        is_props = ref.rsplit(".", 1)[-1] == JSON_SCHEMA_PROPS_REF
        if is_props and self._inside_json_schema_props:
            val[_REF] = "string"
            return _encode(val)

        path = ref.rsplit("/", 1)[-1]
        previous = self._inside_json_schema_props
        if is_props:
            self._inside_json_schema_props = True
        try:
            cached = cache.get(path)
            if cached is not None:
                return cached
            if path not in definitions:
                raise UnresolvedReferenceError(f"reference {path!r} not found in definitions")
            resolved = self.resolve_references(_encode(definitions[path]), definitions, cache)
            cache[path] = resolved
            return resolved
        finally:
            self._inside_json_schema_props = previous