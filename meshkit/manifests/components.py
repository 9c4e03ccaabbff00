"""Generating workload definitions and schemas from CRD manifests."""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any

import yaml

from meshkit.errors import (
    MeshkitError,
    err_get_api_group,
    err_get_api_version,
    err_get_resource_identifier,
    err_get_schemas,
)
from meshkit.general import read_file_source
from meshkit.manifests.formatting import format_to_readable_string

DEFINITION_API_VERSION = "core.oam.dev/v1alpha1"
DEFINITION_KIND = "WorkloadDefinition"
_REF_SUFFIX = ".meshery.layer5.io"
_K8S_REF_SUFFIX = ".k8s.meshery.layer5.io"

_JSON_HTML_ESCAPES = str.maketrans(
    {
        "<": "\\u003c",
        ">": "\\u003e",
        "&": "\\u0026",
        "\u2028": "\\u2028",
        "\u2029": "\\u2029",
    }
)

Extractor = Callable[[Any], Any]


class ResourceType(IntEnum):
    """What kind of resource a CRD describes."""

    SERVICE_MESH = 0
    K8S = 1
    MESHERY = 2


@dataclass
class Component:
    """Definitions and schemas generated from a set of CRDs."""

    schemas: list[str] = field(default_factory=list)
    definitions: list[str] = field(default_factory=list)


@dataclass
class CrdFilter:
    """Functions that pull values out of a parsed CRD.

    Each extractor takes the parsed CRD and returns the value found,
    raising LookupError when it is missing.
    """

    identifier_extractor: Extractor
    name_extractor: Extractor
    group_extractor: Extractor
    version_extractor: Extractor
    spec_extractor: Extractor
    is_json: bool = False


@dataclass(kw_only=True)
class Config:
    """Everything needed to turn a manifest into components.

    extract_crds splits a manifest into CRD documents; modify_def_schema,
    if given, takes a definition and a schema and returns both, changed.
    """

    crd_filter: CrdFilter
    extract_crds: Callable[[str], list[str]]
    name: str = ""
    type: str = ""
    mesh_version: str = ""
    k8s_version: str = ""
    modify_def_schema: Callable[[str, str], tuple[str, str]] | None = None


@dataclass(frozen=True)
class ExtractorPaths:
    """Paths, such as spec.versions[0].name, to the values a CrdFilter extracts."""

    name_path: str = ""
    group_path: str = ""
    version_path: str = ""
    spec_path: str = ""
    id_path: str = ""


def _parse_path(path: str) -> list[str | int]:
    selectors: list[str | int] = []
    decoder = json.JSONDecoder()
    index = 0
    while index < len(path):
        ch = path[index]
        if ch == ".":
            index += 1
        elif ch == "[":
            end = path.find("]", index)
            if end == -1:
                raise ValueError(f"unterminated index in path {path!r}")
            selectors.append(int(path[index + 1:end].strip()))
            index = end + 1
        elif ch == '"':
            label, index = decoder.raw_decode(path, index)
            selectors.append(label)
        else:
            end = index
            while end < len(path) and path[end] not in ".[":
                end += 1
            selectors.append(path[index:end].strip())
            index = end
    return selectors


def _lookup(root: Any, path: str) -> Any:
    try:
        selectors = _parse_path(path)
    except ValueError as exc:
        raise LookupError(f"Could not find the value: {exc}") from exc
    current = root
    for selector in selectors:
        if isinstance(selector, int):
            if isinstance(current, list) and 0 <= selector < len(current):
                current = current[selector]
                continue
        elif isinstance(current, dict) and selector in current:
            current = current[selector]
            continue
        raise LookupError("Could not find the value")
    return current


def _path_extractor(path: str) -> Extractor:
    def extract(root: Any) -> Any:
        return _lookup(root, path)

    return extract


def new_crd_filter(paths: ExtractorPaths, is_json: bool = False) -> CrdFilter:
    """Build a CrdFilter that looks values up by the given paths."""
    return CrdFilter(
        identifier_extractor=_path_extractor(paths.id_path),
        name_extractor=_path_extractor(paths.name_path),
        group_extractor=_path_extractor(paths.group_path),
        version_extractor=_path_extractor(paths.version_path),
        spec_extractor=_path_extractor(paths.spec_path),
        is_json=is_json,
    )


def _extract_string(extractor: Extractor, crd: Any, error: Callable[[Any], MeshkitError]) -> str:
    try:
        value = extractor(crd)
    except LookupError as exc:
        raise error(exc) from exc
    if not isinstance(value, str):
        raise error(TypeError(f"cannot use value {value!r} as a string"))
    return value


def _dumps(obj: Any, sort_keys: bool) -> str:
    text = json.dumps(
        obj, indent=1, separators=(",", ": "), ensure_ascii=False, sort_keys=sort_keys
    )
    return text.translate(_JSON_HTML_ESCAPES)


def _definition(crd: Any, resource: int, config: Config) -> str:
    extractors = config.crd_filter
    resource_id = _extract_string(extractors.identifier_extractor, crd, err_get_resource_identifier)
    api_version = _extract_string(extractors.version_extractor, crd, err_get_api_version)
    api_group = _extract_string(extractors.group_extractor, crd, err_get_api_group)

    k8s_api_version = f"{api_group}/{api_version}" if api_group else api_version
    name = resource_id
    ref = resource_id.lower() + _REF_SUFFIX
    metadata: dict[str, str] | None = None
    if resource == ResourceType.SERVICE_MESH:
        metadata = {
            "@type": "pattern.meshery.io/mesh/workload",
            "meshVersion": config.mesh_version,
            "meshName": config.name,
            "k8sAPIVersion": k8s_api_version,
            "k8sKind": resource_id,
        }
        ref = resource_id.lower()
        if config.type:
            name += "." + config.type
            ref += "." + config.type
        ref += _REF_SUFFIX
    elif resource == ResourceType.K8S:
        metadata = {
            "@type": "pattern.meshery.io/k8s",
            "k8sAPIVersion": k8s_api_version,
            "k8sKind": resource_id,
            "version": config.k8s_version,
        }
        name += ".K8s"
        ref = resource_id.lower() + _K8S_REF_SUFFIX
    elif resource == ResourceType.MESHERY:
        metadata = {"@type": "pattern.meshery.io/core"}

    spec: dict[str, Any] = {"definitionRef": {"name": ref}}
    if metadata is not None:
        spec["metadata"] = dict(sorted(metadata.items()))
    definition = {
        "kind": DEFINITION_KIND,
        "apiVersion": DEFINITION_API_VERSION,
        "metadata": {"name": name},
        "spec": spec,
    }
    return _dumps(definition, sort_keys=False)


def _schema(crd: Any, config: Config) -> str:
    extractors = config.crd_filter
    try:
        spec = extractors.spec_extractor(crd)
    except LookupError as exc:
        raise err_get_schemas(exc) from exc
    if not isinstance(spec, dict):
        raise err_get_schemas(TypeError("the spec is not an object"))
    resource_id = _extract_string(extractors.identifier_extractor, crd, err_get_resource_identifier)
    schema = dict(spec)
    schema["title"] = format_to_readable_string(resource_id)
    try:
        return _dumps(schema, sort_keys=True)
    except (TypeError, ValueError) as exc:
        raise err_get_schemas(exc) from exc


def _parse_crd(crd: str, is_json: bool) -> Any:
    return json.loads(crd) if is_json else yaml.safe_load(crd)


def generate_components(manifest: str, resource: int, config: Config) -> Component:
    """Generate a definition and a schema for each CRD of manifest.

    A CRD that cannot be parsed or lacks a required value is skipped.
    """
    component = Component()
    for crd in config.extract_crds(manifest):
        try:
            parsed = _parse_crd(crd, config.crd_filter.is_json)
            definition = _definition(parsed, resource, config)
            schema = _schema(parsed, config)
        except (MeshkitError, ValueError, TypeError, yaml.YAMLError):
            continue
        if config.modify_def_schema is not None:
            definition, schema = config.modify_def_schema(definition, schema)
        component.definitions.append(definition)
        component.schemas.append(schema)
    return component


def get_from_manifest(url: str, resource: int, config: Config) -> Component:
    """Read a manifest from an http, https or file location and generate its components."""
    return generate_components(read_file_source(url), resource, config)


def remove_non_crd_values(crds: list[str]) -> list[str]:
    """Drop empty, blank and null documents."""
    return [crd for crd in crds if crd not in ("", " ", "null")]