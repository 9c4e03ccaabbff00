"""General helpers: JSON and YAML handling, files, remote sources and strings."""

from __future__ import annotations

import json
import os
import random
import re
from collections.abc import Callable, Iterable, Mapping
from enum import Enum
from pathlib import Path
from typing import Any
from urllib.parse import urlsplit

import requests
import yaml

from meshkit.errors import (
    err_create_dir,
    err_create_file,
    err_get_bool,
    err_getting_latest_release_tag,
    err_invalid_protocol,
    err_invalid_schema_version,
    err_marshal,
    err_reading_local_file,
    err_reading_remote_file,
    err_remote_file_not_found,
    err_type_cast,
    err_unmarshal,
    err_write_file,
)
from meshkit.versions import sort_dotted_strings_by_digits


class EntityType(str, Enum):
    """Kinds of definitions a schema document can describe."""

    COMPONENT_DEFINITION = "component"
    RELATIONSHIP_DEFINITION = "relationship"
    MODEL = "model"
    POLICY_DEFINITION = "policy"


_SCHEMA_ENTITIES = {
    "relationships.meshery.io": EntityType.RELATIONSHIP_DEFINITION,
    "components.meshery.io": EntityType.COMPONENT_DEFINITION,
    "models.meshery.io": EntityType.MODEL,
    "policies.meshery.io": EntityType.POLICY_DEFINITION,
}

_TRUE_LITERALS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_LITERALS = frozenset({"0", "f", "F", "FALSE", "false", "False"})

_JSON_HTML_ESCAPES = str.maketrans(
    {
        "<": "\\u003c",
        ">": "\\u003e",
        "&": "\\u0026",
        "\u2028": "\\u2028",
        "\u2029": "\\u2029",
    }
)

_RELEASE_TAG = re.compile(r'/releases/tag/(.*?)"')
_DOMAIN = re.compile(r"(([a-zA-Z0-9]+\.)([a-zA-Z0-9]+))\Z")
_DIGITS = frozenset("0123456789")
_CHARSET = "abcdedfghijklmnopqrstuvwxyz"


def transform_map_keys(data: Mapping[str, Any], transform: Callable[[str], str]) -> dict[str, Any]:
    """Return a copy of data with every key, at every depth, passed through transform."""
    return {
        transform(key): transform_map_keys(value, transform) if isinstance(value, dict) else value
        for key, value in data.items()
    }


def unmarshal(text: str) -> Any:
    """Parse JSON text, ignoring surrounding whitespace."""
    try:
        return json.loads(text.strip())
    except json.JSONDecodeError as exc:
        raise err_unmarshal(exc) from exc


def get_bool(value: str) -> bool:
    """Parse a boolean literal such as 1, t, TRUE, true, 0, f, FALSE or false."""
    if value in _TRUE_LITERALS:
        return True
    if value in _FALSE_LITERALS:
        return False
    raise err_get_bool(value, ValueError(f"invalid syntax: {value!r}"))


def str_concat(*args: str) -> str:
    """Join the given strings with nothing between them."""
    return "".join(args)


def _to_json(obj: Any, indent: int | None = None) -> str:
    separators = (",", ":") if indent is None else (",", ": ")
    try:
        text = json.dumps(
            obj,
            ensure_ascii=False,
            allow_nan=False,
            sort_keys=True,
            indent=indent,
            separators=separators,
        )
    except (TypeError, ValueError) as exc:
        raise err_marshal(exc) from exc
    return text.translate(_JSON_HTML_ESCAPES)


def marshal(obj: Any) -> str:
    """Serialise obj as compact JSON with sorted keys and HTML-safe escapes."""
    return _to_json(obj)


def download_file(path: str | os.PathLike[str], url: str) -> None:
    """Fetch url and store its body at path."""
    with requests.get(url, stream=True) as response:
        if response.status_code != 200:
            raise requests.HTTPError(
                f"failed to get the file {response.status_code} status code for {url} file",
                response=response,
            )
        with open(path, "wb") as out:
            for chunk in response.iter_content(chunk_size=65536):
                out.write(chunk)


def get_home() -> str:
    """Return the current user's home directory."""
    return str(Path.home())


def create_file(contents: bytes | str, filename: str, location: str | os.PathLike[str]) -> None:
    """Append contents to location/filename, creating it with mode 0644 if needed."""
    data = contents.encode("utf-8") if isinstance(contents, str) else contents
    descriptor = os.open(
        os.path.join(location, filename), os.O_APPEND | os.O_CREAT | os.O_WRONLY, 0o644
    )
    with os.fdopen(descriptor, "ab") as handle:
        handle.write(data)


def read_file_source(uri: str) -> str:
    """Read a file given as an http, https or file location."""
    if uri.startswith("http"):
        return read_remote_file(uri)
    if uri.startswith("file"):
        return read_local_file(uri)
    raise err_invalid_protocol()


def read_remote_file(url: str) -> str:
    """Fetch url and return its body as text."""
    response = requests.get(url)
    with response:
        if response.status_code == 404:
            raise err_remote_file_not_found(url)
        try:
            body = response.content
        except requests.RequestException as exc:
            raise err_reading_remote_file(exc) from exc
    return body.decode("utf-8", errors="replace")


def read_local_file(location: str) -> str:
    """Read a local file given as a plain path or a file:// location."""
    path = location.removeprefix("file://")
    try:
        with open(path, "rb") as handle:
            return handle.read().decode("utf-8", errors="replace")
    except OSError as exc:
        raise err_reading_local_file(exc) from exc


def get_latest_release_tags_sorted(org: str, repo: str) -> list[str]:
    """Return the release tags listed on a repository's releases page, sorted."""
    url = f"https://github.com/{org}/{repo}/releases"
    try:
        with requests.get(url) as response:
            if response.status_code != 200:
                raise err_getting_latest_release_tag(
                    ValueError(f"unexpected status code {response.status_code}")
                )
            body = response.content.decode("utf-8", errors="replace")
    except requests.RequestException as exc:
        raise err_getting_latest_release_tag(exc) from exc
    matches = [match.group(0) for match in _RELEASE_TAG.finditer(body)]
    if not matches:
        raise err_getting_latest_release_tag(
            ValueError("no release found in this repository")
        )
    versions = [match.replace("/releases/tag/", "").replace('"', "") for match in matches]
    return sort_dotted_strings_by_digits(versions)


def contains(items: Iterable[Any], element: Any) -> bool:
    """Tell whether element is among items."""
    return any(item == element for item in items)


def cast(value: Any, expected_type: type) -> Any:
    """Return value if it is of expected_type, raising a type-cast error otherwise."""
    if value is None:
        raise err_type_cast(TypeError("nil interface cannot be type casted"))
    if expected_type is int and isinstance(value, bool):
        matches = False
    else:
        matches = isinstance(value, expected_type)
    if not matches:
        raise err_type_cast(
            TypeError(f"the underlying type of the interface is {type(value).__name__}")
        )
    return value


def marshal_and_unmarshal(value: Any) -> Any:
    """Pass value through JSON and back."""
    return unmarshal(marshal(value))


def _write_new(path: str | os.PathLike[str], payload: bytes) -> None:
    try:
        handle = open(path, "wb")
    except OSError as exc:
        raise err_create_file(exc, path) from exc
    try:
        with handle:
            handle.write(payload)
    except OSError as exc:
        raise err_write_file(exc, path) from exc


def write_to_file(path: str | os.PathLike[str], content: str) -> None:
    """Create or truncate path and write content to it."""
    _write_new(path, content.encode("utf-8"))


def format_name(text: str) -> str:
    """Replace spaces with hyphens and lower the case."""
    return text.replace(" ", "-").lower()


def random_alphabets(length: int) -> str:
    """Return length random lower-case letters."""
    return "".join(random.choice(_CHARSET) for _ in range(length))


def combine_errors(errors: Iterable[BaseException], sep: str) -> Exception | None:
    """Merge errors into one whose message joins theirs with sep; None if there are none."""
    messages = [str(error) for error in errors]
    if not messages:
        return None
    return Exception(sep.join(messages))


def merge_maps(merge_into: dict[str, Any] | None, to_merge: Mapping[str, Any]) -> dict[str, Any]:
    """Copy every entry of to_merge into merge_into and return it."""
    if merge_into is None:
        merge_into = {}
    merge_into.update(to_merge)
    return merge_into


def write_yaml_to_file(path: str | os.PathLike[str], data: Any) -> None:
    """Write data to path as YAML."""
    try:
        text = yaml.safe_dump(data, sort_keys=True, allow_unicode=True)
    except yaml.YAMLError as exc:
        raise err_marshal(exc) from exc
    _write_new(path, text.encode("utf-8"))


def write_json_to_file(path: str | os.PathLike[str], data: Any) -> None:
    """Write data to path as indented JSON, each line after the first prefixed by a space."""
    text = _to_json(data, indent=1).replace("\n", "\n ")
    _write_new(path, text.encode("utf-8"))


def create_directory(path: str | os.PathLike[str]) -> None:
    """Create path and any missing parents."""
    try:
        os.makedirs(path, mode=0o755, exist_ok=True)
    except OSError as exc:
        raise err_create_dir(exc, path) from exc


def replace_spaces_and_lowercase(text: str) -> str:
    """Remove spaces and lower the case."""
    return text.replace(" ", "").lower()


def _hostname(netloc: str) -> str:
    host = netloc.rpartition("@")[2]
    if host.startswith("["):
        end = host.find("]")
        return host[1:end] if end != -1 else host[1:]
    colon = host.rfind(":")
    if colon != -1 and set(host[colon + 1:]) <= _DIGITS:
        host = host[:colon]
    return host


def extract_domain_from_url(location: str) -> str:
    """Return the last two labels of the URL's host name, such as example.com."""
    try:
        netloc = urlsplit(location).netloc
    except ValueError:
        return location
    match = _DOMAIN.search(_hostname(netloc))
    return match.group(0) if match else ""


def is_schema_empty(schema: str) -> bool:
    """Tell whether schema is a JSON object with a non-null properties entry."""
    if not schema:
        return False
    try:
        parsed = json.loads(schema)
    except json.JSONDecodeError:
        return False
    return isinstance(parsed, dict) and parsed.get("properties") is not None


def find_entity_type(content: bytes | str) -> EntityType:
    """Tell which kind of definition a JSON document is from its schemaVersion."""
    try:
        parsed = json.loads(content)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise err_unmarshal(exc) from exc
    if parsed is None:
        parsed = {}
    if not isinstance(parsed, dict):
        raise err_unmarshal(TypeError("cannot unmarshal a non-object into a map"))
    schema_version = parsed.get("schemaVersion")
    if not isinstance(schema_version, str):
        raise err_invalid_schema_version()
    if "/" in schema_version:
        schema_version = schema_version.rpartition("/")[0]
    try:
        return _SCHEMA_ENTITIES[schema_version]
    except KeyError:
        raise err_invalid_schema_version() from None