import json
import os

import pytest
import requests
import responses
import yaml

from meshkit.errors import (
    ERR_CREATE_DIR_CODE,
    ERR_CREATE_FILE_CODE,
    ERR_GET_BOOL_CODE,
    ERR_GETTING_LATEST_RELEASE_TAG_CODE,
    ERR_INVALID_PROTOCOL_CODE,
    ERR_INVALID_SCHEMA_VERSION_CODE,
    ERR_MARSHAL_CODE,
    ERR_READING_LOCAL_FILE_CODE,
    ERR_REMOTE_FILE_NOT_FOUND_CODE,
    ERR_TYPE_CAST_CODE,
    ERR_UNMARSHAL_CODE,
    MeshkitError,
)
from meshkit.general import (
    EntityType,
    cast,
    combine_errors,
    contains,
    create_directory,
    create_file,
    download_file,
    extract_domain_from_url,
    find_entity_type,
    format_name,
    get_bool,
    get_home,
    get_latest_release_tags_sorted,
    is_schema_empty,
    marshal,
    marshal_and_unmarshal,
    merge_maps,
    random_alphabets,
    read_file_source,
    read_local_file,
    read_remote_file,
    replace_spaces_and_lowercase,
    str_concat,
    transform_map_keys,
    unmarshal,
    write_json_to_file,
    write_to_file,
    write_yaml_to_file,
)

TEST_MAP_1 = {"group Priority Minimum": "sdff", "minimum Priority": 34}
TEST_MAP_2 = {
    "group Priority Minimum": {"spaced Word": "lorem epsum"},
    "minimum Priority": 34,
}
TEST_MAP_3 = {
    "properties": {
        "spec": {
            "description": "lorem epsum",
            "properties": {
                "ca Bundle": "lorem epsum",
                "group": "lorem epsum",
                "group Priority Minimum": {"Need Some Space": "lorem epsum"},
                "insecure Skip TLS Verify": "lorem epsum",
                "required": ["groupPriorityMinimum"],
            },
        }
    }
}
TEST_MAP_3_EXPECTED = {
    "properties": {
        "spec": {
            "description": "lorem epsum",
            "properties": {
                "caBundle": "lorem epsum",
                "group": "lorem epsum",
                "groupPriorityMinimum": {"NeedSomeSpace": "lorem epsum"},
                "insecureSkipTLSVerify": "lorem epsum",
                "required": ["groupPriorityMinimum"],
            },
        }
    }
}


def _strip_spaces(text):
    return text.replace(" ", "")


@pytest.mark.parametrize(
    ("data", "expected"),
    [
        (TEST_MAP_1, {"groupPriorityMinimum": "sdff", "minimumPriority": 34}),
        (
            TEST_MAP_2,
            {"groupPriorityMinimum": {"spacedWord": "lorem epsum"}, "minimumPriority": 34},
        ),
        (TEST_MAP_3, TEST_MAP_3_EXPECTED),
    ],
)
def test_transform_map_keys(data, expected):
    assert transform_map_keys(data, _strip_spaces) == expected


def test_unmarshal_trims_whitespace():
    assert unmarshal('  {"a": [1, 2]}\n') == {"a": [1, 2]}


def test_unmarshal_invalid_raises():
    with pytest.raises(MeshkitError) as info:
        unmarshal("{bad")
    assert info.value.code == ERR_UNMARSHAL_CODE


@pytest.mark.parametrize("literal", ["1", "t", "T", "TRUE", "true", "True"])
def test_get_bool_true(literal):
    assert get_bool(literal) is True


@pytest.mark.parametrize("literal", ["0", "f", "F", "FALSE", "false", "False"])
def test_get_bool_false(literal):
    assert get_bool(literal) is False


def test_get_bool_invalid():
    with pytest.raises(MeshkitError) as info:
        get_bool("yes")
    assert info.value.code == ERR_GET_BOOL_CODE


def test_str_concat():
    assert str_concat("mesh", "", "ery") == "meshery"
    assert str_concat() == ""


def test_marshal_is_compact_and_sorted():
    assert marshal({"b": 1, "a": [True, None]}) == '{"a":[true,null],"b":1}'


def test_marshal_escapes_html_characters():
    text = marshal({"tag": "<a&b>"})
    assert "<" not in text and ">" not in text and "&" not in text
    assert unmarshal(text) == {"tag": "<a&b>"}


def test_marshal_rejects_unserialisable():
    with pytest.raises(MeshkitError) as info:
        marshal({"x": object()})
    assert info.value.code == ERR_MARSHAL_CODE


def test_marshal_and_unmarshal_round_trip():
    value = {"name": "mesh", "items": [1, 2.5, "x"], "nested": {"ok": False}}
    assert marshal_and_unmarshal(value) == value


def test_download_file_writes_body(tmp_path):
    target = tmp_path / "out.bin"
    with responses.RequestsMock() as mock:
        mock.add(responses.GET, "http://files.example.com/a", body=b"payload", status=200)
        download_file(target, "http://files.example.com/a")
    assert target.read_bytes() == b"payload"


def test_download_file_bad_status(tmp_path):
    target = tmp_path / "out.bin"
    with responses.RequestsMock() as mock:
        mock.add(responses.GET, "http://files.example.com/a", status=500)
        with pytest.raises(requests.HTTPError):
            download_file(target, "http://files.example.com/a")
    assert not target.exists()


def test_get_home(monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("USERPROFILE", str(tmp_path))
    assert get_home() == str(tmp_path)


def test_create_file_appends(tmp_path):
    create_file(b"one", "notes.txt", tmp_path)
    create_file("two", "notes.txt", tmp_path)
    assert (tmp_path / "notes.txt").read_bytes() == b"onetwo"


def test_read_file_source_local(tmp_path):
    target = tmp_path / "manifest.yaml"
    target.write_text("kind: Pod\n")
    assert read_file_source("file://" + str(target)) == "kind: Pod\n"


def test_read_file_source_invalid_protocol():
    with pytest.raises(MeshkitError) as info:
        read_file_source("ftp://example.com/file")
    assert info.value.code == ERR_INVALID_PROTOCOL_CODE


def test_read_file_source_remote():
    with responses.RequestsMock() as mock:
        mock.add(responses.GET, "https://example.com/m.yaml", body="kind: Pod")
        assert read_file_source("https://example.com/m.yaml") == "kind: Pod"


def test_read_remote_file_not_found():
    with responses.RequestsMock() as mock:
        mock.add(responses.GET, "https://example.com/missing", status=404)
        with pytest.raises(MeshkitError) as info:
            read_remote_file("https://example.com/missing")
    assert info.value.code == ERR_REMOTE_FILE_NOT_FOUND_CODE


def test_read_local_file_missing(tmp_path):
    with pytest.raises(MeshkitError) as info:
        read_local_file(str(tmp_path / "absent"))
    assert info.value.code == ERR_READING_LOCAL_FILE_CODE


def test_latest_release_tags_sorted():
    body = (
        '<a href="/org/repo/releases/tag/v1.10.0">x</a>'
        '<a href="/org/repo/releases/tag/v0.9.1">y</a>'
        '<a href="/org/repo/releases/tag/v1.2.0">z</a>'
    )
    with responses.RequestsMock() as mock:
        mock.add(responses.GET, "https://github.com/org/repo/releases", body=body)
        tags = get_latest_release_tags_sorted("org", "repo")
    assert tags == ["v0.9.1", "v1.2.0", "v1.10.0"]


def test_latest_release_tags_none_found():
    with responses.RequestsMock() as mock:
        mock.add(responses.GET, "https://github.com/org/repo/releases", body="<html></html>")
        with pytest.raises(MeshkitError) as info:
            get_latest_release_tags_sorted("org", "repo")
    assert info.value.code == ERR_GETTING_LATEST_RELEASE_TAG_CODE


def test_latest_release_tags_bad_status():
    with responses.RequestsMock() as mock:
        mock.add(responses.GET, "https://github.com/org/repo/releases", status=404)
        with pytest.raises(MeshkitError) as info:
            get_latest_release_tags_sorted("org", "repo")
    assert info.value.code == ERR_GETTING_LATEST_RELEASE_TAG_CODE


def test_contains():
    assert contains(["a", "b"], "b") is True
    assert contains(["a", "b"], "c") is False
    assert contains([], 1) is False


def test_cast_success():
    assert cast("mesh", str) == "mesh"
    assert cast(5, int) == 5


@pytest.mark.parametrize(("value", "kind"), [(None, str), ("x", int), (True, int)])
def test_cast_failure(value, kind):
    with pytest.raises(MeshkitError) as info:
        cast(value, kind)
    assert info.value.code == ERR_TYPE_CAST_CODE


def test_write_to_file_round_trip(tmp_path):
    target = tmp_path / "out.txt"
    target.write_text("old content that is long")
    write_to_file(target, "new")
    assert target.read_text() == "new"


def test_write_to_file_missing_directory(tmp_path):
    with pytest.raises(MeshkitError) as info:
        write_to_file(tmp_path / "nope" / "out.txt", "x")
    assert info.value.code == ERR_CREATE_FILE_CODE


def test_format_name():
    assert format_name("Service Mesh Pattern") == "service-mesh-pattern"


def test_replace_spaces_and_lowercase():
    assert replace_spaces_and_lowercase("Service Mesh") == "servicemesh"


def test_random_alphabets():
    text = random_alphabets(40)
    assert len(text) == 40
    assert set(text) <= set("abcdefghijklmnopqrstuvwxyz")
    assert random_alphabets(0) == ""


def test_combine_errors():
    combined = combine_errors([ValueError("first"), KeyError("second")], "; ")
    assert str(combined) == "first; 'second'"
    assert combine_errors([], "; ") is None


def test_merge_maps():
    target = {"a": 1}
    result = merge_maps(target, {"b": 2, "a": 3})
    assert result is target
    assert result == {"a": 3, "b": 2}
    assert merge_maps(None, {"c": 4}) == {"c": 4}


def test_write_yaml_to_file_round_trip(tmp_path):
    data = {"name": "mesh", "ports": [80, 443], "meta": {"enabled": True}}
    target = tmp_path / "out.yaml"
    write_yaml_to_file(target, data)
    assert yaml.safe_load(target.read_text()) == data


def test_write_json_to_file_format(tmp_path):
    target = tmp_path / "out.json"
    write_json_to_file(target, {"a": 1})
    assert target.read_text() == '{\n  "a": 1\n }'


def test_write_json_to_file_round_trip(tmp_path):
    data = {"b": [1, {"c": None}], "a": "<x>"}
    target = tmp_path / "out.json"
    write_json_to_file(target, data)
    assert json.loads(target.read_text()) == data


def test_create_directory(tmp_path):
    target = tmp_path / "a" / "b" / "c"
    create_directory(target)
    create_directory(target)
    assert target.is_dir()


def test_create_directory_under_file(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("x")
    with pytest.raises(MeshkitError) as info:
        create_directory(os.path.join(blocker, "sub"))
    assert info.value.code == ERR_CREATE_DIR_CODE


@pytest.mark.parametrize(
    ("location", "expected"),
    [
        ("https://www.example.com/path?q=1", "example.com"),
        ("http://api.example.com:8080/", "example.com"),
        ("not a url", ""),
    ],
)
def test_extract_domain_from_url(location, expected):
    assert extract_domain_from_url(location) == expected


@pytest.mark.parametrize(
    ("schema", "expected"),
    [
        ("", False),
        ("not json", False),
        ('{"type": "object"}', False),
        ('{"properties": null}', False),
        ('{"properties": {"name": {"type": "string"}}}', True),
    ],
)
def test_is_schema_empty(schema, expected):
    assert is_schema_empty(schema) is expected


@pytest.mark.parametrize(
    ("version", "expected"),
    [
        ("components.meshery.io/v1beta1", EntityType.COMPONENT_DEFINITION),
        ("relationships.meshery.io/v1alpha2", EntityType.RELATIONSHIP_DEFINITION),
        ("models.meshery.io/v1beta1", EntityType.MODEL),
        ("policies.meshery.io", EntityType.POLICY_DEFINITION),
    ],
)
def test_find_entity_type(version, expected):
    content = json.dumps({"schemaVersion": version}).encode()
    assert find_entity_type(content) is expected


@pytest.mark.parametrize(
    "content",
    [b'{"schemaVersion": "designs.meshery.io/v1"}', b'{"schemaVersion": 3}', b"{}"],
)
def test_find_entity_type_invalid_version(content):
    with pytest.raises(MeshkitError) as info:
        find_entity_type(content)
    assert info.value.code == ERR_INVALID_SCHEMA_VERSION_CODE


def test_find_entity_type_invalid_json():
    with pytest.raises(MeshkitError) as info:
        find_entity_type(b"{oops")
    assert info.value.code == ERR_UNMARSHAL_CODE