import json

import pytest
import yaml

from meshkit.errors import MeshkitError
from meshkit.manifests.components import (
    Component,
    Config,
    ExtractorPaths,
    ResourceType,
    generate_components,
    get_from_manifest,
    new_crd_filter,
    remove_non_crd_values,
)

PATHS = ExtractorPaths(
    name_path="spec.names.kind",
    group_path="spec.group",
    version_path="spec.versions[0].name",
    spec_path="spec.versions[0].schema.openAPIV3Schema",
    id_path="spec.names.kind",
)


def make_crd(kind="TrafficSplit", group="split.smi-spec.io", version="v1alpha2"):
    return {
        "apiVersion": "apiextensions.k8s.io/v1",
        "kind": "CustomResourceDefinition",
        "spec": {
            "group": group,
            "names": {"kind": kind},
            "versions": [
                {
                    "name": version,
                    "schema": {
                        "openAPIV3Schema": {
                            "type": "object",
                            "properties": {"spec": {"type": "object"}},
                        }
                    },
                }
            ],
        },
    }


def split_lines(manifest):
    return [line for line in manifest.split("\n") if line]


def json_config(**kwargs):
    return Config(crd_filter=new_crd_filter(PATHS, True), extract_crds=split_lines, **kwargs)


def manifest_of(*crds):
    return "\n".join(json.dumps(crd) for crd in crds)


def test_filter_looks_up_nested_and_indexed_paths():
    crd_filter = new_crd_filter(PATHS, True)
    crd = make_crd()
    assert crd_filter.identifier_extractor(crd) == "TrafficSplit"
    assert crd_filter.version_extractor(crd) == "v1alpha2"
    assert crd_filter.group_extractor(crd) == "split.smi-spec.io"
    assert crd_filter.spec_extractor(crd)["type"] == "object"
    assert crd_filter.is_json is True


def test_filter_supports_quoted_labels():
    crd_filter = new_crd_filter(ExtractorPaths(id_path='metadata."a.b"'))
    assert crd_filter.identifier_extractor({"metadata": {"a.b": "x"}}) == "x"


def test_filter_missing_value_raises():
    crd_filter = new_crd_filter(PATHS)
    with pytest.raises(LookupError):
        crd_filter.identifier_extractor({"spec": {}})
    with pytest.raises(LookupError):
        crd_filter.version_extractor({"spec": {"versions": []}})


def test_service_mesh_definition():
    config = json_config(name="SMI", type="SMI", mesh_version="v0.1")
    component = generate_components(manifest_of(make_crd()), ResourceType.SERVICE_MESH, config)
    assert len(component.definitions) == 1
    definition = json.loads(component.definitions[0])
    assert definition["apiVersion"] == "core.oam.dev/v1alpha1"
    assert definition["kind"] == "WorkloadDefinition"
    assert definition["metadata"]["name"] == "TrafficSplit.SMI"
    assert definition["spec"]["definitionRef"]["name"] == "trafficsplit.SMI.meshery.layer5.io"
    assert definition["spec"]["metadata"] == {
        "@type": "pattern.meshery.io/mesh/workload",
        "meshVersion": "v0.1",
        "meshName": "SMI",
        "k8sAPIVersion": "split.smi-spec.io/v1alpha2",
        "k8sKind": "TrafficSplit",
    }


def test_schema_gets_readable_title_and_keeps_spec():
    component = generate_components(manifest_of(make_crd()), ResourceType.SERVICE_MESH, json_config())
    schema = json.loads(component.schemas[0])
    assert schema["title"] == "Traffic Split"
    assert schema["properties"] == {"spec": {"type": "object"}}
    assert schema["type"] == "object"


def test_k8s_definition():
    config = json_config(k8s_version="v1.28.4")
    crd = make_crd(kind="Pod", group="")
    definition = json.loads(generate_components(manifest_of(crd), ResourceType.K8S, config).definitions[0])
    assert definition["metadata"]["name"] == "Pod.K8s"
    assert definition["spec"]["definitionRef"]["name"] == "pod.k8s.meshery.layer5.io"
    assert definition["spec"]["metadata"]["k8sAPIVersion"] == "v1alpha2"
    assert definition["spec"]["metadata"]["version"] == "v1.28.4"
    assert definition["spec"]["metadata"]["@type"] == "pattern.meshery.io/k8s"


def test_meshery_definition():
    crd = make_crd(kind="Application")
    definition = json.loads(
        generate_components(manifest_of(crd), ResourceType.MESHERY, json_config()).definitions[0]
    )
    assert definition["metadata"]["name"] == "Application"
    assert definition["spec"]["definitionRef"]["name"] == "application.meshery.layer5.io"
    assert definition["spec"]["metadata"] == {"@type": "pattern.meshery.io/core"}


def test_bad_crds_are_skipped():
    broken = make_crd()
    del broken["spec"]["names"]
    manifest = "\n".join(["{not json", json.dumps(broken), json.dumps(make_crd())])
    component = generate_components(manifest, ResourceType.MESHERY, json_config())
    assert len(component.definitions) == 1
    assert len(component.schemas) == 1


def test_yaml_crds():
    config = Config(
        crd_filter=new_crd_filter(PATHS, False),
        extract_crds=lambda manifest: manifest.split("\n---\n"),
    )
    manifest = yaml.safe_dump(make_crd()) + "\n---\n" + yaml.safe_dump(make_crd(kind="HTTPRouteGroup"))
    component = generate_components(manifest, ResourceType.MESHERY, config)
    titles = [json.loads(schema)["title"] for schema in component.schemas]
    assert titles == ["Traffic Split", "HTTP Route Group"]


def test_modify_def_schema_is_applied():
    config = json_config(modify_def_schema=lambda definition, schema: (definition + "!", schema + "?"))
    component = generate_components(manifest_of(make_crd()), ResourceType.MESHERY, config)
    assert component.definitions[0].endswith("!")
    assert component.schemas[0].endswith("?")


def test_empty_manifest_gives_empty_component():
    assert generate_components("", ResourceType.MESHERY, json_config()) == Component()


def test_get_from_manifest_reads_local_file(tmp_path):
    source = tmp_path / "crds.json"
    source.write_text(manifest_of(make_crd(), make_crd(kind="TrafficTarget")))
    component = get_from_manifest(f"file://{source}", ResourceType.MESHERY, json_config())
    names = [json.loads(d)["metadata"]["name"] for d in component.definitions]
    assert names == ["TrafficSplit", "TrafficTarget"]


def test_get_from_manifest_rejects_unknown_protocol():
    with pytest.raises(MeshkitError):
        get_from_manifest("ftp://example.com/crds", ResourceType.MESHERY, json_config())


def test_remove_non_crd_values():
    assert remove_non_crd_values(["", " ", "null", "{}", "a"]) == ["{}", "a"]