# meshkit

Helpers for tools that deal with Kubernetes-style manifests and the files
around them.

## Modules

- `meshkit.versions`: `sort_dotted_strings_by_digits` sorts version-like
  strings such as `v1.12.0-rc.1` and `stable-2.11.0` in place by their
  digits, ranking alpha < beta < rc < stable, and returns the list.
- `meshkit.manifests.components`: `generate_components` turns the CRDs of a
  manifest into workload definitions and JSON schemas, driven by a `Config`
  and a `CrdFilter` (build one from `ExtractorPaths` with `new_crd_filter`).
  `get_from_manifest` reads the manifest from an http, https or file
  location first. CRDs that cannot be parsed or lack a value are skipped.
- `meshkit.manifests.formatting`: `format_to_readable_string` turns
  identifiers such as `APIService` into titles (`API Service`);
  `deformat_readable_string` removes the spaces again;
  `remove_helm_templating` replaces `{{ ... }}` expressions in a
  multi-document YAML with a placeholder.
- `meshkit.manifests.references`: `OpenApiRefResolver.resolve_references`
  inlines `$ref` objects from a mapping of definitions.
- `meshkit.archives`: `is_zip`, `is_tar_gz` and `is_yaml` sniff a file's
  first 512 bytes; `extract_zip` and `extract_tar_gz` unpack archives;
  `process_content` calls a function on a file or on each entry of a directory.
- `meshkit.svg`: `update_svg_string` sets the width and height of the `svg`
  elements of a document.
- `meshkit.templates`: `merge_to_template` fills `{{.name}}` actions from a
  mapping or object, HTML-escaping the values.
- `meshkit.store`: `ThreadSafeStore`, a lock-guarded string-keyed store.
- `meshkit.network`: `HostPort`, `Endpoint` and `tcp_check`, which tells
  whether a TCP connection can be opened (or, given `MockOptions`, answers
  without touching the network).
- `meshkit.ids`: `new_uuid` returns a random UUID string.
- `meshkit.walker.local`: `walk_local_directory` returns every file below a
  directory, with its content, as `File` objects.
- `meshkit.walker.github`: `GithubWalker` walks a repository through the
  GitHub contents API and calls interceptors on files and directories.
- `meshkit.general`: JSON and YAML helpers, file writing, reading http,
  https and file locations, listing a repository's release tags,
  `find_entity_type` and small string helpers.
- `meshkit.errors`: `MeshkitError`, raised throughout the package, with a
  code, a `Severity`, a short description, probable causes and suggested
  remedies.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Examples

Sorting versions:

```python
from meshkit.versions import sort_dotted_strings_by_digits

sort_dotted_strings_by_digits(["v1.12.0-rc.1", "1.12.0-beta.2", "1.12.0-beta.1"])
# ['1.12.0-beta.1', '1.12.0-beta.2', 'v1.12.0-rc.1']
```

Readable titles:

```python
from meshkit.manifests.formatting import format_to_readable_string

format_to_readable_string("IPFamiliesWithIPs")  # 'IP Families With IPs'
```

Templates:

```python
from meshkit.templates import merge_to_template

merge_to_template(b"{{.namespace}}", {"namespace": "meshery"})  # b'meshery'
```

A thread-safe store:

```python
from meshkit.store import ThreadSafeStore

store = ThreadSafeStore()
store.set("answer", 42)
store.get("answer")     # 42
store.get("missing")    # raises KeyError
store.all_pairs()       # {'answer': 42}
```

Walking a local directory:

```python
from meshkit.walker.local import walk_local_directory

for file in walk_local_directory("manifests"):
    print(file.path, len(file.content))
```

Walking a GitHub repository:

```python
from meshkit.walker.github import GithubWalker

GithubWalker(
    "owner", "repo", root="manifests/**",
    file_interceptor=lambda entry: print(entry.path),
).walk()
```

## What it does not do

The package has no command-line interface. It does not clone git
repositories, render Helm charts or validate documents against a schema
registry; the repository walker works only through the GitHub contents API.