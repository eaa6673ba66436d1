# clusternet

Helpers for running applications across a fleet of Kubernetes clusters
from a central hub. Everything works on plain Python data (dicts, lists,
strings and bytes) and does no I/O of its own.

## What is in it

- **Feeds** (`clusternet.feed`): the `Feed` dataclass for a reference to
  a resource, `format_feed`, `labels_from_feed`, `feed_matches`,
  `has_feed`, `find_obsoleted_feeds`, `parse_group_version`, and
  `feed_removal_patch`, which builds the JSON patch operations removing
  the feeds that select a given set of source labels.
- **Overrides** (`clusternet.overrides`): `apply_overrides` runs a chain
  of `OverrideConfig` values of type `OverrideType.HELM`,
  `OverrideType.JSON_PATCH` or `OverrideType.MERGE_PATCH`. The single
  steps are available too: `apply_helm_override`, `coalesce_tables`,
  `apply_json_patch` (RFC 6902) and `merge_patch` (RFC 7386). Failures
  raise `OverrideError`.
- **Shadow templates**:
  - `clusternet.shadow`: `ShadowResource` names the manifests that store
    resource templates (`manifest_name`, `legacy_manifest_name`), splits
    subresources (`resource_name`), gives the list kind and builds the
    labels of a stored manifest (`manifest_labels`).
  - `clusternet.transformer`: `transform_manifest` turns a `Manifest`
    back into the object it holds, carrying over generation, timestamps,
    resource version, UID, finalizers and the feed-protection annotation.
  - `clusternet.selectors`: `Requirement` and `Selector` for label
    selection, `list_selector` for the selector used when listing objects
    of a kind (only the `metadata.name` field selector is accepted), and
    `validate_namespace_name`.
  - `clusternet.scale`: `Scale`, `scale_from_object`, `apply_scale`,
    `scale_group_version_kind` and `check_subresource_update`, which
    refuses updates to any subresource other than `scale`.
- **Kubeconfig** (`clusternet.kubeconfig`): `KubeConfig` (with
  `to_dict` in the usual file layout), `create_kubeconfig_with_token`,
  `create_kubeconfig_for_socket_proxy_with_token`,
  `child_apiserver_proxy_url`, `child_cluster_config` (from a deployer
  secret's data) and `apply_default_rate_limiter` for a `RestConfig`.
- **Deployment** (`clusternet.deployer`): `deployable_by_agent` for a
  `SyncMode`, `generate_helm_release_name`, `parse_override_values`, and
  `apply_immutable_fields`, which copies the live values of fields named
  by `StatusCause` entries of type `FieldValueInvalid` into a resource.
- Smaller pieces: label, annotation and finalizer names
  (`clusternet.known`), string-list helpers (`clusternet.slices`),
  metadata merge patches and JSON patch operations (`clusternet.patch`),
  nested-field access (`clusternet.unstructured`), flag-name
  normalisation (`clusternet.flags`) and the `--version` flag for
  `argparse` (`clusternet.version`).

## Requirements

Python 3.10 or later. The only runtime dependency is PyYAML, used to read
override values written in YAML and to print version information as YAML.

## Examples

```python
from clusternet.feed import Feed, format_feed

format_feed(Feed(kind="Deployment", namespace="demo", name="web"))
# "Deployment demo/web"
```

```python
from clusternet.overrides import OverrideConfig, OverrideType, apply_overrides

apply_overrides(
    b'{"a":1}',
    [OverrideConfig(name="add b", type=OverrideType.MERGE_PATCH, value="b: 2")],
)
# b'{"a":1,"b":2}'
```

Blank override values are skipped; while the document is still blank the
first non-blank value becomes the document. Helm overrides win over the
current values, and a JSON patch may hold at most 10,000 operations.

```python
from clusternet.shadow import ShadowResource

ShadowResource(name="foos", kind="Foo").manifest_name("kube-system", "abc")
# "foos.kube-system.abc"
```

```python
from clusternet.kubeconfig import child_apiserver_proxy_url

child_apiserver_proxy_url("https://10.0.0.10:6443/", "a-valid-uid")
# "https://10.0.0.10:6443/apis/proxies.clusternet.io/v1alpha1/sockets/a-valid-uid/proxy/direct"
```

```python
from clusternet.flags import word_sep_normalize
from clusternet.deployer import generate_helm_release_name

word_sep_normalize("kube_config")                  # "kube-config"
generate_helm_release_name("demo", "charts", "nginx")  # "demo-charts-nginx"
```

```python
import argparse
from clusternet.version import add_version_flag, print_and_exit_if_requested

parser = argparse.ArgumentParser()
add_version_flag(parser)
args = parser.parse_args(["--version", "json"])
print_and_exit_if_requested("my-program", args.version)  # prints JSON, exits 0
```

## What it does not do

The package has no command, no server and no client. It does not connect
to any cluster or API server, store or fetch manifests, run watch
streams, rewrite request paths, trim server-populated fields from
objects, or handle shutdown signals. It prepares names, labels,
selectors, patches, kubeconfig documents and transformed objects; sending
them anywhere is up to the caller.

## Running the tests

Install the `test` extra and run pytest from the project directory.