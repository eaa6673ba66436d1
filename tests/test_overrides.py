import json

import pytest

from clusternet.overrides import (
    OverrideConfig,
    OverrideError,
    OverrideType,
    apply_helm_override,
    apply_json_patch,
    apply_overrides,
    coalesce_tables,
    merge_patch,
)

NAMESPACE_YAML = """
metadata:
    namespace: test2
"""

REMOVE_LABEL_YAML = """
metadata:
  labels:
    key: null
"""

HELM_DATA_YAML = """
address:
  planet: Earth
  street: 234 Spouter Inn Ct.
hole: black
"""

HELM_WANT = {
    "kind": "Guess",
    "address": {
        "city": "Nantucket",
        "country": "US",
        "planet": "Earth",
        "state": "MA",
        "street": "234 Spouter Inn Ct.",
    },
    "boat": "fighter",
    "details": {"friends": ["Tashtego"]},
    "hole": "black",
    "name": "Ishmael",
}

HELM_ORIGINAL = b"""{
    "kind": "Guess",
    "address": {
        "city": "Nantucket",
        "street": "123 Spouter Inn Ct."
    },
    "boat": "pequod",
    "details": {
        "friends": ["Tashtego"]
    },
    "name": "Ishmael"
}"""

POD_ORIGINAL = b"""{
    "apiVersion": "v1",
    "kind": "Pod",
    "metadata": {
        "name": "pod",
        "labels": {"app": "nginx"}
    },
    "spec": {
        "containers": [{
            "name":  "nginx",
            "image": "nginx:latest"
        }]
    }
}"""

POD_WANT = {
    "apiVersion": "v1",
    "kind": "Pod",
    "metadata": {
        "name": "pod",
        "namespace": "test2",
        "labels": {"app": "nginx", "foo": "bar"},
    },
    "spec": {
        "containers": [
            {"name": "nginx", "image": "nginx:1.20.1"},
            {"name": "injected-container", "image": "redis:6.2.5"},
        ]
    },
}


def test_apply_overrides_helm():
    overrides = [
        OverrideConfig("empty override", "", OverrideType.HELM),
        OverrideConfig(
            "add/update value - json format",
            '{"address":{"country":"US","state":"MA"},"boat":"fighter"}',
            OverrideType.HELM,
        ),
        OverrideConfig("empty override with whitespaces", "   ", OverrideType.HELM),
        OverrideConfig("add/update value - yaml format", HELM_DATA_YAML, OverrideType.HELM),
    ]
    assert json.loads(apply_overrides(HELM_ORIGINAL, overrides)) == HELM_WANT


def test_apply_overrides_helm_with_empty_original():
    overrides = [
        OverrideConfig("empty override", "  ", OverrideType.HELM),
        OverrideConfig(
            "initial override",
            '{"kind":"Guess","address":{"city":"Nantucket","street":"123 Spouter Inn Ct."},'
            '"boat":"pequod","details":{"friends":["Tashtego"]},"name":"Ishmael"}',
            OverrideType.HELM,
        ),
        OverrideConfig(
            "add/update value - json format",
            '{"address":{"country":"US","state":"MA"},"boat":"fighter"}',
            OverrideType.HELM,
        ),
        OverrideConfig("empty override with whitespaces", "   ", OverrideType.HELM),
        OverrideConfig("add/update value - yaml format", HELM_DATA_YAML, OverrideType.HELM),
    ]
    assert json.loads(apply_overrides(b"", overrides)) == HELM_WANT


def test_apply_overrides_json_patch_and_merge_patch():
    overrides = [
        OverrideConfig("empty override with whitespaces", "   ", OverrideType.MERGE_PATCH),
        OverrideConfig(
            "add namespace - json format",
            '{"metadata":{"namespace":"test"}}',
            OverrideType.MERGE_PATCH,
        ),
        OverrideConfig("empty override with whitespaces", "   ", OverrideType.JSON_PATCH),
        OverrideConfig("add namespace - yaml format", NAMESPACE_YAML, OverrideType.MERGE_PATCH),
        OverrideConfig(
            "replace container image - 1",
            '[{"op": "replace", "path": "/spec/containers/0/image", "value":"nginx:1.21.1"}]',
            OverrideType.JSON_PATCH,
        ),
        OverrideConfig(
            "add and update labels - json format",
            '{"metadata":{"labels":{"foo":"bar","xyz":"def","key":"value"}}}',
            OverrideType.MERGE_PATCH,
        ),
        OverrideConfig(
            "remove labels - json format",
            '{"metadata":{"labels":{"xyz":null}}}',
            OverrideType.MERGE_PATCH,
        ),
        OverrideConfig("remove labels - yaml format", REMOVE_LABEL_YAML, OverrideType.MERGE_PATCH),
        OverrideConfig(
            "replace container image - 2",
            '[{"op":"replace","path":"/spec/containers/0/image","value":"nginx:1.20.1"}]',
            OverrideType.JSON_PATCH,
        ),
        OverrideConfig(
            "inject new container - json format",
            '[{"op":"add","path": "/spec/containers/1",'
            '"value":{"name":"injected-container","image":"redis:6.2.5"}}]',
            OverrideType.JSON_PATCH,
        ),
    ]
    assert json.loads(apply_overrides(POD_ORIGINAL, overrides)) == POD_WANT


def test_blank_overrides_leave_original_untouched():
    overrides = [OverrideConfig("blank", "  ", OverrideType.MERGE_PATCH)]
    assert apply_overrides(POD_ORIGINAL, overrides) == POD_ORIGINAL


def test_unsupported_override_type():
    overrides = [OverrideConfig("bad", '{"a": 1}', "Strategic")]
    with pytest.raises(OverrideError, match="unsupported OverrideType Strategic"):
        apply_overrides(b'{"b": 2}', overrides)


def test_failed_override_names_the_config():
    overrides = [
        OverrideConfig("broken", '[{"op":"remove","path":"/missing"}]', OverrideType.JSON_PATCH)
    ]
    with pytest.raises(OverrideError, match="failed to apply OverrideConfig broken"):
        apply_overrides(b'{"a": 1}', overrides)


def test_invalid_yaml_override():
    overrides = [OverrideConfig("bad", "a: [1, 2", OverrideType.HELM)]
    with pytest.raises(OverrideError, match="failed to convert patch"):
        apply_overrides(b'{"a": 1}', overrides)


def test_json_patch_too_many_operations():
    patch = json.dumps([{"op": "test", "path": "/a", "value": 1}] * 10001)
    with pytest.raises(OverrideError, match="maximum operations"):
        apply_json_patch(b'{"a": 1}', patch)


def test_json_patch_move_copy_and_append():
    patch = json.dumps(
        [
            {"op": "copy", "from": "/a", "path": "/b"},
            {"op": "move", "from": "/a", "path": "/c"},
            {"op": "add", "path": "/list/-", "value": 3},
            {"op": "test", "path": "/c", "value": 1},
        ]
    )
    result = json.loads(apply_json_patch(b'{"a": 1, "list": [1, 2]}', patch))
    assert result == {"b": 1, "c": 1, "list": [1, 2, 3]}


def test_json_patch_failed_test_operation():
    with pytest.raises(OverrideError):
        apply_json_patch(b'{"a": 1}', '[{"op":"test","path":"/a","value":2}]')


def test_merge_patch_removes_nulls():
    result = json.loads(merge_patch(b'{"a": {"b": 1, "c": 2}}', b'{"a": {"b": null}, "d": {"e": null}}'))
    assert result == {"a": {"c": 2}, "d": {}}


def test_coalesce_tables_precedence_and_deletion():
    dst = {"keep": "dst", "drop": None, "table": {"x": 1}}
    src = {"keep": "src", "drop": "src", "table": {"x": 2, "y": 3}, "new": 4}
    result = coalesce_tables(dst, src)
    assert result is dst
    assert result == {"keep": "dst", "table": {"x": 1, "y": 3}, "new": 4}


def test_coalesce_tables_with_none():
    src = {"a": 1}
    assert coalesce_tables(None, src) is src


def test_helm_override_rejects_non_object():
    with pytest.raises(OverrideError):
        apply_helm_override(b'{"a": 1}', b"[1, 2]")