import pytest

from clusternet.scale import (
    Scale,
    apply_scale,
    check_subresource_update,
    scale_from_object,
    scale_group_version_kind,
)


def _deployment(replicas=3, status_replicas=2):
    return {
        "apiVersion": "apps/v1",
        "kind": "Deployment",
        "metadata": {
            "name": "web",
            "namespace": "demo",
            "uid": "uid-1",
            "resourceVersion": "42",
            "creationTimestamp": "2021-11-01T08:12:43Z",
        },
        "spec": {"replicas": replicas, "template": {"spec": {}}},
        "status": {"replicas": status_replicas},
    }


@pytest.mark.parametrize(
    "group_version, expected",
    [
        ("extensions/v1beta1", ("extensions", "v1beta1", "Scale")),
        ("apps/v1beta1", ("apps", "v1beta1", "Scale")),
        ("apps/v1beta2", ("apps", "v1beta2", "Scale")),
        ("apps/v1", ("autoscaling", "v1", "Scale")),
        ("v1", ("autoscaling", "v1", "Scale")),
        (("apps", "v1beta2"), ("apps", "v1beta2", "Scale")),
    ],
)
def test_scale_group_version_kind(group_version, expected):
    assert scale_group_version_kind(group_version) == expected


def test_scale_from_object_reads_metadata_and_replicas():
    scale = scale_from_object(_deployment())
    assert scale == Scale(
        name="web",
        namespace="demo",
        uid="uid-1",
        resource_version="42",
        creation_timestamp="2021-11-01T08:12:43Z",
        spec_replicas=3,
        status_replicas=2,
    )


def test_scale_from_object_missing_replicas_are_zero():
    obj = _deployment()
    del obj["spec"]["replicas"]
    del obj["status"]
    scale = scale_from_object(obj)
    assert scale.spec_replicas == 0
    assert scale.status_replicas == 0
    assert scale.name == "web"


def test_scale_from_object_malformed_replicas_are_zero():
    obj = _deployment(replicas="three", status_replicas=True)
    scale = scale_from_object(obj)
    assert (scale.spec_replicas, scale.status_replicas) == (0, 0)


def test_scale_from_object_spec_not_mapping():
    obj = _deployment()
    obj["spec"] = ["not", "a", "mapping"]
    assert scale_from_object(obj).spec_replicas == 0


def test_scale_from_object_wraps_to_int32():
    obj = _deployment(replicas=2**31)
    assert scale_from_object(obj).spec_replicas == -(2**31)


def test_apply_scale_sets_spec_replicas_on_copy():
    original = _deployment(replicas=3)
    updated = apply_scale(original, Scale(name="web", spec_replicas=7))
    assert updated["spec"]["replicas"] == 7
    assert original["spec"]["replicas"] == 3
    assert updated["metadata"] == original["metadata"]
    assert updated["status"] == original["status"]


def test_apply_scale_round_trip():
    obj = _deployment(replicas=1)
    scale = scale_from_object(obj)
    scale.spec_replicas = 5
    updated = apply_scale(obj, scale)
    assert scale_from_object(updated).spec_replicas == 5
    assert scale_from_object(updated).status_replicas == scale.status_replicas


def test_apply_scale_creates_spec_when_missing():
    obj = {"metadata": {"name": "x"}}
    assert apply_scale(obj, Scale(spec_replicas=4))["spec"] == {"replicas": 4}


def test_apply_scale_rejects_none():
    with pytest.raises(ValueError, match="nil update passed to Scale"):
        apply_scale(_deployment(), None)


def test_apply_scale_rejects_other_types():
    with pytest.raises(TypeError, match="expected input object type to be Scale"):
        apply_scale(_deployment(), {"spec": {"replicas": 1}})


def test_apply_scale_spec_not_mapping():
    obj = _deployment()
    obj["spec"] = "broken"
    with pytest.raises(TypeError):
        apply_scale(obj, Scale(spec_replicas=1))


def test_scale_to_dict_layout():
    data = scale_from_object(_deployment()).to_dict()
    assert data["kind"] == "Scale"
    assert data["apiVersion"] == "autoscaling/v1"
    assert data["spec"] == {"replicas": 3}
    assert data["metadata"]["namespace"] == "demo"


@pytest.mark.parametrize(
    "resource_name, expected",
    [
        ("deployments", ("deployments", "")),
        ("deployments/scale", ("deployments", "scale")),
    ],
)
def test_check_subresource_update_allowed(resource_name, expected):
    assert check_subresource_update(resource_name) == expected


def test_check_subresource_update_rejects_status():
    with pytest.raises(ValueError) as excinfo:
        check_subresource_update("deployments/status")
    assert str(excinfo.value) == (
        "deployments are considered as templates, which make no sense to update "
        "templates' status"
    )