import pytest

from olmapi.meta import GroupVersion, ObjectMeta, ObjectReference
from olmapi.reference import Scheme, get_reference, install
from olmapi.v1.olmconfig import SCHEME_GROUP_VERSION as V1_GV
from olmapi.v1.operatorgroup import OperatorGroup
from olmapi.v1alpha1.catalogsource import CatalogSource
from olmapi.v1alpha1.clusterserviceversion import ClusterServiceVersion
from olmapi.v1alpha1.installplan import InstallPlan
from olmapi.v1alpha1.register import SCHEME_GROUP_VERSION as V1ALPHA1_GV
from olmapi.v1alpha1.subscription import Subscription


def build_self_link(group_version, plural, namespace, name):
    if namespace == "":
        return f"/apis/{group_version}/{plural}/{name}"
    return f"/apis/{group_version}/namespaces/{namespace}/{plural}/{name}"


def _meta(name, gv, plural):
    return ObjectMeta(
        namespace="ns",
        name=name,
        uid="uid",
        self_link=build_self_link(str(gv), plural, "ns", name),
    )


def test_nil_object():
    with pytest.raises(ValueError, match="can't reference a nil object"):
        get_reference(None)


@pytest.mark.parametrize(
    "obj, kind, api_version, name",
    [
        (
            ClusterServiceVersion(metadata=_meta("csv", V1ALPHA1_GV, "clusterserviceversions")),
            "ClusterServiceVersion",
            str(V1ALPHA1_GV),
            "csv",
        ),
        (
            InstallPlan(metadata=_meta("ip", V1ALPHA1_GV, "installplans")),
            "InstallPlan",
            str(V1ALPHA1_GV),
            "ip",
        ),
        (
            Subscription(metadata=_meta("sub", V1ALPHA1_GV, "subscriptions")),
            "Subscription",
            str(V1ALPHA1_GV),
            "sub",
        ),
        (
            CatalogSource(metadata=_meta("catsrc", V1ALPHA1_GV, "catalogsources")),
            "CatalogSource",
            str(V1ALPHA1_GV),
            "catsrc",
        ),
        (
            OperatorGroup(metadata=_meta("og", V1_GV, "operatorgroups")),
            "OperatorGroup",
            str(V1_GV),
            "og",
        ),
    ],
)
def test_get_reference(obj, kind, api_version, name):
    assert get_reference(obj) == ObjectReference(
        namespace="ns", name=name, uid="uid", kind=kind, api_version=api_version
    )


def test_installed_kinds_carry_group_versions():
    scheme = Scheme()
    install(scheme)
    csv_kind = scheme.object_kind(ClusterServiceVersion())
    assert (csv_kind.group, csv_kind.version) == ("operators.coreos.com", "v1alpha1")
    og_kind = scheme.object_kind(OperatorGroup())
    assert (og_kind.group, og_kind.version) == ("operators.coreos.com", "v1")


def test_reference_without_self_link_uses_registered_version():
    csv = ClusterServiceVersion(metadata=ObjectMeta(name="csv", namespace="ns", uid="uid"))
    ref = get_reference(csv)
    assert ref.api_version == str(V1ALPHA1_GV)
    assert ref.kind == "ClusterServiceVersion"


def test_unregistered_type_raises():
    class Unknown:
        metadata = ObjectMeta(name="x")

    with pytest.raises(ValueError, match="no kind is registered"):
        get_reference(Unknown())


def test_install_sets_version_priority():
    scheme = Scheme()
    install(scheme)
    assert scheme.prioritized_versions("operators.coreos.com") == ["v1", "v1alpha2", "v1alpha1"]
    assert scheme.object_kind(Subscription()).kind == "Subscription"
    assert scheme.object_kind(Subscription()).version == "v1alpha1"


def test_set_version_priority_rejects_mixed_groups():
    scheme = Scheme()
    with pytest.raises(ValueError):
        scheme.set_version_priority(GroupVersion("a", "v1"), GroupVersion("b", "v1"))


def test_prioritized_versions_includes_unprioritized_registrations():
    scheme = Scheme()
    scheme.add_known_types(GroupVersion("g", "v2"), Subscription)
    scheme.add_known_types(GroupVersion("g", "v1"), InstallPlan)
    scheme.set_version_priority(GroupVersion("g", "v1"))
    assert scheme.prioritized_versions("g") == ["v1", "v2"]
    assert scheme.prioritized_versions("other") == []