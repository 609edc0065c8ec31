from olmapi.meta import GroupResource, ObjectReference
from olmapi.v1alpha2.operatorgroup import (
    OperatorGroup,
    OperatorGroupSpec,
    OperatorGroupStatus,
    resource,
)


def test_resource_is_group_qualified():
    assert resource("operatorgroups") == GroupResource("operators.coreos.com", "operatorgroups")


def test_build_target_namespaces_sorts_in_place():
    og = OperatorGroup(status=OperatorGroupStatus(namespaces=["ns-b", "ns-a", "ns-c"]))
    result = og.build_target_namespaces()
    assert result.split(",") == sorted(["ns-b", "ns-a", "ns-c"])
    assert og.status.namespaces == sorted(["ns-b", "ns-a", "ns-c"])


def test_build_target_namespaces_empty():
    assert OperatorGroup().build_target_namespaces() == ""


def test_service_account_specified():
    assert OperatorGroup().is_service_account_specified() is False
    og = OperatorGroup(spec=OperatorGroupSpec(service_account_name="sa"))
    assert og.is_service_account_specified() is True


def test_service_account_synced():
    og = OperatorGroup(spec=OperatorGroupSpec(service_account_name="sa"))
    assert og.has_service_account_synced() is False
    og.status.service_account_ref = ObjectReference(name="sa")
    assert og.has_service_account_synced() is True


def test_synced_requires_specified_account():
    og = OperatorGroup(status=OperatorGroupStatus(service_account_ref=ObjectReference(name="sa")))
    assert og.has_service_account_synced() is False