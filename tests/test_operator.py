from olmapi.meta import ConditionStatus, LabelSelector, ObjectMeta, ObjectReference
from olmapi.v1.operator import (
    ComponentCondition,
    Components,
    Operator,
    OperatorList,
    OperatorStatus,
    RichReference,
)


def test_operator_defaults_have_no_components():
    operator = Operator(metadata=ObjectMeta(name="etcd"))
    assert operator.status.components is None
    assert operator.metadata.name == "etcd"


def test_rich_reference_lists_are_independent():
    first = RichReference()
    second = RichReference()
    first.conditions.append(ComponentCondition(type="Ready", status=ConditionStatus.TRUE))
    assert second.conditions == []
    assert len(first.conditions) == 1


def test_components_hold_references():
    ref = ObjectReference(kind="Deployment", namespace="ns", name="dep")
    components = Components(
        label_selector=LabelSelector(match_labels={"app": "dep"}),
        refs=[RichReference(object_reference=ref)],
    )
    operator = Operator(status=OperatorStatus(components=components))
    assert operator.status.components.refs[0].object_reference.name == "dep"
    assert operator.status.components.label_selector.match_labels == {"app": "dep"}


def test_operators_compare_by_value():
    a = Operator(metadata=ObjectMeta(name="x"))
    b = Operator(metadata=ObjectMeta(name="x"))
    assert a == b
    b.metadata.name = "y"
    assert a != b and a.metadata.name == "x"


def test_operator_list_items():
    listing = OperatorList(items=[Operator(metadata=ObjectMeta(name="a"))])
    assert [item.metadata.name for item in listing.items] == ["a"]
    assert OperatorList().items == []