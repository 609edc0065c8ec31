from olmapi.meta import GROUP_NAME, Condition, GroupResource
from olmapi.v2.operatorcondition import (
    SCHEME_GROUP_VERSION,
    UPGRADEABLE,
    OperatorCondition,
    OperatorConditionList,
    OperatorConditionSpec,
    resource,
)


def test_resource_is_group_qualified():
    assert resource("operatorconditions") == GroupResource(GROUP_NAME, "operatorconditions")


def test_scheme_group_version_with_resource():
    gvr = SCHEME_GROUP_VERSION.with_resource("operatorconditions")
    assert gvr.version == "v2"
    assert gvr.group_resource() == GroupResource("operators.coreos.com", "operatorconditions")


def test_defaults_are_independent():
    first = OperatorCondition()
    second = OperatorCondition()
    first.spec.conditions.append(Condition(type=UPGRADEABLE, status="True"))
    assert second.spec.conditions == []
    assert first.status.conditions == []


def test_spec_keeps_conditions_and_overrides_apart():
    override = Condition(type=UPGRADEABLE, status="False", reason="Maintenance")
    reported = Condition(type=UPGRADEABLE, status="True")
    spec = OperatorConditionSpec(overrides=[override], conditions=[reported])
    cond = OperatorCondition(spec=spec)
    assert cond.spec.overrides[0].status == "False"
    assert cond.spec.conditions[0].status == "True"


def test_list_holds_items():
    items = [OperatorCondition(), OperatorCondition()]
    assert OperatorConditionList(items=items).items == items
    assert OperatorConditionList().items == []