"""Group/version info for v2 and the OperatorCondition resource."""

from __future__ import annotations

from dataclasses import dataclass, field

from olmapi.meta import GROUP_NAME, Condition, GroupResource, GroupVersion, ObjectMeta

GROUP_VERSION = GroupVersion(GROUP_NAME, "v2")
SCHEME_GROUP_VERSION = GROUP_VERSION

UPGRADEABLE = "Upgradeable"


def resource(resource: str) -> GroupResource:
    """Qualify an unqualified resource name with the v2 group."""
    return GROUP_VERSION.with_resource(resource).group_resource()


@dataclass
class OperatorConditionSpec:
    """State reported by an operator, with admin overrides."""

    service_accounts: list[str] = field(default_factory=list)
    deployments: list[str] = field(default_factory=list)
    overrides: list[Condition] = field(default_factory=list)
    conditions: list[Condition] = field(default_factory=list)


@dataclass
class OperatorConditionStatus:
    """Conditions OLM has observed."""

    conditions: list[Condition] = field(default_factory=list)


@dataclass
class OperatorCondition:
    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: OperatorConditionSpec = field(default_factory=OperatorConditionSpec)
    status: OperatorConditionStatus = field(default_factory=OperatorConditionStatus)


@dataclass
class OperatorConditionList:
    items: list[OperatorCondition] = field(default_factory=list)