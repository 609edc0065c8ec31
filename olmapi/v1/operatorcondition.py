"""The v1 OperatorCondition resource."""

from __future__ import annotations

from dataclasses import dataclass, field

from olmapi.meta import Condition, ObjectMeta

UPGRADEABLE = "Upgradeable"


@dataclass
class OperatorConditionSpec:
    """State conveyed by a cluster admin, possibly overriding the operator."""

    service_accounts: list[str] = field(default_factory=list)
    deployments: list[str] = field(default_factory=list)
    overrides: list[Condition] = field(default_factory=list)


@dataclass
class OperatorConditionStatus:
    conditions: list[Condition] = field(default_factory=list)


@dataclass
class OperatorCondition:
    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: OperatorConditionSpec = field(default_factory=OperatorConditionSpec)
    status: OperatorConditionStatus = field(default_factory=OperatorConditionStatus)


@dataclass
class OperatorConditionList:
    items: list[OperatorCondition] = field(default_factory=list)