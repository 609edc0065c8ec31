"""The v1 Operator resource and its component tracking types."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from olmapi.meta import LabelSelector, ObjectMeta, ObjectReference


@dataclass
class ComponentCondition:
    """Latest observed state of a single operator component."""

    type: str
    status: str
    reason: str = ""
    message: str = ""
    last_update_time: datetime | None = None
    last_transition_time: datetime | None = None


@dataclass
class RichReference:
    """A reference to a resource enriched with its status conditions."""

    object_reference: ObjectReference | None = None
    conditions: list[ComponentCondition] = field(default_factory=list)


@dataclass
class Components:
    """Resources that compose an operator."""

    label_selector: LabelSelector | None = None
    refs: list[RichReference] = field(default_factory=list)


@dataclass
class OperatorSpec:
    pass


@dataclass
class OperatorStatus:
    components: Components | None = None


@dataclass
class Operator:
    """A cluster operator."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: OperatorSpec = field(default_factory=OperatorSpec)
    status: OperatorStatus = field(default_factory=OperatorStatus)


@dataclass
class OperatorList:
    items: list[Operator] = field(default_factory=list)