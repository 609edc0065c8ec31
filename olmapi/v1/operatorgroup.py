"""The v1 OperatorGroup resource."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime

from olmapi.meta import Condition, LabelSelector, ObjectMeta, ObjectReference

OPERATOR_GROUP_ANNOTATION_KEY = "olm.operatorGroup"
OPERATOR_GROUP_NAMESPACE_ANNOTATION_KEY = "olm.operatorNamespace"
OPERATOR_GROUP_TARGETS_ANNOTATION_KEY = "olm.targetNamespaces"
OPERATOR_GROUP_PROVIDED_APIS_ANNOTATION_KEY = "olm.providedAPIs"

OPERATOR_GROUP_KIND = "OperatorGroup"

OPERATOR_GROUP_LABEL_PREFIX = "olm.operatorgroup.uid/"

OPERATOR_GROUP_SERVICE_ACCOUNT_CONDITION = "OperatorGroupServiceAccount"
MULTIPLE_OPERATOR_GROUP_CONDITION = "MultipleOperatorGroup"
MULTIPLE_OPERATOR_GROUPS_REASON = "MultipleOperatorGroupsFound"
OPERATOR_GROUP_SERVICE_ACCOUNT_REASON = "ServiceAccountNotFound"


class UpgradeStrategy(str, enum.Enum):
    """How OLM moves operators between versions in a namespace."""

    DEFAULT = "Default"
    UNSAFE_FAIL_FORWARD = "TechPreviewUnsafeFailForward"


@dataclass
class OperatorGroupSpec:
    selector: LabelSelector | None = None
    target_namespaces: list[str] = field(default_factory=list)
    service_account_name: str = ""
    static_provided_apis: bool = False
    upgrade_strategy: str = ""


@dataclass
class OperatorGroupStatus:
    namespaces: list[str] = field(default_factory=list)
    service_account_ref: ObjectReference | None = None
    last_updated: datetime | None = None
    conditions: list[Condition] = field(default_factory=list)


@dataclass
class OperatorGroup:
    """The unit of multitenancy for OLM managed operators."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: OperatorGroupSpec = field(default_factory=OperatorGroupSpec)
    status: OperatorGroupStatus = field(default_factory=OperatorGroupStatus)

    def build_target_namespaces(self) -> str:
        """Target namespaces as a sorted, comma-delimited string."""
        return ",".join(sorted(self.status.namespaces))

    def upgrade_strategy(self) -> UpgradeStrategy:
        if self.spec.upgrade_strategy == UpgradeStrategy.UNSAFE_FAIL_FORWARD.value:
            return UpgradeStrategy.UNSAFE_FAIL_FORWARD
        return UpgradeStrategy.DEFAULT

    def is_service_account_specified(self) -> bool:
        return self.spec.service_account_name != ""

    def has_service_account_synced(self) -> bool:
        return self.is_service_account_specified() and self.status.service_account_ref is not None

    def og_label_key_and_value(self) -> tuple[str, str]:
        """Label key and value to apply to the group's namespaces.

        Raises ValueError when the group has no UID.
        """
        uid = self.metadata.uid
        if not uid:
            raise ValueError("Missing UID")
        return f"{OPERATOR_GROUP_LABEL_PREFIX}{uid}", ""

    def namespace_label_selector(self) -> LabelSelector | None:
        """Selector for the group's namespaces; None selects everything."""
        if not self.spec.target_namespaces:
            return self.spec.selector
        key, value = self.og_label_key_and_value()
        return LabelSelector(match_labels={key: value})


@dataclass
class OperatorGroupList:
    items: list[OperatorGroup] = field(default_factory=list)


def is_operator_group_label(label: str) -> bool:
    return label.startswith(OPERATOR_GROUP_LABEL_PREFIX)