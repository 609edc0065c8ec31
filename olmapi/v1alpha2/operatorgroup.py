"""Group/version info for v1alpha2 and its OperatorGroup resource."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from olmapi.meta import (
    GROUP_NAME,
    GroupResource,
    GroupVersion,
    LabelSelector,
    ObjectMeta,
    ObjectReference,
)

GROUP_VERSION = GroupVersion(GROUP_NAME, "v1alpha2")
SCHEME_GROUP_VERSION = GROUP_VERSION

OPERATOR_GROUP_ANNOTATION_KEY = "olm.operatorGroup"
OPERATOR_GROUP_NAMESPACE_ANNOTATION_KEY = "olm.operatorNamespace"
OPERATOR_GROUP_TARGETS_ANNOTATION_KEY = "olm.targetNamespaces"
OPERATOR_GROUP_PROVIDED_APIS_ANNOTATION_KEY = "olm.providedAPIs"

OPERATOR_GROUP_KIND = "OperatorGroup"


def resource(resource: str) -> GroupResource:
    """Qualify an unqualified resource name with the v1alpha2 group."""
    return GROUP_VERSION.with_resource(resource).group_resource()


@dataclass
class OperatorGroupSpec:
    selector: LabelSelector | None = None
    target_namespaces: list[str] = field(default_factory=list)
    service_account_name: str = ""
    static_provided_apis: bool = False


@dataclass
class OperatorGroupStatus:
    namespaces: list[str] = field(default_factory=list)
    service_account_ref: ObjectReference | None = None
    last_updated: datetime | None = None


@dataclass
class OperatorGroup:
    """The unit of multitenancy for OLM managed operators."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: OperatorGroupSpec = field(default_factory=OperatorGroupSpec)
    status: OperatorGroupStatus = field(default_factory=OperatorGroupStatus)

    def build_target_namespaces(self) -> str:
        """Sort the status namespaces in place and join them with commas."""
        self.status.namespaces.sort()
        return ",".join(self.status.namespaces)

    def is_service_account_specified(self) -> bool:
        return self.spec.service_account_name != ""

    def has_service_account_synced(self) -> bool:
        return self.is_service_account_specified() and self.status.service_account_ref is not None


@dataclass
class OperatorGroupList:
    items: list[OperatorGroup] = field(default_factory=list)