"""The InstallPlan resource: a set of resources to install for operators."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any

from olmapi.meta import ConditionStatus, ObjectMeta, ObjectReference
from olmapi.v1alpha1.register import API_VERSION

INSTALL_PLAN_KIND = "InstallPlan"
INSTALL_PLAN_API_VERSION = API_VERSION

CRD_KIND = "CustomResourceDefinition"
CLUSTER_SERVICE_VERSION_KIND = "ClusterServiceVersion"


class InvalidInstallPlanError(ValueError):
    """Raised when an InstallPlan does not contain totally valid data."""

    def __init__(self, message: str = "the InstallPlan contains invalid data") -> None:
        super().__init__(message)


class Approval(str, enum.Enum):
    """The user approval policy for an InstallPlan."""

    AUTOMATIC = "Automatic"
    MANUAL = "Manual"


class InstallPlanPhase(str, enum.Enum):
    """The current status of an InstallPlan as a whole."""

    NONE = ""
    PLANNING = "Planning"
    REQUIRES_APPROVAL = "RequiresApproval"
    INSTALLING = "Installing"
    COMPLETE = "Complete"
    FAILED = "Failed"


class InstallPlanConditionType(str, enum.Enum):
    RESOLVED = "Resolved"
    INSTALLED = "Installed"


class InstallPlanConditionReason(str, enum.Enum):
    PLAN_UNKNOWN = "PlanUnknown"
    INSTALL_CHECK_FAILED = "InstallCheckFailed"
    DEPENDENCY_CONFLICT = "DependenciesConflict"
    COMPONENT_FAILED = "InstallComponentFailed"


class StepStatus(str, enum.Enum):
    """The status of a single resource tracked by an InstallPlan."""

    UNKNOWN = "Unknown"
    NOT_PRESENT = "NotPresent"
    PRESENT = "Present"
    CREATED = "Created"
    NOT_CREATED = "NotCreated"
    WAITING_FOR_API = "WaitingForApi"
    UNSUPPORTED_RESOURCE = "UnsupportedResource"


class BundleLookupConditionType(str, enum.Enum):
    PENDING = "BundleLookupPending"
    FAILED = "BundleLookupFailed"


def _text(value: Any) -> str:
    return value.value if isinstance(value, enum.Enum) else str(value)


@dataclass
class InstallPlanSpec:
    catalog_source: str = ""
    catalog_source_namespace: str = ""
    cluster_service_version_names: list[str] = field(default_factory=list)
    approval: str = ""
    approved: bool = False
    generation: int = 0


@dataclass
class InstallPlanCondition:
    """The overall status of the execution of an InstallPlan."""

    type: str = ""
    status: str = ""
    last_update_time: datetime | None = None
    last_transition_time: datetime | None = None
    reason: str = ""
    message: str = ""


@dataclass
class StepResource:
    """A resource tracked by an InstallPlan."""

    catalog_source: str = ""
    catalog_source_namespace: str = ""
    group: str = ""
    version: str = ""
    kind: str = ""
    name: str = ""
    manifest: str = ""

    def __str__(self) -> str:
        return (
            f"{self.name}[{self.group}/{self.version}/{self.kind} "
            f"({self.catalog_source}/{self.catalog_source_namespace})]"
        )


@dataclass
class Step:
    """The status of an individual step in an InstallPlan."""

    resolving: str = ""
    resource: StepResource = field(default_factory=StepResource)
    optional: bool = False
    status: str = ""

    def __str__(self) -> str:
        return f"{self.resolving}: {self.resource} ({_text(self.status)})"


@dataclass
class BundleLookupCondition:
    type: str
    status: str
    reason: str = ""
    message: str = ""
    last_update_time: datetime | None = None
    last_transition_time: datetime | None = None


@dataclass
class BundleLookup:
    """A request to pull and unpack the content of a bundle."""

    path: str = ""
    identifier: str = ""
    replaces: str = ""
    catalog_source_ref: ObjectReference | None = None
    conditions: list[BundleLookupCondition] = field(default_factory=list)
    properties: str = ""

    def get_condition(self, condition_type) -> BundleLookupCondition:
        """The condition of the given type, or one with Unknown status."""
        for cond in self.conditions:
            if cond.type == condition_type:
                return cond
        return BundleLookupCondition(type=condition_type, status=ConditionStatus.UNKNOWN)

    def remove_condition(self, condition_type) -> None:
        """Remove the first condition of the given type, if any."""
        for index, cond in enumerate(self.conditions):
            if cond.type == condition_type:
                del self.conditions[index]
                return

    def set_condition(self, cond: BundleLookupCondition) -> BundleLookupCondition:
        """Replace the condition of the same type, or append it."""
        for index, existing in enumerate(self.conditions):
            if existing.type != cond.type:
                continue
            if existing.status == cond.status:
                cond = replace(cond, last_transition_time=existing.last_transition_time)
            self.conditions[index] = cond
            return cond
        self.conditions.append(cond)
        return cond


@dataclass
class InstallPlanStatus:
    """Status of the steps required to complete installation."""

    phase: str = ""
    conditions: list[InstallPlanCondition] = field(default_factory=list)
    catalog_sources: list[str] = field(default_factory=list)
    plan: list[Step] = field(default_factory=list)
    bundle_lookups: list[BundleLookup] = field(default_factory=list)
    attenuated_service_account_ref: ObjectReference | None = None
    start_time: datetime | None = None
    message: str = ""

    def get_condition(self, condition_type) -> InstallPlanCondition:
        """The condition of the given type, or one with Unknown status."""
        for cond in self.conditions:
            if cond.type == condition_type:
                return cond
        return InstallPlanCondition(type=condition_type, status=ConditionStatus.UNKNOWN)

    def set_condition(self, cond: InstallPlanCondition) -> InstallPlanCondition:
        """Add or update a condition, using its type as the merge key."""
        for index, existing in enumerate(self.conditions):
            if existing.type != cond.type:
                continue
            if existing.status == cond.status:
                cond = replace(cond, last_transition_time=existing.last_transition_time)
            self.conditions[index] = cond
            return cond
        self.conditions.append(cond)
        return cond

    def needs_requeue(self) -> bool:
        """True if any step is waiting for its API."""
        return any(step.status == StepStatus.WAITING_FOR_API for step in self.plan)


@dataclass
class InstallPlan:
    """The installation of a set of operators."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: InstallPlanSpec = field(default_factory=InstallPlanSpec)
    status: InstallPlanStatus = field(default_factory=InstallPlanStatus)

    def ensure_catalog_source(self, source_name: str) -> None:
        """Add the catalog source to the status if it is not there yet."""
        if source_name not in self.status.catalog_sources:
            self.status.catalog_sources.append(source_name)


@dataclass
class InstallPlanList:
    items: list[InstallPlan] = field(default_factory=list)


def order_steps(steps: list[Step]) -> list[Step]:
    """Order steps: CSVs first, then CRDs, then everything else, each stably."""
    csvs = [s for s in steps if s.resource.kind == CLUSTER_SERVICE_VERSION_KIND]
    crds = [s for s in steps if s.resource.kind == CRD_KIND]
    others = [
        s for s in steps if s.resource.kind not in (CLUSTER_SERVICE_VERSION_KIND, CRD_KIND)
    ]
    return csvs + crds + others


def condition_failed(cond, reason, message: str, now: datetime | None) -> InstallPlanCondition:
    return InstallPlanCondition(
        type=cond,
        status=ConditionStatus.FALSE,
        reason=reason,
        message=message,
        last_update_time=now,
        last_transition_time=now,
    )


def condition_met(cond, now: datetime | None) -> InstallPlanCondition:
    return InstallPlanCondition(
        type=cond,
        status=ConditionStatus.TRUE,
        last_update_time=now,
        last_transition_time=now,
    )