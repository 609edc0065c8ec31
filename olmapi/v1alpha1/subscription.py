"""The Subscription resource, which keeps operators up to date with catalogs."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from olmapi.meta import ConditionStatus, LabelSelector, ObjectMeta, ObjectReference
from olmapi.v1alpha1.installplan import Approval
from olmapi.v1alpha1.register import API_VERSION

SUBSCRIPTION_KIND = "Subscription"
SUBSCRIPTION_CRD_API_VERSION = API_VERSION

SUBSCRIPTION_REASON_INVALID_CATALOG = "InvalidCatalog"
SUBSCRIPTION_REASON_UPGRADE_SUCCEEDED = "UpgradeSucceeded"

# Reasons for transitions of catalog-related subscription conditions.
NO_CATALOG_SOURCES_FOUND = "NoCatalogSourcesFound"
ALL_CATALOG_SOURCES_HEALTHY = "AllCatalogSourcesHealthy"
CATALOG_SOURCES_ADDED = "CatalogSourcesAdded"
CATALOG_SOURCES_UPDATED = "CatalogSourcesUpdated"
CATALOG_SOURCES_DELETED = "CatalogSourcesDeleted"
UNHEALTHY_CATALOG_SOURCE_FOUND = "UnhealthyCatalogSourceFound"
REFERENCED_INSTALL_PLAN_NOT_FOUND = "ReferencedInstallPlanNotFound"
INSTALL_PLAN_NOT_YET_RECONCILED = "InstallPlanNotYetReconciled"
INSTALL_PLAN_FAILED = "InstallPlanFailed"


class SubscriptionState(str, enum.Enum):
    """Whether updates are available, installing, or the service is up to date."""

    NONE = ""
    FAILED = "UpgradeFailed"
    UPGRADE_AVAILABLE = "UpgradeAvailable"
    UPGRADE_PENDING = "UpgradePending"
    AT_LATEST = "AtLatestKnown"


class SubscriptionConditionType(str, enum.Enum):
    """An explicit, abnormal-true state condition of a Subscription."""

    CATALOG_SOURCES_UNHEALTHY = "CatalogSourcesUnhealthy"
    INSTALL_PLAN_MISSING = "InstallPlanMissing"
    INSTALL_PLAN_PENDING = "InstallPlanPending"
    INSTALL_PLAN_FAILED = "InstallPlanFailed"
    RESOLUTION_FAILED = "ResolutionFailed"
    BUNDLE_UNPACKING = "BundleUnpacking"
    BUNDLE_UNPACK_FAILED = "BundleUnpackFailed"
    DEPRECATED = "Deprecated"
    PACKAGE_DEPRECATED = "PackageDeprecated"
    CHANNEL_DEPRECATED = "ChannelDeprecated"
    BUNDLE_DEPRECATED = "BundleDeprecated"


@dataclass
class SubscriptionConfig:
    """Pod and container configuration applied to a subscription's operator."""

    selector: LabelSelector | None = None
    node_selector: dict[str, str] = field(default_factory=dict)
    tolerations: list[dict[str, Any]] = field(default_factory=list)
    resources: dict[str, Any] | None = None
    env_from: list[dict[str, Any]] = field(default_factory=list)
    env: list[dict[str, Any]] = field(default_factory=list)
    volumes: list[dict[str, Any]] = field(default_factory=list)
    volume_mounts: list[dict[str, Any]] = field(default_factory=list)
    affinity: dict[str, Any] | None = None


@dataclass
class SubscriptionSpec:
    """An application that can be installed."""

    catalog_source: str = ""
    catalog_source_namespace: str = ""
    package: str = ""
    channel: str = ""
    starting_csv: str = ""
    install_plan_approval: str = ""
    config: SubscriptionConfig | None = None


@dataclass
class SubscriptionCondition:
    """The latest available observation of a Subscription's state."""

    type: str
    status: str
    reason: str = ""
    message: str = ""
    last_heartbeat_time: datetime | None = None
    last_transition_time: datetime | None = None

    def equals(self, condition: SubscriptionCondition) -> bool:
        """Compare type, status, reason and message only."""
        return (
            self.type == condition.type
            and self.status == condition.status
            and self.reason == condition.reason
            and self.message == condition.message
        )


@dataclass
class InstallPlanReference:
    api_version: str
    kind: str
    name: str
    uid: str


@dataclass
class SubscriptionCatalogHealth:
    """The health of a CatalogSource the Subscription knows about."""

    catalog_source_ref: ObjectReference | None = None
    last_updated: datetime | None = None
    healthy: bool = False

    def equals(self, health: SubscriptionCatalogHealth) -> bool:
        """Compare health and the referenced catalog's UID only."""
        return (
            self.healthy == health.healthy
            and self.catalog_source_ref.uid == health.catalog_source_ref.uid
        )


@dataclass
class SubscriptionStatus:
    current_csv: str = ""
    installed_csv: str = ""
    install: InstallPlanReference | None = None
    state: str = ""
    reason: str = ""
    install_plan_generation: int = 0
    install_plan_ref: ObjectReference | None = None
    catalog_health: list[SubscriptionCatalogHealth] = field(default_factory=list)
    conditions: list[SubscriptionCondition] = field(default_factory=list)
    last_updated: datetime | None = None

    def get_condition(self, condition_type) -> SubscriptionCondition:
        """The condition of the given type, or one with Unknown status."""
        for cond in self.conditions:
            if cond.type == condition_type:
                return cond
        return SubscriptionCondition(type=condition_type, status=ConditionStatus.UNKNOWN)

    def set_condition(self, condition: SubscriptionCondition) -> None:
        """Replace the condition of the same type, or append it."""
        for index, cond in enumerate(self.conditions):
            if cond.type == condition.type:
                self.conditions[index] = condition
                return
        self.conditions.append(condition)

    def remove_conditions(self, *args) -> None:
        """Remove every condition whose type is among the given types."""
        excluded = set(args)
        self.conditions = [c for c in self.conditions if c.type not in excluded]


@dataclass
class Subscription:
    """Keeps operators up to date by tracking changes to catalogs."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: SubscriptionSpec | None = None
    status: SubscriptionStatus = field(default_factory=SubscriptionStatus)

    def get_install_plan_approval(self) -> Approval:
        """The configured approval, defaulting to Automatic."""
        if self.spec is not None and self.spec.install_plan_approval == Approval.MANUAL:
            return Approval.MANUAL
        return Approval.AUTOMATIC


@dataclass
class SubscriptionList:
    items: list[Subscription] = field(default_factory=list)


def new_install_plan_reference(ref: ObjectReference) -> InstallPlanReference:
    """Build an InstallPlanReference from an object reference."""
    return InstallPlanReference(
        api_version=ref.api_version,
        kind=ref.kind,
        name=ref.name,
        uid=ref.uid,
    )