"""The ClusterServiceVersion resource and its status bookkeeping."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable

from olmapi.meta import (
    GROUP_NAME,
    NAMESPACE_ALL,
    GroupVersionKind,
    LabelSelector,
    ObjectMeta,
)
from olmapi.v1alpha1.descriptions import (
    APIServiceDefinitions,
    APIServiceDescription,
    AppLink,
    CleanupSpec,
    CRDDescription,
    CustomResourceDefinitions,
    Icon,
    InstallMode,
    InstallModeType,
    Maintainer,
    NamedInstallStrategy,
    RelatedImage,
    WebhookDescription,
)
from olmapi.v1alpha1.register import GROUP_VERSION

CLUSTER_SERVICE_VERSION_API_VERSION = f"{GROUP_NAME}/{GROUP_VERSION}"
CLUSTER_SERVICE_VERSION_KIND = "ClusterServiceVersion"
OPERATOR_GROUP_NAMESPACE_ANNOTATION_KEY = "olm.operatorNamespace"
COPIED_LABEL_KEY = "olm.copiedFrom"

# Maximum length of status.conditions; the oldest entries are dropped beyond it.
CONDITIONS_LENGTH_LIMIT = 20

EVENT_TYPE_NORMAL = "Normal"
EVENT_TYPE_WARNING = "Warning"


class InstallModeError(ValueError):
    """Raised when install modes are invalid or do not support a configuration."""


class ClusterServiceVersionPhase(str, enum.Enum):
    """The condition of a ClusterServiceVersion at the current time."""

    NONE = ""
    PENDING = "Pending"
    INSTALL_READY = "InstallReady"
    INSTALLING = "Installing"
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"
    UNKNOWN = "Unknown"
    REPLACING = "Replacing"
    DELETING = "Deleting"
    ANY = ""


class ConditionReason(str, enum.Enum):
    """A camel-cased reason for a state transition."""

    REQUIREMENTS_UNKNOWN = "RequirementsUnknown"
    REQUIREMENTS_NOT_MET = "RequirementsNotMet"
    REQUIREMENTS_MET = "AllRequirementsMet"
    OWNER_CONFLICT = "OwnerConflict"
    COMPONENT_FAILED = "InstallComponentFailed"
    COMPONENT_FAILED_NO_RETRY = "InstallComponentFailedNoRetry"
    INVALID_STRATEGY = "InvalidInstallStrategy"
    WAITING = "InstallWaiting"
    INSTALL_SUCCESSFUL = "InstallSucceeded"
    INSTALL_CHECK_FAILED = "InstallCheckFailed"
    COMPONENT_UNHEALTHY = "ComponentUnhealthy"
    BEING_REPLACED = "BeingReplaced"
    REPLACED = "Replaced"
    NEEDS_REINSTALL = "NeedsReinstall"
    NEEDS_CERT_ROTATION = "NeedsCertRotation"
    API_SERVICE_RESOURCE_ISSUE = "APIServiceResourceIssue"
    API_SERVICE_RESOURCES_NEED_REINSTALL = "APIServiceResourcesNeedReinstall"
    API_SERVICE_INSTALL_FAILED = "APIServiceInstallFailed"
    COPIED = "Copied"
    INVALID_INSTALL_MODES = "InvalidInstallModes"
    NO_TARGET_NAMESPACES = "NoTargetNamespaces"
    UNSUPPORTED_OPERATOR_GROUP = "UnsupportedOperatorGroup"
    NO_OPERATOR_GROUP = "NoOperatorGroup"
    TOO_MANY_OPERATOR_GROUPS = "TooManyOperatorGroups"
    INTER_OPERATOR_GROUP_OWNER_CONFLICT = "InterOperatorGroupOwnerConflict"
    CANNOT_MODIFY_STATIC_OPERATOR_GROUP_PROVIDED_APIS = "CannotModifyStaticOperatorGroupProvidedAPIs"
    DETECTED_CLUSTER_CHANGE = "DetectedClusterChange"
    INVALID_WEBHOOK_DESCRIPTION = "InvalidWebhookDescription"
    OPERATOR_CONDITION_NOT_UPGRADEABLE = "OperatorConditionNotUpgradeable"
    WAITING_FOR_CLEANUP_TO_COMPLETE = "WaitingOnCleanup"


class StatusReason(str, enum.Enum):
    """Reason for the status of a requirement or dependent."""

    PRESENT = "Present"
    NOT_PRESENT = "NotPresent"
    PRESENT_NOT_SATISFIED = "PresentNotSatisfied"
    NOT_AVAILABLE = "PresentNotAvailable"
    SATISFIED = "Satisfied"
    NOT_SATISFIED = "NotSatisfied"


_OBSOLETE_REASONS = frozenset({ConditionReason.REPLACED.value, ConditionReason.BEING_REPLACED.value})

_UNCOPIABLE_REASONS = frozenset(
    r.value
    for r in (
        ConditionReason.COPIED,
        ConditionReason.INVALID_INSTALL_MODES,
        ConditionReason.NO_TARGET_NAMESPACES,
        ConditionReason.UNSUPPORTED_OPERATOR_GROUP,
        ConditionReason.NO_OPERATOR_GROUP,
        ConditionReason.TOO_MANY_OPERATOR_GROUPS,
        ConditionReason.INTER_OPERATOR_GROUP_OWNER_CONFLICT,
        ConditionReason.CANNOT_MODIFY_STATIC_OPERATOR_GROUP_PROVIDED_APIS,
    )
)

_SAFE_TO_ANNOTATE_OPERATOR_GROUP_REASONS = frozenset(
    r.value
    for r in (
        ConditionReason.OWNER_CONFLICT,
        ConditionReason.INSTALL_SUCCESSFUL,
        ConditionReason.INVALID_INSTALL_MODES,
        ConditionReason.NO_TARGET_NAMESPACES,
        ConditionReason.UNSUPPORTED_OPERATOR_GROUP,
        ConditionReason.NO_OPERATOR_GROUP,
        ConditionReason.TOO_MANY_OPERATOR_GROUPS,
        ConditionReason.INTER_OPERATOR_GROUP_OWNER_CONFLICT,
        ConditionReason.CANNOT_MODIFY_STATIC_OPERATOR_GROUP_PROVIDED_APIS,
    )
)


def _text(value: Any) -> str:
    return value.value if isinstance(value, enum.Enum) else value


@dataclass
class EventRecorder:
    """Collects events emitted about objects; subclass to forward them elsewhere."""

    events: list[tuple[Any, str, str, str]] = field(default_factory=list)

    def event(self, obj: Any, event_type: str, reason: str, message: str) -> None:
        self.events.append((obj, event_type, reason, message))


@dataclass
class ClusterServiceVersionSpec:
    """How OLM installs an operator for a given version."""

    install_strategy: NamedInstallStrategy = field(default_factory=NamedInstallStrategy)
    version: str = ""
    maturity: str = ""
    custom_resource_definitions: CustomResourceDefinitions = field(
        default_factory=CustomResourceDefinitions
    )
    api_service_definitions: APIServiceDefinitions = field(default_factory=APIServiceDefinitions)
    webhook_definitions: list[WebhookDescription] = field(default_factory=list)
    native_apis: list[GroupVersionKind] = field(default_factory=list)
    min_kube_version: str = ""
    display_name: str = ""
    description: str = ""
    keywords: list[str] = field(default_factory=list)
    maintainers: list[Maintainer] = field(default_factory=list)
    provider: AppLink = field(default_factory=AppLink)
    links: list[AppLink] = field(default_factory=list)
    icon: list[Icon] = field(default_factory=list)
    install_modes: list[InstallMode] = field(default_factory=list)
    replaces: str = ""
    labels: dict[str, str] = field(default_factory=dict)
    annotations: dict[str, str] = field(default_factory=dict)
    selector: LabelSelector | None = None
    cleanup: CleanupSpec = field(default_factory=CleanupSpec)
    skips: list[str] = field(default_factory=list)
    related_images: list[RelatedImage] = field(default_factory=list)


@dataclass
class ClusterServiceVersionCondition:
    """A recorded state transition of a ClusterServiceVersion."""

    phase: str = ""
    message: str = ""
    reason: str = ""
    last_update_time: datetime | None = None
    last_transition_time: datetime | None = None


@dataclass
class DependentStatus:
    group: str
    version: str
    kind: str
    status: str
    uuid: str = ""
    message: str = ""


@dataclass
class RequirementStatus:
    group: str
    version: str
    kind: str
    name: str
    status: str
    message: str = ""
    uuid: str = ""
    dependents: list[DependentStatus] = field(default_factory=list)


@dataclass
class ResourceInstance:
    name: str
    namespace: str = ""


@dataclass
class ResourceList:
    """Resources of the same group and kind."""

    group: str
    kind: str
    instances: list[ResourceInstance] = field(default_factory=list)


@dataclass
class CleanupStatus:
    pending_deletion: list[ResourceList] = field(default_factory=list)


@dataclass
class ClusterServiceVersionStatus:
    phase: str = ""
    message: str = ""
    reason: str = ""
    last_update_time: datetime | None = None
    last_transition_time: datetime | None = None
    conditions: list[ClusterServiceVersionCondition] = field(default_factory=list)
    requirement_status: list[RequirementStatus] = field(default_factory=list)
    certs_last_updated: datetime | None = None
    certs_rotate_at: datetime | None = None
    cleanup: CleanupStatus = field(default_factory=CleanupStatus)


def _sorted_by_key(entries: dict[str, Any]) -> list[Any]:
    return [entries[key] for key in sorted(entries)]


@dataclass
class ClusterServiceVersion:
    """An operator's install description and observed status."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: ClusterServiceVersionSpec = field(default_factory=ClusterServiceVersionSpec)
    status: ClusterServiceVersionStatus = field(default_factory=ClusterServiceVersionStatus)

    def set_phase_with_event_if_changed(
        self, phase, reason, message: str, now: datetime | None, recorder: EventRecorder
    ) -> None:
        """Like set_phase_with_event, but only when phase, reason or message change."""
        status = self.status
        if status.phase == phase and status.reason == reason and status.message == message:
            return
        self.set_phase_with_event(phase, reason, message, now, recorder)

    def set_phase_with_event(
        self, phase, reason, message: str, now: datetime | None, recorder: EventRecorder
    ) -> None:
        """Record an event describing the phase change, then set the phase."""
        event_type = EVENT_TYPE_WARNING if phase == ClusterServiceVersionPhase.FAILED else EVENT_TYPE_NORMAL
        recorder.event(self, event_type, _text(reason), message)
        self.set_phase(phase, reason, message, now)

    def set_phase(self, phase, reason, message: str, now: datetime | None) -> None:
        """Set the current phase and append a condition when phase or reason change."""
        status = self.status
        status.last_update_time = now
        if status.phase != phase:
            status.phase = phase
            status.last_transition_time = now
        status.message = message
        status.reason = reason

        def new_condition() -> ClusterServiceVersionCondition:
            return ClusterServiceVersionCondition(
                phase=status.phase,
                last_transition_time=status.last_transition_time,
                last_update_time=status.last_update_time,
                message=message,
                reason=reason,
            )

        if not status.conditions:
            status.conditions.append(new_condition())
        else:
            previous = status.conditions[-1]
            if previous.phase != status.phase or previous.reason != status.reason:
                status.conditions.append(new_condition())
        self.trim_conditions_if_limit_exceeded()

    def set_requirement_status(self, statuses: list[RequirementStatus]) -> None:
        self.status.requirement_status = statuses

    def is_obsolete(self) -> bool:
        """True if the CSV is being replaced or marked for deletion."""
        return any(_text(c.reason) in _OBSOLETE_REASONS for c in self.status.conditions)

    def is_copied(self) -> bool:
        return self.status.reason == ConditionReason.COPIED or is_copied(self)

    def is_uncopiable(self) -> bool:
        if self.status.phase == ClusterServiceVersionPhase.NONE:
            return True
        return _text(self.status.reason) in _UNCOPIABLE_REASONS

    def is_safe_to_update_operator_group_annotations(self) -> bool:
        return _text(self.status.reason) in _SAFE_TO_ANNOTATE_OPERATOR_GROUP_REASONS

    def trim_conditions_if_limit_exceeded(self) -> None:
        """Drop the oldest conditions beyond CONDITIONS_LENGTH_LIMIT."""
        if len(self.status.conditions) > CONDITIONS_LENGTH_LIMIT:
            self.status.conditions = self.status.conditions[-CONDITIONS_LENGTH_LIMIT:]

    def has_ca_resources(self) -> bool:
        """True if the CSV owns APIServices or defines webhooks."""
        return bool(self.spec.api_service_definitions.owned or self.spec.webhook_definitions)

    def owns_crd(self, name: str) -> bool:
        return any(desc.name == name for desc in self.spec.custom_resource_definitions.owned)

    def owns_api_service(self, name: str) -> bool:
        return any(desc.get_name() == name for desc in self.spec.api_service_definitions.owned)

    def get_all_crd_descriptions(self) -> list[CRDDescription]:
        """Union of required and owned CRDs by name, owned preferred, sorted by name."""
        crds = self.spec.custom_resource_definitions
        entries = {desc.name: desc for desc in crds.required}
        entries.update((desc.name, desc) for desc in crds.owned)
        return _sorted_by_key(entries)

    def get_all_api_service_descriptions(self) -> list[APIServiceDescription]:
        """Union of required and owned APIServices, owned preferred, sorted by name."""
        apis = self.spec.api_service_definitions
        entries = {desc.get_name(): desc for desc in apis.required}
        entries.update((desc.get_name(), desc) for desc in apis.owned)
        return _sorted_by_key(entries)

    def get_required_api_service_descriptions(self) -> list[APIServiceDescription]:
        """Required APIServices that are not also owned, sorted by name."""
        apis = self.spec.api_service_definitions
        entries = {desc.get_name(): desc for desc in apis.required}
        for desc in apis.owned:
            entries.pop(desc.get_name(), None)
        return _sorted_by_key(entries)

    def get_owned_api_service_descriptions(self) -> list[APIServiceDescription]:
        """Owned APIServices, deduplicated and sorted by name."""
        entries = {desc.get_name(): desc for desc in self.spec.api_service_definitions.owned}
        return _sorted_by_key(entries)


@dataclass
class ClusterServiceVersionList:
    items: list[ClusterServiceVersion] = field(default_factory=list)


def _format_modes(modes: Iterable[InstallMode]) -> str:
    parts = (f"{{{_text(m.type)} {str(m.supported).lower()}}}" for m in modes)
    return "[" + " ".join(parts) + "]"


class InstallModeSet(dict):
    """A mapping of unique install mode types to whether they are supported."""

    def _allows(self, mode_type: InstallModeType) -> bool:
        return any(key == mode_type and supported for key, supported in self.items())

    def supports(self, operator_namespace: str, namespaces: list[str]) -> None:
        """Raise InstallModeError unless the set supports the given configuration."""
        count = len(namespaces)
        if count == 0:
            raise InstallModeError(
                "operatorgroup has invalid selected namespaces, "
                "cannot configure to watch zero namespaces"
            )
        if count == 1:
            target = namespaces[0]
            if target == operator_namespace:
                if not self._allows(InstallModeType.OWN_NAMESPACE):
                    raise InstallModeError(
                        f"{InstallModeType.OWN_NAMESPACE.value} InstallModeType not supported, "
                        "cannot configure to watch own namespace"
                    )
            elif target == NAMESPACE_ALL:
                if not self._allows(InstallModeType.ALL_NAMESPACES):
                    raise InstallModeError(
                        f"{InstallModeType.ALL_NAMESPACES.value} InstallModeType not supported, "
                        "cannot configure to watch all namespaces"
                    )
            elif not self._allows(InstallModeType.SINGLE_NAMESPACE):
                raise InstallModeError(
                    f"{InstallModeType.SINGLE_NAMESPACE.value} InstallModeType not supported, "
                    "cannot configure to watch one namespace"
                )
            return
        if not self._allows(InstallModeType.MULTI_NAMESPACE):
            raise InstallModeError(
                f"{InstallModeType.MULTI_NAMESPACE.value} InstallModeType not supported, "
                f"cannot configure to watch {count} namespaces"
            )
        for namespace in namespaces:
            if namespace == operator_namespace and not self._allows(InstallModeType.OWN_NAMESPACE):
                raise InstallModeError(
                    f"{InstallModeType.OWN_NAMESPACE.value} InstallModeType not supported, "
                    "cannot configure to watch own namespace"
                )
            if namespace == NAMESPACE_ALL:
                raise InstallModeError(
                    "operatorgroup has invalid selected namespaces, "
                    "NamespaceAll found when |selected namespaces| > 1"
                )


def new_install_mode_set(modes: list[InstallMode]) -> InstallModeSet:
    """Build an InstallModeSet, raising InstallModeError on duplicate types."""
    result = InstallModeSet()
    for mode in modes:
        key = _text(mode.type)
        if any(_text(existing) == key for existing in result):
            raise InstallModeError(
                f"InstallMode list contains duplicates, cannot make set: {_format_modes(modes)}"
            )
        result[mode.type] = mode.supported
    return result


def is_copied(obj: Any) -> bool:
    """True if the object's metadata marks it as a copy from another namespace.

    Accepts an ObjectMeta or any object carrying one as ``metadata``.
    """
    meta = getattr(obj, "metadata", obj)
    annotations = meta.annotations or {}
    if OPERATOR_GROUP_NAMESPACE_ANNOTATION_KEY in annotations:
        if meta.namespace != annotations[OPERATOR_GROUP_NAMESPACE_ANNOTATION_KEY]:
            return True
    labels = meta.labels or {}
    return COPIED_LABEL_KEY in labels