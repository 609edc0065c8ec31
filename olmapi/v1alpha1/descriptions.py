"""Descriptive building blocks of a ClusterServiceVersion spec."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any

from olmapi.meta import LabelSelector

INSTALL_STRATEGY_NAME_DEPLOYMENT = "deployment"
SKIP_RANGE_ANNOTATION_KEY = "olm.skipRange"


class InstallModeType(str, enum.Enum):
    """A supported type of install mode for CSV installation."""

    OWN_NAMESPACE = "OwnNamespace"
    SINGLE_NAMESPACE = "SingleNamespace"
    MULTI_NAMESPACE = "MultiNamespace"
    ALL_NAMESPACES = "AllNamespaces"


@dataclass
class InstallMode:
    """An install mode type and whether the CSV supports it."""

    type: InstallModeType
    supported: bool


@dataclass
class StrategyDeploymentPermissions:
    """RBAC rules and the service account an install strategy needs."""

    service_account_name: str
    rules: list[dict[str, Any]] = field(default_factory=list)


@dataclass
class StrategyDeploymentSpec:
    """Name, spec and labels of a deployment to create."""

    name: str
    spec: dict[str, Any] = field(default_factory=dict)
    label: dict[str, str] | None = None


@dataclass
class StrategyDetailsDeployment:
    """The parsed details of a deployment install strategy."""

    deployment_specs: list[StrategyDeploymentSpec] = field(default_factory=list)
    permissions: list[StrategyDeploymentPermissions] = field(default_factory=list)
    cluster_permissions: list[StrategyDeploymentPermissions] = field(default_factory=list)

    def strategy_name(self) -> str:
        return INSTALL_STRATEGY_NAME_DEPLOYMENT


@dataclass
class NamedInstallStrategy:
    strategy_name: str = ""
    strategy_spec: StrategyDetailsDeployment = field(default_factory=StrategyDetailsDeployment)


@dataclass
class StatusDescriptor:
    """A field in the status block of a CRD."""

    path: str
    display_name: str = ""
    description: str = ""
    x_descriptors: list[str] = field(default_factory=list)
    value: Any = None


@dataclass
class SpecDescriptor:
    """A field in the spec block of a CRD."""

    path: str
    display_name: str = ""
    description: str = ""
    x_descriptors: list[str] = field(default_factory=list)
    value: Any = None


@dataclass
class ActionDescriptor:
    """A declarative action that can be performed on a custom resource."""

    path: str
    display_name: str = ""
    description: str = ""
    x_descriptors: list[str] = field(default_factory=list)
    value: Any = None


@dataclass
class APIResourceReference:
    """A Kubernetes resource type used by the referrer."""

    name: str
    kind: str
    version: str


@dataclass
class CRDDescription:
    name: str = ""
    version: str = ""
    kind: str = ""
    display_name: str = ""
    description: str = ""
    resources: list[APIResourceReference] = field(default_factory=list)
    status_descriptors: list[StatusDescriptor] = field(default_factory=list)
    spec_descriptors: list[SpecDescriptor] = field(default_factory=list)
    action_descriptor: list[ActionDescriptor] = field(default_factory=list)


@dataclass
class APIServiceDescription:
    name: str = ""
    group: str = ""
    version: str = ""
    kind: str = ""
    deployment_name: str = ""
    container_port: int = 0
    display_name: str = ""
    description: str = ""
    resources: list[APIResourceReference] = field(default_factory=list)
    status_descriptors: list[StatusDescriptor] = field(default_factory=list)
    spec_descriptors: list[SpecDescriptor] = field(default_factory=list)
    action_descriptor: list[ActionDescriptor] = field(default_factory=list)

    def get_name(self) -> str:
        """The APIService name derived from version and group."""
        return f"{self.version}.{self.group}"


class WebhookAdmissionType(str, enum.Enum):
    VALIDATING_ADMISSION_WEBHOOK = "ValidatingAdmissionWebhook"
    MUTATING_ADMISSION_WEBHOOK = "MutatingAdmissionWebhook"
    CONVERSION_WEBHOOK = "ConversionWebhook"


@dataclass
class Rule:
    api_groups: list[str] = field(default_factory=list)
    api_versions: list[str] = field(default_factory=list)
    resources: list[str] = field(default_factory=list)
    scope: str | None = None


@dataclass
class RuleWithOperations:
    operations: list[str] = field(default_factory=list)
    rule: Rule = field(default_factory=Rule)


@dataclass
class ServiceReference:
    name: str
    namespace: str
    path: str | None = None
    port: int | None = None


@dataclass
class WebhookClientConfig:
    service: ServiceReference | None = None
    ca_bundle: bytes | None = None


@dataclass
class ValidatingWebhook:
    name: str
    client_config: WebhookClientConfig
    rules: list[RuleWithOperations] = field(default_factory=list)
    failure_policy: str | None = None
    match_policy: str | None = None
    namespace_selector: LabelSelector | None = None
    object_selector: LabelSelector | None = None
    side_effects: str | None = None
    timeout_seconds: int | None = None
    admission_review_versions: list[str] = field(default_factory=list)


@dataclass
class MutatingWebhook:
    name: str
    client_config: WebhookClientConfig
    rules: list[RuleWithOperations] = field(default_factory=list)
    failure_policy: str | None = None
    match_policy: str | None = None
    namespace_selector: LabelSelector | None = None
    object_selector: LabelSelector | None = None
    side_effects: str | None = None
    timeout_seconds: int | None = None
    admission_review_versions: list[str] = field(default_factory=list)
    reinvocation_policy: str | None = None


@dataclass
class WebhookDescription:
    """Details about a webhook an operator requires."""

    generate_name: str
    type: WebhookAdmissionType
    deployment_name: str = ""
    container_port: int = 0
    target_port: int | str | None = None
    rules: list[RuleWithOperations] = field(default_factory=list)
    failure_policy: str | None = None
    match_policy: str | None = None
    object_selector: LabelSelector | None = None
    side_effects: str | None = None
    timeout_seconds: int | None = None
    admission_review_versions: list[str] = field(default_factory=list)
    reinvocation_policy: str | None = None
    webhook_path: str | None = None
    conversion_crds: list[str] = field(default_factory=list)

    def domain_name(self) -> str:
        """The deployment name with periods replaced by hyphens."""
        return self.deployment_name.replace(".", "-")

    def _client_config(self, namespace: str, ca_bundle: bytes | None) -> WebhookClientConfig:
        return WebhookClientConfig(
            service=ServiceReference(
                name=self.domain_name() + "-service",
                namespace=namespace,
                path=self.webhook_path,
                port=self.container_port,
            ),
            ca_bundle=ca_bundle,
        )

    def get_validating_webhook(
        self,
        namespace: str,
        namespace_selector: LabelSelector | None,
        ca_bundle: bytes | None,
    ) -> ValidatingWebhook:
        return ValidatingWebhook(
            name=self.generate_name,
            rules=self.rules,
            failure_policy=self.failure_policy,
            match_policy=self.match_policy,
            namespace_selector=namespace_selector,
            object_selector=self.object_selector,
            side_effects=self.side_effects,
            timeout_seconds=self.timeout_seconds,
            admission_review_versions=self.admission_review_versions,
            client_config=self._client_config(namespace, ca_bundle),
        )

    def get_mutating_webhook(
        self,
        namespace: str,
        namespace_selector: LabelSelector | None,
        ca_bundle: bytes | None,
    ) -> MutatingWebhook:
        return MutatingWebhook(
            name=self.generate_name,
            rules=self.rules,
            failure_policy=self.failure_policy,
            match_policy=self.match_policy,
            namespace_selector=namespace_selector,
            object_selector=self.object_selector,
            side_effects=self.side_effects,
            timeout_seconds=self.timeout_seconds,
            admission_review_versions=self.admission_review_versions,
            client_config=self._client_config(namespace, ca_bundle),
            reinvocation_policy=self.reinvocation_policy,
        )


@dataclass
class CustomResourceDefinitions:
    """CRDs owned or required by an operator; owned ones are implicitly required."""

    owned: list[CRDDescription] = field(default_factory=list)
    required: list[CRDDescription] = field(default_factory=list)


@dataclass
class APIServiceDefinitions:
    owned: list[APIServiceDescription] = field(default_factory=list)
    required: list[APIServiceDescription] = field(default_factory=list)


@dataclass
class CleanupSpec:
    enabled: bool = False


@dataclass
class Maintainer:
    name: str = ""
    email: str = ""


@dataclass
class AppLink:
    name: str = ""
    url: str = ""


@dataclass
class Icon:
    data: str = ""
    media_type: str = ""


@dataclass
class RelatedImage:
    name: str
    image: str