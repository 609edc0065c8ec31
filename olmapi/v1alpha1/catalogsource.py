"""The CatalogSource resource: a repository of CSVs, CRDs and packages."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

from olmapi.meta import (
    Condition,
    DurationError,
    ObjectMeta,
    format_duration,
    now,
    parse_duration,
)
from olmapi.v1alpha1.descriptions import Icon
from olmapi.v1alpha1.register import API_VERSION

logger = logging.getLogger(__name__)

CATALOG_SOURCE_CRD_API_VERSION = API_VERSION
CATALOG_SOURCE_KIND = "CatalogSource"
DEFAULT_REGISTRY_POLL_DURATION = timedelta(minutes=15)

# Reasons recorded on a CatalogSource status.
CATALOG_SOURCE_SPEC_INVALID_ERROR = "SpecInvalidError"
CATALOG_SOURCE_CONFIG_MAP_ERROR = "ConfigMapError"
CATALOG_SOURCE_REGISTRY_SERVER_ERROR = "RegistryServerError"
CATALOG_SOURCE_INTERVAL_INVALID_ERROR = "InvalidIntervalError"


class SourceType(str, enum.Enum):
    """The type of backing store for a CatalogSource."""

    INTERNAL = "internal"
    CONFIGMAP = "configmap"
    GRPC = "grpc"


class SecurityConfig(str, enum.Enum):
    LEGACY = "legacy"
    RESTRICTED = "restricted"


@dataclass
class ExtractContentConfig:
    """Where a file-based catalog image keeps its cache and its contents."""

    cache_dir: str
    catalog_dir: str


@dataclass
class GrpcPodConfig:
    """Overrides for the pod serving a gRPC catalog."""

    node_selector: dict[str, str] = field(default_factory=dict)
    tolerations: list[dict[str, Any]] = field(default_factory=list)
    affinity: dict[str, Any] | None = None
    priority_class_name: str | None = None
    security_context_config: str = ""
    memory_target: str | None = None
    extract_content: ExtractContentConfig | None = None


@dataclass
class RegistryPoll:
    """Polling settings; the interval is parsed from the raw text."""

    raw_interval: str = ""
    interval: timedelta | None = None
    parsing_error: str = ""


@dataclass
class UpdateStrategy:
    """How updated catalog images are discovered."""

    registry_poll: RegistryPoll | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> UpdateStrategy:
        """Build from a decoded document, falling back to the default interval on bad input."""
        poll_data = data.get("registryPoll") or {}
        raw = poll_data.get("interval", "") or ""
        poll = RegistryPoll(raw_interval=raw)
        try:
            poll.interval = parse_duration(raw)
        except DurationError as err:
            poll.parsing_error = (
                "error parsing spec.updateStrategy.registryPoll.interval. "
                f"Using the default value of {format_duration(DEFAULT_REGISTRY_POLL_DURATION)} "
                f"instead. Error: {err}"
            )
            poll.interval = DEFAULT_REGISTRY_POLL_DURATION
        return cls(registry_poll=poll)


@dataclass
class RegistryServiceStatus:
    protocol: str = ""
    service_name: str = ""
    service_namespace: str = ""
    port: str = ""
    created_at: datetime | None = None

    def address(self) -> str:
        return f"{self.service_name}.{self.service_namespace}.svc:{self.port}"


@dataclass
class GRPCConnectionState:
    address: str = ""
    last_observed_state: str = ""
    last_connect_time: datetime | None = None


@dataclass
class ConfigMapResourceReference:
    name: str
    namespace: str
    uid: str = ""
    resource_version: str = ""
    last_update_time: datetime | None = None

    def is_a_match(self, obj: ObjectMeta) -> bool:
        """True if the object has the referenced UID and resource version."""
        return self.uid == obj.uid and self.resource_version == obj.resource_version


@dataclass
class CatalogSourceStatus:
    message: str = ""
    reason: str = ""
    latest_image_registry_poll: datetime | None = None
    config_map_resource: ConfigMapResourceReference | None = None
    registry_service_status: RegistryServiceStatus | None = None
    grpc_connection_state: GRPCConnectionState | None = None
    conditions: list[Condition] = field(default_factory=list)


@dataclass
class CatalogSourceSpec:
    source_type: str = ""
    priority: int = 0
    config_map: str = ""
    address: str = ""
    image: str = ""
    grpc_pod_config: GrpcPodConfig | None = None
    update_strategy: UpdateStrategy | None = None
    secrets: list[str] = field(default_factory=list)
    display_name: str = ""
    description: str = ""
    publisher: str = ""
    icon: Icon = field(default_factory=Icon)


def _aware(moment: datetime) -> datetime:
    return moment if moment.tzinfo is not None else moment.replace(tzinfo=timezone.utc)


@dataclass
class CatalogSource:
    """A repository of CSVs, CRDs and operator packages."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: CatalogSourceSpec = field(default_factory=CatalogSourceSpec)
    status: CatalogSourceStatus = field(default_factory=CatalogSourceStatus)

    def address(self) -> str:
        """The spec address if set, otherwise the registry service address."""
        if self.spec.address:
            return self.spec.address
        service = self.status.registry_service_status
        if service is None:
            raise ValueError("catalog source has neither an address nor a registry service")
        return service.address()

    def set_error(self, reason: str, err: BaseException | str | None) -> None:
        self.status.reason = reason
        self.status.message = "" if err is None else str(err)

    def set_last_update_time(self) -> None:
        self.status.latest_image_registry_poll = now()

    def update(self) -> bool:
        """True when polling is enabled and the poll interval has elapsed."""
        if not self.poll():
            return False
        interval = self.spec.update_strategy.registry_poll.interval
        if interval is None:
            interval = DEFAULT_REGISTRY_POLL_DURATION
        latest = self.status.latest_image_registry_poll
        name = self.metadata.name
        logger.debug("CatalogSource %s: latest poll %s", name, latest)

        if latest is None:
            created = self.metadata.creation_timestamp
            if created is None:
                due = True
            else:
                due = _aware(created) + interval < now()
            logger.debug("CatalogSource %s: creation timestamp plus interval before now %s", name, due)
        else:
            due = _aware(latest) + interval < now()
            logger.debug("CatalogSource %s: latest poll plus interval before now %s", name, due)
        return due

    def poll(self) -> bool:
        """True if polling is enabled for this catalog source."""
        strategy = self.spec.update_strategy
        if strategy is None or strategy.registry_poll is None:
            return False
        if not self.spec.image:
            return False
        return self.spec.source_type == SourceType.GRPC


@dataclass
class CatalogSourceList:
    items: list[CatalogSource] = field(default_factory=list)