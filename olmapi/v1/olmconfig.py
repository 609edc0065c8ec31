"""Group/version info for v1 and the OLMConfig resource."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta

from olmapi.meta import GROUP_NAME, Condition, GroupResource, GroupVersion, ObjectMeta

GROUP_VERSION = GroupVersion(GROUP_NAME, "v1")
SCHEME_GROUP_VERSION = GROUP_VERSION

DISABLED_COPIED_CSVS_CONDITION_TYPE = "DisabledCopiedCSVs"


def resource(resource: str) -> GroupResource:
    """Qualify an unqualified resource name with the v1 group."""
    return GROUP_VERSION.with_resource(resource).group_resource()


@dataclass
class Features:
    """Configurable OLM features."""

    disable_copied_csvs: bool | None = None
    package_server_sync_interval: timedelta | None = None


@dataclass
class OLMConfigSpec:
    features: Features | None = None


@dataclass
class OLMConfigStatus:
    conditions: list[Condition] = field(default_factory=list)


@dataclass
class OLMConfig:
    """Cluster-wide configuration of OLM."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: OLMConfigSpec = field(default_factory=OLMConfigSpec)
    status: OLMConfigStatus = field(default_factory=OLMConfigStatus)

    def copied_csvs_are_enabled(self) -> bool:
        """True unless copied CSVs are explicitly disabled."""
        features = self.spec.features
        if features is None or features.disable_copied_csvs is None:
            return True
        return not features.disable_copied_csvs

    def package_server_sync_interval(self) -> timedelta | None:
        features = self.spec.features
        if features is None:
            return None
        return features.package_server_sync_interval


@dataclass
class OLMConfigList:
    items: list[OLMConfig] = field(default_factory=list)


def copied_csvs_are_enabled(config: OLMConfig | None) -> bool:
    """Like OLMConfig.copied_csvs_are_enabled, treating a missing config as default."""
    if config is None:
        return True
    return config.copied_csvs_are_enabled()


def package_server_sync_interval(config: OLMConfig | None) -> timedelta | None:
    if config is None:
        return None
    return config.package_server_sync_interval()