"""A registry of OLM resource types and object references built from it."""

from __future__ import annotations

from urllib.parse import urlparse

from olmapi.meta import GroupVersion, GroupVersionKind, ObjectReference
from olmapi.v1.olmconfig import GROUP_VERSION as V1_GROUP_VERSION
from olmapi.v1.olmconfig import OLMConfig, OLMConfigList
from olmapi.v1.operator import Operator, OperatorList
from olmapi.v1.operatorcondition import OperatorCondition, OperatorConditionList
from olmapi.v1.operatorgroup import OperatorGroup, OperatorGroupList
from olmapi.v1alpha1.catalogsource import CatalogSource, CatalogSourceList
from olmapi.v1alpha1.clusterserviceversion import (
    ClusterServiceVersion,
    ClusterServiceVersionList,
)
from olmapi.v1alpha1.installplan import InstallPlan, InstallPlanList
from olmapi.v1alpha1.register import SCHEME_GROUP_VERSION as V1ALPHA1_GROUP_VERSION
from olmapi.v1alpha1.subscription import Subscription, SubscriptionList
from olmapi.v1alpha2.operatorgroup import GROUP_VERSION as V1ALPHA2_GROUP_VERSION


class Scheme:
    """Maps resource classes to the group/version/kinds they are registered under."""

    def __init__(self) -> None:
        self._kinds: dict[type, list[GroupVersionKind]] = {}
        self._observed: list[GroupVersion] = []
        self._priority: dict[str, list[str]] = {}

    def add_known_types(self, group_version: GroupVersion, *args) -> None:
        """Register each given class under its own name as kind."""
        for cls in args:
            if not isinstance(cls, type):
                cls = type(cls)
            gvk = group_version.with_kind(cls.__name__)
            kinds = self._kinds.setdefault(cls, [])
            if gvk not in kinds:
                kinds.append(gvk)
        if group_version not in self._observed:
            self._observed.append(group_version)

    def object_kind(self, obj) -> GroupVersionKind:
        """The first group/version/kind the object's class is registered under."""
        kinds = self._kinds.get(type(obj))
        if not kinds:
            raise ValueError(f"no kind is registered for the type {type(obj).__name__}")
        return kinds[0]

    def set_version_priority(self, *args) -> None:
        """Set the preferred order of versions within one group."""
        if not args:
            return
        group = args[0].group
        for version in args:
            if version.group != group:
                raise ValueError(
                    "must specify versions for only one group at a time: "
                    f"{', '.join(str(v) for v in args)}"
                )
        self._priority[group] = [v.version for v in args]

    def prioritized_versions(self, group: str) -> list[str]:
        """Versions of a group: prioritized ones first, then others as registered."""
        result = list(self._priority.get(group, []))
        for gv in self._observed:
            if gv.group == group and gv.version not in result:
                result.append(gv.version)
        return result


def install(scheme: Scheme) -> None:
    """Register the OLM API group's types and version priority with a scheme."""
    scheme.add_known_types(
        V1ALPHA1_GROUP_VERSION,
        CatalogSource,
        CatalogSourceList,
        InstallPlan,
        InstallPlanList,
        Subscription,
        SubscriptionList,
        ClusterServiceVersion,
        ClusterServiceVersionList,
    )
    scheme.add_known_types(
        V1_GROUP_VERSION,
        OLMConfig,
        OLMConfigList,
        Operator,
        OperatorList,
        OperatorCondition,
        OperatorConditionList,
        OperatorGroup,
        OperatorGroupList,
    )
    scheme.set_version_priority(V1_GROUP_VERSION, V1ALPHA2_GROUP_VERSION, V1ALPHA1_GROUP_VERSION)


_SCHEME = Scheme()
install(_SCHEME)


def _version_from_self_link(self_link: str, fallback: str) -> str:
    if not self_link:
        return fallback
    elements = urlparse(self_link).path.split("/")
    if len(elements) < 4:
        raise ValueError(f"unexpected self link format: '{self_link}'; got version ''")
    if elements[1] == "api":
        return elements[2]
    if elements[1] == "apis":
        return f"{elements[2]}/{elements[3]}"
    raise ValueError(f"unexpected self link format: '{self_link}'; got version ''")


def get_reference(obj) -> ObjectReference:
    """Build an ObjectReference for an OLM object.

    The API version comes from the object's self link when it has one,
    otherwise from the version its type is registered under.
    """
    if obj is None:
        raise ValueError("can't reference a nil object")
    gvk = _SCHEME.object_kind(obj)
    meta = obj.metadata
    registered = str(GroupVersion(gvk.group, gvk.version))
    api_version = _version_from_self_link(meta.self_link, registered)
    return ObjectReference(
        kind=gvk.kind,
        api_version=api_version,
        name=meta.name,
        namespace=meta.namespace,
        uid=meta.uid,
        resource_version=meta.resource_version,
    )