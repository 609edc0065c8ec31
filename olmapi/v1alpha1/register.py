"""Group/version registration details for the v1alpha1 API."""

from __future__ import annotations

from olmapi.meta import GROUP_NAME, GroupKind, GroupResource, GroupVersion

GROUP_VERSION = "v1alpha1"

SCHEME_GROUP_VERSION = GroupVersion(GROUP_NAME, GROUP_VERSION)

API_VERSION = f"{GROUP_NAME}/{GROUP_VERSION}"


def kind(kind: str) -> GroupKind:
    """Qualify an unqualified kind with the v1alpha1 group."""
    return SCHEME_GROUP_VERSION.with_kind(kind).group_kind()


def resource(resource: str) -> GroupResource:
    """Qualify an unqualified resource with the v1alpha1 group."""
    return SCHEME_GROUP_VERSION.with_resource(resource).group_resource()