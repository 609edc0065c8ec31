"""Shared object metadata, group/version identifiers and duration helpers."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

GROUP_NAME = "operators.coreos.com"
API_VERSION_INTERNAL = "__internal"
GROUP_VERSION = API_VERSION_INTERNAL

CLUSTER_SERVICE_VERSION_KIND = "ClusterServiceVersion"
CATALOG_SOURCE_KIND = "CatalogSource"
INSTALL_PLAN_KIND = "InstallPlan"
SUBSCRIPTION_KIND = "Subscription"
OPERATOR_KIND = "Operator"
OPERATOR_GROUP_KIND = "OperatorGroup"

NAMESPACE_ALL = ""


class DurationError(ValueError):
    """Raised when a duration string cannot be parsed."""


@dataclass(frozen=True)
class GroupKind:
    group: str
    kind: str


@dataclass(frozen=True)
class GroupResource:
    group: str
    resource: str


@dataclass(frozen=True)
class GroupVersionKind:
    group: str
    version: str
    kind: str

    def group_kind(self) -> GroupKind:
        return GroupKind(self.group, self.kind)


@dataclass(frozen=True)
class GroupVersionResource:
    group: str
    version: str
    resource: str

    def group_resource(self) -> GroupResource:
        return GroupResource(self.group, self.resource)


@dataclass(frozen=True)
class GroupVersion:
    group: str
    version: str

    def with_kind(self, kind: str) -> GroupVersionKind:
        return GroupVersionKind(self.group, self.version, kind)

    def with_resource(self, resource: str) -> GroupVersionResource:
        return GroupVersionResource(self.group, self.version, resource)

    def __str__(self) -> str:
        if self.group:
            return f"{self.group}/{self.version}"
        return self.version


SCHEME_GROUP_VERSION = GroupVersion(GROUP_NAME, API_VERSION_INTERNAL)


class ConditionStatus(str, enum.Enum):
    TRUE = "True"
    FALSE = "False"
    UNKNOWN = "Unknown"


@dataclass
class ObjectMeta:
    name: str = ""
    namespace: str = ""
    generate_name: str = ""
    uid: str = ""
    resource_version: str = ""
    self_link: str = ""
    generation: int = 0
    creation_timestamp: datetime | None = None
    labels: dict[str, str] | None = None
    annotations: dict[str, str] | None = None


@dataclass
class ObjectReference:
    kind: str = ""
    namespace: str = ""
    name: str = ""
    uid: str = ""
    api_version: str = ""
    resource_version: str = ""
    field_path: str = ""


@dataclass
class LabelSelectorRequirement:
    key: str
    operator: str
    values: list[str] = field(default_factory=list)


@dataclass
class LabelSelector:
    match_labels: dict[str, str] = field(default_factory=dict)
    match_expressions: list[LabelSelectorRequirement] = field(default_factory=list)


@dataclass
class Condition:
    """A generic status condition."""

    type: str
    status: str
    reason: str = ""
    message: str = ""
    observed_generation: int = 0
    last_transition_time: datetime | None = None


def now() -> datetime:
    """Return the current time in UTC."""
    return datetime.now(timezone.utc)


_NANOSECOND = 1
_MICROSECOND = 1000 * _NANOSECOND
_MILLISECOND = 1000 * _MICROSECOND
_SECOND = 1000 * _MILLISECOND
_MINUTE = 60 * _SECOND
_HOUR = 60 * _MINUTE

_UNITS = {
    "ns": _NANOSECOND,
    "us": _MICROSECOND,
    "\u00b5s": _MICROSECOND,
    "\u03bcs": _MICROSECOND,
    "ms": _MILLISECOND,
    "s": _SECOND,
    "m": _MINUTE,
    "h": _HOUR,
}

_DIGITS = "0123456789"
_NUMBER = re.compile(r"([0-9]*)(\.([0-9]*))?")
_MAX_NANOS = (1 << 63) - 1


def _quote(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def parse_duration(text: str) -> timedelta:
    """Parse a duration such as "1h30m", "45m" or "1.5s"."""
    original = text
    rest = text
    negative = False
    if rest and rest[0] in "+-":
        negative = rest[0] == "-"
        rest = rest[1:]
    if rest == "0":
        return timedelta(0)
    if not rest:
        raise DurationError(f"time: invalid duration {_quote(original)}")

    total = 0
    while rest:
        if rest[0] != "." and rest[0] not in _DIGITS:
            raise DurationError(f"time: invalid duration {_quote(original)}")
        match = _NUMBER.match(rest)
        int_digits = match.group(1)
        frac_digits = match.group(3) or ""
        has_int = bool(int_digits)
        has_frac = match.group(2) is not None and bool(frac_digits)
        if not has_int and not has_frac:
            raise DurationError(f"time: invalid duration {_quote(original)}")
        rest = rest[match.end():]

        end = 0
        while end < len(rest) and rest[end] != "." and rest[end] not in _DIGITS:
            end += 1
        if end == 0:
            raise DurationError(f"time: missing unit in duration {_quote(original)}")
        unit_name, rest = rest[:end], rest[end:]
        unit = _UNITS.get(unit_name)
        if unit is None:
            raise DurationError(
                f"time: unknown unit {_quote(unit_name)} in duration {_quote(original)}"
            )

        value = int(int_digits or "0") * unit
        if frac_digits:
            value += int(frac_digits) * unit // 10 ** len(frac_digits)
        total += value
        if total > _MAX_NANOS + (1 if negative else 0):
            raise DurationError(f"time: invalid duration {_quote(original)}")

    result = timedelta(microseconds=total // _MICROSECOND)
    return -result if negative else result


def _with_fraction(value: int, precision: int) -> str:
    scale = 10**precision
    whole, frac = divmod(value, scale)
    frac_text = str(frac).rjust(precision, "0").rstrip("0")
    return f"{whole}.{frac_text}" if frac_text else str(whole)


def format_duration(value: timedelta) -> str:
    """Render a duration in the compact "1h2m3.5s" form."""
    nanos = ((value.days * 86400 + value.seconds) * 1_000_000 + value.microseconds) * 1000
    sign = "-" if nanos < 0 else ""
    nanos = abs(nanos)
    if nanos == 0:
        return "0s"
    if nanos < _SECOND:
        if nanos < _MICROSECOND:
            body = f"{nanos}ns"
        elif nanos < _MILLISECOND:
            body = _with_fraction(nanos, 3) + "\u00b5s"
        else:
            body = _with_fraction(nanos, 6) + "ms"
        return sign + body

    body = _with_fraction(nanos % _MINUTE, 9) + "s"
    minutes = nanos // _MINUTE
    if minutes:
        body = f"{minutes % 60}m" + body
        hours = minutes // 60
        if hours:
            body = f"{hours}h" + body
    return sign + body