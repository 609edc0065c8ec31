from datetime import timedelta, timezone

import pytest

from olmapi.meta import (
    DurationError,
    GroupKind,
    GroupResource,
    GroupVersion,
    ObjectMeta,
    format_duration,
    now,
    parse_duration,
)


def test_group_version_str_with_group():
    assert str(GroupVersion("operators.coreos.com", "v1")) == "operators.coreos.com/v1"


def test_group_version_str_without_group():
    assert str(GroupVersion("", "v1")) == "v1"


def test_with_kind_group_kind():
    gv = GroupVersion("operators.coreos.com", "v1alpha1")
    gvk = gv.with_kind("InstallPlan")
    assert gvk.version == "v1alpha1"
    assert gvk.group_kind() == GroupKind("operators.coreos.com", "InstallPlan")


def test_with_resource_group_resource():
    gv = GroupVersion("operators.coreos.com", "v1")
    assert gv.with_resource("operatorgroups").group_resource() == GroupResource(
        "operators.coreos.com", "operatorgroups"
    )


@pytest.mark.parametrize(
    "text, expected",
    [
        ("45m", timedelta(minutes=45)),
        ("15m", timedelta(minutes=15)),
        ("60s", timedelta(seconds=60)),
        ("5m", timedelta(minutes=5)),
        ("1.5h", timedelta(minutes=90)),
        ("1h30m", timedelta(minutes=90)),
        ("-2s", timedelta(seconds=-2)),
        ("0", timedelta(0)),
    ],
)
def test_parse_duration(text, expected):
    assert parse_duration(text) == expected


def test_parse_duration_unknown_unit():
    with pytest.raises(DurationError) as info:
        parse_duration("19mError Code")
    assert str(info.value) == 'time: unknown unit "mError Code" in duration "19mError Code"'


def test_parse_duration_empty():
    with pytest.raises(DurationError) as info:
        parse_duration("")
    assert str(info.value) == 'time: invalid duration ""'


@pytest.mark.parametrize("text", ["10", "abc", ".s", "1m-"])
def test_parse_duration_rejects_malformed(text):
    with pytest.raises(ValueError):
        parse_duration(text)


def test_format_duration_default_poll():
    assert format_duration(timedelta(minutes=15)) == "15m0s"


def test_format_duration_zero():
    assert format_duration(timedelta(0)) == "0s"


@pytest.mark.parametrize(
    "value",
    [
        timedelta(minutes=15),
        timedelta(hours=2, minutes=3, seconds=4),
        timedelta(seconds=1, microseconds=500000),
        timedelta(milliseconds=250),
        timedelta(microseconds=7),
        timedelta(seconds=-90),
        timedelta(days=3),
    ],
)
def test_format_parse_round_trip(value):
    assert parse_duration(format_duration(value)) == value


def test_now_is_utc_and_monotonic():
    first = now()
    second = now()
    assert first.tzinfo is timezone.utc
    assert second >= first


def test_object_meta_defaults_are_empty():
    meta = ObjectMeta(name="a")
    assert meta.labels is None and meta.annotations is None
    assert meta.uid == ""