from datetime import timedelta

import pytest

from olmapi.meta import ObjectMeta, now
from olmapi.v1alpha1.catalogsource import (
    CATALOG_SOURCE_REGISTRY_SERVER_ERROR,
    DEFAULT_REGISTRY_POLL_DURATION,
    CatalogSource,
    CatalogSourceSpec,
    CatalogSourceStatus,
    ConfigMapResourceReference,
    RegistryPoll,
    RegistryServiceStatus,
    SourceType,
    UpdateStrategy,
)


def _polling_source(interval, created=None, latest=None):
    return CatalogSource(
        metadata=ObjectMeta(creation_timestamp=created),
        spec=CatalogSourceSpec(
            update_strategy=UpdateStrategy(registry_poll=RegistryPoll(interval=interval)),
            image="mycatsrcimage",
            source_type=SourceType.GRPC,
        ),
        status=CatalogSourceStatus(latest_image_registry_poll=latest),
    )


def test_update_first_time_after_interval_from_creation():
    src = _polling_source(timedelta(seconds=1), created=now() - timedelta(seconds=2))
    assert src.update() is True


def test_update_after_interval_from_previous_poll():
    moment = now() - timedelta(seconds=2)
    src = _polling_source(timedelta(seconds=1), created=moment, latest=moment)
    assert src.update() is True


def test_update_not_due_yet():
    src = _polling_source(timedelta(hours=1), created=now(), latest=now())
    assert src.update() is False


def test_update_without_polling_is_false():
    assert CatalogSource().update() is False


@pytest.mark.parametrize(
    "spec, expected",
    [
        (CatalogSourceSpec(), False),
        (CatalogSourceSpec(source_type=SourceType.INTERNAL, address="127.0.0.1:8080"), False),
        (
            CatalogSourceSpec(
                image="my-image",
                source_type=SourceType.GRPC,
                update_strategy=UpdateStrategy(
                    registry_poll=RegistryPoll(interval=timedelta(seconds=1))
                ),
            ),
            True,
        ),
    ],
)
def test_poll(spec, expected):
    assert CatalogSource(spec=spec).poll() is expected


def test_update_strategy_valid():
    strategy = UpdateStrategy.from_dict({"registryPoll": {"interval": "45m"}})
    assert strategy.registry_poll.raw_interval == "45m"
    assert strategy.registry_poll.interval == timedelta(minutes=45)
    assert strategy.registry_poll.parsing_error == ""


def test_update_strategy_invalid():
    strategy = UpdateStrategy.from_dict({"registryPoll": {"interval": "19mError Code"}})
    assert strategy.registry_poll.raw_interval == "19mError Code"
    assert strategy.registry_poll.interval == timedelta(minutes=15)
    assert strategy.registry_poll.parsing_error == (
        "error parsing spec.updateStrategy.registryPoll.interval. Using the default value of "
        '15m0s instead. Error: time: unknown unit "mError Code" in duration "19mError Code"'
    )


def test_update_strategy_empty():
    strategy = UpdateStrategy.from_dict({"registryPoll": {"interval": ""}})
    assert strategy.registry_poll.raw_interval == ""
    assert strategy.registry_poll.interval == DEFAULT_REGISTRY_POLL_DURATION
    assert strategy.registry_poll.parsing_error == (
        "error parsing spec.updateStrategy.registryPoll.interval. Using the default value of "
        '15m0s instead. Error: time: invalid duration ""'
    )


def test_address_prefers_spec():
    src = CatalogSource(
        spec=CatalogSourceSpec(address="127.0.0.1:8080"),
        status=CatalogSourceStatus(
            registry_service_status=RegistryServiceStatus(
                service_name="svc", service_namespace="ns", port="50051"
            )
        ),
    )
    assert src.address() == "127.0.0.1:8080"


def test_address_from_registry_service():
    src = CatalogSource(
        status=CatalogSourceStatus(
            registry_service_status=RegistryServiceStatus(
                service_name="svc", service_namespace="ns", port="50051"
            )
        )
    )
    assert src.address() == "svc.ns.svc:50051"


def test_address_missing_raises():
    with pytest.raises(ValueError):
        CatalogSource().address()


def test_set_error_and_clear():
    src = CatalogSource()
    src.set_error(CATALOG_SOURCE_REGISTRY_SERVER_ERROR, RuntimeError("boom"))
    assert src.status.reason == CATALOG_SOURCE_REGISTRY_SERVER_ERROR
    assert src.status.message == "boom"
    src.set_error(CATALOG_SOURCE_REGISTRY_SERVER_ERROR, None)
    assert src.status.message == ""


def test_set_last_update_time_makes_update_not_due():
    src = _polling_source(timedelta(hours=1), created=now() - timedelta(hours=2))
    assert src.update() is True
    src.set_last_update_time()
    assert src.status.latest_image_registry_poll <= now()
    assert src.update() is False


def test_config_map_reference_match():
    ref = ConfigMapResourceReference(name="cm", namespace="ns", uid="u1", resource_version="7")
    assert ref.is_a_match(ObjectMeta(uid="u1", resource_version="7")) is True
    assert ref.is_a_match(ObjectMeta(uid="u1", resource_version="8")) is False
    assert ref.is_a_match(ObjectMeta(uid="u2", resource_version="7")) is False