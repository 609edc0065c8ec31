import pytest

from olmapi.meta import LabelSelector
from olmapi.v1alpha1.descriptions import (
    APIServiceDescription,
    InstallModeType,
    Rule,
    RuleWithOperations,
    StrategyDetailsDeployment,
    WebhookAdmissionType,
    WebhookDescription,
)


@pytest.fixture
def webhook_desc():
    return WebhookDescription(
        generate_name="foo-webhook",
        type=WebhookAdmissionType.VALIDATING_ADMISSION_WEBHOOK,
        deployment_name="foo-deployment",
        container_port=444,
        admission_review_versions=["v1beta1", "v1"],
        side_effects="None",
        match_policy="Exact",
        failure_policy="Fail",
        object_selector=LabelSelector(match_labels={"foo": "bar"}),
        timeout_seconds=32,
        webhook_path="/test",
        rules=[
            RuleWithOperations(
                operations=[],
                rule=Rule(api_groups=["*"], api_versions=["*"], resources=["*"]),
            )
        ],
    )


def test_validating_webhook_configuration(webhook_desc):
    config = webhook_desc.get_validating_webhook("foo", None, None)
    assert config.client_config.service.port == 444
    assert config.rules == webhook_desc.rules
    assert config.failure_policy == webhook_desc.failure_policy
    assert config.match_policy == webhook_desc.match_policy
    assert config.object_selector == webhook_desc.object_selector
    assert config.side_effects == webhook_desc.side_effects
    assert config.timeout_seconds == webhook_desc.timeout_seconds
    assert config.admission_review_versions == webhook_desc.admission_review_versions
    assert config.client_config.service.path == webhook_desc.webhook_path


def test_mutating_webhook_configuration(webhook_desc):
    config = webhook_desc.get_mutating_webhook("foo", None, None)
    assert config.client_config.service.port == 444
    assert config.rules == webhook_desc.rules
    assert config.failure_policy == webhook_desc.failure_policy
    assert config.match_policy == webhook_desc.match_policy
    assert config.object_selector == webhook_desc.object_selector
    assert config.side_effects == webhook_desc.side_effects
    assert config.timeout_seconds == webhook_desc.timeout_seconds
    assert config.admission_review_versions == webhook_desc.admission_review_versions
    assert config.reinvocation_policy == webhook_desc.reinvocation_policy
    assert config.client_config.service.path == webhook_desc.webhook_path


def test_webhook_service_name_and_namespace(webhook_desc):
    config = webhook_desc.get_validating_webhook("foo", None, b"ca")
    assert config.client_config.service.name == "foo-deployment-service"
    assert config.client_config.service.namespace == "foo"
    assert config.client_config.ca_bundle == b"ca"
    assert config.name == "foo-webhook"


def test_domain_name_replaces_periods():
    desc = WebhookDescription(
        generate_name="w",
        type=WebhookAdmissionType.MUTATING_ADMISSION_WEBHOOK,
        deployment_name="a.b.c",
    )
    assert desc.domain_name() == "a-b-c"


def test_namespace_selector_is_passed_through(webhook_desc):
    selector = LabelSelector(match_labels={"ns": "x"})
    config = webhook_desc.get_mutating_webhook("foo", selector, None)
    assert config.namespace_selector is selector


def test_api_service_description_name():
    desc = APIServiceDescription(group="example.com", version="v1")
    assert desc.get_name() == "v1.example.com"


def test_strategy_name():
    assert StrategyDetailsDeployment().strategy_name() == "deployment"


def test_install_mode_type_values():
    assert InstallModeType("AllNamespaces") is InstallModeType.ALL_NAMESPACES
    assert InstallModeType.OWN_NAMESPACE == "OwnNamespace"