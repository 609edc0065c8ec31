# olmapi

Plain Python dataclasses for the `operators.coreos.com` API group managed by
the Operator Lifecycle Manager (OLM), together with the behaviour those types
carry: phase bookkeeping on ClusterServiceVersions, install-mode checks,
catalog polling decisions, install-plan step ordering, condition management on
subscriptions, install plans and bundle lookups, and object references.

No dependencies beyond the standard library.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Layout

| Module | Contents |
| --- | --- |
| `olmapi.meta` | `GroupVersion`, `GroupVersionKind`, `GroupVersionResource`, `GroupKind`, `GroupResource`, `ConditionStatus`, `ObjectMeta`, `ObjectReference`, `LabelSelector`, `Condition`, `DurationError`, `parse_duration`, `format_duration`, `now` |
| `olmapi.v1.olmconfig` | `OLMConfig`, `Features`, `resource`, `copied_csvs_are_enabled`, `package_server_sync_interval` |
| `olmapi.v1.operator` | `Operator`, `Components`, `RichReference`, `ComponentCondition` |
| `olmapi.v1.operatorcondition` | `OperatorCondition` (v1) |
| `olmapi.v1.operatorgroup` | `OperatorGroup`, `UpgradeStrategy`, `is_operator_group_label` |
| `olmapi.v1alpha1.register` | `kind`, `resource` |
| `olmapi.v1alpha1.descriptions` | CRD, API service and webhook descriptions, `InstallMode`, `InstallModeType`, `ValidatingWebhook`, `MutatingWebhook` |
| `olmapi.v1alpha1.clusterserviceversion` | `ClusterServiceVersion`, `ClusterServiceVersionPhase`, `ConditionReason`, `EventRecorder`, `InstallModeSet`, `InstallModeError`, `new_install_mode_set`, `is_copied` |
| `olmapi.v1alpha1.catalogsource` | `CatalogSource`, `UpdateStrategy`, `RegistryPoll`, `SourceType` |
| `olmapi.v1alpha1.installplan` | `InstallPlan`, `InstallPlanStatus`, `Step`, `StepResource`, `BundleLookup`, `order_steps`, `condition_failed`, `condition_met` |
| `olmapi.v1alpha1.subscription` | `Subscription`, `SubscriptionStatus`, `SubscriptionCondition`, `new_install_plan_reference` |
| `olmapi.v1alpha2.operatorgroup` | `OperatorGroup` (v1alpha2), `resource` |
| `olmapi.v2.operatorcondition` | `OperatorCondition` (v2), `resource` |
| `olmapi.reference` | `Scheme`, `install`, `get_reference` |

## Examples

Check whether an operator can watch a set of namespaces. `supports` returns
nothing when the configuration is allowed and raises `InstallModeError`
otherwise:

```python
from olmapi.v1alpha1.clusterserviceversion import InstallModeError, new_install_mode_set
from olmapi.v1alpha1.descriptions import InstallMode, InstallModeType

modes = new_install_mode_set([
    InstallMode(type=InstallModeType.OWN_NAMESPACE, supported=True),
    InstallMode(type=InstallModeType.MULTI_NAMESPACE, supported=False),
])

modes.supports("operators", ["operators"])        # fine
try:
    modes.supports("operators", ["ns-0", "ns-1"])
except InstallModeError as err:
    print(err)
```

Record a phase transition on a ClusterServiceVersion. A new condition is
appended when the phase or reason changes, and the history is kept to the
latest `CONDITIONS_LENGTH_LIMIT` (20) entries:

```python
from olmapi.meta import now
from olmapi.v1alpha1.clusterserviceversion import (
    ClusterServiceVersion,
    ClusterServiceVersionPhase,
    ConditionReason,
)

csv = ClusterServiceVersion()
csv.set_phase(
    ClusterServiceVersionPhase.PENDING,
    ConditionReason.REQUIREMENTS_UNKNOWN,
    "waiting on requirements",
    now(),
)
print(csv.status.phase, len(csv.status.conditions))
```

Parse a catalog update strategy; an unparsable interval falls back to the
fifteen-minute default and records why in `parsing_error`:

```python
from olmapi.v1alpha1.catalogsource import UpdateStrategy

strategy = UpdateStrategy.from_dict({"registryPoll": {"interval": "45m"}})
print(strategy.registry_poll.interval)
```

Build an object reference for an OLM resource. The API version is taken from
the object's self link when it has one, otherwise from the version its type is
registered under:

```python
from olmapi.meta import ObjectMeta
from olmapi.reference import get_reference
from olmapi.v1alpha1.subscription import Subscription

sub = Subscription(metadata=ObjectMeta(namespace="ns", name="sub", uid="uid"))
ref = get_reference(sub)
print(ref.kind, ref.api_version)
```

`install` registers the v1alpha1 types (CatalogSource, InstallPlan,
Subscription, ClusterServiceVersion and their lists) and the v1 types
(OLMConfig, Operator, OperatorCondition, OperatorGroup and their lists).
The v1alpha2 OperatorGroup and the v2 OperatorCondition are not registered, so
`get_reference` raises `ValueError` for them, as it does for `None`.

## What this package does not do

- It does not talk to a cluster: there is no client, watch or controller.
- It does not read or write whole resource manifests in JSON or YAML; objects
  are built as Python dataclasses. The only decoder is
  `UpdateStrategy.from_dict`.
- `EventRecorder` only collects events in its `events` list; forwarding them
  anywhere is left to a subclass.
- Embedded Kubernetes structures such as deployment specs, RBAC rules,
  tolerations and affinities are kept as plain dictionaries and are not
  validated.