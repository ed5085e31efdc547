"""
KUBEADMIT TEST SUITE - Autoscaling
Horizontal pod autoscalers, the cluster autoscaler and the scale subresource.
"""

import copy

import pytest

from builders import valid_cluster_autoscaler, valid_hpa, valid_scale
from kubeadmit.core.models import CPUTargetUtilization, NodeUtilization
from kubeadmit.validation.autoscaling import (
    validate_cluster_autoscaler,
    validate_horizontal_pod_autoscaler,
    validate_horizontal_pod_autoscaler_status_update,
    validate_horizontal_pod_autoscaler_update,
    validate_scale,
)
from kubeadmit.validation.field import ErrorType


# --- HorizontalPodAutoscaler ---

def test_hpa_success():
    assert validate_horizontal_pod_autoscaler(valid_hpa()) == []


def test_hpa_min_replicas_optional():
    hpa = valid_hpa()
    hpa.spec.min_replicas = None
    hpa.spec.cpu_utilization = None
    assert validate_horizontal_pod_autoscaler(hpa) == []


def test_hpa_negative_min_replicas():
    """AUTOSCALER TEST: the first error names minReplicas."""
    hpa = valid_hpa()
    hpa.spec.min_replicas = -1
    errs = validate_horizontal_pod_autoscaler(hpa)
    assert errs[0].error() == "spec.minReplicas: Invalid value: -1: must be greater than 0"


def test_hpa_zero_max_replicas():
    hpa = valid_hpa()
    hpa.spec.max_replicas = 0
    errs = validate_horizontal_pod_autoscaler(hpa)
    assert errs[0].error() == "spec.maxReplicas: Invalid value: 0: must be greater than 0"


def test_hpa_max_below_min():
    hpa = valid_hpa()
    hpa.spec.min_replicas = 7
    errs = validate_horizontal_pod_autoscaler(hpa)
    assert [e.detail for e in errs] == ["must be greater than or equal to `minReplicas`"]


def test_hpa_cpu_target():
    hpa = valid_hpa()
    hpa.spec.cpu_utilization = CPUTargetUtilization(target_percentage=0)
    errs = validate_horizontal_pod_autoscaler(hpa)
    assert [e.field for e in errs] == ["spec.cpuUtilization.targetPercentage"]


@pytest.mark.parametrize("attr, value, expected", [
    ("kind", "", "spec.scaleRef.kind: Required value"),
    ("name", "", "spec.scaleRef.name: Required value"),
    ("name", "..", "spec.scaleRef.name: Invalid value: \"..\": may not be '..'"),
    ("name", "my/rc", "spec.scaleRef.name: Invalid value: \"my/rc\": may not contain '/'"),
    ("kind", "Replication%Controller",
     "spec.scaleRef.kind: Invalid value: \"Replication%Controller\": may not contain '%'"),
    ("subresource", "", "spec.scaleRef.subresource: Required value"),
    ("subresource", "status",
     "spec.scaleRef.subresource: Unsupported value: \"status\": supported values: scale"),
])
def test_hpa_scale_ref(attr, value, expected):
    """REFERENCE TEST: each scaleRef field is a URL path segment."""
    hpa = valid_hpa()
    setattr(hpa.spec.scale_ref, attr, value)
    errs = validate_horizontal_pod_autoscaler(hpa)
    assert [e.error() for e in errs] == [expected]


def test_hpa_update():
    old = valid_hpa()
    new = copy.deepcopy(old)
    new.metadata.resource_version = "2"
    new.spec.max_replicas = 10
    assert validate_horizontal_pod_autoscaler_update(new, old) == []

    new.metadata.namespace = "other"
    errs = validate_horizontal_pod_autoscaler_update(new, old)
    assert [e.error() for e in errs] == ["metadata.namespace: Forbidden: field is immutable"]


def test_hpa_update_rejects_invalid_name_carried_over():
    old = valid_hpa()
    old.metadata.name = "Bad_Name"
    new = copy.deepcopy(old)
    new.metadata.resource_version = "2"
    errs = validate_horizontal_pod_autoscaler_update(new, old)
    assert [(e.field, e.type) for e in errs] == [("metadata.name", ErrorType.INVALID)]


def test_hpa_status_update():
    old = valid_hpa()
    new = copy.deepcopy(old)
    new.metadata.resource_version = "2"
    new.status.current_replicas = -1
    errs = validate_horizontal_pod_autoscaler_status_update(new, old)
    assert [e.field for e in errs] == ["status.currentReplicas"]


# --- ClusterAutoscaler ---

def test_cluster_autoscaler_success():
    assert validate_cluster_autoscaler(valid_cluster_autoscaler()) == []


def test_cluster_autoscaler_fixed_identity():
    """SINGLETON TEST: the cluster autoscaler has a fixed name and namespace."""
    ca = valid_cluster_autoscaler()
    ca.metadata.name = "my-autoscaler"
    ca.metadata.namespace = "kube-system"
    errs = validate_cluster_autoscaler(ca)
    assert [e.detail for e in errs] == ["must be 'ClusterAutoscaler'", "must be 'default'"]


def test_cluster_autoscaler_node_bounds():
    ca = valid_cluster_autoscaler()
    ca.spec.min_nodes = -1
    assert validate_cluster_autoscaler(ca)[0].field == "spec.minNodes"

    ca = valid_cluster_autoscaler()
    ca.spec.min_nodes = 6
    errs = validate_cluster_autoscaler(ca)
    assert [e.field for e in errs] == ["spec.maxNodes"]


def test_cluster_autoscaler_requires_target():
    ca = valid_cluster_autoscaler()
    ca.spec.target_utilization = []
    errs = validate_cluster_autoscaler(ca)
    assert [e.error() for e in errs] == ["spec.targetUtilization: Required value"]


@pytest.mark.parametrize("resource, value, field, kind", [
    ("", 0.5, "spec.targetUtilization[0].resource", ErrorType.REQUIRED),
    ("GpuRequest", 0.5, "spec.targetUtilization[0].resource", ErrorType.NOT_SUPPORTED),
    ("CpuRequest", 0, "spec.targetUtilization[0].value", ErrorType.INVALID),
    ("MemRequest", 1.5, "spec.targetUtilization[0].value", ErrorType.INVALID),
])
def test_cluster_autoscaler_targets(resource, value, field, kind):
    ca = valid_cluster_autoscaler()
    ca.spec.target_utilization = [NodeUtilization(resource=resource, value=value)]
    errs = validate_cluster_autoscaler(ca)
    assert [(e.field, e.type) for e in errs] == [(field, kind)]


def test_cluster_autoscaler_full_utilization_allowed():
    ca = valid_cluster_autoscaler()
    ca.spec.target_utilization = [NodeUtilization(resource="MemRequest", value=1.0)]
    assert validate_cluster_autoscaler(ca) == []


# --- Scale ---

def test_scale_zero_replicas_allowed():
    assert validate_scale(valid_scale(0)) == []


def test_scale_negative_replicas():
    errs = validate_scale(valid_scale(-1))
    assert [e.error() for e in errs] == [
        "spec.replicas: Invalid value: -1: must be greater than or equal to 0"
    ]


def test_scale_requires_name():
    scale = valid_scale()
    scale.metadata.name = ""
    assert [e.field for e in validate_scale(scale)] == ["metadata.name"]
