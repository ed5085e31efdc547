#!/usr/bin/env python3
"""
KUBEADMIT AUTOSCALING VALIDATORS
--------------------------------
Horizontal pod autoscalers, the cluster autoscaler singleton and the
scale subresource.

Author: KubeAdmit Team
Date: 2026-10-17
"""

from kubeadmit.core.models import (
    CPU_REQUEST,
    ClusterAutoscaler,
    ClusterAutoscalerSpec,
    HorizontalPodAutoscaler,
    HorizontalPodAutoscalerSpec,
    MEM_REQUEST,
    NAMESPACE_DEFAULT,
    Scale,
    SubresourceReference,
)
from kubeadmit.validation.field import ErrorList, Path
from kubeadmit.validation.objectmeta import (
    validate_object_meta,
    validate_object_meta_spec_update,
    validate_object_meta_update,
)
from kubeadmit.validation.primitives import (
    name_is_dns_subdomain,
    name_is_path_segment,
    validate_annotations,
    validate_labels,
    validate_non_negative,
    validate_ordered_pair,
    validate_positive,
)

SCALE_SUBRESOURCES = ("scale",)

CLUSTER_AUTOSCALER_NAME = "ClusterAutoscaler"
CLUSTER_AUTOSCALER_RESOURCES = (CPU_REQUEST, MEM_REQUEST)


# --- Horizontal pod autoscalers ---

def validate_horizontal_pod_autoscaler(hpa: HorizontalPodAutoscaler) -> ErrorList:
    errs = ErrorList()
    validate_object_meta(hpa.metadata, True, name_is_dns_subdomain, Path.root("metadata"), errs)
    validate_horizontal_pod_autoscaler_spec(hpa.spec, Path.root("spec"), errs)
    return errs


def validate_horizontal_pod_autoscaler_spec(spec: HorizontalPodAutoscalerSpec, path: Path,
                                            errs: ErrorList) -> None:
    if spec.min_replicas is not None:
        validate_positive(spec.min_replicas, path.child("minReplicas"), errs)
    validate_positive(spec.max_replicas, path.child("maxReplicas"), errs)
    if spec.min_replicas is not None:
        validate_ordered_pair(spec.min_replicas, spec.max_replicas, "minReplicas",
                              path.child("maxReplicas"), errs)
    if spec.cpu_utilization is not None:
        validate_positive(spec.cpu_utilization.target_percentage,
                          path.child("cpuUtilization", "targetPercentage"), errs)

    ref_path = path.child("scaleRef")
    before = len(errs)
    validate_subresource_reference(spec.scale_ref, ref_path, errs)
    if len(errs) == before and spec.scale_ref.subresource not in SCALE_SUBRESOURCES:
        errs.add_not_supported(ref_path.child("subresource"), spec.scale_ref.subresource, SCALE_SUBRESOURCES)


def validate_subresource_reference(ref: SubresourceReference, path: Path, errs: ErrorList) -> None:
    """Kind, name and subresource end up as URL path segments."""
    for field_name in ("kind", "name", "subresource"):
        value = getattr(ref, field_name)
        if not value:
            errs.add_required(path.child(field_name))
            continue
        ok, msg = name_is_path_segment(value, False)
        if not ok:
            errs.add_invalid(path.child(field_name), value, msg)


def validate_horizontal_pod_autoscaler_update(new: HorizontalPodAutoscaler,
                                              old: HorizontalPodAutoscaler) -> ErrorList:
    errs = ErrorList()
    validate_object_meta_spec_update(new.metadata, old.metadata, True, name_is_dns_subdomain,
                                     Path.root("metadata"), errs)
    validate_horizontal_pod_autoscaler_spec(new.spec, Path.root("spec"), errs)
    return errs


def validate_horizontal_pod_autoscaler_status_update(new: HorizontalPodAutoscaler,
                                                     old: HorizontalPodAutoscaler) -> ErrorList:
    errs = ErrorList()
    validate_object_meta_update(new.metadata, old.metadata, Path.root("metadata"), errs)
    status_path = Path.root("status")
    validate_non_negative(new.status.current_replicas, status_path.child("currentReplicas"), errs)
    validate_non_negative(new.status.desired_replicas, status_path.child("desiredReplicas"), errs)
    return errs


# --- Cluster autoscaler ---

def validate_cluster_autoscaler(autoscaler: ClusterAutoscaler) -> ErrorList:
    """There is exactly one cluster autoscaler, with a fixed name and namespace."""
    errs = ErrorList()
    meta = autoscaler.metadata
    meta_path = Path.root("metadata")
    if meta.name != CLUSTER_AUTOSCALER_NAME:
        errs.add_invalid(meta_path.child("name"), meta.name, f"must be '{CLUSTER_AUTOSCALER_NAME}'")
    if meta.namespace != NAMESPACE_DEFAULT:
        errs.add_invalid(meta_path.child("namespace"), meta.namespace, f"must be '{NAMESPACE_DEFAULT}'")
    validate_labels(meta.labels, meta_path.child("labels"), errs)
    validate_annotations(meta.annotations, meta_path.child("annotations"), errs)
    validate_cluster_autoscaler_spec(autoscaler.spec, Path.root("spec"), errs)
    return errs


def validate_cluster_autoscaler_spec(spec: ClusterAutoscalerSpec, path: Path, errs: ErrorList) -> None:
    validate_non_negative(spec.min_nodes, path.child("minNodes"), errs)
    validate_ordered_pair(spec.min_nodes, spec.max_nodes, "minNodes", path.child("maxNodes"), errs)

    targets_path = path.child("targetUtilization")
    if not spec.target_utilization:
        errs.add_required(targets_path)
    for i, target in enumerate(spec.target_utilization):
        idx_path = targets_path.index(i)
        if not target.resource:
            errs.add_required(idx_path.child("resource"))
        elif target.resource not in CLUSTER_AUTOSCALER_RESOURCES:
            errs.add_not_supported(idx_path.child("resource"), target.resource, CLUSTER_AUTOSCALER_RESOURCES)
        if target.value <= 0:
            errs.add_invalid(idx_path.child("value"), target.value, "must be greater than 0")
        elif target.value > 1:
            errs.add_invalid(idx_path.child("value"), target.value, "must be less than or equal to 1")


# --- Scale ---

def validate_scale(scale: Scale) -> ErrorList:
    errs = ErrorList()
    validate_object_meta(scale.metadata, True, name_is_dns_subdomain, Path.root("metadata"), errs)
    # zero means scaled down to nothing, not unset
    validate_non_negative(scale.spec.replicas, Path.root("spec", "replicas"), errs)
    return errs
