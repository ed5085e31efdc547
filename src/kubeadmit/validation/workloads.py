#!/usr/bin/env python3
"""
KUBEADMIT WORKLOAD VALIDATORS
-----------------------------
Daemon sets, deployments and jobs: create, update and status-update checks.

Selector handling differs per kind:
  * DaemonSet / Job carry a LabelSelector; ``None`` is Required, an empty
    one selects everything and the template labels must satisfy it.
  * Deployment carries a plain label map; it must be non-empty and must
    equal the template labels exactly.

Author: KubeAdmit Team
Date: 2026-10-17
"""

from typing import Optional

from kubeadmit.core.labels import SelectorError, selector_from_label_selector
from kubeadmit.core.models import (
    DaemonSet,
    DaemonSetSpec,
    DaemonSetStatus,
    DaemonSetUpdateStrategy,
    Deployment,
    DeploymentRollback,
    DeploymentSpec,
    DeploymentStrategy,
    Job,
    JobSpec,
    JobStatus,
    LabelSelector,
    PodTemplateSpec,
    RECREATE_DEPLOYMENT_STRATEGY,
    RESTART_POLICY_ALWAYS,
    RESTART_POLICY_NEVER,
    RESTART_POLICY_ON_FAILURE,
    ROLLING_UPDATE_DAEMON_SET_STRATEGY,
    ROLLING_UPDATE_DEPLOYMENT_STRATEGY,
)
from kubeadmit.validation.field import ErrorList, Path
from kubeadmit.validation.objectmeta import (
    validate_object_meta,
    validate_object_meta_spec_update,
    validate_object_meta_update,
)
from kubeadmit.validation.pod import validate_pod_template_spec, validate_read_only_persistent_disks
from kubeadmit.validation.primitives import (
    get_int_or_percent_value,
    name_is_dns_subdomain,
    validate_annotations,
    validate_immutable,
    validate_label_name,
    validate_label_selector,
    validate_non_negative,
    validate_not_more_than_100_percent,
    validate_positive_int_or_percent,
    validate_surge_unavailable_pair,
)

SELECTOR_MISMATCH_MSG = "`selector` does not match template `labels`"


def _validate_selector_matches_template(selector: Optional[LabelSelector], template: PodTemplateSpec,
                                        path: Path, errs: ErrorList) -> None:
    if selector is None:
        return
    try:
        sel = selector_from_label_selector(selector)
    except SelectorError:
        # the bad operator is already reported by validate_label_selector
        return
    if not sel.matches(template.metadata.labels):
        errs.add_invalid(path, template.metadata.labels, SELECTOR_MISMATCH_MSG)


# --- Daemon sets ---

def validate_daemon_set(ds: DaemonSet) -> ErrorList:
    errs = ErrorList()
    validate_object_meta(ds.metadata, True, name_is_dns_subdomain, Path.root("metadata"), errs)
    validate_daemon_set_spec(ds.spec, Path.root("spec"), errs)
    return errs


def validate_daemon_set_spec(spec: DaemonSetSpec, path: Path, errs: ErrorList) -> None:
    validate_label_selector(spec.selector, path.child("selector"), errs)
    if spec.selector is None:
        errs.add_required(path.child("selector"))
    if spec.template is None:
        errs.add_required(path.child("template"))
        return

    template_path = path.child("template")
    _validate_selector_matches_template(spec.selector, spec.template,
                                        template_path.child("metadata", "labels"), errs)
    validate_pod_template_spec(spec.template, template_path, errs)
    # One pod per node means the same disk is always mounted from many nodes
    validate_read_only_persistent_disks(spec.template.spec.volumes,
                                        template_path.child("spec", "volumes"), errs)
    if spec.template.spec.restart_policy != RESTART_POLICY_ALWAYS:
        errs.add_not_supported(template_path.child("spec", "restartPolicy"),
                               spec.template.spec.restart_policy, [RESTART_POLICY_ALWAYS])

    validate_daemon_set_update_strategy(spec.update_strategy, path.child("updateStrategy"), errs)


def validate_daemon_set_update_strategy(strategy: DaemonSetUpdateStrategy, path: Path, errs: ErrorList) -> None:
    if strategy.type != ROLLING_UPDATE_DAEMON_SET_STRATEGY:
        errs.add_invalid(path.child("type"), strategy.type, "RollingUpdate is the only supported type")
    if strategy.rolling_update is None:
        errs.add_required(path.child("rollingUpdate"))
        return

    ru = strategy.rolling_update
    ru_path = path.child("rollingUpdate")
    unavailable_path = ru_path.child("maxUnavailable")
    validate_positive_int_or_percent(ru.max_unavailable, unavailable_path, errs)
    if get_int_or_percent_value(ru.max_unavailable) == 0:
        errs.add_invalid(unavailable_path, ru.max_unavailable, "cannot be 0")
    validate_not_more_than_100_percent(ru.max_unavailable, unavailable_path, errs)
    validate_non_negative(ru.min_ready_seconds, ru_path.child("minReadySeconds"), errs)


def validate_daemon_set_update(new: DaemonSet, old: DaemonSet) -> ErrorList:
    errs = ErrorList()
    validate_object_meta_spec_update(new.metadata, old.metadata, True, name_is_dns_subdomain,
                                     Path.root("metadata"), errs)
    validate_daemon_set_spec(new.spec, Path.root("spec"), errs)
    validate_daemon_set_template_update(new.spec, old.spec, Path.root("spec", "template"), errs)
    return errs


def validate_daemon_set_template_update(new: DaemonSetSpec, old: DaemonSetSpec, path: Path, errs: ErrorList) -> None:
    """Template content may only change by way of a rolling update."""
    if new.template == old.template:
        return
    if new.update_strategy.type != ROLLING_UPDATE_DAEMON_SET_STRATEGY:
        errs.add_forbidden(path, "may only be changed through a rolling update")


def validate_daemon_set_status(status: DaemonSetStatus, path: Path, errs: ErrorList) -> None:
    validate_non_negative(status.current_number_scheduled, path.child("currentNumberScheduled"), errs)
    validate_non_negative(status.number_misscheduled, path.child("numberMisscheduled"), errs)
    validate_non_negative(status.desired_number_scheduled, path.child("desiredNumberScheduled"), errs)


def validate_daemon_set_status_update(new: DaemonSet, old: DaemonSet) -> ErrorList:
    errs = ErrorList()
    validate_object_meta_update(new.metadata, old.metadata, Path.root("metadata"), errs)
    validate_daemon_set_status(new.status, Path.root("status"), errs)
    return errs


# --- Deployments ---

def validate_deployment(deployment: Deployment) -> ErrorList:
    errs = ErrorList()
    validate_object_meta(deployment.metadata, True, name_is_dns_subdomain, Path.root("metadata"), errs)
    validate_deployment_spec(deployment.spec, Path.root("spec"), errs)
    return errs


def validate_deployment_spec(spec: DeploymentSpec, path: Path, errs: ErrorList) -> None:
    if not spec.selector:
        errs.add_required(path.child("selector"))
    validate_non_negative(spec.replicas, path.child("replicas"), errs)
    _validate_replicated_template(spec, path.child("template"), errs)
    validate_deployment_strategy(spec.strategy, path.child("strategy"), errs)
    # empty is allowed and means no unique label is added
    if spec.unique_label_key:
        validate_label_name(spec.unique_label_key, path.child("uniqueLabel"), errs)


def _validate_replicated_template(spec: DeploymentSpec, path: Path, errs: ErrorList) -> None:
    template = spec.template
    if spec.selector and spec.selector != template.metadata.labels:
        errs.add_invalid(path.child("metadata", "labels"), template.metadata.labels, SELECTOR_MISMATCH_MSG)
    validate_pod_template_spec(template, path, errs)
    if spec.replicas > 1:
        validate_read_only_persistent_disks(template.spec.volumes, path.child("spec", "volumes"), errs)
    if template.spec.restart_policy != RESTART_POLICY_ALWAYS:
        errs.add_not_supported(path.child("spec", "restartPolicy"), template.spec.restart_policy,
                               [RESTART_POLICY_ALWAYS])


def validate_deployment_strategy(strategy: DeploymentStrategy, path: Path, errs: ErrorList) -> None:
    if strategy.rolling_update is None:
        return
    if strategy.type == RECREATE_DEPLOYMENT_STRATEGY:
        errs.add_forbidden(path.child("rollingUpdate"),
                           "may not be specified when strategy `type` is 'Recreate'")
    elif strategy.type == ROLLING_UPDATE_DEPLOYMENT_STRATEGY:
        ru = strategy.rolling_update
        ru_path = path.child("rollingUpdate")
        validate_surge_unavailable_pair(ru.max_surge, ru.max_unavailable, ru_path, errs)
        validate_non_negative(ru.min_ready_seconds, ru_path.child("minReadySeconds"), errs)


def validate_deployment_update(new: Deployment, old: Deployment) -> ErrorList:
    errs = ErrorList()
    validate_object_meta_spec_update(new.metadata, old.metadata, True, name_is_dns_subdomain,
                                     Path.root("metadata"), errs)
    validate_deployment_spec(new.spec, Path.root("spec"), errs)
    return errs


def validate_deployment_status_update(new: Deployment, old: Deployment) -> ErrorList:
    errs = ErrorList()
    validate_object_meta_update(new.metadata, old.metadata, Path.root("metadata"), errs)
    status_path = Path.root("status")
    validate_non_negative(new.status.replicas, status_path.child("replicas"), errs)
    validate_non_negative(new.status.updated_replicas, status_path.child("updatedReplicas"), errs)
    return errs


def validate_deployment_rollback(rollback: DeploymentRollback) -> ErrorList:
    errs = ErrorList()
    validate_annotations(rollback.updated_annotations, Path.root("updatedAnnotations"), errs)
    if not rollback.name:
        errs.add_required(Path.root("name"), "name is required")
    validate_non_negative(rollback.rollback_to.revision, Path.root("rollbackTo", "revision"), errs)
    return errs


# --- Jobs ---

def validate_job(job: Job) -> ErrorList:
    errs = ErrorList()
    validate_object_meta(job.metadata, True, name_is_dns_subdomain, Path.root("metadata"), errs)
    validate_job_spec(job.spec, Path.root("spec"), errs)
    return errs


def validate_job_spec(spec: JobSpec, path: Path, errs: ErrorList) -> None:
    if spec.parallelism is not None:
        validate_non_negative(spec.parallelism, path.child("parallelism"), errs)
    if spec.completions is not None:
        validate_non_negative(spec.completions, path.child("completions"), errs)
    if spec.active_deadline_seconds is not None:
        validate_non_negative(spec.active_deadline_seconds, path.child("activeDeadlineSeconds"), errs)

    if spec.selector is None:
        errs.add_required(path.child("selector"))
    else:
        validate_label_selector(spec.selector, path.child("selector"), errs)

    template_path = path.child("template")
    _validate_selector_matches_template(spec.selector, spec.template,
                                        template_path.child("metadata", "labels"), errs)
    validate_pod_template_spec(spec.template, template_path, errs)
    if spec.template.spec.restart_policy not in (RESTART_POLICY_ON_FAILURE, RESTART_POLICY_NEVER):
        errs.add_not_supported(template_path.child("spec", "restartPolicy"), spec.template.spec.restart_policy,
                               [RESTART_POLICY_ON_FAILURE, RESTART_POLICY_NEVER])


def validate_job_update(new: Job, old: Job) -> ErrorList:
    errs = ErrorList()
    validate_object_meta_spec_update(new.metadata, old.metadata, True, name_is_dns_subdomain,
                                     Path.root("metadata"), errs)
    spec_path = Path.root("spec")
    validate_job_spec(new.spec, spec_path, errs)
    validate_immutable(new.spec.completions, old.spec.completions, spec_path.child("completions"), errs)
    validate_immutable(new.spec.selector, old.spec.selector, spec_path.child("selector"), errs)
    validate_immutable(new.spec.template, old.spec.template, spec_path.child("template"), errs)
    return errs


def validate_job_status(status: JobStatus, path: Path, errs: ErrorList) -> None:
    validate_non_negative(status.active, path.child("active"), errs)
    validate_non_negative(status.succeeded, path.child("succeeded"), errs)
    validate_non_negative(status.failed, path.child("failed"), errs)


def validate_job_status_update(new: Job, old: Job) -> ErrorList:
    errs = ErrorList()
    validate_object_meta_update(new.metadata, old.metadata, Path.root("metadata"), errs)
    validate_job_status(new.status, Path.root("status"), errs)
    return errs
