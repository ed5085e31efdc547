#!/usr/bin/env python3
"""
KUBEADMIT VALIDATOR - The Judge
-------------------------------
Routes a typed resource object to the validator for its kind.

Each kind registers free functions for create, update and status-update.
Shared checks (object metadata, label maps, pod templates) are composed
inside those functions rather than inherited, so adding a kind is one
table entry.

Author: KubeAdmit Team
Date: 2026-10-17
"""

import logging
from typing import Any, Callable, Dict, NamedTuple, Optional

from kubeadmit.core.models import (
    ClusterAutoscaler,
    ConfigMap,
    DaemonSet,
    Deployment,
    DeploymentRollback,
    HorizontalPodAutoscaler,
    Ingress,
    Job,
    Scale,
)
from kubeadmit.validation.autoscaling import (
    validate_cluster_autoscaler,
    validate_horizontal_pod_autoscaler,
    validate_horizontal_pod_autoscaler_status_update,
    validate_horizontal_pod_autoscaler_update,
    validate_scale,
)
from kubeadmit.validation.configuration import validate_config_map, validate_config_map_update
from kubeadmit.validation.field import ErrorList
from kubeadmit.validation.networking import (
    validate_ingress,
    validate_ingress_status_update,
    validate_ingress_update,
)
from kubeadmit.validation.workloads import (
    validate_daemon_set,
    validate_daemon_set_status_update,
    validate_daemon_set_update,
    validate_deployment,
    validate_deployment_rollback,
    validate_deployment_status_update,
    validate_deployment_update,
    validate_job,
    validate_job_status_update,
    validate_job_update,
)

logger = logging.getLogger("kubeadmit.validator")

CreateFn = Callable[[Any], ErrorList]
UpdateFn = Callable[[Any, Any], ErrorList]


class KindValidators(NamedTuple):
    create: CreateFn
    update: Optional[UpdateFn] = None
    status_update: Optional[UpdateFn] = None


# Immutable after import; read concurrently by every validation call
VALIDATORS: Dict[str, KindValidators] = {
    HorizontalPodAutoscaler.KIND: KindValidators(
        validate_horizontal_pod_autoscaler,
        validate_horizontal_pod_autoscaler_update,
        validate_horizontal_pod_autoscaler_status_update,
    ),
    DaemonSet.KIND: KindValidators(
        validate_daemon_set, validate_daemon_set_update, validate_daemon_set_status_update,
    ),
    Deployment.KIND: KindValidators(
        validate_deployment, validate_deployment_update, validate_deployment_status_update,
    ),
    DeploymentRollback.KIND: KindValidators(validate_deployment_rollback),
    Job.KIND: KindValidators(validate_job, validate_job_update, validate_job_status_update),
    Ingress.KIND: KindValidators(validate_ingress, validate_ingress_update, validate_ingress_status_update),
    ClusterAutoscaler.KIND: KindValidators(validate_cluster_autoscaler),
    Scale.KIND: KindValidators(validate_scale),
    ConfigMap.KIND: KindValidators(validate_config_map, validate_config_map_update),
}


class UnsupportedKindError(LookupError):
    """No validator is registered for the kind/verb combination."""

    def __init__(self, kind: str, verb: str = "create"):
        super().__init__(f"no {verb} validator for kind '{kind}'")
        self.kind = kind
        self.verb = verb


class KubeValidator:
    """
    Admission gate for decoded objects.
    Stateless: one instance may serve any number of concurrent calls.
    """

    def __init__(self, registry: Optional[Dict[str, KindValidators]] = None):
        self.registry = registry if registry is not None else VALIDATORS

    def supports(self, kind: str, verb: str = "create") -> bool:
        entry = self.registry.get(kind)
        if entry is None:
            return False
        return getattr(entry, verb) is not None

    def _lookup(self, kind: str, verb: str) -> Callable[..., ErrorList]:
        entry = self.registry.get(kind)
        fn = getattr(entry, verb) if entry is not None else None
        if fn is None:
            raise UnsupportedKindError(kind, verb)
        return fn

    def validate(self, obj: Any) -> ErrorList:
        """Create-time validation. An empty list means the object is admitted."""
        errs = self._lookup(obj.KIND, "create")(obj)
        logger.debug(f"create {obj.KIND}: {len(errs)} error(s)")
        return errs

    def validate_update(self, new: Any, old: Any) -> ErrorList:
        self._check_same_kind(new, old)
        errs = self._lookup(new.KIND, "update")(new, old)
        logger.debug(f"update {new.KIND}: {len(errs)} error(s)")
        return errs

    def validate_status_update(self, new: Any, old: Any) -> ErrorList:
        self._check_same_kind(new, old)
        errs = self._lookup(new.KIND, "status_update")(new, old)
        logger.debug(f"status update {new.KIND}: {len(errs)} error(s)")
        return errs

    @staticmethod
    def _check_same_kind(new: Any, old: Any) -> None:
        if new.KIND != old.KIND:
            raise TypeError(f"cannot compare a {new.KIND} with a {old.KIND}")
