#!/usr/bin/env python3
"""
KUBEADMIT CORE MODELS
---------------------
Defines the typed resource objects handed to the validation engine.
These models are the in-memory shape of a decoded manifest: the decoder
builds them, the validators read them, nothing mutates them.

Author: KubeAdmit Team
Date: 2026-10-17
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

NAMESPACE_DEFAULT = "default"

# Pod level enumerations
RESTART_POLICY_ALWAYS = "Always"
RESTART_POLICY_ON_FAILURE = "OnFailure"
RESTART_POLICY_NEVER = "Never"

DNS_CLUSTER_FIRST = "ClusterFirst"
DNS_DEFAULT = "Default"

PULL_ALWAYS = "Always"
PULL_IF_NOT_PRESENT = "IfNotPresent"
PULL_NEVER = "Never"

PROTOCOL_TCP = "TCP"
PROTOCOL_UDP = "UDP"

# Workload strategies
ROLLING_UPDATE_DAEMON_SET_STRATEGY = "RollingUpdate"
RECREATE_DEPLOYMENT_STRATEGY = "Recreate"
ROLLING_UPDATE_DEPLOYMENT_STRATEGY = "RollingUpdate"

# Label selector operators
SELECTOR_OP_IN = "In"
SELECTOR_OP_NOT_IN = "NotIn"
SELECTOR_OP_EXISTS = "Exists"
SELECTOR_OP_DOES_NOT_EXIST = "DoesNotExist"

# Cluster autoscaler resources
CPU_REQUEST = "CpuRequest"
MEM_REQUEST = "MemRequest"


@dataclass(frozen=True)
class IntOrString:
    """
    A value that is either a plain count or a string such as "25%".

    Mirrors the wire form: ``is_string`` records which side was supplied,
    so an explicit ``0`` and an unset value are the same thing.
    """
    int_val: int = 0
    str_val: str = ""
    is_string: bool = False

    @classmethod
    def from_int(cls, value: int) -> "IntOrString":
        return cls(int_val=value)

    @classmethod
    def from_string(cls, value: str) -> "IntOrString":
        return cls(str_val=value, is_string=True)

    @classmethod
    def parse(cls, raw: Union[int, str, "IntOrString", None]) -> "IntOrString":
        if raw is None:
            return cls()
        if isinstance(raw, IntOrString):
            return raw
        if isinstance(raw, bool):
            raise TypeError("boolean is not an int or string")
        if isinstance(raw, int):
            return cls.from_int(raw)
        return cls.from_string(str(raw))

    @property
    def value(self) -> Union[int, str]:
        return self.str_val if self.is_string else self.int_val

    def int_value(self) -> int:
        """Integer form; a non-numeric string counts as 0."""
        if not self.is_string:
            return self.int_val
        try:
            return int(self.str_val)
        except ValueError:
            return 0

    def __str__(self) -> str:
        return str(self.value)


@dataclass
class ObjectMeta:
    name: str = ""
    generate_name: str = ""
    namespace: str = ""
    labels: Dict[str, str] = field(default_factory=dict)
    annotations: Dict[str, str] = field(default_factory=dict)
    resource_version: str = ""
    uid: str = ""
    generation: int = 0
    creation_timestamp: Optional[str] = None
    deletion_grace_period_seconds: Optional[int] = None


# --- Label selectors ---

@dataclass
class LabelSelectorRequirement:
    key: str = ""
    operator: str = ""
    values: List[str] = field(default_factory=list)


@dataclass
class LabelSelector:
    """Set-based selector: every matchLabels pair AND every expression must hold."""
    match_labels: Dict[str, str] = field(default_factory=dict)
    match_expressions: List[LabelSelectorRequirement] = field(default_factory=list)


# --- Pods ---

@dataclass
class ContainerPort:
    container_port: int = 0
    name: str = ""
    protocol: str = PROTOCOL_TCP
    host_port: int = 0


@dataclass
class EnvVar:
    name: str = ""
    value: str = ""


@dataclass
class VolumeMount:
    name: str = ""
    mount_path: str = ""
    read_only: bool = False


@dataclass
class Container:
    name: str = ""
    image: str = ""
    image_pull_policy: str = ""
    ports: List[ContainerPort] = field(default_factory=list)
    env: List[EnvVar] = field(default_factory=list)
    volume_mounts: List[VolumeMount] = field(default_factory=list)


@dataclass
class EmptyDirVolumeSource:
    medium: str = ""


@dataclass
class HostPathVolumeSource:
    path: str = ""


@dataclass
class GCEPersistentDiskVolumeSource:
    pd_name: str = ""
    fs_type: str = ""
    partition: int = 0
    read_only: bool = False


@dataclass
class SecretVolumeSource:
    secret_name: str = ""


@dataclass
class ConfigMapVolumeSource:
    name: str = ""


@dataclass
class Volume:
    name: str = ""
    empty_dir: Optional[EmptyDirVolumeSource] = None
    host_path: Optional[HostPathVolumeSource] = None
    gce_persistent_disk: Optional[GCEPersistentDiskVolumeSource] = None
    secret: Optional[SecretVolumeSource] = None
    config_map: Optional[ConfigMapVolumeSource] = None


@dataclass
class PodSpec:
    volumes: List[Volume] = field(default_factory=list)
    containers: List[Container] = field(default_factory=list)
    restart_policy: str = ""
    dns_policy: str = ""
    node_selector: Dict[str, str] = field(default_factory=dict)
    node_name: str = ""
    active_deadline_seconds: Optional[int] = None


@dataclass
class PodTemplateSpec:
    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: PodSpec = field(default_factory=PodSpec)


# --- Horizontal pod autoscaler ---

@dataclass
class SubresourceReference:
    kind: str = ""
    name: str = ""
    api_version: str = ""
    subresource: str = ""


@dataclass
class CPUTargetUtilization:
    target_percentage: int = 0


@dataclass
class HorizontalPodAutoscalerSpec:
    scale_ref: SubresourceReference = field(default_factory=SubresourceReference)
    min_replicas: Optional[int] = None
    max_replicas: int = 0
    cpu_utilization: Optional[CPUTargetUtilization] = None


@dataclass
class HorizontalPodAutoscalerStatus:
    observed_generation: Optional[int] = None
    current_replicas: int = 0
    desired_replicas: int = 0
    current_cpu_utilization_percentage: Optional[int] = None


@dataclass
class HorizontalPodAutoscaler:
    KIND = "HorizontalPodAutoscaler"

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: HorizontalPodAutoscalerSpec = field(default_factory=HorizontalPodAutoscalerSpec)
    status: HorizontalPodAutoscalerStatus = field(default_factory=HorizontalPodAutoscalerStatus)


# --- Daemon sets ---

@dataclass
class RollingUpdateDaemonSet:
    max_unavailable: IntOrString = field(default_factory=IntOrString)
    min_ready_seconds: int = 0


@dataclass
class DaemonSetUpdateStrategy:
    type: str = ""
    rolling_update: Optional[RollingUpdateDaemonSet] = None


@dataclass
class DaemonSetSpec:
    selector: Optional[LabelSelector] = None
    template: Optional[PodTemplateSpec] = None
    update_strategy: DaemonSetUpdateStrategy = field(default_factory=DaemonSetUpdateStrategy)


@dataclass
class DaemonSetStatus:
    current_number_scheduled: int = 0
    number_misscheduled: int = 0
    desired_number_scheduled: int = 0


@dataclass
class DaemonSet:
    KIND = "DaemonSet"

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: DaemonSetSpec = field(default_factory=DaemonSetSpec)
    status: DaemonSetStatus = field(default_factory=DaemonSetStatus)


# --- Deployments ---

@dataclass
class RollingUpdateDeployment:
    max_unavailable: IntOrString = field(default_factory=IntOrString)
    max_surge: IntOrString = field(default_factory=IntOrString)
    min_ready_seconds: int = 0


@dataclass
class DeploymentStrategy:
    type: str = ""
    rolling_update: Optional[RollingUpdateDeployment] = None


@dataclass
class DeploymentSpec:
    replicas: int = 0
    selector: Dict[str, str] = field(default_factory=dict)
    template: PodTemplateSpec = field(default_factory=PodTemplateSpec)
    strategy: DeploymentStrategy = field(default_factory=DeploymentStrategy)
    unique_label_key: str = ""


@dataclass
class DeploymentStatus:
    replicas: int = 0
    updated_replicas: int = 0


@dataclass
class Deployment:
    KIND = "Deployment"

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: DeploymentSpec = field(default_factory=DeploymentSpec)
    status: DeploymentStatus = field(default_factory=DeploymentStatus)


@dataclass
class RollbackConfig:
    revision: int = 0


@dataclass
class DeploymentRollback:
    KIND = "DeploymentRollback"

    name: str = ""
    updated_annotations: Dict[str, str] = field(default_factory=dict)
    rollback_to: RollbackConfig = field(default_factory=RollbackConfig)


# --- Jobs ---

@dataclass
class JobSpec:
    parallelism: Optional[int] = None
    completions: Optional[int] = None
    active_deadline_seconds: Optional[int] = None
    selector: Optional[LabelSelector] = None
    template: PodTemplateSpec = field(default_factory=PodTemplateSpec)


@dataclass
class JobStatus:
    active: int = 0
    succeeded: int = 0
    failed: int = 0


@dataclass
class Job:
    KIND = "Job"

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: JobSpec = field(default_factory=JobSpec)
    status: JobStatus = field(default_factory=JobStatus)


# --- Ingress ---

@dataclass
class IngressBackend:
    service_name: str = ""
    service_port: IntOrString = field(default_factory=IntOrString)


@dataclass
class HTTPIngressPath:
    path: str = ""
    backend: IngressBackend = field(default_factory=IngressBackend)


@dataclass
class HTTPIngressRuleValue:
    paths: List[HTTPIngressPath] = field(default_factory=list)


@dataclass
class IngressRule:
    host: str = ""
    http: Optional[HTTPIngressRuleValue] = None


@dataclass
class IngressTLS:
    hosts: List[str] = field(default_factory=list)
    secret_name: str = ""


@dataclass
class IngressSpec:
    backend: Optional[IngressBackend] = None
    tls: List[IngressTLS] = field(default_factory=list)
    rules: List[IngressRule] = field(default_factory=list)


@dataclass
class LoadBalancerIngress:
    ip: str = ""
    hostname: str = ""


@dataclass
class LoadBalancerStatus:
    ingress: List[LoadBalancerIngress] = field(default_factory=list)


@dataclass
class IngressStatus:
    load_balancer: LoadBalancerStatus = field(default_factory=LoadBalancerStatus)


@dataclass
class Ingress:
    KIND = "Ingress"

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: IngressSpec = field(default_factory=IngressSpec)
    status: IngressStatus = field(default_factory=IngressStatus)


# --- Cluster autoscaler ---

@dataclass
class NodeUtilization:
    resource: str = ""
    value: float = 0.0


@dataclass
class ClusterAutoscalerSpec:
    min_nodes: int = 0
    max_nodes: int = 0
    target_utilization: List[NodeUtilization] = field(default_factory=list)


@dataclass
class ClusterAutoscaler:
    KIND = "ClusterAutoscaler"

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: ClusterAutoscalerSpec = field(default_factory=ClusterAutoscalerSpec)


# --- Scale subresource ---

@dataclass
class ScaleSpec:
    replicas: int = 0


@dataclass
class ScaleStatus:
    replicas: int = 0
    selector: Dict[str, str] = field(default_factory=dict)


@dataclass
class Scale:
    KIND = "Scale"

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: ScaleSpec = field(default_factory=ScaleSpec)
    status: ScaleStatus = field(default_factory=ScaleStatus)


# --- Config maps ---

@dataclass
class ConfigMap:
    KIND = "ConfigMap"

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    data: Dict[str, str] = field(default_factory=dict)


# Every kind the engine can admit, keyed by its manifest `kind`.
RESOURCE_TYPES: Dict[str, Any] = {
    cls.KIND: cls
    for cls in (
        HorizontalPodAutoscaler,
        DaemonSet,
        Deployment,
        DeploymentRollback,
        Job,
        Ingress,
        ClusterAutoscaler,
        Scale,
        ConfigMap,
    )
}
