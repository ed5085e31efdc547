#!/usr/bin/env python3
"""
KUBEADMIT POD TEMPLATES
-----------------------
First-order checks on the pod template embedded in every workload kind.
Workload validators add their own restart-policy and selector rules on
top of these.

Author: KubeAdmit Team
Date: 2026-10-17
"""

from typing import List, Set

from kubeadmit.core.models import (
    Container,
    DNS_CLUSTER_FIRST,
    DNS_DEFAULT,
    PROTOCOL_TCP,
    PROTOCOL_UDP,
    PULL_ALWAYS,
    PULL_IF_NOT_PRESENT,
    PULL_NEVER,
    PodSpec,
    PodTemplateSpec,
    RESTART_POLICY_ALWAYS,
    RESTART_POLICY_NEVER,
    RESTART_POLICY_ON_FAILURE,
    Volume,
)
from kubeadmit.validation.field import ErrorList, Path
from kubeadmit.validation.primitives import (
    C_IDENTIFIER_ERROR_MSG,
    DNS1123_LABEL_ERROR_MSG,
    DNS1123_SUBDOMAIN_ERROR_MSG,
    PORT_NAME_ERROR_MSG,
    PORT_RANGE_ERROR_MSG,
    is_c_identifier,
    is_dns1123_label,
    is_dns1123_subdomain,
    is_valid_port_name,
    is_valid_port_num,
    validate_annotations,
    validate_labels,
    validate_positive,
)

RESTART_POLICIES = (RESTART_POLICY_ALWAYS, RESTART_POLICY_ON_FAILURE, RESTART_POLICY_NEVER)
DNS_POLICIES = (DNS_CLUSTER_FIRST, DNS_DEFAULT)
PULL_POLICIES = (PULL_ALWAYS, PULL_IF_NOT_PRESENT, PULL_NEVER)
PROTOCOLS = (PROTOCOL_TCP, PROTOCOL_UDP)

# Field names of Volume that hold a volume source
_VOLUME_SOURCES = ("empty_dir", "host_path", "gce_persistent_disk", "secret", "config_map")


def validate_pod_template_spec(template: PodTemplateSpec, path: Path, errs: ErrorList) -> None:
    meta_path = path.child("metadata")
    validate_labels(template.metadata.labels, meta_path.child("labels"), errs)
    validate_annotations(template.metadata.annotations, meta_path.child("annotations"), errs)
    validate_pod_spec(template.spec, path.child("spec"), errs)


def validate_pod_spec(spec: PodSpec, path: Path, errs: ErrorList) -> None:
    volume_names = _validate_volumes(spec.volumes, path.child("volumes"), errs)
    _validate_containers(spec.containers, volume_names, path.child("containers"), errs)
    _validate_choice(spec.restart_policy, RESTART_POLICIES, path.child("restartPolicy"), errs)
    _validate_choice(spec.dns_policy, DNS_POLICIES, path.child("dnsPolicy"), errs)
    validate_labels(spec.node_selector, path.child("nodeSelector"), errs)
    if spec.node_name and not is_dns1123_subdomain(spec.node_name):
        errs.add_invalid(path.child("nodeName"), spec.node_name, DNS1123_SUBDOMAIN_ERROR_MSG)
    if spec.active_deadline_seconds is not None:
        validate_positive(spec.active_deadline_seconds, path.child("activeDeadlineSeconds"), errs)


def validate_read_only_persistent_disks(volumes: List[Volume], path: Path, errs: ErrorList) -> None:
    """Pods spread over several nodes can only share a GCE PD read-only."""
    for i, vol in enumerate(volumes):
        pd = vol.gce_persistent_disk
        if pd is not None and not pd.read_only:
            errs.add_invalid(path.index(i).child("gcePersistentDisk", "readOnly"), False,
                             "must be true for replicated pods; a GCE PD can only be "
                             "mounted on multiple machines if it is read-only")


def _validate_choice(value: str, allowed, path: Path, errs: ErrorList) -> None:
    if not value:
        errs.add_required(path)
    elif value not in allowed:
        errs.add_not_supported(path, value, allowed)


def _validate_volumes(volumes: List[Volume], path: Path, errs: ErrorList) -> Set[str]:
    names: Set[str] = set()
    for i, vol in enumerate(volumes):
        idx_path = path.index(i)
        if not vol.name:
            errs.add_required(idx_path.child("name"))
        elif not is_dns1123_label(vol.name):
            errs.add_invalid(idx_path.child("name"), vol.name, DNS1123_LABEL_ERROR_MSG)
        elif vol.name in names:
            errs.add_duplicate(idx_path.child("name"), vol.name)
        else:
            names.add(vol.name)
        _validate_volume_source(vol, idx_path, errs)
    return names


def _validate_volume_source(vol: Volume, path: Path, errs: ErrorList) -> None:
    sources = [s for s in _VOLUME_SOURCES if getattr(vol, s) is not None]
    if not sources:
        errs.add_required(path, "must specify a volume type")
        return
    if len(sources) > 1:
        errs.add_forbidden(path, "may not specify more than 1 volume type")
        return

    if vol.host_path is not None and not vol.host_path.path:
        errs.add_required(path.child("hostPath", "path"))
    if vol.secret is not None and not vol.secret.secret_name:
        errs.add_required(path.child("secret", "secretName"))
    if vol.config_map is not None and not vol.config_map.name:
        errs.add_required(path.child("configMap", "name"))
    pd = vol.gce_persistent_disk
    if pd is not None:
        pd_path = path.child("gcePersistentDisk")
        if not pd.pd_name:
            errs.add_required(pd_path.child("pdName"))
        if pd.partition < 0 or pd.partition > 255:
            errs.add_invalid(pd_path.child("partition"), pd.partition, "must be between 0 and 255, inclusive")


def _validate_containers(containers: List[Container], volume_names: Set[str],
                         path: Path, errs: ErrorList) -> None:
    if not containers:
        errs.add_required(path)
        return

    names: Set[str] = set()
    for i, ctr in enumerate(containers):
        idx_path = path.index(i)
        if not ctr.name:
            errs.add_required(idx_path.child("name"))
        elif not is_dns1123_label(ctr.name):
            errs.add_invalid(idx_path.child("name"), ctr.name, DNS1123_LABEL_ERROR_MSG)
        elif ctr.name in names:
            errs.add_duplicate(idx_path.child("name"), ctr.name)
        else:
            names.add(ctr.name)

        if not ctr.image:
            errs.add_required(idx_path.child("image"))
        _validate_choice(ctr.image_pull_policy, PULL_POLICIES, idx_path.child("imagePullPolicy"), errs)
        _validate_container_ports(ctr, idx_path.child("ports"), errs)

        for j, env in enumerate(ctr.env):
            env_path = idx_path.child("env").index(j).child("name")
            if not env.name:
                errs.add_required(env_path)
            elif not is_c_identifier(env.name):
                errs.add_invalid(env_path, env.name, C_IDENTIFIER_ERROR_MSG)

        for j, mount in enumerate(ctr.volume_mounts):
            mount_path = idx_path.child("volumeMounts").index(j)
            if not mount.name:
                errs.add_required(mount_path.child("name"))
            elif mount.name not in volume_names:
                errs.add_not_found(mount_path.child("name"), mount.name)
            if not mount.mount_path:
                errs.add_required(mount_path.child("mountPath"))


def _validate_container_ports(ctr: Container, path: Path, errs: ErrorList) -> None:
    port_names: Set[str] = set()
    for i, port in enumerate(ctr.ports):
        idx_path = path.index(i)
        if port.name:
            if not is_valid_port_name(port.name):
                errs.add_invalid(idx_path.child("name"), port.name, PORT_NAME_ERROR_MSG)
            elif port.name in port_names:
                errs.add_duplicate(idx_path.child("name"), port.name)
            else:
                port_names.add(port.name)
        if not is_valid_port_num(port.container_port):
            errs.add_invalid(idx_path.child("containerPort"), port.container_port, PORT_RANGE_ERROR_MSG)
        if port.host_port and not is_valid_port_num(port.host_port):
            errs.add_invalid(idx_path.child("hostPort"), port.host_port, PORT_RANGE_ERROR_MSG)
        _validate_choice(port.protocol, PROTOCOLS, idx_path.child("protocol"), errs)
