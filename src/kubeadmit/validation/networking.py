#!/usr/bin/env python3
"""
KUBEADMIT INGRESS VALIDATORS
----------------------------
Routing rules, default backends and TLS entries for Ingress objects, plus
the load-balancer status written back by controllers.

Author: KubeAdmit Team
Date: 2026-10-17
"""

from kubeadmit.core.models import (
    HTTPIngressRuleValue,
    Ingress,
    IngressBackend,
    IngressRule,
    IngressSpec,
)
from kubeadmit.validation.field import ErrorList, Path
from kubeadmit.validation.objectmeta import (
    validate_object_meta,
    validate_object_meta_spec_update,
    validate_object_meta_update,
)
from kubeadmit.validation.primitives import (
    DNS1123_LABEL_ERROR_MSG,
    DNS1123_SUBDOMAIN_ERROR_MSG,
    PORT_NAME_ERROR_MSG,
    PORT_RANGE_ERROR_MSG,
    is_dns1123_label,
    is_dns1123_subdomain,
    is_valid_port_name,
    is_valid_port_num,
    name_is_dns_subdomain,
    validate_dns_host,
    validate_http_path,
    validate_load_balancer_status,
)


def validate_ingress(ingress: Ingress) -> ErrorList:
    errs = ErrorList()
    validate_object_meta(ingress.metadata, True, name_is_dns_subdomain, Path.root("metadata"), errs)
    validate_ingress_spec(ingress.spec, Path.root("spec"), errs)
    return errs


def validate_ingress_spec(spec: IngressSpec, path: Path, errs: ErrorList) -> None:
    if spec.backend is not None:
        validate_ingress_backend(spec.backend, path.child("backend"), errs)
    elif not spec.rules:
        errs.add_invalid(path.child("rules"), spec.rules, "either `backend` or `rules` must be specified")

    for i, rule in enumerate(spec.rules):
        _validate_ingress_rule(rule, path.child("rules").index(i), errs)

    for i, tls in enumerate(spec.tls):
        tls_path = path.child("tls").index(i)
        for j, host in enumerate(tls.hosts):
            if not _is_tls_host(host):
                errs.add_invalid(tls_path.child("hosts").index(j), host, DNS1123_SUBDOMAIN_ERROR_MSG)


def _is_tls_host(host: str) -> bool:
    # a certificate may cover one wildcard label on the far left
    if host.startswith("*."):
        host = host[2:]
    return is_dns1123_subdomain(host)


def _validate_ingress_rule(rule: IngressRule, path: Path, errs: ErrorList) -> None:
    # an empty host matches every request
    if rule.host:
        validate_dns_host(rule.host, path.child("host"), errs)
    if rule.http is not None:
        _validate_http_rule_value(rule.http, path.child("http"), errs)


def _validate_http_rule_value(http: HTTPIngressRuleValue, path: Path, errs: ErrorList) -> None:
    paths_path = path.child("paths")
    if not http.paths:
        errs.add_required(paths_path)
    for i, rule_path in enumerate(http.paths):
        idx_path = paths_path.index(i)
        validate_http_path(rule_path.path, idx_path.child("path"), errs)
        validate_ingress_backend(rule_path.backend, idx_path.child("backend"), errs)


def validate_ingress_backend(backend: IngressBackend, path: Path, errs: ErrorList) -> None:
    """A backend names a service and one of its ports, by name or number."""
    name_path = path.child("serviceName")
    if not backend.service_name:
        errs.add_required(name_path)
        return
    if not is_dns1123_subdomain(backend.service_name):
        errs.add_invalid(name_path, backend.service_name, DNS1123_SUBDOMAIN_ERROR_MSG)

    port = backend.service_port
    port_path = path.child("servicePort")
    if port.is_string:
        if not is_dns1123_label(port.str_val):
            errs.add_invalid(port_path, port, DNS1123_LABEL_ERROR_MSG)
        if not is_valid_port_name(port.str_val):
            errs.add_invalid(port_path, port, PORT_NAME_ERROR_MSG)
    elif not is_valid_port_num(port.int_val):
        errs.add_invalid(port_path, port, PORT_RANGE_ERROR_MSG)


def validate_ingress_update(new: Ingress, old: Ingress) -> ErrorList:
    errs = ErrorList()
    validate_object_meta_spec_update(new.metadata, old.metadata, True, name_is_dns_subdomain,
                                     Path.root("metadata"), errs)
    validate_ingress_spec(new.spec, Path.root("spec"), errs)
    return errs


def validate_ingress_status_update(new: Ingress, old: Ingress) -> ErrorList:
    errs = ErrorList()
    validate_object_meta_update(new.metadata, old.metadata, Path.root("metadata"), errs)
    validate_load_balancer_status(new.status.load_balancer, Path.root("status", "loadBalancer"), errs)
    return errs
