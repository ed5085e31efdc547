"""
KUBEADMIT TEST SUITE - Ingress
"""

import copy

import pytest

from builders import valid_ingress
from kubeadmit.core.models import (
    HTTPIngressRuleValue,
    IngressBackend,
    IngressRule,
    IngressTLS,
    IntOrString,
    LoadBalancerIngress,
)
from kubeadmit.validation.field import ErrorType
from kubeadmit.validation.networking import (
    validate_ingress,
    validate_ingress_status_update,
    validate_ingress_update,
)
from kubeadmit.validation.primitives import PORT_RANGE_ERROR_MSG


def test_ingress_success():
    assert validate_ingress(valid_ingress()) == []


def test_ingress_rules_without_default_backend():
    ing = valid_ingress()
    ing.spec.backend = None
    assert validate_ingress(ing) == []


def test_ingress_needs_backend_or_rules():
    ing = valid_ingress()
    ing.spec.backend = None
    ing.spec.rules = []
    errs = validate_ingress(ing)
    assert [e.error() for e in errs] == [
        "spec.rules: Invalid value: []: either `backend` or `rules` must be specified"
    ]


def test_ingress_backend_service_name():
    ing = valid_ingress()
    ing.spec.backend.service_name = ""
    assert [e.error() for e in validate_ingress(ing)] == ["spec.backend.serviceName: Required value"]

    ing.spec.backend.service_name = "Bad_Service"
    assert [e.field for e in validate_ingress(ing)] == ["spec.backend.serviceName"]


def test_ingress_backend_port_zero():
    """PORT TEST: numeric ports must fall in the valid range."""
    ing = valid_ingress()
    ing.spec.backend.service_port = IntOrString.from_int(0)
    errs = validate_ingress(ing)
    assert errs[0].error() == f"spec.backend.servicePort: Invalid value: 0: {PORT_RANGE_ERROR_MSG}"


@pytest.mark.parametrize("port, count", [
    ("http", 0),
    ("8080", 1),
    ("Bad--Name", 2),
])
def test_ingress_backend_named_port(port, count):
    ing = valid_ingress()
    ing.spec.backend.service_port = IntOrString.from_string(port)
    errs = validate_ingress(ing)
    assert len(errs) == count
    assert all(e.field == "spec.backend.servicePort" for e in errs)


@pytest.mark.parametrize("host", ["foobar:80", "127.0.0.1"])
def test_ingress_rule_host(host):
    """HOST TEST: hosts must be DNS names, not IPs or host:port."""
    ing = valid_ingress()
    ing.spec.rules[0].host = host
    errs = validate_ingress(ing)
    assert [e.field for e in errs] == ["spec.rules[0].host"]


def test_ingress_rule_without_host_matches_all():
    ing = valid_ingress()
    ing.spec.rules[0].host = ""
    assert validate_ingress(ing) == []


def test_ingress_http_requires_paths():
    ing = valid_ingress()
    ing.spec.rules = [IngressRule(host="foo.bar.com", http=HTTPIngressRuleValue(paths=[]))]
    errs = validate_ingress(ing)
    assert [(e.field, e.type) for e in errs] == [("spec.rules[0].http.paths", ErrorType.REQUIRED)]


def test_ingress_path_rules():
    ing = valid_ingress()
    ing.spec.rules[0].http.paths[0].path = "foo"
    ing.spec.rules[0].http.paths[0].backend = IngressBackend(service_name="svc",
                                                             service_port=IntOrString.from_int(70000))
    errs = validate_ingress(ing)
    assert [e.field for e in errs] == [
        "spec.rules[0].http.paths[0].path",
        "spec.rules[0].http.paths[0].backend.servicePort",
    ]


def test_ingress_tls_hosts():
    ing = valid_ingress()
    ing.spec.tls = [IngressTLS(hosts=["foo.bar.com", "Not_A_Host"], secret_name="tls")]
    errs = validate_ingress(ing)
    assert [e.field for e in errs] == ["spec.tls[0].hosts[1]"]


@pytest.mark.parametrize("host, ok", [
    ("*.example.com", True),
    ("*.com", True),
    ("*", False),
    ("*.", False),
    ("a.*.com", False),
    ("**.example.com", False),
])
def test_ingress_tls_wildcard_hosts(host, ok):
    """TLS TEST: only a leading wildcard label is accepted."""
    ing = valid_ingress()
    ing.spec.tls = [IngressTLS(hosts=[host], secret_name="tls")]
    errs = validate_ingress(ing)
    assert (errs == []) is ok


def test_ingress_update():
    old = valid_ingress()
    new = copy.deepcopy(old)
    new.metadata.resource_version = "9"
    new.spec.rules[0].host = "baz.bar.com"
    assert validate_ingress_update(new, old) == []

    new.metadata.resource_version = ""
    errs = validate_ingress_update(new, old)
    assert [e.field for e in errs] == ["metadata.resourceVersion"]


def test_ingress_update_rejects_invalid_name_carried_over():
    old = valid_ingress()
    old.metadata.name = "Bad_Name"
    new = copy.deepcopy(old)
    new.metadata.resource_version = "2"
    errs = validate_ingress_update(new, old)
    assert [(e.field, e.type) for e in errs] == [("metadata.name", ErrorType.INVALID)]


@pytest.mark.parametrize("entry, field", [
    (LoadBalancerIngress(ip="abcd"), "status.loadBalancer.ingress[0].ip"),
    (LoadBalancerIngress(hostname="127.0.0.1"), "status.loadBalancer.ingress[0].hostname"),
])
def test_ingress_status_update(entry, field):
    """STATUS TEST: load balancer addresses must be an IP or a DNS name."""
    old = valid_ingress()
    new = copy.deepcopy(old)
    new.metadata.resource_version = "9"
    assert validate_ingress_status_update(new, old) == []

    new.status.load_balancer.ingress = [entry]
    errs = validate_ingress_status_update(new, old)
    assert [e.field for e in errs] == [field]
