"""
KUBEADMIT TEST SUITE - Primitive Validators
Name formats, int-or-percent arithmetic, ordered pairs and selectors.
"""

import pytest

from kubeadmit.core.models import IntOrString, LabelSelector, LabelSelectorRequirement, ObjectMeta
from kubeadmit.validation.field import ErrorList, ErrorType, Path
from kubeadmit.validation.objectmeta import validate_object_meta, validate_object_meta_update
from kubeadmit.validation.primitives import (
    INT_OR_PERCENT_ERROR_MSG,
    get_int_or_percent_value,
    is_dns1123_label,
    is_dns1123_subdomain,
    is_label_value,
    is_qualified_name,
    is_valid_port_name,
    name_is_dns_subdomain,
    resolve_fenceposts,
    resolve_int_or_percent,
    validate_annotations,
    validate_dns_host,
    validate_http_path,
    validate_label_selector,
    validate_ordered_pair,
    validate_positive_int_or_percent,
    validate_surge_unavailable_pair,
)

pct = IntOrString.from_string
num = IntOrString.from_int


@pytest.mark.parametrize("name, ok", [
    ("abc", True),
    ("a-b.c-d", True),
    ("a" * 253, True),
    ("a" * 254, False),
    ("-abc", False),
    ("ABC", False),
    ("a..b", False),
])
def test_dns_subdomain(name, ok):
    """FORMAT TEST: DNS-1123 subdomain names."""
    assert is_dns1123_subdomain(name) is ok


def test_dns_label_rejects_dots_and_long_names():
    assert is_dns1123_label("abc-1")
    assert not is_dns1123_label("a.b")
    assert not is_dns1123_label("a" * 64)


@pytest.mark.parametrize("name, ok", [
    ("my-label", True),
    ("example.com/MyName", True),
    ("a_b.c", True),
    ("/name", False),
    ("a/b/c", False),
    ("-lead", False),
    ("x" * 64, False),
])
def test_qualified_name(name, ok):
    """FORMAT TEST: label keys with an optional DNS prefix."""
    assert is_qualified_name(name) is ok


def test_label_value_allows_empty():
    assert is_label_value("")
    assert is_label_value("MyValue")
    assert not is_label_value("bad value")


def test_port_names():
    """FORMAT TEST: IANA service names need a letter and no double dash."""
    assert is_valid_port_name("http")
    assert not is_valid_port_name("8080")
    assert not is_valid_port_name("a--b")
    assert not is_valid_port_name("toolongportname1")


def test_generate_name_allows_trailing_dash():
    """FORMAT TEST: a generateName prefix may end with '-'."""
    assert name_is_dns_subdomain("web-", True)[0]
    assert not name_is_dns_subdomain("web-", False)[0]


def test_int_or_percent_values():
    """PERCENT TEST: numeric value of an int or a percent string."""
    assert get_int_or_percent_value(pct("25%")) == 25
    assert get_int_or_percent_value(num(3)) == 3
    assert get_int_or_percent_value(pct("nope")) == 0


def test_positive_int_or_percent_messages():
    errs = ErrorList()
    validate_positive_int_or_percent(pct("20Percent"), Path.root("x"), errs)
    validate_positive_int_or_percent(num(-1), Path.root("y"), errs)
    validate_positive_int_or_percent(pct("10%"), Path.root("z"), errs)
    assert [e.field for e in errs] == ["x", "y"]
    assert errs[0].detail == INT_OR_PERCENT_ERROR_MSG


@pytest.mark.parametrize("value, total, expected", [
    ("25%", 10, 2),
    ("50%", 3, 1),
    ("100%", 7, 7),
    ("0%", 9, 0),
])
def test_resolve_percent_rounds_down(value, total, expected):
    """ROUNDING TEST: percentages of a replica count always floor."""
    assert resolve_int_or_percent(pct(value), total) == expected


def test_resolve_rejects_non_percent_string():
    with pytest.raises(ValueError):
        resolve_int_or_percent(pct("abc"), 10)


def test_fenceposts_never_both_zero():
    """ROUNDING TEST: a rollout that would stall gets one unavailable pod."""
    assert resolve_fenceposts(pct("10%"), pct("10%"), 5) == (0, 1)
    assert resolve_fenceposts(num(2), num(0), 5) == (2, 0)


def test_surge_unavailable_both_zero():
    errs = ErrorList()
    validate_surge_unavailable_pair(num(0), num(0), Path.root("ru"), errs)
    assert len(errs) == 1
    assert errs[0].field == "ru.maxUnavailable"
    assert errs[0].detail == "may not be 0 when `maxSurge` is 0"


def test_surge_unavailable_over_100_percent():
    errs = ErrorList()
    validate_surge_unavailable_pair(num(1), pct("110%"), Path.root("ru"), errs)
    assert [e.detail for e in errs] == ["must not be greater than 100%"]


def test_ordered_pair_message_names_low_field():
    errs = ErrorList()
    validate_ordered_pair(7, 5, "minReplicas", Path.root("spec", "maxReplicas"), errs)
    validate_ordered_pair(5, 5, "minReplicas", Path.root("spec", "maxReplicas"), errs)
    assert len(errs) == 1
    assert errs[0].error() == "spec.maxReplicas: Invalid value: 5: must be greater than or equal to `minReplicas`"


def test_dns_host_rejects_ip_and_port():
    errs = ErrorList()
    validate_dns_host("127.0.0.1", Path.root("host"), errs)
    assert [e.detail for e in errs] == ["must be a DNS name, not an IP address"]

    errs = ErrorList()
    validate_dns_host("foobar:80", Path.root("host"), errs)
    assert len(errs) == 1 and errs[0].field == "host"


def test_http_path_must_be_absolute_regex():
    errs = ErrorList()
    validate_http_path("/foo", Path.root("p"), errs)
    assert not errs
    validate_http_path("foo", Path.root("p"), errs)
    validate_http_path("/invalid[", Path.root("p"), errs)
    assert errs[0].detail == "must be an absolute path"
    assert errs[1].detail.startswith("must be a valid regex")


def test_annotations_size_limit():
    errs = ErrorList()
    validate_annotations({"a": "x" * (256 * 1024)}, Path.root("annotations"), errs)
    assert len(errs) == 1
    assert errs[0].type == ErrorType.TOO_LONG


def test_annotations_size_counts_bytes():
    """SIZE TEST: multi-byte values count every encoded byte against the cap."""
    value = "\u00e9" * (128 * 1024)
    errs = ErrorList()
    validate_annotations({"a": value}, Path.root("annotations"), errs)
    assert [e.type for e in errs] == [ErrorType.TOO_LONG]

    errs = ErrorList()
    validate_annotations({"a": value[:-1]}, Path.root("annotations"), errs)
    assert errs == []


def test_label_selector_requirements():
    """SELECTOR TEST: operator and values must agree."""
    selector = LabelSelector(match_expressions=[
        LabelSelectorRequirement(key="a", operator="In"),
        LabelSelectorRequirement(key="b", operator="Exists", values=["x"]),
        LabelSelectorRequirement(key="c", operator="Near"),
    ])
    errs = ErrorList()
    validate_label_selector(selector, Path.root("selector"), errs)
    assert [(e.field, e.type) for e in errs] == [
        ("selector.matchExpressions[0].values", ErrorType.REQUIRED),
        ("selector.matchExpressions[1].values", ErrorType.FORBIDDEN),
        ("selector.matchExpressions[2].operator", ErrorType.INVALID),
    ]


def test_object_meta_requires_name_and_namespace():
    errs = ErrorList()
    validate_object_meta(ObjectMeta(), True, name_is_dns_subdomain, Path.root("metadata"), errs)
    assert [e.field for e in errs] == ["metadata.name", "metadata.namespace"]


def test_object_meta_update_rules():
    """UPDATE TEST: identity is immutable and a resource version is required."""
    old = ObjectMeta(name="abc", namespace="default", resource_version="1")
    new = ObjectMeta(name="xyz", namespace="default")
    errs = ErrorList()
    validate_object_meta_update(new, old, Path.root("metadata"), errs)
    assert [e.error() for e in errs] == [
        'metadata.resourceVersion: Invalid value: "": must be specified for an update',
        "metadata.name: Forbidden: field is immutable",
    ]
