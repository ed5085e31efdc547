#!/usr/bin/env python3
"""
KUBEADMIT PRIMITIVE VALIDATORS
------------------------------
Reusable checks shared by every per-kind validator: name formats, label
and annotation maps, counts, int-or-percent values, hosts, IPs, URL paths
and label selectors.

Each ``validate_*`` function appends to the caller's ErrorList at the Path
it is given. The ``is_*`` predicates are pure and return booleans. All
patterns and allow-lists are module constants compiled once at import.

Author: KubeAdmit Team
Date: 2026-10-17
"""

import ipaddress
import re
from typing import Any, Callable, Mapping, Optional, Tuple

from kubeadmit.core.models import (
    IntOrString,
    LabelSelector,
    LabelSelectorRequirement,
    LoadBalancerStatus,
    SELECTOR_OP_DOES_NOT_EXIST,
    SELECTOR_OP_EXISTS,
    SELECTOR_OP_IN,
    SELECTOR_OP_NOT_IN,
)
from kubeadmit.validation.field import ErrorList, Path

# --- Format constants ---

DNS1123_LABEL_FMT = r"[a-z0-9]([-a-z0-9]*[a-z0-9])?"
DNS1123_LABEL_MAX_LENGTH = 63
DNS1123_SUBDOMAIN_FMT = DNS1123_LABEL_FMT + r"(\." + DNS1123_LABEL_FMT + r")*"
DNS1123_SUBDOMAIN_MAX_LENGTH = 253

QUALIFIED_NAME_FMT = r"([A-Za-z0-9][-A-Za-z0-9_.]*)?[A-Za-z0-9]"
QUALIFIED_NAME_MAX_LENGTH = 63
LABEL_VALUE_FMT = "(" + QUALIFIED_NAME_FMT + ")?"
LABEL_VALUE_MAX_LENGTH = 63

C_IDENTIFIER_FMT = r"[A-Za-z_][A-Za-z0-9_]*"
IANA_SVC_NAME_FMT = r"[a-z0-9]([a-z0-9-]*[a-z0-9])*"
IANA_SVC_NAME_MAX_LENGTH = 15
PERCENT_FMT = r"[0-9]+%"

TOTAL_ANNOTATION_SIZE_LIMIT_BYTES = 256 * 1024

_DNS1123_LABEL_RE = re.compile(DNS1123_LABEL_FMT)
_DNS1123_SUBDOMAIN_RE = re.compile(DNS1123_SUBDOMAIN_FMT)
_QUALIFIED_NAME_RE = re.compile(QUALIFIED_NAME_FMT)
_LABEL_VALUE_RE = re.compile(LABEL_VALUE_FMT)
_C_IDENTIFIER_RE = re.compile(C_IDENTIFIER_FMT)
_IANA_SVC_NAME_RE = re.compile(IANA_SVC_NAME_FMT)
_PERCENT_RE = re.compile(PERCENT_FMT)
_HAS_LETTER_RE = re.compile(r"[a-z]")

# --- Error messages ---

DNS1123_LABEL_ERROR_MSG = (
    f"must be a DNS-1123 label: at most {DNS1123_LABEL_MAX_LENGTH} lower case "
    "alphanumeric characters or '-', starting and ending with an alphanumeric character"
)
DNS1123_SUBDOMAIN_ERROR_MSG = (
    f"must be a DNS-1123 subdomain: at most {DNS1123_SUBDOMAIN_MAX_LENGTH} lower case "
    "alphanumeric characters, '-' or '.', starting and ending with an alphanumeric character"
)
QUALIFIED_NAME_ERROR_MSG = (
    f"must match the regex {QUALIFIED_NAME_FMT} (at most {QUALIFIED_NAME_MAX_LENGTH} characters) "
    "with an optional DNS subdomain prefix and '/' (e.g. 'example.com/MyName')"
)
LABEL_VALUE_ERROR_MSG = (
    f"must have at most {LABEL_VALUE_MAX_LENGTH} characters, matching regex {LABEL_VALUE_FMT} "
    "(e.g. 'MyValue' or '')"
)
C_IDENTIFIER_ERROR_MSG = f"must match the regex {C_IDENTIFIER_FMT} (e.g. 'my_name' or 'MY_NAME')"
PORT_RANGE_ERROR_MSG = "must be between 1 and 65535, inclusive"
PORT_NAME_ERROR_MSG = (
    f"must be an IANA_SVC_NAME: at most {IANA_SVC_NAME_MAX_LENGTH} characters, matching regex "
    f"{IANA_SVC_NAME_FMT}, containing at least one letter and no '--'"
)
INT_OR_PERCENT_ERROR_MSG = "must be an integer or percentage (e.g '5%')"
NON_NEGATIVE_ERROR_MSG = "must be greater than or equal to 0"
POSITIVE_ERROR_MSG = "must be greater than 0"
NOT_IP_ERROR_MSG = "must be a DNS name, not an IP address"
IMMUTABLE_ERROR_MSG = "field is immutable"

# (ok, message) for a candidate object name; `prefix` means generateName
NameValidator = Callable[[str, bool], Tuple[bool, str]]


# --- Pure predicates ---

def is_dns1123_label(value: str) -> bool:
    return len(value) <= DNS1123_LABEL_MAX_LENGTH and bool(_DNS1123_LABEL_RE.fullmatch(value))


def is_dns1123_subdomain(value: str) -> bool:
    return len(value) <= DNS1123_SUBDOMAIN_MAX_LENGTH and bool(_DNS1123_SUBDOMAIN_RE.fullmatch(value))


def is_qualified_name(value: str) -> bool:
    """Optional DNS subdomain prefix plus '/' plus a short name segment."""
    parts = value.split("/")
    if len(parts) == 1:
        name = parts[0]
    elif len(parts) == 2:
        prefix, name = parts
        if not prefix or not is_dns1123_subdomain(prefix):
            return False
    else:
        return False
    return (0 < len(name) <= QUALIFIED_NAME_MAX_LENGTH
            and bool(_QUALIFIED_NAME_RE.fullmatch(name)))


def is_label_value(value: str) -> bool:
    return len(value) <= LABEL_VALUE_MAX_LENGTH and bool(_LABEL_VALUE_RE.fullmatch(value))


def is_c_identifier(value: str) -> bool:
    return bool(_C_IDENTIFIER_RE.fullmatch(value))


def is_valid_port_num(port: int) -> bool:
    return 0 < port < 65536


def is_valid_port_name(port: str) -> bool:
    if len(port) > IANA_SVC_NAME_MAX_LENGTH or not _IANA_SVC_NAME_RE.fullmatch(port):
        return False
    if "--" in port:
        return False
    return bool(_HAS_LETTER_RE.search(port))


def is_ip_address(value: str) -> bool:
    try:
        ipaddress.ip_address(value)
    except ValueError:
        return False
    return True


def is_valid_percent(value: str) -> bool:
    return bool(_PERCENT_RE.fullmatch(value))


def path_segment_name_errors(name: str) -> Optional[str]:
    """Names used as a URL path segment may not be '.'/'..' nor contain '/' or '%'."""
    if name in (".", ".."):
        return f"may not be '{name}'"
    for illegal in ("/", "%"):
        if illegal in name:
            return f"may not contain '{illegal}'"
    return None


# --- Object name validators (NameValidator) ---

def _mask_trailing_dash(name: str) -> str:
    # generateName gets a random suffix appended, so a trailing '-' is fine
    if len(name) > 1 and name.endswith("-"):
        return name[:-1] + "a"
    return name


def name_is_dns_subdomain(name: str, prefix: bool) -> Tuple[bool, str]:
    if prefix:
        name = _mask_trailing_dash(name)
    if is_dns1123_subdomain(name):
        return True, ""
    return False, DNS1123_SUBDOMAIN_ERROR_MSG


def name_is_dns_label(name: str, prefix: bool) -> Tuple[bool, str]:
    if prefix:
        name = _mask_trailing_dash(name)
    if is_dns1123_label(name):
        return True, ""
    return False, DNS1123_LABEL_ERROR_MSG


def name_is_path_segment(name: str, prefix: bool) -> Tuple[bool, str]:
    msg = path_segment_name_errors(name)
    if msg:
        return False, msg
    return True, ""


# --- Numeric checks ---

def validate_non_negative(value: int, path: Path, errs: ErrorList) -> None:
    if value < 0:
        errs.add_invalid(path, value, NON_NEGATIVE_ERROR_MSG)


def validate_positive(value: int, path: Path, errs: ErrorList) -> None:
    if value < 1:
        errs.add_invalid(path, value, POSITIVE_ERROR_MSG)


def validate_ordered_pair(low: int, high: int, low_name: str, high_path: Path, errs: ErrorList) -> None:
    """``high`` must not be below ``low``; the message names the low bound field."""
    if high < low:
        errs.add_invalid(high_path, high, f"must be greater than or equal to `{low_name}`")


def validate_immutable(new: Any, old: Any, path: Path, errs: ErrorList) -> None:
    if new != old:
        errs.add_forbidden(path, IMMUTABLE_ERROR_MSG)


# --- Int-or-percent values ---

def get_percent_value(value: IntOrString) -> Tuple[int, bool]:
    if not value.is_string or not is_valid_percent(value.str_val):
        return 0, False
    return int(value.str_val[:-1]), True


def get_int_or_percent_value(value: IntOrString) -> int:
    percent, is_percent = get_percent_value(value)
    if is_percent:
        return percent
    return value.int_value()


def validate_positive_int_or_percent(value: IntOrString, path: Path, errs: ErrorList) -> None:
    if value.is_string:
        if not is_valid_percent(value.str_val):
            errs.add_invalid(path, value, INT_OR_PERCENT_ERROR_MSG)
    else:
        validate_non_negative(value.int_val, path, errs)


def validate_not_more_than_100_percent(value: IntOrString, path: Path, errs: ErrorList) -> None:
    percent, is_percent = get_percent_value(value)
    if is_percent and percent > 100:
        errs.add_invalid(path, value, "must not be greater than 100%")


def validate_surge_unavailable_pair(max_surge: IntOrString, max_unavailable: IntOrString,
                                    path: Path, errs: ErrorList) -> None:
    """Checks maxSurge/maxUnavailable jointly; they may not both be zero."""
    unavailable_path = path.child("maxUnavailable")
    validate_positive_int_or_percent(max_unavailable, unavailable_path, errs)
    validate_positive_int_or_percent(max_surge, path.child("maxSurge"), errs)
    if get_int_or_percent_value(max_unavailable) == 0 and get_int_or_percent_value(max_surge) == 0:
        errs.add_invalid(unavailable_path, max_unavailable, "may not be 0 when `maxSurge` is 0")
    validate_not_more_than_100_percent(max_unavailable, unavailable_path, errs)


def resolve_int_or_percent(value: IntOrString, total: int) -> int:
    """
    Resolves ``value`` against ``total``. Percentages round down:
    ``"25%"`` of 10 is 2, never 3.

    Raises ValueError for a string that is not a percentage.
    """
    if not value.is_string:
        return value.int_val
    percent, is_percent = get_percent_value(value)
    if not is_percent:
        raise ValueError(f"invalid int-or-percent value: {value.str_val!r}")
    return (percent * total) // 100


def resolve_fenceposts(max_surge: IntOrString, max_unavailable: IntOrString, desired: int) -> Tuple[int, int]:
    """Returns (surge, unavailable); a rollout must be able to move, so both zero becomes (0, 1)."""
    surge = resolve_int_or_percent(max_surge, desired)
    unavailable = resolve_int_or_percent(max_unavailable, desired)
    if surge == 0 and unavailable == 0:
        unavailable = 1
    return surge, unavailable


# --- Label and annotation maps ---

def validate_label_name(name: str, path: Path, errs: ErrorList) -> None:
    if not is_qualified_name(name):
        errs.add_invalid(path, name, QUALIFIED_NAME_ERROR_MSG)


def _validate_key_value_map(mapping: Optional[Mapping[str, str]], path: Path, errs: ErrorList,
                            key_transform: Callable[[str], str],
                            value_check: Optional[Callable[[str], bool]]) -> None:
    for key, value in (mapping or {}).items():
        validate_label_name(key_transform(key), path, errs)
        if value_check is not None and not value_check(value):
            errs.add_invalid(path, value, LABEL_VALUE_ERROR_MSG)


def validate_labels(labels: Optional[Mapping[str, str]], path: Path, errs: ErrorList) -> None:
    _validate_key_value_map(labels, path, errs, lambda k: k, is_label_value)


def validate_annotations(annotations: Optional[Mapping[str, str]], path: Path, errs: ErrorList) -> None:
    """
    Annotation keys follow label key rules (case-insensitively); values are
    free-form. The size cap counts UTF-8 bytes, not characters.
    """
    _validate_key_value_map(annotations, path, errs, str.lower, None)
    total_size = sum(len(k.encode("utf-8")) + len(v.encode("utf-8")) for k, v in (annotations or {}).items())
    if total_size > TOTAL_ANNOTATION_SIZE_LIMIT_BYTES:
        errs.add_too_long(path, "", TOTAL_ANNOTATION_SIZE_LIMIT_BYTES)


# --- Hosts, IPs and paths ---

def validate_dns_host(host: str, path: Path, errs: ErrorList) -> None:
    if not is_dns1123_subdomain(host):
        errs.add_invalid(path, host, DNS1123_SUBDOMAIN_ERROR_MSG)
    if is_ip_address(host):
        errs.add_invalid(path, host, NOT_IP_ERROR_MSG)


def validate_ip(ip: str, path: Path, errs: ErrorList) -> None:
    if not is_ip_address(ip):
        errs.add_invalid(path, ip, "must be a valid IP address")


def validate_http_path(value: str, path: Path, errs: ErrorList) -> None:
    if not value.startswith("/"):
        errs.add_invalid(path, value, "must be an absolute path")
    try:
        re.compile(value)
    except re.error as exc:
        errs.add_invalid(path, value, f"must be a valid regex: {exc}")


def validate_load_balancer_status(status: LoadBalancerStatus, path: Path, errs: ErrorList) -> None:
    for i, ingress in enumerate(status.ingress):
        idx_path = path.child("ingress").index(i)
        if ingress.ip:
            validate_ip(ingress.ip, idx_path.child("ip"), errs)
        if ingress.hostname:
            validate_dns_host(ingress.hostname, idx_path.child("hostname"), errs)


# --- Label selectors ---

def validate_label_selector_requirement(req: LabelSelectorRequirement, path: Path, errs: ErrorList) -> None:
    if req.operator in (SELECTOR_OP_IN, SELECTOR_OP_NOT_IN):
        if not req.values:
            errs.add_required(path.child("values"), "must be specified when `operator` is 'In' or 'NotIn'")
    elif req.operator in (SELECTOR_OP_EXISTS, SELECTOR_OP_DOES_NOT_EXIST):
        if req.values:
            errs.add_forbidden(path.child("values"),
                               "may not be specified when `operator` is 'Exists' or 'DoesNotExist'")
    else:
        errs.add_invalid(path.child("operator"), req.operator, "not a valid selector operator")
    validate_label_name(req.key, path.child("key"), errs)


def validate_label_selector(selector: Optional[LabelSelector], path: Path, errs: ErrorList) -> None:
    if selector is None:
        return
    validate_labels(selector.match_labels, path.child("matchLabels"), errs)
    for i, req in enumerate(selector.match_expressions):
        validate_label_selector_requirement(req, path.child("matchExpressions").index(i), errs)
