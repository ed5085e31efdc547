"""
KUBEADMIT TEST SUITE - Config Maps
"""

import pytest

from builders import config_map
from kubeadmit.validation.configuration import (
    CONFIG_MAP_KEY_ERROR_MSG,
    is_config_map_key,
    validate_config_map,
    validate_config_map_update,
)


@pytest.mark.parametrize("key", [
    "key", ".ab", "a.b-c_d", "UPPER", "k" * 253,
    # anything but dot sequences is allowed
    "a b", "a/b", "app:config", "\u00e9t\u00e9", "a.b.",
])
def test_valid_keys(key):
    assert is_config_map_key(key)
    assert validate_config_map(config_map(data={key: "value"})) == []


@pytest.mark.parametrize("key", ["a..b", ".", "..", "k" * 254, "..hidden", ""])
def test_invalid_keys(key):
    """KEY TEST: keys become file names, so path tricks are rejected."""
    errs = validate_config_map(config_map(data={key: "value"}))
    assert len(errs) == 1
    assert errs[0].field == f"data[{key}]"
    assert errs[0].detail == CONFIG_MAP_KEY_ERROR_MSG


def test_empty_data_is_valid():
    assert validate_config_map(config_map()) == []


def test_name_and_namespace_required():
    errs = validate_config_map(config_map(name="", namespace=""))
    assert [e.field for e in errs] == ["metadata.name", "metadata.namespace"]


def test_update_requires_resource_version():
    old = config_map(data={"a": "1"}, resource_version="1")
    assert [e.field for e in validate_config_map_update(config_map(data={"a": "2"}), old)] == [
        "metadata.resourceVersion"
    ]
    assert validate_config_map_update(config_map(data={"a": "2"}, resource_version="2"), old) == []


def test_update_checks_new_keys():
    old = config_map(resource_version="1")
    new = config_map(data={"..": "x"}, resource_version="2")
    assert [e.field for e in validate_config_map_update(new, old)] == ["data[..]"]


def test_update_namespace_is_immutable():
    old = config_map(resource_version="1")
    new = config_map(namespace="otherns", resource_version="2")
    assert [e.error() for e in validate_config_map_update(new, old)] == [
        "metadata.namespace: Forbidden: field is immutable"
    ]


def test_update_rejects_invalid_name_carried_over():
    old = config_map(name="Bad_Name", resource_version="1")
    new = config_map(name="Bad_Name", resource_version="2")
    assert [e.field for e in validate_config_map_update(new, old)] == ["metadata.name"]


def test_update_reports_bad_labels_once():
    old = config_map(resource_version="1")
    new = config_map(resource_version="2")
    new.metadata.labels = {"bad key": "x"}
    assert [e.field for e in validate_config_map_update(new, old)] == ["metadata.labels"]
