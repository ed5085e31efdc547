#!/usr/bin/env python3
"""
KUBEADMIT CONFIG MAP VALIDATORS
-------------------------------
Config map keys become file names when the map is mounted as a volume,
so they follow a looser rule than label keys.

Author: KubeAdmit Team
Date: 2026-10-17
"""

from kubeadmit.core.models import ConfigMap
from kubeadmit.validation.field import ErrorList, Path
from kubeadmit.validation.objectmeta import validate_object_meta, validate_object_meta_spec_update
from kubeadmit.validation.primitives import DNS1123_SUBDOMAIN_MAX_LENGTH, name_is_dns_subdomain

CONFIG_MAP_KEY_MAX_LENGTH = DNS1123_SUBDOMAIN_MAX_LENGTH
CONFIG_MAP_KEY_ERROR_MSG = (
    f"must have at most {CONFIG_MAP_KEY_MAX_LENGTH} characters "
    "and may not be '.', '..' or contain '..'"
)


def is_config_map_key(key: str) -> bool:
    if not 0 < len(key) <= CONFIG_MAP_KEY_MAX_LENGTH:
        return False
    # only the dot sequences are refused; any other character is allowed
    return ".." not in key and key != "."


def validate_config_map(cfg: ConfigMap) -> ErrorList:
    errs = ErrorList()
    validate_object_meta(cfg.metadata, True, name_is_dns_subdomain, Path.root("metadata"), errs)
    _validate_config_map_data(cfg.data, Path.root("data"), errs)
    return errs


def _validate_config_map_data(data, path: Path, errs: ErrorList) -> None:
    for key in data:
        if not is_config_map_key(key):
            errs.add_invalid(path.key(key), key, CONFIG_MAP_KEY_ERROR_MSG)


def validate_config_map_update(new: ConfigMap, old: ConfigMap) -> ErrorList:
    errs = ErrorList()
    validate_object_meta_spec_update(new.metadata, old.metadata, True, name_is_dns_subdomain,
                                     Path.root("metadata"), errs)
    _validate_config_map_data(new.data, Path.root("data"), errs)
    return errs
