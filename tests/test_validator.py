"""
KUBEADMIT TEST SUITE - Kind Dispatch
"""

import pytest

from builders import config_map, valid_deployment, valid_scale
from kubeadmit.core.models import RESOURCE_TYPES
from kubeadmit.validation.field import ErrorList, Path
from kubeadmit.validator.validator import (
    VALIDATORS,
    KindValidators,
    KubeValidator,
    UnsupportedKindError,
)


def test_every_model_has_a_create_validator():
    """REGISTRY TEST: each decodable kind can at least be created."""
    validator = KubeValidator()
    for kind in RESOURCE_TYPES:
        assert validator.supports(kind)
    assert set(VALIDATORS) == set(RESOURCE_TYPES)


@pytest.mark.parametrize("kind, verb, expected", [
    ("Deployment", "update", True),
    ("Deployment", "status_update", True),
    ("ConfigMap", "update", True),
    ("ConfigMap", "status_update", False),
    ("Scale", "update", False),
    ("DeploymentRollback", "update", False),
    ("Service", "create", False),
])
def test_supported_verbs(kind, verb, expected):
    assert KubeValidator().supports(kind, verb) is expected


def test_validate_dispatches_by_kind():
    d = valid_deployment()
    d.spec.replicas = -1
    errs = KubeValidator().validate(d)
    assert [e.field for e in errs] == ["spec.replicas"]


def test_update_without_rules_raises():
    scale = valid_scale()
    with pytest.raises(UnsupportedKindError) as exc:
        KubeValidator().validate_update(scale, scale)
    assert exc.value.kind == "Scale"
    assert exc.value.verb == "update"


def test_update_requires_same_kind():
    with pytest.raises(TypeError):
        KubeValidator().validate_update(config_map(resource_version="1"), valid_scale())


def test_status_update_dispatch():
    old = valid_deployment()
    new = valid_deployment()
    new.metadata.resource_version = "5"
    assert KubeValidator().validate_status_update(new, old) == []


def test_custom_registry():
    def reject_everything(obj):
        errs = ErrorList()
        errs.add_forbidden(Path.root("kind"), "frozen")
        return errs

    validator = KubeValidator({"ConfigMap": KindValidators(reject_everything)})
    assert [e.error() for e in validator.validate(config_map())] == ["kind: Forbidden: frozen"]
    assert not validator.supports("Deployment")
