#!/usr/bin/env python3
"""
KUBEADMIT OBJECT METADATA
-------------------------
Identity checks shared by every kind: name, namespace, labels and
annotations on create; immutability and resource version on update.

Author: KubeAdmit Team
Date: 2026-10-17
"""

from kubeadmit.core.models import ObjectMeta
from kubeadmit.validation.field import ErrorList, Path
from kubeadmit.validation.primitives import (
    DNS1123_LABEL_ERROR_MSG,
    NameValidator,
    is_dns1123_label,
    validate_annotations,
    validate_immutable,
    validate_labels,
    validate_non_negative,
)


def validate_object_meta(meta: ObjectMeta, requires_namespace: bool, name_fn: NameValidator,
                         path: Path, errs: ErrorList) -> None:
    if meta.generate_name:
        ok, msg = name_fn(meta.generate_name, True)
        if not ok:
            errs.add_invalid(path.child("generateName"), meta.generate_name, msg)

    if not meta.name:
        if not meta.generate_name:
            errs.add_required(path.child("name"), "name or generateName is required")
    else:
        ok, msg = name_fn(meta.name, False)
        if not ok:
            errs.add_invalid(path.child("name"), meta.name, msg)

    validate_non_negative(meta.generation, path.child("generation"), errs)

    if requires_namespace:
        if not meta.namespace:
            errs.add_required(path.child("namespace"))
        elif not is_dns1123_label(meta.namespace):
            errs.add_invalid(path.child("namespace"), meta.namespace, DNS1123_LABEL_ERROR_MSG)
    elif meta.namespace:
        errs.add_forbidden(path.child("namespace"), "not allowed on this type")

    validate_labels(meta.labels, path.child("labels"), errs)
    validate_annotations(meta.annotations, path.child("annotations"), errs)


def validate_object_meta_update(new: ObjectMeta, old: ObjectMeta, path: Path, errs: ErrorList) -> None:
    """
    Identity fields may not change and every update must carry the
    resource version it was read at. Labels and annotations are
    re-checked because they are free to change.
    """
    _validate_identity_update(new, old, path, errs)
    validate_labels(new.labels, path.child("labels"), errs)
    validate_annotations(new.annotations, path.child("annotations"), errs)


def validate_object_meta_spec_update(new: ObjectMeta, old: ObjectMeta, requires_namespace: bool,
                                     name_fn: NameValidator, path: Path, errs: ErrorList) -> None:
    """
    A spec update must leave an object that could also be created, so the
    full create checks run on the new metadata before the identity checks.
    """
    validate_object_meta(new, requires_namespace, name_fn, path, errs)
    _validate_identity_update(new, old, path, errs)


def _validate_identity_update(new: ObjectMeta, old: ObjectMeta, path: Path, errs: ErrorList) -> None:
    if new.deletion_grace_period_seconds is not None and old.deletion_grace_period_seconds is None:
        errs.add_invalid(path.child("deletionGracePeriodSeconds"), new.deletion_grace_period_seconds,
                         "field is immutable; may only be changed via deletion")

    if not new.resource_version:
        errs.add_invalid(path.child("resourceVersion"), new.resource_version, "must be specified for an update")

    validate_immutable(new.name, old.name, path.child("name"), errs)
    validate_immutable(new.namespace, old.namespace, path.child("namespace"), errs)
    # An empty uid on the new object means the client did not echo it back
    if new.uid:
        validate_immutable(new.uid, old.uid, path.child("uid"), errs)
    if old.creation_timestamp is not None and new.creation_timestamp is not None:
        validate_immutable(new.creation_timestamp, old.creation_timestamp, path.child("creationTimestamp"), errs)
