#!/usr/bin/env python3
"""
KUBEADMIT ENGINE - The High Orchestrator
----------------------------------------
The AdmissionEngine drives manifests on disk through the admission
pipeline: load, decode, validate, report. It never modifies the files it
reads.

Author: KubeAdmit Team
Date: 2026-10-17
"""

import logging
import time
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

from kubeadmit.decoding.decoder import KubeDecoder, UnknownKindError
from kubeadmit.decoding.loader import Document, ManifestError, ManifestLoader
from kubeadmit.validation.field import ErrorList, FieldError, render_value
from kubeadmit.validator.validator import KubeValidator

logger = logging.getLogger("kubeadmit.engine")

ADMITTED = "ADMITTED"
REJECTED = "REJECTED"
DECODE_ERROR = "DECODE_ERROR"
UNSUPPORTED_KIND = "UNSUPPORTED_KIND"
FILE_NOT_FOUND = "FILE_NOT_FOUND"
ENGINE_ERROR = "ENGINE_ERROR"
EMPTY = "EMPTY"

# Worst first; a file takes the status of its worst document
_STATUS_PRECEDENCE = (REJECTED, DECODE_ERROR, UNSUPPORTED_KIND, ADMITTED)


class AdmissionEngine:
    """
    Principal orchestrator for manifest admission checks.
    Holds no per-call state, so one engine can validate many files.
    """

    def __init__(self, workspace_path: str, strict: bool = False, max_depth: int = 10,
                 apply_defaults: bool = True):
        self.workspace = Path(workspace_path).resolve()
        self.strict = strict
        self.max_depth = max_depth
        self.loader = ManifestLoader()
        self.decoder = KubeDecoder(apply_defaults=apply_defaults)
        self.validator = KubeValidator()

    # --- single files ---

    def validate_file(self, relative_path: str) -> Dict[str, Any]:
        """Create-time validation of every document in one manifest file."""
        full_path = (self.workspace / relative_path).resolve()
        if not full_path.is_file():
            return self._file_error(relative_path, FILE_NOT_FOUND, f"Path missing: {full_path}")

        try:
            docs = self.loader.load_file(full_path)
        except (ManifestError, UnicodeDecodeError) as e:
            logger.warning(f"Unreadable manifest {relative_path}: {e}")
            return self._file_error(relative_path, DECODE_ERROR, str(e))
        except OSError as e:
            logger.error(f"Error reading {relative_path}: {e}")
            return self._file_error(relative_path, ENGINE_ERROR, str(e))

        doc_reports = [self._validate_document(doc, str(relative_path)) for doc in docs]
        return self._file_report(relative_path, doc_reports)

    def _validate_document(self, doc: Document, source: str) -> Dict[str, Any]:
        report = self._doc_report(doc)
        try:
            obj = self.decoder.decode(doc.body, source, doc.index)
        except UnknownKindError as e:
            logger.info(f"Skipping {e.kind} in {source}[doc {doc.index}]: no validator")
            report.update(status=UNSUPPORTED_KIND, message=str(e))
            return report
        except ManifestError as e:
            logger.warning(f"Decode failure: {e}")
            report.update(status=DECODE_ERROR, message=str(e))
            return report

        errs = self.validator.validate(obj)
        self._record_errors(report, errs)
        logger.info(f"{report['kind']} '{report['name']}': {len(errs)} error(s)")
        return report

    # --- update pairs ---

    def validate_update(self, old_path: str, new_path: str, status: bool = False) -> Dict[str, Any]:
        """
        Update validation of NEW against OLD.

        Documents are paired by (kind, namespace, name), then by uid, then by
        a kind with one unpaired object on each side. A new document with no
        counterpart in OLD is validated as a create. ``status`` selects
        the status-update rules instead of the spec-update rules.
        """
        verb = "status_update" if status else "update"
        pairs: List[Tuple[str, Path]] = [(old_path, (self.workspace / old_path).resolve()),
                                         (new_path, (self.workspace / new_path).resolve())]
        for rel, full in pairs:
            if not full.is_file():
                return self._file_error(rel, FILE_NOT_FOUND, f"Path missing: {full}")

        try:
            old_docs = self._decode_all(old_path, pairs[0][1])
            new_docs = self._decode_all(new_path, pairs[1][1])
        except (ManifestError, UnicodeDecodeError) as e:
            logger.warning(f"Unreadable manifest in update pair: {e}")
            return self._file_error(new_path, DECODE_ERROR, str(e))
        except OSError as e:
            logger.error(f"Error reading update pair: {e}")
            return self._file_error(new_path, ENGINE_ERROR, str(e))

        counterparts = iter(_pair_documents([obj for _, obj in old_docs if obj is not None],
                                            [obj for _, obj in new_docs if obj is not None]))
        doc_reports = []
        for doc, obj in new_docs:
            report = self._doc_report(doc)
            if obj is None:
                report.update(status=UNSUPPORTED_KIND, message=f"unsupported kind '{report['kind']}'")
                doc_reports.append(report)
                continue

            old_obj = next(counterparts)
            if old_obj is None:
                report["operation"] = "create"
                errs = self.validator.validate(obj)
            elif not self.validator.supports(obj.KIND, verb):
                report.update(status=UNSUPPORTED_KIND, operation=verb,
                              message=f"no {verb.replace('_', ' ')} rules for kind '{obj.KIND}'")
                doc_reports.append(report)
                continue
            elif status:
                report["operation"] = verb
                errs = self.validator.validate_status_update(obj, old_obj)
            else:
                report["operation"] = verb
                errs = self.validator.validate_update(obj, old_obj)

            self._record_errors(report, errs)
            logger.info(f"{report['operation']} {report['kind']} '{report['name']}': {len(errs)} error(s)")
            doc_reports.append(report)

        return self._file_report(new_path, doc_reports, previous_path=str(old_path))

    def _decode_all(self, rel: str, full: Path) -> List[Tuple[Document, Any]]:
        """(document, object) pairs; object is None for kinds without a model."""
        out = []
        for doc in self.loader.load_file(full):
            try:
                out.append((doc, self.decoder.decode(doc.body, str(rel), doc.index)))
            except UnknownKindError:
                out.append((doc, None))
        return out

    # --- directories ---

    def scan_directory(self, extension: str = ".yaml", max_depth: Optional[int] = None,
                       progress_callback: Optional[Callable[[int, int], None]] = None) -> List[Dict[str, Any]]:
        """
        Recursively discovers and validates manifests below the workspace.
        Symlinks are skipped so link loops cannot trap the walk.
        """
        if max_depth is None:
            max_depth = self.max_depth
        try:
            max_depth = int(max_depth)
        except (ValueError, TypeError):
            logger.warning(f"Invalid max_depth '{max_depth}'. Falling back to default: 10")
            max_depth = 10

        patterns = {f"*{extension.lower()}", f"*{extension.upper()}"}
        found = set()
        for p in patterns:
            found.update(f for f in self.workspace.rglob(p) if f.is_file() and not f.is_symlink())
        all_files = sorted(f for f in found if len(f.relative_to(self.workspace).parts) <= max_depth)

        reports = []
        total_files = len(all_files)
        for processed, file_path in enumerate(all_files, start=1):
            rel_path = str(file_path.relative_to(self.workspace))
            try:
                reports.append(self.validate_file(rel_path))
            except Exception as e:
                logger.exception(f"Critical error in scan loop for {file_path}")
                reports.append(self._file_error(rel_path, ENGINE_ERROR, str(e)))
            if progress_callback:
                progress_callback(processed, total_files)

        return reports

    # --- reporting ---

    def generate_summary(self, reports: List[Dict[str, Any]]) -> Dict[str, Any]:
        """Provides SRE-style admission metrics."""
        if not reports:
            return {
                "total_files": 0, "success_rate": 0, "admitted": 0, "rejected": 0,
                "decode_errors": 0, "system_errors": 0, "total_documents": 0, "total_errors": 0,
            }

        total = len(reports)
        successful = sum(1 for r in reports if r.get("success", False))

        def count(status: str) -> int:
            return sum(1 for r in reports if r.get("status") == status)

        return {
            "total_files": total,
            "success_rate": successful / total,
            "successful": successful,
            "admitted": count(ADMITTED),
            "rejected": count(REJECTED),
            "decode_errors": count(DECODE_ERROR),
            "unsupported": count(UNSUPPORTED_KIND),
            "system_errors": count(ENGINE_ERROR) + count(FILE_NOT_FOUND),
            "total_documents": sum(len(r.get("documents", [])) for r in reports),
            "total_errors": sum(r.get("error_count", 0) for r in reports),
            "summary_timestamp": time.strftime("%Y-%m-%d %H:%M:%S"),
        }

    def _file_report(self, path: str, doc_reports: List[Dict[str, Any]],
                     previous_path: Optional[str] = None) -> Dict[str, Any]:
        if not doc_reports:
            status = EMPTY
        else:
            seen = {d["status"] for d in doc_reports}
            status = next(s for s in _STATUS_PRECEDENCE if s in seen)
            # a file with some admitted documents is not "unsupported" unless strict
            if status == UNSUPPORTED_KIND and ADMITTED in seen and not self.strict:
                status = ADMITTED

        if status in (ADMITTED, EMPTY):
            success = True
        elif status == UNSUPPORTED_KIND:
            success = not self.strict
        else:
            success = False

        kinds = sorted({d["kind"] for d in doc_reports})
        report = {
            "file_path": str(path),
            "status": status,
            "success": success,
            "kind": kinds[0] if len(kinds) == 1 else ("Mixed" if kinds else "Unknown"),
            "documents": doc_reports,
            "error_count": sum(len(d["errors"]) for d in doc_reports),
            "timestamp": time.time(),
        }
        if previous_path is not None:
            report["previous_path"] = previous_path
        return report

    @staticmethod
    def _doc_report(doc: Document) -> Dict[str, Any]:
        body = doc.body
        meta = body.get("metadata") if isinstance(body.get("metadata"), dict) else {}
        return {
            "index": doc.index,
            "line": doc.line,
            "kind": str(body.get("kind") or "Unknown"),
            "api_version": str(body.get("apiVersion") or "Unknown"),
            "name": str(meta.get("name") or body.get("name") or ""),
            "namespace": str(meta.get("namespace") or ""),
            "status": ADMITTED,
            "operation": "create",
            "errors": [],
            "error_details": [],
        }

    @staticmethod
    def _record_errors(report: Dict[str, Any], errs: ErrorList) -> None:
        report["status"] = REJECTED if errs else ADMITTED
        report["errors"] = [e.error() for e in errs]
        report["error_details"] = [_error_detail(e) for e in errs]

    def _file_error(self, path: str, status: str, error: str) -> Dict[str, Any]:
        return {
            "file_path": str(path), "status": status, "error": error,
            "success": False, "kind": "Unknown", "documents": [], "error_count": 0,
        }


def _pair_documents(old_objs: List[Any], new_objs: List[Any]) -> List[Any]:
    """
    The OLD object each NEW object updates, or None for a create.

    Pairing runs in three passes, each over what is still unpaired: exact
    (kind, namespace, name) identity, then a shared uid, then a kind that
    has exactly one object left on each side. The last pass is what turns a
    rename or a namespace move into an update that the immutability rules
    can reject.
    """
    matches: List[Any] = [None] * len(new_objs)
    unpaired = list(old_objs)

    def claim(i: int, old: Any) -> None:
        matches[i] = old
        unpaired[:] = [o for o in unpaired if o is not old]

    for i, obj in enumerate(new_objs):
        old = next((o for o in unpaired if _identity(o) == _identity(obj)), None)
        if old is not None:
            claim(i, old)

    for i, obj in enumerate(new_objs):
        uid = _uid(obj)
        if matches[i] is None and uid:
            old = next((o for o in unpaired if o.KIND == obj.KIND and _uid(o) == uid), None)
            if old is not None:
                claim(i, old)

    for i, obj in enumerate(new_objs):
        if matches[i] is not None:
            continue
        same_kind_new = [n for j, n in enumerate(new_objs) if matches[j] is None and n.KIND == obj.KIND]
        same_kind_old = [o for o in unpaired if o.KIND == obj.KIND]
        if len(same_kind_new) == 1 and len(same_kind_old) == 1:
            claim(i, same_kind_old[0])
    return matches


def _identity(obj: Any) -> Tuple[str, str, str]:
    meta = getattr(obj, "metadata", None)
    if meta is None:
        return obj.KIND, "", getattr(obj, "name", "")
    return obj.KIND, meta.namespace, meta.name


def _uid(obj: Any) -> str:
    meta = getattr(obj, "metadata", None)
    return meta.uid if meta is not None else ""


def _error_detail(err: FieldError) -> Dict[str, str]:
    return {
        "field": err.field,
        "type": err.type.value,
        "value": render_value(err.bad_value),
        "detail": err.detail,
    }
