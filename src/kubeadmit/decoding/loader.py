#!/usr/bin/env python3
"""
KUBEADMIT LOADER - Manifest Reader
----------------------------------
Reads multi-document YAML manifests with ruamel.yaml round-trip mode so
line numbers survive into error reports.

Author: KubeAdmit Team
Date: 2026-10-17
"""

import logging
from pathlib import Path
from typing import Any, List, NamedTuple, Optional, Union

from ruamel.yaml import YAML, YAMLError
from ruamel.yaml.comments import CommentedMap

logger = logging.getLogger("kubeadmit.loader")


class ManifestError(ValueError):
    """A manifest that cannot be read or decoded into a typed object."""

    def __init__(self, message: str, source: str = "<string>", index: Optional[int] = None,
                 line: Optional[int] = None):
        self.message = message
        self.source = source
        self.index = index
        self.line = line
        super().__init__(str(self))

    def __str__(self) -> str:
        where = self.source
        if self.index is not None:
            where += f"[doc {self.index}]"
        if self.line is not None:
            where += f":L{self.line}"
        return f"{where}: {self.message}"


class Document(NamedTuple):
    index: int
    body: CommentedMap
    line: Optional[int]


class ManifestLoader:
    """Splits a manifest stream into its mapping documents."""

    def __init__(self):
        self.yaml = YAML(typ='rt')
        self.yaml.preserve_quotes = True

    def load_file(self, path: Union[str, Path]) -> List[Document]:
        path = Path(path)
        # BOM-aware, editors on Windows like to add one
        text = path.read_text(encoding='utf-8-sig')
        return self.load_string(text, source=str(path))

    def load_string(self, text: str, source: str = "<string>") -> List[Document]:
        docs: List[Document] = []
        try:
            for i, raw in enumerate(self.yaml.load_all(text)):
                if raw is None:
                    # empty document between separators
                    continue
                if not isinstance(raw, CommentedMap):
                    raise ManifestError(f"document is a {type(raw).__name__}, expected a mapping",
                                        source, i, _line_of(raw))
                docs.append(Document(i, raw, _line_of(raw)))
        except YAMLError as e:
            mark = getattr(e, 'problem_mark', None) or getattr(e, 'context_mark', None)
            line = mark.line + 1 if mark is not None else None
            raise ManifestError(f"YAML parse error: {e}", source, len(docs), line) from e

        logger.debug(f"Loaded {len(docs)} document(s) from {source}")
        return docs


def _line_of(node: Any) -> Optional[int]:
    lc = getattr(node, 'lc', None)
    if lc is None or lc.line is None:
        return None
    return lc.line + 1
