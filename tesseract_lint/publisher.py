# tesseract_lint/publisher.py
"""
Publication sink for findings.

A :class:`DiagnosticCollection` holds the current findings per document id.
Publishing a new set for a document replaces the previous one; closing the
document removes it.  :class:`DocumentLinter` is the trigger surface an
editor integration calls on open/change/save:

>>> coll = DiagnosticCollection("tesseract")
>>> linter = DocumentLinter(coll)
>>> found = linter.update("main.tes", "let$ x = 1", version=1)
>>> [f.code for f in coll.get("main.tes")]
['missingSemicolon']
"""

from __future__ import annotations

import logging
import os
import threading
from typing import Callable, Dict, Iterator, List, Mapping, Optional, Tuple

from tesseract_lint.checkers import CheckerRunner
from tesseract_lint.config import load_options
from tesseract_lint.diagnostics import Finding
from tesseract_lint.text import SourceText

_log = logging.getLogger(__name__)

__all__ = [
    "LANGUAGE_ID",
    "FILE_EXTENSIONS",
    "is_tesseract_document",
    "DiagnosticCollection",
    "DocumentLinter",
]

LANGUAGE_ID = "tesseract"
FILE_EXTENSIONS: Tuple[str, ...] = (".tes", ".tesseract")

Listener = Callable[[str, List[Finding]], None]


def is_tesseract_document(doc_id: str, language_id: Optional[str] = None) -> bool:
    """True for documents tagged ``tesseract`` or named ``*.tes``/``*.tesseract``."""
    if language_id is not None:
        return language_id == LANGUAGE_ID
    return os.path.splitext(doc_id)[1].lower() in FILE_EXTENSIONS


class DiagnosticCollection:
    """Thread-safe mapping of document id → published findings."""

    def __init__(self, name: str = LANGUAGE_ID, listener: Optional[Listener] = None) -> None:
        self.name = name
        self._listener = listener
        self._entries: Dict[str, List[Finding]] = {}
        self._lock = threading.Lock()

    def set(self, doc_id: str, findings: List[Finding]) -> None:
        """Replace the findings published for *doc_id*."""
        published = list(findings)
        with self._lock:
            self._entries[doc_id] = published
        if self._listener is not None:
            self._listener(doc_id, list(published))

    def delete(self, doc_id: str) -> None:
        with self._lock:
            removed = self._entries.pop(doc_id, None)
        if removed is not None and self._listener is not None:
            self._listener(doc_id, [])

    def get(self, doc_id: str) -> List[Finding]:
        with self._lock:
            return list(self._entries.get(doc_id, ()))

    def clear(self) -> None:
        with self._lock:
            ids = list(self._entries)
            self._entries.clear()
        if self._listener is not None:
            for doc_id in ids:
                self._listener(doc_id, [])

    def __contains__(self, doc_id: object) -> bool:
        with self._lock:
            return doc_id in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __iter__(self) -> Iterator[Tuple[str, List[Finding]]]:
        with self._lock:
            snapshot = [(k, list(v)) for k, v in self._entries.items()]
        return iter(snapshot)

    def __repr__(self) -> str:
        return f"<DiagnosticCollection '{self.name}' ({len(self)} documents)>"


class DocumentLinter:
    """
    Runs the checkers on document updates and publishes the results.

    Requests for the same document are serialized.  Each request may carry
    a monotonically increasing ``version``; a request older than the last
    published version is dropped, so a slow stale run never overwrites a
    newer result.  Closing a document also drops any update still waiting
    on it; a later update reopens the document.

    Parameters
    ----------
    collection : sink receiving the findings
    options    : option overrides (see :func:`tesseract_lint.config.load_options`)
    runner     : pre-built runner; built from *options* when omitted
    """

    def __init__(
        self,
        collection: DiagnosticCollection,
        options: Optional[Mapping[str, object]] = None,
        runner: Optional[CheckerRunner] = None,
    ) -> None:
        self.collection = collection
        self.runner = runner or CheckerRunner(options=load_options(options))
        self._guard = threading.Lock()
        self._doc_locks: Dict[str, threading.Lock] = {}
        self._versions: Dict[str, int] = {}
        self._generations: Dict[str, int] = {}

    def _lock_for(self, doc_id: str) -> threading.Lock:
        with self._guard:
            lock = self._doc_locks.get(doc_id)
            if lock is None:
                lock = self._doc_locks[doc_id] = threading.Lock()
            return lock

    def _generation(self, doc_id: str) -> int:
        with self._guard:
            return self._generations.get(doc_id, 0)

    def update(
        self,
        doc_id: str,
        text: str,
        version: Optional[int] = None,
        language_id: Optional[str] = None,
    ) -> Optional[List[Finding]]:
        """Analyse *text* and publish it for *doc_id*.

        Returns the published findings, or None when the document is not a
        Tesseract document or the request is stale.
        """
        if not is_tesseract_document(doc_id, language_id):
            _log.debug("skipping %s: not a %s document", doc_id, LANGUAGE_ID)
            return None

        generation = self._generation(doc_id)
        with self._lock_for(doc_id):
            if self._generation(doc_id) != generation:
                _log.debug("dropping update for %s: closed while waiting", doc_id)
                return None
            last = self._versions.get(doc_id)
            if version is not None and last is not None and version < last:
                _log.debug("dropping stale update for %s (v%d < v%d)", doc_id, version, last)
                return None

            findings = self.runner.run(SourceText(text, name=doc_id)).findings
            self.collection.set(doc_id, findings)
            if version is not None:
                self._versions[doc_id] = version
            return findings

    def close(self, doc_id: str) -> None:
        """Forget *doc_id* and withdraw its published findings."""
        # The lock is kept: updates already parked on it must see the new generation.
        with self._lock_for(doc_id):
            self.collection.delete(doc_id)
            self._versions.pop(doc_id, None)
            with self._guard:
                self._generations[doc_id] = self._generations.get(doc_id, 0) + 1
