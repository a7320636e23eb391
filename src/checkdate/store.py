"""Document store over a vault directory of Markdown files."""

from __future__ import annotations

import fnmatch
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class DocumentIOError(Exception):
    """Reading or writing a single document failed."""

    def __init__(self, rel_path: str, message: str):
        super().__init__(f"{rel_path}: {message}")
        self.rel_path = rel_path


@dataclass(frozen=True)
class DocumentHandle:
    path: Path
    rel_path: str


@dataclass(frozen=True)
class DocumentMeta:
    """File timestamps as epoch seconds."""

    created: float
    modified: float


class DocumentStore(Protocol):
    def list_documents(self) -> list[DocumentHandle]: ...

    def read_text(self, handle: DocumentHandle) -> str: ...

    def write_text(self, handle: DocumentHandle, text: str) -> None: ...

    def metadata(self, handle: DocumentHandle) -> DocumentMeta: ...


def _is_excluded(rel_posix: str, exclude_globs: list[str]) -> bool:
    for pat in exclude_globs:
        if fnmatch.fnmatchcase(rel_posix, pat):
            return True
    return False


class VaultDocumentStore:
    """Markdown files under a vault root.

    Text is read and written as UTF-8 with newline translation disabled, so
    CRLF files stay CRLF after a rewrite.
    """

    def __init__(self, vault_root: Path, exclude_globs: list[str] | None = None):
        self.vault_root = vault_root
        self.exclude_globs = list(exclude_globs or [])

    def handle_for(self, path: Path) -> DocumentHandle:
        """Build a handle for a path inside (or outside) the vault."""
        abs_path = path.resolve()
        try:
            rel_posix = abs_path.relative_to(self.vault_root.resolve()).as_posix()
        except ValueError:
            rel_posix = abs_path.name
        return DocumentHandle(path=abs_path, rel_path=rel_posix)

    def list_documents(self) -> list[DocumentHandle]:
        handles: list[DocumentHandle] = []
        for p in self.vault_root.rglob("*.md"):
            if not p.is_file():
                continue
            rel_posix = p.relative_to(self.vault_root).as_posix()
            if _is_excluded(rel_posix, self.exclude_globs):
                continue
            handles.append(DocumentHandle(path=p, rel_path=rel_posix))
        handles.sort(key=lambda h: h.rel_path)
        logger.debug(f"Found {len(handles)} markdown files under {self.vault_root}")
        return handles

    def read_text(self, handle: DocumentHandle) -> str:
        try:
            with open(handle.path, "r", encoding="utf-8", newline="") as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise DocumentIOError(handle.rel_path, f"read failed: {e}") from e

    def write_text(self, handle: DocumentHandle, text: str) -> None:
        try:
            with open(handle.path, "w", encoding="utf-8", newline="") as f:
                f.write(text)
        except OSError as e:
            raise DocumentIOError(handle.rel_path, f"write failed: {e}") from e

    def metadata(self, handle: DocumentHandle) -> DocumentMeta:
        try:
            st = handle.path.stat()
        except OSError as e:
            raise DocumentIOError(handle.rel_path, f"stat failed: {e}") from e
        # st_birthtime is only exposed on some platforms.
        created = getattr(st, "st_birthtime", None) or st.st_ctime
        return DocumentMeta(created=float(created), modified=float(st.st_mtime))
