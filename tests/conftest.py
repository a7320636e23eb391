"""Pytest fixtures for checkdate tests."""

import threading
from pathlib import Path

import pytest

from checkdate.config import CheckdateConfig, CheckdateSettings
from checkdate.store import DocumentHandle, DocumentIOError, DocumentMeta


class RecordingProgress:
    def __init__(self, message: str):
        self.messages = [message]
        self.dismissed = False

    def update(self, message: str) -> None:
        self.messages.append(message)

    def dismiss(self) -> None:
        self.dismissed = True


class RecordingNotifier:
    """Notifier that keeps every message for assertions."""

    def __init__(self):
        self.messages: list[str] = []
        self.progresses: list[RecordingProgress] = []

    def notify(self, message: str) -> None:
        self.messages.append(message)

    def progress(self, message: str) -> RecordingProgress:
        handle = RecordingProgress(message)
        self.progresses.append(handle)
        return handle


class InMemoryStore:
    """Document store backed by a dict; records reads and writes in order."""

    def __init__(
        self,
        docs: dict[str, str],
        meta: DocumentMeta | None = None,
        failing: set[str] | None = None,
        failing_writes: set[str] | None = None,
    ):
        self.docs = dict(docs)
        self.meta = meta or DocumentMeta(created=0.0, modified=0.0)
        self.failing = failing or set()
        self.failing_writes = failing_writes or set()
        self.events: list[tuple[str, str]] = []
        self._lock = threading.Lock()

    def _record(self, kind: str, rel_path: str) -> None:
        with self._lock:
            self.events.append((kind, rel_path))

    def list_documents(self) -> list[DocumentHandle]:
        return [DocumentHandle(path=Path(rel), rel_path=rel) for rel in sorted(self.docs)]

    def read_text(self, handle: DocumentHandle) -> str:
        self._record("read", handle.rel_path)
        if handle.rel_path in self.failing:
            raise DocumentIOError(handle.rel_path, "read failed: simulated")
        return self.docs[handle.rel_path]

    def write_text(self, handle: DocumentHandle, text: str) -> None:
        self._record("write", handle.rel_path)
        if handle.rel_path in self.failing_writes:
            raise DocumentIOError(handle.rel_path, "write failed: simulated")
        self.docs[handle.rel_path] = text

    def metadata(self, handle: DocumentHandle) -> DocumentMeta:
        return self.meta


@pytest.fixture
def temp_vault(tmp_path):
    """Create a temporary vault for testing.

    Args:
        tmp_path: pytest's built-in temporary directory fixture

    Returns:
        Path to temporary vault root
    """
    vault_root = tmp_path / "test_vault"
    vault_root.mkdir()
    return vault_root


@pytest.fixture
def vault_config(temp_vault):
    """CheckdateConfig pointing to the temporary vault, with no batch delay."""
    return CheckdateConfig(vault_path=temp_vault, batch_delay_ms=0)


@pytest.fixture
def settings():
    return CheckdateSettings()


@pytest.fixture
def notifier():
    return RecordingNotifier()
