"""User-facing notifications."""

from __future__ import annotations

from typing import Optional, Protocol

from rich.console import Console
from rich.status import Status


class ProgressHandle(Protocol):
    def update(self, message: str) -> None: ...

    def dismiss(self) -> None: ...


class Notifier(Protocol):
    def notify(self, message: str) -> None: ...

    def progress(self, message: str) -> ProgressHandle: ...


class _StatusProgress:
    def __init__(self, status: Status):
        self._status = status
        self._dismissed = False

    def update(self, message: str) -> None:
        if not self._dismissed:
            self._status.update(f"[cyan]{message}[/cyan]")

    def dismiss(self) -> None:
        if not self._dismissed:
            self._status.stop()
            self._dismissed = True


class ConsoleNotifier:
    """Notifier that prints to a rich Console and shows progress as a spinner."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def notify(self, message: str) -> None:
        self.console.print(message)

    def progress(self, message: str) -> ProgressHandle:
        status = self.console.status(f"[cyan]{message}[/cyan]")
        status.start()
        return _StatusProgress(status)


def plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"
