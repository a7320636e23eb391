"""Stamp a task line the moment the user finishes typing it."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from .config import CheckdateSettings, SettingsStore
from .dates import today_str
from .editor import EditorSurface
from .stamper import format_stamp, has_stamp, is_unchecked_task

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class RealTimeStamper:
    """Editor change listener that stamps the line above the cursor.

    After Enter the cursor sits on the new empty line, so the task that was
    just finished is the previous line. Only that line is inspected, and the
    stamp goes in as one positional insertion at its end.
    """

    def __init__(self, settings: CheckdateSettings, clock: Optional[Clock] = None):
        self.settings = settings
        self.clock = clock or datetime.now

    @classmethod
    def from_settings_store(cls, settings_store: SettingsStore, clock: Optional[Clock] = None) -> "RealTimeStamper":
        """Build a stamper from the saved settings, honouring enableRealTimeAdding."""
        return cls(settings_store.load(), clock=clock)

    def attach(self, editor: EditorSurface) -> Callable[[], None]:
        """Subscribe to the editor's change events; returns the unsubscribe function."""
        return editor.on_change(self.on_editor_change)

    def on_editor_change(self, editor: EditorSurface) -> bool:
        """Handle one change notification. Returns True if a stamp was inserted."""
        if not self.settings.enable_real_time_adding:
            return False

        prev_line_no = editor.get_cursor().line - 1
        if prev_line_no < 0:
            return False

        prev_text = editor.get_line(prev_line_no)
        if prev_text.endswith("\r"):
            prev_text = prev_text[:-1]
        if not is_unchecked_task(prev_text):
            return False
        if has_stamp(prev_text):
            return False

        insertion = " " + format_stamp(today_str(self.clock()))
        logger.debug(f"Stamping line {prev_line_no}: {prev_text!r}")
        editor.insert(prev_line_no, len(prev_text), insertion)
        return True
