"""Retroactive stamping of a single document or a whole vault."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Optional

from .config import CheckdateSettings
from .dates import resolve_stamp_date
from .editor import EditorSurface
from .models import CorpusStampSummary, DocumentStampOutcome
from .notify import Notifier, plural
from .stamper import StampResult, stamp_text
from .store import DocumentHandle, DocumentMeta, DocumentStore

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 10
DEFAULT_BATCH_DELAY_MS = 10

NOTHING_TO_DO = "No unchecked checkboxes without creation dates found"
VAULT_ERROR = "Error occurred while processing vault. Check the log for details."


def stamp_document_text(
    text: str,
    settings: CheckdateSettings,
    meta: Optional[DocumentMeta] = None,
    now: Optional[datetime] = None,
) -> StampResult:
    """Stamp text using the date policy for its document (today if none)."""
    date_str = resolve_stamp_date(meta, use_file_creation_date=settings.use_file_creation_date, now=now)
    logger.debug(f"Date to use: {date_str}")
    return stamp_text(text, date_str)


def _report_current_file(added_count: int, notifier: Notifier) -> None:
    if added_count > 0:
        notifier.notify(f"Added {plural(added_count, 'created date')} to current file")
        logger.debug(f"Added {added_count} creation dates to current file")
    else:
        notifier.notify(NOTHING_TO_DO)


def stamp_buffer(
    editor: EditorSurface,
    settings: CheckdateSettings,
    notifier: Notifier,
    meta: Optional[DocumentMeta] = None,
    now: Optional[datetime] = None,
) -> int:
    """Stamp every missing date in an open editor buffer.

    The buffer is only replaced when something was added, so an already
    stamped buffer keeps its undo history untouched.

    Returns:
        Number of stamps added
    """
    content = editor.get_text()
    result = stamp_document_text(content, settings, meta=meta, now=now)
    if result.added_count > 0:
        editor.set_text(result.text)
    _report_current_file(result.added_count, notifier)
    return result.added_count


def fix_document(store: DocumentStore, handle: DocumentHandle, settings: CheckdateSettings) -> DocumentStampOutcome:
    """Read, stamp and (only if changed) write back one stored document."""
    text = store.read_text(handle)
    result = stamp_document_text(text, settings, meta=store.metadata(handle))
    if result.added_count > 0:
        store.write_text(handle, result.text)
    return DocumentStampOutcome(
        rel_path=handle.rel_path,
        added_count=result.added_count,
        written=result.added_count > 0,
    )


def stamp_file(
    store: DocumentStore,
    handle: DocumentHandle,
    settings: CheckdateSettings,
    notifier: Notifier,
) -> int:
    """Stamp a single stored document and report the outcome to the user."""
    outcome = fix_document(store, handle, settings)
    _report_current_file(outcome.added_count, notifier)
    return outcome.added_count


async def _stamp_document(
    store: DocumentStore,
    handle: DocumentHandle,
    settings: CheckdateSettings,
) -> DocumentStampOutcome:
    try:
        return await asyncio.to_thread(fix_document, store, handle, settings)
    except Exception as e:
        logger.error(f"Error processing file {handle.rel_path}: {e}")
        return DocumentStampOutcome(rel_path=handle.rel_path, error=str(e))


async def stamp_corpus(
    store: DocumentStore,
    settings: CheckdateSettings,
    notifier: Notifier,
    *,
    batch_size: int = DEFAULT_BATCH_SIZE,
    batch_delay_ms: int = DEFAULT_BATCH_DELAY_MS,
) -> CorpusStampSummary:
    """Stamp every document in the store, a batch at a time.

    Documents inside a batch run concurrently; a failing document is logged
    and contributes nothing. Between batches the progress message is updated
    and control goes back to the event loop for ``batch_delay_ms``.

    Args:
        store: Document store to enumerate, read and write
        settings: User settings (date source)
        notifier: Channel for progress and the final message
        batch_size: Documents per batch
        batch_delay_ms: Pause after each batch

    Returns:
        CorpusStampSummary; ``error`` is set if the run stopped early
    """
    if batch_size < 1:
        raise ValueError("batch_size must be >= 1")

    total = 0
    processed = 0
    added = 0
    batches = 0
    failed: list[str] = []
    progress = None

    try:
        handles = store.list_documents()
        total = len(handles)
        progress = notifier.progress(f"Processing {total} files...")

        for start in range(0, total, batch_size):
            batch = handles[start : start + batch_size]
            outcomes = await asyncio.gather(*(_stamp_document(store, h, settings) for h in batch))
            batches += 1

            for outcome in outcomes:
                processed += 1
                added += outcome.added_count
                if outcome.error is not None:
                    failed.append(outcome.rel_path)

            progress.update(f"Processed {processed}/{total} files... ({added} dates added)")
            logger.debug(f"Batch {batches}: {len(batch)} files, running total {added} dates")

            await asyncio.sleep(batch_delay_ms / 1000)
    except Exception as e:
        logger.exception("Error during vault-wide processing")
        if progress is not None:
            progress.dismiss()
        notifier.notify(VAULT_ERROR)
        return CorpusStampSummary(
            total_documents=total,
            processed_count=processed,
            added_count=added,
            batches=batches,
            failed_paths=failed,
            error=str(e),
        )

    progress.dismiss()
    notifier.notify(f"Added {plural(added, 'created date')} across {plural(processed, 'file')}")
    logger.debug(f"Added {added} creation dates across {processed} files")

    return CorpusStampSummary(
        total_documents=total,
        processed_count=processed,
        added_count=added,
        batches=batches,
        failed_paths=failed,
    )
