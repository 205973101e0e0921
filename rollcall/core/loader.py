"""
Record loader - lists the active journal clubs and keeps the ones due a message.
"""

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from .config import RollcallSettings
from .github import RecordStore
from .records import parse_journal_club
from .schema import JournalClub, StorageHandle
from ..util.logging import logger


def fetch_journal_club(store: RecordStore, item: Dict[str, Any]) -> JournalClub:
    """Fetch one listed item and parse it into a JournalClub."""
    fetched = store.get_item(item["url"])
    handle = StorageHandle(
        path=fetched.path,
        url=fetched.url,
        sha=fetched.sha,
        content=fetched.content,
    )
    return parse_journal_club(handle, modified_at=fetched.modified_at)


def fetch_all(store: RecordStore, items: List[Dict[str, Any]], workers: int = 8) -> List[JournalClub]:
    """
    Fetch every item concurrently and wait for all of them.

    Items whose fetch or parse raised are logged and dropped; the rest keep
    the listing order.
    """
    if not items:
        return []

    records = []
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [(item, executor.submit(fetch_journal_club, store, item)) for item in items]
        for item, future in futures:
            try:
                records.append(future.result())
            except Exception as exc:
                logger.log_fetch_failure(item.get("path", item.get("url", "?")), exc)
    return records


def is_eligible(record: JournalClub, settings: RollcallSettings, now: datetime) -> bool:
    """
    A journal club is due a message when its owner has not updated it within
    the staleness window and it has not been messaged within the cooldown.
    """
    if record.last_update is None or record.last_message is None:
        return False
    too_old = now - timedelta(days=settings.max_days_since_update)
    too_recent = now - timedelta(days=settings.min_days_between_emails)
    return record.last_update < too_old and record.last_message < too_recent


def load_eligible_records(store: RecordStore, settings: RollcallSettings,
                          now: Optional[datetime] = None) -> List[JournalClub]:
    """List the active collection and return the journal clubs due a message."""
    now = now or datetime.now(timezone.utc)

    items = [i for i in store.list_items(settings.jc_collection) if i.get("type", "file") == "file"]
    records = fetch_all(store, items, settings.fetch_workers)
    eligible = [r for r in records if is_eligible(r, settings, now)]

    logger.log_records_loaded(settings.jc_collection, len(items), len(records), len(eligible))
    return eligible
