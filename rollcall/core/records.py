"""
Journal club file format.

A journal club is a markdown file with `key: value` metadata lines. Only the
first line for each key counts. Missing values fall back to defaults; a
timestamp that is present but unreadable parses as None and never makes the
record eligible. Lines may end in LF or CRLF.
"""

import re
from datetime import datetime, timezone
from typing import Optional

from .schema import EPOCH, JournalClub, MessageLevel, StorageHandle
from ..util.logging import logger


LAST_UPDATE_KEY = "last-update-timestamp"
LAST_MESSAGE_KEY = "last-message-timestamp"
LAST_MESSAGE_LEVEL_KEY = "last-message-level"
JCID_KEY = "jcid"
TITLE_KEY = "title"
CONTACT_KEY = "contact"
ADDITIONAL_CONTACT_KEY = "additional-contact"

ADDITIONAL_CONTACT_SEPARATOR = ", "

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _field(content: str, key: str) -> Optional[str]:
    match = re.search(rf"^{re.escape(key)}: ([^\r\n]*)", content, re.MULTILINE)
    return match.group(1) if match else None


def _int_field(content: str, key: str) -> Optional[int]:
    value = _field(content, key)
    if value is None:
        return None
    match = _LEADING_INT.match(value)
    return int(match.group(1)) if match else None


def _timestamp_field(content: str, key: str) -> Optional[datetime]:
    raw = _field(content, key)
    if raw is None:
        return EPOCH
    seconds = _int_field(content, key)
    if seconds is not None:
        try:
            return datetime.fromtimestamp(seconds, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            pass
    logger.warning(f"Unreadable {key} value {raw!r}; record will not be messaged")
    return None


def parse_journal_club(handle: StorageHandle, modified_at: datetime = EPOCH) -> JournalClub:
    """Build a JournalClub from the decoded file content in `handle`."""
    content = handle.content

    level = _int_field(content, LAST_MESSAGE_LEVEL_KEY)
    contact = _field(content, CONTACT_KEY)
    contacts = [contact if contact is not None else ""]
    additional = _field(content, ADDITIONAL_CONTACT_KEY)
    if additional is not None:
        contacts.extend(additional.split(ADDITIONAL_CONTACT_SEPARATOR))

    return JournalClub(
        jcid=_field(content, JCID_KEY),
        title=_field(content, TITLE_KEY),
        contact_emails=tuple(contacts),
        last_update=_timestamp_field(content, LAST_UPDATE_KEY),
        last_message=_timestamp_field(content, LAST_MESSAGE_KEY),
        last_message_level=level if level is not None else int(MessageLevel.UP_TO_DATE),
        handle=handle,
        modified_at=modified_at,
    )


def rewrite_message_status(content: str, level: int, now: datetime) -> str:
    """
    Stamp a new message time and level into journal club content.

    Only the first `last-message-timestamp` and `last-message-level` lines
    change. A key without a line is left absent.
    """
    seconds = int(now.timestamp())
    content = re.sub(
        rf"^{LAST_MESSAGE_KEY}: [^\r\n]+",
        f"{LAST_MESSAGE_KEY}: {seconds}",
        content,
        count=1,
        flags=re.MULTILINE,
    )
    return re.sub(
        rf"^{LAST_MESSAGE_LEVEL_KEY}: [^\r\n]+",
        f"{LAST_MESSAGE_LEVEL_KEY}: {level}",
        content,
        count=1,
        flags=re.MULTILINE,
    )


def has_message_status(content: str) -> bool:
    """Check whether both message status lines are present."""
    return (
        re.search(rf"^{LAST_MESSAGE_KEY}: [^\r\n]+", content, re.MULTILINE) is not None
        and re.search(rf"^{LAST_MESSAGE_LEVEL_KEY}: [^\r\n]+", content, re.MULTILINE) is not None
    )


def inactive_path(path: str) -> str:
    """Map `_journal-clubs/x.md` to `_inactive-journal-clubs/x.md`."""
    return re.sub(r"^_", "_inactive-", path, count=1)
