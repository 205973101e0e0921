"""
Data classes shared by the loader, selector and escalation engine.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import IntEnum
from typing import Dict, Optional, Tuple


EPOCH = datetime.fromtimestamp(0, tz=timezone.utc)


class MessageLevel(IntEnum):
    """Severity of the last message sent to a journal club."""
    UP_TO_DATE = 0
    NOTIFICATION = 1
    FIRST_REMINDER = 2
    SECOND_REMINDER = 3
    JC_DEACTIVATED = 4


ACTIONS: Dict[MessageLevel, str] = {
    MessageLevel.NOTIFICATION: "Notification sent.",
    MessageLevel.FIRST_REMINDER: "First reminder sent.",
    MessageLevel.SECOND_REMINDER: "Second reminder sent.",
    MessageLevel.JC_DEACTIVATED: "Journal club deactivated.",
}


@dataclass(frozen=True)
class StorageHandle:
    """Where a journal club file lives and the revision it was read at."""
    path: str
    url: str
    sha: str
    content: str  # decoded file text


@dataclass(frozen=True)
class JournalClub:
    """Parsed journal club metadata plus its storage handle."""
    jcid: Optional[str]
    title: Optional[str]
    contact_emails: Tuple[str, ...]
    last_update: Optional[datetime]  # None when the stored value is unreadable
    last_message: Optional[datetime]
    last_message_level: int
    handle: StorageHandle
    modified_at: datetime = EPOCH

    @property
    def new_message_level(self) -> int:
        return self.last_message_level + 1


@dataclass
class RollcallResult:
    """Outcome of escalating one journal club."""
    journal_club: JournalClub
    action: str

    def summary(self) -> str:
        return f"Rollcall: {self.journal_club.jcid} -- {self.action}"
