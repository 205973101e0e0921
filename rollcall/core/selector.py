"""
Pick the single journal club to act on in this run.
"""

from typing import List, Optional

from .config import RollcallSettings
from .schema import JournalClub
from ..util.logging import logger


def select_oldest(eligible: List[JournalClub]) -> Optional[JournalClub]:
    """Least recently modified journal club; ties go to the earliest listed."""
    if not eligible:
        return None
    return min(eligible, key=lambda jc: jc.modified_at)


def select_sandbox(eligible: List[JournalClub], sandbox_jcid: str) -> Optional[JournalClub]:
    """The sentinel journal club, if it is eligible."""
    for jc in eligible:
        if jc.jcid == sandbox_jcid:
            return jc
    return None


def select_record(eligible: List[JournalClub], settings: RollcallSettings) -> Optional[JournalClub]:
    if settings.sandbox:
        selected = select_sandbox(eligible, settings.sandbox_jcid)
    else:
        selected = select_oldest(eligible)

    logger.log_selection(selected.jcid if selected else None, settings.sandbox, len(eligible))
    return selected
