"""
Escalation engine - sends the next message to a journal club and records it.

Levels run NOTIFICATION -> FIRST_REMINDER -> SECOND_REMINDER -> JC_DEACTIVATED,
one step per message. Deactivation moves the file out of the active
collection, so a deactivated journal club is never loaded again.

Only a missing or broken template is fatal. Send, update and archive failures
are reported in the result text, and a failed send leaves the file untouched
so the same level is attempted next time.
"""

from datetime import datetime, timezone
from typing import Optional, Tuple

from .config import RollcallSettings
from .errors import EscalationError, StorageError
from .github import RecordStore
from .mailer import Mailer
from .records import has_message_status, inactive_path, rewrite_message_status
from .schema import ACTIONS, JournalClub, MessageLevel, RollcallResult
from .templates import fetch_template, substitute_handlebars
from ..util.logging import logger


def next_level(record: JournalClub) -> MessageLevel:
    """The level of the message this journal club is due."""
    try:
        level = MessageLevel(record.new_message_level)
    except ValueError:
        raise EscalationError(
            f"{record.jcid} has last-message-level {record.last_message_level}; nothing follows it"
        )
    if level not in ACTIONS:
        raise EscalationError(f"{record.jcid} has no message for level {int(level)}")
    return level


def recipients_for(record: JournalClub, level: MessageLevel, operator_address: Optional[str]) -> Tuple[str, ...]:
    """Contacts for the message; the operator is CC'd on deactivations."""
    recipients = tuple(record.contact_emails)
    if level == MessageLevel.JC_DEACTIVATED and operator_address:
        recipients = recipients + (operator_address,)
    return recipients


def deactivate_record(record: JournalClub, store: RecordStore) -> Optional[str]:
    """
    Move a journal club file into the inactive collection.

    The copy is created first and the original is deleted only once the copy
    exists. A failed delete leaves both files in place.

    Returns:
        None on success, otherwise a description of the failure
    """
    handle = record.handle
    new_path = inactive_path(handle.path)

    try:
        store.create_item(new_path, handle.content, f"Rollcall: Archiving of {record.jcid}")
    except StorageError as e:
        return f"Could not archive: {e}"

    try:
        store.delete_item(handle.url, handle.sha, f"Rollcall: Removing {handle.path}")
    except StorageError as e:
        return f"Could not remove old file: {e}"

    return None


def update_message_status(record: JournalClub, store: RecordStore, level: int,
                          now: datetime) -> Optional[str]:
    """
    Write the new message time and level back to the journal club file.

    Returns:
        None on success, otherwise a description of the failure
    """
    handle = record.handle
    if not has_message_status(handle.content):
        logger.warning(f"{handle.path} lacks message status lines; they will not be recorded")

    content = rewrite_message_status(handle.content, level, now)
    try:
        store.update_item(
            handle.url,
            content,
            handle.sha,
            f"Rollcall: Update {record.jcid}.md last message time.",
        )
    except StorageError as e:
        return f"Could not update last message time: {e}"
    return None


def escalate(record: JournalClub, store: RecordStore, mailer: Mailer,
             settings: RollcallSettings, now: Optional[datetime] = None) -> RollcallResult:
    """
    Send the next message for a journal club and apply its side effect.

    Raises:
        TemplateError: the template for the next level could not be loaded
        EscalationError: the journal club is already at the terminal level
    """
    now = now or datetime.now(timezone.utc)
    level = next_level(record)

    template = fetch_template(store, level, settings.email_template_dir)
    email = substitute_handlebars(template, {"jcTitle": record.title})

    recipients = recipients_for(record, level, settings.from_email_address)
    email_failed = mailer.send(recipients, email.get("subject", ""), email.get("body", ""))
    logger.log_email(record.jcid, int(level), recipients, email_failed)

    update_failed = None
    if not email_failed:
        if level == MessageLevel.JC_DEACTIVATED:
            update_failed = deactivate_record(record, store)
            logger.log_side_effect("records.archive", record.jcid, update_failed)
        else:
            update_failed = update_message_status(record, store, int(level), now)
            logger.log_side_effect("records.update", record.jcid, update_failed)

    action = ACTIONS[level]
    if email_failed or update_failed:
        action = f"{action} FAILED! {email_failed or ''}{update_failed or ''}"
    return RollcallResult(record, action)
