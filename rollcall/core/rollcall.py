"""
One rollcall invocation: load, select, escalate, summarise.
"""

from datetime import datetime, timezone
from typing import Optional

from .config import RollcallSettings, validate_settings
from .errors import ConfigError
from .escalation import escalate
from .github import GitHubRecordStore, RecordStore
from .loader import load_eligible_records
from .mailer import Mailer, MailgunMailer
from .selector import select_record
from ..util.logging import logger


ALL_OK = "Rollcall: All JCs okay."


def build_store(settings: RollcallSettings) -> GitHubRecordStore:
    return GitHubRecordStore(
        settings.github_repo_api,
        settings.github_api_user,
        settings.github_token,
        timeout=settings.http_timeout_sec,
    )


def build_mailer(settings: RollcallSettings) -> MailgunMailer:
    return MailgunMailer(
        settings.mailgun_api_key,
        settings.mailgun_domain,
        settings.from_email_address,
        host=settings.mailgun_host,
        timeout=settings.http_timeout_sec,
    )


def run_rollcall(settings: RollcallSettings, store: RecordStore = None, mailer: Mailer = None,
                 now: Optional[datetime] = None) -> str:
    """
    Perform a rollcall.

    Owners of journal clubs not updated for a year get a notification, then
    a reminder a month apart twice more; a journal club still not updated
    after that is deactivated. At most one journal club is handled per run.

    Returns:
        One-line summary of what was done
    """
    if store is None or mailer is None:
        issues = validate_settings(settings)
        if issues:
            raise ConfigError(issues)
        store = store or build_store(settings)
        mailer = mailer or build_mailer(settings)

    now = now or datetime.now(timezone.utc)

    eligible = load_eligible_records(store, settings, now)
    journal_club = select_record(eligible, settings)
    if journal_club is None:
        summary = ALL_OK
    else:
        summary = escalate(journal_club, store, mailer, settings, now).summary()

    logger.log_rollcall_summary(summary, settings.sandbox)
    return summary
