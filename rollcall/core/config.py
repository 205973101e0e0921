"""
Rollcall configuration.

Values come from the environment (optionally a .env file). Each invocation
takes one snapshot with load_settings() and passes it along; nothing in the
core reads the environment after that.
"""

import os
from dataclasses import dataclass
from typing import List, Optional, Tuple

from dotenv import load_dotenv

load_dotenv()

# Version string
VERSION = "1.0.0"

# Repository layout
DEFAULT_JC_COLLECTION = "_journal-clubs"
DEFAULT_EMAIL_TEMPLATE_DIR = "_emails"
DEFAULT_SANDBOX_JCID = "oxford"

# Escalation timing
DEFAULT_MAX_DAYS_SINCE_UPDATE = 365
DEFAULT_MIN_DAYS_BETWEEN_EMAILS = 28

DEFAULT_MAILGUN_HOST = "api.mailgun.net"
DEFAULT_GITHUB_API_USER = "jc-rollcall"

TRUTHY = ("1", "true", "yes", "on")


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in TRUTHY


def _env_number(name: str, default, issues: List[str], parse=int):
    """Parse a numeric env var; a malformed value is recorded and the default used."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return parse(raw)
    except ValueError:
        issues.append(f"{name} must be a number, got {raw!r}")
        return default


@dataclass(frozen=True)
class RollcallSettings:
    """Immutable per-invocation configuration."""
    sandbox: bool
    github_repo_api: Optional[str]
    github_api_user: str
    github_token: Optional[str]
    mailgun_api_key: Optional[str]
    mailgun_domain: Optional[str]
    mailgun_host: str
    from_email_address: Optional[str]
    sandbox_jcid: str = DEFAULT_SANDBOX_JCID
    jc_collection: str = DEFAULT_JC_COLLECTION
    email_template_dir: str = DEFAULT_EMAIL_TEMPLATE_DIR
    max_days_since_update: int = DEFAULT_MAX_DAYS_SINCE_UPDATE
    min_days_between_emails: int = DEFAULT_MIN_DAYS_BETWEEN_EMAILS
    fetch_workers: int = 8
    http_timeout_sec: float = 30.0
    env_issues: Tuple[str, ...] = ()  # malformed values replaced by defaults


def debug_enabled() -> bool:
    """Check if debug mode is enabled."""
    return _env_flag("DEBUG")


def sandbox_forced() -> bool:
    """Check if every invocation should run against the sandbox repository."""
    return _env_flag("SANDBOX")


def load_settings(sandbox: bool = False) -> RollcallSettings:
    """
    Snapshot the environment into a RollcallSettings.

    Args:
        sandbox: Run against the sandbox repository and only touch the
            sentinel journal club. SANDBOX=true in the environment forces it.
    """
    sandbox = bool(sandbox) or sandbox_forced()
    repo_api = os.getenv("GITHUB_REPO_API_SANDBOX") if sandbox else os.getenv("GITHUB_REPO_API")
    issues: List[str] = []

    return RollcallSettings(
        sandbox=sandbox,
        github_repo_api=repo_api.rstrip("/") if repo_api else None,
        github_api_user=os.getenv("GITHUB_API_USER", DEFAULT_GITHUB_API_USER),
        github_token=os.getenv("GITHUB_TOKEN"),
        mailgun_api_key=os.getenv("MAILGUN_API_KEY"),
        mailgun_domain=os.getenv("MAILGUN_DOMAIN"),
        mailgun_host=os.getenv("MAILGUN_HOST", DEFAULT_MAILGUN_HOST),
        from_email_address=os.getenv("FROM_EMAIL_ADDRESS"),
        sandbox_jcid=os.getenv("SANDBOX_JCID", DEFAULT_SANDBOX_JCID),
        jc_collection=os.getenv("JC_COLLECTION", DEFAULT_JC_COLLECTION),
        email_template_dir=os.getenv("EMAIL_TEMPLATE_DIR", DEFAULT_EMAIL_TEMPLATE_DIR),
        max_days_since_update=_env_number("MAX_DAYS_SINCE_UPDATE", DEFAULT_MAX_DAYS_SINCE_UPDATE, issues),
        min_days_between_emails=_env_number("MIN_DAYS_BETWEEN_EMAILS", DEFAULT_MIN_DAYS_BETWEEN_EMAILS, issues),
        fetch_workers=_env_number("FETCH_WORKERS", 8, issues),
        http_timeout_sec=_env_number("HTTP_TIMEOUT_SEC", 30.0, issues, parse=float),
        env_issues=tuple(issues),
    )


def validate_settings(settings: RollcallSettings) -> List[str]:
    """Validate a settings snapshot and return any issues."""
    issues = list(settings.env_issues)

    if not settings.github_repo_api:
        name = "GITHUB_REPO_API_SANDBOX" if settings.sandbox else "GITHUB_REPO_API"
        issues.append(f"{name} is not set")

    if not settings.github_token:
        issues.append("GITHUB_TOKEN is not set")

    if not settings.mailgun_api_key or not settings.mailgun_domain:
        issues.append("MAILGUN_API_KEY and MAILGUN_DOMAIN are required")

    if not settings.from_email_address:
        issues.append("FROM_EMAIL_ADDRESS is not set")

    if settings.max_days_since_update < 1:
        issues.append("MAX_DAYS_SINCE_UPDATE must be >= 1")

    if settings.min_days_between_emails < 1:
        issues.append("MIN_DAYS_BETWEEN_EMAILS must be >= 1")

    if settings.fetch_workers < 1:
        issues.append("FETCH_WORKERS must be >= 1")

    if settings.http_timeout_sec <= 0:
        issues.append("HTTP_TIMEOUT_SEC must be > 0")

    return issues
