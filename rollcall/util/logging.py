"""
Structured logging for rollcall operations.
"""

import logging
from typing import Any, Dict, Iterable, List


class StructuredLogger:
    """Structured logger for record loading, selection and escalation."""

    def __init__(self, name: str = "rollcall"):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.INFO)

        # Create handler if not already set
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

    def log_operation(self, operation: str, status: str, details: Dict[str, Any] = None):
        """Log a structured operation."""
        message = f"Operation: {operation}, Status: {status}"
        if details:
            message += f", Details: {details}"

        if status in ("failed", "error"):
            self.logger.warning(message)
        else:
            self.logger.info(message)

    def log_records_loaded(self, collection: str, listed: int, fetched: int, eligible: int):
        """Log the outcome of a collection load."""
        self.log_operation("records.load", "success", {
            "collection": collection,
            "listed": listed,
            "fetched": fetched,
            "dropped": listed - fetched,
            "eligible": eligible
        })

    def log_fetch_failure(self, path: str, error: Exception):
        """Log a record that could not be fetched and was dropped."""
        self.log_operation("records.fetch", "failed", {
            "path": path,
            "error": str(error)[:100]
        })

    def log_selection(self, jcid: str, sandbox: bool, candidates: int):
        """Log which journal club was picked for this run."""
        details = {"candidates": candidates, "sandbox": sandbox}
        if jcid is None:
            self.log_operation("records.select", "none", details)
        else:
            details["jcid"] = jcid
            self.log_operation("records.select", "selected", details)

    def log_email(self, jcid: str, level: int, recipients: Iterable[str], error: str = None):
        """Log an escalation email dispatch."""
        details = {
            "jcid": jcid,
            "level": level,
            "recipients": mask_emails(recipients)
        }
        if error:
            details["error"] = error[:100]
        self.log_operation("email.send", "failed" if error else "success", details)

    def log_side_effect(self, operation: str, jcid: str, error: str = None):
        """Log an archive or metadata update."""
        details = {"jcid": jcid}
        if error:
            details["error"] = error[:100]
        self.log_operation(operation, "failed" if error else "success", details)

    def log_rollcall_summary(self, summary: str, sandbox: bool):
        """Log the one-line run summary."""
        self.log_operation("rollcall", "complete", {"summary": summary, "sandbox": sandbox})

    # Standard logging methods for compatibility
    def info(self, message: str) -> None:
        """Log an info message."""
        self.logger.info(message)

    def warning(self, message: str) -> None:
        """Log a warning message."""
        self.logger.warning(message)

    def error(self, message: str) -> None:
        """Log an error message."""
        self.logger.error(message)

    def debug(self, message: str) -> None:
        """Log a debug message."""
        self.logger.debug(message)


def mask_email(address: str) -> str:
    """Hide the local part of an address, keeping its first character."""
    if not address or "@" not in address:
        return address
    local, _, domain = address.partition("@")
    return f"{local[:1]}***@{domain}"


def mask_emails(addresses: Iterable[str]) -> List[str]:
    return [mask_email(a) for a in addresses]


# Global logger instance
logger = StructuredLogger()
