"""
Email delivery through the Mailgun HTTP API.
"""

from abc import ABC, abstractmethod
from typing import Optional, Sequence

import requests


class Mailer(ABC):
    """Sends one HTML message to a primary recipient plus CCs."""

    @abstractmethod
    def send(self, recipients: Sequence[str], subject: str, body: str) -> Optional[str]:
        """
        Send a message.

        Args:
            recipients: First entry is the To address, the rest are CC'd
            subject: Subject line
            body: HTML body

        Returns:
            None on success, otherwise a description of the failure
        """
        pass


class MailgunMailer(Mailer):
    """Mailer posting to https://<host>/v3/<domain>/messages."""

    def __init__(self, api_key: str, domain: str, from_address: str,
                 host: str = "api.mailgun.net", timeout: float = 30.0,
                 session: requests.Session = None):
        self.api_key = api_key
        self.domain = domain
        self.from_address = from_address
        self.host = host
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def messages_url(self) -> str:
        return f"https://{self.host}/v3/{self.domain}/messages"

    def build_message(self, recipients: Sequence[str], subject: str, body: str) -> dict:
        data = {
            "from": self.from_address,
            "to": recipients[0],
            "h:Reply-To": self.from_address,
            "subject": subject,
            "html": body,
        }
        if len(recipients) > 1:
            data["cc"] = "; ".join(recipients[1:])
        return data

    def send(self, recipients: Sequence[str], subject: str, body: str) -> Optional[str]:
        if not recipients:
            return "Could not send email: no recipients"

        try:
            response = self.session.post(
                self.messages_url,
                auth=("api", self.api_key),
                data=self.build_message(recipients, subject, body),
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            return f"Could not send email: {e}"
        return None
