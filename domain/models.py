# domain/models.py
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

@dataclass(frozen=True)
class Account:
    server: str
    login: str
    password: str
    webmail: str
    port: int = 993
    ssl: bool = True
    folder: str = "INBOX"

@dataclass(frozen=True)
class MailAddress:
    mailbox: str
    host: str

@dataclass
class MessageHeader:
    subject: str
    from_addresses: list[MailAddress]
    to_addresses: list[MailAddress]
    date: datetime | None
    arrival_timestamp: int

@dataclass
class MailSummary:
    subject: str
    from_: str
    to: str
    date: str
    udate: int
    webmail: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "subject": self.subject,
            "from": self.from_,
            "to": self.to,
            "date": self.date,
            "udate": self.udate,
            "webmail": self.webmail,
        }

@dataclass
class AccountScan:
    """Aportación de una sola cuenta: se fusiona entera, nunca intercalada."""
    errors: list[str] = field(default_factory=list)
    mails: list[MailSummary] = field(default_factory=list)

@dataclass
class ScanResult:
    errors: list[str] = field(default_factory=list)
    mails: list[MailSummary] = field(default_factory=list)

    def extend(self, scan: AccountScan) -> None:
        self.errors.extend(scan.errors)
        self.mails.extend(scan.mails)

    def to_dict(self) -> dict[str, Any]:
        return {
            "errors": list(self.errors),
            "mails": [m.to_dict() for m in self.mails],
        }
