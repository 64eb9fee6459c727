# domain/errors.py
from __future__ import annotations

AUTH_FAILED = "Authentication Failed"
HEADER_FETCH_FAILED = "imap_headerinfo failure"


def connection_failed(server: str) -> str:
    return f"Connection to {server} server failed"


class MailboxError(Exception):
    pass


class MailboxConnectionError(MailboxError):
    def __init__(self, server: str) -> None:
        super().__init__(connection_failed(server))
        self.server = server


class HeaderFetchError(MailboxError):
    def __init__(self, msgid: int, reason: str = "") -> None:
        super().__init__(reason or HEADER_FETCH_FAILED)
        self.msgid = msgid
