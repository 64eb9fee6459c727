from __future__ import annotations

import socket
from datetime import datetime, timedelta, timezone

from imapclient.exceptions import IMAPClientAbortError, IMAPClientError, LoginError
from imapclient.response_types import Address, Envelope

from domain.models import Account
from infrastructure.email.imap_client import IMAPInbox

CET = timezone(timedelta(hours=1))


def make_account(server: str = "imap.example.test", login: str = "me@example.test", **kwargs) -> Account:
    return Account(
        server=server,
        login=login,
        password="secret-password",
        webmail=kwargs.pop("webmail", f"https://{server}/webmail"),
        **kwargs,
    )


def make_address(mailbox: str, host: str | None) -> Address:
    return Address(
        name=None,
        route=None,
        mailbox=mailbox.encode() if mailbox is not None else None,
        host=host.encode() if host is not None else None,
    )


def make_envelope(
    *,
    subject: bytes | None = b"Hello",
    from_: list[tuple[str, str]] | None = None,
    to: list[tuple[str, str]] | None = None,
    date: datetime | None = datetime(2026, 2, 16, 10, 5, tzinfo=CET),
) -> Envelope:
    from_addrs = tuple(make_address(m, h) for m, h in (from_ or [("sender", "example.test")]))
    to_addrs = tuple(make_address(m, h) for m, h in to) if to is not None else None
    return Envelope(
        date=date,
        subject=subject,
        from_=from_addrs,
        sender=from_addrs,
        reply_to=from_addrs,
        to=to_addrs,
        cc=None,
        bcc=None,
        in_reply_to=None,
        message_id=b"<msg@example.test>",
    )


class FakeMailServer:
    """In-memory stand-in for one IMAP server; `client` mimics the IMAPClient constructor."""

    def __init__(
        self,
        messages: dict[int, tuple[Envelope, datetime | None]] | None = None,
        *,
        connect_error: Exception | None = None,
        login_fails: bool = False,
        select_error: Exception | None = None,
        search_error: Exception | None = None,
        fetch_errors: dict[int, Exception] | None = None,
        missing: set[int] | None = None,
        logout_error: Exception | None = None,
    ) -> None:
        self.messages = dict(messages or {})
        self.connect_error = connect_error
        self.login_fails = login_fails
        self.select_error = select_error
        self.search_error = search_error
        self.fetch_errors = fetch_errors or {}
        self.missing = missing or set()
        self.logout_error = logout_error
        self.clients: list[FakeIMAPClient] = []

    def client(self, host: str, port: int | None = None, ssl: bool = True, timeout: float | None = None) -> "FakeIMAPClient":
        if self.connect_error is not None:
            raise self.connect_error
        client = FakeIMAPClient(self, host, port, ssl, timeout)
        self.clients.append(client)
        return client

    def inbox(self, account: Account) -> IMAPInbox:
        return IMAPInbox(account, timeout=5, client_factory=self.client)


class FakeIMAPClient:
    def __init__(self, server: FakeMailServer, host: str, port: int | None, ssl: bool, timeout: float | None) -> None:
        self.server = server
        self.host = host
        self.port = port
        self.ssl = ssl
        self.timeout = timeout
        self.normalise_times = True
        self.selected: tuple[str, bool] | None = None
        self.fetch_calls: list[tuple[list[int], list[str]]] = []
        self.flag_changes: list[object] = []
        self.logged_out = False
        self.shut_down = False

    def login(self, username: str, password: str):
        if self.server.login_fails:
            raise LoginError("[AUTHENTICATIONFAILED] Invalid credentials")
        return b"LOGIN completed"

    def select_folder(self, folder: str, readonly: bool = False):
        if self.server.select_error is not None:
            raise self.server.select_error
        self.selected = (folder, readonly)
        return {b"EXISTS": len(self.server.messages)}

    def search(self, criteria):
        if self.server.search_error is not None:
            raise self.server.search_error
        # Servers are not required to answer in order
        return sorted(self.server.messages, reverse=True)

    def fetch(self, messages, data):
        self.fetch_calls.append((list(messages), list(data)))
        uid = messages[0]
        if uid in self.server.fetch_errors:
            raise self.server.fetch_errors[uid]
        if uid in self.server.missing:
            return {}
        envelope, internal = self.server.messages[uid]
        return {uid: {b"SEQ": uid, b"ENVELOPE": envelope, b"INTERNALDATE": internal}}

    def add_flags(self, messages, flags, silent=False):
        self.flag_changes.append((messages, flags))

    def logout(self):
        if self.server.logout_error is not None:
            raise self.server.logout_error
        self.logged_out = True
        return b"BYE"

    def shutdown(self):
        self.shut_down = True


def fetch_failure() -> IMAPClientError:
    return IMAPClientError("FETCH command error: BAD [b'Invalid messageset']")


def socket_timeout() -> socket.timeout:
    return socket.timeout("timed out")


def connection_dropped() -> IMAPClientAbortError:
    return IMAPClientAbortError("socket error: EOF")
