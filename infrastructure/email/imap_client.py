# infrastructure/email/imap_client.py
from __future__ import annotations
import logging
from typing import Any, Callable, Iterable
from imapclient import IMAPClient
from imapclient.exceptions import IMAPClientAbortError, IMAPClientError
from domain.errors import HeaderFetchError, MailboxConnectionError
from domain.models import Account, MailAddress, MessageHeader

logger = logging.getLogger(__name__)

FETCH_ITEMS = ["ENVELOPE", "INTERNALDATE"]


def _text(value: bytes | str | None) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value


def _addresses(raw: Iterable[Any] | None) -> list[MailAddress]:
    # Las entradas sin host son marcadores de grupo (RFC 2822), no direcciones
    out: list[MailAddress] = []
    for addr in raw or ():
        if addr.mailbox is None or addr.host is None:
            continue
        out.append(MailAddress(mailbox=_text(addr.mailbox), host=_text(addr.host)))
    return out


class IMAPInbox:
    """
    Sesión IMAP de una cuenta, solo lectura.
    Uso:
        with IMAPInbox(account, timeout=30) as inbox:
            for uid in inbox.search_unseen():
                header = inbox.fetch_header(uid)
    """
    def __init__(
        self,
        account: Account,
        timeout: float | None = None,
        client_factory: Callable[..., Any] = IMAPClient,
    ) -> None:
        self.account = account
        self.timeout = timeout
        self.client_factory = client_factory
        self.client: Any = None

    def __enter__(self) -> "IMAPInbox":
        acc = self.account
        try:
            self.client = self.client_factory(acc.server, port=acc.port, ssl=acc.ssl, timeout=self.timeout)
            # Mantener la zona horaria original de la cabecera
            self.client.normalise_times = False
            self.client.login(acc.login, acc.password)
            self.client.select_folder(acc.folder, readonly=True)
        except (IMAPClientError, OSError) as exc:
            logger.warning("Conexión a %s fallida (%s): %s", acc.server, acc.login, exc)
            self._shutdown()
            raise MailboxConnectionError(acc.server) from exc
        except Exception:
            self._shutdown()
            raise
        logger.debug("Conectado a %s como %s", acc.server, acc.login)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            if self.client:
                self.client.logout()
        except (IMAPClientError, OSError) as err:
            logger.warning("Error cerrando IMAP %s: %s", self.account.server, err)
        finally:
            self.client = None

    def _shutdown(self) -> None:
        if not self.client:
            return
        try:
            self.client.shutdown()
        except (IMAPClientError, OSError):
            logger.debug("shutdown fallido en %s", self.account.server, exc_info=True)
        finally:
            self.client = None

    def search_unseen(self) -> list[int]:
        assert self.client
        try:
            uids = self.client.search(["UNSEEN"])
        except (IMAPClientAbortError, OSError) as exc:
            raise MailboxConnectionError(self.account.server) from exc
        except IMAPClientError as exc:
            # Mismo comportamiento que un SEARCH vacío
            logger.warning("SEARCH UNSEEN falló en %s: %s", self.account.server, exc)
            return []
        return sorted(uids)

    def fetch_header(self, msgid: int) -> MessageHeader:
        """
        ENVELOPE + INTERNALDATE de un mensaje. Ninguno de los dos marca \\Seen.
        Error de protocolo -> HeaderFetchError; error de socket (timeout,
        conexión perdida, abort) -> MailboxConnectionError, la sesión ya no sirve.
        """
        assert self.client
        try:
            resp = self.client.fetch([msgid], FETCH_ITEMS)
        except (IMAPClientAbortError, OSError) as exc:
            raise MailboxConnectionError(self.account.server) from exc
        except IMAPClientError as exc:
            raise HeaderFetchError(msgid, str(exc)) from exc

        data = resp.get(msgid) or {}
        envelope = data.get(b"ENVELOPE")
        if envelope is None:
            raise HeaderFetchError(msgid, "respuesta FETCH sin ENVELOPE")

        internal = data.get(b"INTERNALDATE")
        return MessageHeader(
            subject=_text(envelope.subject),
            from_addresses=_addresses(envelope.from_),
            to_addresses=_addresses(envelope.to),
            date=envelope.date,
            arrival_timestamp=int(internal.timestamp()) if internal else 0,
        )
