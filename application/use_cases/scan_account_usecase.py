# application/use_cases/scan_account_usecase.py
from __future__ import annotations
import logging
from typing import Callable

from domain.errors import HEADER_FETCH_FAILED, HeaderFetchError, MailboxConnectionError, connection_failed
from domain.models import Account, AccountScan
from application.services.address_summary import build_summary
from infrastructure.email.imap_client import IMAPInbox

logger = logging.getLogger(__name__)

InboxFactory = Callable[[Account], IMAPInbox]


class ScanAccountUseCase:
    def __init__(self, *, timeout: float | None = None, inbox_factory: InboxFactory | None = None) -> None:
        self.timeout = timeout
        self.inbox_factory = inbox_factory or self._default_inbox

    def _default_inbox(self, account: Account) -> IMAPInbox:
        return IMAPInbox(account, timeout=self.timeout)

    def process(self, account: Account) -> AccountScan:
        """
        Conecta, busca UNSEEN y resume cada mensaje. Nunca lanza:
          - fallo de conexión -> un error, ningún correo de esta cuenta
          - fallo de cabecera -> un error por mensaje, se sigue con el siguiente
        """
        scan = AccountScan()
        try:
            with self.inbox_factory(account) as inbox:
                uids = inbox.search_unseen()
                if not uids:
                    logger.info("Sin correos nuevos en %s", account.server)
                    return scan
                logger.info("%d correos sin leer en %s", len(uids), account.server)
                for uid in uids:
                    try:
                        header = inbox.fetch_header(uid)
                        scan.mails.append(build_summary(account, header))
                    except HeaderFetchError as exc:
                        logger.warning("Cabecera UID=%s en %s no disponible: %s", uid, account.server, exc)
                        scan.errors.append(HEADER_FETCH_FAILED)
                    except MailboxConnectionError:
                        raise
                    except Exception:
                        logger.exception("No se pudo resumir UID=%s en %s", uid, account.server)
                        scan.errors.append(HEADER_FETCH_FAILED)
        except MailboxConnectionError as exc:
            return AccountScan(errors=[str(exc)])
        except Exception:
            logger.exception("Error inesperado procesando %s", account.server)
            return AccountScan(errors=[connection_failed(account.server)])
        return scan
