# application/use_cases/scan_mailboxes_usecase.py
from __future__ import annotations
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Sequence

from domain.errors import AUTH_FAILED
from domain.models import Account, AccountScan, ScanResult
from application.services.auth_gate import check_token
from application.use_cases.scan_account_usecase import ScanAccountUseCase

logger = logging.getLogger(__name__)


class ScanMailboxesUseCase:
    """
    Punto de entrada del núcleo: token -> ScanResult.
    Con max_workers > 1 las cuentas se procesan en paralelo, pero el
    resultado se fusiona siempre en el orden configurado.
    """
    def __init__(
        self,
        *,
        accounts: Sequence[Account],
        secret: str,
        account_scanner: ScanAccountUseCase,
        max_workers: int = 1,
    ) -> None:
        self.accounts = list(accounts)
        self.secret = secret
        self.account_scanner = account_scanner
        self.max_workers = max(1, int(max_workers))

    def _scan_all(self) -> list[AccountScan]:
        if self.max_workers == 1 or len(self.accounts) <= 1:
            return [self.account_scanner.process(acc) for acc in self.accounts]
        workers = min(self.max_workers, len(self.accounts))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="scan") as pool:
            # map conserva el orden de entrada, no el de finalización
            return list(pool.map(self.account_scanner.process, self.accounts))

    def run(self, token: Any) -> ScanResult:
        if not check_token(token, self.secret):
            return ScanResult(errors=[AUTH_FAILED])

        result = ScanResult()
        for scan in self._scan_all():
            result.extend(scan)
        logger.info(
            "Escaneo completado: %d cuentas, %d correos, %d errores",
            len(self.accounts), len(result.mails), len(result.errors),
        )
        return result
