# interface_adapters/controllers/http_controller.py
from __future__ import annotations
import logging
from typing import List, Optional, Sequence

from fastapi import FastAPI, Header, Query, Response
from pydantic import BaseModel, ConfigDict, Field

from config.settings import Settings
from domain.models import Account, MailSummary, ScanResult
from application.use_cases.scan_account_usecase import ScanAccountUseCase
from application.use_cases.scan_mailboxes_usecase import ScanMailboxesUseCase

logger = logging.getLogger(__name__)

# ───────────────────────── modelos de respuesta ─────────────────────────

class MailOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    subject: str
    from_: str = Field(alias="from")
    to: str
    date: str
    udate: int
    webmail: str

    @classmethod
    def from_summary(cls, mail: MailSummary) -> "MailOut":
        return cls.model_validate(mail.to_dict())


class ScanOut(BaseModel):
    errors: List[str]
    mails: List[MailOut]

    @classmethod
    def from_result(cls, result: ScanResult) -> "ScanOut":
        return cls(errors=list(result.errors), mails=[MailOut.from_summary(m) for m in result.mails])


# ───────────────────────── app ─────────────────────────

def create_app(
    settings: Settings,
    accounts: Sequence[Account],
    usecase: Optional[ScanMailboxesUseCase] = None,
) -> FastAPI:
    uc = usecase or ScanMailboxesUseCase(
        accounts=accounts,
        secret=settings.SCAN_SECRET,
        account_scanner=ScanAccountUseCase(timeout=settings.imap_timeout()),
        max_workers=settings.SCAN_WORKERS,
    )
    app = FastAPI(title="Unread mail digest", docs_url=None, redoc_url=None)

    # Handlers síncronos: FastAPI los ejecuta en su threadpool (IMAP bloquea)
    @app.get("/", response_model=ScanOut)
    def scan(
        response: Response,
        token: Optional[str] = Query(default=None, alias="p"),
        origin: Optional[str] = Header(default=None),
    ) -> ScanOut:
        logger.debug("Petición de escaneo (origin=%s)", origin or "-")
        if origin:
            response.headers["Access-Control-Allow-Origin"] = origin
        return ScanOut.from_result(uc.run(token))

    return app
