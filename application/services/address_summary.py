# application/services/address_summary.py
# Funciones puras: remitentes/destinatarios -> cadenas cortas para mostrar
from __future__ import annotations
import re
from datetime import datetime
from email.errors import HeaderParseError
from email.header import decode_header
from typing import Sequence

from domain.models import Account, MailAddress, MailSummary, MessageHeader

DATE_FORMAT = "%d/%m/%Y %H:%M"
OTHERS_SUFFIX = " + others"

_IDNA_TOKEN = re.compile(r"[a-z0-9.-]*xn--[a-z0-9.-]*", re.IGNORECASE)


def format_address(addr: MailAddress) -> str:
    return f"{addr.mailbox}@{addr.host}"


def summarize_from(addresses: Sequence[MailAddress]) -> str:
    # Solo el primer remitente; el resto se ignora
    if not addresses:
        return ""
    return format_address(addresses[0])


def summarize_to(identity: str, addresses: Sequence[MailAddress]) -> str:
    """
    0 destinatarios -> "", 1 -> esa dirección.
    Con varios: "<identity> + others" si la cuenta figura entre ellos
    (comparación exacta), si no "<primero> + others".
    """
    dest = [format_address(a) for a in addresses]
    if not dest:
        return ""
    if len(dest) == 1:
        return dest[0]
    if identity in dest:
        return identity + OTHERS_SUFFIX
    return dest[0] + OTHERS_SUFFIX


def _decode_chunk(raw: bytes | str, charset: str | None) -> str:
    if isinstance(raw, str):
        return raw
    if charset is None:
        # decode_header devuelve el texto sin codificar en raw-unicode-escape
        return raw.decode("raw-unicode-escape", errors="replace")
    try:
        return raw.decode(charset, errors="replace")
    except LookupError:
        return raw.decode("utf-8", errors="replace")


def _decode_words(text: str) -> str:
    if not text:
        return ""
    try:
        chunks = decode_header(text)
    except HeaderParseError:
        return text
    return "".join(_decode_chunk(raw, charset) for raw, charset in chunks)


def _decode_idna(match: re.Match[str]) -> str:
    token = match.group(0)
    try:
        return token.encode("ascii").decode("idna")
    except UnicodeError:
        return token


def decode_subject(raw: str) -> str:
    return _decode_words(raw)


def decode_display(text: str) -> str:
    """Decodifica encoded-words y etiquetas IDNA (xn--) a texto UTF-8."""
    return _IDNA_TOKEN.sub(_decode_idna, _decode_words(text))


def format_date(dt: datetime) -> str:
    return dt.strftime(DATE_FORMAT)


def build_summary(account: Account, header: MessageHeader) -> MailSummary:
    # Sin fecha de cabecera usamos la de llegada
    date = header.date or datetime.fromtimestamp(header.arrival_timestamp)
    return MailSummary(
        subject=decode_subject(header.subject),
        from_=decode_display(summarize_from(header.from_addresses)),
        to=decode_display(summarize_to(account.login, header.to_addresses)),
        date=format_date(date),
        udate=header.arrival_timestamp,
        webmail=account.webmail,
    )
