# config/accounts.py
# Carga de cuentas: JSON con una lista (o {"accounts": [...]}) en el orden de escaneo
from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Any

from domain.models import Account

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("server", "login", "password")


def _str_field(entry: dict[str, Any], name: str, source: str, *, required: bool) -> str:
    value = entry.get(name, "")
    if not isinstance(value, str):
        raise ValueError(f"{source}.{name} debe ser texto")
    value = value.strip()
    if required and not value:
        raise ValueError(f"{source}.{name} es obligatorio")
    return value


def parse_account(entry: Any, source: str) -> Account:
    if not isinstance(entry, dict):
        raise ValueError(f"{source} debe ser un objeto")

    server, login, password = (_str_field(entry, f, source, required=True) for f in REQUIRED_FIELDS)
    webmail = _str_field(entry, "webmail", source, required=False)
    folder = _str_field(entry, "folder", source, required=False) or "INBOX"

    port = entry.get("port", 993)
    if isinstance(port, bool) or not isinstance(port, int) or not 0 < port < 65536:
        raise ValueError(f"{source}.port debe ser un entero entre 1 y 65535")

    ssl = entry.get("ssl", True)
    if not isinstance(ssl, bool):
        raise ValueError(f"{source}.ssl debe ser true/false")

    return Account(
        server=server,
        login=login,
        password=password,
        webmail=webmail,
        port=port,
        ssl=ssl,
        folder=folder,
    )


def load_accounts(path: Path) -> list[Account]:
    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    entries = raw.get("accounts") if isinstance(raw, dict) else raw
    if not isinstance(entries, list):
        raise ValueError(f"{path}: se esperaba una lista de cuentas")

    accounts = [parse_account(e, f"accounts[{i}]") for i, e in enumerate(entries)]
    logger.info("Cargadas %d cuentas desde %s", len(accounts), path)
    return accounts
