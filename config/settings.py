# config/settings.py
from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
import os
from dotenv import load_dotenv

load_dotenv()

@dataclass(frozen=True)
class Settings:
    # Secreto compartido (?p=...). Vacío = se deniega todo
    SCAN_SECRET: str = os.getenv("SCAN_SECRET", "")

    # Cuentas
    ACCOUNTS_FILE: str = os.getenv("ACCOUNTS_FILE", "accounts.json")

    # IMAP
    IMAP_TIMEOUT: float = float(os.getenv("IMAP_TIMEOUT", "30"))
    SCAN_WORKERS: int = int(os.getenv("SCAN_WORKERS", "4"))  # 1 = secuencial

    # HTTP
    HTTP_HOST: str = os.getenv("HTTP_HOST", "127.0.0.1")
    HTTP_PORT: int = int(os.getenv("HTTP_PORT", "8000"))

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # ───────── helpers ─────────
    def accounts_path(self) -> Path:
        return Path(self.ACCOUNTS_FILE).resolve()

    def imap_timeout(self) -> float | None:
        return self.IMAP_TIMEOUT if self.IMAP_TIMEOUT > 0 else None
