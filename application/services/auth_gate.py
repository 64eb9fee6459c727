# application/services/auth_gate.py
from __future__ import annotations
import hmac
import logging
from typing import Any

logger = logging.getLogger(__name__)


def check_token(token: Any, secret: str) -> bool:
    """
    Comparación exacta (tiempo constante) del token recibido contra el secreto.
    Token ausente, no-str o secreto vacío -> denegado.
    """
    if not secret or not isinstance(token, str):
        logger.warning("Token ausente o secreto no configurado: acceso denegado")
        return False
    if not hmac.compare_digest(token.encode("utf-8"), secret.encode("utf-8")):
        logger.warning("Token incorrecto: acceso denegado")
        return False
    return True
