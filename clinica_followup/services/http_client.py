"""
Cliente HTTP partilhado pelos canais de envio (Meta, Twilio, Resend).

Um unico AsyncClient por processo: as campanhas disparam muitos envios
seguidos para os mesmos hosts, entao as conexoes sao reaproveitadas.
Timeouts e limite de conexoes vem de settings.
"""

import logging
from typing import Optional

import httpx

from clinica_followup.core.config import settings

logger = logging.getLogger(__name__)

USER_AGENT = "Clinica-Followup/1.0"

_client: Optional[httpx.AsyncClient] = None


def criar_http_client(
    timeout_segundos: Optional[float] = None,
    max_conexoes: Optional[int] = None,
) -> httpx.AsyncClient:
    """
    Cria um AsyncClient com HTTP/2 e pooling.

    Args:
        timeout_segundos: Timeout de leitura/escrita (default: settings)
        max_conexoes: Conexoes simultaneas (default: settings)
    """
    timeout_segundos = timeout_segundos or settings.HTTP_TIMEOUT_SEGUNDOS
    max_conexoes = max_conexoes or settings.HTTP_MAX_CONEXOES

    return httpx.AsyncClient(
        timeout=httpx.Timeout(timeout_segundos, connect=10.0, pool=5.0),
        limits=httpx.Limits(
            max_connections=max_conexoes,
            max_keepalive_connections=max(1, max_conexoes // 5),
            keepalive_expiry=30.0,
        ),
        http2=True,
        headers={"User-Agent": USER_AGENT},
    )


async def get_http_client() -> httpx.AsyncClient:
    """Retorna o cliente partilhado, criando-o na primeira chamada."""
    global _client
    if _client is None or _client.is_closed:
        _client = criar_http_client()
        logger.info(
            f"HTTP client criado (timeout={settings.HTTP_TIMEOUT_SEGUNDOS}s, "
            f"max_conexoes={settings.HTTP_MAX_CONEXOES})"
        )
    return _client


async def close_http_client() -> None:
    """Fecha o cliente partilhado. Chamar no shutdown do processo."""
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None
        logger.info("HTTP client fechado")
