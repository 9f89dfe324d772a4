"""
Cliente Supabase para operacoes de banco de dados.
"""
import asyncio
import logging
from functools import lru_cache

from supabase import Client, create_client

from clinica_followup.core.config import settings
from clinica_followup.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


@lru_cache()
def get_supabase_client() -> Client:
    """
    Retorna cliente Supabase cacheado.
    Usa service key para acesso completo.
    """
    if not settings.SUPABASE_URL or not settings.SUPABASE_SERVICE_KEY:
        raise ConfigurationError("SUPABASE_URL e SUPABASE_SERVICE_KEY sao obrigatorios")

    return create_client(
        settings.SUPABASE_URL,
        settings.SUPABASE_SERVICE_KEY
    )


async def executar_query(func):
    """
    Executa chamada sincrona do Supabase fora do event loop.

    Args:
        func: Funcao sem argumentos que chama .execute()

    Returns:
        Resultado da funcao
    """
    return await asyncio.to_thread(func)
