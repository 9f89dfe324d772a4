"""
Historico de mensagens enviadas aos utentes (tabela mensagens_utente).
"""
import logging

from clinica_followup.core.timezone import agora_utc
from clinica_followup.repositories.base import SupabaseRepository
from clinica_followup.services.followup.portas import RegistoMensagens, ResultadoEnvio
from clinica_followup.services.followup.types import Canal
from clinica_followup.services.supabase import executar_query

logger = logging.getLogger(__name__)

ESTADO_ENVIADA = "enviada"
ESTADO_FALHADA = "falhada"


class SupabaseRegistoMensagens(SupabaseRepository, RegistoMensagens):
    """Insere uma linha por tentativa de envio."""

    TABLE = "mensagens_utente"

    async def registar(
        self,
        clinica_id: int,
        utente_id: int,
        canal: Canal,
        conteudo: str,
        resultado: ResultadoEnvio,
    ) -> None:
        linha = {
            "clinica_id": clinica_id,
            "utente_id": utente_id,
            "canal": Canal(canal).value,
            "tipo": "followup",
            "conteudo": conteudo,
            "estado": ESTADO_ENVIADA if resultado.success else ESTADO_FALHADA,
            "referencia": resultado.message_id,
            "erro": resultado.error,
            "created_at": agora_utc().isoformat(),
        }

        await executar_query(lambda: self.db.table(self.TABLE).insert(linha).execute())
        logger.debug(f"Mensagem {linha['estado']} registada para utente {utente_id}")
