"""
Repository de atividade dos utentes (Supabase).

A agregacao (ultima consulta, total de consultas, valor vitalicio,
faturas abertas) vive na funcao SQL ``followup_atividade_utentes``
(migrations/001_followup_atividade.sql).
"""
import logging
from typing import List, Optional, Sequence, Tuple

from clinica_followup.core.exceptions import RepositorioIndisponivelError
from clinica_followup.repositories.base import SupabaseRepository
from clinica_followup.services.followup.classificacao import intervalo_dias
from clinica_followup.services.followup.portas import RepositorioAtividade
from clinica_followup.services.followup.types import (
    ContactoUtente,
    FatosAtividade,
    StatusAtividade,
)
from clinica_followup.services.supabase import executar_query

logger = logging.getLogger(__name__)

RPC_ATIVIDADE = "followup_atividade_utentes"


def janela_dias(
    status_filtro: Sequence[StatusAtividade],
) -> Tuple[Optional[int], Optional[int]]:
    """
    Menor janela de dias que cobre todos os status pedidos.

    Status nao contiguos (ex: active + lost) cobrem o intervalo entre eles;
    o motor volta a filtrar pelo status calculado. Sem limite inferior quando
    o filtro inclui active (datas futuras contam como 0 dias).
    """
    intervalos = [intervalo_dias(s) for s in status_filtro]
    minimo = min(i[0] for i in intervalos)
    maximos = [i[1] for i in intervalos]
    maximo = None if any(m is None for m in maximos) else max(maximos)
    return (minimo or None), maximo


class SupabaseRepositorioAtividade(SupabaseRepository, RepositorioAtividade):
    """Fatos de atividade via RPC Supabase."""

    TABLE_UTENTES = "utentes"
    TABLE_CLINICAS = "clinicas"

    async def buscar_fatos_atividade(
        self,
        clinica_id: int,
        status_filtro: Optional[Sequence[StatusAtividade]] = None,
    ) -> List[FatosAtividade]:
        params = {"p_clinica_id": clinica_id, "p_dias_min": None, "p_dias_max": None}
        if status_filtro:
            params["p_dias_min"], params["p_dias_max"] = janela_dias(status_filtro)

        try:
            response = await executar_query(
                lambda: self.db.rpc(RPC_ATIVIDADE, params).execute()
            )
            return [FatosAtividade.from_db_row(row) for row in (response.data or [])]

        except Exception as e:
            logger.error(f"Erro ao buscar atividade da clinica {clinica_id}: {e}")
            raise RepositorioIndisponivelError(
                "Erro ao buscar fatos de atividade",
                details={"clinica_id": clinica_id},
                original_error=e,
            )

    async def buscar_utente(self, clinica_id: int, utente_id: int) -> Optional[ContactoUtente]:
        try:
            response = await executar_query(
                lambda: self.db.table(self.TABLE_UTENTES)
                .select("id, nome, email, telemovel")
                .eq("id", utente_id)
                .eq("clinica_id", clinica_id)
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.error(f"Erro ao buscar utente {utente_id}: {e}")
            raise RepositorioIndisponivelError(
                "Erro ao buscar utente",
                details={"clinica_id": clinica_id, "utente_id": utente_id},
                original_error=e,
            )

        if not response.data:
            return None
        return ContactoUtente.from_db_row(response.data[0])

    async def buscar_nome_clinica(self, clinica_id: int) -> Optional[str]:
        try:
            response = await executar_query(
                lambda: self.db.table(self.TABLE_CLINICAS)
                .select("nome")
                .eq("id", clinica_id)
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.warning(f"Erro ao buscar clinica {clinica_id}: {e}")
            return None

        if not response.data:
            return None
        return response.data[0].get("nome")
