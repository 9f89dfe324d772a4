"""
Identificacao de utentes por atividade.

Transforma os fatos do repositorio em SnapshotAtividade:
fatos -> status -> propensao -> recomendacao.
"""
import logging
from datetime import datetime
from typing import Callable, List, Optional, Sequence, Type

from clinica_followup.core.config import FollowupConfig
from clinica_followup.core.exceptions import FollowupException, RepositorioIndisponivelError
from clinica_followup.core.timezone import agora_utc, dias_entre
from clinica_followup.services.followup.classificacao import classificar_status
from clinica_followup.services.followup.portas import RepositorioAtividade
from clinica_followup.services.followup.propensao import calcular_propensao
from clinica_followup.services.followup.recomendacao import gerar_recomendacao
from clinica_followup.services.followup.types import (
    FatosAtividade,
    SnapshotAtividade,
    StatusAtividade,
    parse_status,
)

logger = logging.getLogger(__name__)


def construir_snapshot(
    fatos: FatosAtividade,
    agora: datetime,
    config: Type[FollowupConfig] = FollowupConfig,
) -> Optional[SnapshotAtividade]:
    """
    Calcula o snapshot de um utente.

    Args:
        fatos: Fatos agregados do repositorio
        agora: Instante de referencia
        config: Tabelas de classificacao e score

    Returns:
        SnapshotAtividade, ou None se o utente nao tem consultas
    """
    if fatos.ultima_consulta is None:
        return None

    # Consulta marcada para hoje ou futuro conta como 0 dias
    dias = max(0, dias_entre(fatos.ultima_consulta, agora))

    status = classificar_status(dias, config)
    propensao = calcular_propensao(
        dias,
        fatos.total_consultas,
        fatos.valor_vitalicio,
        fatos.faturas_abertas,
        config,
    )
    recomendacao = gerar_recomendacao(
        status,
        propensao,
        fatos.total_consultas,
        fatos.faturas_abertas,
        config,
    )

    return SnapshotAtividade(
        utente_id=fatos.utente_id,
        clinica_id=fatos.clinica_id,
        nome=fatos.nome,
        email=fatos.email,
        telemovel=fatos.telemovel,
        ultima_consulta=fatos.ultima_consulta,
        dias_desde_ultima_consulta=dias,
        status=status,
        total_consultas=fatos.total_consultas,
        valor_vitalicio=fatos.valor_vitalicio,
        faturas_abertas=fatos.faturas_abertas,
        propensao_retorno=propensao,
        recomendacao=recomendacao,
    )


class AnalisadorAtividade:
    """Busca fatos no repositorio e calcula snapshots."""

    def __init__(
        self,
        repositorio: RepositorioAtividade,
        config: Type[FollowupConfig] = FollowupConfig,
        relogio: Callable[[], datetime] = agora_utc,
    ):
        self._repositorio = repositorio
        self._config = config
        self._relogio = relogio

    async def identificar_utentes(
        self,
        clinica_id: int,
        status_filtro: Optional[Sequence[StatusAtividade]] = None,
    ) -> List[SnapshotAtividade]:
        """
        Lista snapshots dos utentes da clinica.

        Args:
            clinica_id: ID da clinica
            status_filtro: Apenas utentes com estes status calculados

        Returns:
            Snapshots na ordem do repositorio

        Raises:
            ValidationError: Status invalido no filtro
            RepositorioIndisponivelError: Falha no repositorio
        """
        filtro = None
        if status_filtro is not None:
            filtro = [parse_status(s) for s in status_filtro]

        try:
            linhas = await self._repositorio.buscar_fatos_atividade(clinica_id, filtro)
        except FollowupException:
            raise
        except Exception as e:
            logger.error(f"Erro ao buscar fatos de atividade da clinica {clinica_id}: {e}")
            raise RepositorioIndisponivelError(
                "Repositorio de atividade indisponivel",
                details={"clinica_id": clinica_id},
                original_error=e,
            )

        agora = self._relogio()
        snapshots = []
        for fatos in linhas:
            snapshot = construir_snapshot(fatos, agora, self._config)
            if snapshot is None:
                continue
            if filtro is not None and snapshot.status not in filtro:
                continue
            snapshots.append(snapshot)

        logger.debug(
            f"Clinica {clinica_id}: {len(snapshots)}/{len(linhas)} utentes apos filtro"
        )
        return snapshots
