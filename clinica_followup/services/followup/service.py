"""
Servico de Follow-up Inteligente.

Ponto de entrada dos casos de uso do motor de reengajamento:
- identificar_utentes_inativos
- executar_sequencia
- executar_campanha_reativacao
- obter_estatisticas

Sem estado global: repositorio, canais e historico sao injetados.
"""

import logging
from datetime import datetime
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Type, Union

from clinica_followup.core.config import FollowupConfig, settings
from clinica_followup.core.exceptions import (
    FollowupException,
    RepositorioIndisponivelError,
    UtenteNaoEncontradoError,
)
from clinica_followup.core.timezone import agora_utc
from clinica_followup.services.followup.atividade import AnalisadorAtividade
from clinica_followup.services.followup.campanha import CampanhaReativacao
from clinica_followup.services.followup.executor import SequenciaExecutor
from clinica_followup.services.followup.portas import (
    CanalEnvio,
    RegistoMensagens,
    RepositorioAtividade,
)
from clinica_followup.services.followup.sequencias import obter_sequencia
from clinica_followup.services.followup.types import (
    ORDEM_STATUS,
    Canal,
    ContactoUtente,
    ResultadoFollowUp,
    SnapshotAtividade,
    StatusAtividade,
    TipoSequencia,
)

logger = logging.getLogger(__name__)


class FollowUpService:
    """
    Servico de follow-up.

    Exceções lançadas:
        - ValidationError: dados de entrada inválidos
        - SequenciaNaoEncontradaError: gatilho de sequencia desconhecido
        - UtenteNaoEncontradoError: utente inexistente na clinica
        - RepositorioIndisponivelError: falha no repositorio
        - ConfigurationError: canal pedido sem adaptador
    """

    def __init__(
        self,
        repositorio: RepositorioAtividade,
        canais: Mapping[Canal, CanalEnvio],
        registo: Optional[RegistoMensagens] = None,
        config: Type[FollowupConfig] = FollowupConfig,
        relogio: Callable[[], datetime] = agora_utc,
        max_concorrencia: Optional[int] = None,
        nome_clinica_padrao: Optional[str] = None,
    ):
        self._repositorio = repositorio
        self._config = config
        self._nome_clinica_padrao = nome_clinica_padrao or settings.NOME_CLINICA_PADRAO

        self._analisador = AnalisadorAtividade(repositorio, config=config, relogio=relogio)
        self._executor = SequenciaExecutor(canais, registo=registo)
        self._campanha = CampanhaReativacao(
            self._analisador,
            canais,
            registo=registo,
            config=config,
            max_concorrencia=max_concorrencia,
        )

    async def identificar_utentes_inativos(
        self,
        clinica_id: int,
        status_filtro: Optional[Sequence[Union[StatusAtividade, str]]] = None,
    ) -> List[SnapshotAtividade]:
        """
        Identifica utentes e calcula status, propensao e recomendacao.

        Args:
            clinica_id: ID da clinica
            status_filtro: Status a incluir (default: todos)

        Returns:
            Lista de SnapshotAtividade
        """
        return await self._analisador.identificar_utentes(clinica_id, status_filtro)

    async def executar_sequencia(
        self,
        clinica_id: int,
        utente_id: int,
        tipo_sequencia: Union[TipoSequencia, str],
    ) -> ResultadoFollowUp:
        """
        Executa sequencia de follow-up para um utente.

        A sequencia e resolvida antes de qualquer acesso ao repositorio ou envio.

        Raises:
            SequenciaNaoEncontradaError: Tipo desconhecido
            UtenteNaoEncontradoError: Utente inexistente
        """
        sequencia = obter_sequencia(tipo_sequencia)

        utente = await self._buscar_utente(clinica_id, utente_id)
        nome_clinica = await self._nome_clinica(clinica_id)

        return await self._executor.executar(sequencia, utente, clinica_id, nome_clinica)

    async def executar_campanha_reativacao(
        self,
        clinica_id: int,
        status_alvo: Sequence[Union[StatusAtividade, str]],
        canal: Union[Canal, str],
    ) -> ResultadoFollowUp:
        """
        Executa campanha de reativacao em massa.

        Returns:
            ResultadoFollowUp agregado (mesmo que todos falhem)
        """
        nome_clinica = await self._nome_clinica(clinica_id)
        return await self._campanha.executar(clinica_id, status_alvo, canal, nome_clinica)

    async def obter_estatisticas(self, clinica_id: int) -> Dict:
        """
        Estatisticas de engajamento da clinica.

        Returns:
            Dict com total, por_status, por_propensao (alta/media/baixa)
            e valor_em_risco (valor vitalicio dos utentes nao ativos)
        """
        utentes = await self._analisador.identificar_utentes(clinica_id)

        por_status = {status.value: 0 for status in ORDEM_STATUS}
        por_propensao = {"alta": 0, "media": 0, "baixa": 0}
        valor_em_risco = 0.0

        for utente in utentes:
            por_status[utente.status.value] += 1

            if utente.propensao_retorno >= self._config.FAIXA_ALTA:
                por_propensao["alta"] += 1
            elif utente.propensao_retorno >= self._config.FAIXA_MEDIA:
                por_propensao["media"] += 1
            else:
                por_propensao["baixa"] += 1

            if utente.status != StatusAtividade.ACTIVE:
                valor_em_risco += utente.valor_vitalicio

        return {
            "total": len(utentes),
            "por_status": por_status,
            "por_propensao": por_propensao,
            "valor_em_risco": round(valor_em_risco, 2),
        }

    async def _buscar_utente(self, clinica_id: int, utente_id: int) -> ContactoUtente:
        try:
            utente = await self._repositorio.buscar_utente(clinica_id, utente_id)
        except FollowupException:
            raise
        except Exception as e:
            logger.error(f"Erro ao buscar utente {utente_id}: {e}")
            raise RepositorioIndisponivelError(
                "Repositorio de utentes indisponivel",
                details={"clinica_id": clinica_id, "utente_id": utente_id},
                original_error=e,
            )

        if utente is None:
            raise UtenteNaoEncontradoError(utente_id)
        return utente

    async def _nome_clinica(self, clinica_id: int) -> str:
        """Nome da clinica; usa o nome padrao se o repositorio falhar."""
        try:
            nome = await self._repositorio.buscar_nome_clinica(clinica_id)
        except Exception as e:
            logger.warning(f"Erro ao buscar nome da clinica {clinica_id}: {e}")
            nome = None
        return nome or self._nome_clinica_padrao


def criar_followup_service(**kwargs) -> FollowUpService:
    """
    Cria o servico com as implementacoes de producao (Supabase + canais HTTP).

    Canais sem credenciais ficam de fora. Os canais partilham o cliente de
    clinica_followup.services.http_client; no shutdown do processo chamar
    ``await close_http_client()``.
    """
    from clinica_followup.repositories.atividade import SupabaseRepositorioAtividade
    from clinica_followup.repositories.mensagens import SupabaseRegistoMensagens
    from clinica_followup.services.canais import criar_canais

    return FollowUpService(
        repositorio=SupabaseRepositorioAtividade(),
        canais=criar_canais(),
        registo=SupabaseRegistoMensagens(),
        **kwargs,
    )
