"""
Campanha de reativacao em massa.

Responsavel por:
- Buscar utentes com os status alvo
- Filtrar por propensao minima a retorno
- Gerar mensagem por status e enviar pelo canal pedido
- Agregar resultados de todos os utentes
"""

import asyncio
import logging
from typing import List, Mapping, Optional, Sequence, Type

from clinica_followup.core.config import FollowupConfig, settings
from clinica_followup.core.exceptions import ConfigurationError, ContactoEmFaltaError
from clinica_followup.services.followup.atividade import AnalisadorAtividade
from clinica_followup.services.followup.envio import despachar
from clinica_followup.services.followup.personalizacao import (
    ASSUNTO_REATIVACAO,
    gerar_mensagem_reativacao,
)
from clinica_followup.services.followup.portas import CanalEnvio, RegistoMensagens
from clinica_followup.services.followup.types import (
    Canal,
    DetalheEnvio,
    ResultadoFollowUp,
    SnapshotAtividade,
    StatusAtividade,
    parse_canal,
    parse_status,
)

logger = logging.getLogger(__name__)


class CampanhaReativacao:
    """Executor de campanhas de reativacao."""

    def __init__(
        self,
        analisador: AnalisadorAtividade,
        canais: Mapping[Canal, CanalEnvio],
        registo: Optional[RegistoMensagens] = None,
        config: Type[FollowupConfig] = FollowupConfig,
        max_concorrencia: Optional[int] = None,
    ):
        """
        Args:
            analisador: Fonte dos snapshots de atividade
            canais: Adaptadores disponiveis por canal
            registo: Historico de mensagens (opcional)
            config: Limiar de elegibilidade
            max_concorrencia: Envios simultaneos (default: settings)
        """
        self._analisador = analisador
        self._canais = canais
        self._registo = registo
        self._config = config
        self._max_concorrencia = max(1, max_concorrencia or settings.FOLLOWUP_MAX_CONCORRENCIA)

    def selecionar_elegiveis(self, utentes: Sequence[SnapshotAtividade]) -> List[SnapshotAtividade]:
        """Mantem utentes com propensao >= limiar de elegibilidade."""
        return [
            u for u in utentes
            if u.propensao_retorno >= self._config.LIMIAR_ELEGIBILIDADE
        ]

    async def executar(
        self,
        clinica_id: int,
        status_alvo: Sequence[StatusAtividade],
        canal: Canal,
        nome_clinica: str = "",
    ) -> ResultadoFollowUp:
        """
        Executa a campanha.

        Utentes sem contacto para o canal nao contam para o total (nenhuma
        tentativa). Falhas de envio ficam no resultado, nunca interrompem o lote.

        Args:
            clinica_id: ID da clinica
            status_alvo: Status a incluir
            canal: Canal de envio
            nome_clinica: Nome usado em {clinica}

        Returns:
            ResultadoFollowUp agregado

        Raises:
            ValidationError: Canal ou status invalidos
            ConfigurationError: Canal sem adaptador
            RepositorioIndisponivelError: Falha ao buscar utentes
        """
        canal = parse_canal(canal)
        status_alvo = [parse_status(s) for s in status_alvo]

        adaptador = self._canais.get(canal)
        if adaptador is None:
            raise ConfigurationError(
                f"Canal {canal.value} sem adaptador configurado",
                details={"canal": canal.value},
            )

        logger.info(
            f"Iniciando campanha de reativacao na clinica {clinica_id} "
            f"(status={[s.value for s in status_alvo]}, canal={canal.value})"
        )

        utentes = await self._analisador.identificar_utentes(clinica_id, status_alvo)
        elegiveis = self.selecionar_elegiveis(utentes)

        semaforo = asyncio.Semaphore(self._max_concorrencia)

        async def processar(utente: SnapshotAtividade) -> Optional[DetalheEnvio]:
            async with semaforo:
                return await self._enviar_para_utente(
                    adaptador, canal, utente, clinica_id, nome_clinica
                )

        # gather preserva a ordem de entrada
        detalhes = await asyncio.gather(*(processar(u) for u in elegiveis))

        resultado = ResultadoFollowUp(detalhes=[d for d in detalhes if d is not None])

        logger.info(
            f"Campanha de reativacao clinica {clinica_id}: "
            f"{resultado.enviados}/{resultado.total} enviados "
            f"(elegiveis={len(elegiveis)}, identificados={len(utentes)})",
            extra={
                "extra_fields": {
                    "clinica_id": clinica_id,
                    "canal": canal.value,
                    "identificados": len(utentes),
                    "elegiveis": len(elegiveis),
                    "total": resultado.total,
                    "enviados": resultado.enviados,
                    "falhados": resultado.falhados,
                }
            },
        )
        return resultado

    async def _enviar_para_utente(
        self,
        adaptador: CanalEnvio,
        canal: Canal,
        utente: SnapshotAtividade,
        clinica_id: int,
        nome_clinica: str,
    ) -> Optional[DetalheEnvio]:
        """Envia para um utente; None quando o utente e excluido."""
        contacto = utente.contacto
        try:
            destino = contacto.exigir_contacto(canal)
        except ContactoEmFaltaError:
            logger.debug(f"Utente {utente.utente_id} sem contacto {canal.value}, excluido")
            return None

        try:
            mensagem = gerar_mensagem_reativacao(utente, nome_clinica)
            return await despachar(
                adaptador,
                canal,
                destino,
                mensagem,
                contacto,
                clinica_id,
                registo=self._registo,
                assunto=ASSUNTO_REATIVACAO,
            )
        except Exception as e:
            logger.error(f"Erro ao processar utente {utente.utente_id} na campanha: {e}")
            return DetalheEnvio(
                utente_id=utente.utente_id,
                utente_nome=utente.nome,
                canal=canal,
                sucesso=False,
                erro=str(e) or "Erro desconhecido",
            )
