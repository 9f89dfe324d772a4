"""
Executor de sequencias de follow-up.

Responsavel por:
- Disparar a primeira etapa da sequencia para um utente
- Personalizar a mensagem da etapa
- Converter falhas (contacto em falta, canal sem adaptador, excecoes) em
  detalhes falhados, sem abortar a sequencia
- Devolver as etapas seguintes como pendentes
"""

import logging
from typing import Mapping, Optional

from clinica_followup.core.exceptions import ContactoEmFaltaError
from clinica_followup.services.followup.envio import despachar, registar_envio
from clinica_followup.services.followup.personalizacao import personalizar
from clinica_followup.services.followup.portas import (
    CanalEnvio,
    RegistoMensagens,
    ResultadoEnvio,
)
from clinica_followup.services.followup.sequencias import etapas_pendentes
from clinica_followup.services.followup.types import (
    Canal,
    ContactoUtente,
    DetalheEnvio,
    EtapaSequencia,
    ResultadoFollowUp,
    Sequencia,
)

logger = logging.getLogger(__name__)

# Apenas a primeira etapa e executavel; as restantes aguardam agendamento
ORDEM_EXECUTAVEL = 1


class SequenciaExecutor:
    """Executa uma sequencia de follow-up para um utente."""

    def __init__(
        self,
        canais: Mapping[Canal, CanalEnvio],
        registo: Optional[RegistoMensagens] = None,
    ):
        """
        Args:
            canais: Adaptadores disponiveis por canal
            registo: Historico de mensagens (opcional)
        """
        self._canais = canais
        self._registo = registo

    async def executar(
        self,
        sequencia: Sequencia,
        utente: ContactoUtente,
        clinica_id: int,
        nome_clinica: str = "",
    ) -> ResultadoFollowUp:
        """
        Executa a sequencia.

        ``total`` conta apenas envios tentados (enviados + falhados), nao o
        numero de etapas da sequencia: esse fica em ``total_etapas``, e as
        etapas nao disparadas em ``etapas_pendentes``.

        Args:
            sequencia: Sequencia a executar
            utente: Contacto do utente
            clinica_id: ID da clinica
            nome_clinica: Nome usado em {clinica}

        Returns:
            ResultadoFollowUp com uma entrada por etapa disparada
        """
        resultado = ResultadoFollowUp(
            etapas_pendentes=etapas_pendentes(sequencia, apos_ordem=ORDEM_EXECUTAVEL),
            total_etapas=len(sequencia.etapas),
        )

        for etapa in sequencia.etapas:
            if etapa.ordem > ORDEM_EXECUTAVEL:
                continue

            detalhe = await self._executar_etapa(etapa, utente, clinica_id, nome_clinica)
            resultado.detalhes.append(detalhe)

        logger.info(
            f"Sequencia {sequencia.tipo.value} para utente {utente.utente_id}: "
            f"{resultado.enviados}/{resultado.total} enviados, "
            f"{len(resultado.etapas_pendentes)} etapas pendentes"
        )
        return resultado

    async def _executar_etapa(
        self,
        etapa: EtapaSequencia,
        utente: ContactoUtente,
        clinica_id: int,
        nome_clinica: str,
    ) -> DetalheEnvio:
        mensagem = personalizar(
            etapa.mensagem,
            {"nome": utente.nome, "clinica": nome_clinica},
        )

        # Sem contacto: tentativa falhada (a campanha em massa exclui o utente)
        try:
            destino = utente.exigir_contacto(etapa.canal)
        except ContactoEmFaltaError as e:
            logger.warning(
                f"Utente {utente.utente_id} sem contacto para {etapa.canal.value}"
            )
            return await self._falha(etapa.canal, utente, clinica_id, mensagem, e.message)

        adaptador = self._canais.get(etapa.canal)
        if adaptador is None:
            logger.warning(f"Canal {etapa.canal.value} sem adaptador configurado")
            return await self._falha(
                etapa.canal,
                utente,
                clinica_id,
                mensagem,
                f"Envio de {etapa.canal.value} não configurado",
            )

        assunto = personalizar(etapa.assunto, {"nome": utente.nome, "clinica": nome_clinica})
        return await despachar(
            adaptador,
            etapa.canal,
            destino,
            mensagem,
            utente,
            clinica_id,
            registo=self._registo,
            assunto=assunto,
        )

    async def _falha(
        self,
        canal: Canal,
        utente: ContactoUtente,
        clinica_id: int,
        mensagem: str,
        erro: str,
    ) -> DetalheEnvio:
        await registar_envio(
            self._registo,
            clinica_id,
            utente.utente_id,
            canal,
            mensagem,
            ResultadoEnvio(success=False, error=erro, canal=canal),
        )
        return DetalheEnvio(
            utente_id=utente.utente_id,
            utente_nome=utente.nome,
            canal=canal,
            sucesso=False,
            erro=erro,
        )
