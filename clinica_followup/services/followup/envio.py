"""
Despacho de uma mensagem para um utente por um canal.

Partilhado pelo executor de sequencias e pela campanha em massa:
- converte excecoes do adaptador em DetalheEnvio falhado
- regista a tentativa no historico sem nunca falhar o envio
"""
import logging
from typing import Optional

from clinica_followup.services.followup.portas import (
    CanalEnvio,
    RegistoMensagens,
    ResultadoEnvio,
)
from clinica_followup.services.followup.types import Canal, ContactoUtente, DetalheEnvio

logger = logging.getLogger(__name__)

ERRO_DESCONHECIDO = "Erro desconhecido"


async def registar_envio(
    registo: Optional[RegistoMensagens],
    clinica_id: int,
    utente_id: int,
    canal: Canal,
    conteudo: str,
    resultado: ResultadoEnvio,
) -> None:
    """Regista no historico; falhas sao apenas logadas."""
    if registo is None:
        return
    try:
        await registo.registar(clinica_id, utente_id, canal, conteudo, resultado)
    except Exception as e:
        logger.warning(
            f"Erro ao registar mensagem {canal.value} do utente {utente_id}: {e}"
        )


async def despachar(
    adaptador: CanalEnvio,
    canal: Canal,
    destino: str,
    mensagem: str,
    utente: ContactoUtente,
    clinica_id: int,
    registo: Optional[RegistoMensagens] = None,
    assunto: Optional[str] = None,
) -> DetalheEnvio:
    """
    Envia a mensagem e devolve o detalhe da tentativa.

    Nunca levanta excecao: erros do adaptador viram sucesso=False.
    """
    try:
        resultado = await adaptador.enviar(destino, mensagem, assunto=assunto)
    except Exception as e:
        erro = str(e) or ERRO_DESCONHECIDO
        logger.error(
            f"Excecao ao enviar {canal.value} para utente {utente.utente_id}: {erro}"
        )
        resultado = ResultadoEnvio(success=False, error=erro, canal=canal)

    # Copia: o adaptador pode reaproveitar o mesmo objeto entre envios
    if not resultado.success and not resultado.error:
        resultado = ResultadoEnvio(
            success=False,
            message_id=resultado.message_id,
            error=ERRO_DESCONHECIDO,
            canal=resultado.canal or canal,
        )

    await registar_envio(registo, clinica_id, utente.utente_id, canal, mensagem, resultado)

    return DetalheEnvio(
        utente_id=utente.utente_id,
        utente_nome=utente.nome,
        canal=canal,
        sucesso=resultado.success,
        erro=None if resultado.success else resultado.error,
    )
