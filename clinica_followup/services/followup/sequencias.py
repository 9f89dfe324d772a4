"""
Catalogo de sequencias de follow-up predefinidas.

Somente leitura, indexado por TipoSequencia.
"""
from types import MappingProxyType
from typing import List, Mapping, Union

from clinica_followup.core.exceptions import SequenciaNaoEncontradaError
from clinica_followup.services.followup.types import (
    Canal,
    EtapaSequencia,
    Sequencia,
    TipoSequencia,
)

_SEQUENCIAS = (
    Sequencia(
        tipo=TipoSequencia.POST_TREATMENT,
        nome="Follow-up Pós-Tratamento",
        descricao="Acompanhamento após tratamento concluído",
        etapas=(
            EtapaSequencia(
                ordem=1,
                dias_apos_inicio=3,
                canal=Canal.WHATSAPP,
                assunto="Como está a recuperar?",
                mensagem=(
                    "Olá {nome}! Como está a sentir-se após o tratamento? "
                    "Alguma dúvida ou desconforto?"
                ),
            ),
            EtapaSequencia(
                ordem=2,
                dias_apos_inicio=7,
                canal=Canal.WHATSAPP,
                assunto="Lembrete de cuidados",
                mensagem=(
                    "Olá {nome}! Lembre-se de seguir as recomendações pós-tratamento. "
                    "Qualquer dúvida, estamos aqui!"
                ),
                condicao="se não respondeu",
            ),
        ),
    ),
    Sequencia(
        tipo=TipoSequencia.REACTIVATION,
        nome="Reativação de Utente Inativo",
        descricao="Sequência para reativar utentes inativos",
        etapas=(
            EtapaSequencia(
                ordem=1,
                dias_apos_inicio=0,
                canal=Canal.WHATSAPP,
                assunto="Sentimos a sua falta!",
                mensagem="Olá {nome}! Sentimos a sua falta na {clinica}. Que tal agendar um check-up?",
            ),
            EtapaSequencia(
                ordem=2,
                dias_apos_inicio=7,
                canal=Canal.EMAIL,
                assunto="Oferta especial para você",
                mensagem="Olá {nome}! Temos uma oferta especial: 20% de desconto na próxima consulta!",
                condicao="se não agendou",
            ),
        ),
    ),
    Sequencia(
        tipo=TipoSequencia.PREVENTIVE,
        nome="Lembrete Preventivo",
        descricao="Lembrete de check-up preventivo",
        etapas=(
            EtapaSequencia(
                ordem=1,
                dias_apos_inicio=0,
                canal=Canal.WHATSAPP,
                assunto="Hora do check-up!",
                mensagem="Olá {nome}! Está na hora do seu check-up semestral. Agende já!",
            ),
        ),
    ),
    Sequencia(
        tipo=TipoSequencia.LOYALTY,
        nome="Fidelização",
        descricao="Manter utente ativo engajado",
        etapas=(
            EtapaSequencia(
                ordem=1,
                dias_apos_inicio=0,
                canal=Canal.EMAIL,
                assunto="Obrigado pela confiança!",
                mensagem=(
                    "Olá {nome}! Obrigado por confiar na {clinica}. "
                    "Estamos sempre aqui para cuidar do seu sorriso!"
                ),
            ),
        ),
    ),
    Sequencia(
        tipo=TipoSequencia.RECOVERY,
        nome="Recuperação de Utente Perdido",
        descricao="Última tentativa de recuperar utente",
        etapas=(
            EtapaSequencia(
                ordem=1,
                dias_apos_inicio=0,
                canal=Canal.WHATSAPP,
                assunto="Última chamada!",
                mensagem="Olá {nome}! Gostaríamos muito de revê-lo(a). Oferta especial: 30% de desconto!",
            ),
        ),
    ),
)

SEQUENCIAS: Mapping[TipoSequencia, Sequencia] = MappingProxyType(
    {sequencia.tipo: sequencia for sequencia in _SEQUENCIAS}
)


def obter_sequencia(
    tipo: Union[TipoSequencia, str],
    catalogo: Mapping[TipoSequencia, Sequencia] = SEQUENCIAS,
) -> Sequencia:
    """
    Retorna a sequencia predefinida para o gatilho.

    Raises:
        SequenciaNaoEncontradaError: Gatilho desconhecido
    """
    try:
        tipo = TipoSequencia(tipo)
    except ValueError:
        raise SequenciaNaoEncontradaError(str(tipo))

    sequencia = catalogo.get(tipo)
    if sequencia is None:
        raise SequenciaNaoEncontradaError(tipo.value)
    return sequencia


def etapas_pendentes(sequencia: Sequencia, apos_ordem: int = 1) -> List[EtapaSequencia]:
    """
    Etapas que ficam por executar depois de ``apos_ordem``.

    O motor so dispara a primeira etapa; as restantes sao toques futuros
    que um agendador externo pode consumir por (utente, tipo, ordem).
    """
    return [etapa for etapa in sequencia.etapas if etapa.ordem > apos_ordem]
