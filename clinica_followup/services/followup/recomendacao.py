"""
Recomendacao de follow-up por status e propensao.
"""
from typing import Dict, List, Type

from clinica_followup.core.config import FollowupConfig
from clinica_followup.services.followup.types import StatusAtividade

SEPARADOR = "; "

ACAO_BASE: Dict[StatusAtividade, str] = {
    StatusAtividade.ACTIVE: "Manter engajamento com lembretes preventivos",
    StatusAtividade.AT_RISK: "Enviar lembrete de check-up preventivo",
    StatusAtividade.INACTIVE: "Iniciar sequência de reativação",
    StatusAtividade.DORMANT: "Campanha de recuperação com oferta especial",
    StatusAtividade.LOST: "Última tentativa de recuperação",
}

ACAO_PRIORIZAR = "Alta propensão - priorizar contato"
ACAO_FACILIDADES_PAGAMENTO = "Oferecer facilidades de pagamento"
ACAO_CONTATO_TELEFONE = "Contato personalizado por telefone"
ACAO_REMOVER_LISTA = "Considerar remover da lista ativa"


def gerar_recomendacao(
    status: StatusAtividade,
    propensao_retorno: int,
    total_consultas: int,
    faturas_abertas: int,
    config: Type[FollowupConfig] = FollowupConfig,
) -> str:
    """
    Gera recomendacao de follow-up.

    Returns:
        Acoes separadas por "; " (nunca vazio)
    """
    status = StatusAtividade(status)
    acoes: List[str] = [ACAO_BASE[status]]

    if status == StatusAtividade.AT_RISK:
        if propensao_retorno > config.LIMIAR_PRIORIDADE_EM_RISCO:
            acoes.append(ACAO_PRIORIZAR)
    elif status == StatusAtividade.INACTIVE:
        if faturas_abertas > 0:
            acoes.append(ACAO_FACILIDADES_PAGAMENTO)
    elif status == StatusAtividade.DORMANT:
        acoes.append(ACAO_CONTATO_TELEFONE)
    elif status == StatusAtividade.LOST:
        acoes.append(ACAO_REMOVER_LISTA)

    return SEPARADOR.join(acoes)
