"""
Classificacao de utentes por recencia da ultima consulta.

    dias < 90   -> active
    dias < 180  -> at_risk
    dias < 365  -> inactive
    dias < 730  -> dormant
    dias >= 730 -> lost
"""
from typing import Optional, Tuple, Type

from clinica_followup.core.config import FollowupConfig
from clinica_followup.core.exceptions import ValidationError
from clinica_followup.services.followup.types import ORDEM_STATUS, StatusAtividade


def validar_inteiro_nao_negativo(nome: str, valor) -> int:
    """Rejeita valores nao inteiros ou negativos (nunca corrige a entrada)."""
    if isinstance(valor, bool) or not isinstance(valor, int):
        raise ValidationError(f"{nome} deve ser inteiro, recebido {valor!r}")
    if valor < 0:
        raise ValidationError(f"{nome} nao pode ser negativo, recebido {valor}")
    return valor


def classificar_status(
    dias_desde_ultima_consulta: int,
    config: Type[FollowupConfig] = FollowupConfig,
) -> StatusAtividade:
    """
    Calcula o status do utente a partir dos dias desde a ultima consulta.

    Args:
        dias_desde_ultima_consulta: Dias (>= 0)
        config: Tabela de limiares

    Returns:
        StatusAtividade

    Raises:
        ValidationError: Se dias for negativo
    """
    dias = validar_inteiro_nao_negativo("dias_desde_ultima_consulta", dias_desde_ultima_consulta)

    for status, limite in config.LIMIARES_STATUS:
        if dias < limite:
            return StatusAtividade(status)
    return StatusAtividade(config.STATUS_SEM_LIMITE)


def intervalo_dias(
    status: StatusAtividade,
    config: Type[FollowupConfig] = FollowupConfig,
) -> Tuple[int, Optional[int]]:
    """
    Janela de dias [minimo, maximo) correspondente a um status.

    Returns:
        (dias_min, dias_max) com dias_max None para o ultimo status
    """
    status = StatusAtividade(status)
    minimo = 0
    for nome, limite in config.LIMIARES_STATUS:
        if StatusAtividade(nome) == status:
            return minimo, limite
        minimo = limite
    return minimo, None


def nivel_inatividade(status: StatusAtividade) -> int:
    """Posicao do status na ordem active < at_risk < inactive < dormant < lost."""
    return ORDEM_STATUS.index(StatusAtividade(status))
