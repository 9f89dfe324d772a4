"""
Score de propensao a retorno (0-100).

Deducao linear a partir de 100 com quatro fatores ponderados:
recencia (40%), frequencia (30%), valor vitalicio (20%) e faturas abertas (10%).
Formula fixa e deterministica, sem I/O.
"""
import math
from typing import Type

from clinica_followup.core.config import FollowupConfig, PesosPropensao
from clinica_followup.core.exceptions import ConfigurationError, ValidationError
from clinica_followup.services.followup.classificacao import validar_inteiro_nao_negativo


def validar_pesos(pesos: PesosPropensao) -> PesosPropensao:
    """Garante que os pesos somam exatamente 1."""
    if pesos.soma != 1:
        raise ConfigurationError(
            "Pesos de propensao devem somar 1",
            details={"soma": str(pesos.soma)},
        )
    return pesos


def _arredondar(valor: float) -> int:
    """Arredonda meio para cima (2.5 -> 3), sem arredondamento bancario."""
    return int(math.floor(valor + 0.5))


def calcular_propensao(
    dias_desde_ultima_consulta: int,
    total_consultas: int,
    valor_vitalicio: float,
    faturas_abertas: int,
    config: Type[FollowupConfig] = FollowupConfig,
) -> int:
    """
    Calcula propensao a retorno.

    Args:
        dias_desde_ultima_consulta: Dias desde a ultima consulta (>= 0)
        total_consultas: Consultas nao canceladas (>= 0)
        valor_vitalicio: Soma faturada (>= 0)
        faturas_abertas: Faturas por pagar (>= 0)
        config: Tabela de pesos e sub-scores

    Returns:
        Inteiro entre 0 e 100

    Raises:
        ValidationError: Entrada negativa ou invalida
        ConfigurationError: Pesos nao somam 1
    """
    dias = validar_inteiro_nao_negativo("dias_desde_ultima_consulta", dias_desde_ultima_consulta)
    consultas = validar_inteiro_nao_negativo("total_consultas", total_consultas)
    faturas = validar_inteiro_nao_negativo("faturas_abertas", faturas_abertas)
    if isinstance(valor_vitalicio, bool) or not isinstance(valor_vitalicio, (int, float)):
        raise ValidationError(f"valor_vitalicio deve ser numerico, recebido {valor_vitalicio!r}")
    if valor_vitalicio < 0 or math.isnan(valor_vitalicio):
        raise ValidationError(f"valor_vitalicio nao pode ser negativo, recebido {valor_vitalicio}")

    pesos = validar_pesos(config.PESOS)

    recencia = max(0.0, 100 - (dias / config.DIAS_RECENCIA_ZERO) * 100)
    frequencia = min(100.0, consultas * config.PONTOS_POR_CONSULTA)
    valor = min(100.0, (valor_vitalicio / 1000) * config.PONTOS_POR_MIL_EUROS)
    saldo = config.SCORE_FATURAS_ABERTAS if faturas > 0 else 100

    score = 100.0
    score -= (100 - recencia) * float(pesos.recencia)
    score -= (100 - frequencia) * float(pesos.frequencia)
    score -= (100 - valor) * float(pesos.valor)
    score -= (100 - saldo) * float(pesos.faturas)

    return _arredondar(max(0.0, min(100.0, score)))
