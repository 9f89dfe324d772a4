"""Testes do score de propensao a retorno."""
from decimal import Decimal

import pytest

from clinica_followup.core.config import FollowupConfig, PesosPropensao
from clinica_followup.core.exceptions import ConfigurationError, ValidationError
from clinica_followup.services.followup.propensao import (
    _arredondar,
    calcular_propensao,
    validar_pesos,
)


class TestCalcularPropensao:
    """Testes de calcular_propensao."""

    def test_exemplo_utente_perdido_com_faturas(self):
        """800 dias, sem historico, 3 faturas -> 100 - 40 - 30 - 20 - 5."""
        assert calcular_propensao(800, 0, 0, 3) == 5

    def test_utente_ideal(self):
        assert calcular_propensao(0, 10, 5000, 0) == 100

    def test_sem_historico_recente(self):
        assert calcular_propensao(0, 0, 0, 0) == 50

    def test_recencia_zera_apos_um_ano(self):
        assert calcular_propensao(365, 0, 0, 0) == 10
        assert calcular_propensao(1000, 0, 0, 0) == 10

    def test_utente_inativo_fiel(self):
        # recencia 45.2 -> deducao 21.9
        assert calcular_propensao(200, 10, 5000, 0) == 78

    def test_frequencia_e_valor_limitados_a_100(self):
        assert calcular_propensao(0, 500, 1_000_000, 0) == 100

    def test_faturas_abertas_deduzem_cinco(self):
        assert calcular_propensao(0, 10, 5000, 1) == 95
        assert calcular_propensao(0, 10, 5000, 7) == 95

    def test_limites(self):
        for dias in (0, 45, 90, 200, 400, 800):
            for consultas in (0, 3, 20):
                for valor in (0, 250.0, 9000.0):
                    for faturas in (0, 2):
                        score = calcular_propensao(dias, consultas, valor, faturas)
                        assert 0 <= score <= 100
                        assert isinstance(score, int)

    def test_recencia_nao_aumenta_score(self):
        scores = [calcular_propensao(d, 4, 1200.0, 0) for d in range(0, 800, 7)]
        assert all(a >= b for a, b in zip(scores, scores[1:]))

    def test_deterministico(self):
        assert calcular_propensao(123, 4, 987.65, 1) == calcular_propensao(123, 4, 987.65, 1)

    @pytest.mark.parametrize("args", [
        (-1, 0, 0, 0),
        (0, -1, 0, 0),
        (0, 0, -0.01, 0),
        (0, 0, 0, -2),
        (0, 0, float("nan"), 0),
        (0, 0, "100", 0),
    ])
    def test_entradas_invalidas(self, args):
        with pytest.raises(ValidationError):
            calcular_propensao(*args)


class TestPesos:
    """Testes da configuracao de pesos."""

    def test_pesos_padrao_somam_um(self):
        assert FollowupConfig.PESOS.soma == Decimal("1")
        assert validar_pesos(FollowupConfig.PESOS) is FollowupConfig.PESOS

    def test_pesos_invalidos(self):
        class ConfigErrada(FollowupConfig):
            PESOS = PesosPropensao(recencia=Decimal("0.50"))

        with pytest.raises(ConfigurationError):
            calcular_propensao(10, 1, 100, 0, ConfigErrada)

    def test_pesos_alternativos(self):
        class SoRecencia(FollowupConfig):
            PESOS = PesosPropensao(
                recencia=Decimal("1"),
                frequencia=Decimal("0"),
                valor=Decimal("0"),
                faturas=Decimal("0"),
            )

        assert calcular_propensao(0, 0, 0, 5, SoRecencia) == 100
        assert calcular_propensao(730, 50, 9000, 0, SoRecencia) == 0


class TestArredondar:
    """Arredondamento meio para cima."""

    @pytest.mark.parametrize("valor,esperado", [
        (2.5, 3),
        (66.5, 67),
        (0.49, 0),
        (99.5, 100),
        (10.0, 10),
    ])
    def test_meio_para_cima(self, valor, esperado):
        assert _arredondar(valor) == esperado
