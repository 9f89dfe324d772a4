"""Testes da recomendacao de follow-up."""
import pytest

from clinica_followup.services.followup.recomendacao import (
    ACAO_BASE,
    ACAO_CONTATO_TELEFONE,
    ACAO_FACILIDADES_PAGAMENTO,
    ACAO_PRIORIZAR,
    ACAO_REMOVER_LISTA,
    gerar_recomendacao,
)
from clinica_followup.services.followup.types import StatusAtividade


@pytest.mark.parametrize("status", list(StatusAtividade))
def test_nunca_vazia_e_comeca_pela_acao_base(status):
    recomendacao = gerar_recomendacao(status, 50, 3, 0)
    assert recomendacao
    assert recomendacao.startswith(ACAO_BASE[status])


def test_ativo_apenas_acao_base():
    assert gerar_recomendacao(StatusAtividade.ACTIVE, 95, 10, 2) == (
        "Manter engajamento com lembretes preventivos"
    )


class TestEmRisco:
    def test_alta_propensao_prioriza(self):
        assert gerar_recomendacao(StatusAtividade.AT_RISK, 71, 5, 0) == (
            "Enviar lembrete de check-up preventivo; Alta propensão - priorizar contato"
        )

    def test_limiar_exclusivo(self):
        assert ACAO_PRIORIZAR not in gerar_recomendacao(StatusAtividade.AT_RISK, 70, 5, 0)


class TestInativo:
    def test_faturas_abertas(self):
        recomendacao = gerar_recomendacao(StatusAtividade.INACTIVE, 40, 5, 2)
        assert recomendacao.split("; ") == [
            "Iniciar sequência de reativação",
            ACAO_FACILIDADES_PAGAMENTO,
        ]

    def test_sem_faturas(self):
        assert gerar_recomendacao(StatusAtividade.INACTIVE, 40, 5, 0) == (
            "Iniciar sequência de reativação"
        )


def test_adormecido_contato_telefone():
    assert gerar_recomendacao(StatusAtividade.DORMANT, 20, 1, 0).endswith(ACAO_CONTATO_TELEFONE)


def test_perdido_remover_lista():
    assert gerar_recomendacao("lost", 5, 0, 3) == (
        "Última tentativa de recuperação; Considerar remover da lista ativa"
    )
