"""Testes do modulo de timezone."""
from datetime import datetime, timezone

from clinica_followup.core.timezone import TZ_LISBOA, agora_utc, dias_entre, para_lisboa


def test_agora_utc_tem_timezone():
    assert agora_utc().tzinfo is not None


def test_para_lisboa_naive_assume_utc():
    convertido = para_lisboa(datetime(2026, 7, 1, 23, 30))
    assert convertido.tzinfo == TZ_LISBOA
    assert (convertido.day, convertido.hour) == (2, 0)


class TestDiasEntre:
    def test_mesmo_dia(self):
        inicio = datetime(2026, 1, 10, 8, 0, tzinfo=timezone.utc)
        fim = datetime(2026, 1, 10, 22, 0, tzinfo=timezone.utc)
        assert dias_entre(inicio, fim) == 0

    def test_virada_do_dia_em_lisboa_no_verao(self):
        """23:30 UTC em julho ja e o dia seguinte em Lisboa."""
        inicio = datetime(2026, 7, 1, 23, 30, tzinfo=timezone.utc)
        fim = datetime(2026, 7, 2, 10, 0, tzinfo=timezone.utc)
        assert dias_entre(inicio, fim) == 0

    def test_atravessa_mudanca_de_hora(self):
        inicio = datetime(2026, 3, 28, 12, 0, tzinfo=timezone.utc)
        fim = datetime(2026, 3, 30, 12, 0, tzinfo=timezone.utc)
        assert dias_entre(inicio, fim) == 2

    def test_negativo(self):
        inicio = datetime(2026, 5, 10, tzinfo=timezone.utc)
        fim = datetime(2026, 5, 7, tzinfo=timezone.utc)
        assert dias_entre(inicio, fim) == -3
