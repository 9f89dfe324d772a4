"""
Módulo centralizado para tratamento de timezone.

O projeto usa:
- UTC para armazenamento e comparação com o banco de dados
- Europe/Lisbon para lógica de negócio (dias desde a última consulta)
"""

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo


TZ_LISBOA = ZoneInfo("Europe/Lisbon")
TZ_UTC = timezone.utc


def agora_utc() -> datetime:
    """Retorna datetime atual em UTC (timezone-aware)."""
    return datetime.now(TZ_UTC)


def para_lisboa(dt: datetime) -> datetime:
    """
    Converte datetime para horário de Lisboa.

    Datetimes naive são assumidos como UTC (formato do banco).
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=TZ_UTC)
    return dt.astimezone(TZ_LISBOA)


def dias_entre(inicio: datetime, fim: datetime) -> int:
    """
    Dias de calendário (Lisboa) entre duas datas.

    Pode ser negativo se ``inicio`` for posterior a ``fim``.
    """
    return (_data_local(fim) - _data_local(inicio)).days


def _data_local(valor) -> date:
    if isinstance(valor, datetime):
        return para_lisboa(valor).date()
    return valor
