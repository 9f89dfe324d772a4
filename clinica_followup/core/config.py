"""
Configurações da aplicação.
Carrega variáveis de ambiente e tabelas ajustáveis do motor de follow-up.
"""
from dataclasses import dataclass
from decimal import Decimal
from functools import lru_cache
from typing import Tuple

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configurações carregadas do .env"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignora variáveis extras do .env
    )

    # App
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Supabase
    SUPABASE_URL: str = ""
    SUPABASE_SERVICE_KEY: str = ""

    # WhatsApp (Meta Cloud API)
    META_WHATSAPP_PHONE_NUMBER_ID: str = ""
    META_WHATSAPP_ACCESS_TOKEN: str = ""
    META_GRAPH_API_VERSION: str = "v21.0"

    # Twilio (SMS)
    TWILIO_ACCOUNT_SID: str = ""
    TWILIO_AUTH_TOKEN: str = ""
    TWILIO_PHONE_NUMBER: str = ""

    # Email (Resend)
    RESEND_API_KEY: str = ""
    EMAIL_FROM: str = ""
    EMAIL_FROM_NAME: str = "Clínica"

    # Clínica
    NOME_CLINICA_PADRAO: str = "Clínica"

    # Campanhas
    FOLLOWUP_MAX_CONCORRENCIA: int = 5

    # HTTP (canais de envio)
    HTTP_TIMEOUT_SEGUNDOS: float = 30.0
    HTTP_MAX_CONEXOES: int = 50

    @property
    def is_production(self) -> bool:
        """Retorna True se está em produção."""
        return self.ENVIRONMENT.lower() == "production"


@dataclass(frozen=True)
class PesosPropensao:
    """
    Pesos dos fatores do score de propensão a retorno.

    Decimal para que a soma seja exata (0.40 + 0.30 + 0.20 + 0.10 == 1).
    """

    recencia: Decimal = Decimal("0.40")
    frequencia: Decimal = Decimal("0.30")
    valor: Decimal = Decimal("0.20")
    faturas: Decimal = Decimal("0.10")

    @property
    def soma(self) -> Decimal:
        return self.recencia + self.frequencia + self.valor + self.faturas


class FollowupConfig:
    """
    Tabelas ajustáveis do motor de follow-up.

    Podem ser substituídas por subclasse/instância injetada no serviço.
    """

    # Limites superiores exclusivos (dias) por status, avaliados em ordem.
    # O último status não tem limite superior.
    LIMIARES_STATUS: Tuple[Tuple[str, int], ...] = (
        ("active", 90),
        ("at_risk", 180),
        ("inactive", 365),
        ("dormant", 730),
    )
    STATUS_SEM_LIMITE: str = "lost"

    PESOS: PesosPropensao = PesosPropensao()

    # Sub-scores
    DIAS_RECENCIA_ZERO: int = 365  # Recência chega a 0 após 1 ano
    PONTOS_POR_CONSULTA: int = 10
    PONTOS_POR_MIL_EUROS: int = 20
    SCORE_FATURAS_ABERTAS: int = 50

    # Elegibilidade para campanha de reativação
    LIMIAR_ELEGIBILIDADE: int = 50

    # Recomendação
    LIMIAR_PRIORIDADE_EM_RISCO: int = 70

    # Faixas de propensão (estatísticas)
    FAIXA_ALTA: int = 70
    FAIXA_MEDIA: int = 40


@lru_cache()
def get_settings() -> Settings:
    """Retorna instância cacheada das configurações."""
    return Settings()


settings = get_settings()
