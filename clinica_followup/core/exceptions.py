"""
Exceptions customizadas do motor de follow-up.
"""
from typing import Optional


class FollowupException(Exception):
    """Base exception para todos os erros do sistema."""

    def __init__(
        self,
        message: str,
        details: Optional[dict] = None,
        original_error: Optional[Exception] = None
    ):
        self.message = message
        self.details = details or {}
        self.original_error = original_error
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message


class DatabaseError(FollowupException):
    """Erro de banco de dados (Supabase)."""
    pass


class RepositorioIndisponivelError(DatabaseError):
    """Fonte de dados de atividade inacessivel. Nunca devolve lista parcial."""
    pass


class ExternalAPIError(FollowupException):
    """Erro de API externa (WhatsApp, SMS, Email)."""

    def __init__(
        self,
        message: str,
        service: str,
        details: Optional[dict] = None,
        original_error: Optional[Exception] = None
    ):
        self.service = service
        super().__init__(message, details, original_error)


class FalhaEnvioError(ExternalAPIError):
    """Falha de entrega num canal. Convertida em resultado falhado pelos adaptadores."""
    pass


class ValidationError(FollowupException):
    """Erro de validacao de dados de entrada."""
    pass


class NotFoundError(FollowupException):
    """Recurso nao encontrado."""

    def __init__(
        self,
        resource: str,
        identifier: Optional[str] = None
    ):
        message = f"{resource} nao encontrado"
        details = {}
        if identifier:
            details["id"] = identifier
        super().__init__(message, details)


class SequenciaNaoEncontradaError(NotFoundError):
    """Tipo de sequencia de follow-up desconhecido."""

    def __init__(self, tipo: str):
        self.tipo = tipo
        super().__init__("Sequencia", str(tipo))


class UtenteNaoEncontradoError(NotFoundError):
    """Utente inexistente na clinica."""

    def __init__(self, utente_id):
        super().__init__("Utente", str(utente_id))


class ContactoEmFaltaError(FollowupException):
    """Utente sem dados de contacto para o canal pedido."""

    def __init__(self, canal: str, utente_id=None):
        self.canal = canal
        details = {"canal": canal}
        if utente_id is not None:
            details["utente_id"] = utente_id
        super().__init__("Canal não disponível ou dados de contato faltando", details)


class ConfigurationError(FollowupException):
    """Erro de configuracao do sistema."""
    pass
