"""
Interfaces (portas) consumidas pelo motor de follow-up.

- RepositorioAtividade: fatos de atividade por utente (Supabase, Mock, etc.)
- CanalEnvio: envio por um canal (WhatsApp, SMS, Email)
- RegistoMensagens: historico de mensagens enviadas

Implementacoes concretas ficam em clinica_followup.repositories e
clinica_followup.services.canais.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Sequence

from clinica_followup.services.followup.types import (
    Canal,
    ContactoUtente,
    FatosAtividade,
    StatusAtividade,
)


@dataclass
class ResultadoEnvio:
    """Resultado do envio de uma mensagem por um canal."""

    success: bool
    message_id: Optional[str] = None
    error: Optional[str] = None
    canal: Optional[Canal] = None


class RepositorioAtividade(ABC):
    """
    Fonte dos fatos de atividade dos utentes.

    Erros de acesso devem ser levantados como RepositorioIndisponivelError,
    nunca devolvendo listas parciais.
    """

    @abstractmethod
    async def buscar_fatos_atividade(
        self,
        clinica_id: int,
        status_filtro: Optional[Sequence[StatusAtividade]] = None,
    ) -> List[FatosAtividade]:
        """
        Lista fatos de atividade dos utentes com pelo menos uma consulta.

        Args:
            clinica_id: ID da clinica
            status_filtro: Dica para reduzir a consulta; o motor volta a
                filtrar pelo status calculado

        Returns:
            Uma linha por utente, na ordem do repositorio
        """
        pass

    @abstractmethod
    async def buscar_utente(self, clinica_id: int, utente_id: int) -> Optional[ContactoUtente]:
        """Busca contacto do utente ou None se nao existir na clinica."""
        pass

    @abstractmethod
    async def buscar_nome_clinica(self, clinica_id: int) -> Optional[str]:
        """Nome de exibicao da clinica (None se desconhecido)."""
        pass


class CanalEnvio(ABC):
    """
    Adaptador de um canal de comunicacao.

    ``enviar`` nao levanta excecao para falhas normais de entrega (rede,
    provider): reporta success=False. Pode levantar ConfigurationError
    quando faltam credenciais.
    """

    canal: Canal

    @abstractmethod
    async def enviar(
        self,
        destino: str,
        mensagem: str,
        assunto: Optional[str] = None,
    ) -> ResultadoEnvio:
        """
        Envia mensagem.

        Args:
            destino: Telemovel ou email do destinatario
            mensagem: Texto da mensagem
            assunto: Assunto (usado apenas por email)
        """
        pass


class RegistoMensagens(ABC):
    """Historico de mensagens enviadas aos utentes."""

    @abstractmethod
    async def registar(
        self,
        clinica_id: int,
        utente_id: int,
        canal: Canal,
        conteudo: str,
        resultado: ResultadoEnvio,
    ) -> None:
        """Regista uma tentativa de envio."""
        pass
