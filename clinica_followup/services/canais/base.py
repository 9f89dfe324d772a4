"""
Base dos canais de envio sobre HTTP.

Cada canal implementa ``_enviar`` e devolve o ID da mensagem no provider.
Esta base trata de:
- validar credenciais (ConfigurationError)
- repetir erros transitorios de transporte (tenacity)
- converter falhas de entrega em ResultadoEnvio(success=False)
"""

import logging
import re
from abc import abstractmethod
from typing import Optional

import httpx
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from clinica_followup.core.exceptions import ConfigurationError, FalhaEnvioError
from clinica_followup.services.followup.portas import CanalEnvio, ResultadoEnvio
from clinica_followup.services.http_client import get_http_client

logger = logging.getLogger(__name__)

INDICATIVO_PORTUGAL = "351"
TENTATIVAS_PADRAO = 3


def formatar_telefone(numero: str) -> str:
    """
    Normaliza telemovel para E.164, assumindo Portugal (+351).

    Exemplos:
        "912 345 678" -> "+351912345678"
        "00351912345678" -> "+351912345678"
        "351912345678" -> "+351912345678"
    """
    limpo = re.sub(r"[\s\-\(\)]", "", numero or "")

    if limpo.startswith("+"):
        return limpo
    if limpo.startswith("00"):
        return "+" + limpo[2:]
    if limpo.startswith(INDICATIVO_PORTUGAL):
        return "+" + limpo
    return f"+{INDICATIVO_PORTUGAL}{limpo}"


class CanalHttp(CanalEnvio):
    """Canal que envia por uma API HTTP."""

    nome_servico: str = "http"

    def __init__(
        self,
        http_client: Optional[httpx.AsyncClient] = None,
        tentativas: int = TENTATIVAS_PADRAO,
        espera=None,
    ):
        """
        Args:
            http_client: Cliente HTTP (default: singleton partilhado)
            tentativas: Tentativas para erros de transporte
            espera: Estrategia de espera do tenacity entre tentativas
        """
        self._http_client = http_client
        self.tentativas = tentativas
        self.espera = espera or wait_exponential(multiplier=1, min=1, max=5)

    @property
    @abstractmethod
    def configurado(self) -> bool:
        """True se as credenciais necessarias existem."""
        pass

    @abstractmethod
    async def _enviar(self, destino: str, mensagem: str, assunto: Optional[str]) -> Optional[str]:
        """Envia e retorna o ID da mensagem. Levanta FalhaEnvioError ou httpx.HTTPError."""
        pass

    def _ler_json(self, response: httpx.Response) -> dict:
        """
        Corpo JSON de uma resposta 2xx.

        A mensagem ja foi aceite pelo provider: corpo vazio ou nao JSON
        resulta em {} (sem ID), nunca em falha de envio.
        """
        try:
            data = response.json()
        except ValueError:
            logger.warning(
                f"[{self.nome_servico}] Resposta {response.status_code} sem JSON valido"
            )
            return {}
        return data if isinstance(data, dict) else {}

    def _extrair_erro(self, response: httpx.Response) -> str:
        """Mensagem de erro de uma resposta nao 2xx."""
        texto = response.text.strip() if response.text else "Resposta vazia"
        return f"HTTP {response.status_code}: {texto[:200]}"

    async def enviar(
        self,
        destino: str,
        mensagem: str,
        assunto: Optional[str] = None,
    ) -> ResultadoEnvio:
        if not self.configurado:
            raise ConfigurationError(
                f"Canal {self.canal.value} sem credenciais configuradas",
                details={"servico": self.nome_servico},
            )

        try:
            message_id = await self._enviar(destino, mensagem, assunto)
            logger.info(f"[{self.nome_servico}] Mensagem enviada: {message_id}")
            return ResultadoEnvio(success=True, message_id=message_id, canal=self.canal)

        except FalhaEnvioError as e:
            logger.warning(f"[{self.nome_servico}] Erro ao enviar: {e.message}")
            return ResultadoEnvio(success=False, error=e.message, canal=self.canal)

        except httpx.TimeoutException:
            erro = f"Timeout ao enviar via {self.nome_servico}"
            logger.error(f"[{self.nome_servico}] {erro}")
            return ResultadoEnvio(success=False, error=erro, canal=self.canal)

        except httpx.HTTPError as e:
            erro = f"Erro de conexao com {self.nome_servico}: {e}"
            logger.error(f"[{self.nome_servico}] {erro}")
            return ResultadoEnvio(success=False, error=erro, canal=self.canal)

    async def _post(self, url: str, **kwargs) -> httpx.Response:
        """
        POST com retry para erros de transporte.

        Respostas nao 2xx levantam FalhaEnvioError (sem retry).
        """
        client = self._http_client or await get_http_client()

        async for tentativa in AsyncRetrying(
            stop=stop_after_attempt(self.tentativas),
            wait=self.espera,
            retry=retry_if_exception_type(httpx.TransportError),
            reraise=True,
        ):
            with tentativa:
                response = await client.post(url, **kwargs)

        if not response.is_success:
            raise FalhaEnvioError(
                self._extrair_erro(response),
                service=self.nome_servico,
                details={"status_code": response.status_code},
            )
        return response
