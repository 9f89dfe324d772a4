"""
Canal WhatsApp via Meta Cloud API (Graph API).
"""

import logging
from typing import Optional

import httpx

from clinica_followup.core.config import settings
from clinica_followup.services.canais.base import CanalHttp, formatar_telefone
from clinica_followup.services.followup.types import Canal

logger = logging.getLogger(__name__)

_GRAPH_API_BASE = "https://graph.facebook.com"


class WhatsAppMetaCanal(CanalHttp):
    """Envio de texto pelo numero registado na WABA."""

    canal = Canal.WHATSAPP
    nome_servico = "MetaCloud"

    def __init__(
        self,
        phone_number_id: Optional[str] = None,
        access_token: Optional[str] = None,
        api_version: Optional[str] = None,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.phone_number_id = phone_number_id or settings.META_WHATSAPP_PHONE_NUMBER_ID
        self.access_token = access_token or settings.META_WHATSAPP_ACCESS_TOKEN
        self.api_version = api_version or settings.META_GRAPH_API_VERSION or "v21.0"

    @property
    def configurado(self) -> bool:
        return bool(self.phone_number_id and self.access_token)

    @property
    def messages_url(self) -> str:
        """URL para envio de mensagens."""
        return f"{_GRAPH_API_BASE}/{self.api_version}/{self.phone_number_id}/messages"

    @property
    def headers(self) -> dict:
        """Headers de autenticação."""
        return {
            "Authorization": f"Bearer {self.access_token}",
            "Content-Type": "application/json",
        }

    async def _enviar(self, destino: str, mensagem: str, assunto: Optional[str]) -> Optional[str]:
        # Graph API espera apenas digitos
        numero = formatar_telefone(destino).lstrip("+")

        response = await self._post(
            self.messages_url,
            headers=self.headers,
            json={
                "messaging_product": "whatsapp",
                "recipient_type": "individual",
                "to": numero,
                "type": "text",
                "text": {
                    "preview_url": False,
                    "body": mensagem,
                },
            },
        )

        data = self._ler_json(response)
        if data.get("messages"):
            return data["messages"][0].get("id")
        return None

    def _extrair_erro(self, response: httpx.Response) -> str:
        try:
            error = response.json().get("error", {})
            code = error.get("code", "unknown")
            msg = error.get("message", "")
            return f"meta_error_{code}: {msg}"
        except Exception:
            return super()._extrair_erro(response)
