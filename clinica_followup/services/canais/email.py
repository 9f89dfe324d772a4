"""
Canal Email via Resend.
"""

import html
from typing import Optional

from clinica_followup.core.config import settings
from clinica_followup.services.canais.base import CanalHttp
from clinica_followup.services.followup.types import Canal

_RESEND_URL = "https://api.resend.com/emails"


def texto_para_html(texto: str) -> str:
    """Converte texto simples em HTML (escape + quebras de linha)."""
    return html.escape(texto).replace("\n", "<br>\n")


class EmailResendCanal(CanalHttp):
    """Envio de email transacional pelo Resend."""

    canal = Canal.EMAIL
    nome_servico = "Resend"

    def __init__(
        self,
        api_key: Optional[str] = None,
        remetente: Optional[str] = None,
        nome_remetente: Optional[str] = None,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.api_key = api_key or settings.RESEND_API_KEY
        self.remetente = remetente or settings.EMAIL_FROM
        self.nome_remetente = nome_remetente or settings.EMAIL_FROM_NAME

    @property
    def configurado(self) -> bool:
        return bool(self.api_key and self.remetente)

    async def _enviar(self, destino: str, mensagem: str, assunto: Optional[str]) -> Optional[str]:
        response = await self._post(
            _RESEND_URL,
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
            json={
                "from": f"{self.nome_remetente} <{self.remetente}>",
                "to": destino,
                "subject": assunto or self.nome_remetente,
                "text": mensagem,
                "html": texto_para_html(mensagem),
            },
        )
        return self._ler_json(response).get("id")
