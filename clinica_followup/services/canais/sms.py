"""
Canal SMS via Twilio (REST API).
"""

from typing import Optional

import httpx

from clinica_followup.core.config import settings
from clinica_followup.services.canais.base import CanalHttp, formatar_telefone
from clinica_followup.services.followup.types import Canal

_TWILIO_API_BASE = "https://api.twilio.com/2010-04-01"


class SmsTwilioCanal(CanalHttp):
    """Envio de SMS pela conta Twilio."""

    canal = Canal.SMS
    nome_servico = "Twilio"

    def __init__(
        self,
        account_sid: Optional[str] = None,
        auth_token: Optional[str] = None,
        numero_origem: Optional[str] = None,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.account_sid = account_sid or settings.TWILIO_ACCOUNT_SID
        self.auth_token = auth_token or settings.TWILIO_AUTH_TOKEN
        self.numero_origem = numero_origem or settings.TWILIO_PHONE_NUMBER

    @property
    def configurado(self) -> bool:
        return bool(self.account_sid and self.auth_token and self.numero_origem)

    @property
    def messages_url(self) -> str:
        return f"{_TWILIO_API_BASE}/Accounts/{self.account_sid}/Messages.json"

    async def _enviar(self, destino: str, mensagem: str, assunto: Optional[str]) -> Optional[str]:
        response = await self._post(
            self.messages_url,
            auth=(self.account_sid, self.auth_token),
            data={
                "From": self.numero_origem,
                "To": formatar_telefone(destino),
                "Body": mensagem,
            },
        )
        return self._ler_json(response).get("sid")

    def _extrair_erro(self, response: httpx.Response) -> str:
        try:
            data = response.json()
            return f"twilio_error_{data.get('code', 'unknown')}: {data.get('message', '')}"
        except Exception:
            return super()._extrair_erro(response)
