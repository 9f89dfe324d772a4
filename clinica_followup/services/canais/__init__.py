"""
Canais de envio - WhatsApp, SMS e Email.

Uso:
    from clinica_followup.services.canais import criar_canais

    canais = criar_canais()
    resultado = await canais[Canal.WHATSAPP].enviar("912345678", "Olá!")
"""

import logging
from typing import Dict, Iterable, Optional

from clinica_followup.services.canais.base import CanalHttp, formatar_telefone
from clinica_followup.services.canais.email import EmailResendCanal
from clinica_followup.services.canais.sms import SmsTwilioCanal
from clinica_followup.services.canais.whatsapp import WhatsAppMetaCanal
from clinica_followup.services.followup.types import Canal

logger = logging.getLogger(__name__)

__all__ = [
    "CanalHttp",
    "WhatsAppMetaCanal",
    "SmsTwilioCanal",
    "EmailResendCanal",
    "formatar_telefone",
    "criar_canais",
]


def criar_canais(candidatos: Optional[Iterable[CanalHttp]] = None) -> Dict[Canal, CanalHttp]:
    """
    Retorna adaptadores com credenciais, indexados por canal.

    Args:
        candidatos: Adaptadores a considerar (default: um por canal, via settings)

    Returns:
        Dict Canal -> adaptador configurado
    """
    if candidatos is None:
        candidatos = (WhatsAppMetaCanal(), SmsTwilioCanal(), EmailResendCanal())

    canais: Dict[Canal, CanalHttp] = {}
    for adaptador in candidatos:
        if adaptador.configurado:
            canais[adaptador.canal] = adaptador
        else:
            logger.info(f"Canal {adaptador.canal.value} sem credenciais, desativado")
    return canais
