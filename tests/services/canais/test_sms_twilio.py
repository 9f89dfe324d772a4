"""Testes para SmsTwilioCanal."""
import pytest
from unittest.mock import AsyncMock
from tenacity import wait_none

from clinica_followup.services.canais.sms import SmsTwilioCanal
from clinica_followup.services.followup.types import Canal


@pytest.fixture
def mock_http_client():
    return AsyncMock()


@pytest.fixture
def canal(mock_http_client):
    return SmsTwilioCanal(
        account_sid="AC123",
        auth_token="secret",
        numero_origem="+351300000000",
        http_client=mock_http_client,
        espera=wait_none(),
    )


def test_messages_url(canal):
    assert canal.messages_url == "https://api.twilio.com/2010-04-01/Accounts/AC123/Messages.json"
    assert canal.canal == Canal.SMS


@pytest.mark.asyncio
async def test_envio(canal, mock_http_client, mock_http_response_factory):
    mock_http_client.post.return_value = mock_http_response_factory(201, {"sid": "SM42"})

    resultado = await canal.enviar("912 345 678", "Lembrete de check-up")

    assert resultado.success is True
    assert resultado.message_id == "SM42"

    _, kwargs = mock_http_client.post.call_args
    assert kwargs["auth"] == ("AC123", "secret")
    assert kwargs["data"] == {
        "From": "+351300000000",
        "To": "+351912345678",
        "Body": "Lembrete de check-up",
    }


@pytest.mark.asyncio
async def test_erro_twilio(canal, mock_http_client, mock_http_response_factory):
    mock_http_client.post.return_value = mock_http_response_factory(
        400, {"code": 21211, "message": "Invalid 'To' Phone Number"}
    )

    resultado = await canal.enviar("123", "Olá")

    assert resultado.success is False
    assert resultado.error == "twilio_error_21211: Invalid 'To' Phone Number"
