"""
Configuração global de testes - Fixtures compartilhadas.

Este arquivo contém fixtures reutilizáveis em todos os testes do projeto:
- Mocks de Supabase e respostas HTTP
- Implementações em memória das portas (repositório, canal, histórico)
- Factories de fatos e snapshots de atividade com relógio fixo
"""

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Any, Optional
from unittest.mock import MagicMock

import pytest

from clinica_followup.services.followup.portas import (
    CanalEnvio,
    RegistoMensagens,
    RepositorioAtividade,
    ResultadoEnvio,
)
from clinica_followup.services.followup.service import FollowUpService
from clinica_followup.services.followup.types import (
    Canal,
    ContactoUtente,
    FatosAtividade,
    SnapshotAtividade,
    StatusAtividade,
)

# Meio-dia UTC em junho: mesma data de calendario em Lisboa (UTC+1)
AGORA = datetime(2026, 6, 15, 12, 0, tzinfo=timezone.utc)

_SEM_CONSULTA = object()


# =============================================================================
# MOCK FACTORIES - Funções para criar mocks configuráveis
# =============================================================================


def criar_mock_supabase(dados_retorno: list[dict[str, Any]] | None = None) -> MagicMock:
    """
    Cria mock do cliente Supabase com chain de métodos configurado.

    Args:
        dados_retorno: Lista de dicts que será retornada em .execute().data

    Returns:
        MagicMock configurado para suportar chain: .table().select().eq().execute()
    """
    mock = MagicMock()
    mock.table.return_value = mock
    mock.select.return_value = mock
    mock.insert.return_value = mock
    mock.eq.return_value = mock
    mock.limit.return_value = mock
    mock.rpc.return_value = mock

    response = MagicMock()
    response.data = dados_retorno if dados_retorno is not None else []
    mock.execute.return_value = response

    return mock


def criar_mock_http_response(
    status_code: int = 200,
    json_data: dict[str, Any] | list[Any] | None = None,
    text: str = "",
) -> MagicMock:
    """
    Cria mock de resposta HTTP (httpx.Response).

    Args:
        status_code: HTTP status code
        json_data: Dados JSON a retornar
        text: Texto raw da resposta
    """
    mock = MagicMock()
    mock.status_code = status_code
    mock.json.return_value = json_data if json_data is not None else {}
    mock.text = text
    mock.is_success = 200 <= status_code < 300
    return mock


# =============================================================================
# PORTAS EM MEMÓRIA
# =============================================================================


class RepositorioFake(RepositorioAtividade):
    """Repositório em memória."""

    def __init__(
        self,
        fatos: Optional[list] = None,
        utentes: Optional[dict] = None,
        nome_clinica: Any = "Clínica Sorriso",
        erro: Optional[Exception] = None,
    ):
        self.fatos = list(fatos or [])
        self.utentes = dict(utentes or {})
        self.nome_clinica = nome_clinica
        self.erro = erro
        self.filtros_recebidos = []
        self.chamadas_fatos = 0
        self.chamadas_utente = 0

    async def buscar_fatos_atividade(self, clinica_id, status_filtro=None):
        self.chamadas_fatos += 1
        self.filtros_recebidos.append(status_filtro)
        if self.erro:
            raise self.erro
        return [f for f in self.fatos if f.clinica_id == clinica_id]

    async def buscar_utente(self, clinica_id, utente_id):
        self.chamadas_utente += 1
        if self.erro:
            raise self.erro
        return self.utentes.get(utente_id)

    async def buscar_nome_clinica(self, clinica_id):
        if isinstance(self.nome_clinica, Exception):
            raise self.nome_clinica
        return self.nome_clinica


class CanalFake(CanalEnvio):
    """Canal que regista os envios e mede a concorrência."""

    def __init__(
        self,
        canal: Canal = Canal.WHATSAPP,
        falhar_para: tuple = (),
        excecao: Optional[Exception] = None,
        excecao_para: tuple = (),
        resultado: Optional[ResultadoEnvio] = None,
    ):
        self.canal = canal
        self.falhar_para = set(falhar_para)
        self.excecao = excecao
        self.excecao_para = set(excecao_para)
        self.resultado = resultado
        self.envios = []
        self.ativos = 0
        self.max_ativos = 0

    async def enviar(self, destino, mensagem, assunto=None):
        self.ativos += 1
        self.max_ativos = max(self.max_ativos, self.ativos)
        try:
            await asyncio.sleep(0)
            self.envios.append({"destino": destino, "mensagem": mensagem, "assunto": assunto})
            if self.excecao is not None and (not self.excecao_para or destino in self.excecao_para):
                raise self.excecao
            if self.resultado is not None:
                return self.resultado
            if destino in self.falhar_para:
                return ResultadoEnvio(success=False, error="Numero invalido", canal=self.canal)
            return ResultadoEnvio(
                success=True,
                message_id=f"msg-{len(self.envios)}",
                canal=self.canal,
            )
        finally:
            self.ativos -= 1


class RegistoFake(RegistoMensagens):
    """Histórico de mensagens em memória."""

    def __init__(self, erro: Optional[Exception] = None):
        self.erro = erro
        self.registos = []

    async def registar(self, clinica_id, utente_id, canal, conteudo, resultado):
        if self.erro:
            raise self.erro
        self.registos.append({
            "clinica_id": clinica_id,
            "utente_id": utente_id,
            "canal": canal,
            "conteudo": conteudo,
            "success": resultado.success,
            "error": resultado.error,
        })


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def agora():
    """Instante de referência dos testes."""
    return AGORA


@pytest.fixture
def relogio():
    """Relógio fixo."""
    return lambda: AGORA


@pytest.fixture
def mock_supabase_factory():
    """
    Factory para criar mocks de Supabase com dados específicos.

    Uso:
        def test_algo(mock_supabase_factory):
            mock = mock_supabase_factory([{"id": 123}])
    """
    return criar_mock_supabase


@pytest.fixture
def mock_http_response_factory():
    """Factory de respostas HTTP."""
    return criar_mock_http_response


@pytest.fixture
def criar_fatos():
    """
    Factory de FatosAtividade com ultima consulta ``dias`` antes de AGORA.

    Uso:
        fatos = criar_fatos(utente_id=1, dias=200)
        sem_consulta = criar_fatos(dias=None)
    """
    def _criar(
        utente_id: int = 1,
        dias: Any = 200,
        total_consultas: int = 10,
        valor_vitalicio: float = 5000.0,
        faturas_abertas: int = 0,
        nome: Optional[str] = None,
        telemovel: Optional[str] = "912345678",
        email: Optional[str] = "utente@exemplo.pt",
        clinica_id: int = 1,
    ) -> FatosAtividade:
        ultima = None if dias is None else AGORA - timedelta(days=dias)
        return FatosAtividade(
            utente_id=utente_id,
            clinica_id=clinica_id,
            nome=nome or f"Utente {utente_id}",
            ultima_consulta=ultima,
            total_consultas=total_consultas,
            valor_vitalicio=valor_vitalicio,
            faturas_abertas=faturas_abertas,
            email=email,
            telemovel=telemovel,
        )

    return _criar


@pytest.fixture
def criar_snapshot():
    """Factory de SnapshotAtividade."""
    def _criar(
        utente_id: int = 1,
        nome: str = "Ana",
        status: StatusAtividade = StatusAtividade.INACTIVE,
        dias: int = 200,
        propensao: int = 78,
        telemovel: Optional[str] = "912345678",
        email: Optional[str] = "ana@exemplo.pt",
    ) -> SnapshotAtividade:
        return SnapshotAtividade(
            utente_id=utente_id,
            clinica_id=1,
            nome=nome,
            ultima_consulta=AGORA - timedelta(days=dias),
            dias_desde_ultima_consulta=dias,
            status=status,
            total_consultas=10,
            valor_vitalicio=5000.0,
            faturas_abertas=0,
            propensao_retorno=propensao,
            recomendacao="Iniciar sequência de reativação",
            email=email,
            telemovel=telemovel,
        )

    return _criar


@pytest.fixture
def utente_ana():
    """Contacto com telemovel e email."""
    return ContactoUtente(utente_id=7, nome="Ana", email="ana@exemplo.pt", telemovel="912345678")


@pytest.fixture
def canal_whatsapp():
    return CanalFake(Canal.WHATSAPP)


@pytest.fixture
def canal_email():
    return CanalFake(Canal.EMAIL)


@pytest.fixture
def canal_fake_factory():
    """Factory de CanalFake."""
    return CanalFake


@pytest.fixture
def registo():
    return RegistoFake()


@pytest.fixture
def registo_fake_factory():
    return RegistoFake


@pytest.fixture
def repositorio_fake_factory():
    """Factory de RepositorioFake."""
    return RepositorioFake


@pytest.fixture
def criar_servico(relogio):
    """
    Factory de FollowUpService com relógio fixo.

    Uso:
        servico = criar_servico(repositorio, {Canal.WHATSAPP: canal})
    """
    def _criar(repositorio, canais, registo=None, **kwargs) -> FollowUpService:
        kwargs.setdefault("relogio", relogio)
        kwargs.setdefault("nome_clinica_padrao", "Clínica")
        kwargs.setdefault("max_concorrencia", 5)
        return FollowUpService(repositorio, canais, registo=registo, **kwargs)

    return _criar
