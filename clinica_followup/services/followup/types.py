"""
Tipos e enums do motor de follow-up.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional, Tuple

from clinica_followup.core.exceptions import ContactoEmFaltaError, ValidationError


class StatusAtividade(str, Enum):
    """Classificacao do utente por tempo desde a ultima consulta."""

    ACTIVE = "active"
    AT_RISK = "at_risk"
    INACTIVE = "inactive"
    DORMANT = "dormant"
    LOST = "lost"


# Do mais ativo para o mais inativo
ORDEM_STATUS: Tuple[StatusAtividade, ...] = (
    StatusAtividade.ACTIVE,
    StatusAtividade.AT_RISK,
    StatusAtividade.INACTIVE,
    StatusAtividade.DORMANT,
    StatusAtividade.LOST,
)


class TipoSequencia(str, Enum):
    """Gatilhos de sequencia de follow-up."""

    POST_TREATMENT = "post_treatment"
    REACTIVATION = "reactivation"
    PREVENTIVE = "preventive"
    LOYALTY = "loyalty"
    RECOVERY = "recovery"


class Canal(str, Enum):
    """Canais de comunicacao."""

    EMAIL = "email"
    SMS = "sms"
    WHATSAPP = "whatsapp"


def parse_status(valor) -> StatusAtividade:
    """Converte string em StatusAtividade, levantando ValidationError."""
    try:
        return StatusAtividade(valor)
    except ValueError:
        raise ValidationError(
            f"Status invalido: '{valor}'. "
            f"Valores aceitos: {[s.value for s in StatusAtividade]}"
        )


def parse_canal(valor) -> Canal:
    """Converte string em Canal, levantando ValidationError."""
    try:
        return Canal(valor)
    except ValueError:
        raise ValidationError(
            f"Canal invalido: '{valor}'. "
            f"Valores aceitos: {[c.value for c in Canal]}"
        )


@dataclass
class ContactoUtente:
    """Dados de contacto de um utente."""

    utente_id: int
    nome: str
    email: Optional[str] = None
    telemovel: Optional[str] = None

    def contacto_para(self, canal: Canal) -> Optional[str]:
        """Retorna o contacto usado pelo canal (telemovel ou email), se existir."""
        if canal == Canal.EMAIL:
            valor = self.email
        else:
            valor = self.telemovel
        if valor and valor.strip():
            return valor.strip()
        return None

    def exigir_contacto(self, canal: Canal) -> str:
        """
        Contacto do canal.

        Raises:
            ContactoEmFaltaError: Utente sem dados para o canal
        """
        destino = self.contacto_para(canal)
        if destino is None:
            raise ContactoEmFaltaError(canal.value, self.utente_id)
        return destino

    @classmethod
    def from_db_row(cls, row: dict) -> "ContactoUtente":
        """Cria a partir de linha do banco."""
        return cls(
            utente_id=row["id"],
            nome=row.get("nome") or "",
            email=row.get("email"),
            telemovel=row.get("telemovel"),
        )


@dataclass
class FatosAtividade:
    """
    Fatos agregados de atividade de um utente, fornecidos pelo repositorio.

    Uma linha por utente com pelo menos uma consulta nao cancelada.
    """

    utente_id: int
    clinica_id: int
    nome: str
    ultima_consulta: Optional[datetime]
    total_consultas: int = 0
    valor_vitalicio: float = 0.0
    faturas_abertas: int = 0
    email: Optional[str] = None
    telemovel: Optional[str] = None

    @classmethod
    def from_db_row(cls, row: dict) -> "FatosAtividade":
        """Cria a partir de linha do banco (RPC followup_atividade_utentes)."""
        ultima = row.get("ultima_consulta")
        if isinstance(ultima, str):
            ultima = datetime.fromisoformat(ultima.replace("Z", "+00:00"))

        return cls(
            utente_id=row["id"],
            clinica_id=row["clinica_id"],
            nome=row.get("nome") or "",
            ultima_consulta=ultima,
            total_consultas=int(row.get("total_consultas") or 0),
            valor_vitalicio=float(row.get("valor_vitalicio") or 0),
            faturas_abertas=int(row.get("faturas_abertas") or 0),
            email=row.get("email"),
            telemovel=row.get("telemovel"),
        )


@dataclass(frozen=True)
class SnapshotAtividade:
    """
    Retrato de atividade de um utente numa avaliacao.

    Efemero: recalculado a cada consulta, nunca persistido.
    status, propensao_retorno e recomendacao sao derivados dos restantes campos.
    """

    utente_id: int
    clinica_id: int
    nome: str
    ultima_consulta: Optional[datetime]
    dias_desde_ultima_consulta: int
    status: StatusAtividade
    total_consultas: int
    valor_vitalicio: float
    faturas_abertas: int
    propensao_retorno: int
    recomendacao: str
    email: Optional[str] = None
    telemovel: Optional[str] = None

    @property
    def contacto(self) -> ContactoUtente:
        return ContactoUtente(
            utente_id=self.utente_id,
            nome=self.nome,
            email=self.email,
            telemovel=self.telemovel,
        )

    def to_dict(self) -> dict:
        """Converte para dicionario."""
        return {
            "utente_id": self.utente_id,
            "clinica_id": self.clinica_id,
            "nome": self.nome,
            "email": self.email,
            "telemovel": self.telemovel,
            "ultima_consulta": self.ultima_consulta.isoformat() if self.ultima_consulta else None,
            "dias_desde_ultima_consulta": self.dias_desde_ultima_consulta,
            "status": self.status.value,
            "total_consultas": self.total_consultas,
            "valor_vitalicio": self.valor_vitalicio,
            "faturas_abertas": self.faturas_abertas,
            "propensao_retorno": self.propensao_retorno,
            "recomendacao": self.recomendacao,
        }


@dataclass(frozen=True)
class EtapaSequencia:
    """Etapa de uma sequencia de follow-up."""

    ordem: int
    dias_apos_inicio: int
    canal: Canal
    assunto: str
    mensagem: str
    condicao: Optional[str] = None  # Informativa (ex: "se não respondeu")

    def __post_init__(self):
        if self.ordem < 1:
            raise ValidationError(f"Ordem da etapa deve ser >= 1, recebido {self.ordem}")
        if self.dias_apos_inicio < 0:
            raise ValidationError(
                f"dias_apos_inicio nao pode ser negativo, recebido {self.dias_apos_inicio}"
            )


@dataclass(frozen=True)
class Sequencia:
    """Sequencia de follow-up (configuracao estatica)."""

    tipo: TipoSequencia
    nome: str
    descricao: str
    etapas: Tuple[EtapaSequencia, ...]

    def __post_init__(self):
        if not self.etapas:
            raise ValidationError(f"Sequencia {self.tipo.value} sem etapas")
        ordens = [e.ordem for e in self.etapas]
        if any(b <= a for a, b in zip(ordens, ordens[1:])):
            raise ValidationError(
                f"Etapas da sequencia {self.tipo.value} devem ter ordem crescente: {ordens}"
            )


@dataclass
class DetalheEnvio:
    """Resultado de uma tentativa de envio para um utente."""

    utente_id: int
    utente_nome: str
    canal: Canal
    sucesso: bool
    erro: Optional[str] = None

    def to_dict(self) -> dict:
        dados = {
            "utente_id": self.utente_id,
            "utente_nome": self.utente_nome,
            "canal": self.canal.value,
            "sucesso": self.sucesso,
        }
        if self.erro is not None:
            dados["erro"] = self.erro
        return dados


@dataclass
class ResultadoFollowUp:
    """
    Resultado agregado de uma sequencia ou campanha.

    Invariante: enviados + falhados == total. Os contadores sao derivados
    de ``detalhes``, uma entrada por tentativa de envio.
    """

    detalhes: List[DetalheEnvio] = field(default_factory=list)
    etapas_pendentes: List[EtapaSequencia] = field(default_factory=list)
    total_etapas: int = 0

    @property
    def total(self) -> int:
        return len(self.detalhes)

    @property
    def enviados(self) -> int:
        return sum(1 for d in self.detalhes if d.sucesso)

    @property
    def falhados(self) -> int:
        return sum(1 for d in self.detalhes if not d.sucesso)

    def to_dict(self) -> dict:
        """Converte para dicionario."""
        return {
            "total": self.total,
            "enviados": self.enviados,
            "falhados": self.falhados,
            "detalhes": [d.to_dict() for d in self.detalhes],
            "total_etapas": self.total_etapas,
            "etapas_pendentes": [
                {
                    "ordem": e.ordem,
                    "dias_apos_inicio": e.dias_apos_inicio,
                    "canal": e.canal.value,
                    "condicao": e.condicao,
                }
                for e in self.etapas_pendentes
            ],
        }
