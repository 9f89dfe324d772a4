"""
Modulo de follow-up inteligente (reengajamento de utentes).

Estrutura:
- types: Tipos e enums
- classificacao / propensao / recomendacao: Funcoes puras de analise
- atividade: Snapshots a partir do repositorio
- sequencias / executor: Catalogo e execucao de sequencias
- campanha: Campanha de reativacao em massa
- service: Casos de uso expostos
"""
from clinica_followup.services.followup.classificacao import classificar_status
from clinica_followup.services.followup.personalizacao import personalizar
from clinica_followup.services.followup.propensao import calcular_propensao
from clinica_followup.services.followup.recomendacao import gerar_recomendacao
from clinica_followup.services.followup.sequencias import SEQUENCIAS, obter_sequencia
from clinica_followup.services.followup.service import FollowUpService, criar_followup_service
from clinica_followup.services.followup.types import (
    Canal,
    ResultadoFollowUp,
    SnapshotAtividade,
    StatusAtividade,
    TipoSequencia,
)

__all__ = [
    "FollowUpService",
    "criar_followup_service",
    "classificar_status",
    "calcular_propensao",
    "gerar_recomendacao",
    "personalizar",
    "obter_sequencia",
    "SEQUENCIAS",
    "Canal",
    "StatusAtividade",
    "TipoSequencia",
    "SnapshotAtividade",
    "ResultadoFollowUp",
]
