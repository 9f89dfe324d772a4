"""
Repositories Supabase do motor de follow-up.
"""
from clinica_followup.repositories.atividade import SupabaseRepositorioAtividade
from clinica_followup.repositories.base import SupabaseRepository
from clinica_followup.repositories.mensagens import SupabaseRegistoMensagens

__all__ = [
    "SupabaseRepository",
    "SupabaseRepositorioAtividade",
    "SupabaseRegistoMensagens",
]
