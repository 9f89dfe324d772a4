"""
Base Repository - cliente de banco partilhado pelos repositories Supabase.

Os repositories recebem o cliente no construtor (Supabase, Mock, etc.),
o que permite testar sem patches:

    mock_db = criar_mock_supabase([...])
    repo = SupabaseRepositorioAtividade(mock_db)
"""
from typing import Any, Optional

from clinica_followup.services.supabase import get_supabase_client


class SupabaseRepository:
    """
    Base para repositories sobre Supabase.

    Attributes:
        db: Cliente de banco de dados; resolvido na primeira utilizacao
            quando nao injetado
    """

    def __init__(self, db_client: Optional[Any] = None):
        self._db = db_client

    @property
    def db(self) -> Any:
        if self._db is None:
            self._db = get_supabase_client()
        return self._db
