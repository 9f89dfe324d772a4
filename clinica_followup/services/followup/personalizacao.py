"""
Personalizacao de mensagens.

- personalizar: substituicao literal de {placeholders}
- gerar_mensagem_reativacao: mensagem de campanha por status do utente
"""
from typing import Dict, Mapping

from clinica_followup.services.followup.types import SnapshotAtividade, StatusAtividade


# Aliases aceitos nos templates -> campo canonico
ALIASES_CAMPOS: Dict[str, str] = {
    "name": "nome",
    "clinic": "clinica",
}

# Variantes por status. Status sem entrada usam MENSAGEM_REATIVACAO_PADRAO.
MENSAGENS_REATIVACAO: Dict[StatusAtividade, str] = {
    StatusAtividade.AT_RISK: (
        "Olá {nome}! 👋\n\n"
        "Notamos que faz {meses} meses desde a sua última consulta. "
        "Que tal agendar um check-up preventivo?\n\n"
        "Cuidar da sua saúde oral regularmente previne problemas futuros! 🦷"
    ),
    StatusAtividade.INACTIVE: (
        "Olá {nome}! 👋\n\n"
        "Sentimos a sua falta! Faz {meses} meses que não nos visita. "
        "Gostaríamos de agendar uma consulta de revisão.\n\n"
        "**Oferta especial:** 20% de desconto na próxima consulta! 🎁"
    ),
    StatusAtividade.DORMANT: (
        "Olá {nome}! 👋\n\n"
        "Há quanto tempo! Faz mais de um ano que não nos visita. "
        "Gostaríamos muito de revê-lo(a)!\n\n"
        "**Promoção exclusiva:** Check-up completo com 30% de desconto! 🌟"
    ),
}

MENSAGEM_REATIVACAO_PADRAO = (
    "Olá {nome}! 👋\n\n"
    "Esperamos que esteja bem! "
    "Estamos com saudades e gostaríamos de ajudá-lo(a) a cuidar do seu sorriso novamente.\n\n"
    "Entre em contato connosco para agendar! 📞"
)

ASSUNTO_REATIVACAO = "Sentimos a sua falta!"

DIAS_POR_MES = 30


def personalizar(template: str, campos: Mapping[str, str]) -> str:
    """
    Substitui placeholders conhecidos no template.

    Suporta {{campo}} e {campo}; chaves duplas sao substituidas antes das
    simples. Placeholders desconhecidos ficam como estao.

    Args:
        template: Texto com placeholders
        campos: Valores por nome de campo

    Returns:
        Texto personalizado
    """
    valores = {chave: "" if valor is None else str(valor) for chave, valor in campos.items()}
    for alias, canonico in ALIASES_CAMPOS.items():
        if canonico in valores and alias not in valores:
            valores[alias] = valores[canonico]

    resultado = template
    for chave, valor in valores.items():
        resultado = resultado.replace("{{" + chave + "}}", valor)
    for chave, valor in valores.items():
        resultado = resultado.replace("{" + chave + "}", valor)
    return resultado


def gerar_mensagem_reativacao(
    utente: SnapshotAtividade,
    nome_clinica: str = "",
    templates: Mapping[StatusAtividade, str] = MENSAGENS_REATIVACAO,
    template_padrao: str = MENSAGEM_REATIVACAO_PADRAO,
) -> str:
    """
    Gera mensagem de reativacao adequada ao status do utente.

    Args:
        utente: Snapshot de atividade
        nome_clinica: Nome da clinica para {clinica}
        templates: Variantes por status
        template_padrao: Variante para status sem entrada (lost)

    Returns:
        Mensagem personalizada
    """
    template = templates.get(utente.status, template_padrao)
    meses = utente.dias_desde_ultima_consulta // DIAS_POR_MES

    return personalizar(
        template,
        {
            "nome": utente.nome,
            "clinica": nome_clinica,
            "meses": str(meses),
        },
    )
