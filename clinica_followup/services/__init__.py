"""
Servicos do motor de follow-up e integracoes externas.
"""
