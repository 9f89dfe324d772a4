"""
Infraestrutura partilhada: configuracao, excecoes, logging e timezone.
"""
