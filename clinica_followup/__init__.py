"""
Motor de re-engajamento de utentes de clinicas.
"""
__version__ = "0.1.0"
