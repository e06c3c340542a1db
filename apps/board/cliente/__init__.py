# apps/board/cliente/__init__.py

"""
Cliente do quadro

Estado otimista das tarefas de um projeto e transporte HTTP para a API.
Não depende do Django: pode rodar fora do servidor.
"""

from .estado import EstadoQuadro, Instantaneo  # noqa: F401
