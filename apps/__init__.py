# apps/__init__.py

"""
Raia Board - Aplicações Django

Este pacote contém todas as aplicações do sistema:
- core: Models principais, permissões e erros de domínio
- board: Ordenação de tarefas, API, WebSockets e cliente otimista
"""

__version__ = '0.1.0'
__author__ = 'Equipe Raia'
