# apps/core/__init__.py

"""
Core - Aplicação principal do Raia Board

Contém:
- Models (Usuario, Projeto, MembroProjeto, Coluna, Tarefa)
- Sistema de permissões por projeto
- Erros de domínio e formulários de tarefa
- Comandos de seed e manutenção das colunas
"""
