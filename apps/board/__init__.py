# apps/board/__init__.py

"""
Board - Quadro Kanban em tempo real do Raia Board

Funcionalidades:
- Motor de ordenação densa das tarefas por coluna
- Movimentação transacional (mesma coluna e entre colunas)
- Eventos por projeto via WebSockets (Django Channels)
- Estado otimista do cliente com reconciliação
"""
