# apps/board/urls.py

from django.urls import path
from . import views

app_name = 'board'

urlpatterns = [
    # Movimentação (drag-and-drop)
    path('tarefas/mover/', views.mover_tarefa, name='mover_tarefa'),

    # Tarefas
    path('tarefas/', views.criar_tarefa, name='criar_tarefa'),
    path('tarefas/<int:tarefa_id>/', views.detalhe_tarefa, name='detalhe_tarefa'),

    # Carga do quadro e ressincronização do cliente
    path('projetos/<int:projeto_id>/tarefas/', views.listar_tarefas_projeto, name='tarefas_projeto'),
]
