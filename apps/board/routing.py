# apps/board/routing.py

from django.urls import re_path
from . import consumers

# Rotas WebSocket para a aplicação board
websocket_urlpatterns = [
    # Conexão única; salas escolhidas por mensagem (join-project)
    re_path(r'ws/quadro/$', consumers.ProjetoConsumer.as_asgi()),

    # Sala de um projeto específico - entra ao conectar
    re_path(r'ws/projetos/(?P<projeto_id>\d+)/$', consumers.ProjetoConsumer.as_asgi()),
]
