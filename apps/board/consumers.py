# apps/board/consumers.py

import json
import logging

from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncWebsocketConsumer
from django.conf import settings
from django.utils import timezone

from apps.core.exceptions import ErroQuadro
from apps.core.permissions import carregar_projeto_acessivel
from .serializers import serializar_tarefa
from .services import servico_tarefas
from .transmissor import Transmissor

logger = logging.getLogger(__name__)


class ProjetoConsumer(AsyncWebsocketConsumer):
    """
    Consumer WebSocket das salas de projeto

    Funcionalidades:
    - Entrada e saída de salas (uma por projeto)
    - Repasse dos eventos publicados pelos serviços
    - Sincronização completa das tarefas de um projeto
    - Heartbeat (ping/pong)

    Rotas:
    - ws/quadro/: conexão única, salas escolhidas por mensagem
    - ws/projetos/<id>/: entra na sala do projeto ao conectar
    """

    async def connect(self):
        """
        Aceita apenas usuários autenticados
        Na rota com projeto, verifica acesso antes de aceitar
        """
        self.user = self.scope['user']
        self.projetos = set()
        self.transmissor = Transmissor(self.channel_layer)

        if not self.user.is_authenticated:
            logger.warning("❌ Conexão WebSocket rejeitada - usuário não autenticado")
            await self.close()
            return

        projeto_id = self.scope.get('url_route', {}).get('kwargs', {}).get('projeto_id')
        if projeto_id is not None:
            has_access = await self.check_project_access(projeto_id)
            if not has_access:
                logger.warning(
                    f"❌ Conexão WebSocket rejeitada - {self.user.username} sem acesso ao projeto {projeto_id}"
                )
                await self.close()
                return

        await self.accept()

        if projeto_id is not None:
            await self.entrar_projeto(str(projeto_id))

        logger.info(f"✅ WebSocket conectado - {self.user.username}")

    async def disconnect(self, close_code):
        """
        Sai de todas as salas
        """
        for projeto_id in list(getattr(self, 'projetos', ())):
            await self.transmissor.desinscrever(projeto_id, self.channel_name)
        self.projetos = set()

        username = getattr(self.user, 'username', None) or 'anônimo'
        logger.info(f"🔌 WebSocket desconectado - {username} ({close_code})")

    async def receive(self, text_data=None, bytes_data=None):
        """
        Recebe mensagens do cliente WebSocket
        Processa diferentes tipos de eventos
        """
        try:
            data = json.loads(text_data or '')
        except json.JSONDecodeError:
            logger.error(f"❌ JSON inválido recebido via WebSocket de {self.user.username}")
            await self.enviar_erro('JSON inválido')
            return

        if not isinstance(data, dict):
            await self.enviar_erro('Mensagem deve ser um objeto JSON')
            return

        message_type = data.get('type')
        projeto_id = data.get('projectId')

        try:
            # Heartbeat/Ping
            if message_type == 'ping':
                await self.send(text_data=json.dumps({
                    'type': 'pong',
                    'message': {
                        'heartbeatInterval': settings.RAIA_WS_HEARTBEAT_INTERVAL,
                        'timestamp': self.get_timestamp()
                    }
                }))

            elif message_type == 'join-project':
                await self.exigir_acesso(projeto_id)
                await self.entrar_projeto(str(projeto_id))

            elif message_type == 'leave-project':
                if projeto_id is not None and str(projeto_id) in self.projetos:
                    await self.transmissor.desinscrever(str(projeto_id), self.channel_name)
                    self.projetos.discard(str(projeto_id))
                await self.send(text_data=json.dumps({
                    'type': 'left-project',
                    'message': {'projectId': str(projeto_id)}
                }))

            # Sincronização completa (ressincronização do cliente)
            elif message_type == 'sync-project':
                tarefas = await self.get_project_tasks(projeto_id)
                await self.send(text_data=json.dumps({
                    'type': 'project-sync',
                    'message': {
                        'projectId': str(projeto_id),
                        'tasks': tarefas,
                        'timestamp': self.get_timestamp()
                    }
                }))

            else:
                await self.enviar_erro(f'Tipo de mensagem desconhecido: {message_type}')

        except ErroQuadro as erro:
            await self.enviar_erro(erro.mensagem)

    # === Handlers de eventos do channel layer ===

    async def evento_projeto(self, event):
        """
        Repassa evento publicado pelo Transmissor
        """
        await self.send(text_data=json.dumps({
            'type': event['evento'],
            'message': event['message']
        }))

    # === Métodos auxiliares ===

    async def entrar_projeto(self, projeto_id):
        await self.transmissor.inscrever(projeto_id, self.channel_name)
        self.projetos.add(projeto_id)

        await self.send(text_data=json.dumps({
            'type': 'joined-project',
            'message': {'projectId': projeto_id}
        }))
        logger.info(f"👥 {self.user.username} entrou na sala do projeto {projeto_id}")

    async def exigir_acesso(self, projeto_id):
        await database_sync_to_async(carregar_projeto_acessivel)(self.user, projeto_id)

    async def enviar_erro(self, mensagem):
        await self.send(text_data=json.dumps({
            'type': 'error',
            'message': {'message': mensagem}
        }))

    @database_sync_to_async
    def check_project_access(self, projeto_id):
        """
        Verifica se usuário tem acesso ao projeto
        """
        try:
            carregar_projeto_acessivel(self.user, projeto_id)
        except ErroQuadro:
            return False
        return True

    @database_sync_to_async
    def get_project_tasks(self, projeto_id):
        """
        Retorna as tarefas do projeto para sincronização
        """
        tarefas = servico_tarefas.listar(self.user, projeto_id)
        return [serializar_tarefa(tarefa) for tarefa in tarefas]

    def get_timestamp(self):
        """
        Retorna timestamp atual em formato ISO
        """
        return timezone.now().isoformat()
