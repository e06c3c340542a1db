# apps/board/transmissor.py

"""
Publicação de eventos na sala (grupo do channel layer) de cada projeto

Entrega best-effort, no máximo uma vez por cliente conectado: sem
persistência, sem replay e sem confirmação dos assinantes.
"""

import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer

from .eventos import EventoProjeto

logger = logging.getLogger(__name__)

# Tipo da mensagem no channel layer -> ProjetoConsumer.evento_projeto
TIPO_MENSAGEM = 'evento.projeto'


class Transmissor:
    """Fan-out de eventos para todos os assinantes de um projeto"""

    def __init__(self, channel_layer=None):
        self._channel_layer = channel_layer

    @property
    def channel_layer(self):
        return self._channel_layer or get_channel_layer()

    @staticmethod
    def nome_grupo(projeto_id):
        return f'projeto_{projeto_id}'

    def publicar(self, projeto_id, evento: EventoProjeto):
        """Versão síncrona para views e callbacks de transação"""
        async_to_sync(self.publicar_async)(projeto_id, evento)

    async def publicar_async(self, projeto_id, evento: EventoProjeto):
        layer = self.channel_layer
        if layer is None:
            logger.warning(f"⚠️ Channel layer não configurado - evento {evento.nome} descartado")
            return

        try:
            await layer.group_send(
                self.nome_grupo(projeto_id),
                {
                    'type': TIPO_MENSAGEM,
                    'evento': evento.nome,
                    'message': evento.to_payload(),
                }
            )
        except Exception:
            # Falha de publicação não desfaz a operação já gravada
            logger.exception(f"❌ Falha ao publicar {evento.nome} no projeto {projeto_id}")
            return

        logger.debug(f"📡 {evento.nome} publicado no projeto {projeto_id}")

    async def inscrever(self, projeto_id, channel_name):
        await self.channel_layer.group_add(self.nome_grupo(projeto_id), channel_name)

    async def desinscrever(self, projeto_id, channel_name):
        await self.channel_layer.group_discard(self.nome_grupo(projeto_id), channel_name)


# Instância global do transmissor
transmissor = Transmissor()
