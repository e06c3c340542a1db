# apps/board/signals.py

"""
Sinais que publicam eventos de projeto e de membros

Mudanças feitas pelo admin ou pela shell também chegam aos clientes
conectados na sala do projeto.
"""

import logging

from django.db import transaction
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from apps.core.models import MembroProjeto, Projeto
from .eventos import MembroAdicionado, MembroRemovido, ProjetoAtualizado, ProjetoRemovido
from .serializers import serializar_membro, serializar_projeto
from .transmissor import transmissor

logger = logging.getLogger(__name__)


def publicar_apos_commit(projeto_id, evento):
    """Payload já serializado; a publicação só acontece se a transação confirmar"""
    transaction.on_commit(
        lambda: transmissor.publicar(projeto_id, evento)
    )


@receiver(post_save, sender=Projeto)
def projeto_salvo(sender, instance, created, raw=False, **kwargs):
    """Projeto recém-criado ainda não tem sala; só edições são publicadas"""
    if raw or created:
        return

    publicar_apos_commit(instance.pk, ProjetoAtualizado(projeto=serializar_projeto(instance)))


@receiver(post_delete, sender=Projeto)
def projeto_removido(sender, instance, **kwargs):
    publicar_apos_commit(instance.pk, ProjetoRemovido(projeto_id=str(instance.pk)))
    logger.info(f"🗑️ Projeto {instance.pk} removido - evento agendado")


@receiver(post_save, sender=MembroProjeto)
def membro_salvo(sender, instance, created, raw=False, **kwargs):
    """Somente entradas novas viram member-added"""
    if raw or not created:
        return

    evento = MembroAdicionado(
        projeto=serializar_projeto(instance.projeto),
        membro=serializar_membro(instance)
    )
    publicar_apos_commit(instance.projeto_id, evento)


@receiver(post_delete, sender=MembroProjeto)
def membro_removido(sender, instance, **kwargs):
    try:
        projeto = Projeto.objects.get(pk=instance.projeto_id)
    except Projeto.DoesNotExist:
        return

    evento = MembroRemovido(
        projeto=serializar_projeto(projeto),
        usuario_id=str(instance.usuario_id)
    )
    publicar_apos_commit(projeto.pk, evento)
