# apps/core/signals.py

import logging

from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import MembroProjeto, Projeto

logger = logging.getLogger(__name__)


@receiver(post_save, sender=Projeto)
def preparar_projeto_novo(sender, instance, created, **kwargs):
    """
    Cria colunas padrão e registra o dono como membro
    APENAS na criação e se o projeto ainda não tem colunas
    """
    if not created:
        return

    if not instance.colunas.exists():
        instance.criar_colunas_padrao()

    MembroProjeto.objects.get_or_create(
        projeto=instance,
        usuario=instance.dono,
        defaults={'papel': 'dono'}
    )
    logger.info(f"📋 Projeto '{instance.titulo}' criado com colunas padrão")
