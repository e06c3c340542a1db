# apps/board/apps.py

import logging

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class BoardConfig(AppConfig):
    """Configuração da app Board"""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.board'
    verbose_name = 'Board - Quadro em tempo real'

    def ready(self):
        """
        Inicialização da app
        Registra os sinais que publicam eventos de projeto e membros
        """
        from . import signals  # noqa: F401

        logger.debug("🔌 Board App inicializada - WebSockets habilitados")
