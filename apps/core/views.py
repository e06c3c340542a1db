# apps/core/views.py

import logging

from django.core.cache import cache
from django.http import JsonResponse
from django.utils import timezone
from django.views.decorators.http import require_GET

from apps import __version__
from .models import Usuario
from .permissions import api_login_required
from .utils import calcular_estatisticas_projetos

logger = logging.getLogger(__name__)


@require_GET
def health_check(request):
    """
    Health check para monitoramento
    """
    try:
        # Verificar conexão com banco
        Usuario.objects.exists()

        # Verificar cache (Redis em produção)
        cache.set('health_check', 'ok', 60)
        cache.get('health_check')

        status = {
            'status': 'healthy',
            'database': 'ok',
            'cache': 'ok',
            'timestamp': timezone.now().isoformat(),
            'version': __version__
        }

        return JsonResponse(status)

    except Exception as e:
        logger.error(f"❌ Health check falhou: {e}")
        status = {
            'status': 'unhealthy',
            'error': str(e),
            'timestamp': timezone.now().isoformat(),
            'version': __version__
        }

        return JsonResponse(status, status=500)


@require_GET
@api_login_required
def api_estatisticas_painel(request):
    """
    API com estatísticas agregadas do painel
    """
    stats = calcular_estatisticas_projetos(request.user)

    return JsonResponse({
        'success': True,
        'data': stats,
        'timestamp': timezone.now().isoformat()
    })
