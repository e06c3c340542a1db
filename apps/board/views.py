# apps/board/views.py

import json
import logging
from functools import wraps

from django.http import JsonResponse
from django.utils import timezone
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_http_methods

from apps.core.exceptions import ErroQuadro, ErroValidacao
from apps.core.permissions import api_login_required
from .eventos import IntencaoMovimento
from .serializers import serializar_tarefa
from .services import coordenador_movimento, servico_tarefas

logger = logging.getLogger(__name__)


def _ler_json(request):
    """Corpo JSON da requisição como dict"""
    if not request.body:
        return {}
    try:
        dados = json.loads(request.body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise ErroValidacao('JSON inválido')
    if not isinstance(dados, dict):
        raise ErroValidacao('Corpo da requisição deve ser um objeto JSON')
    return dados


def responder_erros(view_func):
    """
    Converte erros do quadro em {success: false, message}

    Erros inesperados são logados com traceback e respondidos com 500.
    """

    @wraps(view_func)
    def wrapped_view(request, *args, **kwargs):
        try:
            return view_func(request, *args, **kwargs)
        except ErroQuadro as erro:
            logger.warning(f"⚠️ {request.method} {request.path}: {erro.mensagem} ({erro.status})")
            return JsonResponse(erro.para_resposta(), status=erro.status)
        except Exception:
            logger.exception(f"❌ Erro inesperado em {request.method} {request.path}")
            return JsonResponse(
                {'success': False, 'message': 'Erro interno do servidor'},
                status=500
            )

    return wrapped_view


@csrf_exempt  # Cliente do quadro envia JSON
@require_http_methods(["POST", "PUT"])
@api_login_required
@responder_erros
def mover_tarefa(request):
    """
    Move tarefa para outra posição (mesma coluna ou outra coluna)
    Usado pelo drag-and-drop

    Corpo: {taskId, column, destinationIndex}
    """
    intencao = IntencaoMovimento.from_dict(_ler_json(request))

    resultado = coordenador_movimento.mover(
        request.user,
        intencao.tarefa_id,
        intencao.coluna,
        intencao.indice_destino
    )

    return JsonResponse({
        'success': True,
        'data': {'task': serializar_tarefa(resultado.tarefa)}
    })


@require_GET
@api_login_required
@responder_erros
def listar_tarefas_projeto(request, projeto_id):
    """Todas as tarefas do projeto, por coluna e ordem"""
    tarefas = servico_tarefas.listar(request.user, projeto_id)

    return JsonResponse({
        'success': True,
        'data': {'tasks': [serializar_tarefa(tarefa) for tarefa in tarefas]},
        'timestamp': timezone.now().isoformat()
    })


@csrf_exempt
@require_http_methods(["POST"])
@api_login_required
@responder_erros
def criar_tarefa(request):
    """Cria tarefa no fim da coluna informada"""
    dados = _ler_json(request)

    projeto_id = dados.get('project')
    if not projeto_id:
        raise ErroValidacao('project é obrigatório')

    tarefa = servico_tarefas.criar(request.user, projeto_id, dados)

    return JsonResponse(
        {'success': True, 'data': {'task': serializar_tarefa(tarefa)}},
        status=201
    )


@csrf_exempt
@require_http_methods(["GET", "PUT", "PATCH", "DELETE"])
@api_login_required
@responder_erros
def detalhe_tarefa(request, tarefa_id):
    """Detalhe, edição e remoção de uma tarefa"""
    if request.method == 'GET':
        tarefa = servico_tarefas.obter(request.user, tarefa_id)
        return JsonResponse({'success': True, 'data': {'task': serializar_tarefa(tarefa)}})

    if request.method == 'DELETE':
        servico_tarefas.remover(request.user, tarefa_id)
        return JsonResponse({'success': True, 'data': {'taskId': str(tarefa_id)}})

    tarefa = servico_tarefas.atualizar(request.user, tarefa_id, _ler_json(request))
    return JsonResponse({'success': True, 'data': {'task': serializar_tarefa(tarefa)}})
