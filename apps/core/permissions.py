# apps/core/permissions.py

from functools import wraps

from django.http import JsonResponse

from .exceptions import AcessoNegado, ProjetoNaoEncontrado


class RaiaPermissions:
    """
    Sistema de permissões do Raia Board
    Baseado no dono e na lista de membros de cada projeto
    """

    @staticmethod
    def tem_acesso_projeto(user, projeto):
        """Verifica se tem acesso de leitura/escrita ao projeto"""
        if not user.is_authenticated:
            return False

        return projeto.tem_acesso(user)

    @staticmethod
    def exigir_acesso_projeto(user, projeto):
        """Levanta AcessoNegado quando o usuário não participa do projeto"""
        if not RaiaPermissions.tem_acesso_projeto(user, projeto):
            raise AcessoNegado()


def carregar_projeto_acessivel(user, projeto_id):
    """
    Busca o projeto e verifica acesso

    Levanta ProjetoNaoEncontrado ou AcessoNegado antes de qualquer alteração.
    """
    from .models import Projeto

    try:
        projeto = Projeto.objects.get(pk=projeto_id)
    except (Projeto.DoesNotExist, ValueError, TypeError):
        raise ProjetoNaoEncontrado()

    RaiaPermissions.exigir_acesso_projeto(user, projeto)
    return projeto


# Decoradores para views JSON

def api_login_required(view_func):
    """Decorador que responde 401 em JSON ao invés de redirecionar para o login"""

    @wraps(view_func)
    def wrapped_view(request, *args, **kwargs):
        if not request.user.is_authenticated:
            return JsonResponse(
                {'success': False, 'message': 'Autenticação necessária'},
                status=401
            )
        return view_func(request, *args, **kwargs)

    return wrapped_view

