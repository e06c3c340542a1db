# apps/core/utils.py

from typing import Dict, List

from django.db.models import Count, Q


def calcular_estatisticas_projetos(usuario) -> Dict:
    """
    Calcula contagem de tarefas ativas e concluídas por projeto

    Uma única consulta agregada para todos os projetos acessíveis,
    ao invés de buscar a lista completa de tarefas de cada projeto.
    """
    projetos = usuario.get_projetos_acessiveis().annotate(
        total_tarefas=Count('tarefas', distinct=True),
        tarefas_ativas=Count('tarefas', filter=Q(tarefas__status='ativa'), distinct=True),
        tarefas_concluidas=Count('tarefas', filter=Q(tarefas__status='concluida'), distinct=True),
    ).order_by('titulo')

    por_projeto: List[Dict] = []
    for projeto in projetos:
        por_projeto.append({
            'projectId': str(projeto.pk),
            'title': projeto.titulo,
            'total': projeto.total_tarefas,
            'active': projeto.tarefas_ativas,
            'completed': projeto.tarefas_concluidas,
        })

    return {
        'projects': por_projeto,
        'totalProjects': len(por_projeto),
        'activeTasks': sum(p['active'] for p in por_projeto),
        'completedTasks': sum(p['completed'] for p in por_projeto),
    }
