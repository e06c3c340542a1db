# apps/board/serializers.py

"""
Conversão de models para o formato JSON da API e dos eventos

Somente tipos primitivos (str, int, bool, None, list, dict) para que os
payloads passem pelo channel layer (msgpack no Redis).
"""


def _data_iso(valor):
    return valor.isoformat() if valor else None


def serializar_usuario(usuario):
    if usuario is None:
        return None
    return {
        'id': str(usuario.pk),
        'username': usuario.username,
        'email': usuario.email,
    }


def serializar_tarefa(tarefa):
    """Tarefa com responsável e criador expandidos"""
    return {
        'id': str(tarefa.pk),
        'title': tarefa.titulo,
        'description': tarefa.descricao,
        'project': str(tarefa.projeto_id),
        'column': tarefa.coluna,
        'order': tarefa.ordem,
        'assignee': serializar_usuario(tarefa.responsavel),
        'creator': serializar_usuario(tarefa.criado_por),
        'priority': tarefa.prioridade,
        'status': tarefa.status,
        'dueDate': _data_iso(tarefa.prazo),
        'tags': list(tarefa.tags or []),
        'completedAt': _data_iso(tarefa.concluida_em),
        'createdAt': _data_iso(tarefa.criado_em),
        'updatedAt': _data_iso(tarefa.atualizado_em),
    }


def serializar_coluna(coluna):
    return {
        'id': coluna.chave,
        'title': coluna.titulo,
        'order': coluna.ordem,
        'color': coluna.cor,
    }


def serializar_membro(membro):
    return {
        'user': serializar_usuario(membro.usuario),
        'role': membro.papel,
    }


def serializar_projeto(projeto):
    """Projeto com dono, membros e colunas"""
    return {
        'id': str(projeto.pk),
        'title': projeto.titulo,
        'description': projeto.descricao,
        'owner': serializar_usuario(projeto.dono),
        'members': [
            serializar_membro(membro)
            for membro in projeto.participacoes.select_related('usuario').order_by('entrou_em', 'id')
        ],
        'columns': [serializar_coluna(coluna) for coluna in projeto.colunas.order_by('ordem', 'titulo')],
        'color': projeto.cor,
        'isArchived': projeto.arquivado,
        'createdAt': _data_iso(projeto.criado_em),
        'updatedAt': _data_iso(projeto.atualizado_em),
    }
