"""
Testes do estado otimista do cliente (apps/board/cliente/estado.py).
"""

import pytest

from apps.board.cliente.estado import EstadoQuadro
from apps.board.eventos import TarefaAtualizada, TarefaCriada, TarefaMovida, TarefaRemovida
from apps.core.exceptions import TarefaNaoEncontrada


def tarefa(tarefa_id, coluna, ordem, projeto='1', **extra):
    return dict({'id': tarefa_id, 'project': projeto, 'column': coluna, 'order': ordem, 'title': tarefa_id}, **extra)


def ids(estado, coluna):
    return [t['id'] for t in estado.tarefas_da_coluna(coluna)]


def ordens(estado, coluna):
    return [t['order'] for t in estado.tarefas_da_coluna(coluna)]


@pytest.fixture
def estado():
    """todo: [A, B, C, D] / done: [X, Y]"""
    return EstadoQuadro(projeto_id=1, tarefas=[
        tarefa('A', 'todo', 0), tarefa('B', 'todo', 1), tarefa('C', 'todo', 2), tarefa('D', 'todo', 3),
        tarefa('X', 'done', 0), tarefa('Y', 'done', 1),
    ])


class TestCarga:

    def test_ignora_tarefas_de_outro_projeto(self):
        estado = EstadoQuadro(projeto_id='1', tarefas=[tarefa('A', 'todo', 0), tarefa('Z', 'todo', 0, projeto='2')])

        assert list(estado.tarefas) == ['A']

    def test_copia_os_dados_recebidos(self):
        original = tarefa('A', 'todo', 0)
        estado = EstadoQuadro(tarefas=[original])

        estado.mover_otimista('A', 'done', 0)

        assert original['column'] == 'todo'


class TestMovimentoOtimista:

    def test_mesma_coluna(self, estado):
        estado.mover_otimista('C', 'todo', 0)

        assert ids(estado, 'todo') == ['C', 'A', 'B', 'D']
        assert ordens(estado, 'todo') == [0, 1, 2, 3]

    def test_entre_colunas(self, estado):
        estado.mover_otimista('A', 'done', 1)

        assert ids(estado, 'todo') == ['B', 'C', 'D']
        assert ordens(estado, 'todo') == [0, 1, 2]
        assert ids(estado, 'done') == ['X', 'A', 'Y']
        assert ordens(estado, 'done') == [0, 1, 2]

    def test_tarefa_desconhecida(self, estado):
        with pytest.raises(TarefaNaoEncontrada):
            estado.mover_otimista('Q', 'todo', 0)


class TestReverter:

    def test_restaura_tarefa_movida_e_irmas(self, estado):
        antes = {tarefa_id: dict(t) for tarefa_id, t in estado.tarefas.items()}

        instantaneo = estado.mover_otimista('B', 'done', 0)
        estado.reverter(instantaneo)

        assert estado.tarefas == antes
        assert ids(estado, 'todo') == ['A', 'B', 'C', 'D']
        assert ids(estado, 'done') == ['X', 'Y']

    def test_instantaneo_cobre_as_colunas_afetadas(self, estado):
        instantaneo = estado.mover_otimista('B', 'done', 0)

        assert instantaneo.colunas == ('todo', 'done')
        assert set(instantaneo.tarefas) == {'A', 'B', 'C', 'D', 'X', 'Y'}

    def test_mesma_coluna(self, estado):
        instantaneo = estado.mover_otimista('D', 'todo', 0)
        estado.reverter(instantaneo)

        assert ids(estado, 'todo') == ['A', 'B', 'C', 'D']
        assert ordens(estado, 'todo') == [0, 1, 2, 3]


class TestReconciliacao:

    def test_task_moved_reposiciona_irmas(self, estado):
        """Outro cliente moveu A para done#1: irmãs locais seguem a renumeração do servidor"""
        evento = TarefaMovida(
            tarefa=tarefa('A', 'done', 1, title='A (servidor)'),
            coluna_anterior='todo',
            coluna_nova='done'
        )

        estado.aplicar_evento(evento)

        assert ids(estado, 'todo') == ['B', 'C', 'D']
        assert ordens(estado, 'todo') == [0, 1, 2]
        assert ids(estado, 'done') == ['X', 'A', 'Y']
        assert ordens(estado, 'done') == [0, 1, 2]
        assert estado.obter('A')['title'] == 'A (servidor)'

    def test_task_moved_duas_vezes_igual_a_uma(self, estado):
        evento = TarefaMovida(tarefa=tarefa('C', 'todo', 0), coluna_anterior='todo', coluna_nova='todo')

        estado.aplicar_evento(evento)
        uma_vez = {k: dict(v) for k, v in estado.tarefas.items()}
        estado.aplicar_evento(evento)

        assert estado.tarefas == uma_vez
        assert ids(estado, 'todo') == ['C', 'A', 'B', 'D']

    def test_confirmacao_do_proprio_movimento_nao_altera_estado(self, estado):
        estado.mover_otimista('A', 'done', 1)
        otimista = {k: dict(v) for k, v in estado.tarefas.items()}

        estado.aplicar_evento(TarefaMovida(tarefa=tarefa('A', 'done', 1), coluna_anterior='todo', coluna_nova='done'))

        assert estado.tarefas == otimista

    def test_task_moved_de_tarefa_desconhecida(self, estado):
        estado.aplicar_evento(TarefaMovida(tarefa=tarefa('N', 'done', 0), coluna_anterior='review', coluna_nova='done'))

        assert ids(estado, 'done') == ['N', 'X', 'Y']
        assert ordens(estado, 'done') == [0, 1, 2]

    def test_task_deleted_compacta_e_e_idempotente(self, estado):
        evento = TarefaRemovida(id_removida='B')

        estado.aplicar_evento(evento)
        estado.aplicar_evento(evento)

        assert ids(estado, 'todo') == ['A', 'C', 'D']
        assert ordens(estado, 'todo') == [0, 1, 2]

    def test_task_created_e_updated_substituem_por_id(self, estado):
        estado.aplicar_evento(TarefaCriada(tarefa=tarefa('E', 'todo', 4)))
        estado.aplicar_evento(TarefaCriada(tarefa=tarefa('E', 'todo', 4)))
        estado.aplicar_evento(TarefaAtualizada(tarefa=tarefa('B', 'todo', 1, title='B revisada')))

        assert ids(estado, 'todo') == ['A', 'B', 'C', 'D', 'E']
        assert estado.obter('B')['title'] == 'B revisada'

    def test_evento_de_outro_projeto_e_ignorado(self, estado):
        estado.aplicar_evento(TarefaCriada(tarefa=tarefa('Z', 'todo', 0, projeto='99')))

        assert estado.obter('Z') is None


class TestMensagens:

    def test_mensagem_da_sala(self, estado):
        evento = estado.aplicar_mensagem({
            'type': 'task-moved',
            'message': {'task': tarefa('D', 'todo', 0), 'oldColumn': 'todo', 'newColumn': 'todo'},
        })

        assert isinstance(evento, TarefaMovida)
        assert ids(estado, 'todo') == ['D', 'A', 'B', 'C']

    def test_mensagens_de_controle_sao_ignoradas(self, estado):
        antes = {k: dict(v) for k, v in estado.tarefas.items()}

        assert estado.aplicar_mensagem({'type': 'pong', 'message': {}}) is None
        assert estado.aplicar_mensagem({'type': 'joined-project', 'message': {'projectId': '1'}}) is None
        assert estado.aplicar_mensagem({'type': 'desconhecido', 'message': {}}) is None
        assert estado.tarefas == antes

    def test_project_sync_recarrega(self, estado):
        estado.aplicar_mensagem({
            'type': 'project-sync',
            'message': {'projectId': '1', 'tasks': [tarefa('K', 'review', 0)]},
        })

        assert list(estado.tarefas) == ['K']

    def test_project_deleted_limpa_estado(self, estado):
        estado.aplicar_mensagem({'type': 'project-deleted', 'message': {'projectId': '1'}})

        assert estado.tarefas == {}
        assert estado.projeto is None

    def test_project_updated_guarda_projeto(self, estado):
        estado.aplicar_mensagem({'type': 'project-updated', 'message': {'project': {'id': '1', 'title': 'Novo'}}})

        assert estado.projeto['title'] == 'Novo'

    @pytest.mark.parametrize('mensagem', [
        {'type': 'task-moved', 'message': {'task': {'title': 'sem id'}, 'oldColumn': 'todo', 'newColumn': 'done'}},
        {'type': 'task-created', 'message': {'task': 'E'}},
        {'type': 'project-sync', 'message': [tarefa('K', 'review', 0)]},
        {'type': 'project-sync', 'message': {'projectId': '1', 'tasks': 'K'}},
        {'type': 'project-updated', 'message': {'project': ['1']}},
        'task-created',
    ])
    def test_mensagem_malformada_e_descartada(self, estado, mensagem):
        antes = {k: dict(v) for k, v in estado.tarefas.items()}

        assert estado.aplicar_mensagem(mensagem) is None
        assert estado.tarefas == antes

    def test_project_sync_ignora_tarefas_sem_id(self, estado):
        estado.aplicar_mensagem({
            'type': 'project-sync',
            'message': {'projectId': '1', 'tasks': [tarefa('K', 'review', 0), {'title': 'sem id'}, 'lixo']},
        })

        assert list(estado.tarefas) == ['K']
