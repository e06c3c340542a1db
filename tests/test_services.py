"""
Testes dos serviços do quadro: movimentação, criação, edição e remoção.
"""

import pytest
from django.db import DatabaseError

from apps.board.eventos import TarefaAtualizada, TarefaCriada, TarefaMovida, TarefaRemovida
from apps.board.repositorio import RepositorioTarefas
from apps.board.services import CoordenadorMovimento, ServicoTarefas
from apps.core.exceptions import (
    AcessoNegado,
    ColunaInvalida,
    ErroValidacao,
    FalhaArmazenamento,
    ProjetoNaoEncontrado,
    TarefaNaoEncontrada,
)
from apps.core.models import Tarefa
from tests.auxiliares import sequencia


@pytest.fixture
def coordenador(transmissor_falso):
    return CoordenadorMovimento(transmissor=transmissor_falso)


@pytest.fixture
def servico(transmissor_falso):
    return ServicoTarefas(transmissor=transmissor_falso)


@pytest.fixture
def quadro(projeto, criar_tarefa):
    """todo: [A, B, C, D] / done: [X, Y]"""
    tarefas = {titulo: criar_tarefa(projeto, titulo) for titulo in 'ABCD'}
    tarefas.update({titulo: criar_tarefa(projeto, titulo, coluna='done') for titulo in 'XY'})
    return tarefas


class RepositorioQueFalha(RepositorioTarefas):
    """Falha na gravação em lote depois de tudo calculado"""

    def salvar_em_lote(self, tarefas):
        tarefas = list(tarefas)
        # Grava a primeira tarefa e falha antes das demais
        Tarefa.objects.filter(pk=tarefas[0].pk).update(ordem=tarefas[0].ordem, coluna=tarefas[0].coluna)
        raise DatabaseError('disco cheio')


@pytest.mark.django_db
class TestMoverMesmaColuna:

    def test_move_para_o_topo(self, coordenador, dono, projeto, quadro):
        coordenador.mover(dono, quadro['C'].pk, 'todo', 0)

        assert sequencia(projeto, 'todo') == [('C', 0), ('A', 1), ('B', 2), ('D', 3)]

    def test_resultado_traz_tarefa_e_irmas(self, coordenador, dono, quadro):
        resultado = coordenador.mover(dono, quadro['C'].pk, 'todo', 0)

        assert resultado.tarefa.pk == quadro['C'].pk
        assert resultado.tarefa.ordem == 0
        assert resultado.coluna_anterior == 'todo'
        assert resultado.coluna_nova == 'todo'
        assert sorted(t.titulo for t in resultado.irmas) == ['A', 'B']

    def test_id_como_texto(self, coordenador, membro, projeto, quadro):
        """Membro (não dono) pode mover; id chega como string"""
        coordenador.mover(membro, str(quadro['A'].pk), 'todo', 3)

        assert sequencia(projeto, 'todo') == [('B', 0), ('C', 1), ('D', 2), ('A', 3)]


@pytest.mark.django_db
class TestMoverEntreColunas:

    def test_move_para_o_meio_do_destino(self, coordenador, dono, projeto, criar_tarefa):
        a = criar_tarefa(projeto, 'A')
        criar_tarefa(projeto, 'B')
        criar_tarefa(projeto, 'X', coluna='done')
        criar_tarefa(projeto, 'Y', coluna='done')

        coordenador.mover(dono, a.pk, 'done', 1)

        assert sequencia(projeto, 'todo') == [('B', 0)]
        assert sequencia(projeto, 'done') == [('X', 0), ('A', 1), ('Y', 2)]

    def test_indice_fora_do_intervalo_e_limitado(self, coordenador, dono, projeto, quadro):
        coordenador.mover(dono, quadro['B'].pk, 'done', 99)
        coordenador.mover(dono, quadro['D'].pk, 'done', -5)

        assert sequencia(projeto, 'done') == [('D', 0), ('X', 1), ('Y', 2), ('B', 3)]
        assert sequencia(projeto, 'todo') == [('A', 0), ('C', 1)]

    def test_coluna_vazia_de_destino(self, coordenador, dono, projeto, quadro):
        resultado = coordenador.mover(dono, quadro['A'].pk, 'review', 0)

        assert resultado.tarefa.coluna == 'review'
        assert resultado.tarefa.ordem == 0
        assert sequencia(projeto, 'review') == [('A', 0)]

    def test_sequencia_de_movimentos_mantem_colunas_densas(self, coordenador, dono, projeto, quadro):
        movimentos = [('A', 'done', 0), ('X', 'todo', 2), ('C', 'review', 0), ('B', 'done', 10), ('Y', 'review', 0)]
        for titulo, coluna, indice in movimentos:
            coordenador.mover(dono, quadro[titulo].pk, coluna, indice)

        for coluna in projeto.chaves_colunas():
            ordens = [ordem for _, ordem in sequencia(projeto, coluna)]
            assert ordens == list(range(len(ordens)))


@pytest.mark.django_db
class TestMoverPreCondicoes:

    def test_tarefa_inexistente(self, coordenador, dono):
        with pytest.raises(TarefaNaoEncontrada):
            coordenador.mover(dono, 999999, 'todo', 0)

    def test_id_invalido(self, coordenador, dono):
        with pytest.raises(TarefaNaoEncontrada):
            coordenador.mover(dono, 'nao-e-id', 'todo', 0)

    def test_usuario_sem_acesso_nao_altera_nada(self, coordenador, estranho, projeto, quadro, transmissor_falso,
                                                django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            with pytest.raises(AcessoNegado):
                coordenador.mover(estranho, quadro['D'].pk, 'todo', 0)

        assert sequencia(projeto, 'todo') == [('A', 0), ('B', 1), ('C', 2), ('D', 3)]
        assert transmissor_falso.publicados == []

    def test_coluna_inexistente(self, coordenador, dono, projeto, quadro):
        with pytest.raises(ColunaInvalida):
            coordenador.mover(dono, quadro['A'].pk, 'arquivo-morto', 0)

        assert sequencia(projeto, 'todo')[0] == ('A', 0)


@pytest.mark.django_db
class TestMoverEventos:

    def test_publica_um_task_moved_apos_commit(self, coordenador, dono, projeto, quadro, transmissor_falso,
                                               django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True) as callbacks:
            coordenador.mover(dono, quadro['A'].pk, 'done', 1)

        assert len(callbacks) == 1
        assert transmissor_falso.nomes() == ['task-moved']

        projeto_id, evento = transmissor_falso.publicados[0]
        assert projeto_id == str(projeto.pk)
        assert isinstance(evento, TarefaMovida)
        assert evento.coluna_anterior == 'todo'
        assert evento.coluna_nova == 'done'
        assert evento.tarefa['id'] == str(quadro['A'].pk)
        assert evento.tarefa['column'] == 'done'
        assert evento.tarefa['order'] == 1
        assert evento.tarefa['creator']['username'] == 'ana'

    def test_nada_publicado_sem_commit(self, coordenador, dono, quadro, transmissor_falso):
        coordenador.mover(dono, quadro['A'].pk, 'done', 1)

        assert transmissor_falso.publicados == []


@pytest.mark.django_db
class TestMoverFalhaArmazenamento:

    def test_falha_no_meio_desfaz_todas_as_gravacoes(self, dono, projeto, quadro, transmissor_falso,
                                                     django_capture_on_commit_callbacks):
        coordenador = CoordenadorMovimento(repositorio=RepositorioQueFalha(), transmissor=transmissor_falso)

        with django_capture_on_commit_callbacks(execute=True):
            with pytest.raises(FalhaArmazenamento):
                coordenador.mover(dono, quadro['D'].pk, 'todo', 0)

        assert sequencia(projeto, 'todo') == [('A', 0), ('B', 1), ('C', 2), ('D', 3)]
        assert transmissor_falso.publicados == []


@pytest.mark.django_db
class TestCriarTarefa:

    def test_coluna_vazia_recebe_zero_e_depois_um(self, servico, dono, projeto):
        primeira = servico.criar(dono, projeto.pk, {'title': 'Primeira', 'column': 'review'})
        segunda = servico.criar(dono, projeto.pk, {'title': 'Segunda', 'column': 'review'})

        assert (primeira.ordem, segunda.ordem) == (0, 1)

    def test_coluna_padrao_e_a_primeira_do_projeto(self, servico, dono, projeto, quadro):
        tarefa = servico.criar(dono, projeto.pk, {'title': 'Nova'})

        assert tarefa.coluna == 'todo'
        assert tarefa.ordem == 4
        assert tarefa.criado_por == dono

    def test_entra_depois_da_maior_ordem(self, servico, dono, projeto, criar_tarefa):
        criar_tarefa(projeto, 'A', coluna='review', ordem=0)
        criar_tarefa(projeto, 'B', coluna='review', ordem=5)

        tarefa = servico.criar(dono, projeto.pk, {'title': 'C', 'column': 'review'})

        assert tarefa.ordem == 6

    def test_campos_descritivos(self, servico, dono, membro, projeto):
        tarefa = servico.criar(dono, projeto.pk, {
            'title': '  Revisar contrato  ',
            'description': 'Cláusula 4',
            'assignee': membro.pk,
            'priority': 'urgente',
            'dueDate': '2030-01-15',
            'tags': ['juridico'],
        })

        assert tarefa.titulo == 'Revisar contrato'
        assert tarefa.responsavel == membro
        assert tarefa.prioridade == 'urgente'
        assert tarefa.status == 'ativa'
        assert tarefa.prazo.isoformat() == '2030-01-15'
        assert tarefa.tags == ['juridico']

    def test_publica_task_created(self, servico, dono, projeto, transmissor_falso,
                                  django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            tarefa = servico.criar(dono, projeto.pk, {'title': 'Nova'})

        assert transmissor_falso.nomes() == ['task-created']
        evento = transmissor_falso.publicados[0][1]
        assert isinstance(evento, TarefaCriada)
        assert evento.tarefa['id'] == str(tarefa.pk)

    def test_titulo_obrigatorio(self, servico, dono, projeto):
        with pytest.raises(ErroValidacao):
            servico.criar(dono, projeto.pk, {'title': '   '})

    def test_responsavel_precisa_ser_membro(self, servico, dono, estranho, projeto):
        with pytest.raises(ErroValidacao):
            servico.criar(dono, projeto.pk, {'title': 'Nova', 'assignee': estranho.pk})

    def test_coluna_invalida(self, servico, dono, projeto):
        with pytest.raises(ColunaInvalida):
            servico.criar(dono, projeto.pk, {'title': 'Nova', 'column': 'backlog'})

    def test_sem_acesso(self, servico, estranho, projeto):
        with pytest.raises(AcessoNegado):
            servico.criar(estranho, projeto.pk, {'title': 'Nova'})

    def test_projeto_inexistente(self, servico, dono):
        with pytest.raises(ProjetoNaoEncontrado):
            servico.criar(dono, 424242, {'title': 'Nova'})


@pytest.mark.django_db
class TestAtualizarTarefa:

    def test_edicao_parcial_mantem_demais_campos(self, servico, dono, projeto, criar_tarefa):
        tarefa = criar_tarefa(projeto, 'Original', descricao='Texto', prioridade='alta')

        atualizada = servico.atualizar(dono, tarefa.pk, {'title': 'Renomeada'})

        assert atualizada.titulo == 'Renomeada'
        assert atualizada.descricao == 'Texto'
        assert atualizada.prioridade == 'alta'

    def test_concluir_preenche_data_de_conclusao(self, servico, dono, projeto, criar_tarefa):
        tarefa = criar_tarefa(projeto, 'Tarefa')

        concluida = servico.atualizar(dono, tarefa.pk, {'status': 'concluida'})
        assert concluida.concluida_em is not None

        reaberta = servico.atualizar(dono, tarefa.pk, {'status': 'ativa'})
        assert reaberta.concluida_em is None

    def test_recusa_mudanca_de_coluna_ou_ordem(self, servico, dono, projeto, criar_tarefa):
        tarefa = criar_tarefa(projeto, 'Tarefa')

        with pytest.raises(ErroValidacao):
            servico.atualizar(dono, tarefa.pk, {'column': 'done'})
        with pytest.raises(ErroValidacao):
            servico.atualizar(dono, tarefa.pk, {'order': 5})

        tarefa.refresh_from_db()
        assert (tarefa.coluna, tarefa.ordem) == ('todo', 0)

    def test_aceita_coluna_e_ordem_inalteradas(self, servico, dono, projeto, criar_tarefa):
        tarefa = criar_tarefa(projeto, 'Tarefa')

        atualizada = servico.atualizar(dono, tarefa.pk, {'title': 'Outra', 'column': 'todo', 'order': 0})

        assert atualizada.titulo == 'Outra'

    def test_publica_task_updated(self, servico, dono, projeto, criar_tarefa, transmissor_falso,
                                  django_capture_on_commit_callbacks):
        tarefa = criar_tarefa(projeto, 'Tarefa')

        with django_capture_on_commit_callbacks(execute=True):
            servico.atualizar(dono, tarefa.pk, {'priority': 'baixa'})

        evento = transmissor_falso.publicados[0][1]
        assert isinstance(evento, TarefaAtualizada)
        assert evento.tarefa['priority'] == 'baixa'

    def test_sem_acesso(self, servico, estranho, projeto, criar_tarefa):
        tarefa = criar_tarefa(projeto, 'Tarefa')

        with pytest.raises(AcessoNegado):
            servico.atualizar(estranho, tarefa.pk, {'title': 'Invasão'})


@pytest.mark.django_db
class TestRemoverTarefa:

    def test_remocao_compacta_a_coluna(self, servico, dono, projeto, quadro):
        servico.remover(dono, quadro['B'].pk)

        assert sequencia(projeto, 'todo') == [('A', 0), ('C', 1), ('D', 2)]
        assert sequencia(projeto, 'done') == [('X', 0), ('Y', 1)]

    def test_publica_task_deleted(self, servico, dono, projeto, quadro, transmissor_falso,
                                  django_capture_on_commit_callbacks):
        tarefa_id = quadro['A'].pk

        with django_capture_on_commit_callbacks(execute=True):
            servico.remover(dono, tarefa_id)

        evento = transmissor_falso.publicados[0][1]
        assert isinstance(evento, TarefaRemovida)
        assert evento.to_payload() == {'taskId': str(tarefa_id)}

    def test_tarefa_inexistente(self, servico, dono):
        with pytest.raises(TarefaNaoEncontrada):
            servico.remover(dono, 31337)

    def test_sem_acesso(self, servico, estranho, projeto, quadro):
        with pytest.raises(AcessoNegado):
            servico.remover(estranho, quadro['A'].pk)

        assert Tarefa.objects.filter(pk=quadro['A'].pk).exists()


@pytest.mark.django_db
class TestListarECompactar:

    def test_lista_na_ordem_das_colunas(self, servico, membro, projeto, criar_tarefa):
        criar_tarefa(projeto, 'Feita', coluna='done')
        criar_tarefa(projeto, 'Segunda', coluna='todo', ordem=1)
        criar_tarefa(projeto, 'Primeira', coluna='todo', ordem=0)
        criar_tarefa(projeto, 'Andamento', coluna='in-progress')

        tarefas = servico.listar(membro, projeto.pk)

        assert [t.titulo for t in tarefas] == ['Primeira', 'Segunda', 'Andamento', 'Feita']

    def test_listar_sem_acesso(self, servico, estranho, projeto):
        with pytest.raises(AcessoNegado):
            servico.listar(estranho, projeto.pk)

    def test_compactar_corrige_buracos_e_empates(self, servico, projeto, criar_tarefa):
        criar_tarefa(projeto, 'A', ordem=0)
        criar_tarefa(projeto, 'B', ordem=5)
        criar_tarefa(projeto, 'C', ordem=5)
        criar_tarefa(projeto, 'X', coluna='done', ordem=0)

        corrigidas = servico.compactar_projeto(projeto.pk)

        assert corrigidas == 2
        assert [ordem for _, ordem in sequencia(projeto, 'todo')] == [0, 1, 2]
        assert sequencia(projeto, 'done') == [('X', 0)]


@pytest.mark.django_db
class TestRepositorio:

    def test_maior_ordem(self, projeto, quadro):
        repositorio = RepositorioTarefas()

        assert repositorio.maior_ordem(projeto.pk, 'todo') == 3
        assert repositorio.maior_ordem(projeto.pk, 'done') == 1

    def test_maior_ordem_de_coluna_vazia(self, projeto, quadro):
        assert RepositorioTarefas().maior_ordem(projeto.pk, 'review') is None
