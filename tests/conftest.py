"""
Fixtures compartilhadas dos testes do Raia Board.
"""

import pytest

from apps.core.models import MembroProjeto, Projeto, Tarefa, Usuario
from tests.auxiliares import TransmissorFalso


@pytest.fixture(autouse=True)
def transmissor_sinais(monkeypatch):
    """Eventos de projeto/membro publicados pelos sinais"""
    falso = TransmissorFalso()
    monkeypatch.setattr('apps.board.signals.transmissor', falso)
    return falso


@pytest.fixture
def transmissor_falso():
    return TransmissorFalso()


@pytest.fixture
def dono(db):
    return Usuario.objects.create_user('ana', 'ana@raia.dev', 'senha123')


@pytest.fixture
def membro(db):
    return Usuario.objects.create_user('bruno', 'bruno@raia.dev', 'senha123')


@pytest.fixture
def estranho(db):
    return Usuario.objects.create_user('carla', 'carla@raia.dev', 'senha123')


@pytest.fixture
def projeto(dono, membro):
    """Projeto com as colunas padrão; dono e membro participam"""
    projeto = Projeto.objects.create(titulo='Lançamento', dono=dono)
    MembroProjeto.objects.create(projeto=projeto, usuario=membro)
    return projeto


@pytest.fixture
def criar_tarefa(dono):
    """Cria tarefa direto no banco, com coluna e ordem explícitas"""

    def _criar(projeto, titulo, coluna='todo', ordem=None, **campos):
        if ordem is None:
            ordem = Tarefa.objects.filter(projeto=projeto, coluna=coluna).count()
        return Tarefa.objects.create(
            projeto=projeto,
            titulo=titulo,
            coluna=coluna,
            ordem=ordem,
            criado_por=campos.pop('criado_por', dono),
            **campos
        )

    return _criar

