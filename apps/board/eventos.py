# apps/board/eventos.py

"""
Catálogo de eventos publicados na sala de cada projeto

Um tipo por evento, com esquema fixo. Cada evento carrega a entidade
completa (ou o id, nas remoções), então quem recebe sempre substitui por
id em vez de aplicar remendos. Também define a intenção de movimentação
enviada pelo cliente.
"""

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Optional

from apps.core.exceptions import ErroValidacao, EventoInvalido


def _exigir(payload, chave):
    if not isinstance(payload, dict) or chave not in payload:
        raise EventoInvalido(f"Campo obrigatório ausente: {chave}")
    return payload[chave]


def _exigir_objeto(payload, chave, identificador=None):
    """Campo que precisa ser um objeto (dict), opcionalmente com um id"""
    valor = _exigir(payload, chave)
    if not isinstance(valor, dict):
        raise EventoInvalido(f"Campo {chave} deve ser um objeto")
    if identificador and valor.get(identificador) in (None, ''):
        raise EventoInvalido(f"Campo {chave}.{identificador} ausente")
    return valor


@dataclass
class IntencaoMovimento:
    """Pedido de movimentação: {taskId, column, destinationIndex}"""

    tarefa_id: str
    coluna: str
    indice_destino: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            'taskId': str(self.tarefa_id),
            'column': self.coluna,
            'destinationIndex': self.indice_destino,
        }

    @classmethod
    def from_dict(cls, dados) -> 'IntencaoMovimento':
        if not isinstance(dados, dict):
            raise ErroValidacao('Corpo da requisição deve ser um objeto JSON')

        tarefa_id = dados.get('taskId')
        coluna = dados.get('column')
        indice = dados.get('destinationIndex', 0)

        if tarefa_id in (None, ''):
            raise ErroValidacao('taskId é obrigatório')
        if not isinstance(coluna, str) or not coluna.strip():
            raise ErroValidacao('column é obrigatório')
        if isinstance(indice, bool):
            raise ErroValidacao('destinationIndex deve ser um inteiro')
        try:
            indice = int(indice)
        except (TypeError, ValueError):
            raise ErroValidacao('destinationIndex deve ser um inteiro')

        return cls(tarefa_id=str(tarefa_id), coluna=coluna.strip(), indice_destino=indice)


class EventoProjeto:
    """Base dos eventos; `nome` é o tipo enviado ao cliente"""

    nome: ClassVar[str] = ''

    def to_payload(self) -> Dict[str, Any]:
        raise NotImplementedError

    @classmethod
    def from_payload(cls, payload) -> 'EventoProjeto':
        raise NotImplementedError

    @property
    def tarefa_id(self) -> Optional[str]:
        return None


@dataclass
class TarefaCriada(EventoProjeto):
    nome: ClassVar[str] = 'task-created'

    tarefa: Dict[str, Any]

    def to_payload(self):
        return {'task': self.tarefa}

    @classmethod
    def from_payload(cls, payload):
        return cls(tarefa=_exigir_objeto(payload, 'task', 'id'))

    @property
    def tarefa_id(self):
        return self.tarefa.get('id')


@dataclass
class TarefaAtualizada(EventoProjeto):
    nome: ClassVar[str] = 'task-updated'

    tarefa: Dict[str, Any]

    def to_payload(self):
        return {'task': self.tarefa}

    @classmethod
    def from_payload(cls, payload):
        return cls(tarefa=_exigir_objeto(payload, 'task', 'id'))

    @property
    def tarefa_id(self):
        return self.tarefa.get('id')


@dataclass
class TarefaRemovida(EventoProjeto):
    nome: ClassVar[str] = 'task-deleted'

    id_removida: str

    def to_payload(self):
        return {'taskId': self.id_removida}

    @classmethod
    def from_payload(cls, payload):
        return cls(id_removida=str(_exigir(payload, 'taskId')))

    @property
    def tarefa_id(self):
        return self.id_removida


@dataclass
class TarefaMovida(EventoProjeto):
    nome: ClassVar[str] = 'task-moved'

    tarefa: Dict[str, Any]
    coluna_anterior: str
    coluna_nova: str

    def to_payload(self):
        return {
            'task': self.tarefa,
            'oldColumn': self.coluna_anterior,
            'newColumn': self.coluna_nova,
        }

    @classmethod
    def from_payload(cls, payload):
        return cls(
            tarefa=_exigir_objeto(payload, 'task', 'id'),
            coluna_anterior=_exigir(payload, 'oldColumn'),
            coluna_nova=_exigir(payload, 'newColumn'),
        )

    @property
    def tarefa_id(self):
        return self.tarefa.get('id')


@dataclass
class ProjetoAtualizado(EventoProjeto):
    nome: ClassVar[str] = 'project-updated'

    projeto: Dict[str, Any]

    def to_payload(self):
        return {'project': self.projeto}

    @classmethod
    def from_payload(cls, payload):
        return cls(projeto=_exigir_objeto(payload, 'project', 'id'))


@dataclass
class ProjetoRemovido(EventoProjeto):
    nome: ClassVar[str] = 'project-deleted'

    projeto_id: str

    def to_payload(self):
        return {'projectId': self.projeto_id}

    @classmethod
    def from_payload(cls, payload):
        return cls(projeto_id=str(_exigir(payload, 'projectId')))


@dataclass
class MembroAdicionado(EventoProjeto):
    nome: ClassVar[str] = 'member-added'

    projeto: Dict[str, Any]
    membro: Dict[str, Any]

    def to_payload(self):
        return {'project': self.projeto, 'member': self.membro}

    @classmethod
    def from_payload(cls, payload):
        return cls(projeto=_exigir_objeto(payload, 'project', 'id'), membro=_exigir_objeto(payload, 'member'))


@dataclass
class MembroRemovido(EventoProjeto):
    nome: ClassVar[str] = 'member-removed'

    projeto: Dict[str, Any]
    usuario_id: str

    def to_payload(self):
        return {'project': self.projeto, 'userId': self.usuario_id}

    @classmethod
    def from_payload(cls, payload):
        return cls(projeto=_exigir_objeto(payload, 'project', 'id'), usuario_id=str(_exigir(payload, 'userId')))


EVENTOS = {
    classe.nome: classe
    for classe in (
        TarefaCriada, TarefaAtualizada, TarefaRemovida, TarefaMovida,
        ProjetoAtualizado, ProjetoRemovido, MembroAdicionado, MembroRemovido,
    )
}


def decodificar_evento(nome, payload) -> EventoProjeto:
    """Reconstrói o evento a partir do tipo e do payload recebidos"""
    classe = EVENTOS.get(nome)
    if classe is None:
        raise EventoInvalido(f"Evento desconhecido: {nome}")
    return classe.from_payload(payload)
