# apps/board/cliente/estado.py

"""
Estado otimista das tarefas do projeto aberto no cliente

O cliente aplica a movimentação localmente (mesmo motor de ordenação do
servidor) antes da resposta chegar. Se a requisição falhar, o instantâneo
tirado antes da movimentação restaura TODAS as tarefas das colunas
afetadas. Eventos recebidos pela sala do projeto substituem as tarefas
por id; aplicar o mesmo evento duas vezes tem o mesmo efeito que uma.
"""

import copy
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from apps.core.exceptions import EventoInvalido, TarefaNaoEncontrada
from ..eventos import (
    EventoProjeto,
    MembroAdicionado,
    MembroRemovido,
    ProjetoAtualizado,
    ProjetoRemovido,
    TarefaAtualizada,
    TarefaCriada,
    TarefaMovida,
    TarefaRemovida,
    decodificar_evento,
)
from ..ordenacao import RefTarefa, calcular_compactacao, calcular_reordenacao

logger = logging.getLogger(__name__)

# Mensagens de controle da sala que não alteram tarefas
MENSAGENS_CONTROLE = {'pong', 'joined-project', 'left-project', 'error'}


@dataclass
class Instantaneo:
    """Cópia das tarefas das colunas afetadas, tirada antes da movimentação"""

    colunas: tuple
    tarefas: Dict[str, Dict[str, Any]] = field(default_factory=dict)


class EstadoQuadro:
    """Tarefas do projeto aberto, indexadas por id (str)"""

    def __init__(self, projeto_id=None, tarefas: Iterable[Dict[str, Any]] = ()):
        self.projeto_id = str(projeto_id) if projeto_id is not None else None
        self.projeto: Optional[Dict[str, Any]] = None
        self.tarefas: Dict[str, Dict[str, Any]] = {}
        self.carregar(tarefas)

    # === Leitura ===

    def carregar(self, tarefas: Iterable[Dict[str, Any]]):
        """Substitui todo o estado (carga inicial ou ressincronização)"""
        self.tarefas = {}
        for tarefa in tarefas:
            if not isinstance(tarefa, dict) or tarefa.get('id') in (None, ''):
                logger.warning(f"⚠️ Tarefa ignorada na carga: {tarefa!r}")
                continue
            if self._pertence_ao_projeto(tarefa):
                self.tarefas[str(tarefa['id'])] = copy.deepcopy(tarefa)

    def obter(self, tarefa_id) -> Optional[Dict[str, Any]]:
        return self.tarefas.get(str(tarefa_id))

    def tarefas_da_coluna(self, coluna) -> List[Dict[str, Any]]:
        """Tarefas da coluna ordenadas por ordem (desempate: criação e id)"""
        return sorted(
            (t for t in self.tarefas.values() if t.get('column') == coluna),
            key=lambda t: (t.get('order', 0), t.get('createdAt') or '', t['id'])
        )

    def colunas(self) -> Dict[str, List[Dict[str, Any]]]:
        agrupadas: Dict[str, List[Dict[str, Any]]] = {}
        for coluna in {t.get('column') for t in self.tarefas.values()}:
            agrupadas[coluna] = self.tarefas_da_coluna(coluna)
        return agrupadas

    # === Movimentação otimista ===

    def mover_otimista(self, tarefa_id, coluna, indice) -> Instantaneo:
        """
        Aplica a movimentação localmente e devolve o instantâneo para reverter

        Levanta TarefaNaoEncontrada se a tarefa não está no estado.
        """
        tarefa_id = str(tarefa_id)
        tarefa = self.tarefas.get(tarefa_id)
        if tarefa is None:
            raise TarefaNaoEncontrada()

        instantaneo = self.instantaneo(tarefa['column'], coluna)
        self._reposicionar(tarefa_id, coluna, indice)
        return instantaneo

    def instantaneo(self, *colunas) -> Instantaneo:
        afetadas = tuple(dict.fromkeys(colunas))
        return Instantaneo(
            colunas=afetadas,
            tarefas={
                tarefa_id: copy.deepcopy(tarefa)
                for tarefa_id, tarefa in self.tarefas.items()
                if tarefa.get('column') in afetadas
            }
        )

    def reverter(self, instantaneo: Instantaneo):
        """Restaura todas as tarefas do instantâneo (movida e irmãs)"""
        for tarefa_id, tarefa in instantaneo.tarefas.items():
            self.tarefas[tarefa_id] = copy.deepcopy(tarefa)
        logger.info(f"↩️ Movimentação revertida em {', '.join(instantaneo.colunas)}")

    # === Reconciliação ===

    def aplicar_mensagem(self, mensagem: Dict[str, Any]) -> Optional[EventoProjeto]:
        """
        Aplica uma mensagem da sala {type, message}

        Mensagens de controle são ignoradas; project-sync recarrega tudo.
        """
        if not isinstance(mensagem, dict):
            logger.warning(f"⚠️ Mensagem ignorada: {mensagem!r}")
            return None

        tipo = mensagem.get('type')
        conteudo = mensagem.get('message') or {}

        if tipo in MENSAGENS_CONTROLE:
            return None

        if not isinstance(conteudo, dict):
            logger.warning(f"⚠️ Mensagem ignorada ({tipo}): conteúdo não é um objeto")
            return None

        if tipo == 'project-sync':
            tarefas = conteudo.get('tasks') or []
            if not isinstance(tarefas, list):
                logger.warning("⚠️ project-sync ignorado: tasks não é uma lista")
                return None
            if self.projeto_id is None or str(conteudo.get('projectId')) == self.projeto_id:
                self.carregar(tarefas)
            return None

        try:
            evento = decodificar_evento(tipo, conteudo)
        except EventoInvalido as erro:
            logger.warning(f"⚠️ Mensagem ignorada ({tipo}): {erro.mensagem}")
            return None

        self.aplicar_evento(evento)
        return evento

    def aplicar_evento(self, evento: EventoProjeto):
        """Substitui por id; idempotente"""
        if isinstance(evento, (TarefaCriada, TarefaAtualizada)):
            if self._pertence_ao_projeto(evento.tarefa):
                self.tarefas[str(evento.tarefa['id'])] = copy.deepcopy(evento.tarefa)

        elif isinstance(evento, TarefaMovida):
            self._aplicar_movimento(evento)

        elif isinstance(evento, TarefaRemovida):
            self._remover(evento.id_removida)

        elif isinstance(evento, (ProjetoAtualizado, MembroAdicionado, MembroRemovido)):
            if self._mesmo_projeto(evento.projeto.get('id')):
                self.projeto = copy.deepcopy(evento.projeto)

        elif isinstance(evento, ProjetoRemovido):
            if self._mesmo_projeto(evento.projeto_id):
                self.projeto = None
                self.tarefas = {}

    def _aplicar_movimento(self, evento: TarefaMovida):
        """
        Reposiciona as irmãs locais como o servidor fez e depois
        substitui a tarefa movida pela versão autoritativa
        """
        autoritativa = evento.tarefa
        if not self._pertence_ao_projeto(autoritativa):
            return

        tarefa_id = str(autoritativa['id'])
        if tarefa_id not in self.tarefas:
            # Tarefa desconhecida: entra no fim da coluna e é reposicionada abaixo
            nova = copy.deepcopy(autoritativa)
            nova['order'] = len(self.tarefas_da_coluna(evento.coluna_nova))
            self.tarefas[tarefa_id] = nova

        self._reposicionar(tarefa_id, evento.coluna_nova, autoritativa.get('order', 0))
        self.tarefas[tarefa_id] = copy.deepcopy(autoritativa)

    def _reposicionar(self, tarefa_id, coluna, indice):
        tarefa = self.tarefas[tarefa_id]
        origem = self.tarefas_da_coluna(tarefa['column'])
        destino = origem if tarefa['column'] == coluna else self.tarefas_da_coluna(coluna)

        plano = calcular_reordenacao(
            [self._ref(t) for t in origem],
            [self._ref(t) for t in destino],
            tarefa_id,
            coluna,
            indice
        )
        for atribuicao in plano.atribuicoes:
            local = self.tarefas[atribuicao.tarefa_id]
            local['column'] = atribuicao.coluna
            local['order'] = atribuicao.ordem

    def _remover(self, tarefa_id):
        tarefa = self.tarefas.pop(str(tarefa_id), None)
        if tarefa is None:
            return

        restantes = self.tarefas_da_coluna(tarefa['column'])
        plano = calcular_compactacao([self._ref(t) for t in restantes], coluna=tarefa['column'])
        for atribuicao in plano.atribuicoes:
            self.tarefas[atribuicao.tarefa_id]['order'] = atribuicao.ordem

    # === Auxiliares ===

    @staticmethod
    def _ref(tarefa) -> RefTarefa:
        return RefTarefa(str(tarefa['id']), tarefa.get('column'), tarefa.get('order', 0))

    def _mesmo_projeto(self, projeto_id) -> bool:
        return self.projeto_id is None or str(projeto_id) == self.projeto_id

    def _pertence_ao_projeto(self, tarefa) -> bool:
        return self._mesmo_projeto(tarefa.get('project'))
