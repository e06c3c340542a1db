# apps/board/ordenacao.py

"""
Motor de ordenação das tarefas do quadro

Lógica pura (sem banco, sem rede) usada tanto pelo servidor quanto pelo
cliente otimista. Recebe sequências de tarefas já ordenadas pela ordem
atual e devolve um plano de renumeração onde cada coluna afetada fica
com ordens 0..n-1, sem buracos nem empates.

Regras:
- Mesma coluna: remove a tarefa, reinsere no índice de destino e renumera.
- Entre colunas: fecha o buraco na origem e renumera o destino inteiro,
  incluindo a tarefa movida (que recebe ordem = índice de destino).
- Índices fora do intervalo são limitados, nunca rejeitados.
"""

from dataclasses import dataclass, field
from typing import Hashable, Iterable, List, NamedTuple, Optional, Sequence


class RefTarefa(NamedTuple):
    """Resumo mínimo de uma tarefa: identidade, coluna e ordem"""

    id: Hashable
    coluna: str
    ordem: int


@dataclass
class Atribuicao:
    """Nova posição de uma tarefa dentro do plano"""

    tarefa_id: Hashable
    coluna: str
    ordem: int


@dataclass
class PlanoRenumeracao:
    """
    Conjunto de atribuições (tarefa, coluna, ordem) de uma operação

    As atribuições de cada coluna aparecem na ordem final da coluna.
    """

    coluna_origem: Optional[str] = None
    coluna_destino: Optional[str] = None
    atribuicoes: List[Atribuicao] = field(default_factory=list)

    @property
    def vazio(self) -> bool:
        return not self.atribuicoes

    def para(self, tarefa_id) -> Optional[Atribuicao]:
        """Atribuição de uma tarefa específica, se fizer parte do plano"""
        for atribuicao in self.atribuicoes:
            if atribuicao.tarefa_id == tarefa_id:
                return atribuicao
        return None

    def sequencia(self, coluna: str) -> List[Atribuicao]:
        """Atribuições de uma coluna, na ordem final"""
        return [a for a in self.atribuicoes if a.coluna == coluna]

    def alteracoes(self, originais: Iterable[RefTarefa]) -> List[Atribuicao]:
        """
        Apenas as atribuições que mudam coluna ou ordem

        Persistir só essas é uma otimização; gravar o plano inteiro
        produz o mesmo resultado.
        """
        anteriores = {ref.id: ref for ref in originais}
        alteradas = []
        for atribuicao in self.atribuicoes:
            anterior = anteriores.get(atribuicao.tarefa_id)
            if anterior is None or (anterior.coluna, anterior.ordem) != (atribuicao.coluna, atribuicao.ordem):
                alteradas.append(atribuicao)
        return alteradas


def limitar_indice(indice, tamanho: int) -> int:
    """Limita o índice ao intervalo [0, tamanho]"""
    try:
        indice = int(indice)
    except (TypeError, ValueError):
        indice = tamanho
    return max(0, min(indice, tamanho))


def _renumerar(refs: Sequence[RefTarefa], coluna: str) -> List[Atribuicao]:
    return [Atribuicao(ref.id, coluna, posicao) for posicao, ref in enumerate(refs)]


def calcular_reordenacao(origem: Sequence[RefTarefa],
                         destino: Sequence[RefTarefa],
                         tarefa_id,
                         coluna_destino: str,
                         indice_destino) -> PlanoRenumeracao:
    """
    Calcula a renumeração para mover uma tarefa

    Args:
        origem: tarefas da coluna atual da tarefa, ordenadas
        destino: tarefas da coluna de destino, ordenadas (pode ser a mesma
            sequência da origem quando a movimentação é na mesma coluna)
        tarefa_id: tarefa sendo movida
        coluna_destino: chave da coluna de destino
        indice_destino: posição desejada após a movimentação

    Returns:
        PlanoRenumeracao com todas as tarefas das colunas afetadas
    """
    movida = next((ref for ref in origem if ref.id == tarefa_id), None)
    if movida is None:
        movida = next((ref for ref in destino if ref.id == tarefa_id), None)
    if movida is None:
        return PlanoRenumeracao(coluna_destino=coluna_destino)

    coluna_origem = movida.coluna

    if coluna_origem == coluna_destino:
        restantes = [ref for ref in origem if ref.id != tarefa_id]
        indice = limitar_indice(indice_destino, len(restantes))
        restantes.insert(indice, movida)
        return PlanoRenumeracao(
            coluna_origem=coluna_origem,
            coluna_destino=coluna_destino,
            atribuicoes=_renumerar(restantes, coluna_destino)
        )

    # Entre colunas: fecha o buraco na origem
    restantes_origem = [ref for ref in origem if ref.id != tarefa_id]

    # e abre espaço no destino
    novos_destino = [ref for ref in destino if ref.id != tarefa_id]
    indice = limitar_indice(indice_destino, len(novos_destino))
    novos_destino.insert(indice, movida._replace(coluna=coluna_destino))

    return PlanoRenumeracao(
        coluna_origem=coluna_origem,
        coluna_destino=coluna_destino,
        atribuicoes=_renumerar(restantes_origem, coluna_origem) + _renumerar(novos_destino, coluna_destino)
    )


def calcular_compactacao(tarefas_coluna: Sequence[RefTarefa],
                         tarefa_removida_id=None,
                         coluna: Optional[str] = None) -> PlanoRenumeracao:
    """
    Remove sem reinserir e renumera as restantes 0..n-1

    Sem tarefa_removida_id apenas recompacta a coluna (usado na manutenção).
    """
    if coluna is None and tarefas_coluna:
        coluna = tarefas_coluna[0].coluna

    restantes = [ref for ref in tarefas_coluna if ref.id != tarefa_removida_id]
    return PlanoRenumeracao(
        coluna_origem=coluna,
        coluna_destino=coluna,
        atribuicoes=_renumerar(restantes, coluna)
    )


def ordem_para_nova_tarefa(maior_ordem: Optional[int]) -> int:
    """Nova tarefa vai para o fim: maior ordem + 1, ou 0 com a coluna vazia (None)"""
    return 0 if maior_ordem is None else maior_ordem + 1
