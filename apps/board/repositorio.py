# apps/board/repositorio.py

"""
Fronteira de persistência das tarefas

Todas as leituras por coluna devolvem as tarefas ordenadas por ordem,
com desempate estável por data de criação e id.
"""

from typing import Iterable, List

from django.utils import timezone

from apps.core.exceptions import ProjetoNaoEncontrado, TarefaNaoEncontrada
from apps.core.models import Projeto, Tarefa
from .ordenacao import RefTarefa


def para_ref(tarefa) -> RefTarefa:
    """Resumo da tarefa para o motor de ordenação"""
    return RefTarefa(tarefa.pk, tarefa.coluna, tarefa.ordem)


class RepositorioTarefas:
    """Acesso às tarefas no banco via ORM do Django"""

    ORDENACAO_COLUNA = ('ordem', 'criado_em', 'id')

    def buscar_por_id(self, tarefa_id, relacionados=False) -> Tarefa:
        """
        Busca tarefa pelo id

        Com relacionados=True já traz responsável, criador e projeto
        para serialização sem consultas extras.
        """
        queryset = Tarefa.objects.all()
        if relacionados:
            queryset = queryset.select_related('responsavel', 'criado_por', 'projeto')

        try:
            return queryset.get(pk=tarefa_id)
        except (Tarefa.DoesNotExist, ValueError, TypeError):
            raise TarefaNaoEncontrada()

    def buscar_por_coluna(self, projeto_id, coluna) -> List[Tarefa]:
        return list(
            Tarefa.objects
            .filter(projeto_id=projeto_id, coluna=coluna)
            .order_by(*self.ORDENACAO_COLUNA)
        )

    def buscar_por_projeto(self, projeto_id) -> List[Tarefa]:
        """Todas as tarefas do projeto, agrupadas por coluna e ordenadas"""
        return list(
            Tarefa.objects
            .filter(projeto_id=projeto_id)
            .select_related('responsavel', 'criado_por')
            .order_by('coluna', *self.ORDENACAO_COLUNA)
        )

    def maior_ordem(self, projeto_id, coluna):
        """Maior ordem da coluna, ou None se vazia"""
        ultima = (
            Tarefa.objects
            .filter(projeto_id=projeto_id, coluna=coluna)
            .order_by('-ordem')
            .values_list('ordem', flat=True)
            .first()
        )
        return ultima

    def bloquear_projeto(self, projeto_id) -> Projeto:
        """
        Trava a linha do projeto até o fim da transação

        Serializa movimentações, criações e remoções do mesmo projeto.
        Deve ser chamado dentro de transaction.atomic().
        """
        try:
            return Projeto.objects.select_for_update().get(pk=projeto_id)
        except Projeto.DoesNotExist:
            raise ProjetoNaoEncontrado()

    def salvar(self, tarefa) -> Tarefa:
        tarefa.save()
        return tarefa

    def salvar_em_lote(self, tarefas: Iterable[Tarefa]) -> int:
        """Grava coluna e ordem de várias tarefas de uma vez"""
        tarefas = list(tarefas)
        if not tarefas:
            return 0

        agora = timezone.now()
        for tarefa in tarefas:
            tarefa.atualizado_em = agora

        return Tarefa.objects.bulk_update(tarefas, ['coluna', 'ordem', 'atualizado_em'])

    def remover_por_id(self, tarefa_id) -> None:
        removidas, _ = Tarefa.objects.filter(pk=tarefa_id).delete()
        if not removidas:
            raise TarefaNaoEncontrada()
