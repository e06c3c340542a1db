# apps/board/services.py

"""
Serviços do quadro - únicos caminhos que gravam coluna e ordem

- CoordenadorMovimento: movimentação de tarefas (arrastar e soltar)
- ServicoTarefas: criação, edição, remoção e listagem

Cada operação que renumera uma coluna roda em uma única transação com a
linha do projeto travada, então uma falha no meio da renumeração desfaz
todas as gravações e movimentações concorrentes no mesmo projeto são
serializadas. O evento é publicado somente após o commit.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from django.db import DatabaseError, transaction

from apps.core.exceptions import AcessoNegado, ColunaInvalida, ErroValidacao, FalhaArmazenamento
from apps.core.forms import TarefaEdicaoForm, TarefaForm, dados_api_para_form
from apps.core.models import Tarefa
from apps.core.permissions import RaiaPermissions, carregar_projeto_acessivel
from .eventos import EventoProjeto, TarefaAtualizada, TarefaCriada, TarefaMovida, TarefaRemovida
from .ordenacao import calcular_compactacao, calcular_reordenacao, ordem_para_nova_tarefa
from .repositorio import RepositorioTarefas, para_ref
from .serializers import serializar_tarefa
from .transmissor import transmissor as transmissor_padrao

logger = logging.getLogger(__name__)


@dataclass
class ResultadoMovimento:
    """Tarefa movida (com responsável e criador) e irmãs renumeradas"""

    tarefa: Tarefa
    coluna_anterior: str
    coluna_nova: str
    irmas: List[Tarefa] = field(default_factory=list)
    evento: Optional[TarefaMovida] = None


class _ServicoBase:

    def __init__(self, repositorio=None, transmissor=None, autorizacao=None):
        self.repositorio = repositorio or RepositorioTarefas()
        self.transmissor = transmissor or transmissor_padrao
        self.autorizacao = autorizacao or RaiaPermissions

    def _publicar_apos_commit(self, projeto_id, evento: EventoProjeto):
        transaction.on_commit(lambda: self.transmissor.publicar(projeto_id, evento))

    def _aplicar_plano(self, plano, tarefas) -> List[Tarefa]:
        """Copia as alterações do plano para os objetos e devolve os modificados"""
        por_id = {tarefa.pk: tarefa for tarefa in tarefas}
        modificadas = []
        for atribuicao in plano.alteracoes(para_ref(t) for t in por_id.values()):
            tarefa = por_id[atribuicao.tarefa_id]
            tarefa.coluna = atribuicao.coluna
            tarefa.ordem = atribuicao.ordem
            modificadas.append(tarefa)
        return modificadas


class CoordenadorMovimento(_ServicoBase):
    """Orquestra uma movimentação: carrega, ordena, grava e publica"""

    def mover(self, usuario, tarefa_id, coluna_destino, indice_destino) -> ResultadoMovimento:
        """
        Move a tarefa para (coluna_destino, indice_destino)

        Levanta TarefaNaoEncontrada, AcessoNegado ou ColunaInvalida antes de
        qualquer gravação, e FalhaArmazenamento se o banco falhar (nesse caso
        nada fica gravado).
        """
        tarefa = self.repositorio.buscar_por_id(tarefa_id)
        projeto = tarefa.projeto

        if not self.autorizacao.tem_acesso_projeto(usuario, projeto):
            raise AcessoNegado('Acesso negado a esta tarefa')

        if not projeto.coluna_valida(coluna_destino):
            raise ColunaInvalida(f"Coluna '{coluna_destino}' não existe neste projeto")

        try:
            with transaction.atomic():
                self.repositorio.bloquear_projeto(projeto.pk)

                # Relê dentro da trava: outra movimentação pode ter mudado a coluna
                tarefa = self.repositorio.buscar_por_id(tarefa.pk)
                coluna_anterior = tarefa.coluna

                origem = self.repositorio.buscar_por_coluna(projeto.pk, coluna_anterior)
                if coluna_anterior == coluna_destino:
                    destino = origem
                else:
                    destino = self.repositorio.buscar_por_coluna(projeto.pk, coluna_destino)

                plano = calcular_reordenacao(
                    [para_ref(t) for t in origem],
                    [para_ref(t) for t in destino],
                    tarefa.pk,
                    coluna_destino,
                    indice_destino
                )

                modificadas = self._aplicar_plano(plano, origem + destino)
                self.repositorio.salvar_em_lote(modificadas)

                atualizada = self.repositorio.buscar_por_id(tarefa.pk, relacionados=True)
                evento = TarefaMovida(
                    tarefa=serializar_tarefa(atualizada),
                    coluna_anterior=coluna_anterior,
                    coluna_nova=coluna_destino
                )
                self._publicar_apos_commit(projeto.pk, evento)

        except DatabaseError as exc:
            logger.error(f"❌ Falha ao gravar movimentação da tarefa {tarefa_id}: {exc}")
            raise FalhaArmazenamento('Falha ao gravar a movimentação da tarefa') from exc

        logger.info(
            f"🔀 Tarefa {atualizada.pk} movida de '{coluna_anterior}' para "
            f"'{coluna_destino}'#{atualizada.ordem} por {usuario.username} "
            f"({len(modificadas)} tarefa(s) renumerada(s))"
        )

        return ResultadoMovimento(
            tarefa=atualizada,
            coluna_anterior=coluna_anterior,
            coluna_nova=coluna_destino,
            irmas=[t for t in modificadas if t.pk != atualizada.pk],
            evento=evento
        )


class ServicoTarefas(_ServicoBase):
    """Criação, edição, remoção e listagem de tarefas"""

    def listar(self, usuario, projeto_id) -> List[Tarefa]:
        """Tarefas do projeto na ordem das colunas e, dentro delas, pela ordem"""
        projeto = carregar_projeto_acessivel(usuario, projeto_id)
        posicao_coluna = {chave: idx for idx, chave in enumerate(projeto.chaves_colunas())}
        tarefas = self.repositorio.buscar_por_projeto(projeto.pk)
        return sorted(
            tarefas,
            key=lambda t: (posicao_coluna.get(t.coluna, len(posicao_coluna)), t.coluna, t.ordem)
        )

    def obter(self, usuario, tarefa_id) -> Tarefa:
        tarefa = self.repositorio.buscar_por_id(tarefa_id, relacionados=True)
        self.autorizacao.exigir_acesso_projeto(usuario, tarefa.projeto)
        return tarefa

    def criar(self, usuario, projeto_id, dados) -> Tarefa:
        """Cria a tarefa no fim da coluna (primeira coluna do projeto se omitida)"""
        projeto = carregar_projeto_acessivel(usuario, projeto_id)

        coluna = dados.get('column') or next(iter(projeto.chaves_colunas()), 'todo')
        if not projeto.coluna_valida(coluna):
            raise ColunaInvalida(f"Coluna '{coluna}' não existe neste projeto")

        form = TarefaForm(dados_api_para_form(dados), projeto=projeto)
        if not form.is_valid():
            raise ErroValidacao(form.primeiro_erro())

        try:
            with transaction.atomic():
                self.repositorio.bloquear_projeto(projeto.pk)

                tarefa = form.save(commit=False)
                tarefa.projeto = projeto
                tarefa.criado_por = usuario
                tarefa.coluna = coluna
                tarefa.ordem = ordem_para_nova_tarefa(self.repositorio.maior_ordem(projeto.pk, coluna))
                self.repositorio.salvar(tarefa)

                tarefa = self.repositorio.buscar_por_id(tarefa.pk, relacionados=True)
                self._publicar_apos_commit(projeto.pk, TarefaCriada(tarefa=serializar_tarefa(tarefa)))

        except DatabaseError as exc:
            logger.error(f"❌ Falha ao criar tarefa no projeto {projeto.pk}: {exc}")
            raise FalhaArmazenamento('Falha ao criar a tarefa') from exc

        logger.info(f"✅ Tarefa {tarefa.pk} criada em '{coluna}'#{tarefa.ordem} por {usuario.username}")
        return tarefa

    def atualizar(self, usuario, tarefa_id, dados) -> Tarefa:
        """
        Atualiza campos descritivos

        Coluna e ordem só mudam pela movimentação.
        """
        tarefa = self.obter(usuario, tarefa_id)

        if 'order' in dados and dados['order'] != tarefa.ordem:
            raise ErroValidacao('Use a movimentação para alterar a ordem da tarefa')
        if 'column' in dados and dados['column'] != tarefa.coluna:
            raise ErroValidacao('Use a movimentação para alterar a coluna da tarefa')

        form = TarefaEdicaoForm(dados_api_para_form(dados), instance=tarefa, projeto=tarefa.projeto)
        if not form.is_valid():
            raise ErroValidacao(form.primeiro_erro())

        try:
            tarefa = form.save()
        except DatabaseError as exc:
            logger.error(f"❌ Falha ao atualizar tarefa {tarefa_id}: {exc}")
            raise FalhaArmazenamento('Falha ao atualizar a tarefa') from exc

        tarefa = self.repositorio.buscar_por_id(tarefa.pk, relacionados=True)
        self._publicar_apos_commit(tarefa.projeto_id, TarefaAtualizada(tarefa=serializar_tarefa(tarefa)))
        return tarefa

    def remover(self, usuario, tarefa_id) -> None:
        """Remove a tarefa e compacta a coluna"""
        tarefa = self.repositorio.buscar_por_id(tarefa_id)
        self.autorizacao.exigir_acesso_projeto(usuario, tarefa.projeto)
        projeto_id = tarefa.projeto_id

        try:
            with transaction.atomic():
                self.repositorio.bloquear_projeto(projeto_id)

                tarefa = self.repositorio.buscar_por_id(tarefa.pk)
                coluna = tarefa.coluna
                self.repositorio.remover_por_id(tarefa.pk)

                restantes = self.repositorio.buscar_por_coluna(projeto_id, coluna)
                plano = calcular_compactacao([para_ref(t) for t in restantes], coluna=coluna)
                self.repositorio.salvar_em_lote(self._aplicar_plano(plano, restantes))

                self._publicar_apos_commit(projeto_id, TarefaRemovida(id_removida=str(tarefa_id)))

        except DatabaseError as exc:
            logger.error(f"❌ Falha ao remover tarefa {tarefa_id}: {exc}")
            raise FalhaArmazenamento('Falha ao remover a tarefa') from exc

        logger.info(f"🗑️ Tarefa {tarefa_id} removida de '{coluna}' por {usuario.username}")

    def compactar_projeto(self, projeto_id) -> int:
        """
        Renumera 0..n-1 todas as colunas do projeto (manutenção)

        Retorna quantas tarefas tiveram a ordem corrigida. Não publica
        eventos; clientes abertos corrigem na próxima sincronização.
        """
        with transaction.atomic():
            self.repositorio.bloquear_projeto(projeto_id)

            por_coluna = {}
            for tarefa in self.repositorio.buscar_por_projeto(projeto_id):
                por_coluna.setdefault(tarefa.coluna, []).append(tarefa)

            corrigidas = []
            for coluna, tarefas in por_coluna.items():
                plano = calcular_compactacao([para_ref(t) for t in tarefas], coluna=coluna)
                corrigidas.extend(self._aplicar_plano(plano, tarefas))

            self.repositorio.salvar_em_lote(corrigidas)

        if corrigidas:
            logger.info(f"🧹 Projeto {projeto_id}: {len(corrigidas)} tarefa(s) renumerada(s)")
        return len(corrigidas)


# Instâncias globais dos serviços
coordenador_movimento = CoordenadorMovimento()
servico_tarefas = ServicoTarefas()
