# apps/board/cliente/api.py

"""
Transporte HTTP do cliente do quadro

Fluxo de uma movimentação:
1. aplica a movimentação no estado local (otimista)
2. envia {taskId, column, destinationIndex} para a API
3. em qualquer falha restaura o instantâneo e devolve o erro
   (sem exceção: a falha é apenas informada à interface)

No sucesso nada é corrigido aqui; o evento task-moved recebido pela sala
do projeto é a fonte da verdade.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx

from apps.core.exceptions import TarefaNaoEncontrada
from ..eventos import EventoProjeto, IntencaoMovimento
from .estado import EstadoQuadro

logger = logging.getLogger(__name__)


@dataclass
class ResultadoRequisicao:
    """Resultado não bloqueante de uma chamada à API"""

    sucesso: bool
    dados: Optional[Dict[str, Any]] = None
    mensagem: Optional[str] = None
    status: Optional[int] = None


class ClienteQuadro:
    """Cliente assíncrono da API do quadro para um projeto"""

    ROTA_MOVER = '/api/tarefas/mover/'
    ROTA_TAREFAS_PROJETO = '/api/projetos/{projeto_id}/tarefas/'

    def __init__(self,
                 base_url: str,
                 projeto_id,
                 estado: Optional[EstadoQuadro] = None,
                 timeout: float = 10.0,
                 http: Optional[httpx.AsyncClient] = None,
                 **http_kwargs):
        self.base_url = base_url.rstrip('/')
        self.projeto_id = str(projeto_id)
        self.estado = estado or EstadoQuadro(projeto_id=self.projeto_id)
        self.http = http or httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout, connect=min(timeout, 5.0)),
            **http_kwargs
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.fechar()

    async def fechar(self):
        await self.http.aclose()

    async def carregar_tarefas(self) -> List[Dict[str, Any]]:
        """Busca as tarefas do projeto e substitui o estado local"""
        resposta = await self.http.get(self.ROTA_TAREFAS_PROJETO.format(projeto_id=self.projeto_id))
        resposta.raise_for_status()

        tarefas = resposta.json()['data']['tasks']
        self.estado.carregar(tarefas)
        logger.info(f"📥 {len(tarefas)} tarefa(s) carregada(s) do projeto {self.projeto_id}")
        return tarefas

    async def mover_tarefa(self, tarefa_id, coluna, indice_destino) -> ResultadoRequisicao:
        """
        Movimentação otimista com reversão em caso de falha

        Erros de transporte, status fora de 2xx e {success: false}
        restauram todas as tarefas das colunas afetadas.
        """
        try:
            instantaneo = self.estado.mover_otimista(tarefa_id, coluna, indice_destino)
        except TarefaNaoEncontrada as erro:
            logger.warning(f"⚠️ Tarefa {tarefa_id} não está no quadro local")
            return ResultadoRequisicao(sucesso=False, mensagem=erro.mensagem)

        intencao = IntencaoMovimento(tarefa_id=str(tarefa_id), coluna=coluna, indice_destino=indice_destino)

        try:
            resposta = await self.http.put(self.ROTA_MOVER, json=intencao.to_dict())
        except httpx.HTTPError as exc:
            self.estado.reverter(instantaneo)
            logger.warning(f"⚠️ Falha de rede ao mover tarefa {tarefa_id}: {exc}")
            return ResultadoRequisicao(sucesso=False, mensagem='Falha de comunicação com o servidor')

        corpo = self._ler_corpo(resposta)
        if resposta.is_success and corpo.get('success'):
            return ResultadoRequisicao(sucesso=True, dados=corpo.get('data'), status=resposta.status_code)

        self.estado.reverter(instantaneo)
        mensagem = corpo.get('message') or f'Erro {resposta.status_code} ao mover tarefa'
        logger.warning(f"⚠️ Movimentação da tarefa {tarefa_id} recusada: {mensagem}")
        return ResultadoRequisicao(sucesso=False, mensagem=mensagem, status=resposta.status_code)

    def receber_mensagem(self, mensagem: Dict[str, Any]) -> Optional[EventoProjeto]:
        """Entrada das mensagens da sala do projeto (WebSocket)"""
        return self.estado.aplicar_mensagem(mensagem)

    @staticmethod
    def _ler_corpo(resposta: httpx.Response) -> Dict[str, Any]:
        try:
            corpo = resposta.json()
        except ValueError:
            return {}
        return corpo if isinstance(corpo, dict) else {}
