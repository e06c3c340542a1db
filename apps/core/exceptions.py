# apps/core/exceptions.py

"""
Erros de domínio do Raia Board

Cada erro carrega o status HTTP equivalente para que as views
possam responder no formato {success: false, message}.
"""


class ErroQuadro(Exception):
    """Erro base do quadro"""

    status = 500
    mensagem_padrao = 'Erro interno do quadro'

    def __init__(self, mensagem=None):
        self.mensagem = mensagem or self.mensagem_padrao
        super().__init__(self.mensagem)

    def para_resposta(self):
        """Corpo JSON padrão de falha"""
        return {'success': False, 'message': self.mensagem}


class NaoEncontrado(ErroQuadro):
    status = 404
    mensagem_padrao = 'Recurso não encontrado'


class TarefaNaoEncontrada(NaoEncontrado):
    mensagem_padrao = 'Tarefa não encontrada'


class ProjetoNaoEncontrado(NaoEncontrado):
    mensagem_padrao = 'Projeto não encontrado'


class AcessoNegado(ErroQuadro):
    status = 403
    mensagem_padrao = 'Acesso negado a este projeto'


class ErroValidacao(ErroQuadro):
    status = 400
    mensagem_padrao = 'Dados inválidos'


class ColunaInvalida(ErroValidacao):
    mensagem_padrao = 'Coluna inválida para este projeto'


class EventoInvalido(ErroValidacao):
    mensagem_padrao = 'Evento desconhecido ou incompleto'


class FalhaArmazenamento(ErroQuadro):
    """Falha de I/O no banco durante movimentação ou renumeração"""

    status = 500
    mensagem_padrao = 'Falha ao gravar tarefas'
