# apps/core/forms.py

from django import forms
from django.core.exceptions import ValidationError

from .models import Tarefa, Usuario


# Nomes de campos usados na API (JSON) -> campos do modelo
CAMPOS_API_TAREFA = {
    'title': 'titulo',
    'description': 'descricao',
    'assignee': 'responsavel',
    'priority': 'prioridade',
    'status': 'status',
    'dueDate': 'prazo',
    'tags': 'tags',
}


def dados_api_para_form(dados):
    """Converte o corpo JSON da API para os nomes de campos do formulário"""
    convertidos = {}
    for campo_api, campo_modelo in CAMPOS_API_TAREFA.items():
        if campo_api in dados:
            valor = dados[campo_api]
            if isinstance(valor, str):
                valor = valor.strip()
            convertidos[campo_modelo] = valor
    return convertidos


class TarefaForm(forms.ModelForm):
    """
    Formulário base de tarefas

    Não expõe coluna nem ordem: esses campos pertencem aos serviços
    de movimentação, criação e remoção.
    """

    class Meta:
        model = Tarefa
        fields = ['titulo', 'descricao', 'responsavel', 'prioridade', 'status', 'prazo', 'tags']

    def __init__(self, *args, projeto=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.projeto = projeto
        self.fields['responsavel'].queryset = Usuario.objects.filter(is_active=True)
        for campo in ('responsavel', 'tags', 'prioridade', 'status'):
            self.fields[campo].required = False

    def clean_titulo(self):
        titulo = (self.cleaned_data.get('titulo') or '').strip()
        if not titulo:
            raise ValidationError('Título da tarefa é obrigatório')
        return titulo

    def clean_tags(self):
        tags = self.cleaned_data.get('tags') or []
        if not isinstance(tags, list) or not all(isinstance(tag, str) for tag in tags):
            raise ValidationError('Tags devem ser uma lista de textos')
        return [tag.strip() for tag in tags if tag.strip()]

    def clean_prioridade(self):
        return self.cleaned_data.get('prioridade') or 'media'

    def clean_status(self):
        return self.cleaned_data.get('status') or 'ativa'

    def clean_responsavel(self):
        """Responsável precisa participar do projeto"""
        responsavel = self.cleaned_data.get('responsavel')
        if responsavel and self.projeto and not self.projeto.tem_acesso(responsavel):
            raise ValidationError('Responsável precisa ser membro do projeto')
        return responsavel

    def primeiro_erro(self):
        """Mensagem única para respostas {success: false, message}"""
        for campo, erros in self.errors.items():
            if erros:
                return erros[0] if campo == '__all__' else f"{campo}: {erros[0]}"
        return 'Dados inválidos'


class TarefaEdicaoForm(TarefaForm):
    """Edição parcial: campos ausentes mantêm o valor atual"""

    def __init__(self, dados, *args, instance=None, **kwargs):
        iniciais = {
            'titulo': instance.titulo,
            'descricao': instance.descricao,
            'responsavel': instance.responsavel_id,
            'prioridade': instance.prioridade,
            'status': instance.status,
            'prazo': instance.prazo,
            'tags': instance.tags,
        }
        iniciais.update(dados)
        super().__init__(iniciais, *args, instance=instance, **kwargs)
