# apps/core/admin.py

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.html import format_html

from .models import Coluna, MembroProjeto, Projeto, Tarefa, Usuario


@admin.register(Usuario)
class UsuarioAdmin(BaseUserAdmin):
    """Admin customizado para o modelo Usuario"""

    list_display = [
        'username', 'email', 'get_full_name', 'is_active', 'date_joined'
    ]
    list_filter = ['is_staff', 'is_active', 'date_joined']
    search_fields = ['username', 'first_name', 'last_name', 'email']
    ordering = ['-date_joined']


class MembroProjetoInline(admin.TabularInline):
    """Inline para membros do projeto"""
    model = MembroProjeto
    extra = 0
    fields = ['usuario', 'papel', 'entrou_em']
    readonly_fields = ['entrou_em']


class ColunaInline(admin.TabularInline):
    """Inline para colunas do projeto"""
    model = Coluna
    extra = 0
    fields = ['chave', 'titulo', 'ordem', 'cor']
    ordering = ['ordem']


@admin.register(Projeto)
class ProjetoAdmin(admin.ModelAdmin):
    """Admin para gerenciamento de projetos e membros"""

    list_display = [
        'titulo', 'dono', 'membros_count', 'tarefas_count',
        'cor_preview', 'arquivado', 'criado_em'
    ]
    list_filter = ['arquivado', 'criado_em']
    search_fields = ['titulo', 'descricao', 'dono__username']
    readonly_fields = ['criado_em', 'atualizado_em']
    inlines = [MembroProjetoInline, ColunaInline]

    fieldsets = (
        ('Informações Básicas', {
            'fields': ('titulo', 'descricao', 'cor', 'arquivado')
        }),
        ('Equipe', {
            'fields': ('dono',)
        }),
        ('Datas', {
            'fields': ('criado_em', 'atualizado_em'),
            'classes': ('collapse',)
        })
    )

    def membros_count(self, obj):
        """Conta quantidade de membros"""
        return obj.participacoes.count()

    membros_count.short_description = 'Membros'

    def tarefas_count(self, obj):
        """Conta tarefas do projeto"""
        return obj.tarefas.count()

    tarefas_count.short_description = 'Tarefas'

    def cor_preview(self, obj):
        """Preview da cor do projeto"""
        return format_html(
            '<div style="width: 20px; height: 20px; background-color: {}; '
            'border: 1px solid #ccc; border-radius: 3px;"></div>',
            obj.cor
        )

    cor_preview.short_description = 'Cor'


@admin.register(Tarefa)
class TarefaAdmin(admin.ModelAdmin):
    """
    Admin para tarefas

    Coluna e ordem são somente leitura: criação, movimentação e remoção
    passam pelos serviços do board para manter a numeração densa.
    """

    list_display = [
        'titulo', 'projeto', 'coluna', 'ordem', 'responsavel',
        'prioridade', 'status', 'prazo'
    ]
    list_filter = ['projeto', 'coluna', 'prioridade', 'status']
    search_fields = ['titulo', 'descricao', 'projeto__titulo']
    ordering = ['projeto', 'coluna', 'ordem']
    readonly_fields = ['projeto', 'coluna', 'ordem', 'criado_por', 'concluida_em', 'criado_em', 'atualizado_em']

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
