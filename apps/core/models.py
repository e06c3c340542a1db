# apps/core/models.py

from django.conf import settings
from django.contrib.auth.models import AbstractUser
from django.db import models
from django.db.models import Q
from django.utils import timezone


class Usuario(AbstractUser):
    """
    Modelo de usuário customizado

    O acesso a projetos é derivado do dono e da lista de membros
    de cada projeto.
    """

    # === METADADOS ===
    criado_em = models.DateTimeField(auto_now_add=True)
    atualizado_em = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'usuario'

    def pode_acessar_projeto(self, projeto):
        """Dono ou membro do projeto"""
        return projeto.tem_acesso(self)

    def get_projetos_acessiveis(self):
        """
        Retorna projetos que o usuário pode acessar

        Inclui projetos criados por ele e projetos onde participa.
        """
        return Projeto.objects.filter(
            Q(dono=self) | Q(participacoes__usuario=self),
            arquivado=False
        ).distinct()

    def __str__(self):
        return self.get_full_name() or self.username


class Projeto(models.Model):
    """Projeto - dono das colunas e tarefas do quadro"""

    titulo = models.CharField(max_length=100)
    descricao = models.TextField(blank=True, max_length=500)
    dono = models.ForeignKey(
        Usuario,
        on_delete=models.PROTECT,
        related_name='projetos_criados'
    )
    membros = models.ManyToManyField(
        Usuario,
        through='MembroProjeto',
        related_name='projetos_membro'
    )
    cor = models.CharField(max_length=7, default='#5865f2')
    arquivado = models.BooleanField(default=False)
    criado_em = models.DateTimeField(auto_now_add=True)
    atualizado_em = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'projeto'
        ordering = ['-criado_em']

    def __str__(self):
        return self.titulo

    def tem_acesso(self, usuario):
        """Verifica se o usuário é dono ou membro"""
        if not usuario or not usuario.is_authenticated:
            return False
        if self.dono_id == usuario.pk:
            return True
        return self.participacoes.filter(usuario_id=usuario.pk).exists()

    def chaves_colunas(self):
        """Chaves das colunas na ordem de exibição"""
        return list(self.colunas.order_by('ordem', 'titulo').values_list('chave', flat=True))

    def coluna_valida(self, chave):
        return self.colunas.filter(chave=chave).exists()

    def criar_colunas_padrao(self):
        """Cria colunas padrão para novo projeto"""
        for idx, (chave, titulo) in enumerate(settings.RAIA_COLUNAS_PADRAO):
            Coluna.objects.create(
                projeto=self,
                chave=chave,
                titulo=titulo,
                ordem=idx
            )


class MembroProjeto(models.Model):
    """Participação de um usuário em um projeto"""

    PAPEL_CHOICES = [
        ('dono', 'Dono'),
        ('admin', 'Administrador'),
        ('membro', 'Membro'),
    ]

    projeto = models.ForeignKey(
        Projeto,
        on_delete=models.CASCADE,
        related_name='participacoes'
    )
    usuario = models.ForeignKey(
        Usuario,
        on_delete=models.CASCADE,
        related_name='participacoes'
    )
    papel = models.CharField(max_length=10, choices=PAPEL_CHOICES, default='membro')
    entrou_em = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'membro_projeto'
        unique_together = ['projeto', 'usuario']

    def __str__(self):
        return f"{self.usuario.username} em {self.projeto.titulo} ({self.papel})"


class Coluna(models.Model):
    """Coluna (raia) do quadro Kanban"""

    projeto = models.ForeignKey(
        Projeto,
        on_delete=models.CASCADE,
        related_name='colunas'
    )
    chave = models.SlugField(max_length=50, help_text="Identificador usado pelas tarefas, ex: in-progress")
    titulo = models.CharField(max_length=100)
    ordem = models.PositiveIntegerField(default=0)
    cor = models.CharField(max_length=7, default='#6B7280')

    class Meta:
        db_table = 'coluna'
        ordering = ['ordem', 'titulo']
        unique_together = ['projeto', 'chave']

    def __str__(self):
        return f"{self.titulo} - {self.projeto.titulo}"


class Tarefa(models.Model):
    """
    Unidade de trabalho do quadro

    `coluna` e `ordem` só são gravados pelos serviços do app board
    (movimentação, criação e remoção). Em repouso, as ordens de uma
    coluna formam a sequência 0..n-1.
    """

    PRIORIDADE_CHOICES = [
        ('baixa', 'Baixa'),
        ('media', 'Média'),
        ('alta', 'Alta'),
        ('urgente', 'Urgente'),
    ]

    STATUS_CHOICES = [
        ('ativa', 'Ativa'),
        ('concluida', 'Concluída'),
        ('arquivada', 'Arquivada'),
    ]

    titulo = models.CharField(max_length=200)
    descricao = models.TextField(blank=True, max_length=1000)
    projeto = models.ForeignKey(
        Projeto,
        on_delete=models.CASCADE,
        related_name='tarefas'
    )
    coluna = models.CharField(max_length=50, default='todo')
    responsavel = models.ForeignKey(
        Usuario,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='tarefas_responsavel'
    )
    criado_por = models.ForeignKey(
        Usuario,
        on_delete=models.PROTECT,
        related_name='tarefas_criadas'
    )
    prioridade = models.CharField(max_length=10, choices=PRIORIDADE_CHOICES, default='media')
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='ativa')
    prazo = models.DateField(null=True, blank=True)
    tags = models.JSONField(default=list, blank=True)
    ordem = models.PositiveIntegerField(default=0)
    concluida_em = models.DateTimeField(null=True, blank=True)
    criado_em = models.DateTimeField(auto_now_add=True)
    atualizado_em = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'tarefa'
        ordering = ['coluna', 'ordem', 'criado_em']
        indexes = [
            models.Index(fields=['projeto', 'coluna', 'ordem'], name='tarefa_proj_col_ordem_idx'),
            models.Index(fields=['responsavel'], name='tarefa_responsavel_idx'),
            models.Index(fields=['prazo'], name='tarefa_prazo_idx'),
        ]

    def save(self, *args, **kwargs):
        """Mantém concluida_em coerente com o status"""
        if self.status == 'concluida':
            if not self.concluida_em:
                self.concluida_em = timezone.now()
        else:
            self.concluida_em = None
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.titulo} [{self.coluna}#{self.ordem}]"
