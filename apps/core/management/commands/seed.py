# apps/core/management/commands/seed.py

from django.core.management.base import BaseCommand
from django.db import transaction

from apps.board.services import servico_tarefas
from apps.core.models import MembroProjeto, Projeto, Usuario

TITULO_PROJETO_DEMO = 'Projeto Demo'

TAREFAS_DEMO = [
    {'title': 'Definir escopo do MVP', 'column': 'done', 'priority': 'alta', 'status': 'concluida'},
    {'title': 'Modelar tarefas e colunas', 'column': 'done', 'priority': 'media', 'status': 'concluida'},
    {'title': 'API de movimentação', 'column': 'review', 'priority': 'alta', 'tags': ['backend']},
    {'title': 'Sala do projeto via WebSocket', 'column': 'in-progress', 'priority': 'alta', 'tags': ['realtime']},
    {'title': 'Estado otimista no cliente', 'column': 'in-progress', 'priority': 'media', 'tags': ['cliente']},
    {'title': 'Comando de compactação', 'column': 'todo', 'priority': 'baixa'},
    {'title': 'Estatísticas do painel', 'column': 'todo', 'priority': 'media'},
    {'title': 'Documentar atalhos do manage.py', 'column': 'todo', 'priority': 'baixa', 'tags': ['docs']},
]


class Command(BaseCommand):
    help = 'Cria dados de demonstração (usuários, projeto e tarefas) - idempotente'

    def add_arguments(self, parser):
        parser.add_argument(
            '--senha',
            default='demo123',
            help='Senha dos usuários de demonstração'
        )

    def handle(self, *args, **options):
        self.stdout.write('🌱 Populando banco com dados de demonstração...')

        with transaction.atomic():
            dono = self._usuario('demo', 'demo@raia.dev', options['senha'])
            colega = self._usuario('colega', 'colega@raia.dev', options['senha'])

            projeto, criado = Projeto.objects.get_or_create(
                titulo=TITULO_PROJETO_DEMO,
                dono=dono,
                defaults={'descricao': 'Quadro de exemplo com as quatro colunas padrão'}
            )
            MembroProjeto.objects.get_or_create(projeto=projeto, usuario=colega)

        if not criado:
            self.stdout.write(self.style.WARNING(f'⚠️  "{TITULO_PROJETO_DEMO}" já existe - nada a fazer'))
            return

        for dados in TAREFAS_DEMO:
            servico_tarefas.criar(dono, projeto.pk, dict(dados, assignee=colega.pk))

        self.stdout.write(
            self.style.SUCCESS(
                f'✅ Dados demo criados: projeto "{projeto.titulo}" com {len(TAREFAS_DEMO)} tarefas\n'
                f'🔑 Acesse com: demo/{options["senha"]} ou colega/{options["senha"]}'
            )
        )

    def _usuario(self, username, email, senha):
        usuario, criado = Usuario.objects.get_or_create(username=username, defaults={'email': email})
        if criado:
            usuario.set_password(senha)
            usuario.save()
            self.stdout.write(f'  👤 Usuário criado: {username}')
        return usuario
