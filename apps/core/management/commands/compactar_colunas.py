# apps/core/management/commands/compactar_colunas.py

from django.core.management.base import BaseCommand, CommandError

from apps.board.services import servico_tarefas
from apps.core.models import Projeto


class Command(BaseCommand):
    help = 'Renumera as tarefas de cada coluna para a sequência 0..n-1 (buracos e empates)'

    def add_arguments(self, parser):
        parser.add_argument(
            '--projeto',
            type=int,
            help='ID de um projeto específico (padrão: todos)'
        )

    def handle(self, *args, **options):
        projetos = Projeto.objects.order_by('pk')
        if options['projeto'] is not None:
            projetos = projetos.filter(pk=options['projeto'])
            if not projetos.exists():
                raise CommandError(f"Projeto {options['projeto']} não encontrado")

        total = 0
        for projeto in projetos:
            corrigidas = servico_tarefas.compactar_projeto(projeto.pk)
            total += corrigidas
            if corrigidas:
                self.stdout.write(f'  🧹 {projeto.titulo}: {corrigidas} tarefa(s) renumerada(s)')

        self.stdout.write(self.style.SUCCESS(f'✅ Compactação concluída - {total} tarefa(s) corrigida(s)'))
