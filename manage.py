#!/usr/bin/env python
"""
Django's command-line utility for administrative tasks.

Raia Board - Quadro Kanban colaborativo em tempo real

Atalhos:
    python manage.py setup    migrações + dados demo
    python manage.py reparar  renumera colunas com buracos ou empates de ordem
    python manage.py reset    apaga tudo, recria os dados demo e repara as colunas
"""

import os
import sys

ATALHOS = {
    'setup': [
        ('📊 Aplicando migrações...', ['migrate', '--noinput']),
        ('🌱 Populando banco com dados demo...', ['seed']),
    ],
    'reparar': [
        ('🧹 Compactando colunas de todos os projetos...', ['compactar_colunas']),
    ],
    'reset': [
        ('🗑️  Apagando dados...', ['flush', '--noinput']),
        ('📊 Aplicando migrações...', ['migrate', '--noinput']),
        ('🌱 Populando banco com dados demo...', ['seed']),
        ('🧹 Compactando colunas...', ['compactar_colunas']),
    ],
}


def executar_atalho(nome):
    """Roda em sequência os comandos do atalho; para no primeiro erro"""
    import django
    from django.core.management import CommandError, call_command

    django.setup()

    if nome == 'reset':
        confirm = input("⚠️  Isso irá apagar TODOS os quadros e tarefas. Continuar? (y/N): ")
        if confirm.lower() != 'y':
            return

    for mensagem, argumentos in ATALHOS[nome]:
        print(mensagem)
        try:
            call_command(*argumentos)
        except CommandError as exc:
            print(f"❌ {argumentos[0]} falhou: {exc}")
            sys.exit(1)

    print(f"✅ {nome} concluído!")


def main():
    """Run administrative tasks."""

    # Configuração padrão para desenvolvimento
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.development')

    try:
        from django.core.management import execute_from_command_line
    except ImportError as exc:
        raise ImportError(
            "Couldn't import Django. Are you sure it's installed and "
            "available on your PYTHONPATH environment variable? Did you "
            "forget to activate a virtual environment?"
        ) from exc

    if len(sys.argv) > 1 and sys.argv[1] in ATALHOS:
        executar_atalho(sys.argv[1])
        return

    execute_from_command_line(sys.argv)


if __name__ == '__main__':
    main()
