# config/wsgi.py

import os
from django.core.wsgi import get_wsgi_application

# Apenas HTTP (API e admin); salas dos projetos exigem o config/asgi.py
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.production')

application = get_wsgi_application()
