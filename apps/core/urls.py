# apps/core/urls.py

from django.urls import path
from . import views

app_name = 'core'

urlpatterns = [
    # === MONITORAMENTO ===
    path('health/', views.health_check, name='health'),

    # === APIs AJAX ===
    path('api/painel/estatisticas/', views.api_estatisticas_painel, name='api_estatisticas_painel'),
]
