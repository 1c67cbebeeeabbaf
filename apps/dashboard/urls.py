"""URLs del módulo de dashboard"""

from django.urls import path
from . import views

urlpatterns = [
    path('resumen-mensual/', views.get_resumen_mensual, name='resumen-mensual'),
    path('analisis-ia/', views.get_analisis_ia, name='analisis-ia'),
]
