"""
Thermolog URL Configuration

Este archivo define todas las rutas principales del proyecto.
Cada app tiene su propio archivo urls.py que se incluye aquí.
"""

from django.urls import path, include
from django.http import JsonResponse


def api_root(request):
    """Vista raíz de la API"""
    return JsonResponse({
        'message': 'Thermolog API funcionando correctamente',
        'version': '1.0.0',
        'endpoints': {
            'auth': '/api/auth/',
            'lecturas': '/api/lecturas/',
            'dashboard': '/api/dashboard/',
        }
    })


urlpatterns = [
    # API Root
    path('api/', api_root, name='api-root'),

    path('api/auth/', include('apps.auth.urls')),
    path('api/lecturas/', include('apps.lecturas.urls')),
    path('api/dashboard/', include('apps.dashboard.urls')),
]
