"""
URLs del módulo de autenticación (Firebase Auth)
"""

from django.urls import path
from . import views

urlpatterns = [
    path('verify-token/', views.verify_token, name='verify-token'),
    path('me/', views.get_current_user, name='current-user'),
]
