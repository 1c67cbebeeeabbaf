"""URLs del módulo de lecturas"""

from django.urls import path, include
from rest_framework.routers import SimpleRouter
from . import views

router = SimpleRouter()
router.register(r'', views.LecturaViewSet, basename='lectura')

urlpatterns = [
    path('', include(router.urls)),
]
