from django.apps import AppConfig


class LecturasConfig(AppConfig):
    name = 'apps.lecturas'
