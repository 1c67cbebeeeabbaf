from django.apps import AppConfig


class AuthConfig(AppConfig):
    name = 'apps.auth'
    # 'auth' ya lo usa django.contrib.auth
    label = 'firebase_auth'
