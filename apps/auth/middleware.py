"""
Firebase Authentication Middleware

Este middleware intercepta todas las requests y valida el token de Firebase.
Si el token es válido, agrega el usuario al request.

Flujo:
1. Extrae el token del header Authorization
2. Valida el token con Firebase Admin SDK
3. Arma request.firebase_user con uid, email, nombre y rol (custom claim)
"""

from django.utils.deprecation import MiddlewareMixin
from django.http import JsonResponse
from firebase_admin import auth as firebase_auth
from firebase_admin import exceptions as firebase_exceptions
from services.firebase_service import initialize_firebase
import logging

logger = logging.getLogger(__name__)


def build_firebase_user(decoded_token):
    """Datos del usuario que quedan disponibles en request.firebase_user"""
    return {
        'uid': decoded_token['uid'],
        'email': decoded_token.get('email'),
        'nombre': decoded_token.get('name'),
        'rol': decoded_token.get('rol', 'USUARIO'),
    }


class FirebaseAuthMiddleware(MiddlewareMixin):
    """
    Middleware para autenticación con Firebase.

    Valida el token JWT de Firebase en cada request. Las rutas que no están
    exentas y llegan sin token quedan a cargo de los permisos de DRF.
    """

    # Rutas que no requieren autenticación
    EXEMPT_URLS = [
        '/api/auth/verify-token/',
    ]

    def process_request(self, request):
        """
        Procesa cada request para validar autenticación.

        Returns:
            None si la autenticación es exitosa o no hay token
            JsonResponse con error si el token es inválido
        """
        request.firebase_user = None
        is_exempt = request.path == '/api/' or \
            any(request.path.startswith(url) for url in self.EXEMPT_URLS)

        auth_header = request.META.get('HTTP_AUTHORIZATION', '')

        if not auth_header.startswith('Bearer '):
            return None

        token = auth_header.split('Bearer ')[1]

        try:
            initialize_firebase()

            decoded_token = firebase_auth.verify_id_token(token)
            request.firebase_user = build_firebase_user(decoded_token)

            logger.debug(f"Usuario autenticado: {request.firebase_user['uid']}")
            return None

        except firebase_auth.ExpiredIdTokenError:
            logger.warning("Token de Firebase expirado")
            if is_exempt:
                return None
            return JsonResponse({
                'error': 'Token expirado'
            }, status=401)

        except firebase_auth.InvalidIdTokenError:
            logger.warning("Token de Firebase inválido")
            if is_exempt:
                return None
            return JsonResponse({
                'error': 'Token inválido'
            }, status=401)

        except (ValueError, firebase_exceptions.FirebaseError) as e:
            logger.error(f"Error en autenticación: {str(e)}")
            if is_exempt:
                return None
            return JsonResponse({
                'error': 'Error de autenticación'
            }, status=500)
