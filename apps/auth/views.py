"""
Vistas de Autenticación

Endpoints para validar tokens de Firebase y obtener información del usuario.
"""

from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework import status
from firebase_admin import auth as firebase_auth
from firebase_admin import exceptions as firebase_exceptions
from services.firebase_service import initialize_firebase
from .middleware import build_firebase_user
import logging

logger = logging.getLogger(__name__)


@api_view(['POST'])
@permission_classes([])  # No requiere autenticación previa
def verify_token(request):
    """
    Verifica un token de Firebase y retorna información del usuario.

    POST /api/auth/verify-token/

    Body:
        {"token": "<Firebase ID token>"}
    """
    token = request.data.get('token')

    if not token:
        return Response({
            'error': 'Token no proporcionado'
        }, status=status.HTTP_400_BAD_REQUEST)

    try:
        initialize_firebase()

        decoded_token = firebase_auth.verify_id_token(token)
        user = build_firebase_user(decoded_token)

        logger.info(f"Token verificado para usuario: {user['uid']}")

        return Response({'user': user}, status=status.HTTP_200_OK)

    except firebase_auth.ExpiredIdTokenError:
        logger.warning("Token de Firebase expirado")
        return Response({
            'error': 'Token expirado'
        }, status=status.HTTP_401_UNAUTHORIZED)

    except firebase_auth.InvalidIdTokenError:
        logger.warning("Token de Firebase inválido")
        return Response({
            'error': 'Token inválido'
        }, status=status.HTTP_401_UNAUTHORIZED)

    except (ValueError, firebase_exceptions.FirebaseError) as e:
        logger.error(f"Error al verificar token: {str(e)}")
        return Response({
            'error': 'Error al verificar token'
        }, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


@api_view(['GET'])
def get_current_user(request):
    """
    Obtiene información del usuario actualmente autenticado.

    Response:
        {
            "user": {
                "uid": "firebase_uid",
                "email": "usuario@example.com",
                "nombre": "Juan Pérez",
                "rol": "USUARIO"
            }
        }
    """
    return Response({
        'user': request.firebase_user
    }, status=status.HTTP_200_OK)
