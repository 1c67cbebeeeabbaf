"""
Permisos personalizados para ThermoLog

Cada usuario es dueño de su partición de lecturas (users/{uid}/...).
Un usuario con rol ADMIN (custom claim de Firebase) puede administrar
la partición de otro dueño, por ejemplo un refrigerador compartido.
"""

from rest_framework import permissions
from rest_framework.exceptions import PermissionDenied


class IsAuthenticated(permissions.BasePermission):
    """
    Permiso que verifica que el usuario esté autenticado con Firebase.
    """

    message = 'No autenticado'

    def has_permission(self, request, view):
        """
        Verifica si el request tiene un usuario autenticado.

        Returns:
            bool: True si está autenticado
        """
        return getattr(request, 'firebase_user', None) is not None


def resolve_owner_id(request):
    """
    Obtiene el dueño de los datos sobre los que actúa el request.

    Por defecto es el propio usuario. Un 'owner_id' distinto en query params
    o body solo se acepta para usuarios ADMIN.

    Raises:
        PermissionDenied: Si un usuario no ADMIN pide otra partición

    Example:
        >>> owner_id = resolve_owner_id(request)
        >>> lecturas = fetch_month_readings(owner_id, 2025, 6)
    """
    user = request.firebase_user
    owner_id = request.query_params.get('owner_id')
    if owner_id is None and isinstance(request.data, dict):
        owner_id = request.data.get('owner_id')

    if not owner_id or owner_id == user['uid']:
        return user['uid']

    if user.get('rol') == 'ADMIN':
        return owner_id

    raise PermissionDenied('No tiene acceso a las lecturas de otro usuario')
