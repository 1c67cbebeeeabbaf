"""Vistas de Lecturas - Registro, consulta y eliminación"""

from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response
from google.api_core.exceptions import GoogleAPICallError
from apps.auth.permissions import resolve_owner_id
from services.firebase_service import fetch_all_readings, fetch_deleted_readings
from .archiver import archive_reading
from .exceptions import ReadingNotFound, ReadingValidationError
from .serializers import DeletedReadingSerializer, ReadingCreateSerializer, ReadingSerializer
from .services import create_reading, fetch_month_readings, parse_year_month
import logging

logger = logging.getLogger(__name__)

STORE_UNAVAILABLE = (GoogleAPICallError, RuntimeError)


class LecturaViewSet(viewsets.ViewSet):
    """ViewSet para las lecturas de temperatura de un dueño"""

    def list(self, request):
        """
        Lista las lecturas de un mes, o todas si no se indica mes.

        GET /api/lecturas/?year=2025&month=6
        """
        owner_id = resolve_owner_id(request)
        year = request.query_params.get('year')
        month = request.query_params.get('month')

        try:
            if year is not None or month is not None:
                year, month = parse_year_month(year, month)
                readings = fetch_month_readings(owner_id, year, month)
            else:
                readings = fetch_all_readings(owner_id)

            logger.info(f"Lecturas obtenidas para {owner_id}: {len(readings)}")
            return Response(ReadingSerializer(readings, many=True).data)

        except ReadingValidationError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        except STORE_UNAVAILABLE as e:
            logger.error(f"Error al obtener lecturas de {owner_id}: {str(e)}")
            return Response(
                {'error': 'Error al obtener lecturas'},
                status=status.HTTP_503_SERVICE_UNAVAILABLE
            )

    def create(self, request):
        """
        Registra una lectura.

        POST /api/lecturas/

        Body:
            {
                "timestamp": "2025-06-01T08:30:00-04:00",
                "minTemperature": 2.0,
                "maxTemperature": 4.0
            }
        """
        owner_id = resolve_owner_id(request)
        serializer = ReadingCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        user = request.firebase_user

        try:
            reading_id = create_reading(
                owner_id=owner_id,
                timestamp=data['timestamp'],
                min_temperature=data.get('minTemperature'),
                max_temperature=data.get('maxTemperature'),
                added_by_user_id=user['uid'],
                added_by_user_name=user.get('nombre'),
            )
            return Response({'id': reading_id}, status=status.HTTP_201_CREATED)

        except ReadingValidationError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        except STORE_UNAVAILABLE as e:
            logger.error(f"Error al crear lectura para {owner_id}: {str(e)}")
            return Response(
                {'error': 'Error al guardar la lectura'},
                status=status.HTTP_503_SERVICE_UNAVAILABLE
            )

    def destroy(self, request, pk=None):
        """
        Elimina una lectura moviéndola al registro de eliminadas.

        DELETE /api/lecturas/{id}/
        """
        owner_id = resolve_owner_id(request)
        user = request.firebase_user

        try:
            archive_reading(owner_id, pk, user['uid'], user.get('nombre'))
            return Response(status=status.HTTP_204_NO_CONTENT)

        except ReadingValidationError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        except ReadingNotFound:
            return Response(
                {'error': 'Lectura no encontrada'},
                status=status.HTTP_404_NOT_FOUND
            )

        except STORE_UNAVAILABLE as e:
            logger.error(f"Error al eliminar lectura {pk}: {str(e)}")
            return Response(
                {'error': 'Error al eliminar la lectura'},
                status=status.HTTP_503_SERVICE_UNAVAILABLE
            )

    @action(detail=False, methods=['get'])
    def eliminadas(self, request):
        """
        Lista las lecturas eliminadas, la eliminación más reciente primero.

        GET /api/lecturas/eliminadas/
        """
        owner_id = resolve_owner_id(request)

        try:
            deleted = fetch_deleted_readings(owner_id)
            return Response(DeletedReadingSerializer(deleted, many=True).data)

        except STORE_UNAVAILABLE as e:
            logger.error(f"Error al obtener lecturas eliminadas de {owner_id}: {str(e)}")
            return Response(
                {'error': 'Error al obtener lecturas eliminadas'},
                status=status.HTTP_503_SERVICE_UNAVAILABLE
            )
