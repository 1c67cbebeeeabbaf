"""
Vistas de Dashboard

Resumen mensual (gráfico diario + estadísticas de mañana y tarde) y
análisis narrativo del mes generado con Gemini.
"""

import calendar
import logging

from rest_framework.decorators import api_view
from rest_framework.response import Response
from rest_framework import status
from google.api_core.exceptions import GoogleAPICallError

from apps.auth.permissions import resolve_owner_id
from apps.lecturas.aggregation import summarize_readings
from apps.lecturas.exceptions import ReadingValidationError
from apps.lecturas.services import fetch_month_readings, parse_year_month
from services.gemini_service import AnalysisError, AnalysisUnavailable, generate_fridge_analysis
from .serializers import (
    DailyAggregateSerializer,
    FridgeAnalysisRequestSerializer,
    MonthlySummarySerializer,
)

logger = logging.getLogger(__name__)


def build_monthly_payload(owner_id, year, month):
    """
    Calcula los agregados de un mes listos para el frontend.

    Raises:
        ReadingValidationError: Si el mes no es válido
        GoogleAPICallError / RuntimeError: Si Firestore no responde
    """
    readings = fetch_month_readings(owner_id, year, month)
    summary = summarize_readings(readings)

    return {
        'year': year,
        'month': month,
        'totalLecturas': len(readings),
        'dias': DailyAggregateSerializer(summary['dias'], many=True).data,
        'morningTempStats': MonthlySummarySerializer(summary['morning']).data,
        'eveningTempStats': MonthlySummarySerializer(summary['evening']).data,
    }


@api_view(['GET'])
def get_resumen_mensual(request):
    """
    Obtiene los agregados diarios y el resumen de mañana/tarde de un mes.

    GET /api/dashboard/resumen-mensual/?year=2025&month=6

    Returns:
        {
            "year": 2025,
            "month": 6,
            "totalLecturas": 4,
            "dias": [{"date": "2025-06-01", "morningTemperature": 3.0, ...}],
            "morningTempStats": {"average": 2.5, "min": 1.0, "max": 4.0, "count": 2},
            "eveningTempStats": {"average": null, "min": null, "max": null, "count": 0}
        }
    """
    owner_id = resolve_owner_id(request)

    try:
        year, month = parse_year_month(
            request.query_params.get('year'),
            request.query_params.get('month'),
        )
        return Response(build_monthly_payload(owner_id, year, month))

    except ReadingValidationError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    except (GoogleAPICallError, RuntimeError) as e:
        logger.error(f"Error en resumen mensual de {owner_id}: {str(e)}")
        return Response(
            {'error': 'Error al obtener el resumen mensual'},
            status=status.HTTP_503_SERVICE_UNAVAILABLE
        )


@api_view(['POST'])
def get_analisis_ia(request):
    """
    Genera el análisis narrativo de un mes con Gemini.

    POST /api/dashboard/analisis-ia/

    Body:
        {
            "year": 2025,
            "month": 6,
            "fridgeObservations": "Escarcha en la pared trasera"
        }

    Returns:
        {
            "monthYear": "June 2025",
            "morningTempStats": {...},
            "eveningTempStats": {...},
            "analysis": {
                "temperatureStability": "...",
                "potentialReagentRisks": "...",
                "maintenanceRecommendations": "...",
                "overallAssessment": "..."
            }
        }
    """
    owner_id = resolve_owner_id(request)
    serializer = FridgeAnalysisRequestSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    data = serializer.validated_data
    year, month = data['year'], data['month']
    month_year = data.get('monthYear') or f"{calendar.month_name[month]} {year}"

    try:
        payload = build_monthly_payload(owner_id, year, month)
    except (GoogleAPICallError, RuntimeError) as e:
        logger.error(f"Error al obtener lecturas para análisis de {owner_id}: {str(e)}")
        return Response(
            {'error': 'Error al obtener las lecturas del mes'},
            status=status.HTTP_503_SERVICE_UNAVAILABLE
        )

    try:
        analysis = generate_fridge_analysis(
            month_year,
            payload['morningTempStats'],
            payload['eveningTempStats'],
            data.get('fridgeObservations'),
        )

    except AnalysisUnavailable:
        return Response(
            {'error': 'Análisis IA no disponible'},
            status=status.HTTP_503_SERVICE_UNAVAILABLE
        )

    except (AnalysisError, GoogleAPICallError) as e:
        logger.error(f"Error en análisis IA de {owner_id}: {str(e)}")
        return Response(
            {'error': 'El modelo no devolvió un análisis válido. Intente nuevamente.'},
            status=status.HTTP_502_BAD_GATEWAY
        )

    return Response({
        'monthYear': month_year,
        'morningTempStats': payload['morningTempStats'],
        'eveningTempStats': payload['eveningTempStats'],
        'analysis': analysis,
    })
