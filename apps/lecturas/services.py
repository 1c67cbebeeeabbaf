"""
Servicios de Lecturas

Funciones principales:
- create_reading(): Registra una lectura nueva (calcula promedio y periodo)
- month_bounds(): Rango de tiempo local de un mes
- fetch_month_readings(): Lecturas de un dueño para un mes
- parse_year_month(): Valida año y mes de los query params
"""

import calendar
import logging
from datetime import date, datetime, time, tzinfo
from typing import List, Optional, Tuple

from django.utils import timezone

from services.firebase_service import (
    SERVER_TIMESTAMP,
    add_reading_document,
    fetch_readings_in_range,
)

from .exceptions import ReadingValidationError
from .models import Reading
from .periods import classify_period
from .stats import average_or_single

logger = logging.getLogger(__name__)


def create_reading(
    owner_id: str,
    timestamp: datetime,
    min_temperature: Optional[float],
    max_temperature: Optional[float],
    added_by_user_id: str,
    added_by_user_name: Optional[str] = None,
    client=None,
) -> str:
    """
    Registra una lectura de temperatura.

    El promedio y el periodo se calculan aquí, una sola vez, y quedan
    guardados en el documento.

    Args:
        owner_id: UID del dueño del refrigerador
        timestamp: Momento en que se tomó la lectura (no cuando se registra)
        min_temperature: Temperatura mínima (opcional)
        max_temperature: Temperatura máxima (opcional)
        added_by_user_id: UID de quien registra la lectura
        added_by_user_name: Nombre de quien registra la lectura

    Returns:
        str: ID de la lectura creada

    Raises:
        ReadingValidationError: Si faltan datos o las temperaturas son inconsistentes
    """
    if not owner_id or not added_by_user_id or timestamp is None:
        raise ReadingValidationError("Se requieren el dueño, el timestamp y el usuario que registra")

    if min_temperature is None and max_temperature is None:
        raise ReadingValidationError("Se requiere al menos una temperatura (mínima o máxima)")

    if min_temperature is not None and max_temperature is not None \
            and min_temperature > max_temperature:
        raise ReadingValidationError("La temperatura mínima no puede ser mayor que la máxima")

    if timezone.is_naive(timestamp):
        timestamp = timezone.make_aware(timestamp)

    reading = Reading(
        id='',
        owner_user_id=owner_id,
        timestamp=timestamp,
        period=classify_period(timestamp).value,
        min_temperature=min_temperature,
        max_temperature=max_temperature,
        average_temperature=average_or_single(min_temperature, max_temperature),
        added_by_user_id=added_by_user_id,
        added_by_user_name=added_by_user_name,
        created_at=SERVER_TIMESTAMP,
    )

    logger.info(
        f"Nueva lectura para {owner_id} (agregada por {added_by_user_id}) "
        f"en {timestamp.isoformat()}, periodo: {reading.period}"
    )

    return add_reading_document(owner_id, reading.to_document(), client)


def month_bounds(year: int, month: int, tz: Optional[tzinfo] = None) -> Tuple[datetime, datetime]:
    """
    Inicio del primer día y fin del último día de un mes, en hora local.

    Raises:
        ReadingValidationError: Si el año o el mes no son válidos
    """
    if not 1 <= month <= 12 or not 1 <= year <= 9999:
        raise ReadingValidationError(f"Mes inválido: {year}-{month}")

    tz = tz or timezone.get_current_timezone()
    last_day = calendar.monthrange(year, month)[1]

    start = timezone.make_aware(datetime.combine(date(year, month, 1), time.min), tz)
    end = timezone.make_aware(datetime.combine(date(year, month, last_day), time.max), tz)
    return start, end


def fetch_month_readings(owner_id: str, year: int, month: int, client=None) -> List[Reading]:
    """
    Obtiene las lecturas de un dueño para un mes calendario.

    Returns:
        Lista de Reading ordenada por timestamp ascendente
    """
    if not owner_id:
        raise ReadingValidationError("Se requiere el dueño de las lecturas")

    start, end = month_bounds(year, month)
    logger.info(f"Obteniendo lecturas de {owner_id} para {year}-{month:02d}")
    return fetch_readings_in_range(owner_id, start, end, client)


def parse_year_month(year, month) -> Tuple[int, int]:
    """
    Valida año y mes recibidos como texto (query params).

    Raises:
        ReadingValidationError: Si no son números o el mes está fuera de rango
    """
    try:
        year, month = int(year), int(month)
    except (TypeError, ValueError):
        raise ReadingValidationError("year y month deben ser números")

    if not 1 <= month <= 12:
        raise ReadingValidationError("month debe estar entre 1 y 12")
    return year, month
