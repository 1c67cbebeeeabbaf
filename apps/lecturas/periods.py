"""
Clasificación de lecturas por periodo del día.

El periodo se calcula una sola vez, al crear la lectura, y queda guardado
en el documento. Cambiar los rangos no reclasifica lecturas existentes.

    05:00 - 11:59  -> morning
    17:00 - 21:59  -> evening
    resto          -> other
"""

from datetime import datetime, tzinfo
from typing import Optional

from django.utils import timezone

from .models import Period

MORNING_HOURS = range(5, 12)
EVENING_HOURS = range(17, 22)


def to_local(timestamp: datetime, tz: Optional[tzinfo] = None) -> datetime:
    """
    Convierte un timestamp a la hora local del dueño.

    Los datetime sin zona horaria se consideran ya expresados en hora local.
    """
    if timezone.is_naive(timestamp):
        return timestamp
    return timezone.localtime(timestamp, tz)


def classify_period(timestamp: datetime, tz: Optional[tzinfo] = None) -> str:
    """
    Obtiene el periodo (mañana, tarde u otro) de un timestamp.

    Args:
        timestamp: Momento en que se tomó la lectura
        tz: Zona horaria del dueño (por defecto TIME_ZONE del proyecto)

    Returns:
        str: Period.MORNING, Period.EVENING o Period.OTHER

    Example:
        >>> classify_period(datetime(2025, 6, 1, 8, 30))
        'morning'
    """
    hour = to_local(timestamp, tz).hour

    if hour in MORNING_HOURS:
        return Period.MORNING
    if hour in EVENING_HOURS:
        return Period.EVENING
    return Period.OTHER
