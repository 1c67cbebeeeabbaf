"""
Normalización de documentos de lecturas.

El frontend cambió varias veces la forma de los documentos en Firestore.
Todo documento leído pasa por normalize_reading_document() y queda con la
forma canónica de Reading; agregación y archivado nunca ven otra forma.

Versiones reconocidas:
    1: un solo valor 'temperature' (sin mínimo ni máximo)
    2: minTemperature / maxTemperature sin 'period' o sin 'averageTemperature'
    3: forma actual (timestamp + period + min/max/average)

Las consultas por rango de Firestore solo devuelven documentos cuyo campo
timestamp es un Timestamp, y order_by('timestamp') omite los que no tienen
ese campo. Por eso los documentos con la fecha en 'date' nunca aparecen en
los listados, y los que la guardan como string ISO no aparecen en el
resumen mensual. Ambos necesitan un script de migración único que reescriba
su timestamp. Al leerlos por ID (por ejemplo al archivarlos) se normalizan
igual.
"""

import logging
from datetime import date, datetime, timezone as dt_timezone
from typing import Any, Dict, Optional

from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from .models import Period, Reading
from .periods import classify_period
from .stats import average_or_single, round_temperature, to_float

logger = logging.getLogger(__name__)

CURRENT_SCHEMA_VERSION = 3


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Interpreta el timestamp de un documento.

    Acepta Timestamp de Firestore (datetime), datetime, date, strings
    ISO-8601 y diccionarios exportados {'seconds': ..., 'nanoseconds': ...}.

    Returns:
        datetime o None si el valor no se puede interpretar
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        return value

    if isinstance(value, date):
        return timezone.make_aware(datetime(value.year, value.month, value.day))

    if isinstance(value, str):
        try:
            parsed = parse_datetime(value)
            if parsed is not None:
                return parsed
            parsed_date = parse_date(value)
        except ValueError:
            return None
        if parsed_date is not None:
            return parse_timestamp(parsed_date)
        return None

    if isinstance(value, dict) and 'seconds' in value:
        try:
            seconds = float(value['seconds']) + float(value.get('nanoseconds', 0)) / 1e9
            return datetime.fromtimestamp(seconds, tz=dt_timezone.utc)
        except (TypeError, ValueError, OverflowError):
            return None

    return None


def detect_schema_version(data: Dict[str, Any]) -> int:
    """Detecta la versión de esquema con la que se escribió un documento"""
    has_bounds = 'minTemperature' in data or 'maxTemperature' in data

    if 'temperature' in data and not has_bounds:
        return 1
    if 'period' not in data or 'averageTemperature' not in data:
        return 2
    return CURRENT_SCHEMA_VERSION


def normalize_reading_document(
    doc_id: str,
    data: Dict[str, Any],
    owner_id: Optional[str] = None,
) -> Reading:
    """
    Convierte un documento de Firestore en un Reading canónico.

    Args:
        doc_id: ID del documento
        data: Campos del documento (snapshot.to_dict())
        owner_id: Partición del dueño, usada si el documento no trae ownerUserId

    Returns:
        Reading: Lectura con la forma actual. Si el timestamp no se puede
        interpretar queda en None y la agregación la omite.
    """
    version = detect_schema_version(data)
    raw_timestamp = data.get('timestamp', data.get('date'))
    timestamp = parse_timestamp(raw_timestamp)

    if timestamp is None:
        logger.warning(f"Lectura {doc_id} con timestamp inválido: {raw_timestamp!r}")

    if version == 1:
        min_temp = None
        max_temp = None
        average = round_temperature(to_float(data.get('temperature')))
    else:
        min_temp = to_float(data.get('minTemperature'))
        max_temp = to_float(data.get('maxTemperature'))
        if 'averageTemperature' in data:
            average = to_float(data.get('averageTemperature'))
        else:
            average = average_or_single(min_temp, max_temp)

    period = data.get('period')
    if period is None:
        # Documentos antiguos sin periodo: se estampa una sola vez al leerlos
        period = classify_period(timestamp) if timestamp is not None else Period.OTHER
    elif period not in Period.values:
        logger.warning(f"Lectura {doc_id} con periodo desconocido: {period!r}")
        period = Period.OTHER

    if version != CURRENT_SCHEMA_VERSION:
        logger.debug(f"Lectura {doc_id} migrada desde esquema v{version}")

    return Reading(
        id=doc_id,
        owner_user_id=data.get('ownerUserId') or owner_id or '',
        timestamp=timestamp,
        period=period,
        min_temperature=min_temp,
        max_temperature=max_temp,
        average_temperature=average,
        added_by_user_id=data.get('addedByUserId'),
        added_by_user_name=data.get('addedByUserName'),
        created_at=data.get('createdAt'),
    )
