"""
Agregación mensual de lecturas.

aggregate_by_day() agrupa las lecturas por día calendario (hora local del
dueño) y combina mañana y tarde por separado. summarize_month() reduce esos
días a una estadística por periodo.

Las lecturas con periodo 'other' no participan en ningún agregado, aunque
siguen apareciendo en los listados de lecturas.

El promedio mensual es el promedio de los promedios diarios: un día con una
lectura pesa lo mismo que un día con cinco.
"""

import logging
import math
from collections.abc import Iterable, Mapping
from datetime import date, tzinfo
from typing import Dict, List, Optional

from .exceptions import MalformedReading, ReadingValidationError
from .models import DailyAggregate, MonthlySummary, Period, PeriodStats, Reading
from .periods import to_local
from .schema import parse_timestamp
from .stats import max_or_none, mean, min_or_none, round_temperature

logger = logging.getLogger(__name__)

AGGREGATED_PERIODS = (Period.MORNING, Period.EVENING)


class _PeriodAccumulator:
    """Acumulador de un periodo dentro de un día"""

    def __init__(self):
        self.count = 0
        self.total = 0.0
        self.minimum = math.inf
        self.maximum = -math.inf

    def add(self, reading: Reading):
        # promedio, mínimo y máximo se acumulan de forma independiente
        if reading.average_temperature is not None:
            self.count += 1
            self.total += reading.average_temperature
        if reading.min_temperature is not None:
            self.minimum = min(self.minimum, reading.min_temperature)
        if reading.max_temperature is not None:
            self.maximum = max(self.maximum, reading.max_temperature)

    def to_stats(self) -> PeriodStats:
        return PeriodStats(
            mean=round_temperature(self.total / self.count) if self.count else None,
            min=None if math.isinf(self.minimum) else self.minimum,
            max=None if math.isinf(self.maximum) else self.maximum,
        )


def reading_local_date(reading: Reading, tz: Optional[tzinfo] = None) -> date:
    """
    Día calendario local de una lectura.

    Raises:
        MalformedReading: Si la lectura no tiene un timestamp interpretable
    """
    timestamp = parse_timestamp(reading.timestamp)
    if timestamp is None:
        raise MalformedReading(f"Lectura {reading.id} sin timestamp válido: {reading.timestamp!r}")
    return to_local(timestamp, tz).date()


def aggregate_by_day(readings: Iterable, tz: Optional[tzinfo] = None) -> List[DailyAggregate]:
    """
    Agrupa lecturas por día y combina las de mañana y tarde.

    Args:
        readings: Lecturas en cualquier orden (el filtrado por rango es del llamador)
        tz: Zona horaria del dueño (por defecto TIME_ZONE del proyecto)

    Returns:
        Lista de DailyAggregate ordenada por fecha ascendente, solo con días
        que tienen al menos una lectura de mañana o tarde.

    Raises:
        TypeError: Si readings no es una secuencia de lecturas

    Example:
        >>> dias = aggregate_by_day(lecturas)
        >>> dias[0].morning.mean
        3.0
    """
    if readings is None or isinstance(readings, (str, bytes, Mapping)) \
            or not isinstance(readings, Iterable):
        raise TypeError(f"Se esperaba una secuencia de lecturas, no {type(readings).__name__}")

    buckets: Dict[date, Dict[str, _PeriodAccumulator]] = {}
    skipped = 0

    for reading in readings:
        if reading.period not in AGGREGATED_PERIODS:
            continue

        try:
            day = reading_local_date(reading, tz)
        except MalformedReading as e:
            logger.warning(f"Lectura omitida en la agregación: {e}")
            skipped += 1
            continue

        if day not in buckets:
            buckets[day] = {period: _PeriodAccumulator() for period in AGGREGATED_PERIODS}

        buckets[day][reading.period].add(reading)

    if skipped:
        logger.info(f"Agregación completada con {skipped} lecturas omitidas")

    return [
        DailyAggregate(
            date=day,
            morning=accumulators[Period.MORNING].to_stats(),
            evening=accumulators[Period.EVENING].to_stats(),
        )
        for day, accumulators in sorted(buckets.items())
    ]


def summarize_month(daily_aggregates: Iterable[DailyAggregate], period: str) -> MonthlySummary:
    """
    Resume un periodo (mañana o tarde) a lo largo de los días consultados.

    Args:
        daily_aggregates: Resultado de aggregate_by_day()
        period: Period.MORNING o Period.EVENING

    Returns:
        MonthlySummary con promedio de los promedios diarios, mínimo de los
        mínimos diarios, máximo de los máximos diarios y cantidad de días
        con algún valor en el periodo.

    Raises:
        ReadingValidationError: Si el periodo no es mañana ni tarde
    """
    if period not in AGGREGATED_PERIODS:
        raise ReadingValidationError(f"Periodo inválido para resumen mensual: {period!r}")

    means = []
    minimums = []
    maximums = []
    days_with_values = 0

    for day in daily_aggregates:
        stats = day.for_period(period)
        if stats.mean is not None:
            means.append(stats.mean)
        if stats.min is not None:
            minimums.append(stats.min)
        if stats.max is not None:
            maximums.append(stats.max)
        if stats.has_values():
            days_with_values += 1

    return MonthlySummary(
        period=Period(period).value,
        average=mean(means),
        min=min_or_none(minimums),
        max=max_or_none(maximums),
        count=days_with_values,
    )


def summarize_readings(readings: Iterable, tz: Optional[tzinfo] = None) -> dict:
    """
    Atajo para vistas y comandos: días agregados más resumen de mañana y tarde.

    Returns:
        Dict con 'dias', 'morning' y 'evening'
    """
    daily = aggregate_by_day(readings, tz)
    return {
        'dias': daily,
        'morning': summarize_month(daily, Period.MORNING),
        'evening': summarize_month(daily, Period.EVENING),
    }
