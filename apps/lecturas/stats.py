"""Funciones auxiliares para combinar temperaturas con valores nulos"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional

ONE_DECIMAL = Decimal('0.1')


def round_temperature(value: Optional[float]) -> Optional[float]:
    """
    Redondea a 1 decimal, alejándose de cero en los empates (2.25 -> 2.3, -2.25 -> -2.3).

    Se usa la representación decimal del float para que 2.25 no se
    redondee como 2.2499999...
    """
    if value is None:
        return None
    return float(Decimal(str(value)).quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP))


def average_or_single(min_temp: Optional[float], max_temp: Optional[float]) -> Optional[float]:
    """
    Temperatura promedio de una lectura.

    Punto medio si vienen mínimo y máximo, el valor presente si viene solo
    uno, o None si no viene ninguno.
    """
    if min_temp is not None and max_temp is not None:
        return round_temperature((min_temp + max_temp) / 2)
    if min_temp is not None:
        return round_temperature(min_temp)
    if max_temp is not None:
        return round_temperature(max_temp)
    return None


def mean(values: Iterable[float]) -> Optional[float]:
    """Promedio redondeado a 1 decimal, o None si no hay valores"""
    values = list(values)
    if not values:
        return None
    return round_temperature(sum(values) / len(values))


def min_or_none(values: Iterable[float]) -> Optional[float]:
    values = list(values)
    return min(values) if values else None


def max_or_none(values: Iterable[float]) -> Optional[float]:
    values = list(values)
    return max(values) if values else None


def to_float(value) -> Optional[float]:
    """Convierte a float tolerando None, strings y Decimal"""
    if value is None or value == '':
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None
