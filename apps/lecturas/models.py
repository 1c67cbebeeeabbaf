"""Modelos de Lecturas - Mapea documentos de Firestore

Las lecturas no viven en la base relacional sino en Firestore:

    users/{ownerUserId}/temperatures/{id}          lecturas vigentes
    users/{ownerUserId}/deletedTemperatures/{id}   lecturas eliminadas (auditoría)

Los nombres de campo de los documentos se mantienen en camelCase tal como
los escribe el frontend.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from django.db import models


# Identificador usado cuando un documento antiguo no registró quién lo agregó
UNKNOWN_ADDER_ID = 'unknown_original_adder_uid'


class Period(models.TextChoices):
    """Periodo del día en que se tomó una lectura"""

    MORNING = 'morning', 'Mañana'
    EVENING = 'evening', 'Tarde'
    OTHER = 'other', 'Otro'


@dataclass
class Reading:
    """Lectura de temperatura de un refrigerador (mañana o tarde)"""

    id: str
    owner_user_id: str
    timestamp: Optional[datetime]
    period: str
    min_temperature: Optional[float] = None
    max_temperature: Optional[float] = None
    average_temperature: Optional[float] = None
    added_by_user_id: Optional[str] = None
    added_by_user_name: Optional[str] = None
    created_at: Optional[Any] = None

    def to_document(self) -> Dict[str, Any]:
        """Campos del documento en Firestore (sin el id)"""
        return {
            'ownerUserId': self.owner_user_id,
            'timestamp': self.timestamp,
            'period': self.period,
            'minTemperature': self.min_temperature,
            'maxTemperature': self.max_temperature,
            'averageTemperature': self.average_temperature,
            'addedByUserId': self.added_by_user_id,
            'addedByUserName': self.added_by_user_name,
            'createdAt': self.created_at,
        }


@dataclass
class DeletedReading(Reading):
    """Copia inmutable de una lectura al momento de eliminarla"""

    deleted_at: Optional[Any] = None
    original_log_id: str = ''
    deleted_by_user_id: str = ''
    deleted_by_user_name: Optional[str] = None

    def to_document(self) -> Dict[str, Any]:
        document = super().to_document()
        document.update({
            'deletedAt': self.deleted_at,
            'originalLogId': self.original_log_id,
            'deletedByUserId': self.deleted_by_user_id,
            'deletedByUserName': self.deleted_by_user_name,
        })
        return document


@dataclass
class PeriodStats:
    """Estadísticas de un periodo dentro de un día"""

    mean: Optional[float] = None
    min: Optional[float] = None
    max: Optional[float] = None

    def has_values(self) -> bool:
        return self.mean is not None or self.min is not None or self.max is not None


@dataclass
class DailyAggregate:
    """Resumen de un día calendario (mañana y tarde por separado)"""

    date: Any
    morning: PeriodStats = field(default_factory=PeriodStats)
    evening: PeriodStats = field(default_factory=PeriodStats)

    def for_period(self, period: str) -> PeriodStats:
        return self.morning if period == Period.MORNING else self.evening


@dataclass
class MonthlySummary:
    """Estadística mensual de un periodo, ponderada por día"""

    period: str
    average: Optional[float] = None
    min: Optional[float] = None
    max: Optional[float] = None
    count: int = 0
