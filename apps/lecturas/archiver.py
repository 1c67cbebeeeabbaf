"""
Archivado (eliminación lógica) de lecturas.

Una lectura eliminada se copia completa a deletedTemperatures junto con
quién y cuándo la eliminó, y se borra de temperatures. Ambas escrituras van
en un mismo batch de Firestore: nunca queda visible en las dos colecciones
ni en ninguna.

Las lecturas eliminadas no se restauran ni se modifican.
"""

import logging
from typing import Any, Dict, Optional

from services.firebase_service import (
    SERVER_TIMESTAMP,
    atomic_move,
    deleted_readings_collection,
    get_reading_document,
)

from .exceptions import ReadingNotFound, ReadingValidationError
from .models import UNKNOWN_ADDER_ID, DeletedReading, Period
from .schema import normalize_reading_document

logger = logging.getLogger(__name__)


def build_deleted_record(
    owner_id: str,
    reading_id: str,
    data: Dict[str, Any],
    deleted_by_user_id: str,
    deleted_by_user_name: Optional[str],
) -> Dict[str, Any]:
    """
    Arma el documento de la lectura eliminada.

    Copia todos los campos originales y completa los que falten en
    documentos escritos con esquemas anteriores, en vez de fallar.
    Hora, periodo y temperaturas salen de la lectura normalizada, igual
    que en el listado.

    Returns:
        Dict listo para escribir en deletedTemperatures
    """
    reading = normalize_reading_document(reading_id, data, owner_id)

    added_by = data.get('addedByUserId')
    if not isinstance(added_by, str) or not added_by:
        added_by = UNKNOWN_ADDER_ID

    deleted = DeletedReading(
        id='',
        owner_user_id=reading.owner_user_id or owner_id,
        timestamp=reading.timestamp or SERVER_TIMESTAMP,
        period=Period(reading.period).value,
        min_temperature=reading.min_temperature,
        max_temperature=reading.max_temperature,
        average_temperature=reading.average_temperature,
        added_by_user_id=added_by,
        added_by_user_name=data.get('addedByUserName'),
        created_at=data.get('createdAt') or SERVER_TIMESTAMP,
        deleted_at=SERVER_TIMESTAMP,
        original_log_id=reading_id,
        deleted_by_user_id=deleted_by_user_id,
        deleted_by_user_name=deleted_by_user_name,
    )

    # campos no canónicos de esquemas anteriores también se conservan
    return {**data, **deleted.to_document()}


def archive_reading(
    owner_id: str,
    reading_id: str,
    acting_user_id: str,
    acting_user_name: Optional[str] = None,
    client=None,
) -> str:
    """
    Mueve una lectura vigente al registro de lecturas eliminadas.

    Args:
        owner_id: UID del dueño de la lectura
        reading_id: ID de la lectura a eliminar
        acting_user_id: UID de quien elimina
        acting_user_name: Nombre de quien elimina (opcional)

    Returns:
        str: ID del documento creado en deletedTemperatures

    Raises:
        ReadingValidationError: Si faltan owner_id, reading_id o acting_user_id
        ReadingNotFound: Si la lectura no existe (no se escribe nada)
        GoogleAPICallError: Errores de Firestore, sin reintentos
    """
    if not owner_id or not reading_id or not acting_user_id:
        raise ReadingValidationError(
            "Se requieren el dueño, la lectura y el usuario que elimina"
        )

    logger.info(f"Eliminando lectura {reading_id} de {owner_id} por {acting_user_id}")

    ref, snapshot = get_reading_document(owner_id, reading_id, client)
    if snapshot is None:
        logger.warning(f"Lectura {reading_id} no encontrada para {owner_id}")
        raise ReadingNotFound(f"Lectura {reading_id} no encontrada")

    record = build_deleted_record(
        owner_id,
        reading_id,
        snapshot.to_dict() or {},
        acting_user_id,
        acting_user_name,
    )

    deleted_id = atomic_move(
        ref,
        deleted_readings_collection(owner_id, client),
        record,
        client,
    )

    logger.info(f"Lectura {reading_id} movida a eliminadas como {deleted_id}")
    return deleted_id
