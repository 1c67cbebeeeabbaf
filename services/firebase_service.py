"""
Firebase Service

Este módulo centraliza todas las interacciones con Firebase (Firestore).
Proporciona funciones para leer, crear y archivar lecturas de temperatura.

Estructura en Firestore:
    users/{ownerUserId}/temperatures          lecturas vigentes
    users/{ownerUserId}/deletedTemperatures   lecturas eliminadas (solo se agregan)

Funciones principales:
- initialize_firebase(): Inicializa Firebase Admin SDK
- get_firestore_client(): Cliente de Firestore
- fetch_readings_in_range(owner_id, start, end): Lecturas de un rango de tiempo
- fetch_all_readings(owner_id): Todas las lecturas vigentes
- fetch_deleted_readings(owner_id): Lecturas eliminadas
- add_reading_document(owner_id, data): Crea una lectura
- atomic_move(delete_ref, insert_collection, record): Inserta y borra en un solo batch

Los errores de Firestore (red, permisos, cuota) se propagan sin reintentos.
"""

import logging
import os
from datetime import datetime
from typing import Any, Dict, List

import firebase_admin
from django.conf import settings
from firebase_admin import credentials, firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from apps.lecturas.models import Reading
from apps.lecturas.schema import normalize_reading_document

logger = logging.getLogger(__name__)

READINGS_COLLECTION = 'temperatures'
DELETED_READINGS_COLLECTION = 'deletedTemperatures'
SERVER_TIMESTAMP = firestore.SERVER_TIMESTAMP

# Variable global para mantener el cliente de Firestore
_firestore_client = None


def initialize_firebase() -> bool:
    """
    Inicializa Firebase Admin SDK con las credenciales del proyecto.

    Es seguro llamarla múltiples veces.

    Returns:
        bool: True si la inicialización fue exitosa
    """
    if firebase_admin._apps:
        return True

    try:
        # Intentar usar archivo de credenciales si existe
        creds_path = getattr(settings, 'FIREBASE_CREDENTIALS_PATH', None)
        if creds_path:
            full_path = os.path.join(settings.BASE_DIR, creds_path)
            if os.path.exists(full_path):
                firebase_admin.initialize_app(credentials.Certificate(full_path))
                logger.info("Firebase Admin SDK inicializado desde archivo JSON")
                return True

        config = settings.FIREBASE_CONFIG

        if not config.get('project_id'):
            logger.warning("FIREBASE_PROJECT_ID no está configurado - Firebase deshabilitado")
            return False

        cred = credentials.Certificate({
            "type": "service_account",
            "project_id": config['project_id'],
            "private_key_id": config.get('private_key_id', ''),
            "private_key": config.get('private_key', ''),
            "client_email": config.get('client_email', ''),
            "client_id": config.get('client_id', ''),
            "auth_uri": "https://accounts.google.com/o/oauth2/auth",
            "token_uri": "https://oauth2.googleapis.com/token",
            "auth_provider_x509_cert_url": "https://www.googleapis.com/oauth2/v1/certs",
        })

        firebase_admin.initialize_app(cred, {'projectId': config['project_id']})

        logger.info("Firebase Admin SDK inicializado correctamente")
        return True

    except (ValueError, IOError) as e:
        logger.error(f"Error al inicializar Firebase: {str(e)}")
        return False


def get_firestore_client():
    """
    Obtiene o crea el cliente de Firestore.

    Raises:
        RuntimeError: Si Firebase no está configurado
    """
    global _firestore_client

    if _firestore_client is not None:
        return _firestore_client

    if not initialize_firebase():
        raise RuntimeError("Firebase no está configurado")

    _firestore_client = firestore.client()
    return _firestore_client


def readings_collection(owner_id: str, client=None):
    """Colección de lecturas vigentes de un dueño"""
    client = client or get_firestore_client()
    return client.collection(f'users/{owner_id}/{READINGS_COLLECTION}')


def deleted_readings_collection(owner_id: str, client=None):
    """Colección de lecturas eliminadas de un dueño"""
    client = client or get_firestore_client()
    return client.collection(f'users/{owner_id}/{DELETED_READINGS_COLLECTION}')


def _to_readings(snapshots, owner_id: str) -> List[Reading]:
    return [
        normalize_reading_document(snap.id, snap.to_dict() or {}, owner_id)
        for snap in snapshots
    ]


def fetch_readings_in_range(
    owner_id: str,
    start: datetime,
    end: datetime,
    client=None,
) -> List[Reading]:
    """
    Obtiene las lecturas de un dueño entre start y end (ambos inclusive).

    Args:
        owner_id: UID del dueño de las lecturas
        start: Inicio del rango
        end: Fin del rango

    Returns:
        Lista de Reading ordenada por timestamp ascendente
    """
    query = readings_collection(owner_id, client)\
        .where(filter=FieldFilter('timestamp', '>=', start))\
        .where(filter=FieldFilter('timestamp', '<=', end))\
        .order_by('timestamp', direction=firestore.Query.ASCENDING)

    readings = _to_readings(query.stream(), owner_id)
    logger.debug(f"Obtenidas {len(readings)} lecturas de {owner_id} entre {start} y {end}")
    return readings


def fetch_all_readings(owner_id: str, client=None) -> List[Reading]:
    """Obtiene todas las lecturas vigentes de un dueño, las más recientes primero"""
    query = readings_collection(owner_id, client)\
        .order_by('timestamp', direction=firestore.Query.DESCENDING)

    readings = _to_readings(query.stream(), owner_id)
    logger.debug(f"Obtenidas {len(readings)} lecturas de {owner_id}")
    return readings


def fetch_deleted_readings(owner_id: str, client=None) -> List[Dict[str, Any]]:
    """
    Obtiene las lecturas eliminadas de un dueño, la eliminación más reciente primero.

    Returns:
        Lista de diccionarios con los campos del documento más 'id'
    """
    query = deleted_readings_collection(owner_id, client)\
        .order_by('deletedAt', direction=firestore.Query.DESCENDING)

    return [{'id': snap.id, **(snap.to_dict() or {})} for snap in query.stream()]


def get_reading_document(owner_id: str, reading_id: str, client=None):
    """
    Obtiene el snapshot crudo de una lectura vigente.

    Returns:
        (DocumentReference, DocumentSnapshot) o (DocumentReference, None) si no existe
    """
    ref = readings_collection(owner_id, client).document(reading_id)
    snapshot = ref.get()
    return ref, (snapshot if snapshot.exists else None)


def add_reading_document(owner_id: str, data: Dict[str, Any], client=None) -> str:
    """
    Crea un documento de lectura con ID automático.

    Returns:
        str: ID del nuevo documento
    """
    ref = readings_collection(owner_id, client).document()
    ref.set(data)
    logger.info(f"Lectura {ref.id} creada para {owner_id}")
    return ref.id


def atomic_move(delete_ref, insert_collection, record: Dict[str, Any], client=None) -> str:
    """
    Inserta un documento nuevo y borra otro en un único WriteBatch.

    Ambas escrituras se aplican juntas o ninguna se aplica.

    Args:
        delete_ref: DocumentReference a borrar
        insert_collection: CollectionReference donde insertar
        record: Campos del documento a insertar

    Returns:
        str: ID del documento insertado
    """
    client = client or get_firestore_client()
    new_ref = insert_collection.document()

    batch = client.batch()
    batch.set(new_ref, record)
    batch.delete(delete_ref)
    batch.commit()

    return new_ref.id
