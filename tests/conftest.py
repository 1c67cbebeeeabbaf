"""Pytest fixtures: Firestore en memoria y clientes autenticados."""

import copy
import itertools
import logging

import pytest
from django.utils import timezone
from firebase_admin import auth as firebase_auth
from google.api_core.exceptions import ServiceUnavailable
from rest_framework.test import APIClient

from services.firebase_service import SERVER_TIMESTAMP

_OPERATORS = {
    '>=': lambda a, b: a >= b,
    '<=': lambda a, b: a <= b,
    '>': lambda a, b: a > b,
    '<': lambda a, b: a < b,
    '==': lambda a, b: a == b,
}


def _order_key(value):
    """Orden de Firestore entre tipos: números, luego fechas, luego strings"""
    if hasattr(value, 'isoformat'):
        return (1, value)
    if isinstance(value, str):
        return (2, value)
    return (0, value)


class FakeSnapshot:
    def __init__(self, doc_id, data):
        self.id = doc_id
        self._data = data
        self.exists = data is not None

    def to_dict(self):
        return copy.deepcopy(self._data) if self._data is not None else None


class FakeDocumentRef:
    def __init__(self, store, collection_path, doc_id):
        self._store = store
        self.collection_path = collection_path
        self.id = doc_id

    def get(self):
        return FakeSnapshot(self.id, self._store.docs(self.collection_path).get(self.id))

    def set(self, data):
        self._store.write(self, data)


class FakeQuery:
    def __init__(self, store, path, filters=(), order=None):
        self._store = store
        self._path = path
        self._filters = tuple(filters)
        self._order = order

    def where(self, filter):
        return FakeQuery(self._store, self._path, self._filters + (filter,), self._order)

    def order_by(self, field, direction='ASCENDING'):
        return FakeQuery(self._store, self._path, self._filters, (field, direction))

    def _matches(self, data):
        for f in self._filters:
            if f.field_path not in data:
                return False
            value = data[f.field_path]
            if type(value) is not type(f.value) and not (
                    hasattr(value, 'isoformat') and hasattr(f.value, 'isoformat')):
                return False
            if not _OPERATORS[f.op_string](value, f.value):
                return False
        return True

    def stream(self):
        items = [
            (doc_id, data) for doc_id, data in self._store.docs(self._path).items()
            if self._matches(data)
        ]
        if self._order:
            field, direction = self._order
            items = [item for item in items if field in item[1]]
            items.sort(key=lambda item: _order_key(item[1][field]), reverse=direction == 'DESCENDING')
        return iter([FakeSnapshot(doc_id, copy.deepcopy(data)) for doc_id, data in items])


class FakeCollection(FakeQuery):
    def document(self, doc_id=None):
        return FakeDocumentRef(self._store, self._path, doc_id or self._store.next_id())


class FakeBatch:
    def __init__(self, store):
        self._store = store
        self._ops = []

    def set(self, ref, data):
        self._ops.append(('set', ref, data))

    def delete(self, ref):
        self._ops.append(('delete', ref, None))

    def commit(self):
        self._store.commits += 1
        if self._store.fail_commit:
            raise ServiceUnavailable('Firestore no disponible')
        for op, ref, data in self._ops:
            if op == 'set':
                self._store.write(ref, data)
            else:
                self._store.docs(ref.collection_path).pop(ref.id, None)


class FakeFirestore:
    """Cliente de Firestore en memoria con la API que usa firebase_service"""

    def __init__(self):
        self._collections = {}
        self._ids = itertools.count(1)
        self.fail_commit = False
        self.commits = 0

    def next_id(self):
        return f'doc{next(self._ids)}'

    def docs(self, path):
        return self._collections.setdefault(path, {})

    def write(self, ref, data):
        resolved = {
            key: timezone.now() if value is SERVER_TIMESTAMP else value
            for key, value in data.items()
        }
        self.docs(ref.collection_path)[ref.id] = copy.deepcopy(resolved)

    def collection(self, path):
        return FakeCollection(self, path)

    def batch(self):
        return FakeBatch(self)

    # atajos para los tests
    def add(self, owner_id, data, doc_id=None, collection='temperatures'):
        ref = self.collection(f'users/{owner_id}/{collection}').document(doc_id)
        ref.set(data)
        return ref.id

    def readings(self, owner_id):
        return self.docs(f'users/{owner_id}/temperatures')

    def deleted(self, owner_id):
        return self.docs(f'users/{owner_id}/deletedTemperatures')


@pytest.fixture
def firestore_client(monkeypatch):
    """Reemplaza el cliente de Firestore por uno en memoria"""
    client = FakeFirestore()
    monkeypatch.setattr('services.firebase_service.get_firestore_client', lambda: client)
    return client


TOKENS = {
    'token-ana': {'uid': 'ana', 'email': 'ana@lab.cl', 'name': 'Ana'},
    'token-beto': {'uid': 'beto', 'email': 'beto@lab.cl', 'name': 'Beto'},
    'token-admin': {'uid': 'admin', 'email': 'admin@lab.cl', 'name': 'Admin', 'rol': 'ADMIN'},
}


def fake_verify_id_token(token, *args, **kwargs):
    if token == 'token-expirado':
        raise firebase_auth.ExpiredIdTokenError('Token expirado', None)
    if token not in TOKENS:
        raise firebase_auth.InvalidIdTokenError('Token inválido')
    return dict(TOKENS[token])


@pytest.fixture
def fake_auth(monkeypatch):
    """Verificación de tokens de Firebase sin red"""
    monkeypatch.setattr('apps.auth.middleware.initialize_firebase', lambda: True)
    monkeypatch.setattr('apps.auth.views.initialize_firebase', lambda: True)
    monkeypatch.setattr(firebase_auth, 'verify_id_token', fake_verify_id_token)


@pytest.fixture
def api_client(fake_auth, firestore_client):
    return APIClient()


@pytest.fixture
def ana_client(api_client):
    api_client.credentials(HTTP_AUTHORIZATION='Bearer token-ana')
    return api_client


@pytest.fixture
def admin_client(api_client):
    api_client.credentials(HTTP_AUTHORIZATION='Bearer token-admin')
    return api_client


@pytest.fixture
def app_caplog(caplog, monkeypatch):
    """caplog que también recibe los logs de apps.* y services.*"""
    for name in ('apps', 'services'):
        monkeypatch.setattr(logging.getLogger(name), 'propagate', True)
    caplog.set_level(logging.DEBUG)
    return caplog
