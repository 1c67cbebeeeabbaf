import threading

from google.api_core.exceptions import ServiceUnavailable

from apps.lecturas.fetcher import MonthFetcher


def gated_fetch(gates, errors=()):
    """Consulta falsa que espera a que el test libere su mes"""
    def fetch(owner_id, year, month):
        gates[month].wait(5)
        if month in errors:
            raise ServiceUnavailable('Firestore no disponible')
        return [f'{owner_id}-{year}-{month}']
    return fetch


def test_slow_previous_fetch_is_discarded():
    gates = {5: threading.Event(), 6: threading.Event()}
    delivered = []

    with MonthFetcher(fetch=gated_fetch(gates), max_workers=2) as fetcher:
        old = fetcher.submit('ana', 2025, 5, on_result=delivered.append)
        new = fetcher.submit('ana', 2025, 6, on_result=delivered.append)

        gates[6].set()
        new.result(5)
        gates[5].set()
        old.result(5)

    assert delivered == [['ana-2025-6']]
    assert fetcher.latest == ['ana-2025-6']
    assert fetcher.generation == 2


def test_sequential_fetches_are_all_delivered():
    gates = {5: threading.Event(), 6: threading.Event()}
    gates[5].set()
    gates[6].set()
    delivered = []
    first_delivered = threading.Event()

    def on_first(readings):
        delivered.append(readings)
        first_delivered.set()

    with MonthFetcher(fetch=gated_fetch(gates)) as fetcher:
        fetcher.submit('ana', 2025, 5, on_result=on_first)
        assert first_delivered.wait(5)
        fetcher.submit('ana', 2025, 6, on_result=delivered.append)

    assert delivered == [['ana-2025-5'], ['ana-2025-6']]
    assert fetcher.latest == ['ana-2025-6']


def test_error_of_current_fetch_is_reported():
    gates = {6: threading.Event()}
    gates[6].set()
    errors = []
    results = []

    with MonthFetcher(fetch=gated_fetch(gates, errors=(6,))) as fetcher:
        future = fetcher.submit('ana', 2025, 6, on_result=results.append, on_error=errors.append)

    assert isinstance(future.exception(), ServiceUnavailable)
    assert len(errors) == 1
    assert results == []
    assert fetcher.latest is None


def test_error_of_stale_fetch_is_ignored():
    gates = {5: threading.Event(), 6: threading.Event()}
    errors = []
    results = []

    with MonthFetcher(fetch=gated_fetch(gates, errors=(5,)), max_workers=2) as fetcher:
        fetcher.submit('ana', 2025, 5, on_result=results.append, on_error=errors.append)
        fetcher.submit('ana', 2025, 6, on_result=results.append, on_error=errors.append)
        gates[6].set()
        gates[5].set()

    assert errors == []
    assert results == [['ana-2025-6']]
