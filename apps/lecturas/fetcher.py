"""
Consultas mensuales con descarte de respuestas obsoletas.

Cuando el usuario cambia rápido de mes, una consulta lenta anterior puede
terminar después que la nueva. Cada consulta recibe un número de generación
y solo se entrega el resultado de la generación más reciente.
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, List, Optional

from .models import Reading
from .services import fetch_month_readings

logger = logging.getLogger(__name__)


class MonthFetcher:
    """
    Ejecuta consultas mensuales en segundo plano y descarta las obsoletas.

    Example:
        >>> with MonthFetcher() as fetcher:
        >>>     fetcher.submit('uid', 2025, 6, on_result=mostrar)
        >>>     fetcher.submit('uid', 2025, 7, on_result=mostrar)  # la de junio se descarta
    """

    def __init__(
        self,
        fetch: Callable[[str, int, int], List[Reading]] = fetch_month_readings,
        max_workers: int = 4,
    ):
        self._fetch = fetch
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix='month-fetch')
        self._lock = threading.Lock()
        self._generation = 0
        self._latest: Optional[List[Reading]] = None

    @property
    def generation(self) -> int:
        """Número de la consulta más reciente"""
        with self._lock:
            return self._generation

    @property
    def latest(self) -> Optional[List[Reading]]:
        """Último resultado entregado (None si aún no hay ninguno)"""
        with self._lock:
            return self._latest

    def submit(
        self,
        owner_id: str,
        year: int,
        month: int,
        on_result: Optional[Callable[[List[Reading]], None]] = None,
        on_error: Optional[Callable[[BaseException], None]] = None,
    ) -> Future:
        """
        Lanza la consulta de un mes.

        on_result / on_error solo se llaman si al terminar ésta sigue siendo
        la consulta más reciente.

        Returns:
            Future con las lecturas (o la excepción de Firestore)
        """
        with self._lock:
            self._generation += 1
            generation = self._generation

        logger.debug(f"Consulta {generation}: {owner_id} {year}-{month:02d}")
        future = self._executor.submit(self._fetch, owner_id, year, month)
        future.add_done_callback(
            lambda done: self._deliver(generation, done, on_result, on_error)
        )
        return future

    def _deliver(self, generation, future, on_result, on_error):
        if future.cancelled():
            return
        error = future.exception()

        with self._lock:
            if generation != self._generation:
                logger.debug(f"Consulta {generation} descartada (vigente: {self._generation})")
                return
            if error is None:
                self._latest = future.result()

        if error is not None:
            logger.error(f"Error en consulta {generation}: {error}")
            if on_error:
                on_error(error)
            return

        if on_result:
            on_result(future.result())

    def shutdown(self, wait: bool = True):
        self._executor.shutdown(wait=wait)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.shutdown()
