import abc
import logging
import threading
from dataclasses import dataclass
from typing import Optional

import psycopg
from psycopg_pool import ConnectionPool

from .config import POOL_MAX_SIZE, POOL_MIN_SIZE, Settings
from .errors import StoreError

log = logging.getLogger(__name__)

CREATE_SQL = "CREATE TABLE IF NOT EXISTS counter (count INT)"
SELECT_SQL = "SELECT count FROM counter"
INSERT_SQL = "INSERT INTO counter (count) VALUES (0)"
UPDATE_SQL = "UPDATE counter SET count = count + 1"


class CounterStore(abc.ABC):
    """Holds the shared count and hands out increments one caller at a time."""

    @abc.abstractmethod
    def initialize(self) -> None:
        ...

    @abc.abstractmethod
    def increment_and_get(self) -> int:
        ...

    def close(self) -> None:
        pass


class MemoryCounter(CounterStore):
    def __init__(self):
        self.lock = threading.Lock()
        self.value = 0

    def initialize(self) -> None:
        pass

    def increment_and_get(self) -> int:
        with self.lock:
            self.value += 1
            return self.value


class PgCounter(CounterStore):
    """Counter kept in the single row of the ``counter`` table.

    The in-process lock serializes increments from this process only; it does
    not coordinate with other replicas writing to the same table.
    """

    def __init__(self, pool: ConnectionPool):
        self.pool = pool
        self.lock = threading.Lock()

    @classmethod
    def from_conninfo(cls, conninfo: str) -> "PgCounter":
        pool = ConnectionPool(
            conninfo=conninfo,
            min_size=POOL_MIN_SIZE,
            max_size=POOL_MAX_SIZE,
            open=False,
        )
        return cls(pool)

    def initialize(self) -> None:
        # PoolTimeout is a psycopg.OperationalError
        try:
            self.pool.open(wait=True)
            with self.pool.connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(CREATE_SQL)
                    cur.execute(SELECT_SQL)
                    if cur.fetchone() is None:
                        cur.execute(INSERT_SQL)
                        log.info("counter table was empty, starting from 0")
                conn.commit()
        except psycopg.Error as exc:
            raise StoreError(f"Failed to initialize counter table: {exc}") from exc

    def increment_and_get(self) -> int:
        with self.lock:
            try:
                with self.pool.connection() as conn:
                    with conn.cursor() as cur:
                        try:
                            cur.execute(UPDATE_SQL)
                        except psycopg.Error as exc:
                            raise StoreError("Failed to update count") from exc
                        try:
                            cur.execute(SELECT_SQL)
                            row = cur.fetchone()
                        except psycopg.Error as exc:
                            raise StoreError("Failed to retrieve count") from exc
                        if row is None:
                            raise StoreError("Failed to retrieve count")
                    conn.commit()
            except psycopg.Error as exc:
                raise StoreError("Failed to update count") from exc
            return row[0]

    def close(self) -> None:
        self.pool.close()


@dataclass(frozen=True)
class Startup:
    ok: bool
    error: Optional[str] = None


def make_store(settings: Settings) -> CounterStore:
    if settings.storage == "pg":
        return PgCounter.from_conninfo(settings.conninfo)
    return MemoryCounter()


def start(store: CounterStore) -> Startup:
    """Prepare the store for traffic. Never exits; the caller decides."""
    try:
        store.initialize()
    except StoreError as exc:
        return Startup(ok=False, error=str(exc))
    return Startup(ok=True)
