from contextlib import contextmanager

import psycopg

from web_counter.errors import StoreError
from web_counter.store import CounterStore


class FakeDatabase:
    """The ``counter`` table as a list of committed rows."""

    def __init__(self, rows=None, table=True):
        self.table = table
        self.rows = list(rows or [])
        self.fail_on = set()


class FakeCursor:
    def __init__(self, conn):
        self.conn = conn
        self._result = None

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def execute(self, sql, params=None):
        db = self.conn.db
        verb = sql.split()[0].lower()
        if verb in db.fail_on:
            raise psycopg.OperationalError(f"{verb} failed")
        rows = self.conn.pending
        if verb == "create":
            self.conn.pending_table = True
        elif not (db.table or self.conn.pending_table):
            raise psycopg.errors.UndefinedTable('relation "counter" does not exist')
        elif verb == "select":
            self._result = [(v,) for v in rows]
        elif verb == "insert":
            rows.append(0)
        elif verb == "update":
            rows[:] = [v + 1 for v in rows]
        else:
            raise AssertionError(f"unexpected statement {sql!r}")

    def fetchone(self):
        return self._result[0] if self._result else None


class FakeConnection:
    def __init__(self, db):
        self.db = db
        self.pending = list(db.rows)
        self.pending_table = db.table
        self.commits = 0

    def cursor(self):
        return FakeCursor(self)

    def commit(self):
        if "commit" in self.db.fail_on:
            raise psycopg.OperationalError("commit failed")
        self.db.rows = list(self.pending)
        self.db.table = self.pending_table
        self.commits += 1


class FakePool:
    """Stands in for psycopg_pool.ConnectionPool; uncommitted work is discarded."""

    def __init__(self, db=None, reachable=True):
        self.db = db or FakeDatabase()
        self.reachable = reachable
        self.opened = False
        self.closed = False

    def open(self, wait=False):
        if not self.reachable:
            raise psycopg.OperationalError("connection refused")
        self.opened = True

    @contextmanager
    def connection(self):
        if not self.reachable:
            raise psycopg.OperationalError("connection refused")
        yield FakeConnection(self.db)

    def close(self):
        self.closed = True


class BrokenStore(CounterStore):
    def __init__(self):
        self.calls = 0

    def initialize(self):
        raise StoreError("Failed to initialize counter table: boom")

    def increment_and_get(self):
        self.calls += 1
        raise StoreError("Failed to update count")

