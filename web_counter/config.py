import os
from dataclasses import dataclass
from typing import Mapping, Optional

import psycopg
from psycopg.conninfo import conninfo_to_dict, make_conninfo

from .errors import ConfigError

HOST = "0.0.0.0"
PORT = 8080
THREADS = 20

POOL_MIN_SIZE = 1
POOL_MAX_SIZE = 20

STORAGES = ("mem", "pg")
DB_VARS = ("DB_USER", "DB_NAME", "DB_HOST", "DB_PASSWORD")


@dataclass(frozen=True)
class Settings:
    storage: str = "mem"
    conninfo: Optional[str] = None

    @property
    def safe_conninfo(self) -> Optional[str]:
        """Connection string with the password masked, for log lines."""
        if not self.conninfo:
            return self.conninfo
        params = conninfo_to_dict(self.conninfo)
        if "password" not in params:
            return self.conninfo
        params["password"] = "***"
        return make_conninfo(**params)


def build_conninfo(user: str, password: str, dbname: str, host: str) -> str:
    return make_conninfo(user=user, password=password, dbname=dbname, host=host, sslmode="require")


def load_settings(environ: Mapping[str, str] = os.environ) -> Settings:
    storage = environ.get("STORAGE", "mem")
    if storage not in STORAGES:
        raise ConfigError(f"STORAGE must be one of {', '.join(STORAGES)}, got {storage!r}")

    if storage == "mem":
        return Settings(storage=storage)

    # PG_DSN wins over the DB_* variables when both are present
    dsn = environ.get("PG_DSN")
    if dsn:
        try:
            conninfo_to_dict(dsn)
        except psycopg.ProgrammingError:
            # the string may hold a password, keep it out of the message
            raise ConfigError("PG_DSN is not a valid connection string") from None
        return Settings(storage=storage, conninfo=dsn)

    missing = [name for name in DB_VARS if not environ.get(name)]
    if missing:
        raise ConfigError(f"missing database settings: {', '.join(missing)}")

    conninfo = build_conninfo(
        user=environ["DB_USER"],
        password=environ["DB_PASSWORD"],
        dbname=environ["DB_NAME"],
        host=environ["DB_HOST"],
    )
    return Settings(storage=storage, conninfo=conninfo)
