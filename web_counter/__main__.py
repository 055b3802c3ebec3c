import logging
import sys

from waitress import serve

from .app import create_app
from .config import HOST, PORT, THREADS, load_settings
from .errors import ConfigError
from .store import make_store, start

log = logging.getLogger("web_counter")


def main() -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = load_settings()
    except ConfigError as exc:
        log.error("bad configuration: %s", exc)
        return 1

    if settings.storage == "pg":
        log.info("connecting to database: %s", settings.safe_conninfo)

    store = make_store(settings)
    startup = start(store)
    if not startup.ok:
        log.error("startup failed: %s", startup.error)
        store.close()
        return 1

    try:
        log.info("Server started on :%d (storage=%s)", PORT, settings.storage)
        serve(create_app(store), host=HOST, port=PORT, threads=THREADS)
    finally:
        store.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
