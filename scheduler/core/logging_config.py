import logging

from scheduler.core import config

LOG_FORMAT = '%(asctime)s %(levelname)s [%(name)s] %(message)s'


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(level=level or config.LOG_LEVEL, format=LOG_FORMAT)
    # SQL echo goes through its own logger; keep it quiet unless asked for.
    if not config.DB_ECHO:
        logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)
