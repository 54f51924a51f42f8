from threading import Lock

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.orm import declarative_base, sessionmaker

from scheduler.core import config


def build_engine(database_url: str):
    if database_url.startswith('sqlite'):
        # Threaded request handlers share file-backed SQLite databases.
        return create_engine(
            database_url,
            echo=config.DB_ECHO,
            connect_args={'check_same_thread': False, 'timeout': 30},
        )
    return create_engine(database_url, echo=config.DB_ECHO, pool_pre_ping=True)


engine = build_engine(config.DATABASE_URL)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()

ACTIVE_STATUS_PREDICATE = "status IN ('pending', 'accepted')"
PENDING_STATUS_PREDICATE = "status = 'pending'"

_schema_lock = Lock()
_availability_schema_checked = False
_appointment_schema_checked = False


def ensure_availability_schema(bind=None) -> None:
    global _availability_schema_checked

    if bind is None and _availability_schema_checked:
        return

    with _schema_lock:
        if bind is None and _availability_schema_checked:
            return

        target = bind or engine
        inspector = inspect(target)

        if 'availability' in inspector.get_table_names():
            with target.begin() as connection:
                connection.execute(
                    text(
                        'CREATE UNIQUE INDEX IF NOT EXISTS uq_availability_representative_day '
                        'ON availability(representative_id, day_of_week)'
                    )
                )

        if bind is None:
            _availability_schema_checked = True


def ensure_appointment_schema(bind=None) -> None:
    global _appointment_schema_checked

    if bind is None and _appointment_schema_checked:
        return

    with _schema_lock:
        if bind is None and _appointment_schema_checked:
            return

        target = bind or engine
        inspector = inspect(target)

        if 'appointments' in inspector.get_table_names():
            index_statements = [
                'CREATE INDEX IF NOT EXISTS ix_appointments_user_id ON appointments(user_id)',
                'CREATE INDEX IF NOT EXISTS ix_appointments_representative_id ON appointments(representative_id)',
                'CREATE INDEX IF NOT EXISTS ix_appointments_representative_date '
                'ON appointments(representative_id, requested_date)',
                'CREATE INDEX IF NOT EXISTS ix_appointments_user_status ON appointments(user_id, status)',
                # Storage-level guards for the booking rules: one active claim per
                # slot and one pending request per requester per day.
                'CREATE UNIQUE INDEX IF NOT EXISTS uq_appointments_active_slot '
                f'ON appointments(representative_id, requested_date, requested_time) WHERE {ACTIVE_STATUS_PREDICATE}',
                'CREATE UNIQUE INDEX IF NOT EXISTS uq_appointments_pending_user_date '
                f'ON appointments(user_id, requested_date) WHERE {PENDING_STATUS_PREDICATE}',
            ]

            with target.begin() as connection:
                for statement in index_statements:
                    connection.execute(text(statement))

        if bind is None:
            _appointment_schema_checked = True


def init_db(bind=None) -> None:
    from scheduler.models import appointment, availability, representative, user  # noqa: F401

    target = bind or engine
    Base.metadata.create_all(bind=target)
    ensure_availability_schema(bind)
    ensure_appointment_schema(bind)
