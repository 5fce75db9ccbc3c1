import logging
from collections.abc import Iterator
from contextlib import contextmanager
from threading import Lock

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from backend.core import config
from backend.core.errors import ClinicError, StorageError


logger = logging.getLogger(__name__)


def engine_options(database_url: str) -> dict:
    # SQLite's default pools reject the QueuePool sizing arguments.
    if make_url(database_url).get_backend_name() == 'sqlite':
        return {'connect_args': {'check_same_thread': False}}
    return {
        'pool_size': config.DB_POOL_SIZE,
        'max_overflow': 0,
        'pool_timeout': None,
        'pool_pre_ping': True,
    }


engine = create_engine(config.DATABASE_URL, echo=config.DB_ECHO, **engine_options(config.DATABASE_URL))

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()

_schema_lock = Lock()
_practitioner_schema_checked = False


def get_db() -> Iterator[Session]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def unit_of_work(db: Session, action: str) -> Iterator[Session]:
    """Run every statement of ``action`` in one transaction.

    Commits on success. Any failure rolls the whole unit back, so a partially
    applied write is never visible; storage failures are re-raised as
    ``StorageError``.
    """
    try:
        yield db
        db.commit()
    except ClinicError:
        db.rollback()
        raise
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception('Database error while %s.', action)
        raise StorageError(f'An error occurred while {action}.', details=str(exc)) from exc


@contextmanager
def reading(db: Session, action: str) -> Iterator[Session]:
    try:
        yield db
    except SQLAlchemyError as exc:
        logger.exception('Database error while %s.', action)
        raise StorageError(f'An error occurred while {action}.', details=str(exc)) from exc


def ensure_practitioner_schema() -> None:
    global _practitioner_schema_checked

    if _practitioner_schema_checked:
        return

    with _schema_lock:
        if _practitioner_schema_checked:
            return

        table_names = set(inspect(engine).get_table_names())
        index_steps = [
            ('practitioner_slots', 'CREATE INDEX IF NOT EXISTS idx_practitioner_slots_slot ON practitioner_slots(slot_id)'),
            ('bookings', 'CREATE INDEX IF NOT EXISTS idx_bookings_practitioner ON bookings(practitioner_id)'),
            ('bookings', 'CREATE INDEX IF NOT EXISTS idx_bookings_account ON bookings(account_id)'),
        ]

        with engine.begin() as connection:
            for table_name, statement in index_steps:
                if table_name in table_names:
                    connection.execute(text(statement))

        _practitioner_schema_checked = True
