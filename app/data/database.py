# app/data/database.py
from contextlib import contextmanager

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from app.domain.errors import TransientIO
from app.utils.settings import DATABASE_URL
from app.utils.logging import get_logger

logger = get_logger(__name__)

Base = declarative_base()


def make_engine(url: str, **kwargs) -> Engine:
    """
    Tworzy engine dla postgresa (produkcja) albo sqlite (testy, dev).

    Sqlite nie ma blokad wierszy (FOR UPDATE jest pomijane), wiec kazda
    transakcja startuje jako BEGIN IMMEDIATE - zapisujacy ida po kolei.
    """
    if url.startswith("sqlite"):
        connect_args = kwargs.pop("connect_args", {})
        connect_args.setdefault("check_same_thread", False)
        connect_args.setdefault("timeout", 30)
        engine = create_engine(url, connect_args=connect_args, **kwargs)

        @event.listens_for(engine, "connect")
        def _sqlite_connect(dbapi_connection, connection_record):
            # wylacz wlasne BEGIN drivera pysqlite, transakcje otwiera SQLAlchemy
            dbapi_connection.isolation_level = None
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        @event.listens_for(engine, "begin")
        def _sqlite_begin(conn):
            conn.exec_driver_sql("BEGIN IMMEDIATE")

        return engine

    kwargs.setdefault("pool_pre_ping", True)
    return create_engine(url, **kwargs)


engine = make_engine(DATABASE_URL)
SessionLocal = sessionmaker(bind=engine, autoflush=False)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def atomic(db: Session):
    """
    Jedna atomowa jednostka pracy: commit na koncu albo rollback calosci.
    Bledy polaczenia/blokad (deadlock, lock timeout) -> TransientIO.
    """
    try:
        yield db
        db.commit()
    except OperationalError as e:
        db.rollback()
        logger.error(f"Transakcja przerwana przez blad bazy: {e}")
        raise TransientIO(str(e.orig) if e.orig is not None else str(e)) from e
    except Exception:
        db.rollback()
        raise
