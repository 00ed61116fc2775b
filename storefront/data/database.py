# storefront/data/database.py
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import declarative_base, sessionmaker

from storefront.utils.settings import (
    DATABASE_URL,
    DB_POOL_SIZE,
    DB_MAX_OVERFLOW,
    DB_POOL_TIMEOUT,
)

Base = declarative_base()


def _configure_sqlite(engine: Engine) -> None:
    """
    SQLite nie ma SELECT ... FOR UPDATE, wiec transakcje z Transaction Runnera
    (te z jawnie ustawionym isolation_level) biora blokade zapisu calej bazy
    juz na BEGIN (BEGIN IMMEDIATE). Druga taka transakcja czeka (busy timeout)
    az pierwsza zrobi commit - to samo uszeregowanie co row locki w postgresie.
    Zwykle sesje odczytu robia BEGIN DEFERRED, a WAL sprawia ze nie blokuja zapisu.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        #wylaczamy wlasne BEGIN drivera pysqlite, sami emitujemy BEGIN
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        if "isolation_level" in conn.get_execution_options():
            conn.exec_driver_sql("BEGIN IMMEDIATE")
        else:
            conn.exec_driver_sql("BEGIN")


def build_engine(url: str | None = None, **kwargs) -> Engine:
    url = make_url(url or DATABASE_URL)

    if url.get_backend_name() == "sqlite":
        kwargs.setdefault("connect_args", {"check_same_thread": False, "timeout": 30})
        engine = create_engine(url, **kwargs)
        _configure_sqlite(engine)
        return engine

    # pula ograniczona, wyczerpanie = blad infrastruktury (500)
    kwargs.setdefault("pool_size", DB_POOL_SIZE)
    kwargs.setdefault("max_overflow", DB_MAX_OVERFLOW)
    kwargs.setdefault("pool_timeout", DB_POOL_TIMEOUT)
    kwargs.setdefault("pool_pre_ping", True)
    return create_engine(url, **kwargs)


engine = build_engine()
SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
