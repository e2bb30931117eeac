import logging
import os
import time

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from .config import DATABASE_URL

logger = logging.getLogger(__name__)

# Get environment-specific pool settings
POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "20"))
MAX_OVERFLOW = int(os.getenv("DB_MAX_OVERFLOW", "30"))
POOL_TIMEOUT = int(os.getenv("DB_POOL_TIMEOUT", "30"))
POOL_RECYCLE = int(os.getenv("DB_POOL_RECYCLE", "300"))
ENABLE_QUERY_LOGGING = os.getenv("DB_LOG_SLOW_QUERIES", "true").lower() == "true"
SLOW_QUERY_THRESHOLD = float(os.getenv("DB_SLOW_QUERY_THRESHOLD", "1.0"))

# Execution option that marks a connection as opening a write transaction
SQLITE_WRITE_LOCK = "sqlite_write_lock"


def enable_sqlite_write_serialization(engine: Engine) -> None:
    """Let write transactions on SQLite take the database write lock up front.

    pysqlite defers BEGIN until the first write, so two sessions could both
    run the overlap query before either inserts. Transactions whose
    connection carries the SQLITE_WRITE_LOCK execution option open with
    BEGIN IMMEDIATE and queue on the busy timeout; all others open with a
    plain deferred BEGIN, so reads never wait on a booking in progress.
    """

    @event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, _connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin(conn):
        if conn.get_execution_options().get(SQLITE_WRITE_LOCK):
            conn.exec_driver_sql("BEGIN IMMEDIATE")
        else:
            conn.exec_driver_sql("BEGIN")


def begin_write(db: Session) -> None:
    """Open the session's next transaction as a write transaction.

    Call before the first query of an operation that will write. On SQLite
    any read-only transaction already open on the session is ended first,
    since a deferred transaction cannot safely be upgraded under contention.
    Other backends lock rows explicitly and need nothing here.
    """
    if db.get_bind().dialect.name != "sqlite":
        return
    if db.in_transaction():
        db.commit()
    db.connection(execution_options={SQLITE_WRITE_LOCK: True})


def enable_slow_query_logging(engine: Engine, threshold: float = SLOW_QUERY_THRESHOLD) -> None:
    @event.listens_for(engine, "before_cursor_execute")
    def before_cursor_execute(conn, _cursor, statement, _parameters, context, _executemany):
        conn.info.setdefault("query_start_time", []).append(time.time())

    @event.listens_for(engine, "after_cursor_execute")
    def after_cursor_execute(conn, _cursor, statement, _parameters, context, _executemany):
        total = time.time() - conn.info["query_start_time"].pop(-1)
        if total > threshold:
            logger.warning(f"Slow query ({total:.2f}s): {statement[:200]}...")


def create_db_engine(url: str, **kwargs) -> Engine:
    """Create an engine with the pool settings appropriate for the backend"""
    if url.startswith("sqlite"):
        connect_args = kwargs.pop("connect_args", {})
        connect_args.setdefault("check_same_thread", False)
        engine = create_engine(url, connect_args=connect_args, **kwargs)
        enable_sqlite_write_serialization(engine)
        return engine

    return create_engine(
        url,
        pool_pre_ping=True,  # Test connections before using
        pool_recycle=POOL_RECYCLE,
        pool_size=POOL_SIZE,
        max_overflow=MAX_OVERFLOW,
        pool_timeout=POOL_TIMEOUT,
        echo=False,
        **kwargs,
    )


try:
    engine = create_db_engine(DATABASE_URL)
    logger.info("Database engine created successfully")
    if not DATABASE_URL.startswith("sqlite"):
        logger.info(
            f"Connection pool: size={POOL_SIZE}, max_overflow={MAX_OVERFLOW}, timeout={POOL_TIMEOUT}s"
        )
except Exception as e:
    logger.error(f"Failed to create database engine: {e}")
    raise

if ENABLE_QUERY_LOGGING:
    enable_slow_query_logging(engine)
    logger.info(f"Slow query logging enabled (threshold: {SLOW_QUERY_THRESHOLD}s)")

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
