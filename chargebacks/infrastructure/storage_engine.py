"""Storage Engine — single-file, transactional key/value bucket over SQLite (WAL).

Invariants:
    - One exclusive inter-process lock per database file (flock on "<path>.lock"),
      held from open() until close(); a second open() times out with LockTimeoutError
    - open() is idempotent across restarts: the bucket table is created only if missing
    - At most ONE write transaction in flight: in-process mutex + SQLite BEGIN IMMEDIATE
    - A read transaction pins its snapshot on entry and never sees later commits
    - Any exception inside a transaction rolls it back, then propagates unchanged
    - A write transaction has committed durably (synchronous=FULL) when its block exits
    - All SQLAlchemy/driver/OS exceptions mapped to EngineError (core/errors.py)

Design Decisions:
    - SQLite over a custom WAL: off-the-shelf crash consistency and snapshot readers
      (ADR: same guarantees as an embedded KV engine, zero extra daemons)
    - pysqlite's implicit BEGIN disabled; we emit our own BEGIN [DEFERRED|IMMEDIATE]
      from the "begin" event (ADR: SQLAlchemy's documented pysqlite transaction recipe)
    - Sidecar lock file instead of locking the db file itself: closing any descriptor of
      the db file would drop SQLite's own POSIX locks
    - No caching layer: every bucket read goes to the engine
"""

import fcntl
import logging
import os
import threading
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from sqlalchemy import create_engine, delete, event, func, select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import DBAPIError, OperationalError, SQLAlchemyError

from chargebacks.core.errors import EngineError, LockTimeoutError
from chargebacks.db.base import Base
from chargebacks.models.bucket_entry import BucketEntry

logger = logging.getLogger(__name__)

_LOCK_POLL_SECONDS = 0.05
_BEGIN_OPTION = "sqlite_begin"
_BUSY_TIMEOUT_SECONDS = 5.0


@contextmanager
def _translate_errors(operation: str) -> Iterator[None]:
    """Map engine-level exceptions to EngineError; domain errors pass through."""
    try:
        yield
    except OperationalError as e:
        logger.error(f"Storage operational error during {operation}: {e}")
        raise EngineError("operational error", operation) from e
    except DBAPIError as e:
        logger.error(f"Storage driver error during {operation}: {e}")
        raise EngineError("driver error", operation) from e
    except SQLAlchemyError as e:
        logger.error(f"SQLAlchemy error during {operation}: {e}")
        raise EngineError("engine failure", operation) from e
    except OSError as e:
        logger.error(f"I/O error during {operation}: {e}")
        raise EngineError(str(e), operation) from e


def _acquire_file_lock(lock_path: Path, timeout: float) -> int:
    """Take an exclusive flock, polling until timeout. Returns the open descriptor."""
    try:
        fd = os.open(lock_path, os.O_RDWR | os.O_CREAT, 0o600)
    except OSError as e:
        raise EngineError(str(e), "open") from e
    deadline = time.monotonic() + timeout
    while True:
        try:
            fcntl.flock(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
            return fd
        except BlockingIOError:
            if time.monotonic() >= deadline:
                os.close(fd)
                raise LockTimeoutError(str(lock_path), timeout)
            time.sleep(_LOCK_POLL_SECONDS)
        except OSError as e:
            os.close(fd)
            raise EngineError(str(e), "open") from e


def _release_file_lock(fd: int) -> None:
    try:
        fcntl.flock(fd, fcntl.LOCK_UN)
    finally:
        os.close(fd)


def _create_sqlite_engine(db_path: Path) -> Engine:
    engine = create_engine(
        f"sqlite:///{db_path}",
        connect_args={"check_same_thread": False, "timeout": _BUSY_TIMEOUT_SECONDS},
    )

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        # Stop pysqlite from emitting BEGIN on its own; _on_begin does it.
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA synchronous=FULL")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn: Connection):
        mode = conn.get_execution_options().get(_BEGIN_OPTION, "DEFERRED")
        conn.exec_driver_sql(f"BEGIN {mode}")

    return engine


class Bucket:
    """Transaction-scoped view of the chargebacks namespace.

    Only valid inside the read_transaction / write_transaction block that
    yielded it.
    """

    def __init__(self, conn: Connection, writable: bool):
        self._conn = conn
        self._writable = writable

    def get(self, key: str) -> bytes | None:
        value = self._conn.execute(
            select(BucketEntry.value).where(BucketEntry.key == key),
        ).scalar_one_or_none()
        return bytes(value) if value is not None else None

    def put(self, key: str, value: bytes) -> None:
        self._require_writable("put")
        stmt = sqlite_insert(BucketEntry).values(key=key, value=value)
        self._conn.execute(stmt.on_conflict_do_update(
            index_elements=[BucketEntry.key],
            set_={"value": stmt.excluded.value},
        ))

    def delete(self, key: str) -> None:
        """Remove key. Absent key is a no-op."""
        self._require_writable("delete")
        self._conn.execute(delete(BucketEntry).where(BucketEntry.key == key))

    def items(self) -> Iterator[tuple[str, bytes]]:
        """All pairs in native key order (binary order of the key)."""
        result = self._conn.execute(
            select(BucketEntry.key, BucketEntry.value).order_by(BucketEntry.key),
        )
        for key, value in result:
            yield key, bytes(value)

    def count(self) -> int:
        return self._conn.execute(
            select(func.count()).select_from(BucketEntry),
        ).scalar_one()

    def _require_writable(self, operation: str) -> None:
        if not self._writable:
            raise EngineError("bucket is read-only in a read transaction", operation)


class StorageEngine:
    """Owns the SQLite engine and the file lock for one database file.

    Acquire with StorageEngine.open(), release with close() (or use as a
    context manager). Shared by all callers; only its transactions touch
    the file.
    """

    def __init__(self, path: Path, engine: Engine, lock_fd: int):
        self.path = path
        self._engine: Engine | None = engine
        self._lock_fd = lock_fd
        self._write_lock = threading.Lock()
        self._close_lock = threading.Lock()

    @classmethod
    def open(cls, path: str | os.PathLike, lock_timeout: float = 1.0) -> "StorageEngine":
        """Open (creating if absent) the database file and ensure the bucket exists."""
        db_path = Path(path)
        with _translate_errors("open"):
            db_path.parent.mkdir(parents=True, exist_ok=True)
        lock_fd = _acquire_file_lock(
            db_path.with_name(db_path.name + ".lock"), lock_timeout,
        )
        engine: Engine | None = None
        try:
            with _translate_errors("open"):
                engine = _create_sqlite_engine(db_path)
                Base.metadata.create_all(engine)
        except BaseException:
            if engine is not None:
                engine.dispose()
            _release_file_lock(lock_fd)
            raise
        logger.info(f"Storage engine opened at {db_path}")
        return cls(db_path, engine, lock_fd)

    def close(self) -> None:
        """Dispose connections and release the file lock. Idempotent."""
        with self._close_lock:
            if self._engine is None:
                return
            engine, self._engine = self._engine, None
            try:
                engine.dispose()
            finally:
                _release_file_lock(self._lock_fd)
        logger.info(f"Storage engine closed at {self.path}")

    @property
    def closed(self) -> bool:
        return self._engine is None

    def __enter__(self) -> "StorageEngine":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @contextmanager
    def read_transaction(self) -> Iterator[Bucket]:
        """Point-in-time snapshot. Never blocked by other readers or the writer."""
        engine = self._require_open("read")
        with _translate_errors("read"):
            with engine.connect() as conn:
                conn.execution_options(**{_BEGIN_OPTION: "DEFERRED"})
                with conn.begin():
                    # WAL readers take their snapshot on first read, not on BEGIN
                    conn.execute(select(BucketEntry.key).limit(1)).all()
                    yield Bucket(conn, writable=False)

    @contextmanager
    def write_transaction(self) -> Iterator[Bucket]:
        """Exclusive writer. Commits on clean exit, rolls back on any exception.

        Not reentrant: opening a write transaction inside another one from the
        same thread deadlocks.
        """
        engine = self._require_open("write")
        with self._write_lock:
            with _translate_errors("write"):
                with engine.connect() as conn:
                    conn.execution_options(**{_BEGIN_OPTION: "IMMEDIATE"})
                    with conn.begin():
                        yield Bucket(conn, writable=True)

    def health_check(self) -> bool:
        """Check storage reachability (for readiness probes)."""
        try:
            with self.read_transaction() as bucket:
                bucket.count()
            return True
        except EngineError as e:
            logger.error(f"Storage health check failed: {e}")
            return False

    def _require_open(self, operation: str) -> Engine:
        engine = self._engine
        if engine is None:
            raise EngineError("engine is closed", operation)
        return engine
