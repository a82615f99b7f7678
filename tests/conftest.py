"""
tests/conftest.py

Shared fixtures: an in-memory SQLite price store and archive builders.
"""

from __future__ import annotations

import io
import zipfile
from collections.abc import Iterator, Sequence

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

import db.models  # noqa: F401  registers Price on Base.metadata
from app.repositories.price_repository import SQLAlchemyPriceStore
from db.base import Base

HEADER = "id,name,category,price,create_date"


@pytest.fixture()
def engine() -> Iterator[Engine]:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # pysqlite manages transactions itself and breaks SAVEPOINT; hand control
    # back to SQLAlchemy.
    @event.listens_for(engine, "connect")
    def _disable_pysqlite_transactions(dbapi_connection, connection_record) -> None:
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn) -> None:
        conn.exec_driver_sql("BEGIN")

    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(
        bind=engine,
        class_=Session,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )


@pytest.fixture()
def store(session_factory: sessionmaker[Session]) -> SQLAlchemyPriceStore:
    return SQLAlchemyPriceStore(session_factory)


def make_csv(rows: Sequence[str], header: str = HEADER) -> bytes:
    return ("\n".join([header, *rows]) + "\n").encode("utf-8")


def make_archive(entries: dict[str, bytes]) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, mode="w", compression=zipfile.ZIP_DEFLATED) as archive:
        for name, content in entries.items():
            archive.writestr(name, content)
    return buffer.getvalue()


def make_price_archive(rows: Sequence[str], header: str = HEADER) -> bytes:
    return make_archive({"data.csv": make_csv(rows, header=header)})


def _central_directory_offset(data: bytearray) -> tuple[int, int]:
    eocd = data.rfind(b"PK\x05\x06")
    return eocd, int.from_bytes(data[eocd + 16:eocd + 20], "little")


def mark_entry_encrypted(payload: bytes) -> bytes:
    """Set the encrypted flag on the first entry of a single-entry archive."""
    data = bytearray(payload)
    _, central_offset = _central_directory_offset(data)
    data[6] |= 0x1
    data[central_offset + 8] |= 0x1
    return bytes(data)


def shift_central_directory_offset(payload: bytes, delta: int = 100) -> bytes:
    """Corrupt the recorded central directory offset so local header offsets go negative."""
    data = bytearray(payload)
    eocd, central_offset = _central_directory_offset(data)
    data[eocd + 16:eocd + 20] = (central_offset + delta).to_bytes(4, "little")
    return bytes(data)


def read_archive_csv(payload: bytes, entry_name: str = "data.csv") -> str:
    with zipfile.ZipFile(io.BytesIO(payload)) as archive:
        return archive.read(entry_name).decode("utf-8")
