"""
app/repositories/price_repository.py

Transactional gateway over the ``prices`` table.

``PriceStore.begin()`` opens one transaction and returns a
``PriceStoreTransaction``; every read and write of the import and export
flows goes through that object. The SQLAlchemy implementation keeps one
session per transaction and runs each upsert inside a SAVEPOINT so a
rejected row leaves the enclosing transaction usable.
"""

from __future__ import annotations

from decimal import Decimal
from functools import lru_cache
from types import TracebackType
from typing import Any, Protocol

from sqlalchemy import distinct, func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from app.domain.price_record import PriceRecord, StoreAggregate, UpsertOutcome
from app.mappers.price_record_codec import quantize_price
from app.repositories.errors import (
    StoreError,
    StoreReadError,
    StoreTransactionError,
    StoreWriteError,
)
from db.models.price import Price

_INSERT_BY_DIALECT = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class PriceStoreTransaction(Protocol):
    """
    One open transaction against the price store.
    """

    def upsert(self, record: PriceRecord) -> UpsertOutcome:
        ...

    def query_all(self) -> list[PriceRecord]:
        ...

    def aggregate(self) -> StoreAggregate:
        ...

    def commit(self) -> None:
        ...

    def rollback(self) -> None:
        ...

    def close(self) -> None:
        ...

    def __enter__(self) -> PriceStoreTransaction:
        ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        ...


class PriceStore(Protocol):
    """
    Long-lived store handle that hands out transactions.
    """

    def begin(self) -> PriceStoreTransaction:
        ...


class PriceRepository:
    """
    Session-bound implementation of PriceStoreTransaction.
    """

    def __init__(self, session: Session) -> None:
        self._session = session
        self._committed = False
        dialect = session.get_bind().dialect.name
        insert_factory = _INSERT_BY_DIALECT.get(dialect)
        if insert_factory is None:
            raise StoreError(f"Unsupported database dialect {dialect!r}.")
        self._insert = insert_factory

    def upsert(self, record: PriceRecord) -> UpsertOutcome:
        """
        Insert *record* unless its id already exists (first write wins).
        """

        stmt = (
            self._insert(Price)
            .values(
                id=record.id,
                created_at=record.created_at,
                name=record.name,
                category=record.category,
                price=record.price,
            )
            .on_conflict_do_nothing(index_elements=["id"])
            .returning(Price.id)
        )
        try:
            with self._session.begin_nested():
                inserted_id = self._session.scalar(stmt)
        except SQLAlchemyError as exc:
            raise StoreWriteError(f"Failed to upsert price id={record.id!r}.") from exc

        if inserted_id is None:
            return UpsertOutcome.IGNORED
        return UpsertOutcome.INSERTED

    def query_all(self) -> list[PriceRecord]:
        stmt = select(Price).order_by(Price.id)
        try:
            rows = self._session.scalars(stmt).all()
        except SQLAlchemyError as exc:
            raise StoreReadError("Failed to query stored prices.") from exc
        return [_to_record(row) for row in rows]

    def aggregate(self) -> StoreAggregate:
        """
        Count distinct categories and sum prices over the whole table.
        """

        stmt = select(
            func.count(distinct(Price.category)),
            func.coalesce(func.sum(Price.price), 0),
        )
        try:
            distinct_categories, total_price = self._session.execute(stmt).one()
        except SQLAlchemyError as exc:
            raise StoreTransactionError("Failed to compute price aggregate.") from exc

        return StoreAggregate(
            distinct_categories=int(distinct_categories),
            total_price=quantize_price(_as_decimal(total_price)),
        )

    def commit(self) -> None:
        try:
            self._session.commit()
        except SQLAlchemyError as exc:
            self._session.rollback()
            raise StoreTransactionError("Failed to commit price store transaction.") from exc
        self._committed = True

    def rollback(self) -> None:
        self._session.rollback()

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> PriceRepository:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        try:
            if not self._committed:
                self.rollback()
        finally:
            self.close()


class SQLAlchemyPriceStore:
    """
    PriceStore backed by a SQLAlchemy session factory.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def begin(self) -> PriceRepository:
        session = self._session_factory()
        try:
            session.begin()
            # Acquire the connection now so an unreachable database fails here.
            session.connection()
            return PriceRepository(session)
        except SQLAlchemyError as exc:
            session.close()
            raise StoreTransactionError("Failed to open price store transaction.") from exc
        except StoreError:
            session.close()
            raise


def _as_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _to_record(row: Price) -> PriceRecord:
    return PriceRecord(
        id=row.id,
        name=row.name,
        category=row.category,
        price=quantize_price(_as_decimal(row.price)),
        created_at=row.created_at,
    )


@lru_cache(maxsize=1)
def get_price_store() -> SQLAlchemyPriceStore:
    """
    Build and cache the process-wide store handle.
    """

    from db.session import get_session_factory

    return SQLAlchemyPriceStore(get_session_factory())
