# storefront/data/transaction.py
"""
Transaction Runner - jedyna sciezka zapisu w silniku zamowien.

Jednostka pracy dostaje zywa sesje w otwartej transakcji:
- zwrocila normalnie -> COMMIT
- rzucila cokolwiek (ServiceError, blad bazy, timeout) -> ROLLBACK i propagacja

Blad samego rollbacku jest tylko logowany, zeby na zewnatrz zawsze
wyszedl oryginalny wyjatek.
"""
from typing import Callable, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from storefront.data import database
from storefront.domain.errors import ServiceError
from storefront.utils.retry import serialization_retry
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

SERIALIZABLE = "SERIALIZABLE"


def _run_once(
    session_factory: sessionmaker,
    work: Callable[[Session], T],
    isolation_level: str,
) -> T:
    session = session_factory()
    try:
        # poziom izolacji musi byc ustawiony na polaczeniu PRZED begin
        session.connection(execution_options={"isolation_level": isolation_level})
        result = work(session)
        session.commit()
        return result
    except BaseException as exc:
        try:
            session.rollback()
        except SQLAlchemyError:
            logger.exception("Rollback failed, original error will be re-raised")

        if isinstance(exc, ServiceError):
            logger.info(f"Transaction aborted: {exc.code} ({exc.message})")
        else:
            logger.warning(f"Transaction rolled back after {type(exc).__name__}: {exc}")
        raise
    finally:
        session.close()


def run_in_transaction(
    work: Callable[[Session], T],
    *,
    isolation_level: str = SERIALIZABLE,
    session_factory: sessionmaker | None = None,
    attempts: int | None = None,
) -> T:
    """
    Wykonuje `work(session)` w jednej transakcji.

    `attempts` to liczba prob lacznie z pierwsza (None = SERIALIZATION_RETRY_ATTEMPTS).
    Konflikty serializacji (40001) i deadlocki (40P01) sa ponawiane z
    backoffem, kazda proba to nowa transakcja ze swiezym odczytem.
    Bledy biznesowe (ServiceError) nigdy nie sa ponawiane.
    """
    factory = session_factory or database.SessionLocal

    @serialization_retry(attempts)
    def _attempt() -> T:
        return _run_once(factory, work, isolation_level)

    return _attempt()
