import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import DisconnectionError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from moderna.core.errors import AppError, ConflictDuringCommitError, DependencyUnavailableError

logger = logging.getLogger(__name__)


def _is_connection_failure(exc: SQLAlchemyError) -> bool:
    if isinstance(exc, DisconnectionError):
        return True
    return isinstance(exc, OperationalError) and exc.connection_invalidated


@contextmanager
def unit_of_work(db: Session) -> Iterator[Session]:
    """
    Unidad de trabajo atómica sobre la sesión del request.

    Todo lo que se ejecute dentro del bloque se confirma junto al salir, o se
    revierte completo si algo falla (incluido el commit). Los errores de
    SQLAlchemy se traducen a errores de dominio; nunca se reintenta.
    """
    try:
        yield db
        db.commit()
    except AppError:
        db.rollback()
        raise
    except SQLAlchemyError as exc:
        db.rollback()
        if _is_connection_failure(exc):
            logger.error(f"Base de datos no disponible: {exc.__class__.__name__}")
            raise DependencyUnavailableError("La base de datos no está disponible") from exc
        logger.error(f"No se pudo confirmar la transacción: {exc.__class__.__name__}")
        raise ConflictDuringCommitError(
            "No se pudo confirmar la operación por un conflicto concurrente; intenta nuevamente"
        ) from exc
    except Exception:
        db.rollback()
        raise
