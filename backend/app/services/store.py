"""
Translation of SQLAlchemy failures into application errors.

Registry operations run inside ``store_operation`` so that callers only
ever see ValidationError, ResourceNotFoundError or StoreError.
"""

import logging
from contextlib import asynccontextmanager
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.exceptions import AppException, StoreError, ValidationError

logger = logging.getLogger("vrms.store")


@asynccontextmanager
async def store_operation(db: AsyncSession, description: str, conflict_message: str = None):
    """
    Wrap a unit of database work.

    Args:
        db: Database session, rolled back on failure
        description: Human readable name of the operation, used in errors
        conflict_message: Message for unique index violations that slip
            past the explicit pre-checks (concurrent writers)
    """
    try:
        yield
    except AppException:
        raise
    except IntegrityError as exc:
        await db.rollback()
        logger.warning("%s hit a constraint: %s", description, exc.orig)
        raise ValidationError(conflict_message or f"{description} violates a uniqueness constraint") from exc
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.error("%s failed: %s", description, exc)
        raise StoreError(f"{description} failed") from exc
