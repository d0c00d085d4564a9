"""Transaction handling shared by the services.

Services own their transactions. ``rollback_on_error`` wraps a unit of work:
domain errors roll back and propagate unchanged, database errors roll back
and surface as ``DependencyFailure`` with the cause logged.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.siteline.core.exceptions import DependencyFailure, DomainError
from src.siteline.core.logging import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def rollback_on_error(session: AsyncSession, action: str) -> AsyncGenerator[None]:
    try:
        yield
    except DomainError:
        await session.rollback()
        raise
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error(f"Failed to {action}", error=str(e), error_type=type(e).__name__)
        raise DependencyFailure(f"Failed to {action}") from e
    except Exception as e:
        await session.rollback()
        logger.error(f"Failed to {action}", error=str(e))
        raise
