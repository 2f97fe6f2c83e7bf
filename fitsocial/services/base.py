"""
Base Service - Common service functionality and patterns.

This provides:
1. Common service initialization patterns
2. Error handling utilities
3. Logging helpers
4. Transaction management
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from fitsocial.core.exceptions import AppException, ServiceError

logger = logging.getLogger(__name__)


class BaseService:
    """
    Base service class providing common functionality.

    Every public operation of a subclass owns exactly one unit of work: it
    stages changes through repositories, then commits once, or rolls back
    through _handle_service_error.
    """

    def __init__(self, db: AsyncSession):
        """
        Initialize service with database session.

        Args:
            db: Async database session
        """
        self.db = db
        self.logger = logger

    async def _handle_service_error(self, error: Exception, operation: str) -> None:
        """
        Centralized error handling for services.

        Rolls back the session, re-raises typed application errors as-is and
        wraps anything else in ServiceError.
        """
        if isinstance(error, AppException):
            self.logger.info(f"Rejected {operation}: {error.message}")
        else:
            self.logger.error(f"Service error in {operation}: {str(error)}")

        try:
            await self.db.rollback()
        except Exception as rollback_error:
            self.logger.error(f"Failed to rollback transaction: {rollback_error}")

        if isinstance(error, AppException):
            raise error
        raise ServiceError(f"Failed to {operation}: {str(error)}") from error

    def _log_operation(self, operation: str, **kwargs) -> None:
        """
        Log service operations for debugging and monitoring.

        Args:
            operation: Description of the operation
            **kwargs: Additional context to log
        """
        context = " ".join([f"{k}={v}" for k, v in kwargs.items()])
        self.logger.info(f"Service operation: {operation} {context}")

    async def _execute_in_transaction(self, operation_func, *args, **kwargs):
        """
        Execute operation in a database transaction.

        Returns:
            Result of the operation
        """
        try:
            result = await operation_func(*args, **kwargs)
            await self.db.commit()
            return result
        except Exception as error:
            await self.db.rollback()
            raise error
