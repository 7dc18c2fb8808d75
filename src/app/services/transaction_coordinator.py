"""Transaction Coordinator

Runs a unit of work touching several aggregates (stock, invoice,
customer, payment) as one all-or-nothing database transaction.
"""

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar
from libs.result import Result, Return, Error
from src.app import error_codes
from src.app.services.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TransactionCoordinator:
    """
    All-or-nothing execution of a money movement

    Rules:
    1. Commit only when the work returns an ok Result
    2. An error Result or any exception rolls everything back
    3. Exceptions surface as TRANSACTION_FAILED; nothing is retried
    4. Caller cancellation does not interrupt the work: it always runs to
       commit or rollback, then the cancellation is re-raised
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def run(
        self,
        work: Callable[[], Awaitable[Result[T]]],
        operation: str = "ledger operation",
    ) -> Result[T]:
        """
        Execute work inside a transaction

        Args:
            work: Coroutine function staging all writes through the
                repositories bound to this coordinator's unit of work
            operation: Name used in logs and error messages

        Returns:
            The work's Result once committed, its error Result after a
            rollback, or TRANSACTION_FAILED
        """
        task = asyncio.ensure_future(self._execute(work, operation))
        try:
            return await asyncio.shield(task)
        except asyncio.CancelledError:
            logger.warning(f"{operation} cancelled by caller, finishing transaction first")
            await self._wait_until_done(task)
            raise

    async def _execute(self, work, operation: str) -> Result:
        await self.uow.begin()
        try:
            result = await work()
        except Exception as e:
            logger.exception(f"{operation} failed, rolling back")
            await self.uow.rollback()
            return Return.err(
                Error(
                    code=error_codes.TRANSACTION_FAILED,
                    message=f"Failed to complete {operation}",
                    reason=str(e),
                )
            )

        if result.is_err():
            logger.info(f"{operation} rejected with {result.error.code}, rolling back")
            await self.uow.rollback()
            return result

        try:
            await self.uow.commit()
        except Exception as e:
            logger.exception(f"Commit of {operation} failed, rolling back")
            await self.uow.rollback()
            return Return.err(
                Error(
                    code=error_codes.TRANSACTION_FAILED,
                    message=f"Failed to commit {operation}",
                    reason=str(e),
                )
            )
        return result

    @staticmethod
    async def _wait_until_done(task: asyncio.Future) -> None:
        while not task.done():
            try:
                await asyncio.shield(task)
            except asyncio.CancelledError:
                continue
