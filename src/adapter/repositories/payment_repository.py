"""SQLAlchemy Payment Repository Implementation

Implements payment persistence using SQLAlchemy async session.
"""

from decimal import Decimal
from typing import Dict, List, Optional, Tuple
from datetime import datetime
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.payment_repository import PaymentRepository
from src.domain.payment import Payment


class SqlAlchemyPaymentRepository(PaymentRepository):
    """
    SQLAlchemy implementation of PaymentRepository

    Uses async session for database operations.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, payment: Payment) -> Payment:
        """
        Create a new payment

        Args:
            payment: Payment entity to persist

        Returns:
            Created Payment with generated ID
        """
        self.session.add(payment)
        await self.session.flush()
        await self.session.refresh(payment)
        return payment

    async def get_by_id(self, payment_id: int, for_update: bool = False) -> Optional[Payment]:
        stmt = select(Payment).where(Payment.id == payment_id)
        if for_update:
            stmt = stmt.with_for_update()
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_invoice_id(self, invoice_id: int, for_update: bool = False) -> List[Payment]:
        stmt = (
            select(Payment)
            .where(Payment.invoice_id == invoice_id)
            .order_by(Payment.created_at.desc(), Payment.id.desc())
        )
        if for_update:
            stmt = stmt.with_for_update()
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def update(self, payment: Payment) -> Payment:
        payment.updated_at = datetime.utcnow()
        self.session.add(payment)
        await self.session.flush()
        await self.session.refresh(payment)
        return payment

    async def delete(self, payment: Payment) -> None:
        await self.session.delete(payment)
        await self.session.flush()

    async def exists_for_invoice(self, invoice_id: int) -> bool:
        statement = (
            select(func.count())
            .select_from(Payment)
            .where(Payment.invoice_id == invoice_id)
        )
        result = await self.session.execute(statement)
        count = result.scalar_one()
        return count > 0

    async def list(
        self,
        customer_id: Optional[int] = None,
        invoice_id: Optional[int] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[List[Payment], int]:
        """
        Retrieve payments with pagination

        Args:
            customer_id: Optional filter by customer
            invoice_id: Optional filter by invoice
            limit: Maximum number of payments to return
            offset: Offset for pagination

        Returns:
            Tuple of (payments, total count)
        """
        stmt = select(Payment)
        count_stmt = select(func.count()).select_from(Payment)

        if customer_id is not None:
            stmt = stmt.where(Payment.customer_id == customer_id)
            count_stmt = count_stmt.where(Payment.customer_id == customer_id)
        if invoice_id is not None:
            stmt = stmt.where(Payment.invoice_id == invoice_id)
            count_stmt = count_stmt.where(Payment.invoice_id == invoice_id)

        stmt = stmt.order_by(Payment.created_at.desc(), Payment.id.desc()).limit(limit).offset(offset)

        result = await self.session.execute(stmt)
        payments = list(result.scalars().all())

        count_result = await self.session.execute(count_stmt)
        return payments, count_result.scalar_one()

    async def get_sums_by_invoice(self) -> Dict[int, Decimal]:
        stmt = (
            select(Payment.invoice_id, func.coalesce(func.sum(Payment.amount), 0))
            .where(Payment.invoice_id.is_not(None))
            .group_by(Payment.invoice_id)
        )
        result = await self.session.execute(stmt)
        return {invoice_id: Decimal(str(total)) for invoice_id, total in result.all()}
