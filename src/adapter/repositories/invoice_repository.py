"""SQLAlchemy Invoice Repository Implementation

Implements invoice persistence using SQLAlchemy async session.
"""

from typing import Optional, List, Tuple
from datetime import datetime
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.invoice_repository import InvoiceRepository
from src.domain.invoice import Invoice, InvoiceStatus


class SqlAlchemyInvoiceRepository(InvoiceRepository):
    """
    SQLAlchemy implementation of InvoiceRepository

    Uses async session for database operations.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, invoice: Invoice) -> Invoice:
        """
        Create a new invoice

        Args:
            invoice: Invoice entity to persist

        Returns:
            Created Invoice with generated ID
        """
        self.session.add(invoice)
        await self.session.flush()
        await self.session.refresh(invoice)
        return invoice

    async def get_by_id(self, invoice_id: int, for_update: bool = False) -> Optional[Invoice]:
        """
        Retrieve invoice by ID

        Args:
            invoice_id: Invoice ID
            for_update: If True, locks the row with SELECT FOR UPDATE

        Returns:
            Invoice if found, None otherwise
        """
        statement = select(Invoice).where(Invoice.id == invoice_id)
        if for_update:
            statement = statement.with_for_update()
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def list(
        self,
        outlet_id: Optional[int] = None,
        customer_id: Optional[int] = None,
        status: Optional[InvoiceStatus] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[List[Invoice], int]:
        statement = select(Invoice)
        count_statement = select(func.count()).select_from(Invoice)

        if outlet_id is not None:
            statement = statement.where(Invoice.outlet_id == outlet_id)
            count_statement = count_statement.where(Invoice.outlet_id == outlet_id)
        if customer_id is not None:
            statement = statement.where(Invoice.customer_id == customer_id)
            count_statement = count_statement.where(Invoice.customer_id == customer_id)
        if status:
            statement = statement.where(Invoice.status == status)
            count_statement = count_statement.where(Invoice.status == status)

        statement = statement.order_by(Invoice.created_at.desc(), Invoice.id.desc())
        statement = statement.limit(limit).offset(offset)

        result = await self.session.execute(statement)
        invoices = list(result.scalars().all())

        count_result = await self.session.execute(count_statement)
        return invoices, count_result.scalar_one()

    async def get_all(self) -> List[Invoice]:
        statement = select(Invoice).order_by(Invoice.id)
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def update(self, invoice: Invoice) -> Invoice:
        """
        Update an existing invoice

        Args:
            invoice: Invoice entity with updated values

        Returns:
            Updated Invoice
        """
        invoice.updated_at = datetime.utcnow()
        self.session.add(invoice)
        await self.session.flush()
        await self.session.refresh(invoice)
        return invoice

    async def delete(self, invoice: Invoice) -> None:
        await self.session.delete(invoice)
        await self.session.flush()

    async def exists_for_customer(self, customer_id: int) -> bool:
        """
        Check if the customer has any invoice

        Args:
            customer_id: Customer ID

        Returns:
            True if at least one invoice exists, False otherwise
        """
        statement = (
            select(func.count())
            .select_from(Invoice)
            .where(Invoice.customer_id == customer_id)
        )
        result = await self.session.execute(statement)
        count = result.scalar_one()
        return count > 0

    async def generate_invoice_number(self) -> str:
        """
        Generate a unique invoice number

        Format: INV-YYYY-NNNNNN (e.g., INV-2024-000001)

        Returns:
            Unique invoice number string
        """
        year = datetime.utcnow().year
        prefix = f"INV-{year}-"

        # Get the highest invoice number for this year
        statement = (
            select(func.max(Invoice.invoice_number))
            .where(Invoice.invoice_number.like(f"{prefix}%"))
        )
        result = await self.session.execute(statement)
        max_number = result.scalar_one_or_none()

        if max_number:
            # Extract the sequence number and increment
            sequence = int(max_number.split("-")[-1]) + 1
        else:
            sequence = 1

        return f"{prefix}{sequence:06d}"
