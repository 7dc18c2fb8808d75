"""
List Invoices Use Case

Retrieves invoices with optional filters and pagination.
"""
from typing import Optional
from libs.result import Result, Return
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.invoice_line_repository import InvoiceLineRepository
from src.domain.invoice import InvoiceStatus
from .dtos import InvoiceResponseDTO, ListInvoicesResponseDTO


class ListInvoices:
    """
    Use case: List invoices

    Invoices are ordered by created_at DESC (most recent first).
    """

    def __init__(
        self,
        invoice_repo: InvoiceRepository,
        invoice_line_repo: InvoiceLineRepository,
    ):
        self.invoice_repo = invoice_repo
        self.invoice_line_repo = invoice_line_repo

    async def execute(
        self,
        outlet_id: Optional[int] = None,
        customer_id: Optional[int] = None,
        status: Optional[InvoiceStatus] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Result[ListInvoicesResponseDTO]:
        """
        List invoices.

        Args:
            outlet_id: Only invoices of this outlet
            customer_id: Only invoices of this customer
            status: Only invoices with this status
            limit: Maximum number of invoices to return (default 20)
            offset: Number of invoices to skip (default 0)

        Returns:
            Result[ListInvoicesResponseDTO]: Paginated invoice list
        """
        invoices, total = await self.invoice_repo.list(
            outlet_id=outlet_id,
            customer_id=customer_id,
            status=status,
            limit=limit,
            offset=offset,
        )

        invoice_dtos = []
        for invoice in invoices:
            lines = await self.invoice_line_repo.get_by_invoice_id(invoice.id)
            invoice_dtos.append(InvoiceResponseDTO.from_entity(invoice, lines))

        return Return.ok(
            ListInvoicesResponseDTO(
                invoices=invoice_dtos,
                total=total,
                limit=limit,
                offset=offset,
            )
        )
