"""GetInvoice Use Case

Fetches one invoice with its lines.
"""

from libs.result import Result, Return, Error
from src.app import error_codes
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.invoice_line_repository import InvoiceLineRepository
from .dtos import InvoiceResponseDTO


class GetInvoice:
    def __init__(
        self,
        invoice_repo: InvoiceRepository,
        invoice_line_repo: InvoiceLineRepository,
    ):
        self.invoice_repo = invoice_repo
        self.invoice_line_repo = invoice_line_repo

    async def execute(self, invoice_id: int) -> Result[InvoiceResponseDTO]:
        invoice = await self.invoice_repo.get_by_id(invoice_id)
        if not invoice:
            return Return.err(
                Error(
                    code=error_codes.INVOICE_NOT_FOUND,
                    message=f"Invoice {invoice_id} not found",
                )
            )

        lines = await self.invoice_line_repo.get_by_invoice_id(invoice.id)
        return Return.ok(InvoiceResponseDTO.from_entity(invoice, lines))
