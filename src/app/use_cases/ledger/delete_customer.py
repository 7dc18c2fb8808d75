"""DeleteCustomer Use Case"""

import logging
from libs.result import Result, Return, Error
from src.app import error_codes
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.transaction_coordinator import TransactionCoordinator
from src.app.repositories.customer_repository import CustomerRepository
from src.app.repositories.invoice_repository import InvoiceRepository
from .dtos import DeletedResponseDTO

logger = logging.getLogger(__name__)


class DeleteCustomer:
    """
    Use Case: Delete a customer

    A customer that has any invoice cannot be deleted.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        customer_repo: CustomerRepository,
        invoice_repo: InvoiceRepository,
    ):
        self.coordinator = TransactionCoordinator(uow)
        self.customer_repo = customer_repo
        self.invoice_repo = invoice_repo

    async def execute(self, customer_id: int) -> Result[DeletedResponseDTO]:
        result = await self.coordinator.run(
            lambda: self._delete(customer_id), operation="customer deletion"
        )
        if result.is_ok():
            logger.info(f"Customer {customer_id} deleted")
        return result

    async def _delete(self, customer_id: int) -> Result[DeletedResponseDTO]:
        customer = await self.customer_repo.get_by_id(customer_id, for_update=True)
        if not customer:
            return Return.err(
                Error(
                    code=error_codes.CUSTOMER_NOT_FOUND,
                    message=f"Customer {customer_id} not found",
                )
            )

        if await self.invoice_repo.exists_for_customer(customer.id):
            return Return.err(
                Error(
                    code=error_codes.CUSTOMER_HAS_INVOICES,
                    message=f"Customer {customer.name} has invoices and cannot be deleted",
                    reason=f"customer_id={customer.id}",
                )
            )

        await self.customer_repo.delete(customer)
        return Return.ok(DeletedResponseDTO(id=customer_id))
