"""CreateCustomer Use Case

Registers a customer account with zero debt and credit.
"""

import logging
import random
import time
from libs.result import Result, Return, Error
from src.app import error_codes
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.transaction_coordinator import TransactionCoordinator
from src.app.repositories.customer_repository import CustomerRepository
from src.app.repositories.outlet_repository import OutletRepository
from src.domain.customer import Customer
from .dtos import CreateCustomerCommandDTO, CustomerAccountResponseDTO

logger = logging.getLogger(__name__)


def generate_customer_code() -> str:
    """CUST-<epoch millis>-<0..999>"""
    return f"CUST-{int(time.time() * 1000)}-{random.randint(0, 999)}"


class CreateCustomer:
    """
    Use Case: Create a customer

    Business Rules:
    1. The outlet, when given, must exist
    2. customer_code is generated (CUST-<timestamp>-<rand>)
    3. Debt, credit and sales start at zero
    """

    def __init__(
        self,
        uow: UnitOfWork,
        customer_repo: CustomerRepository,
        outlet_repo: OutletRepository,
    ):
        self.coordinator = TransactionCoordinator(uow)
        self.customer_repo = customer_repo
        self.outlet_repo = outlet_repo

    async def execute(self, command: CreateCustomerCommandDTO) -> Result[CustomerAccountResponseDTO]:
        result = await self.coordinator.run(
            lambda: self._create(command), operation="customer creation"
        )
        if result.is_ok():
            logger.info(f"Customer {result.value.customer_code} created")
        return result

    async def _create(self, command: CreateCustomerCommandDTO) -> Result[CustomerAccountResponseDTO]:
        if command.outlet_id is not None:
            outlet = await self.outlet_repo.get_by_id(command.outlet_id)
            if not outlet:
                return Return.err(
                    Error(
                        code=error_codes.OUTLET_NOT_FOUND,
                        message=f"Outlet {command.outlet_id} not found",
                    )
                )

        customer = await self.customer_repo.create(
            Customer(
                customer_code=generate_customer_code(),
                name=command.name,
                outlet_id=command.outlet_id,
                customer_type=command.customer_type,
                phone=command.phone,
                email=command.email,
                address=command.address,
                credit_limit=command.credit_limit,
                credit_enabled=command.credit_enabled,
                notes=command.notes,
            )
        )
        return Return.ok(CustomerAccountResponseDTO.from_entity(customer))
