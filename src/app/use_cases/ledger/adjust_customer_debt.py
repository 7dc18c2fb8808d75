"""AdjustCustomerDebt Use Case

Manual correction of a customer's debt outside any invoice or payment.
"""

import logging
from libs.result import Result, Return, Error
from src.app import error_codes
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.transaction_coordinator import TransactionCoordinator
from src.app.repositories.customer_repository import CustomerRepository
from src.domain.money import ZERO, to_money
from .dtos import AdjustDebtCommandDTO, CustomerAccountResponseDTO

logger = logging.getLogger(__name__)


class AdjustCustomerDebt:
    """
    Use Case: Adjust a customer's debt

    Business Rules:
    1. amount must be greater than 0
    2. add: current_debt += amount
    3. subtract: current_debt -= amount, never below 0
    4. credit_balance is not touched
    """

    def __init__(self, uow: UnitOfWork, customer_repo: CustomerRepository):
        self.coordinator = TransactionCoordinator(uow)
        self.customer_repo = customer_repo

    async def execute(self, command: AdjustDebtCommandDTO) -> Result[CustomerAccountResponseDTO]:
        result = await self.coordinator.run(
            lambda: self._adjust(command), operation="debt adjustment"
        )
        if result.is_ok():
            logger.info(
                f"Debt of customer {command.customer_id} adjusted ({command.type} {command.amount}): "
                f"now {result.value.current_debt}"
            )
        return result

    async def _adjust(self, command: AdjustDebtCommandDTO) -> Result[CustomerAccountResponseDTO]:
        amount = to_money(command.amount)
        if amount <= ZERO:
            return Return.err(
                Error(
                    code=error_codes.INVALID_AMOUNT,
                    message="Adjustment amount must be greater than 0",
                    reason=f"amount={command.amount}",
                )
            )

        customer = await self.customer_repo.get_by_id(command.customer_id, for_update=True)
        if not customer:
            return Return.err(
                Error(
                    code=error_codes.CUSTOMER_NOT_FOUND,
                    message=f"Customer {command.customer_id} not found",
                )
            )

        current_debt = to_money(customer.current_debt)
        if command.type == "add":
            customer.current_debt = current_debt + amount
        else:
            customer.current_debt = max(current_debt - amount, ZERO)

        return Return.ok(CustomerAccountResponseDTO.from_entity(await self.customer_repo.update(customer)))
