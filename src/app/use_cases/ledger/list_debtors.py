"""
List Debtors Use Case

Customers that owe money, largest debt first.
"""
from decimal import Decimal
from typing import Optional
from libs.result import Result, Return
from src.app.repositories.customer_repository import CustomerRepository
from src.domain.money import ZERO, to_money
from .dtos import CustomerAccountResponseDTO, DebtorsResponseDTO


class ListDebtors:
    """
    Use case: List debtors

    A debtor is a customer with current_debt > 0. Sorted by debt
    descending, with the summed debt.
    """

    def __init__(self, customer_repo: CustomerRepository):
        self.customer_repo = customer_repo

    async def execute(self, outlet_id: Optional[int] = None) -> Result[DebtorsResponseDTO]:
        customers = await self.customer_repo.get_debtors(outlet_id=outlet_id)
        debtors = sorted(
            (c for c in customers if to_money(c.current_debt) > ZERO),
            key=lambda c: to_money(c.current_debt),
            reverse=True,
        )
        total_debt: Decimal = sum((to_money(c.current_debt) for c in debtors), ZERO)

        return Return.ok(
            DebtorsResponseDTO(
                count=len(debtors),
                total_debt=total_debt,
                debtors=[CustomerAccountResponseDTO.from_entity(c) for c in debtors],
            )
        )
