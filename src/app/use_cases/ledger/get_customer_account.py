"""
Get Customer Account Use Case

Returns a customer's debt, credit and sales position.
"""
from libs.result import Result, Return, Error
from src.app import error_codes
from src.app.repositories.customer_repository import CustomerRepository
from .dtos import CustomerAccountResponseDTO


class GetCustomerAccount:
    def __init__(self, customer_repo: CustomerRepository):
        self.customer_repo = customer_repo

    async def execute(self, customer_id: int) -> Result[CustomerAccountResponseDTO]:
        customer = await self.customer_repo.get_by_id(customer_id)
        if not customer:
            return Return.err(
                Error(
                    code=error_codes.CUSTOMER_NOT_FOUND,
                    message=f"Customer {customer_id} not found",
                )
            )
        return Return.ok(CustomerAccountResponseDTO.from_entity(customer))
