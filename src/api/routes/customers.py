"""Customer API Routes

FastAPI routes for customer accounts: creation, debt position, debtors,
manual debt adjustment and deletion.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.use_cases.ledger import (
    CreateCustomer,
    GetCustomerAccount,
    ListDebtors,
    AdjustCustomerDebt,
    DeleteCustomer,
    CreateCustomerCommandDTO,
    AdjustDebtCommandDTO,
    CustomerAccountResponseDTO,
    DebtorsResponseDTO,
    DeletedResponseDTO,
)
from src.adapter.repositories import (
    SqlAlchemyCustomerRepository,
    SqlAlchemyInvoiceRepository,
    SqlAlchemyOutletRepository,
)
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.error import raise_for_error
from src.api.schemas.ledger_request import CreateCustomerRequestSchema, AdjustDebtRequestSchema
from src.depends import get_actor, get_session

router = APIRouter(prefix="/customers", tags=["Customers"], dependencies=[Depends(get_actor)])


@router.post("", response_model=CustomerAccountResponseDTO, status_code=status.HTTP_201_CREATED)
async def create_customer(
    request: CreateCustomerRequestSchema,
    session: AsyncSession = Depends(get_session),
):
    use_case = CreateCustomer(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyCustomerRepository(session),
        SqlAlchemyOutletRepository(session),
    )
    result = await use_case.execute(CreateCustomerCommandDTO(**request.model_dump()))
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.get("/debtors", response_model=DebtorsResponseDTO)
async def list_debtors(
    outlet_id: Optional[int] = Query(default=None),
    session: AsyncSession = Depends(get_session),
):
    """Customers with outstanding debt, largest first."""
    result = await ListDebtors(SqlAlchemyCustomerRepository(session)).execute(outlet_id=outlet_id)
    return result.value


@router.get("/{customer_id}", response_model=CustomerAccountResponseDTO)
async def get_customer_account(customer_id: int, session: AsyncSession = Depends(get_session)):
    result = await GetCustomerAccount(SqlAlchemyCustomerRepository(session)).execute(customer_id)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.post("/{customer_id}/debt", response_model=CustomerAccountResponseDTO)
async def adjust_customer_debt(
    customer_id: int,
    request: AdjustDebtRequestSchema,
    session: AsyncSession = Depends(get_session),
):
    """Manually add to or subtract from a customer's debt (never below zero)."""
    use_case = AdjustCustomerDebt(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyCustomerRepository(session),
    )
    result = await use_case.execute(
        AdjustDebtCommandDTO(customer_id=customer_id, amount=request.amount, type=request.type)
    )
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.delete(
    "/{customer_id}",
    response_model=DeletedResponseDTO,
    responses={409: {"description": "CUSTOMER_HAS_INVOICES"}},
)
async def delete_customer(customer_id: int, session: AsyncSession = Depends(get_session)):
    use_case = DeleteCustomer(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyCustomerRepository(session),
        SqlAlchemyInvoiceRepository(session),
    )
    result = await use_case.execute(customer_id)
    if result.is_err():
        raise_for_error(result.error)
    return result.value
