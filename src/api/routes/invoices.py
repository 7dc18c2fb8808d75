"""Invoice API Routes

FastAPI routes for creating, editing, deleting and reading invoices.
"""

from datetime import timedelta
from decimal import Decimal
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.app.services.authenticator import Actor
from src.app.services.notification_service import NotificationService
from src.app.use_cases.ledger import (
    CreateInvoice,
    EditInvoice,
    DeleteInvoice,
    GetInvoice,
    ListInvoices,
    CreateInvoiceCommandDTO,
    EditInvoiceCommandDTO,
    InvoiceItemCommandDTO,
    InvoiceResponseDTO,
    EditInvoiceResponseDTO,
    ListInvoicesResponseDTO,
    DeletedResponseDTO,
)
from src.adapter.repositories import (
    SqlAlchemyOutletRepository,
    SqlAlchemyCustomerRepository,
    SqlAlchemyProductRepository,
    SqlAlchemyInvoiceRepository,
    SqlAlchemyInvoiceLineRepository,
    SqlAlchemyPaymentRepository,
)
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.error import raise_for_error
from src.api.schemas.ledger_request import CreateInvoiceRequestSchema, EditInvoiceRequestSchema
from src.depends import (
    get_actor,
    get_default_tax_rate,
    get_notification_service,
    get_payment_delete_window,
    get_session,
)
from src.domain.invoice import InvoiceStatus

router = APIRouter(prefix="/invoices", tags=["Invoices"], dependencies=[Depends(get_actor)])

ERROR_EXAMPLE = {
    "application/json": {
        "example": {
            "error": {
                "code": "INSUFFICIENT_STOCK",
                "message": "Insufficient stock for product Rice 50kg"
            }
        }
    }
}


@router.post(
    "",
    response_model=InvoiceResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "ITEMS_REQUIRED / INVALID_QUANTITY"},
        404: {"description": "OUTLET_NOT_FOUND / CUSTOMER_NOT_FOUND / PRODUCT_NOT_FOUND"},
        409: {
            "description": "INSUFFICIENT_STOCK / CREDIT_LIMIT_EXCEEDED / OUTSIDE_DELETE_WINDOW",
            "content": ERROR_EXAMPLE,
        },
    }
)
async def create_invoice(
    request: CreateInvoiceRequestSchema,
    session: AsyncSession = Depends(get_session),
    actor: Actor = Depends(get_actor),
    notification_service: NotificationService = Depends(get_notification_service),
    default_tax_rate: Decimal = Depends(get_default_tax_rate),
):
    """
    Create an invoice.

    Stock of every item is deducted, totals are computed with the outlet
    tax rate, a positive `amount_paid` is recorded as a payment, and the
    customer's debt or credit moves, all in one transaction.

    **Returns:**
    - 201: Invoice created
    - 400: No items / invalid quantity
    - 404: Outlet, customer or product not found
    - 409: Insufficient stock or credit limit exceeded
    """
    command = CreateInvoiceCommandDTO(
        outlet_id=request.outlet_id,
        customer_id=request.customer_id,
        items=[InvoiceItemCommandDTO(**item.model_dump()) for item in request.items],
        amount_paid=request.amount_paid,
        method=request.method,
        reference=request.reference,
        payment_terms=request.payment_terms,
        notes=request.notes,
        created_by=actor.id,
    )

    use_case = CreateInvoice(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyOutletRepository(session),
        SqlAlchemyCustomerRepository(session),
        SqlAlchemyProductRepository(session),
        SqlAlchemyInvoiceRepository(session),
        SqlAlchemyInvoiceLineRepository(session),
        SqlAlchemyPaymentRepository(session),
        notification_service=notification_service,
        default_tax_rate=default_tax_rate,
        due_days=ApplicationConfig.INVOICE_DUE_DAYS,
        currency=ApplicationConfig.CURRENCY,
    )
    result = await use_case.execute(command)

    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.get("", response_model=ListInvoicesResponseDTO)
async def list_invoices(
    outlet_id: Optional[int] = Query(default=None),
    customer_id: Optional[int] = Query(default=None),
    invoice_status: Optional[InvoiceStatus] = Query(default=None, alias="status"),
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    session: AsyncSession = Depends(get_session),
):
    """List invoices, newest first."""
    use_case = ListInvoices(
        SqlAlchemyInvoiceRepository(session),
        SqlAlchemyInvoiceLineRepository(session),
    )
    result = await use_case.execute(
        outlet_id=outlet_id,
        customer_id=customer_id,
        status=invoice_status,
        limit=limit,
        offset=offset,
    )
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.get("/{invoice_id}", response_model=InvoiceResponseDTO)
async def get_invoice(invoice_id: int, session: AsyncSession = Depends(get_session)):
    use_case = GetInvoice(
        SqlAlchemyInvoiceRepository(session),
        SqlAlchemyInvoiceLineRepository(session),
    )
    result = await use_case.execute(invoice_id)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.put(
    "/{invoice_id}",
    response_model=EditInvoiceResponseDTO,
    responses={
        404: {"description": "INVOICE_NOT_FOUND / PRODUCT_NOT_FOUND"},
        409: {
            "description": "INSUFFICIENT_STOCK / CREDIT_LIMIT_EXCEEDED / OUTSIDE_DELETE_WINDOW",
            "content": ERROR_EXAMPLE,
        },
    }
)
async def edit_invoice(
    invoice_id: int,
    request: EditInvoiceRequestSchema,
    session: AsyncSession = Depends(get_session),
    actor: Actor = Depends(get_actor),
    notification_service: NotificationService = Depends(get_notification_service),
    default_tax_rate: Decimal = Depends(get_default_tax_rate),
    delete_window: timedelta = Depends(get_payment_delete_window),
):
    """
    Edit an invoice.

    The old item set releases its stock before the new set is reserved.
    An increased `amount_paid` is recorded as a new payment, returned
    alongside the invoice; a lowered one is withdrawn from the linked
    payments, newest first.
    """
    command = EditInvoiceCommandDTO(
        invoice_id=invoice_id,
        items=[InvoiceItemCommandDTO(**item.model_dump()) for item in request.items],
        amount_paid=request.amount_paid,
        method=request.method,
        reference=request.reference,
        created_by=actor.id,
    )

    use_case = EditInvoice(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyOutletRepository(session),
        SqlAlchemyCustomerRepository(session),
        SqlAlchemyProductRepository(session),
        SqlAlchemyInvoiceRepository(session),
        SqlAlchemyInvoiceLineRepository(session),
        SqlAlchemyPaymentRepository(session),
        notification_service=notification_service,
        default_tax_rate=default_tax_rate,
        delete_window=delete_window,
    )
    result = await use_case.execute(command)

    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.delete(
    "/{invoice_id}",
    response_model=DeletedResponseDTO,
    responses={409: {"description": "HAS_EXISTING_PAYMENT"}},
)
async def delete_invoice(
    invoice_id: int,
    session: AsyncSession = Depends(get_session),
    notification_service: NotificationService = Depends(get_notification_service),
):
    """Delete an invoice that has no payments; its stock is released."""
    use_case = DeleteInvoice(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyOutletRepository(session),
        SqlAlchemyCustomerRepository(session),
        SqlAlchemyProductRepository(session),
        SqlAlchemyInvoiceRepository(session),
        SqlAlchemyInvoiceLineRepository(session),
        SqlAlchemyPaymentRepository(session),
        notification_service=notification_service,
    )
    result = await use_case.execute(invoice_id)

    if result.is_err():
        raise_for_error(result.error)
    return result.value
