"""Payment API Routes

FastAPI routes for recording, editing, deleting and listing payments.
"""

from datetime import timedelta
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from libs.result import Error
from src.app import error_codes
from src.app.services.authenticator import Actor
from src.app.services.file_storage import FileStorage
from src.app.services.notification_service import NotificationService
from src.app.use_cases.ledger import (
    RecordPayment,
    EditPayment,
    DeletePayment,
    ListPayments,
    RecordPaymentCommandDTO,
    EditPaymentCommandDTO,
    PaymentResponseDTO,
    ListPaymentsResponseDTO,
    DeletedResponseDTO,
)
from src.adapter.repositories import (
    SqlAlchemyCustomerRepository,
    SqlAlchemyInvoiceRepository,
    SqlAlchemyPaymentRepository,
)
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.error import ClientError, raise_for_error
from src.api.schemas.ledger_request import RecordPaymentRequestSchema, EditPaymentRequestSchema
from src.depends import (
    get_actor,
    get_file_storage,
    get_notification_service,
    get_payment_delete_window,
    get_session,
)

router = APIRouter(prefix="/payments", tags=["Payments"], dependencies=[Depends(get_actor)])


@router.post(
    "",
    response_model=PaymentResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "INVALID_AMOUNT / INVALID_RECEIPT"},
        404: {"description": "CUSTOMER_NOT_FOUND / INVOICE_NOT_FOUND"},
        409: {"description": "INVOICE_CUSTOMER_MISMATCH"},
    }
)
async def record_payment(
    request: RecordPaymentRequestSchema,
    session: AsyncSession = Depends(get_session),
    actor: Actor = Depends(get_actor),
    file_storage: FileStorage = Depends(get_file_storage),
    notification_service: NotificationService = Depends(get_notification_service),
):
    """
    Record a payment.

    Debt is paid down first and any excess becomes customer credit. A
    receipt, when sent, is stored after the payment commits; if that
    upload fails the payment stays recorded with `receipt = null`.

    **Example request:**
    ```json
    {
      "customer_id": 7,
      "invoice_id": 12,
      "amount": "700.00",
      "method": "bank transfer"
    }
    ```
    """
    receipt = request.receipt_bytes()
    if receipt is not None and len(receipt) > ApplicationConfig.RECEIPT_MAX_BYTES:
        raise ClientError(
            Error(
                code=error_codes.INVALID_RECEIPT,
                message=f"Receipt too large (max {ApplicationConfig.RECEIPT_MAX_BYTES} bytes)",
            ),
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
        )

    command = RecordPaymentCommandDTO(
        customer_id=request.customer_id,
        amount=request.amount,
        method=request.method,
        invoice_id=request.invoice_id,
        reference=request.reference,
        created_by=actor.id,
    )

    use_case = RecordPayment(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyPaymentRepository(session),
        SqlAlchemyInvoiceRepository(session),
        SqlAlchemyCustomerRepository(session),
        file_storage=file_storage,
        notification_service=notification_service,
    )
    result = await use_case.execute(
        command,
        receipt=receipt,
        receipt_filename=request.receipt_filename,
        receipt_content_type=request.receipt_content_type,
    )

    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.get("", response_model=ListPaymentsResponseDTO)
async def list_payments(
    customer_id: Optional[int] = Query(default=None),
    invoice_id: Optional[int] = Query(default=None),
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    session: AsyncSession = Depends(get_session),
):
    """List payments, newest first."""
    use_case = ListPayments(SqlAlchemyPaymentRepository(session))
    result = await use_case.execute(
        customer_id=customer_id, invoice_id=invoice_id, limit=limit, offset=offset
    )
    return result.value


@router.put(
    "/{payment_id}",
    response_model=PaymentResponseDTO,
    responses={
        400: {"description": "INVALID_AMOUNT"},
        404: {"description": "PAYMENT_NOT_FOUND / CUSTOMER_NOT_FOUND / INVOICE_NOT_FOUND"},
        409: {"description": "INVOICE_CUSTOMER_MISMATCH"},
    }
)
async def edit_payment(
    payment_id: int,
    request: EditPaymentRequestSchema,
    session: AsyncSession = Depends(get_session),
    notification_service: NotificationService = Depends(get_notification_service),
):
    """
    Edit a payment.

    The payment's previous effect on its customer and invoice is rolled
    back before the new amount is applied. Omit `invoice_id` to keep the
    current invoice; send `null` to unlink the payment.
    """
    command = EditPaymentCommandDTO(
        payment_id=payment_id,
        **request.model_dump(exclude_unset=True),
    )

    use_case = EditPayment(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyPaymentRepository(session),
        SqlAlchemyInvoiceRepository(session),
        SqlAlchemyCustomerRepository(session),
        notification_service=notification_service,
    )
    result = await use_case.execute(command)

    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.delete(
    "/{payment_id}",
    response_model=DeletedResponseDTO,
    responses={
        404: {"description": "PAYMENT_NOT_FOUND"},
        409: {"description": "OUTSIDE_DELETE_WINDOW"},
    }
)
async def delete_payment(
    payment_id: int,
    session: AsyncSession = Depends(get_session),
    delete_window: timedelta = Depends(get_payment_delete_window),
    notification_service: NotificationService = Depends(get_notification_service),
):
    """Delete a payment younger than the delete window, reversing its effect."""
    use_case = DeletePayment(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyPaymentRepository(session),
        SqlAlchemyInvoiceRepository(session),
        SqlAlchemyCustomerRepository(session),
        delete_window=delete_window,
        notification_service=notification_service,
    )
    result = await use_case.execute(payment_id)

    if result.is_err():
        raise_for_error(result.error)
    return result.value
