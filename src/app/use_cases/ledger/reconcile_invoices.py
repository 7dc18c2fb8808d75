"""ReconcileInvoices Use Case

Checks every invoice against the balance/status rules and against the
payments that reference it.
"""

import logging
import time
from datetime import datetime
from typing import List
from libs.result import Result, Return, Error
from src.app import error_codes
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.payment_repository import PaymentRepository
from src.domain.invoice_account import InvoiceAccount
from src.domain.money import ZERO, to_money
from .dtos import InvoiceDiscrepancyDTO, ReconciliationResultDTO

logger = logging.getLogger(__name__)


class ReconcileInvoices:
    """
    Use Case: Reconcile invoices

    Business Rules:
    1. balance must equal total - amount_paid
    2. status must match the rule derived from total, amount_paid, balance
    3. amount_paid must cover the sum of payments linked to the invoice
    4. Does NOT modify any data (read-only reconciliation)
    """

    def __init__(
        self,
        invoice_repo: InvoiceRepository,
        payment_repo: PaymentRepository,
    ):
        self.invoice_repo = invoice_repo
        self.payment_repo = payment_repo

    async def execute(self) -> Result[ReconciliationResultDTO]:
        """
        Execute invoice reconciliation

        Returns:
            Result[ReconciliationResultDTO]: Reconciliation result with any discrepancies
        """
        start_time = time.time()
        reconciliation_time = datetime.utcnow()

        try:
            logger.info("Starting invoice reconciliation")

            invoices = await self.invoice_repo.get_all()
            payment_sums = await self.payment_repo.get_sums_by_invoice()

            discrepancies: List[InvoiceDiscrepancyDTO] = []
            for invoice in invoices:
                total = to_money(invoice.total)
                amount_paid = to_money(invoice.amount_paid)
                balance = to_money(invoice.balance)

                expected_balance = total - amount_paid
                if balance != expected_balance:
                    discrepancies.append(
                        self._discrepancy(invoice, "balance", expected_balance, balance)
                    )

                expected_status = InvoiceAccount.derive_status(total, amount_paid, balance)
                if invoice.status != expected_status:
                    discrepancies.append(
                        self._discrepancy(invoice, "status", expected_status.value, invoice.status.value)
                    )

                linked = to_money(payment_sums.get(invoice.id, ZERO))
                if amount_paid < linked:
                    discrepancies.append(
                        self._discrepancy(invoice, "payments", linked, amount_paid)
                    )

            execution_time_ms = int((time.time() - start_time) * 1000)

            if discrepancies:
                logger.warning(
                    f"Reconciliation complete. Found {len(discrepancies)} discrepancies "
                    f"in {len(invoices)} invoices in {execution_time_ms}ms"
                )
            else:
                logger.info(
                    f"Reconciliation complete. All {len(invoices)} invoices consistent "
                    f"in {execution_time_ms}ms"
                )

            return Return.ok(
                ReconciliationResultDTO(
                    total_invoices_checked=len(invoices),
                    discrepancies_found=len(discrepancies),
                    discrepancies=discrepancies,
                    reconciliation_time=reconciliation_time,
                    execution_time_ms=execution_time_ms,
                )
            )

        except Exception as e:
            logger.error(f"Invoice reconciliation failed: {e}")
            return Return.err(
                Error(
                    code=error_codes.RECONCILIATION_FAILED,
                    message="Failed to reconcile invoices",
                    reason=str(e),
                )
            )

    @staticmethod
    def _discrepancy(invoice, check: str, expected, actual) -> InvoiceDiscrepancyDTO:
        logger.warning(
            f"Invoice {invoice.invoice_number} (id={invoice.id}) failed {check} check: "
            f"expected={expected}, actual={actual}"
        )
        return InvoiceDiscrepancyDTO(
            invoice_id=invoice.id,
            invoice_number=invoice.invoice_number,
            check=check,
            expected=str(expected),
            actual=str(actual),
        )
