"""Invoice Reconciliation Worker

Re-checks every invoice against its totals and linked payments on an
interval and logs whatever does not add up. Never writes.

    python -m src.worker.invoice_reconciler            # every RECONCILIATION_INTERVAL_SECONDS
    python -m src.worker.invoice_reconciler --once     # exit status 1 on discrepancies
"""

import argparse
import asyncio
import logging
from collections import Counter
from typing import List, Optional
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from libs.result import Result
from src.adapter.repositories.invoice_repository import SqlAlchemyInvoiceRepository
from src.adapter.repositories.payment_repository import SqlAlchemyPaymentRepository
from src.app.use_cases.ledger import ReconcileInvoices, ReconciliationResultDTO

logger = logging.getLogger(__name__)


class InvoiceReconcilerWorker:
    """
    Runs ReconcileInvoices on its own engine until stopped

    A crashed cycle is logged and the next one still runs; stop() ends
    the wait between cycles immediately.
    """

    def __init__(self, db_uri: Optional[str] = None, interval_seconds: Optional[float] = None):
        self.engine = create_async_engine(db_uri or ApplicationConfig.DB_URI, echo=False, future=True)
        self.session_factory = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
        )
        self.interval_seconds = interval_seconds or ApplicationConfig.RECONCILIATION_INTERVAL_SECONDS
        self._stopping = asyncio.Event()

    async def reconcile(self) -> Result[ReconciliationResultDTO]:
        async with self.session_factory() as session:
            result = await ReconcileInvoices(
                invoice_repo=SqlAlchemyInvoiceRepository(session),
                payment_repo=SqlAlchemyPaymentRepository(session),
            ).execute()

        if result.is_ok():
            self._report(result.value)
        else:
            logger.error(f"Invoice reconciliation failed: {result.error.message}")
        return result

    @staticmethod
    def _report(report: ReconciliationResultDTO) -> None:
        if not report.discrepancies:
            logger.info(
                f"{report.total_invoices_checked} invoices consistent "
                f"({report.execution_time_ms}ms)"
            )
            return

        per_check = Counter(d.check for d in report.discrepancies)
        logger.warning(
            f"{report.discrepancies_found} of {report.total_invoices_checked} invoices inconsistent: "
            + ", ".join(f"{check}={count}" for check, count in sorted(per_check.items()))
        )
        for d in report.discrepancies:
            logger.warning(
                f"{d.invoice_number} (id={d.invoice_id}) {d.check}: "
                f"expected {d.expected}, got {d.actual}"
            )

    async def run(self) -> None:
        """Reconcile every interval until stop() is called"""
        if not ApplicationConfig.RECONCILIATION_ENABLED:
            logger.info("Invoice reconciliation is disabled")
            return

        while not self._stopping.is_set():
            try:
                await self.reconcile()
            except Exception:
                logger.exception("Invoice reconciliation cycle crashed")

            try:
                await asyncio.wait_for(self._stopping.wait(), timeout=self.interval_seconds)
            except asyncio.TimeoutError:
                pass

    def stop(self) -> None:
        self._stopping.set()

    async def close(self) -> None:
        await self.engine.dispose()


async def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Invoice reconciliation worker")
    parser.add_argument("--once", action="store_true", help="Reconcile once and exit")
    parser.add_argument("--interval", type=float, default=None, help="Seconds between cycles")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=ApplicationConfig.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    worker = InvoiceReconcilerWorker(interval_seconds=args.interval)
    try:
        if args.once:
            result = await worker.reconcile()
            return 0 if result.is_ok() and result.value.discrepancies_found == 0 else 1
        await worker.run()
        return 0
    finally:
        await worker.close()


if __name__ == "__main__":
    raise SystemExit(asyncio.run(main()))
