# app/modules/reports/service.py
import logging
import smtplib
from typing import Callable, Dict, List, Tuple

from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from app.core.exceptions import InternalError, NotFoundError
from app.modules.customers.repository import CustomersRepository
from app.modules.products.repository import ProductsRepository
from app.modules.sales.repository import SalesRepository
from app.shared.database.models import User
from app.shared.services.mail_service import mail_service
from .html import render_customers_report, render_products_report, render_sales_report
from .schemas import ReportKind, ReportRequest, ReportResponse

logger = logging.getLogger(__name__)

_EMPTY_MESSAGES: Dict[ReportKind, str] = {
    ReportKind.SALES: "No sales found for this user",
    ReportKind.PRODUCTS: "No products found for this user",
    ReportKind.CUSTOMERS: "No customers found for this user",
}


class ReportsService:
    def __init__(self, db: Session):
        self.db = db
        self.sales_repository = SalesRepository(db)
        self.products_repository = ProductsRepository(db)
        self.customers_repository = CustomersRepository(db)

    async def send_report(self, kind: ReportKind, request: ReportRequest, owner_id: int) -> ReportResponse:
        """Generar el reporte HTML del usuario y enviarlo al destinatario indicado"""
        records, render = self._load(kind, owner_id)
        if not records:
            raise NotFoundError(_EMPTY_MESSAGES[kind])

        html_body = render(records)
        sender = self.db.query(User).filter(User.id == owner_id).first()

        try:
            delivered = await run_in_threadpool(
                mail_service.send_html,
                str(request.email),
                request.subject,
                request.message,
                html_body,
                sender.email if sender else None
            )
        except (smtplib.SMTPException, OSError) as e:
            logger.exception(f"Error enviando reporte {kind.value} a {request.email}: {e}")
            raise InternalError("Failed to send email.")

        logger.info(f"Reporte {kind.value} ({len(records)} registros) para usuario {owner_id}, entregado={delivered}")

        return ReportResponse(
            success=True,
            message="Email sent successfully" if delivered else "Email delivery is disabled; report was not sent",
            report=kind,
            recipient=str(request.email),
            rows=len(records),
            delivered=delivered
        )

    def _load(self, kind: ReportKind, owner_id: int) -> Tuple[List, Callable[[List], str]]:
        if kind == ReportKind.SALES:
            return self.sales_repository.get_sales(owner_id), render_sales_report
        if kind == ReportKind.PRODUCTS:
            return self.products_repository.get_products(owner_id), render_products_report
        return self.customers_repository.get_customers(owner_id), render_customers_report
