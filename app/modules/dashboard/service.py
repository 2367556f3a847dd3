# app/modules/dashboard/service.py
from decimal import Decimal, ROUND_HALF_UP
from sqlalchemy.orm import Session

from .repository import DashboardRepository
from .schemas import DashboardData, DashboardResponse


class DashboardService:
    def __init__(self, db: Session):
        self.db = db
        self.repository = DashboardRepository(db)

    async def get_dashboard(self, owner_id: int) -> DashboardResponse:
        """Resumen del negocio del usuario: totales, serie mensual y tops"""
        totals = self.repository.get_totals(owner_id)

        average_order_value = Decimal('0')
        if totals['total_sales'] > 0:
            average_order_value = (totals['total_revenue'] / totals['total_sales']).quantize(
                Decimal('0.01'), rounding=ROUND_HALF_UP
            )

        return DashboardResponse(
            success=True,
            message="Dashboard data fetched successfully",
            data=DashboardData(
                total_customers=totals['total_customers'],
                total_sales=totals['total_sales'],
                total_products=totals['total_products'],
                total_revenue=totals['total_revenue'],
                average_order_value=average_order_value,
                monthly_sales=self.repository.get_monthly_sales(owner_id),
                top_products=self.repository.get_top_products(owner_id),
                top_customers=self.repository.get_top_customers(owner_id)
            )
        )
