from sqlalchemy.orm import Session
from sqlalchemy import and_, func, desc
from typing import Dict, Any, List
from decimal import Decimal

from app.shared.database.models import Sale, SaleItem, Product, Customer


class DashboardRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_totals(self, owner_id: int) -> Dict[str, Any]:
        """Conteos y ventas totales del dueño"""
        total_customers = self.db.query(func.count(Customer.id)).filter(
            Customer.owner_id == owner_id
        ).scalar() or 0

        total_products = self.db.query(func.count(Product.id)).filter(
            Product.owner_id == owner_id
        ).scalar() or 0

        total_sales, total_revenue = self.db.query(
            func.count(Sale.id),
            func.coalesce(func.sum(Sale.total_price), 0)
        ).filter(
            Sale.owner_id == owner_id
        ).one()

        return {
            'total_customers': total_customers,
            'total_products': total_products,
            'total_sales': total_sales or 0,
            'total_revenue': Decimal(str(total_revenue or 0))
        }

    def get_monthly_sales(self, owner_id: int) -> List[Dict[str, Any]]:
        """
        Serie mensual [{month: YYYY-MM, total_sales, total_orders}] ascendente.

        El agrupamiento por mes se hace en Python para no depender del
        dialecto SQL (strftime vs to_char).
        """
        rows = self.db.query(Sale.sale_date, Sale.total_price).filter(
            Sale.owner_id == owner_id
        ).all()

        buckets: Dict[str, Dict[str, Any]] = {}
        for sale_date, total_price in rows:
            month = sale_date.strftime("%Y-%m")
            if month not in buckets:
                buckets[month] = {'month': month, 'total_sales': Decimal('0'), 'total_orders': 0}
            buckets[month]['total_sales'] += Decimal(str(total_price))
            buckets[month]['total_orders'] += 1

        return [buckets[month] for month in sorted(buckets)]

    def get_top_products(self, owner_id: int, limit: int = 3) -> List[Dict[str, Any]]:
        """Productos más vendidos por unidades"""
        total_sold = func.sum(SaleItem.quantity).label('total_sold')
        rows = self.db.query(
            Product.id, Product.name, Product.description, Product.quantity, Product.price, total_sold
        ).join(
            SaleItem, SaleItem.product_id == Product.id
        ).join(
            Sale, Sale.id == SaleItem.sale_id
        ).filter(
            and_(
                Sale.owner_id == owner_id,
                Product.owner_id == owner_id
            )
        ).group_by(
            Product.id, Product.name, Product.description, Product.quantity, Product.price
        ).order_by(desc(total_sold), Product.id).limit(limit).all()

        return [
            {
                'id': row.id,
                'name': row.name,
                'description': row.description,
                'quantity': row.quantity,
                'price': row.price,
                'total_sold': int(row.total_sold or 0)
            }
            for row in rows
        ]

    def get_top_customers(self, owner_id: int, limit: int = 3) -> List[Dict[str, Any]]:
        """Clientes con mayor gasto acumulado"""
        total_spent = func.sum(Sale.total_price).label('total_spent')
        rows = self.db.query(
            Customer.id, Customer.name, Customer.email, Customer.mobile_number, total_spent
        ).join(
            Sale, Sale.customer_id == Customer.id
        ).filter(
            and_(
                Sale.owner_id == owner_id,
                Customer.owner_id == owner_id
            )
        ).group_by(
            Customer.id, Customer.name, Customer.email, Customer.mobile_number
        ).order_by(desc(total_spent), Customer.id).limit(limit).all()

        return [
            {
                'id': row.id,
                'name': row.name,
                'email': row.email,
                'mobile_number': row.mobile_number,
                'total_spent': Decimal(str(row.total_spent or 0))
            }
            for row in rows
        ]
