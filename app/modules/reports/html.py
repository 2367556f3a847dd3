# app/modules/reports/html.py
"""Render de reportes como tablas HTML para el cuerpo del correo"""
from datetime import datetime
from decimal import Decimal
from html import escape
from typing import Iterable, List, Optional, Sequence

from app.shared.database.models import Customer, Product, Sale

UNKNOWN_PRODUCT = "Unknown Product"


def _money(value) -> str:
    return f"{Decimal(str(value)):.2f}"


def _table(title: str, headers: Sequence[str], rows: Iterable[Sequence], generated_at: datetime) -> str:
    head = "".join(f"<th>{escape(h)}</th>" for h in headers)
    body = "".join(
        "<tr>" + "".join(f"<td>{escape(str(cell))}</td>" for cell in row) + "</tr>"
        for row in rows
    )
    return (
        f"<h2>{escape(title)}</h2>"
        f"<p>Generated on: {generated_at.strftime('%Y-%m-%d %H:%M:%S')}</p>"
        '<table border="1" cellspacing="0" cellpadding="5">'
        f"<tr>{head}</tr>{body}</table>"
    )


def render_sales_report(sales: List[Sale], generated_at: Optional[datetime] = None) -> str:
    """Una fila por item vendido; el total es el de la venta completa"""
    rows = []
    for sale in sales:
        for item in sale.items:
            product_name = item.product.name if item.product is not None else UNKNOWN_PRODUCT
            rows.append((
                sale.sale_date.strftime("%Y-%m-%d"),
                product_name,
                item.quantity,
                sale.payment_method.value,
                _money(sale.total_price)
            ))

    return _table(
        "Sales Report",
        ("Date", "Product Name", "Quantity", "Payment Method", "Total Price"),
        rows,
        generated_at or datetime.now()
    )


def render_products_report(products: List[Product], generated_at: Optional[datetime] = None) -> str:
    rows = [
        (p.name, p.description, p.quantity, _money(p.price))
        for p in products
    ]
    return _table(
        "Product Report",
        ("Product Name", "Description", "Quantity", "Price"),
        rows,
        generated_at or datetime.now()
    )


def render_customers_report(customers: List[Customer], generated_at: Optional[datetime] = None) -> str:
    rows = [
        (
            c.name,
            c.email,
            c.mobile_number,
            f"{c.street}, {c.city}, {c.state} {c.zip_code}, {c.country}"
        )
        for c in customers
    ]
    return _table(
        "Customer Report",
        ("Name", "Email", "Mobile Number", "Address"),
        rows,
        generated_at or datetime.now()
    )
