# app/modules/reports/__init__.py
"""
Módulo de Reportes - Tablas HTML de ventas, productos y clientes enviadas por correo
"""

from .router import router
from .service import ReportsService

__all__ = [
    "router",
    "ReportsService"
]
