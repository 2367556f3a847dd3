# app/modules/sales/__init__.py
"""
Módulo de Ventas - Ventas con reconciliación de stock

Este módulo maneja el ciclo completo de una venta:
- Registro con descuento atómico de inventario
- Actualización (restaurar items anteriores, aplicar los nuevos)
- Eliminación con devolución de stock configurable
- Consulta con productos y cliente resueltos

Arquitectura:
- router.py: Endpoints de ventas
- service.py: Orquestación y construcción de respuestas
- repository.py: Transacciones de venta + stock
- schemas.py: Modelos de request/response
"""

from .router import router
from .service import SalesService
from .repository import SalesRepository

__all__ = [
    "router",
    "SalesService",
    "SalesRepository"
]
