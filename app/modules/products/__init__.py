# app/modules/products/__init__.py
"""
Módulo de Productos - Catálogo por usuario

Arquitectura:
- router.py: Endpoints CRUD del catálogo
- service.py: Reglas de unicidad y respuestas
- repository.py: Acceso a datos de productos
- schemas.py: Modelos de request/response
"""

from .router import router
from .service import ProductsService
from .repository import ProductsRepository

__all__ = [
    "router",
    "ProductsService",
    "ProductsRepository"
]
