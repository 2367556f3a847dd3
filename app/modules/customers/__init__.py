# app/modules/customers/__init__.py
"""
Módulo de Clientes - Registro de clientes por usuario

Arquitectura:
- router.py: Endpoints CRUD de clientes
- service.py: Reglas de unicidad (email / móvil) y respuestas
- repository.py: Acceso a datos de clientes
- schemas.py: Modelos de request/response
"""

from .router import router
from .service import CustomersService
from .repository import CustomersRepository

__all__ = [
    "router",
    "CustomersService",
    "CustomersRepository"
]
