# app/modules/dashboard/__init__.py
"""
Módulo de Dashboard - Agregados de solo lectura por usuario
"""

from .router import router
from .service import DashboardService
from .repository import DashboardRepository

__all__ = [
    "router",
    "DashboardService",
    "DashboardRepository"
]
