"""Catalog domain - services, professionals, clients and payment methods"""

from .router import router

__all__ = ["router"]
