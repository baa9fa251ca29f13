"""Pricing domain - promotions and effective service prices"""

from .router import router

__all__ = ["router"]
