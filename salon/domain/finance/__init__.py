"""Finance domain - ledger, commissions, loyalty points and package credits"""

from .router import router

__all__ = ["router"]
