"""Settings domain - salon-wide configuration"""

from .router import router

__all__ = ["router"]
