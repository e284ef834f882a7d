"""
Services.

Business logic layer.
"""

from app.services.burn_store import BurnStore

__all__ = ["BurnStore"]
