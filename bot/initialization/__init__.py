"""
Bot Initialization Module.

This module contains all initialization logic split into focused modules:
- logging: Logger configuration
- handlers: Command handler registration
- shutdown: Graceful shutdown handler
"""

__all__ = []
