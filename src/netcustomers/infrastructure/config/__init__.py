"""
Configuration file infrastructure.
"""

from netcustomers.infrastructure.config.repository import ConfigRepository

__all__ = ["ConfigRepository"]
