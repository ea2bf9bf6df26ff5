"""
Configuration domain models.
"""

from netcustomers.domain.config.settings import AppSettings

__all__ = ["AppSettings"]
