"""
CLI command modules.

    fields.py    - fields list|add|remove|up|down
    customers.py - customers list|show|add|update|delete|clear|favorite|search|favorites|scan
    transfer.py  - export / import
    sync.py      - sync push|pull|status|auto
"""

from .customers import customers_app
from .fields import fields_app
from .sync import sync_app
from .transfer import export_customers, import_customers

__all__ = [
    "customers_app",
    "fields_app",
    "sync_app",
    "export_customers",
    "import_customers",
]
