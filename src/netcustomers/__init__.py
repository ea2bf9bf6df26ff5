"""
NetCustomers - offline-first customer records for network field technicians.

Records customer subscription details against a user-configurable field
schema, exports/imports spreadsheets, and syncs the whole store with a
single shared remote snapshot document.

Usage:
    # CLI
    netcustomers customers add serialNumber=00001 location=X name=Y

    # Programmatic
    from netcustomers.application.container import Container

    container = Container(config_dir=Path("config")).open()
    record = container.records.create({"serialNumber": "00001", "location": "X", "name": "Y"})
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
