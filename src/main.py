"""
NetCustomers - offline-first customer records for network field technicians

Keeps customer subscription details against a user-editable field schema,
exchanges them as spreadsheets, and syncs the whole store with one shared
remote snapshot document.
"""

import sys
from netcustomers.interface.cli import main


if __name__ == "__main__":
    sys.exit(main())
