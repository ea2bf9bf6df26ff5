"""
CLI main entry point.

This module provides the main entry point for the NetCustomers CLI,
delegating to the command orchestrator.
"""


def main() -> int:
    """
    Main entry point for NetCustomers CLI.

    Returns:
        int: Exit code (0 for success, non-zero for failure)
    """
    # Import here to avoid circular imports
    from .orchestrator import app

    try:
        app()
    except SystemExit as e:
        # Typer always finishes through sys.exit()
        if e.code is None:
            return 0
        return e.code if isinstance(e.code, int) else 1
    return 0
