"""
Interface layer - user-facing entry points.

Contains the typer command-line interface.
"""
