"""
Infrastructure layer: local storage, spreadsheet files, remote stores,
configuration files and logging.
"""
