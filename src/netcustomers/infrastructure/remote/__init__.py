"""
Remote snapshot store backends.
"""

from netcustomers.infrastructure.remote.directory import DirectoryRemoteStore

__all__ = ["DirectoryRemoteStore"]
