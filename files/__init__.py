"""
Managed file lookup.

Resolves file identifiers to the records of files held in local storage.
"""

from .models import FileRecord
from .lookup import FileLookup, InMemoryFileLookup, DatabaseFileLookup

__all__ = [
    "FileRecord",
    "FileLookup",
    "InMemoryFileLookup",
    "DatabaseFileLookup",
]
