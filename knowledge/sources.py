"""
Source resolution for search hits.

Hits produced from files uploaded to local storage carry the storage path
as their source; those are mapped back to file records so references can
link to the file instead of a path on disk.
"""

import logging
from typing import Optional

from files.lookup import FileLookup
from files.models import FileRecord
from .models import ResolvedHit

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_ANCHOR = "CherryStudio"
DEFAULT_FILE_LINK_HOST = "http://file"

POSIX_FILES_DIR = "/Data/Files"
WINDOWS_FILES_DIR = "\\Data\\Files"


def _name_after(source: str, directory: str, separator: str) -> str:
    parts = source.split(directory + separator)
    return parts[1] if len(parts) > 1 else ""


def extract_file_id(source: Optional[str], anchor: str = DEFAULT_STORAGE_ANCHOR) -> Optional[str]:
    """
    Extract the managed file id from a storage path.

    ``/home/u/.config/CherryStudio/Data/Files/abc123.pdf`` gives ``abc123``.
    Returns None when the path is outside managed storage.
    """
    if not source or anchor not in source:
        return None

    file_name = ""
    if POSIX_FILES_DIR in source:
        file_name = _name_after(source, POSIX_FILES_DIR, "/")
    if WINDOWS_FILES_DIR in source:
        file_name = _name_after(source, WINDOWS_FILES_DIR, "\\")

    if not file_name:
        return None
    return file_name.split(".")[0] or None


async def get_file_from_url(
    source: Optional[str],
    files: FileLookup,
    anchor: str = DEFAULT_STORAGE_ANCHOR,
) -> Optional[FileRecord]:
    """
    Resolve a hit source to a managed file record.

    The lookup is advisory: a miss or a failing lookup both yield None.
    """
    file_id = extract_file_id(source, anchor)
    if not file_id:
        return None

    try:
        return await files.get_file(file_id)
    except Exception as e:
        logger.warning(f"File lookup failed for {file_id}: {e}")
        return None


def get_knowledge_source_url(item: ResolvedHit, link_host: str = DEFAULT_FILE_LINK_HOST) -> str:
    """Pick the display source: remote URL, then local file link, then the raw source."""
    source = item.source
    if source.startswith("http"):
        return source

    if item.file:
        return f"[{item.file.origin_name}]({link_host}/{item.file.name})"

    return source
