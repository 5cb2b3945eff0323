"""File model package: listing entries and the filesystem collaborator."""

from .fs import LocalFilesystem
from .types import Entry, EntryKind, listing_sort_key

__all__ = [
    "Entry",
    "EntryKind",
    "LocalFilesystem",
    "listing_sort_key",
]
