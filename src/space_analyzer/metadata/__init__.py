"""Dostęp do metadanych plików i katalogów."""

from .local import LocalMetadataProvider
from .provider import (
    DirectoryEntry,
    EntryAccessError,
    EntryKind,
    EntryNotFoundError,
    MetadataError,
    MetadataProvider,
)

__all__ = [
	"DirectoryEntry",
	"EntryAccessError",
	"EntryKind",
	"EntryNotFoundError",
	"LocalMetadataProvider",
	"MetadataError",
	"MetadataProvider",
]
