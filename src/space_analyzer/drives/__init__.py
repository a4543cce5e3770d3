"""Wykrywanie dysków i punktów montowania do skanowania."""

from .base import Drive, DriveEnumerator, DriveError, fallback_drives
from .local import PsutilDriveEnumerator

__all__ = [
	"Drive",
	"DriveEnumerator",
	"DriveError",
	"PsutilDriveEnumerator",
	"fallback_drives",
]
