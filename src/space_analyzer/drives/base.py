"""Interfejs bazowy dla enumeratorów dysków."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Dict, List, Protocol


class DriveError(RuntimeError):
    """Błąd wykrywania dysków lub punktów montowania."""


@dataclass(frozen=True, slots=True)
class Drive:
    """Kandydat na katalog startowy skanowania."""

    name: str
    path: str
    kind: str = "local"

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "path": self.path, "type": self.kind}


class DriveEnumerator(Protocol):
    """Minimalny interfejs dla implementacji wykrywania dysków."""

    def list_drives(self) -> List[Drive]:
        """Zwraca niepustą listę dysków; zgłasza `DriveError`, gdy wykrywanie zawiedzie."""


def fallback_drives(os_name: str | None = None) -> List[Drive]:
    """Domyślna lista dla platformy, gdy wykrywanie zawiedzie."""

    if (os_name or os.name) == "nt":
        return [Drive(name="C:", path="C:\\")]
    return [Drive(name="/", path="/")]
