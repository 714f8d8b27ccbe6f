"""The list of recently played ROMs, kept as a small JSON file."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_FILE = "recent_roms.json"
MAX_RECENT = 5


@dataclass
class RecentRoms:
    """Most recently used ROM paths, newest first, stored at ``path``."""

    path: Path = field(default_factory=lambda: Path(DEFAULT_FILE))
    roms: list[str] = field(default_factory=list)

    @classmethod
    def load(cls, path: str | Path = DEFAULT_FILE) -> "RecentRoms":
        """Read the list from ``path``; a missing or unreadable file gives an empty list."""
        path = Path(path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            return cls(path)
        roms = data.get("roms") if isinstance(data, dict) else None
        if not isinstance(roms, list) or not all(isinstance(rom, str) for rom in roms):
            return cls(path)
        return cls(path, list(roms))

    def save(self) -> None:
        """Write the list to its file."""
        self.path.write_text(
            json.dumps({"roms": self.roms}, separators=(",", ":")), encoding="utf-8"
        )

    def add(self, rom: str) -> None:
        """Put ``rom`` first, drop any older entry for it, keep at most five, and save."""
        self.roms = [rom] + [entry for entry in self.roms if entry != rom]
        del self.roms[MAX_RECENT:]
        self.save()

    def clear(self) -> None:
        """Forget every entry and save the empty list."""
        self.roms = []
        self.save()