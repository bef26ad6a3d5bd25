"""Durable key-value slots for persisting signatures between sessions.

The signature cache mirrors its most recent entries to a *durable store*: a
small string-valued key-value slot that survives process restarts. The store
is best-effort. Any method may raise (read-only disk, permissions, full
volume) and the cache treats every exception as "durable storage
unavailable".

Two implementations are provided:

- :class:`JsonFileStore` keeps one ``<name>.json`` file per slot in a
  directory, created lazily on first write.
- :class:`InMemoryStore` keeps slots in a dictionary. Useful for tests and
  for sharing a warm cache between clients in the same process.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable


@runtime_checkable
class KeyValueStore(Protocol):
    """Minimal string key-value interface used by the signature cache."""

    def get_item(self, name: str) -> str | None: ...

    def set_item(self, name: str, value: str) -> None: ...

    def remove_item(self, name: str) -> None: ...


class JsonFileStore:
    """File-backed store with one file per slot name.

    Args:
        directory: Directory holding the slot files. Created on first write.
    """

    def __init__(self, directory: Path | str):
        self.directory = Path(directory).expanduser()

    def _path_for(self, name: str) -> Path:
        # Slot names are plain identifiers; strip separators to stay in directory
        safe_name = name.replace("/", "_").replace("\\", "_")
        return self.directory / f"{safe_name}.json"

    def get_item(self, name: str) -> str | None:
        path = self._path_for(name)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set_item(self, name: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path_for(name)

        # Write to a sibling file first so readers never see a partial slot
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_text(value, encoding="utf-8")
        tmp_path.replace(path)

    def remove_item(self, name: str) -> None:
        self._path_for(name).unlink(missing_ok=True)

    def __repr__(self) -> str:
        return f"JsonFileStore({str(self.directory)!r})"


class InMemoryStore:
    """Dictionary-backed store. Contents live as long as the instance."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, name: str) -> str | None:
        return self._items.get(name)

    def set_item(self, name: str, value: str) -> None:
        self._items[name] = value

    def remove_item(self, name: str) -> None:
        self._items.pop(name, None)

    def __contains__(self, name: str) -> bool:
        return name in self._items

    def __len__(self) -> int:
        return len(self._items)
