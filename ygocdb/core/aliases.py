import asyncio
import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Union

from .exceptions import (
    AliasConflict,
    AliasExists,
    AliasFileError,
    AliasNotFound,
    StorageError,
)

log = logging.getLogger("red.ygocdb.core.aliases")

AliasTable = Dict[str, List[str]]


def _validate_table(data) -> AliasTable:
    """Check a decoded alias document and return it as a fresh table.

    Entries with an empty alias list are dropped. Any other structural
    problem, including an alias owned by two canonical names, is an error.
    """
    if not isinstance(data, dict):
        raise AliasFileError(f"Top level must be an object, got {type(data).__name__}")

    table: AliasTable = {}
    owners: Dict[str, str] = {}
    for canonical, aliases in data.items():
        if not isinstance(aliases, list):
            raise AliasFileError(f"Aliases of {canonical!r} must be a list", subject=canonical)
        if not aliases:
            log.debug(f"Dropping empty alias entry {canonical!r}")
            continue
        for alias in aliases:
            if not isinstance(alias, str):
                raise AliasFileError(f"Alias {alias!r} of {canonical!r} is not a string", subject=canonical)
            if alias in owners:
                raise AliasFileError(
                    f"Alias {alias!r} listed under both {owners[alias]!r} and {canonical!r}",
                    subject=alias,
                )
            owners[alias] = canonical
        table[canonical] = list(aliases)
    return table


class AliasStore:
    """
    Canonical card name -> alias list mapping, backed by a JSON document.

    Every alias belongs to at most one canonical name. Mutations are
    serialized through a lock and written to disk before the in-memory
    table is swapped, so a returned call always leaves memory and disk
    in agreement.
    """

    def __init__(self, path: Union[str, Path], *, log=None):
        self.path = Path(path)
        self.logger = log or logging.getLogger("red.ygocdb.core.aliases")
        self._table: AliasTable = {}
        self._owners: Dict[str, str] = {}
        self._lock = asyncio.Lock()

    def _swap(self, table: AliasTable) -> None:
        owners = {alias: canonical for canonical, aliases in table.items() for alias in aliases}
        self._table, self._owners = table, owners

    def _read(self) -> Optional[str]:
        if not self.path.exists():
            return None
        return self.path.read_text(encoding="utf-8")

    def _write(self, table: AliasTable) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        temp_file = self.path.with_name(self.path.name + ".tmp")
        with temp_file.open("w", encoding="utf-8") as f:
            json.dump(table, f, ensure_ascii=False, indent=2)
        temp_file.replace(self.path)

    async def _persist(self, table: AliasTable) -> None:
        try:
            await asyncio.to_thread(self._write, table)
        except OSError as e:
            self.logger.error(f"Failed to write alias file {self.path}: {e}", exc_info=True)
            raise StorageError(str(e)) from e

    async def _write_and_swap(self, table: AliasTable) -> None:
        await self._persist(table)
        self._swap(table)

    async def _commit(self, table: AliasTable) -> None:
        """Persist ``table`` and swap it in, even if the caller is cancelled.

        A cancelled caller still holds the lock until the write has finished
        and memory matches disk again.
        """
        task = asyncio.ensure_future(self._write_and_swap(table))
        try:
            await asyncio.shield(task)
        except asyncio.CancelledError:
            await asyncio.wait({task})
            if not task.cancelled() and task.exception() is not None:
                self.logger.warning(f"Alias write failed after cancellation: {task.exception()}")
            raise

    async def load(self) -> None:
        """(Re)load the table from disk, creating an empty document if absent.

        A malformed document raises AliasFileError and keeps the current table.
        """
        async with self._lock:
            try:
                raw = await asyncio.to_thread(self._read)
            except UnicodeDecodeError as e:
                self.logger.error(f"Alias file {self.path} is not valid UTF-8: {e}")
                raise AliasFileError(str(e)) from e
            except OSError as e:
                self.logger.error(f"Failed to read alias file {self.path}: {e}", exc_info=True)
                raise StorageError(str(e)) from e

            if raw is None:
                self.logger.info(f"Alias file {self.path} not found, creating an empty one")
                await self._persist({})
                self._swap({})
                return

            try:
                data = json.loads(raw)
            except json.JSONDecodeError as e:
                self.logger.error(f"Alias file {self.path} is not valid JSON: {e}")
                raise AliasFileError(str(e)) from e

            table = _validate_table(data)
            self._swap(table)
            self.logger.info(f"Loaded {len(self._owners)} aliases for {len(table)} cards")

    async def save(self) -> None:
        """Write the whole table to disk."""
        async with self._lock:
            await self._persist(self.snapshot())

    def resolve(self, name: str) -> str:
        """Return the canonical name owning ``name``, or ``name`` itself."""
        return self._owners.get(name, name)

    def owner_of(self, alias: str) -> Optional[str]:
        return self._owners.get(alias)

    def aliases_for(self, canonical: str) -> List[str]:
        return list(self._table.get(canonical, []))

    def snapshot(self) -> AliasTable:
        return {canonical: list(aliases) for canonical, aliases in self._table.items()}

    def __len__(self) -> int:
        return len(self._table)

    def __contains__(self, canonical: str) -> bool:
        return canonical in self._table

    async def add_alias(self, canonical: str, alias: str) -> None:
        async with self._lock:
            owner = self._owners.get(alias)
            if owner == canonical:
                raise AliasExists(subject=f"{canonical} -> {alias}")
            if owner is not None:
                raise AliasConflict(subject=f"{alias} ({owner})")

            table = self.snapshot()
            table.setdefault(canonical, []).append(alias)
            await self._commit(table)
            self.logger.info(f"Added alias {alias!r} -> {canonical!r}")

    async def remove_alias(self, canonical: str, alias: str) -> None:
        async with self._lock:
            if self._owners.get(alias) != canonical:
                raise AliasNotFound(subject=f"{canonical} -> {alias}")

            table = self.snapshot()
            table[canonical].remove(alias)
            if not table[canonical]:
                del table[canonical]
            await self._commit(table)
            self.logger.info(f"Removed alias {alias!r} from {canonical!r}")
