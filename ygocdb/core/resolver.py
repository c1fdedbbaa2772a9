import logging
from typing import Awaitable, Callable, List, Optional, Sequence

from . import filters
from .aliases import AliasStore
from .models import Card

log = logging.getLogger("red.ygocdb.core.resolver")

Lookup = Callable[[str], Awaitable[Sequence[Card]]]


class QueryResolver:
    """Alias resolution, one lookup, then type filtering."""

    def __init__(self, aliases: AliasStore, lookup: Lookup):
        self.aliases = aliases
        self.lookup = lookup

    def resolve(self, raw_name: str, *, use_aliases: bool = True) -> str:
        name = raw_name.strip()
        return self.aliases.resolve(name) if use_aliases else name

    async def query(
        self,
        raw_name: str,
        filter_expr: Optional[str] = "",
        *,
        use_aliases: bool = True,
    ) -> List[Card]:
        """Return the lookup results for ``raw_name`` that pass ``filter_expr``.

        An empty list means nothing matched. Lookup failures propagate.
        """
        term = self.resolve(raw_name, use_aliases=use_aliases)
        if term != raw_name.strip():
            log.debug(f"Resolved {raw_name!r} to {term!r}")
        cards = await self.lookup(term)
        return filters.apply(cards, filters.parse(filter_expr))
