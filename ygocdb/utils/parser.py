from dataclasses import dataclass
from typing import List, Optional, Tuple
import re
import logging

from ..core.exceptions import ArgumentError

TOKEN_PATTERN = re.compile(r'"([^"]*)"|(\S+)')
LIMIT_PATTERN = re.compile(r'(?<!\S)limit:(\d+)(?!\S)', re.IGNORECASE | re.ASCII)


@dataclass
class CardQuery:
    name: str
    filter_expr: str = ""
    limit: Optional[int] = None


def split_arguments(content: str) -> List[str]:
    """Split on whitespace, keeping double-quoted phrases together."""
    return [
        m.group(1) if m.group(1) is not None else m.group(2)
        for m in TOKEN_PATTERN.finditer(content or "")
    ]


class QueryParser:
    """Parses the plain-text arguments of the card commands."""

    def __init__(self, *, log=None):
        self.logger = log or logging.getLogger("red.ygocdb.parser")

    def parse_card_query(self, content: str) -> CardQuery:
        """Parse ``<name> [filter ...] [limit:N]``.

        The name is the first token, or a double-quoted phrase when it
        contains spaces. Everything after it is the filter expression.
        """
        content = (content or "").strip()
        limit = None
        limit_match = LIMIT_PATTERN.search(content)
        if limit_match:
            limit = int(limit_match.group(1))
            content = LIMIT_PATTERN.sub("", content).strip()

        match = TOKEN_PATTERN.match(content)
        if not match:
            return CardQuery(name="", limit=limit)
        quoted, bare = match.groups()
        name = (quoted if quoted is not None else bare).strip()
        rest = content[match.end():].strip()
        self.logger.debug(f"Parsed card query name={name!r} filter={rest!r} limit={limit}")
        return CardQuery(name=name, filter_expr=rest, limit=limit)

    def parse_alias_pair(self, args: List[str]) -> Tuple[str, str]:
        """Return ``(canonical, alias)`` from exactly two non-empty arguments."""
        if len(args) != 2:
            raise ArgumentError(
                f"Expected <canonical> <alias>, got {len(args)} arguments",
                subject=" ".join(args) or "<空>",
            )
        canonical, alias = (a.strip() for a in args)
        if not canonical or not alias:
            raise ArgumentError("Empty canonical name or alias", subject=" ".join(args))
        if canonical == alias:
            raise ArgumentError("Alias equals its canonical name", subject=alias)
        return canonical, alias
