import logging
from typing import Optional

from ..core.exceptions import YGOCDBError
from ..core.resolver import QueryResolver
from ..utils.formatting import format_card, format_card_list
from ..utils.parser import QueryParser

log = logging.getLogger("red.ygocdb.commands.cards")


class CardCommands:
    """Single and multi card queries; every method returns reply text."""

    def __init__(self, resolver: QueryResolver, parser: Optional[QueryParser] = None):
        self.resolver = resolver
        self.parser = parser or QueryParser()

    async def query_one(self, content: str, *, use_aliases: bool = True) -> str:
        query = self.parser.parse_card_query(content)
        if not query.name:
            return "请输入要查询的卡名！"
        try:
            cards = await self.resolver.query(query.name, query.filter_expr, use_aliases=use_aliases)
        except YGOCDBError as e:
            log.warning(f"Card query {content!r} failed: {e}")
            return e.user_message() if e.subject else f"{e.kind}：{query.name}"
        except Exception as e:
            log.error(f"Unexpected error querying {content!r}: {e}", exc_info=True)
            return "查询卡片信息时发生错误，请稍后再试。"
        if not cards:
            return f"未找到卡片：{query.name}"
        return format_card(cards[0])

    async def query_many(
        self,
        content: str,
        *,
        default_limit: int = 5,
        max_limit: int = 20,
        use_aliases: bool = True,
    ) -> str:
        query = self.parser.parse_card_query(content)
        if not query.name:
            return "请输入要查询的卡名！"
        limit = query.limit if query.limit is not None else default_limit
        limit = max(1, min(limit, max_limit))
        try:
            cards = await self.resolver.query(query.name, query.filter_expr, use_aliases=use_aliases)
        except YGOCDBError as e:
            log.warning(f"Card query {content!r} failed: {e}")
            return e.user_message() if e.subject else f"{e.kind}：{query.name}"
        except Exception as e:
            log.error(f"Unexpected error querying {content!r}: {e}", exc_info=True)
            return "查询卡片信息时发生错误，请稍后再试。"
        if not cards:
            return f"未找到卡片：{query.name}"
        return format_card_list(cards[:limit], total=len(cards))
