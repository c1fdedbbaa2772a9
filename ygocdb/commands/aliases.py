import logging
from enum import Enum
from typing import List, Tuple

from ..core.aliases import AliasStore
from ..core.exceptions import ArgumentError, ConfigError, YGOCDBError
from ..utils.formatting import format_alias_table
from ..utils.parser import QueryParser, split_arguments

log = logging.getLogger("red.ygocdb.commands.aliases")


class AliasAction(Enum):
    ADD = "add"
    DELETE = "delete"
    RELOAD = "reload"
    LIST = "list"

    @classmethod
    def from_token(cls, token: str) -> "AliasAction":
        token = token.lower()
        for action in cls:
            if token == action.value or token in ACTION_SYNONYMS.get(action, ()):
                return action
        raise ArgumentError(f"Unknown alias action {token!r}", subject=token)


ACTION_SYNONYMS = {
    AliasAction.ADD: ("添加",),
    AliasAction.DELETE: ("del", "remove", "删除"),
    AliasAction.RELOAD: ("重载",),
    AliasAction.LIST: ("show", "列表"),
}


def parse_alias_command(content: str) -> Tuple[AliasAction, List[str]]:
    args = split_arguments(content)
    if not args:
        raise ArgumentError("Missing alias action", subject="<空>")
    return AliasAction.from_token(args[0]), args[1:]


class AliasCommands:
    """Handles the alias management command; every method returns reply text."""

    def __init__(self, store: AliasStore, parser: QueryParser = None):
        self.store = store
        self.parser = parser or QueryParser()

    async def dispatch(self, action: AliasAction, args: List[str]) -> str:
        if action is AliasAction.ADD:
            canonical, alias = self.parser.parse_alias_pair(args)
            await self.store.add_alias(canonical, alias)
            return f"已添加别名：{alias} -> {canonical}"
        if action is AliasAction.DELETE:
            canonical, alias = self.parser.parse_alias_pair(args)
            await self.store.remove_alias(canonical, alias)
            return f"已删除别名：{alias} -> {canonical}"
        if action is AliasAction.RELOAD:
            await self.store.load()
            return f"别名表已重新加载，共 {len(self.store)} 个卡名。"
        if action is AliasAction.LIST:
            if args:
                canonical = " ".join(args)
                aliases = self.store.aliases_for(canonical)
                if not aliases:
                    return f"{canonical} 没有别名。"
                return f"{canonical}: {', '.join(aliases)}"
            return format_alias_table(self.store.snapshot())
        raise ArgumentError(f"Unhandled alias action: {action}", subject=action.value)

    async def handle(self, content: str, *, enabled: bool = True) -> str:
        try:
            if not enabled:
                raise ConfigError(subject="ckalias")
            action, args = parse_alias_command(content)
            return await self.dispatch(action, args)
        except YGOCDBError as e:
            log.info(f"Alias command {content!r} failed: {e}")
            return e.user_message()
        except Exception as e:
            log.error(f"Unexpected error in alias command {content!r}: {e}", exc_info=True)
            return "处理别名命令时发生错误，请稍后再试。"
