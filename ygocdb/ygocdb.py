import logging
from pathlib import Path
from typing import Optional

from redbot.core import Config, checks, commands
from redbot.core.bot import Red
from redbot.core.data_manager import cog_data_path
from redbot.core.utils.chat_formatting import box, pagify

from .commands.aliases import AliasCommands
from .commands.cards import CardCommands
from .core.aliases import AliasStore
from .core.api import DEFAULT_API_URL, YGOCDBApi
from .core.exceptions import YGOCDBError
from .core.resolver import QueryResolver
from .utils.parser import QueryParser

log = logging.getLogger("red.ygocdb")


class YGOCardSearch(commands.Cog):
    """查询游戏王卡片信息 (ygocdb.com)."""

    def __init__(self, bot: Red):
        self.bot = bot
        self.config = Config.get_conf(self, identifier=2371567590, force_registration=True)
        default_global = {
            "alias_enabled": True,
            "alias_file": None,
            "max_results": 5,
            "results_cap": 20,
            "timeout": 10.0,
            "api_url": DEFAULT_API_URL,
        }
        self.config.register_global(**default_global)

        self.parser = QueryParser()
        self.api = YGOCDBApi()
        self.aliases = AliasStore(self._default_alias_path())
        self.resolver = QueryResolver(self.aliases, self.api.search_cards)
        self.card_commands = CardCommands(self.resolver, self.parser)
        self.alias_commands = AliasCommands(self.aliases, self.parser)
        log.info("YGOCardSearch cog initialized")

    def _default_alias_path(self) -> Path:
        return cog_data_path(self) / "aliases.json"

    async def _alias_path(self) -> Path:
        custom = await self.config.alias_file()
        return Path(custom) if custom else self._default_alias_path()

    async def _load_aliases(self) -> None:
        self.aliases.path = await self._alias_path()
        try:
            await self.aliases.load()
        except YGOCDBError as e:
            log.error(f"Could not load alias table from {self.aliases.path}: {e}")

    async def cog_load(self) -> None:
        self.api.set_base_url(await self.config.api_url())
        self.api.set_timeout(await self.config.timeout())
        await self.api.initialize()
        await self._load_aliases()

    async def cog_unload(self):
        try:
            await self.api.close()
        except Exception as e:
            log.error(f"Error closing API: {e}")

    async def red_delete_data_for_user(self, **kwargs):
        """This cog does not store end user data."""
        return

    async def _send_pages(self, ctx: commands.Context, text: str) -> None:
        for page in pagify(text):
            await ctx.send(page)

    @commands.command(name="ck", aliases=["查卡"])
    async def ck(self, ctx: commands.Context, *, query: Optional[str] = None):
        """查询游戏王卡片信息

        用法：`ck <卡名> [过滤条件]`，例如 `ck 青眼 atk:3000 龙`。
        过滤条件：`atk:<数值>`、`def:<数值>`、`p:<刻度>` 或类型关键字。
        """
        log.info(f"Card search requested by {ctx.author}: {query}")
        async with ctx.typing():
            reply = await self.card_commands.query_one(
                query or "", use_aliases=await self.config.alias_enabled()
            )
        await self._send_pages(ctx, reply)

    @commands.command(name="cks", aliases=["查多卡"])
    async def cks(self, ctx: commands.Context, *, query: Optional[str] = None):
        """查询多张游戏王卡片

        用法：`cks <卡名> [过滤条件] [limit:<数量>]`。
        """
        log.info(f"Multi card search requested by {ctx.author}: {query}")
        async with ctx.typing():
            reply = await self.card_commands.query_many(
                query or "",
                default_limit=await self.config.max_results(),
                max_limit=await self.config.results_cap(),
                use_aliases=await self.config.alias_enabled(),
            )
        await self._send_pages(ctx, reply)

    @commands.command(name="ckalias", aliases=["卡名别名"])
    @commands.admin_or_permissions(manage_guild=True)
    async def ckalias(self, ctx: commands.Context, *, args: str = ""):
        """管理卡名别名

        `ckalias add <卡名> <别名>`
        `ckalias delete <卡名> <别名>`
        `ckalias reload`
        `ckalias list [卡名]`
        """
        enabled = await self.config.alias_enabled()
        reply = await self.alias_commands.handle(args, enabled=enabled)
        await self._send_pages(ctx, reply)

    @commands.group(name="ckset")
    @checks.is_owner()
    async def ckset(self, ctx: commands.Context):
        """卡片查询设置"""

    @ckset.command(name="show")
    async def ckset_show(self, ctx: commands.Context):
        """Show current settings."""
        settings = await self.config.all()
        lines = [f"{key}: {value}" for key, value in settings.items()]
        lines.append(f"aliases loaded: {len(self.aliases)}")
        await ctx.send(box("\n".join(lines), lang="yaml"))

    @ckset.command(name="toggle_alias")
    async def ckset_toggle_alias(self, ctx: commands.Context):
        """Enable or disable alias resolution and management."""
        enabled = not await self.config.alias_enabled()
        await self.config.alias_enabled.set(enabled)
        if enabled:
            await self._load_aliases()
        await ctx.send(f"Alias feature {'enabled' if enabled else 'disabled'}.")

    @ckset.command(name="aliasfile")
    async def ckset_aliasfile(self, ctx: commands.Context, *, path: Optional[str] = None):
        """Set the alias document path, or reset it to the cog data folder."""
        await self.config.alias_file.set(path)
        await self._load_aliases()
        await ctx.send(f"Alias file set. {len(self.aliases)} cards with aliases loaded.")

    @ckset.command(name="maxresults")
    async def ckset_maxresults(self, ctx: commands.Context, amount: int):
        """Default number of results shown by `cks`."""
        cap = await self.config.results_cap()
        if not 1 <= amount <= cap:
            return await ctx.send(f"Amount must be between 1 and {cap}.")
        await self.config.max_results.set(amount)
        await ctx.send(f"`cks` now shows up to {amount} results by default.")

    @ckset.command(name="timeout")
    async def ckset_timeout(self, ctx: commands.Context, seconds: float):
        """Request timeout for the card database, in seconds."""
        if not 1 <= seconds <= 60:
            return await ctx.send("Timeout must be between 1 and 60 seconds.")
        await self.config.timeout.set(seconds)
        self.api.set_timeout(seconds)
        await ctx.send(f"Request timeout set to {seconds:g}s.")
