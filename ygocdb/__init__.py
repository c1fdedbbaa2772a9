"""Yu-Gi-Oh! card search cog for Red-DiscordBot, backed by ygocdb.com."""
import logging

log = logging.getLogger("red.ygocdb")

__red_end_user_data_statement__ = "This cog does not store end user data."

__all__ = ["setup"]


async def setup(bot):
    """Load YGOCardSearch cog."""
    from .ygocdb import YGOCardSearch

    log.info("Setting up YGOCardSearch cog")
    await bot.add_cog(YGOCardSearch(bot))
    log.info("YGOCardSearch cog has been loaded successfully")
