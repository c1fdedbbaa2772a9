import asyncio
import json
import logging
from typing import Any, Dict, List, Optional

import aiohttp
from aiohttp import ContentTypeError

from .exceptions import CardParseError, LookupFailure
from .models import Card

log = logging.getLogger("red.ygocdb.core.api")

DEFAULT_API_URL = "https://ygocdb.com/api/v0/"


class YGOCDBApi:
    """Thin client for the ygocdb.com search endpoint."""

    def __init__(self, base_url: str = DEFAULT_API_URL, *, timeout: float = 10.0, log=None):
        self.base_url = base_url
        self.logger = log or logging.getLogger("red.ygocdb.core.api")
        self.session: Optional[aiohttp.ClientSession] = None
        self.headers = {
            "User-Agent": "ygo-card-search",
            "Accept": "application/json",
        }
        self.timeout = aiohttp.ClientTimeout(total=timeout, connect=3)
        self.rate_limit = asyncio.Semaphore(5)

    async def initialize(self):
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession(headers=self.headers, timeout=self.timeout)

    async def close(self):
        if self.session:
            await self.session.close()
            self.session = None

    def set_base_url(self, url: str) -> None:
        self.base_url = url

    def set_timeout(self, seconds: float) -> None:
        self.timeout = aiohttp.ClientTimeout(total=seconds, connect=min(3, seconds))

    async def _make_request(self, params: Dict[str, Any]) -> Any:
        if self.session is None:
            await self.initialize()
        async with self.rate_limit:
            try:
                async with self.session.get(self.base_url, params=params, timeout=self.timeout) as resp:
                    if resp.status != 200:
                        raise LookupFailure(
                            f"API request failed with status {resp.status}: {self.base_url}",
                            subject=params.get("search"),
                        )
                    try:
                        return await resp.json()
                    except ContentTypeError:
                        text = await resp.text()
                        try:
                            return json.loads(text)
                        except json.JSONDecodeError:
                            raise LookupFailure(
                                f"Invalid response format: {text[:100]}",
                                subject=params.get("search"),
                            )
                    except ValueError as e:
                        raise LookupFailure(
                            f"Invalid JSON from {self.base_url}: {e}",
                            subject=params.get("search"),
                        )
            except asyncio.TimeoutError:
                self.logger.warning(f"Request timed out: {self.base_url} {params}")
                raise LookupFailure(f"Request timed out: {self.base_url}", subject=params.get("search"))
            except aiohttp.ClientError as e:
                self.logger.error(f"Connection error: {str(e)}")
                raise LookupFailure(f"Connection error: {str(e)}", subject=params.get("search"))

    def _parse_results(self, term: str, payload: Any) -> List[Card]:
        if not isinstance(payload, dict) or not isinstance(payload.get("result"), list):
            raise LookupFailure(f"Unexpected payload for {term!r}: {str(payload)[:100]}", subject=term)
        cards = []
        for entry in payload["result"]:
            try:
                cards.append(Card.from_api(entry))
            except CardParseError as e:
                self.logger.warning(f"Skipping unparseable card in results for {term!r}: {e}")
        if payload["result"] and not cards:
            raise CardParseError(f"No parseable cards in results for {term!r}", subject=term)
        return cards

    async def search_cards(self, term: str) -> List[Card]:
        """Search ygocdb for ``term``; an empty list means nothing matched."""
        self.logger.debug(f"Searching ygocdb for {term!r}")
        payload = await self._make_request({"search": term})
        return self._parse_results(term, payload)
