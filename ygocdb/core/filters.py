import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from .models import Card

log = logging.getLogger("red.ygocdb.core.filters")

KEYED_CLAUSE = re.compile(r"^(atk|def|p):([0-9]+)$", re.ASCII)

# English keywords users type, mapped to the wording ygocdb uses in type strings.
KEYWORD_ALIASES = {
    "monster": "怪兽",
    "spell": "魔法",
    "trap": "陷阱",
    "normal": "通常",
    "effect": "效果",
    "fusion": "融合",
    "ritual": "仪式",
    "synchro": "同调",
    "xyz": "超量",
    "link": "连接",
    "pendulum": "灵摆",
    "tuner": "调整",
    "flip": "反转",
    "toon": "卡通",
    "spirit": "灵魂",
    "union": "同盟",
    "gemini": "二重",
    "quickplay": "速攻",
    "continuous": "永续",
    "equip": "装备",
    "field": "场地",
    "counter": "反击",
    "light": "光",
    "dark": "暗",
    "fire": "炎",
    "water": "水",
    "earth": "地",
    "wind": "风",
    "divine": "神",
    "machine": "机械",
    "dragon": "龙",
    "spellcaster": "魔法师",
    "warrior": "战士",
    "fiend": "恶魔",
    "fairy": "天使",
    "zombie": "不死",
    "beast": "兽",
    "beast-warrior": "兽战士",
    "winged-beast": "鸟兽",
    "insect": "昆虫",
    "dinosaur": "恐龙",
    "reptile": "爬虫类",
    "fish": "鱼",
    "sea-serpent": "海龙",
    "aqua": "水",
    "pyro": "炎",
    "thunder": "雷",
    "rock": "岩石",
    "plant": "植物",
    "psychic": "念动力",
    "wyrm": "幻龙",
    "cyberse": "电子界",
    "illusion": "幻想魔",
}


@dataclass(frozen=True)
class Clause:
    """One space-delimited unit of a filter expression.

    ``needle`` is the substring searched for in the lower-cased type string;
    ``alternate`` is an optional second spelling that also counts as a match.
    """

    token: str
    needle: str
    alternate: Optional[str] = None

    def matches(self, text: str) -> bool:
        if self.needle in text:
            return True
        return self.alternate is not None and self.alternate in text


FilterExpression = Tuple[Clause, ...]


def parse_clause(token: str) -> Clause:
    match = KEYED_CLAUSE.match(token)
    if match:
        key, value = match.group(1), int(match.group(2))
        if key == "p":
            return Clause(token=token, needle=f"/{value}/")
        return Clause(token=token, needle=f"{key}{value}")
    return Clause(token=token, needle=token, alternate=KEYWORD_ALIASES.get(token))


def parse(expression: Optional[str]) -> FilterExpression:
    """Split a filter expression into clauses. Never fails.

    ``atk:<N>``, ``def:<N>`` and ``p:<N>`` become stat comparisons; anything
    else, including keyed tokens with a malformed number, is a plain
    substring clause.
    """
    if not expression:
        return ()
    return tuple(parse_clause(token) for token in expression.lower().split())


def matches(card: Card, expr: FilterExpression) -> bool:
    text = card.search_text
    return all(clause.matches(text) for clause in expr)


def apply(cards: Iterable[Card], expr: FilterExpression) -> List[Card]:
    """Keep the cards every clause matches, in their original order."""
    if not expr:
        return list(cards)
    results = [card for card in cards if matches(card, expr)]
    log.debug(f"Filter {[c.token for c in expr]} kept {len(results)} cards")
    return results
