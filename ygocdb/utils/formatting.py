from typing import Dict, List, Optional, Sequence

from ..core.models import Card

MISSING = "-"


def _name(value: Optional[str]) -> str:
    return value or MISSING


def format_card(card: Card) -> str:
    """Full text block for a single card."""
    lines = [
        f"卡片ID: {card.id}",
        f"中文卡名: {card.cn_name}  MD卡名: {_name(card.md_name)}",
        f"日文名: {_name(card.jp_name)}  英文名: {_name(card.en_name)}",
        f"类型: {card.types}",
    ]
    if card.pendulum_effect:
        lines.append(f"灵摆效果: {card.pendulum_effect}")
    lines.append(f"描述: {card.description}")
    lines.append(card.url)
    return "\n".join(lines)


def format_card_list(cards: Sequence[Card], *, total: Optional[int] = None) -> str:
    """Numbered one-line-per-card listing."""
    lines = []
    for index, card in enumerate(cards, start=1):
        summary = card.types.splitlines()[0] if card.types else ""
        lines.append(f"{index}. [{card.id}] {card.cn_name} {summary}".rstrip())
    if total is not None and total > len(cards):
        lines.append(f"……共 {total} 张，仅显示前 {len(cards)} 张")
    return "\n".join(lines)


def format_alias_table(table: Dict[str, List[str]]) -> str:
    if not table:
        return "别名表为空。"
    return "\n".join(f"{canonical}: {', '.join(aliases)}" for canonical, aliases in sorted(table.items()))
