from .formatting import format_alias_table, format_card, format_card_list
from .parser import CardQuery, QueryParser, split_arguments

__all__ = [
    "format_alias_table",
    "format_card",
    "format_card_list",
    "CardQuery",
    "QueryParser",
    "split_arguments",
]
