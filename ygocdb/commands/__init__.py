from .aliases import AliasAction, AliasCommands
from .cards import CardCommands

__all__ = [
    "AliasAction",
    "AliasCommands",
    "CardCommands",
]
