from .aliases import AliasStore
from .api import YGOCDBApi
from .models import Card
from .resolver import QueryResolver

__all__ = [
    "AliasStore",
    "YGOCDBApi",
    "Card",
    "QueryResolver",
]
