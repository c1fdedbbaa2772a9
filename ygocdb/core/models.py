from dataclasses import dataclass
from typing import Any, Dict, Optional

from .exceptions import CardParseError

IMAGE_URL = "https://cdn.233.momobako.com/ygopro/pics/{id}.jpg"
CARD_URL = "https://ygocdb.com/card/{id}"


def _optional_name(data: Dict[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    value = str(value).strip()
    return value or None


@dataclass(frozen=True)
class Card:
    id: int
    cn_name: str
    types: str
    description: str
    md_name: Optional[str] = None
    jp_name: Optional[str] = None
    en_name: Optional[str] = None
    pendulum_effect: Optional[str] = None

    @property
    def image_url(self) -> str:
        return IMAGE_URL.format(id=self.id)

    @property
    def url(self) -> str:
        return CARD_URL.format(id=self.id)

    @property
    def search_text(self) -> str:
        """Lower-cased type string used by the type filter."""
        return self.types.lower()

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Card":
        """Build a card from one entry of the ygocdb ``result`` array.

        ``id``, ``cn_name``, ``text.types`` and ``text.desc`` are required;
        a record missing any of them raises CardParseError.
        """
        if not isinstance(data, dict):
            raise CardParseError(f"Card record is not an object: {type(data).__name__}")

        raw_id = data.get("id")
        try:
            card_id = int(raw_id)
        except (TypeError, ValueError):
            raise CardParseError(f"Invalid card id: {raw_id!r}", subject=str(raw_id))

        cn_name = _optional_name(data, "cn_name")
        if cn_name is None:
            raise CardParseError(f"Card {card_id} has no cn_name", subject=str(card_id))

        text = data.get("text")
        if not isinstance(text, dict):
            raise CardParseError(f"Card {card_id} has no text block", subject=cn_name)
        types = text.get("types")
        desc = text.get("desc")
        if not isinstance(types, str) or not isinstance(desc, str):
            raise CardParseError(f"Card {card_id} is missing types/desc", subject=cn_name)

        pdesc = text.get("pdesc")
        return cls(
            id=card_id,
            cn_name=cn_name,
            types=types,
            description=desc,
            md_name=_optional_name(data, "md_name"),
            jp_name=_optional_name(data, "jp_name"),
            en_name=_optional_name(data, "en_name"),
            pendulum_effect=pdesc.strip() if isinstance(pdesc, str) and pdesc.strip() else None,
        )
