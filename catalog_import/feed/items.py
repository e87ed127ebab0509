# Records extracted from a YML catalog feed, before any store lookups.

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

# A param collection as found in feeds: list of {name, value} shaped dicts,
# or a mapping of name -> value (value may itself be {"#text": ...}).
RawParams = Union[List[Dict[str, Any]], Dict[str, Any], None]


@dataclass(kw_only=True)
class RawCategory:
    """A <category> element"""
    external_id: str
    name: str
    parent_external_id: Optional[str] = None

    def is_root(self) -> bool:
        """Check if category declares no parent"""
        return not self.parent_external_id


@dataclass(kw_only=True)
class RawOffer:
    """An <offer> element with its fields still in feed form (strings)."""
    external_id: str
    name: Optional[str] = None
    model: Optional[str] = None
    vendor: Optional[str] = None
    vendor_code: Optional[str] = None
    description: Optional[str] = None
    price: Any = None
    old_price: Any = None
    currency_id: Optional[str] = None
    available: Any = None
    category_external_id: Optional[str] = None
    country_of_origin: Optional[str] = None
    pictures: List[str] = field(default_factory=list)
    params: RawParams = None

    @property
    def display_name(self) -> Optional[str]:
        """Offer name, falling back to the model field"""
        return self.name or self.model


@dataclass
class ParsedFeed:
    """Result of parsing a feed document"""
    categories: List[RawCategory] = field(default_factory=list)
    offers: List[RawOffer] = field(default_factory=list)
    shop_name: Optional[str] = None
