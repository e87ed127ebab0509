from dataclasses import dataclass, field
from typing import Dict, List, Optional

from catalog_import.db.models.base import BaseModel
from catalog_import.db.models.enums import Currency

@dataclass(kw_only=True)
class ProductData(BaseModel):
    """Data model for products, keyed by the feed's offer id"""
    external_id: str
    name: str
    slug: str
    price: float
    description: Optional[str] = None
    old_price: Optional[float] = None
    currency: str = Currency.UAH.value
    in_stock: bool = False
    brand_id: Optional[int] = None
    category_id: Optional[int] = None
    images: List[str] = field(default_factory=list)
    attributes: Dict = field(default_factory=dict)
    vendor_code: Optional[str] = None

    # A later feed may drop any of these; the row must not keep the old value
    nullable_fields = ('description', 'old_price', 'brand_id', 'category_id', 'vendor_code')
