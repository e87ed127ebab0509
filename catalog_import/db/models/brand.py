from dataclasses import dataclass
from catalog_import.db.models.base import BaseModel

@dataclass(kw_only=True)
class BrandData(BaseModel):
    """Data model for brands"""
    name: str
    slug: str
