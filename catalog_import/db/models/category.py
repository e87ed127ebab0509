from dataclasses import dataclass
from typing import Optional
from catalog_import.db.models.base import BaseModel

ROOT_LEVEL = 0
CHILD_LEVEL = 1

@dataclass(kw_only=True)
class CategoryData(BaseModel):
    """Data model for categories.

    Only two levels are modelled: roots (level 0) and their children (level 1).
    """
    external_id: str
    name: str
    slug: str
    parent_id: Optional[int] = None
    level: int = ROOT_LEVEL

    # Written as null so a category that became a root drops its old parent
    nullable_fields = ('parent_id',)

