from catalog_import.db.models.base import BaseModel
from catalog_import.db.models.enums import Currency
from catalog_import.db.models.brand import BrandData
from catalog_import.db.models.category import CategoryData, ROOT_LEVEL, CHILD_LEVEL
from catalog_import.db.models.product import ProductData

__all__ = [
    'BaseModel',
    'Currency',
    'BrandData',
    'CategoryData',
    'ROOT_LEVEL',
    'CHILD_LEVEL',
    'ProductData',
]
