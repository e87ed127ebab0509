from catalog_import.db.repositories.base import BaseRepository
from catalog_import.db.repositories.brand import BrandRepository
from catalog_import.db.repositories.category import CategoryRepository
from catalog_import.db.repositories.product import ProductRepository

__all__ = [
    'BaseRepository',
    'BrandRepository',
    'CategoryRepository',
    'ProductRepository',
]
