from supabase import AsyncClient
from catalog_import.db.repositories.base import BaseRepository
from catalog_import.db.models import ProductData

class ProductRepository(BaseRepository[ProductData]):
    """Repository for product operations"""

    def __init__(self, supabase: AsyncClient):
        super().__init__(supabase, "products", ProductData)

    async def upsert_by_external_id(self, model: ProductData) -> ProductData:
        """Insert a product or overwrite the row with the same offer id"""
        return await self.upsert(model, on_conflict="external_id")
