from typing import Optional
from supabase import AsyncClient
from catalog_import.db.repositories.base import BaseRepository
from catalog_import.db.models import CategoryData, CHILD_LEVEL

class CategoryRepository(BaseRepository[CategoryData]):
    """Repository for category operations, keyed by the feed's category id"""

    def __init__(self, supabase: AsyncClient):
        super().__init__(supabase, "categories", CategoryData)

    async def upsert_by_external_id(self, model: CategoryData) -> CategoryData:
        """Insert or update name/slug/level and reset the parent link"""
        return await self.upsert(model, on_conflict="external_id")

    async def set_parent(self, external_id: str, parent_id: int, level: int = CHILD_LEVEL) -> Optional[CategoryData]:
        """Link a category to its parent"""
        result = await self.supabase.table(self.table_name)\
            .update({"parent_id": parent_id, "level": level})\
            .eq("external_id", external_id)\
            .execute()
        return CategoryData.from_dict(result.data[0]) if result.data else None
