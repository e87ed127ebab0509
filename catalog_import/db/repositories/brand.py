from typing import Optional
from supabase import AsyncClient
from catalog_import.db.repositories.base import BaseRepository
from catalog_import.db.models import BrandData

class BrandRepository(BaseRepository[BrandData]):
    """Repository for brand operations"""

    def __init__(self, supabase: AsyncClient):
        super().__init__(supabase, "brands", BrandData)

    async def get_by_name(self, name: str) -> Optional[BrandData]:
        """Get brand by exact name (case-sensitive)"""
        result = await self.supabase.table(self.table_name)\
            .select("*")\
            .eq("name", name)\
            .limit(1)\
            .execute()
        return BrandData.from_dict(result.data[0]) if result.data else None
