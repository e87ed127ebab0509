from typing import TypeVar, Generic, Type
from supabase import AsyncClient
from catalog_import.db.models import BaseModel

T = TypeVar('T', bound=BaseModel)

class BaseRepository(Generic[T]):
    """Base repository with CRUD operations"""

    def __init__(self, supabase: AsyncClient, table_name: str, model_class: Type[T]):
        self.supabase = supabase
        self.table_name = table_name
        self.model_class = model_class

    async def create(self, model: T) -> T:
        """Create a new record"""
        data = model.to_dict()
        result = await self.supabase.table(self.table_name).insert(data).execute()
        return self.model_class.from_dict(result.data[0])

    async def upsert(self, model: T, on_conflict: str) -> T:
        """Insert or update a record keyed by the given unique column(s)"""
        data = {k: v for k, v in model.to_dict().items() if k not in ('id', 'created_at')}
        result = await self.supabase.table(self.table_name)\
            .upsert(data, on_conflict=on_conflict)\
            .execute()
        return self.model_class.from_dict(result.data[0])
