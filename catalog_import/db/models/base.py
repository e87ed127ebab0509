from dataclasses import dataclass, fields
from datetime import datetime
from typing import ClassVar, Optional, Tuple

@dataclass(kw_only=True)
class BaseModel:
    """Base model with common fields for all models"""
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    # Written as null instead of being left out when unset
    nullable_fields: ClassVar[Tuple[str, ...]] = ()

    def to_dict(self) -> dict:
        """Convert model to a row dictionary, leaving out unset columns"""
        data = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None and f.name not in self.nullable_fields:
                continue
            data[f.name] = self._format_datetime(value) if isinstance(value, datetime) else value
        return data

    def _format_datetime(self, dt: datetime) -> str:
        """Format datetime to ISO format"""
        return dt.isoformat()

    @classmethod
    def from_dict(cls, data: dict) -> 'BaseModel':
        """Create model instance from a row, ignoring columns the model does not know"""
        known = {f.name for f in fields(cls)}
        data = {key: value for key, value in data.items() if key in known}
        for key in ('created_at', 'updated_at'):
            if isinstance(data.get(key), str):
                try:
                    data[key] = datetime.fromisoformat(data[key])
                except ValueError:
                    # Keep as string if parsing fails
                    pass
        return cls(**data)
