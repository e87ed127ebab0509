from catalog_import.db.services.import_service import BrandCache, ImportService, ImportStats

__all__ = [
    'BrandCache',
    'ImportService',
    'ImportStats',
]
