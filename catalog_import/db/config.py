"""
Database configuration and connection management.
"""
from typing import Optional

from supabase import AsyncClient, acreate_client

from catalog_import.exceptions import ConfigurationError


async def get_supabase_client(url: Optional[str], key: Optional[str]) -> AsyncClient:
    """
    Get a configured Supabase async client.

    The importer writes with the service role key so row level security
    does not hide existing rows from upserts.

    Returns:
        AsyncClient: A configured Supabase async client instance

    Raises:
        ConfigurationError: If the URL or key is not set
    """
    if not url or not key:
        raise ConfigurationError(
            "Missing required environment variables. "
            "Please ensure SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY are set in your .env file."
        )

    return await acreate_client(url, key)
