"""
Supabase client configuration for the database and storage services.
Handles async client initialization with proper error handling and connection management.
"""

import logging
from typing import Optional

from supabase import AsyncClient, acreate_client

from .settings import Settings, get_settings

logger = logging.getLogger(__name__)


class SupabaseManager:
    """
    Supabase client manager with connection handling.
    Owns the single async client shared by the data-access client and the media store.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self._client: Optional[AsyncClient] = None
        self.settings = settings or get_settings()

    async def connect(self) -> AsyncClient:
        """Create the async Supabase client using the service role key."""
        if self._client is not None:
            return self._client

        try:
            self._client = await acreate_client(
                self.settings.SUPABASE_URL,
                self.settings.SUPABASE_SERVICE_ROLE_KEY,
            )
            logger.info(f"✅ Supabase configured with URL: {self.settings.SUPABASE_URL}")
            return self._client

        except Exception as e:
            logger.error(f"Failed to initialize Supabase client: {e}")
            raise ConnectionError(f"Supabase initialization failed: {e}") from e

    def close(self) -> None:
        """Drop the cached client."""
        if self._client:
            # Supabase client doesn't require explicit closing
            self._client = None
            logger.info("Supabase client connections closed")
