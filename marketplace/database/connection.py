"""
Marketplace Supabase Connection

One async Supabase client per browser session:
- the client owns the user's session, like the supabase-js singleton in a browser tab
- tokens live in cookies between requests and are re-attached on each request
- token refresh is driven by the request, not by a background timer

All per-request clients share one connection pool (an httpx.AsyncClient) that
lives as long as the application: created in the app lifespan, closed on shutdown.
"""

import logging

import httpx
from supabase import AsyncClient, AsyncClientOptions, acreate_client

from marketplace.config import SUPABASE_KEY, SUPABASE_URL

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

HTTP_TIMEOUT_SECONDS = 30

# Global instance, set up by the app lifespan
_http_client: httpx.AsyncClient | None = None


def create_http_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=HTTP_TIMEOUT_SECONDS)


def get_http_client() -> httpx.AsyncClient:
    """Get the shared HTTP client with runtime check"""
    if _http_client is None:
        raise RuntimeError("HTTP client not initialized")
    return _http_client


async def create_supabase_client(http_client: httpx.AsyncClient) -> AsyncClient:
    """Create a fresh async client with an in-memory, non-refreshing session"""
    return await acreate_client(
        SUPABASE_URL,
        SUPABASE_KEY,
        options=AsyncClientOptions(
            auto_refresh_token=False,
            persist_session=False,
            httpx_client=http_client,
        ),
    )
