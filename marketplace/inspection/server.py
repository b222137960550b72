"""
Schema inspection service

Standalone MCP server exposing two read-only tools to a tool-calling client:
- get_schema: every public table with its columns, straight from the catalog
  (asyncpg, direct database connection)
- query_table: the first 10 rows of a named table (Supabase table API)

Usage: set SUPABASE_URL, SUPABASE_KEY and SUPABASE_DB_URL, then run
`marketplace-inspector` (stdio transport).
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, List

import asyncpg  # type: ignore
from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError
from supabase import AsyncClient, PostgrestAPIError, acreate_client

from marketplace.config import SUPABASE_DB_URL, SUPABASE_KEY, SUPABASE_URL
from marketplace.services.errors import upstream_message

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

SAMPLE_ROW_LIMIT = 10

SCHEMA_QUERY = """
    SELECT table_name, column_name, data_type
    FROM information_schema.columns
    WHERE table_schema = 'public'
    ORDER BY table_name, ordinal_position;
"""

if not SUPABASE_DB_URL:
    raise ValueError("Missing required SUPABASE_DB_URL environment variable")

# Global instances, set up by the server lifespan
_db_pool: asyncpg.Pool | None = None
_supabase: AsyncClient | None = None


async def create_asyncpg_pool() -> asyncpg.Pool:
    """Catalog reads only; the managed database's certificate is not verified"""
    return await asyncpg.create_pool(
        SUPABASE_DB_URL,
        ssl="require",
        min_size=0,
        max_size=5,
        command_timeout=60,
    )


def get_pool() -> asyncpg.Pool:
    """Get database pool with runtime check"""
    if _db_pool is None:
        raise RuntimeError("Database pool not initialized")
    return _db_pool


def get_supabase() -> AsyncClient:
    if _supabase is None:
        raise RuntimeError("Supabase client not initialized")
    return _supabase


async def fetch_schema(pool) -> Dict[str, List[Dict[str, str]]]:
    """
    Reshape catalog rows into {table: [{"column": ..., "type": ...}, ...]},
    columns in ordinal order.
    """
    async with pool.acquire() as conn:
        rows = await conn.fetch(SCHEMA_QUERY)

    schema: Dict[str, List[Dict[str, str]]] = {}
    for row in rows:
        schema.setdefault(row["table_name"], []).append(
            {"column": row["column_name"], "type": row["data_type"]}
        )
    logger.info(f"Schema fetched: {len(schema)} tables")
    return schema


async def sample_table(client: AsyncClient, table: str) -> List[Dict[str, Any]]:
    """First rows of a table, unfiltered. The table name is passed through as given."""
    response = await client.table(table).select("*").limit(SAMPLE_ROW_LIMIT).execute()
    logger.info(f"Sampled {len(response.data)} rows from {table}")
    return response.data


@asynccontextmanager
async def lifespan(server: FastMCP):
    global _db_pool, _supabase

    # Startup
    _db_pool = await create_asyncpg_pool()
    _supabase = await acreate_client(SUPABASE_URL, SUPABASE_KEY)
    logger.info("Database pool and Supabase client created at startup")

    try:
        yield {}
    finally:
        # Shutdown
        await _db_pool.close()
        _db_pool = None
        _supabase = None
        logger.info("Database pool closed")


mcp = FastMCP("supabase-inspector", lifespan=lifespan)


@mcp.tool()
async def get_schema() -> Dict[str, List[Dict[str, str]]]:
    """Return DB schema (tables + columns)"""
    try:
        return await fetch_schema(get_pool())
    except asyncpg.PostgresError as e:
        logger.error(f"get_schema failed: {e}", exc_info=True)
        raise ToolError(f"Failed to read schema: {e}")


@mcp.tool()
async def query_table(table: str) -> List[Dict[str, Any]]:
    """Returns first 10 rows from a table"""
    try:
        return await sample_table(get_supabase(), table)
    except PostgrestAPIError as e:
        logger.error(f"query_table({table}) failed: {upstream_message(e)}")
        raise ToolError(upstream_message(e))


def main():
    # stdout belongs to the stdio transport; logging goes to stderr
    logging.basicConfig(level=logging.INFO)
    mcp.run()


if __name__ == "__main__":
    main()
