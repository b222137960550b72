from contextlib import asynccontextmanager

import asyncpg
import pytest
from mcp.server.fastmcp.exceptions import ToolError

from marketplace.inspection import server
from test.fakes import api_error

CATALOG_ROWS = [
    {"table_name": "listing_images", "column_name": "id", "data_type": "bigint"},
    {"table_name": "listing_images", "column_name": "listing_id", "data_type": "bigint"},
    {"table_name": "listing_images", "column_name": "url", "data_type": "text"},
    {"table_name": "listings", "column_name": "id", "data_type": "bigint"},
    {"table_name": "listings", "column_name": "user_id", "data_type": "uuid"},
    {"table_name": "listings", "column_name": "title", "data_type": "text"},
    {"table_name": "listings", "column_name": "price", "data_type": "numeric"},
]


class FakeConnection:
    def __init__(self, rows=None, error=None):
        self.rows = rows or []
        self.error = error
        self.queries = []

    async def fetch(self, query):
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        return self.rows


class FakePool:
    def __init__(self, conn):
        self.conn = conn

    @asynccontextmanager
    async def acquire(self):
        yield self.conn


async def test_fetch_schema_groups_columns_by_table():
    conn = FakeConnection(CATALOG_ROWS)

    schema = await server.fetch_schema(FakePool(conn))

    assert list(schema) == ["listing_images", "listings"]
    assert schema["listings"] == [
        {"column": "id", "type": "bigint"},
        {"column": "user_id", "type": "uuid"},
        {"column": "title", "type": "text"},
        {"column": "price", "type": "numeric"},
    ]
    assert "information_schema.columns" in conn.queries[0]


async def test_query_table_returns_at_most_ten_rows(monkeypatch, fake_client):
    fake_client.db.rows("listings").extend(
        {"id": i, "user_id": "u1", "title": f"Item {i}", "price": i} for i in range(1, 15)
    )
    monkeypatch.setattr(server, "_supabase", fake_client)
    schema = await server.fetch_schema(FakePool(FakeConnection(CATALOG_ROWS)))
    known_columns = {column["column"] for column in schema["listings"]} | {"created_at"}

    rows = await server.query_table("listings")

    assert len(rows) == server.SAMPLE_ROW_LIMIT
    assert all(set(row) <= known_columns for row in rows)


async def test_query_table_reports_backend_errors(monkeypatch, fake_client):
    fake_client.db.fail("secrets", "select", api_error('relation "public.secrets" does not exist'))
    monkeypatch.setattr(server, "_supabase", fake_client)

    with pytest.raises(ToolError, match="does not exist"):
        await server.query_table("secrets")


async def test_get_schema_reports_database_errors(monkeypatch):
    conn = FakeConnection(error=asyncpg.exceptions.InsufficientPrivilegeError("permission denied"))
    monkeypatch.setattr(server, "_db_pool", FakePool(conn))

    with pytest.raises(ToolError, match="Failed to read schema"):
        await server.get_schema()


def test_tools_need_initialized_resources(monkeypatch):
    monkeypatch.setattr(server, "_db_pool", None)
    monkeypatch.setattr(server, "_supabase", None)

    with pytest.raises(RuntimeError):
        server.get_pool()
    with pytest.raises(RuntimeError):
        server.get_supabase()


async def test_registered_tools():
    tools = await server.mcp.list_tools()

    assert sorted(tool.name for tool in tools) == ["get_schema", "query_table"]
