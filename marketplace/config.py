"""
Marketplace configuration

Everything comes from the process environment:
- SUPABASE_URL / SUPABASE_KEY: project endpoint and API key (auth, tables, storage)
- SUPABASE_DB_URL: direct Postgres connection string, only needed by the
  schema inspection service (validated in marketplace.inspection.server)
- SUPABASE_STORAGE_BUCKET: bucket shared by listing photos and avatars
"""

import os

SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_KEY = os.getenv("SUPABASE_KEY")
SUPABASE_DB_URL = os.getenv("SUPABASE_DB_URL")

# Validate required env vars
if not all([SUPABASE_URL, SUPABASE_KEY]):
    raise ValueError("Missing required SUPABASE_URL / SUPABASE_KEY environment variables")

STORAGE_BUCKET = os.getenv("SUPABASE_STORAGE_BUCKET", "listings-images")

# Rate limit storage; falls back to in-process counters when no Redis is configured
RATE_LIMIT_STORAGE_URI = os.getenv("REDIS_URL", "memory://")

ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv("MARKETPLACE_ALLOWED_ORIGINS", "http://localhost:8080").split(",")
    if origin.strip()
]

SESSION_COOKIE_SECURE = os.getenv("SESSION_COOKIE_SECURE", "false").lower() in ("1", "true", "yes")
ACCESS_TOKEN_COOKIE = "sb-access-token"
REFRESH_TOKEN_COOKIE = "sb-refresh-token"
