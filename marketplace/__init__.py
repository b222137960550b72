"""Marketplace front-end service backed by a hosted Supabase project."""

__version__ = "0.1"
