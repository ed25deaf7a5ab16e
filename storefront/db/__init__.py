"""
Database access layer for the Storefront backend.

All database operations MUST:
- Respect Row Level Security (RLS): user_id = auth.uid()
- Never bypass RLS
- Never create tables, migrations, or policies (the schema is owned by Supabase)

Tables consumed: products, cart_items, purchases, browsing_history, profiles.
"""

from .client import get_anon_supabase_client, get_supabase_client

__all__ = ["get_supabase_client", "get_anon_supabase_client"]
