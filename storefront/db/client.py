"""
Supabase client factories.

Two kinds of client, both built on the publishable key:

- get_supabase_client(token): carries the caller's session, so RLS scopes
  cart_items, purchases, browsing_history and profiles to auth.uid()
- get_anon_supabase_client(): no session; only the public products table
  is readable

The service_role key is never used by this backend. Clients are created per
request and never shared between users.
"""

import logging

from storefront.config import settings
from supabase import Client, create_client

logger = logging.getLogger(__name__)


def _new_client() -> Client:
    return create_client(
        supabase_url=settings.SUPABASE_URL,
        supabase_key=settings.SUPABASE_PUBLISHABLE_KEY
    )


def get_supabase_client(access_token: str) -> Client:
    """
    Create a client acting as the signed-in user.

    Args:
        access_token: Bearer token already verified by
            storefront.auth.dependencies.get_authenticated_user

    Returns:
        Client whose queries run under the user's RLS policies

    Example:
        >>> supabase_client = get_supabase_client(auth_user.access_token)
        >>> supabase_client.table("cart_items").select("*, products(*)").execute()
    """
    client = _new_client()

    # auth.uid() in RLS policies resolves to the token's 'sub' claim
    client.auth.set_session(access_token, access_token)

    logger.debug("Created user-scoped Supabase client")
    return client


def get_anon_supabase_client() -> Client:
    """Create a client without a session, for public catalog reads."""
    client = _new_client()
    logger.debug("Created anonymous Supabase client")
    return client
