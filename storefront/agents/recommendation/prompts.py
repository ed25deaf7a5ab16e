"""
Recommendation Prompt Templates

Contains the system instruction and user prompt builder for the
recommendation service.

The model does not pick products. It picks an ordered sequence of category
preferences; the service then resolves each category to its top-rated
product in the catalog.

Output contract: a bare JSON array of category strings, e.g.
["electronics", "accessories", "smart home", "electronics", "accessories", "smart home"]
"""

import json
from typing import List, Sequence

from storefront.utils.constants import PRODUCT_CATEGORIES, RECOMMENDATION_COUNT

# =============================================================================
# SYSTEM PROMPT
# =============================================================================

RECOMMENDATION_SYSTEM_PROMPT = (
    "You are a product recommendation AI. "
    "Return only valid JSON arrays with no additional text."
)

# Placeholder rendered when a signal list is empty
EMPTY_SIGNAL_PLACEHOLDER = "None"


def format_signal(names: Sequence[str]) -> str:
    """Render a signal list as a comma-joined string, or "None" when empty."""
    return ", ".join(names) or EMPTY_SIGNAL_PLACEHOLDER


# =============================================================================
# USER PROMPT BUILDER
# =============================================================================

def build_recommendation_user_prompt(
    viewed_products: List[str],
    cart_products: List[str],
    purchased_products: List[str],
) -> str:
    """
    Build the user prompt from the three activity signals.

    Args:
        viewed_products: Names of recently viewed products, newest first
        cart_products: Names of products currently in the cart
        purchased_products: Names of recently purchased products, newest first

    Returns:
        str: Prompt asking for RECOMMENDATION_COUNT category preferences
    """
    categories = ", ".join(PRODUCT_CATEGORIES)
    example = json.dumps(
        [PRODUCT_CATEGORIES[i % len(PRODUCT_CATEGORIES)] for i in range(RECOMMENDATION_COUNT)]
    )

    return f"""Based on the following user activity, choose {RECOMMENDATION_COUNT} product category preferences that would be most relevant:

Recently Viewed: {format_signal(viewed_products)}
Cart Items: {format_signal(cart_products)}
Past Purchases: {format_signal(purchased_products)}

Available product categories: {categories}

Provide diverse recommendations across categories that complement their interests. Use only the available categories. Return ONLY a JSON array of exactly {RECOMMENDATION_COUNT} category strings in this format:
{example}"""
